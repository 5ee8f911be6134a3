"""
Note Quiz 后端：听音识谱练习的题库与 HTTP API。

定位：
- 音符表（C2..C6 共 49 个半音，含谱表位置）是唯一的领域数据，随包分发。
- 前端负责播放 mp3、渲染谱表与交互；后端只出题、判题。
"""
