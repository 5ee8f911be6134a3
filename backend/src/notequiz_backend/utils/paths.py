"""
路径定位工具。

定位：
- 音符表等规范数据随包分发（`notequiz_backend/data/`），运行期只从包内读取。
- mp3 音频默认放在 `backend/audio`（仓库内开发布局）；部署时可通过配置覆盖。
"""

from __future__ import annotations

from pathlib import Path


def package_dir() -> Path:
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    return package_dir() / "data"


def note_table_path() -> Path:
    return data_dir() / "note_table.yaml"


def backend_dir() -> Path | None:
    """源码布局（backend/src/notequiz_backend）下返回 backend 目录；已安装到 site-packages 时返回 None。"""

    src_dir = package_dir().parent
    if src_dir.name != "src" or not (src_dir.parent / "run_server.py").exists():
        return None
    return src_dir.parent


def default_audio_dir() -> Path | None:
    backend = backend_dir()
    return backend / "audio" if backend is not None else None
