"""
Note Quiz 后端开发服务器启动脚本。

定位：
- 未执行 `pip install -e .` 时也能直接运行：启动时把 `backend/src` 加到 `sys.path`。
- 约定后端端口为 8080。
- --audio-dir / --seed 通过环境变量传给应用（--reload 的子进程同样能读到）。

用法：
  python backend/run_server.py

可选参数：
  python backend/run_server.py --reload
  python backend/run_server.py --host 0.0.0.0 --port 8080 --audio-dir ./mp3 --seed 42
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import uvicorn


def main() -> None:
    backend_dir = Path(__file__).resolve().parent
    src_dir = backend_dir / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到后端源码目录：{src_dir}")

    sys.path.insert(0, str(src_dir))

    from notequiz_backend.settings import ENV_AUDIO_DIR, ENV_SEED

    parser = argparse.ArgumentParser(add_help=True)
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true", default=False)
    parser.add_argument("--log-level", default="info", choices=["critical", "error", "warning", "info", "debug"])
    parser.add_argument("--audio-dir", type=Path, default=None)
    parser.add_argument("--seed", type=int, default=None)
    args, unknown = parser.parse_known_args(sys.argv[1:])
    if unknown:
        raise SystemExit(f"不支持的参数：{unknown!r}")

    if args.audio_dir is not None:
        audio_dir = args.audio_dir.expanduser().resolve()
        if not audio_dir.is_dir():
            raise SystemExit(f"音频目录不存在：{audio_dir}")
        os.environ[ENV_AUDIO_DIR] = str(audio_dir)
    if args.seed is not None:
        os.environ[ENV_SEED] = str(args.seed)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    # 只 watch 后端源码，避免数据/音频目录的变动触发重载
    reload_dirs = [str(src_dir)] if args.reload else None

    uvicorn.run(
        "notequiz_backend.api.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        reload_dirs=reload_dirs,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
