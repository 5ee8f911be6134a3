"""
后端运行配置。

来源优先级：启动参数（run_server.py）> 环境变量 > 默认值。

环境变量：
- NOTEQUIZ_AUDIO_DIR：mp3 目录（默认 backend/audio，仅源码布局下存在；否则为 None，不挂载）
- NOTEQUIZ_CORS_ORIGINS：逗号分隔的允许来源（默认 `*`）
- NOTEQUIZ_SEED：随机种子（整数；缺省则每次启动不同）
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .utils.paths import default_audio_dir


ENV_AUDIO_DIR = "NOTEQUIZ_AUDIO_DIR"
ENV_CORS_ORIGINS = "NOTEQUIZ_CORS_ORIGINS"
ENV_SEED = "NOTEQUIZ_SEED"


@dataclass(frozen=True)
class Settings:
    audio_dir: Path | None
    audio_url_prefix: str = "/audio"
    cors_origins: tuple[str, ...] = ("*",)
    seed: int | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        audio_dir = Path(env[ENV_AUDIO_DIR]).expanduser() if env.get(ENV_AUDIO_DIR) else default_audio_dir()

        origins_raw = (env.get(ENV_CORS_ORIGINS) or "").strip()
        origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip()) if origins_raw else ("*",)

        seed: int | None = None
        seed_raw = (env.get(ENV_SEED) or "").strip()
        if seed_raw:
            try:
                seed = int(seed_raw)
            except ValueError as e:
                raise ValueError(f"{ENV_SEED} 必须是整数：{seed_raw!r}") from e

        return cls(audio_dir=audio_dir, cors_origins=origins, seed=seed)
