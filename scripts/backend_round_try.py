"""
完整一轮练习（不启动后端服务）的开发期尝试脚本。

目标：
- 抽一个随机音符，打印题面（音名、音频路径、谱表位置）
- 用正确答案跑一次文字题判定（应全对）
- 生成听音六选一题组并按正确槽位作答（应判对）

运行：
  python scripts/backend_round_try.py [--seed 42]
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys


def _ensure_backend_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "backend" / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 backend/src：{src_dir}")
    sys.path.insert(0, str(src_dir))


def main() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    _ensure_backend_src_on_path(repo_root)

    from notequiz_backend.domain.catalog import LockedRandom, NoteCatalog

    parser = argparse.ArgumentParser()
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    catalog = NoteCatalog(LockedRandom(args.seed))
    note = catalog.random_note()
    print(json.dumps(note.to_dict(), ensure_ascii=False))

    result = catalog.check_text_position(
        note.index,
        provided_next=catalog.next_name(note.index).lower(),
        provided_previous=catalog.previous_name(note.index),
        provided_position=note.position,
    )
    assert result.next_correct and result.previous_correct and result.position_correct, result
    print(json.dumps(result.to_dict(), ensure_ascii=False))

    guess_notes, correct_pos = catalog.distractor_set(note.index)
    assert guess_notes[correct_pos].name == note.name
    assert catalog.check_guess(correct_pos, correct_pos)
    print(f"guess: {[n.name for n in guess_notes]} correct_pos={correct_pos}")

    print(f"[OK] round for {note.name}")


if __name__ == "__main__":
    main()
