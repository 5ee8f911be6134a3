"""
音符表（NoteTable）：index → (音名, 谱表位置)。

定位：
- 题库的唯一真源：49 个半音（C2..C6），顺序即 index。
- 以单一记录序列表达（name+position 同一行），避免两张并行数组错位。

约束：
- index 为 0..N-1 的双射；position 单调不减，且覆盖 1..29 的每个值。
- 加载时严格校验，违反即失败，不做静默修正。
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from ..utils.paths import note_table_path


MIN_POSITION = 1
MAX_POSITION = 29


@dataclass(frozen=True)
class NoteEntry:
    index: int
    name: str
    position: int


@dataclass(frozen=True)
class NoteTable:
    version: str
    entries: tuple[NoteEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> NoteEntry:
        return self.entries[index]

    def contains_index(self, index: int) -> bool:
        return 0 <= index < len(self.entries)


def _validate_entries(entries: list[NoteEntry]) -> None:
    if not entries:
        raise ValueError("NoteTable: notes 不能为空")

    seen: set[str] = set()
    prev_position = MIN_POSITION
    for e in entries:
        if e.name in seen:
            raise ValueError(f"NoteTable: 音名重复：{e.name!r}")
        seen.add(e.name)
        if not (MIN_POSITION <= e.position <= MAX_POSITION):
            raise ValueError(f"NoteTable: notes[{e.index}].position 超出 {MIN_POSITION}..{MAX_POSITION}：{e.position}")
        if e.position < prev_position:
            raise ValueError(f"NoteTable: position 必须单调不减（notes[{e.index}]={e.position} < {prev_position}）")
        prev_position = e.position

    covered = {e.position for e in entries}
    missing = sorted(set(range(MIN_POSITION, MAX_POSITION + 1)) - covered)
    if missing:
        raise ValueError(f"NoteTable: position 未覆盖：{missing}")


def parse_note_table(raw: Any) -> NoteTable:
    if not isinstance(raw, dict):
        raise ValueError("NoteTable: 顶层必须是 dict")
    notes = raw.get("notes")
    if not isinstance(notes, list):
        raise ValueError("NoteTable: 缺少 notes list")

    entries: list[NoteEntry] = []
    for i, row in enumerate(notes):
        if not isinstance(row, dict):
            raise ValueError(f"NoteTable: notes[{i}] 必须是 dict")
        name = row.get("name")
        position = row.get("position")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"NoteTable: notes[{i}].name 必须是非空字符串")
        # bool 是 int 的子类，需要单独排除
        if not isinstance(position, int) or isinstance(position, bool):
            raise ValueError(f"NoteTable: notes[{i}].position 必须是 int：{position!r}")
        entries.append(NoteEntry(index=i, name=name.strip(), position=position))

    _validate_entries(entries)
    return NoteTable(version=str(raw.get("version") or "unknown"), entries=tuple(entries))


def load_note_table(path: Path) -> NoteTable:
    if not path.exists():
        raise FileNotFoundError(f"缺少 NoteTable 文件：{path}")
    return parse_note_table(yaml.safe_load(path.read_text(encoding="utf-8")))


@lru_cache(maxsize=1)
def load_default_note_table() -> NoteTable:
    return load_note_table(note_table_path())
