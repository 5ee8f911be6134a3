"""
音符题库与抽题（NoteCatalog）。

定位：
- 持有只读的 NoteTable，提供随机抽题、相邻音名查询、答案校验、听音六选一题组生成。
- 随机源通过构造参数注入（测试可传入确定性序列），不依赖进程级全局状态。

约束：
- index 越界一律抛 NoteIndexOutOfRange，不做截断或回绕。
- 表两端的相邻音名使用固定哨兵值（"Db6" / "B1"），按字面返回。
"""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from typing import Any, MutableSequence, Protocol, Sequence

from .note_table import NoteTable, load_default_note_table


# 表两端之外的相邻音名（C6 之上 / C2 之下）
NEXT_SENTINEL = "Db6"
PREVIOUS_SENTINEL = "B1"

GUESS_COUNT = 6
AUDIO_URL_PREFIX = "/audio"


class NoteIndexOutOfRange(LookupError):
    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"note index 越界：{index}（有效范围 0..{size - 1}）")
        self.index = index
        self.size = size


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...

    def sample(self, population: Sequence[Any], k: int) -> list[Any]: ...

    def shuffle(self, x: MutableSequence[Any]) -> None: ...


class LockedRandom:
    """对 random.Random 加锁，供多个请求线程共享。"""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._lock = threading.Lock()

    def randrange(self, stop: int) -> int:
        with self._lock:
            return self._rng.randrange(stop)

    def sample(self, population: Sequence[Any], k: int) -> list[Any]:
        with self._lock:
            return self._rng.sample(population, k)

    def shuffle(self, x: MutableSequence[Any]) -> None:
        with self._lock:
            self._rng.shuffle(x)


@dataclass(frozen=True)
class QuizNote:
    index: int
    name: str
    audio_path: str
    position: int

    def to_dict(self) -> dict[str, Any]:
        return {"idx": self.index, "note": self.name, "audioPath": self.audio_path, "position": self.position}


@dataclass(frozen=True)
class TextPositionResult:
    """文字题（前后相邻音名 + 谱表位置）的判定结果；correct_* 仅在答错时填写。"""

    next_correct: bool
    previous_correct: bool
    position_correct: bool
    correct_next: str | None = None
    correct_previous: str | None = None
    correct_position: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "nextCorrect": self.next_correct,
            "previousCorrect": self.previous_correct,
            "positionCorrect": self.position_correct,
        }
        if self.correct_next is not None:
            out["correctNext"] = self.correct_next
        if self.correct_previous is not None:
            out["correctPrevious"] = self.correct_previous
        if self.correct_position is not None:
            out["correctPosition"] = self.correct_position
        return out


def audio_path_for(name: str, *, prefix: str = AUDIO_URL_PREFIX) -> str:
    return f"{prefix.rstrip('/')}/{name}.mp3"


def check_answer(expected: str, provided: str) -> bool:
    return expected.upper() == provided.upper()


class NoteCatalog:
    def __init__(
        self,
        rng: RandomSource | None = None,
        *,
        table: NoteTable | None = None,
        audio_url_prefix: str = AUDIO_URL_PREFIX,
    ) -> None:
        self._rng = rng if rng is not None else LockedRandom()
        self._table = table if table is not None else load_default_note_table()
        self._audio_url_prefix = audio_url_prefix
        if len(self._table) < GUESS_COUNT:
            raise ValueError(f"NoteTable 至少需要 {GUESS_COUNT} 个音符，实际 {len(self._table)}")

    @property
    def size(self) -> int:
        return len(self._table)

    def _require_index(self, index: int) -> None:
        if not self._table.contains_index(index):
            raise NoteIndexOutOfRange(index, len(self._table))

    def name_at(self, index: int) -> str:
        self._require_index(index)
        return self._table[index].name

    def position_at(self, index: int) -> int:
        self._require_index(index)
        return self._table[index].position

    def note_at(self, index: int) -> QuizNote:
        self._require_index(index)
        e = self._table[index]
        return QuizNote(
            index=e.index,
            name=e.name,
            audio_path=audio_path_for(e.name, prefix=self._audio_url_prefix),
            position=e.position,
        )

    def notes(self) -> tuple[QuizNote, ...]:
        return tuple(self.note_at(i) for i in range(len(self._table)))

    def random_note(self) -> QuizNote:
        return self.note_at(self._rng.randrange(len(self._table)))

    def next_name(self, index: int) -> str:
        self._require_index(index)
        if index == len(self._table) - 1:
            return NEXT_SENTINEL
        return self._table[index + 1].name

    def previous_name(self, index: int) -> str:
        self._require_index(index)
        if index == 0:
            return PREVIOUS_SENTINEL
        return self._table[index - 1].name

    def check_position(self, index: int, provided: int) -> bool:
        return self.position_at(index) == provided

    def check_text_position(
        self,
        index: int,
        *,
        provided_next: str,
        provided_previous: str,
        provided_position: int,
    ) -> TextPositionResult:
        expected_next = self.next_name(index)
        expected_previous = self.previous_name(index)
        expected_position = self.position_at(index)

        next_ok = check_answer(expected_next, provided_next)
        previous_ok = check_answer(expected_previous, provided_previous)
        position_ok = expected_position == provided_position
        return TextPositionResult(
            next_correct=next_ok,
            previous_correct=previous_ok,
            position_correct=position_ok,
            correct_next=None if next_ok else expected_next,
            correct_previous=None if previous_ok else expected_previous,
            correct_position=None if position_ok else expected_position,
        )

    def distractor_set(self, index: int) -> tuple[tuple[QuizNote, ...], int]:
        """生成听音六选一题组：目标音 + 5 个不重复的干扰音，打乱后返回 (题组, 正确槽位)。"""

        self._require_index(index)
        others = [i for i in range(len(self._table)) if i != index]
        picked = [index] + list(self._rng.sample(others, GUESS_COUNT - 1))
        self._rng.shuffle(picked)

        correct_slot = picked.index(index)
        return tuple(self.note_at(i) for i in picked), correct_slot

    @staticmethod
    def check_guess(correct_slot: int, provided_slot: int) -> bool:
        return correct_slot == provided_slot
