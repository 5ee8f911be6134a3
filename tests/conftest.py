from __future__ import annotations

from typing import Any, MutableSequence, Sequence

import pytest

from notequiz_backend.domain.catalog import NoteCatalog


class ScriptedRandom:
    """确定性随机源：randrange 依次返回预设值，sample 取前 k 个，shuffle 反转。"""

    def __init__(self, draws: Sequence[int] = (0,)) -> None:
        self._draws = list(draws)
        self._i = 0

    def randrange(self, stop: int) -> int:
        v = self._draws[self._i % len(self._draws)]
        self._i += 1
        assert 0 <= v < stop
        return v

    def sample(self, population: Sequence[Any], k: int) -> list[Any]:
        return list(population[:k])

    def shuffle(self, x: MutableSequence[Any]) -> None:
        x.reverse()


@pytest.fixture
def catalog() -> NoteCatalog:
    return NoteCatalog()


@pytest.fixture
def scripted_random() -> type[ScriptedRandom]:
    return ScriptedRandom
