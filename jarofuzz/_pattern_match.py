"""
jarofuzz._pattern_match — occurrence indexes over a reference sequence.

Each index answers ``get(word, symbol)``: the set of positions of ``symbol``
inside 64-position chunk ``word`` of the reference, as an integer bitmask.
Indexes are built once and never mutated afterwards, so one instance can be
shared by any number of comparisons against the same reference.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence

import numpy as np

from ._common import WORD_SIZE, ceil_div


class PatternMatchVector:
    """Word-form index for a reference of at most 64 symbols."""

    __slots__ = ("_map",)

    def __init__(self, s: Sequence[Hashable]) -> None:
        if len(s) > WORD_SIZE:
            raise ValueError(
                f"PatternMatchVector holds at most {WORD_SIZE} symbols, got {len(s)}"
            )
        masks: dict[Hashable, int] = {}
        for pos, ch in enumerate(s):
            masks[ch] = masks.get(ch, 0) | (1 << pos)
        self._map = masks

    @property
    def size(self) -> int:
        return 1

    def get(self, word: int, ch: Hashable) -> int:
        return self._map.get(ch, 0)


class BlockPatternMatchVector:
    """Block-form index: one 64-bit word per (chunk, symbol) pair."""

    __slots__ = ("_map", "_block_count")

    def __init__(self, s: Sequence[Hashable]) -> None:
        block_count = ceil_div(len(s), WORD_SIZE)
        masks: dict[Hashable, list[int]] = {}
        for pos, ch in enumerate(s):
            words = masks.get(ch)
            if words is None:
                words = masks[ch] = [0] * block_count
            words[pos // WORD_SIZE] |= 1 << (pos % WORD_SIZE)
        self._map = masks
        self._block_count = block_count

    @property
    def size(self) -> int:
        return self._block_count

    def get(self, word: int, ch: Hashable) -> int:
        words = self._map.get(ch)
        if words is None:
            return 0
        return words[word]


class MultiPatternMatchVector:
    """
    Lane-form index over many short patterns.

    Pattern ``i`` occupies word ``i`` of every symbol's ``uint64`` vector, so
    a contiguous slice of that vector feeds one data-parallel group of
    lanes directly.
    """

    __slots__ = ("_map", "_lengths", "_zeros")

    def __init__(self, patterns: Sequence[Sequence[Hashable]]) -> None:
        count = len(patterns)
        masks: dict[Hashable, np.ndarray] = {}
        lengths = np.zeros(count, dtype=np.int64)
        for index, pattern in enumerate(patterns):
            if len(pattern) > WORD_SIZE:
                raise ValueError(
                    f"pattern {index} has {len(pattern)} symbols; "
                    f"lane scoring supports at most {WORD_SIZE}"
                )
            lengths[index] = len(pattern)
            for pos, ch in enumerate(pattern):
                lane = masks.get(ch)
                if lane is None:
                    lane = masks[ch] = np.zeros(count, dtype=np.uint64)
                lane[index] |= np.uint64(1 << pos)
        self._map = masks
        self._lengths = lengths
        self._zeros = np.zeros(count, dtype=np.uint64)

    def __len__(self) -> int:
        return len(self._lengths)

    @property
    def lengths(self) -> np.ndarray:
        return self._lengths

    def get(self, index: int, ch: Hashable) -> int:
        lane = self._map.get(ch)
        if lane is None:
            return 0
        return int(lane[index])

    def get_lanes(self, start: int, stop: int, ch: Hashable) -> np.ndarray:
        lane = self._map.get(ch)
        if lane is None:
            return self._zeros[start:stop]
        return lane[start:stop]
