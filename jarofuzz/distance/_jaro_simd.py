"""
jarofuzz.distance._jaro_simd — Jaro similarity of one text against many
short patterns, a group of patterns at a time.

Every pattern of a group owns one ``uint64`` lane. The text is scanned once
per group and all lanes advance in lockstep through numpy bit operations;
this is the word-path algorithm of :mod:`._jaro_impl` applied to every
lane at the same time. Only the transposition count, which needs per-lane
replay of the matches, runs lane by lane afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence

import numpy as np

from .._common import WORD_SIZE, bit_mask_lsb, blsi, blsr, ceil_div, countr_zero
from .._pattern_match import MultiPatternMatchVector
from ._jaro_impl import jaro_calculate_similarity, jaro_common_char_filter

logger = logging.getLogger(__name__)

_ONE = np.uint64(1)


def _count_lane_transpositions(
    block: MultiPatternMatchVector,
    index: int,
    s2: Sequence[Hashable],
    p_flag: int,
    t_flags: np.ndarray,
) -> int:
    transpositions = 0
    for text_word, t_word in enumerate(t_flags):
        t_flag = int(t_word)
        t_offset = text_word * WORD_SIZE
        while t_flag:
            pattern_flag_mask = blsi(p_flag)

            if not block.get(index, s2[t_offset + countr_zero(t_flag)]) & pattern_flag_mask:
                transpositions += 1

            t_flag = blsr(t_flag)
            p_flag ^= pattern_flag_mask

    return transpositions


def _score_group(
    scores: np.ndarray,
    block: MultiPatternMatchVector,
    lengths: np.ndarray,
    start: int,
    s2: Sequence[Hashable],
    score_cutoff: float,
) -> None:
    stop = start + len(lengths)
    t_len = len(s2)

    # a bound of -1 only occurs for single symbol inputs and behaves like 0
    bounds = np.where(t_len > lengths, t_len // 2 - 1, lengths // 2 - 1)
    bounds = np.maximum(bounds, 0)

    # no lane can match past its own length + bound
    last_relevant_char = int((lengths + bounds).max())
    s2_cur = s2[:last_relevant_char] if t_len > last_relevant_char else s2

    bound_mask = np.array([bit_mask_lsb(int(b) + 1) for b in bounds], dtype=np.uint64)
    p_flag = np.zeros(len(lengths), dtype=np.uint64)
    t_flag = np.zeros((ceil_div(len(s2_cur), WORD_SIZE), len(lengths)), dtype=np.uint64)

    for j, ch in enumerate(s2_cur):
        x = block.get_lanes(start, stop, ch)
        pm_j = x & bound_mask & ~p_flag

        p_flag |= pm_j & (~pm_j + _ONE)
        t_flag[j // WORD_SIZE] |= (pm_j != 0).astype(np.uint64) << np.uint64(j % WORD_SIZE)

        bound_mask = (bound_mask << _ONE) | (j < bounds).astype(np.uint64)

    counts = np.bitwise_count(p_flag)
    for lane in range(len(lengths)):
        index = start + lane
        p_len = int(lengths[lane])
        common_chars = int(counts[lane])
        if not jaro_common_char_filter(p_len, t_len, common_chars, score_cutoff):
            scores[index] = 0.0
            continue

        transpositions = _count_lane_transpositions(
            block, index, s2, int(p_flag[lane]), t_flag[:, lane]
        )
        sim = jaro_calculate_similarity(p_len, t_len, common_chars, transpositions)
        scores[index] = sim if sim >= score_cutoff else 0.0


def jaro_similarity_lanes(
    scores: np.ndarray,
    block: MultiPatternMatchVector,
    s1_lengths: Sequence[int] | np.ndarray,
    s2: Sequence[Hashable],
    score_cutoff: float = 0.0,
    lanes: int = 8,
) -> None:
    """
    Write the Jaro similarity of ``s2`` against every pattern of ``block``
    into ``scores``.

    Parameters
    ----------
    scores : numpy.ndarray
        Output buffer with room for at least ``len(s1_lengths)`` floats.
    block : MultiPatternMatchVector
        Occurrence index of the patterns, pattern ``i`` in word ``i``.
    s1_lengths : Sequence[int]
        Length of every pattern, each at most 64.
    s2 : Sequence
        The text every pattern is compared against.
    score_cutoff : float
        Scores below the cutoff are written as ``0.0``.
    lanes : int
        Patterns processed per pass over ``s2``.
    """
    lengths = np.asarray(s1_lengths, dtype=np.int64)
    count = len(lengths)
    if len(scores) < count:
        raise ValueError(
            f"scores holds {len(scores)} entries but {count} patterns were given"
        )
    if count and int(lengths.max()) > WORD_SIZE:
        raise ValueError(f"lane scoring supports patterns of at most {WORD_SIZE} symbols")
    if lanes < 1:
        raise ValueError(f"lanes must be a positive integer, got {lanes!r}")

    if score_cutoff > 1.0:
        scores[:count] = 0.0
        return

    if not len(s2):
        scores[:count] = np.where(lengths == 0, 1.0, 0.0)
        return

    logger.debug(
        "scoring %d patterns against a text of %d symbols in groups of %d lanes",
        count,
        len(s2),
        lanes,
    )
    for start in range(0, count, lanes):
        _score_group(scores, block, lengths[start : start + lanes], start, s2, score_cutoff)


__all__ = ["jaro_similarity_lanes"]
