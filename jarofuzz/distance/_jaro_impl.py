"""
jarofuzz.distance._jaro_impl — bit-parallel Jaro similarity.

Matching characters are flagged with bitmasks instead of the quadratic
window scan: the occurrence index of the reference ``P`` yields every
candidate position of ``T[j]`` at once, the sliding window becomes a mask,
and "lowest unflagged position in the window" is a single ``blsi``.

Two flaggers exist. The word path handles inputs that both fit in one
64-bit mask. The block path keeps one word per 64 reference positions and
tracks which words the window currently touches with a
:class:`SearchBoundMask`.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass

from .._common import (
    WORD_MASK,
    WORD_SIZE,
    bit_mask_lsb,
    blsi,
    blsr,
    ceil_div,
    countr_zero,
    popcount,
    remove_common_prefix,
)
from .._pattern_match import BlockPatternMatchVector, PatternMatchVector

# ---------------------------------------------------------------------------
# Flag sets and window state
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class FlaggedCharsWord:
    """Matched positions of ``P`` and ``T`` as single 64-bit masks."""

    p_flag: int = 0
    t_flag: int = 0


@dataclass(slots=True)
class FlaggedCharsMultiword:
    """Matched positions of ``P`` and ``T``, one 64-bit word per chunk."""

    p_flag: list[int]
    t_flag: list[int]


@dataclass(frozen=True, slots=True)
class SearchBoundMask:
    """
    Reference words covered by the window at the current text position.

    ``empty_words`` words lie entirely left of the window and ``words`` words
    are (at least partially) inside it. ``first_mask`` restricts the leftmost
    of those words, ``last_mask`` the rightmost one.
    """

    words: int
    empty_words: int
    last_mask: int
    first_mask: int

    @classmethod
    def initial(cls, bound: int, p_len: int) -> SearchBoundMask:
        start_range = min(bound + 1, p_len)
        return cls(
            words=1 + start_range // WORD_SIZE,
            empty_words=0,
            last_mask=(1 << (start_range % WORD_SIZE)) - 1,
            first_mask=WORD_MASK,
        )

    def advance(self, j: int, bound: int, p_len: int) -> SearchBoundMask:
        """Window state for text position ``j + 1``."""
        words = self.words
        empty_words = self.empty_words
        last_mask = self.last_mask
        first_mask = self.first_mask

        if j + bound + 1 < p_len:
            last_mask = ((last_mask << 1) | 1) & WORD_MASK
            if j + bound + 2 < p_len and last_mask == WORD_MASK:
                last_mask = 0
                words += 1

        if j >= bound:
            first_mask = (first_mask << 1) & WORD_MASK
            if first_mask == 0:
                first_mask = WORD_MASK
                words -= 1
                empty_words += 1

        return SearchBoundMask(words, empty_words, last_mask, first_mask)


# ---------------------------------------------------------------------------
# Bounds and filters
# ---------------------------------------------------------------------------


def jaro_bounds(p_len: int, t_len: int) -> int:
    if t_len > p_len:
        return t_len // 2 - 1
    return p_len // 2 - 1


def jaro_trim_bounds(
    P: Sequence[Hashable], T: Sequence[Hashable]
) -> tuple[Sequence[Hashable], Sequence[Hashable], int]:
    """
    Compute the bound and drop the suffix of the longer sequence that no
    window can reach. The caller keeps the untrimmed lengths for scoring.
    """
    p_len = len(P)
    t_len = len(T)
    if t_len > p_len:
        bound = t_len // 2 - 1
        if t_len > p_len + bound:
            T = T[: p_len + bound]
    else:
        bound = p_len // 2 - 1
        if p_len > t_len + bound:
            P = P[: t_len + bound]
    return P, T, bound


def jaro_length_filter(p_len: int, t_len: int, score_cutoff: float) -> bool:
    """Upper bound of the score if every symbol of the shorter input matched."""
    if not t_len or not p_len:
        return False

    min_len = float(min(p_len, t_len))
    sim = min_len / p_len + min_len / t_len + 1.0
    sim /= 3.0
    return sim >= score_cutoff


def jaro_common_char_filter(
    p_len: int, t_len: int, common_chars: int, score_cutoff: float
) -> bool:
    """Upper bound of the score for ``common_chars`` matches and no transpositions."""
    if not common_chars:
        return False

    sim = 0.0
    sim += common_chars / p_len
    sim += common_chars / t_len
    sim += 1.0
    sim /= 3.0
    return sim >= score_cutoff


def jaro_calculate_similarity(
    p_len: int, t_len: int, common_chars: int, transpositions: int
) -> float:
    transpositions //= 2
    sim = 0.0
    sim += common_chars / p_len
    sim += common_chars / t_len
    sim += (common_chars - transpositions) / common_chars
    return sim / 3.0


def count_common_chars(flagged: FlaggedCharsWord | FlaggedCharsMultiword) -> int:
    if isinstance(flagged, FlaggedCharsWord):
        return popcount(flagged.p_flag)

    # both sides hold the same number of bits; sum the shorter list
    flags = flagged.p_flag if len(flagged.p_flag) < len(flagged.t_flag) else flagged.t_flag
    return sum(popcount(flag) for flag in flags)


# ---------------------------------------------------------------------------
# Word path
# ---------------------------------------------------------------------------


def flag_similar_characters_word(
    pm: PatternMatchVector | BlockPatternMatchVector,
    P: Sequence[Hashable],
    T: Sequence[Hashable],
    bound: int,
) -> FlaggedCharsWord:
    assert len(P) <= WORD_SIZE
    assert len(T) <= WORD_SIZE
    assert bound > len(P) or len(P) - bound <= len(T)

    p_flag = 0
    t_flag = 0
    bound_mask = bit_mask_lsb(bound + 1)

    for j, ch in enumerate(T):
        pm_j = pm.get(0, ch) & bound_mask & ~p_flag

        p_flag |= blsi(pm_j)
        if pm_j:
            t_flag |= 1 << j

        # window grows on the right until it reaches full width, then slides
        if j < bound:
            bound_mask = (bound_mask << 1) | 1
        else:
            bound_mask <<= 1

    return FlaggedCharsWord(p_flag, t_flag)


def count_transpositions_word(
    pm: PatternMatchVector | BlockPatternMatchVector,
    T: Sequence[Hashable],
    flagged: FlaggedCharsWord,
) -> int:
    p_flag = flagged.p_flag
    t_flag = flagged.t_flag
    transpositions = 0
    while t_flag:
        pattern_flag_mask = blsi(p_flag)

        if not pm.get(0, T[countr_zero(t_flag)]) & pattern_flag_mask:
            transpositions += 1

        t_flag = blsr(t_flag)
        p_flag ^= pattern_flag_mask

    return transpositions


# ---------------------------------------------------------------------------
# Block path
# ---------------------------------------------------------------------------


def _flag_similar_characters_step(
    pm: BlockPatternMatchVector,
    t_j: Hashable,
    flagged: FlaggedCharsMultiword,
    j: int,
    bound_mask: SearchBoundMask,
) -> None:
    j_word, j_pos = divmod(j, WORD_SIZE)
    word = bound_mask.empty_words
    last_word = word + bound_mask.words
    p_flag = flagged.p_flag
    t_flag = flagged.t_flag

    if bound_mask.words == 1:
        pm_j = (
            pm.get(word, t_j)
            & bound_mask.last_mask
            & bound_mask.first_mask
            & ~p_flag[word]
        )
        p_flag[word] |= blsi(pm_j)
        if pm_j:
            t_flag[j_word] |= 1 << j_pos
        return

    if bound_mask.first_mask:
        pm_j = pm.get(word, t_j) & bound_mask.first_mask & ~p_flag[word]
        if pm_j:
            p_flag[word] |= blsi(pm_j)
            t_flag[j_word] |= 1 << j_pos
            return
        word += 1

    # interior words are fully inside the window; scan strictly ascending
    for word in range(word, last_word - 1):
        pm_j = pm.get(word, t_j) & ~p_flag[word]
        if pm_j:
            p_flag[word] |= blsi(pm_j)
            t_flag[j_word] |= 1 << j_pos
            return

    if bound_mask.last_mask:
        word = last_word - 1
        pm_j = pm.get(word, t_j) & bound_mask.last_mask & ~p_flag[word]
        p_flag[word] |= blsi(pm_j)
        if pm_j:
            t_flag[j_word] |= 1 << j_pos


def flag_similar_characters_block(
    pm: BlockPatternMatchVector,
    P: Sequence[Hashable],
    T: Sequence[Hashable],
    bound: int,
) -> FlaggedCharsMultiword:
    p_len = len(P)
    t_len = len(T)
    assert p_len > WORD_SIZE or t_len > WORD_SIZE
    assert bound > p_len or p_len - bound <= t_len
    assert bound >= 31

    flagged = FlaggedCharsMultiword(
        p_flag=[0] * ceil_div(p_len, WORD_SIZE),
        t_flag=[0] * ceil_div(t_len, WORD_SIZE),
    )

    bound_mask = SearchBoundMask.initial(bound, p_len)
    for j, ch in enumerate(T):
        _flag_similar_characters_step(pm, ch, flagged, j, bound_mask)
        bound_mask = bound_mask.advance(j, bound, p_len)

    return flagged


def count_transpositions_block(
    pm: BlockPatternMatchVector,
    T: Sequence[Hashable],
    flagged: FlaggedCharsMultiword,
    flagged_chars: int,
) -> int:
    text_word = 0
    pattern_word = 0
    t_flag = flagged.t_flag[text_word]
    p_flag = flagged.p_flag[pattern_word]
    t_offset = 0

    transpositions = 0
    while flagged_chars:
        while not t_flag:
            text_word += 1
            t_offset += WORD_SIZE
            t_flag = flagged.t_flag[text_word]

        while t_flag:
            while not p_flag:
                pattern_word += 1
                p_flag = flagged.p_flag[pattern_word]

            pattern_flag_mask = blsi(p_flag)

            if not pm.get(pattern_word, T[t_offset + countr_zero(t_flag)]) & pattern_flag_mask:
                transpositions += 1

            t_flag = blsr(t_flag)
            p_flag ^= pattern_flag_mask
            flagged_chars -= 1

    return transpositions


# ---------------------------------------------------------------------------
# Drivers
# ---------------------------------------------------------------------------


def _flag_and_score(
    pm: PatternMatchVector | BlockPatternMatchVector,
    P: Sequence[Hashable],
    T: Sequence[Hashable],
    bound: int,
    p_len: int,
    t_len: int,
    common_chars: int,
    score_cutoff: float,
) -> float:
    transpositions = 0

    if not P or not T:
        # the stripped prefix already holds every common character
        pass
    elif len(P) <= WORD_SIZE and len(T) <= WORD_SIZE:
        flagged = flag_similar_characters_word(pm, P, T, bound)
        common_chars += count_common_chars(flagged)

        if not jaro_common_char_filter(p_len, t_len, common_chars, score_cutoff):
            return 0.0

        transpositions = count_transpositions_word(pm, T, flagged)
    else:
        assert isinstance(pm, BlockPatternMatchVector)
        flagged_block = flag_similar_characters_block(pm, P, T, bound)
        flagged_chars = count_common_chars(flagged_block)
        common_chars += flagged_chars

        if not jaro_common_char_filter(p_len, t_len, common_chars, score_cutoff):
            return 0.0

        transpositions = count_transpositions_block(pm, T, flagged_block, flagged_chars)

    sim = jaro_calculate_similarity(p_len, t_len, common_chars, transpositions)
    return sim if sim >= score_cutoff else 0.0


def jaro_similarity(
    P: Sequence[Hashable], T: Sequence[Hashable], score_cutoff: float = 0.0
) -> float:
    """Jaro similarity of ``P`` and ``T``, or ``0.0`` when below ``score_cutoff``."""
    p_len = len(P)
    t_len = len(T)

    if score_cutoff > 1.0:
        return 0.0

    if not p_len and not t_len:
        return 1.0

    if not jaro_length_filter(p_len, t_len, score_cutoff):
        return 0.0

    if p_len == 1 and t_len == 1:
        return float(P[0] == T[0])

    P, T, bound = jaro_trim_bounds(P, T)

    # a common prefix never contains transpositions
    P, T, common_chars = remove_common_prefix(P, T)

    pm: PatternMatchVector | BlockPatternMatchVector
    if len(P) <= WORD_SIZE and len(T) <= WORD_SIZE:
        pm = PatternMatchVector(P)
    else:
        pm = BlockPatternMatchVector(P)

    return _flag_and_score(pm, P, T, bound, p_len, t_len, common_chars, score_cutoff)


def jaro_similarity_cached(
    pm: BlockPatternMatchVector,
    P: Sequence[Hashable],
    T: Sequence[Hashable],
    score_cutoff: float = 0.0,
) -> float:
    """
    Same as :func:`jaro_similarity` with a precomputed index for ``P``.

    The prefix is not stripped here since ``pm`` is addressed by positions
    of the untrimmed ``P``.
    """
    p_len = len(P)
    t_len = len(T)

    if score_cutoff > 1.0:
        return 0.0

    if not p_len and not t_len:
        return 1.0

    if not jaro_length_filter(p_len, t_len, score_cutoff):
        return 0.0

    if p_len == 1 and t_len == 1:
        return float(P[0] == T[0])

    P, T, bound = jaro_trim_bounds(P, T)
    return _flag_and_score(pm, P, T, bound, p_len, t_len, 0, score_cutoff)


__all__ = [
    "FlaggedCharsWord",
    "FlaggedCharsMultiword",
    "SearchBoundMask",
    "jaro_bounds",
    "jaro_trim_bounds",
    "jaro_length_filter",
    "jaro_common_char_filter",
    "jaro_calculate_similarity",
    "count_common_chars",
    "flag_similar_characters_word",
    "flag_similar_characters_block",
    "count_transpositions_word",
    "count_transpositions_block",
    "jaro_similarity",
    "jaro_similarity_cached",
]
