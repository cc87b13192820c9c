"""jarofuzz.distance.Jaro"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import numpy as np

from .._common import WORD_SIZE, conv_sequence, preprocess
from .._pattern_match import BlockPatternMatchVector, MultiPatternMatchVector
from ..config import BatchConfig
from ._jaro_impl import jaro_similarity, jaro_similarity_cached
from ._jaro_simd import jaro_similarity_lanes


def _distance_cutoff(score_cutoff: float | None) -> float:
    return 0.0 if score_cutoff is None else max(0.0, 1.0 - score_cutoff)


def _to_distance(sim: float, score_cutoff: float | None) -> float:
    dist = 1.0 - sim
    return dist if score_cutoff is None or dist <= score_cutoff else 1.0


def similarity(
    s1: Any,
    s2: Any,
    *,
    processor: Callable[..., Any] | None = None,
    score_cutoff: float | None = None,
) -> float:
    """
    Calculates the Jaro similarity between two sequences.

    Returns a score in ``[0, 1]``; ``0.0`` when the score is below
    ``score_cutoff`` or either input is ``None``.
    """
    if s1 is None or s2 is None:
        return 0.0

    s1, s2 = preprocess(s1, s2, processor)
    return jaro_similarity(s1, s2, score_cutoff or 0.0)


def normalized_similarity(
    s1: Any,
    s2: Any,
    *,
    processor: Callable[..., Any] | None = None,
    score_cutoff: float | None = None,
) -> float:
    """
    Calculates the normalized Jaro similarity. The Jaro similarity is
    already normalized, so this equals :func:`similarity`.
    """
    return similarity(s1, s2, processor=processor, score_cutoff=score_cutoff)


def distance(
    s1: Any,
    s2: Any,
    *,
    processor: Callable[..., Any] | None = None,
    score_cutoff: float | None = None,
) -> float:
    """
    Calculates the Jaro distance ``1 - similarity``.

    Returns ``1.0`` when the distance exceeds ``score_cutoff`` or either
    input is ``None``.
    """
    if s1 is None or s2 is None:
        return 1.0

    s1, s2 = preprocess(s1, s2, processor)
    sim = jaro_similarity(s1, s2, _distance_cutoff(score_cutoff))
    return _to_distance(sim, score_cutoff)


def normalized_distance(
    s1: Any,
    s2: Any,
    *,
    processor: Callable[..., Any] | None = None,
    score_cutoff: float | None = None,
) -> float:
    """
    Calculates the normalized Jaro distance, equal to :func:`distance`.
    """
    return distance(s1, s2, processor=processor, score_cutoff=score_cutoff)


class CachedJaro:
    """
    Jaro scorer for one fixed sequence compared against many others.

    The occurrence index of ``s1`` is built once in the constructor and
    reused by every call.

    Parameters
    ----------
    s1 : Sequence
        The sequence every call compares against.
    processor : Callable, optional
        Applied to ``s1`` once and to every ``s2`` before scoring.

    Examples
    --------
    >>> scorer = CachedJaro("MARTHA")
    >>> round(scorer.similarity("MARHTA"), 4)
    0.9444
    """

    def __init__(
        self,
        s1: Any,
        *,
        processor: Callable[..., Any] | None = None,
    ) -> None:
        if processor is not None:
            s1 = processor(s1)
        self.s1 = conv_sequence(s1)
        self.processor = processor
        self._pm = BlockPatternMatchVector(self.s1)

    def _prepare(self, s2: Any) -> Any:
        if self.processor is not None:
            s2 = self.processor(s2)
        return conv_sequence(s2)

    def similarity(self, s2: Any, *, score_cutoff: float | None = None) -> float:
        if s2 is None:
            return 0.0
        return jaro_similarity_cached(self._pm, self.s1, self._prepare(s2), score_cutoff or 0.0)

    def normalized_similarity(self, s2: Any, *, score_cutoff: float | None = None) -> float:
        return self.similarity(s2, score_cutoff=score_cutoff)

    def distance(self, s2: Any, *, score_cutoff: float | None = None) -> float:
        if s2 is None:
            return 1.0
        sim = jaro_similarity_cached(
            self._pm, self.s1, self._prepare(s2), _distance_cutoff(score_cutoff)
        )
        return _to_distance(sim, score_cutoff)

    def normalized_distance(self, s2: Any, *, score_cutoff: float | None = None) -> float:
        return self.distance(s2, score_cutoff=score_cutoff)


class MultiJaro:
    """
    Jaro scorer for many patterns compared against one text at a time.

    Patterns of up to 64 symbols are packed into a lane index and scored in
    data-parallel groups of ``config.lanes``. Longer patterns are scored one
    by one through :class:`CachedJaro`.

    Parameters
    ----------
    patterns : Iterable
        Sequences to score against.
    processor : Callable, optional
        Applied to every pattern once and to every text before scoring.
    config : BatchConfig, optional
        Lane width; defaults to :meth:`BatchConfig.from_env`.
    """

    def __init__(
        self,
        patterns: Iterable[Any],
        *,
        processor: Callable[..., Any] | None = None,
        config: BatchConfig | None = None,
    ) -> None:
        self.processor = processor
        self.config = config if config is not None else BatchConfig.from_env()

        prepared = [
            conv_sequence(processor(p) if processor is not None else p) for p in patterns
        ]
        self._count = len(prepared)

        short = [i for i, p in enumerate(prepared) if len(p) <= WORD_SIZE]
        self._short_index = np.array(short, dtype=np.int64)
        self._block = MultiPatternMatchVector([prepared[i] for i in short])
        self._long = [
            (i, CachedJaro(p)) for i, p in enumerate(prepared) if len(p) > WORD_SIZE
        ]

    def __len__(self) -> int:
        return self._count

    def similarity(self, s2: Any, *, score_cutoff: float | None = None) -> np.ndarray:
        """Scores of ``s2`` against every pattern, in pattern order."""
        scores = np.zeros(self._count, dtype=np.float64)
        if s2 is None:
            return scores

        if self.processor is not None:
            s2 = self.processor(s2)
        s2 = conv_sequence(s2)
        cutoff = score_cutoff or 0.0

        short_scores = np.zeros(len(self._block), dtype=np.float64)
        jaro_similarity_lanes(
            short_scores,
            self._block,
            self._block.lengths,
            s2,
            cutoff,
            lanes=self.config.lanes,
        )
        scores[self._short_index] = short_scores

        for index, scorer in self._long:
            scores[index] = scorer.similarity(s2, score_cutoff=cutoff)
        return scores

    def normalized_similarity(
        self, s2: Any, *, score_cutoff: float | None = None
    ) -> np.ndarray:
        return self.similarity(s2, score_cutoff=score_cutoff)


__all__ = [
    "distance",
    "similarity",
    "normalized_distance",
    "normalized_similarity",
    "CachedJaro",
    "MultiJaro",
]
