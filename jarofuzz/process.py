"""
jarofuzz.process — batch matching and extraction utilities built on the
Jaro scorers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any

import numpy as np

from .config import BatchConfig
from .distance.Jaro import CachedJaro, MultiJaro

logger = logging.getLogger(__name__)


def _iter_choices(choices: Iterable[Any] | Mapping[Any, Any]) -> Iterator[tuple[Any, Any]]:
    """Yield ``(key, choice)`` pairs; keys are positions unless *choices* is a mapping."""
    if isinstance(choices, Mapping):
        yield from choices.items()
    else:
        yield from enumerate(choices)


def extract_iter(
    query: Any,
    choices: Iterable[Any] | Mapping[Any, Any],
    *,
    processor: Callable[..., Any] | None = None,
    score_cutoff: float | None = None,
) -> Iterator[tuple[Any, float, Any]]:
    """Yield ``(choice, score, key)`` for every choice scoring at least *score_cutoff*.

    ``None`` choices are skipped.
    """
    if query is None:
        return

    scorer = CachedJaro(query, processor=processor)
    cutoff = score_cutoff or 0.0
    for key, choice in _iter_choices(choices):
        if choice is None:
            continue
        score = scorer.similarity(choice, score_cutoff=cutoff)
        if score >= cutoff:
            yield choice, score, key


def extract(
    query: Any,
    choices: Iterable[Any] | Mapping[Any, Any],
    *,
    processor: Callable[..., Any] | None = None,
    limit: int | None = 5,
    score_cutoff: float | None = None,
) -> list[tuple[Any, float, Any]]:
    """Return the best matches from *choices* for *query*.

    Results are sorted by score descending; ties keep the order of *choices*.
    ``limit=None`` returns every match.
    """
    results = list(
        extract_iter(query, choices, processor=processor, score_cutoff=score_cutoff)
    )
    order = sorted(range(len(results)), key=lambda i: -results[i][1])
    ranked = [results[i] for i in order]
    return ranked if limit is None else ranked[:limit]


def extractOne(
    query: Any,
    choices: Iterable[Any] | Mapping[Any, Any],
    *,
    processor: Callable[..., Any] | None = None,
    score_cutoff: float | None = None,
) -> tuple[Any, float, Any] | None:
    """Return the best match for *query*, or ``None`` when nothing reaches *score_cutoff*."""
    best: tuple[Any, float, Any] | None = None
    for result in extract_iter(query, choices, processor=processor, score_cutoff=score_cutoff):
        if best is None or result[1] > best[1]:
            best = result
            if best[1] == 1.0:
                break
    return best


def cdist(
    queries: Iterable[Any],
    choices: Iterable[Any],
    *,
    processor: Callable[..., Any] | None = None,
    score_cutoff: float | None = None,
    dtype: Any = None,
    config: BatchConfig | None = None,
) -> np.ndarray:
    """Compute the pairwise Jaro similarity matrix of shape ``(len(queries), len(choices))``.

    Each column is one pass of :class:`~jarofuzz.distance.Jaro.MultiJaro`
    over a choice, scoring all queries at once.
    """
    scorer = MultiJaro(queries, processor=processor, config=config)
    choices = list(choices)

    logger.debug("cdist over %d queries x %d choices", len(scorer), len(choices))
    matrix = np.zeros(
        (len(scorer), len(choices)), dtype=dtype if dtype is not None else np.float32
    )
    for col, choice in enumerate(choices):
        matrix[:, col] = scorer.similarity(choice, score_cutoff=score_cutoff)
    return matrix


__all__ = ["extract", "extractOne", "extract_iter", "cdist"]
