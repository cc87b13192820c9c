"""
jarofuzz._common — 64-bit word helpers and input normalisation shared by
the matching engines.

Python integers are unbounded, so every helper that models a machine word
masks its result back to ``WORD_SIZE`` bits where the result could
otherwise grow past it.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

WORD_SIZE = 64
WORD_MASK = (1 << WORD_SIZE) - 1


def ceil_div(a: int, divisor: int) -> int:
    return -(-a // divisor)


def bit_mask_lsb(n: int) -> int:
    """Mask with the ``n`` lowest bits set (empty for ``n <= 0``, full above 64)."""
    if n <= 0:
        return 0
    if n >= WORD_SIZE:
        return WORD_MASK
    return (1 << n) - 1


def blsi(x: int) -> int:
    """Isolate the lowest set bit."""
    return x & -x


def blsr(x: int) -> int:
    """Clear the lowest set bit."""
    return x & (x - 1)


def countr_zero(x: int) -> int:
    """Index of the lowest set bit. ``x`` must be non-zero."""
    return (x & -x).bit_length() - 1


def popcount(x: int) -> int:
    return x.bit_count()


def remove_common_prefix(s1: Sequence[Any], s2: Sequence[Any]) -> tuple[Sequence[Any], Sequence[Any], int]:
    """Strip the shared prefix of both sequences and return its length."""
    prefix = 0
    for a, b in zip(s1, s2):
        if a != b:
            break
        prefix += 1
    if not prefix:
        return s1, s2, 0
    return s1[prefix:], s2[prefix:], prefix


def conv_sequence(s: Any) -> Sequence[Any]:
    """Materialise ``s`` into something indexable and sliceable."""
    if isinstance(s, (str, bytes, list, tuple)):
        return s
    return list(s)


def preprocess(
    s1: Any,
    s2: Any,
    processor: Callable[..., Any] | None,
) -> tuple[Sequence[Any], Sequence[Any]]:
    if processor is not None:
        s1 = processor(s1)
        s2 = processor(s2)
    return conv_sequence(s1), conv_sequence(s2)
