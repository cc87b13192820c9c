"""
jarofuzz.distance — similarity metrics.
"""

from __future__ import annotations

from . import Jaro  # noqa: F401

__all__ = ["Jaro"]
