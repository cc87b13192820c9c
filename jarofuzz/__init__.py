"""
jarofuzz — bit-parallel Jaro similarity for strings and other sequences.
"""

from __future__ import annotations

import logging

from . import (
    config,
    distance,
    process,
    utils,
)
from .config import BatchConfig
from .distance.Jaro import CachedJaro, MultiJaro

__version__: str = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "config",
    "distance",
    "process",
    "utils",
    "BatchConfig",
    "CachedJaro",
    "MultiJaro",
    "__version__",
]
