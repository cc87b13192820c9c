"""
jarofuzz.config — tuning knobs for batched scoring.
"""

from __future__ import annotations

import dataclasses
import os

# Environment variable overriding the lane width of BatchConfig.from_env()
LANES_ENV_VAR = "JAROFUZZ_LANES"


@dataclasses.dataclass(frozen=True)
class BatchConfig:
    """
    Configuration for :class:`~jarofuzz.distance.Jaro.MultiJaro` and
    :func:`~jarofuzz.process.cdist`.

    Parameters
    ----------
    lanes : int
        Number of patterns scored together in one data-parallel pass over
        the text. Each group scans the text once, up to the furthest
        position any of its patterns can still match.

    Examples
    --------
    >>> cfg = BatchConfig(lanes=16)
    >>> scorer = MultiJaro(["apple", "maple"], config=cfg)
    """

    lanes: int = 8

    def __post_init__(self) -> None:
        if self.lanes < 1:
            raise ValueError(f"lanes must be a positive integer, got {self.lanes!r}")

    @classmethod
    def from_env(cls) -> BatchConfig:
        """Build a config, taking ``lanes`` from ``JAROFUZZ_LANES`` when set."""
        raw = os.environ.get(LANES_ENV_VAR)
        if raw is None or not raw.strip():
            return cls()
        try:
            lanes = int(raw)
        except ValueError:
            raise ValueError(
                f"{LANES_ENV_VAR} must be an integer, got {raw!r}"
            ) from None
        return cls(lanes=lanes)


__all__ = ["BatchConfig", "LANES_ENV_VAR"]
