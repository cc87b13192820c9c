"""
jarofuzz.utils — input preprocessing helpers.
"""

from __future__ import annotations

from typing import Any


def default_process(sentence: Any) -> str:
    """
    Lowercase ``sentence``, replace every non-alphanumeric character with a
    space and strip whitespace from both ends. ``None`` becomes ``""``.
    """
    if sentence is None:
        return ""
    text = str(sentence)
    return "".join(ch if ch.isalnum() else " " for ch in text).lower().strip()


__all__ = ["default_process"]
