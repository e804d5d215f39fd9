"""
Common helpers for clipping and normalising text before it goes into prompts or previews.
"""

from __future__ import annotations

import re

_WS = re.compile(r"\s+")

ELLIPSIS = "…"


def clip(text: object, length: int) -> str:
    """
    Truncate `text` to at most `length` characters, ending with an ellipsis if it was shortened.

    Args:
        text: Anything; None becomes "".
        length: Maximum number of characters in the result (ellipsis included).

    Returns:
        The original text if it fits, otherwise its first `length - 1` characters plus `…`.
    """
    s = "" if text is None else str(text)
    if len(s) <= length:
        return s
    return s[: max(length - 1, 0)] + ELLIPSIS


def collapse_whitespace(text: object) -> str:
    """Replace every run of whitespace (newlines included) with a single space."""
    return _WS.sub(" ", "" if text is None else str(text))


def make_preview(text: object, length: int = 500) -> str:
    """Whitespace-collapsed, stripped and clipped excerpt for search results."""
    return clip(collapse_whitespace(text).strip(), length)


def tail(text: str, length: int) -> str:
    """Keep only the last `length` characters."""
    if len(text) <= length:
        return text
    return text[len(text) - length:]
