from __future__ import annotations

import re

MARKUP_CHARS_RE = re.compile(r"[#*`]")
INLINE_LINK_RE = re.compile(r"\[(.*?)\]\(.*?\)")
WHITESPACE_RE = re.compile(r"\s+")


def _clean_once(text: str) -> str:
    text = MARKUP_CHARS_RE.sub("", text)
    text = INLINE_LINK_RE.sub(r"\1", text)
    text = WHITESPACE_RE.sub(" ", text)
    return text.strip()


def strip_markup(text: str) -> str:
    """
    Reduce markdown/shell text to plain searchable text.

    Removes ``#``, ``*`` and backticks, rewrites ``[label](target)`` to
    ``label``, collapses whitespace and trims. The pass is repeated until the
    text stops changing (nested links or links split across lines only
    surface after a first pass), so the result is always a fixed point.
    """

    cleaned = _clean_once(text)
    while True:
        again = _clean_once(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again


def truncate(text: str, max_chars: int) -> str:
    if max_chars < 0:
        raise ValueError("max_chars must be >= 0")
    return text[:max_chars]
