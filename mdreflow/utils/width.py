from __future__ import annotations

from wcwidth import wcswidth, wcwidth


def char_width(ch: str) -> int:
    # Non-printable characters report -1; they occupy no column
    w = wcwidth(ch)
    return w if w > 0 else 0


def display_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies.

    Wide East Asian characters count as two columns, combining marks as zero.
    """
    if not text:
        return 0
    w = wcswidth(text)
    if w >= 0:
        return w
    return sum(char_width(ch) for ch in text)


def pad_to_width(text: str, width: int) -> str:
    return text + " " * max(0, width - display_width(text))
