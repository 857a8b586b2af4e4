from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..convert.fence import FenceTracker


MIN_UNDERLINE_LEN = 3


def _shared_prefix_len(a: str, b: str) -> int:
    n = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        n += 1
    return n


def _quote_indent_len(text: str) -> int:
    return len(text) - len(text.lstrip(" \t>"))


def detect_setext_heading(line: str, underline: Optional[str]) -> Optional[Tuple[int, int, str]]:
    """Return ``(level, prefix length, text)`` when ``line`` is underlined by ``underline``."""
    if underline is None or not line.strip():
        return None
    line_prefix = _quote_indent_len(line)
    if line_prefix != _quote_indent_len(underline) and (line_prefix or _quote_indent_len(underline)):
        # a quote or indent the underline does not repeat
        return None
    n = _shared_prefix_len(line, underline)
    if n and line[:n].strip(" \t>"):
        return None
    text = line[n:].strip()
    body = underline[n:].strip()
    if not text or not body or body[0] not in "=-":
        return None
    if body != body[0] * len(body) or len(body) < MIN_UNDERLINE_LEN:
        return None
    return (1 if body[0] == "=" else 2), n, text


def _heading_line(prefix: str, level: int, text: str) -> str:
    sep = " " if prefix and not prefix[-1].isspace() else ""
    return f"{prefix}{sep}{'#' * level} {text}"


def convert_setext_headings(lines: Sequence[str]) -> List[str]:
    """Rewrite ``Title`` / ``===`` pairs as ``# Title`` (``---`` gives ``##``).

    Quote markers and indentation shared by both lines are kept.
    """
    out: List[str] = []
    fences = FenceTracker()
    idx = 0
    while idx < len(lines):
        line = lines[idx]
        if fences.observe(line) or fences.in_fence:
            out.append(line)
            idx += 1
            continue
        found = detect_setext_heading(line, lines[idx + 1] if idx + 1 < len(lines) else None)
        if found is None:
            out.append(line)
            idx += 1
            continue
        level, n, text = found
        out.append(_heading_line(line[:n], level, text))
        idx += 2
    return out
