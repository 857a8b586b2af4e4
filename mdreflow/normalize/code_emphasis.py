from __future__ import annotations

from typing import List, Sequence, Tuple

from ..convert.fence import FenceTracker
from ..convert.tokenize import find_code_span_end, is_escaped


EMPHASIS_MARKS = "*_"


def split_marks(text: str) -> Tuple[str, str, str]:
    """``"**bold**"`` gives ``("**", "bold", "**")``."""
    body = text.lstrip(EMPHASIS_MARKS)
    lead = text[: len(text) - len(body)]
    core = body.rstrip(EMPHASIS_MARKS)
    return lead, core, body[len(core):]


def split_code_spans(line: str) -> List[Tuple[bool, str]]:
    """Split ``line`` into ``(is_code, text)`` segments; unclosed backticks stay text."""
    segments: List[Tuple[bool, str]] = []
    start = 0
    i = 0
    while i < len(line):
        if line[i] != "`" or is_escaped(line, i):
            i += 1
            continue
        end = find_code_span_end(line, i)
        if end is None:
            i += len(line[i:]) - len(line[i:].lstrip("`"))
            continue
        if start < i:
            segments.append((False, line[start:i]))
        segments.append((True, line[i:end]))
        start = i = end
    if start < len(line):
        segments.append((False, line[start:]))
    return segments


def fix_line(line: str) -> str:
    segments = split_code_spans(line)
    out: List[str] = []
    pending = ""
    for idx, (is_code, text) in enumerate(segments):
        following = segments[idx + 1] if idx + 1 < len(segments) else None
        if not is_code:
            if following is None:
                out.append(text)
                continue
            lead, core, trail = split_marks(text)
            if not core and not trail:
                pending = lead
            else:
                out.append(lead + core)
                pending = trail
            continue

        prefix, suffix, pending = pending, "", ""
        if following is not None and not following[0]:
            lead, core, _ = split_marks(following[1])
            if lead:
                if not prefix:
                    prefix = lead
                elif not core:
                    suffix = lead
                else:
                    # markers on both sides of the span cancel out
                    prefix = ""
                segments[idx + 1] = (False, following[1][len(lead):])
        out.append(prefix + text + suffix)
    return "".join(out)


def fix_code_emphasis(lines: Sequence[str]) -> List[str]:
    """Move emphasis markers glued to inline code so they enclose the whole run."""
    out: List[str] = []
    fences = FenceTracker()
    for line in lines:
        if fences.observe(line) or fences.in_fence or "`" not in line:
            out.append(line)
        else:
            out.append(fix_line(line))
    return out
