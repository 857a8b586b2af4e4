from __future__ import annotations

import re
from typing import List, Sequence

from ..convert.fence import FenceTracker


THEMATIC_BREAK_LEN = 70
THEMATIC_BREAK_LINE = "_" * THEMATIC_BREAK_LEN

_break_re = re.compile(r"^ {0,3}((?:[ \t]*\*){3,}|(?:[ \t]*-){3,}|(?:[ \t]*_){3,})[ \t]*$")
_setext_re = re.compile(r"^ {0,3}-+[ \t]*$")


def is_thematic_break(line: str) -> bool:
    return bool(_break_re.match(line))


def format_breaks(lines: Sequence[str]) -> List[str]:
    out: List[str] = []
    fences = FenceTracker()
    prev = ""
    for line in lines:
        if fences.observe(line) or fences.in_fence:
            out.append(line)
        elif is_thematic_break(line) and not (_setext_re.match(line) and prev.strip()):
            # a dash run under a text line is a setext heading underline
            out.append(THEMATIC_BREAK_LINE)
        else:
            out.append(line)
        prev = line
    return out
