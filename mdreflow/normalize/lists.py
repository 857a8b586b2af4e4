from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from ..convert.fence import FenceTracker


NUMBERED_RE = re.compile(r"^(\s*)(\d+)([.)])(\s+)(.*)$")
BULLET_RE = re.compile(r"^(\s*)[-*+]\s+\S")


def indent_len(indent: str) -> int:
    """Indentation width with tabs counted as four columns."""
    return sum(4 if ch == "\t" else 1 for ch in indent)


def _leading(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def pop_counters_from(counters: List[Tuple[int, int]], indent: int) -> None:
    """Drop every counter at ``indent`` or deeper."""
    while counters and counters[-1][0] >= indent:
        counters.pop()


def renumber_lists(lines: Sequence[str]) -> List[str]:
    out: List[str] = []
    counters: List[Tuple[int, int]] = []
    fences = FenceTracker()

    for line in lines:
        if fences.observe(line) or fences.in_fence:
            out.append(line)
            continue

        m = NUMBERED_RE.match(line)
        if m and m.group(5).strip():
            lead, _, delim, gap, rest = m.groups()
            indent = indent_len(lead)
            while counters and counters[-1][0] > indent:
                counters.pop()
            if counters and counters[-1][0] == indent:
                number = counters[-1][1] + 1
                counters[-1] = (indent, number)
            else:
                number = 1
                counters.append((indent, number))
            out.append(f"{lead}{number}{delim}{gap}{rest}")
            continue

        out.append(line)
        if not line.strip() or not counters:
            continue
        indent = indent_len(_leading(line))
        if BULLET_RE.match(line):
            pop_counters_from(counters, indent)
        elif indent <= counters[0][0]:
            counters.clear()
        else:
            pop_counters_from(counters, indent)

    return out
