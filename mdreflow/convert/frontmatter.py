from __future__ import annotations

from typing import List, Sequence, Tuple


FRONT_MATTER_DELIMITER = "---"


def front_matter_length(lines: Sequence[str]) -> int:
    """Number of leading lines forming a ``---`` delimited YAML block, or 0."""
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return 0
    for idx in range(1, len(lines)):
        if lines[idx].strip() == FRONT_MATTER_DELIMITER:
            return idx + 1
    return 0


def split_front_matter(lines: Sequence[str]) -> Tuple[List[str], List[str]]:
    n = front_matter_length(lines)
    return list(lines[:n]), list(lines[n:])
