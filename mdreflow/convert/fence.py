from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


FENCE_CHARS = "`~"
MIN_FENCE_LEN = 3


@dataclass(frozen=True)
class FenceMarker:
    char: str
    length: int

    @property
    def delimiter(self) -> str:
        return self.char * self.length


def parse_fence(line: str) -> Optional[FenceMarker]:
    """Return the opening marker when ``line`` starts a fenced code block."""
    stripped = line.lstrip()
    if not stripped or stripped[0] not in FENCE_CHARS:
        return None
    char = stripped[0]
    length = len(stripped) - len(stripped.lstrip(char))
    if length < MIN_FENCE_LEN:
        return None
    info = stripped[length:]
    # a backtick info string may not contain backticks
    if char == "`" and "`" in info:
        return None
    return FenceMarker(char=char, length=length)


def closes_fence(line: str, marker: FenceMarker) -> bool:
    return line.strip() == marker.delimiter


class FenceTracker:
    """Follows fence open/close lines across a stream of lines."""

    def __init__(self):
        self.marker: Optional[FenceMarker] = None

    @property
    def in_fence(self) -> bool:
        return self.marker is not None

    def observe(self, line: str) -> bool:
        """Update state for ``line``; True when it is a fence delimiter line."""
        if self.marker is not None:
            if closes_fence(line, self.marker):
                self.marker = None
                return True
            return False
        marker = parse_fence(line)
        if marker is None:
            return False
        self.marker = marker
        return True
