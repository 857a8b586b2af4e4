from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List


class FileProcessingError(Exception):
    """A file could not be read, decoded or written."""

    def __init__(self, path: Path, cause: BaseException):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"{self.path}: {cause}")


@dataclass
class WriteResult:
    path: Path
    bytes_written: int


def read_text_file(path: Path, encoding: str = "utf-8") -> str:
    try:
        data = Path(path).read_bytes()
        return data.decode(encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise FileProcessingError(path, e) from e


def write_text_file(path: Path, content: str, encoding: str = "utf-8") -> WriteResult:
    data = content.encode(encoding)
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise FileProcessingError(path, e) from e
    return WriteResult(path=Path(path), bytes_written=len(data))


def split_lines(text: str) -> List[str]:
    # Line terminators are dropped; trailing whitespace inside a line is kept
    return text.splitlines()


def join_lines(lines: List[str]) -> str:
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
