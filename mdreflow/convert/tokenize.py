from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional


TRAILING_PUNCTUATION = ".,;:!?()]\"'"


class TokenKind(Enum):
    WORD = "word"
    WHITESPACE = "whitespace"
    INLINE_CODE = "inline_code"
    LINK = "link"
    HYPHEN_COMPOUND = "hyphen_compound"
    ESCAPED_PIPE = "escaped_pipe"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    @property
    def is_space(self) -> bool:
        return self.kind is TokenKind.WHITESPACE


def is_escaped(text: str, idx: int) -> bool:
    """True when the character at ``idx`` is preceded by an odd run of backslashes."""
    count = 0
    j = idx - 1
    while j >= 0 and text[j] == "\\":
        count += 1
        j -= 1
    return count % 2 == 1


def _run_length(text: str, idx: int, ch: str) -> int:
    end = idx
    while end < len(text) and text[end] == ch:
        end += 1
    return end - idx


def _scan_punctuation(text: str, idx: int) -> int:
    while idx < len(text) and text[idx] in TRAILING_PUNCTUATION:
        idx += 1
    return idx


def find_code_span_end(text: str, start: int) -> Optional[int]:
    """Index just past the backtick span opening at ``start``, or None if unclosed.

    The closing run must have exactly the opening run's length.
    """
    fence = _run_length(text, start, "`")
    idx = start + fence
    while idx < len(text):
        if text[idx] != "`":
            idx += 1
            continue
        run = _run_length(text, idx, "`")
        if run == fence:
            return idx + run
        idx += run
    return None


def find_link_end(text: str, start: int) -> Optional[int]:
    """Index just past ``[text](target)`` or ``![alt](target)`` starting at ``start``."""
    idx = start
    if text.startswith("!", idx):
        idx += 1
    if not text.startswith("[", idx):
        return None
    depth = 0
    while idx < len(text):
        ch = text[idx]
        if ch == "[" and not is_escaped(text, idx):
            depth += 1
        elif ch == "]" and not is_escaped(text, idx):
            depth -= 1
            if depth == 0:
                break
        idx += 1
    else:
        return None
    idx += 1
    if not text.startswith("(", idx):
        return None
    depth = 0
    while idx < len(text):
        ch = text[idx]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return idx + 1
        idx += 1
    return None


def _starts_link(text: str, idx: int) -> bool:
    ch = text[idx]
    if ch == "[":
        return not is_escaped(text, idx)
    if ch == "!" and text.startswith("[", idx + 1):
        return not is_escaped(text, idx)
    return False


def is_hyphen_compound(word: str) -> bool:
    parts = word.split("-")
    return len(parts) > 1 and bool(parts[0]) and bool(parts[-1])


def _scan_word(text: str, idx: int) -> int:
    start = idx
    while idx < len(text):
        ch = text[idx]
        if ch in " \t":
            break
        if ch == "`" and not is_escaped(text, idx):
            break
        if ch == "\\" and text.startswith("|", idx + 1) and not is_escaped(text, idx):
            break
        if idx > start and _starts_link(text, idx):
            break
        idx += 1
    return idx


def iter_tokens(line: str) -> Iterator[Token]:
    """Yield the tokens of one line; joining their text gives back ``line``."""
    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch in " \t":
            end = i
            while end < n and line[end] in " \t":
                end += 1
            yield Token(TokenKind.WHITESPACE, line[i:end])
            i = end
            continue

        if ch == "\\" and line.startswith("|", i + 1) and not is_escaped(line, i):
            yield Token(TokenKind.ESCAPED_PIPE, line[i : i + 2])
            i += 2
            continue

        if ch == "`" and not is_escaped(line, i):
            end = find_code_span_end(line, i)
            if end is not None:
                end = _scan_punctuation(line, end)
                yield Token(TokenKind.INLINE_CODE, line[i:end])
                i = end
                continue
            # unmatched run is literal text
            end = i + _run_length(line, i, "`")
            yield Token(TokenKind.WORD, line[i:end])
            i = end
            continue

        if _starts_link(line, i):
            end = find_link_end(line, i)
            if end is not None:
                end = _scan_punctuation(line, end)
                yield Token(TokenKind.LINK, line[i:end])
                i = end
                continue

        end = _scan_word(line, i)
        if end == i:
            end = i + 1
        word = line[i:end]
        kind = TokenKind.HYPHEN_COMPOUND if is_hyphen_compound(word) else TokenKind.WORD
        yield Token(kind, word)
        i = end


def tokenize(line: str) -> List[Token]:
    return list(iter_tokens(line))


def detokenize(tokens: List[Token]) -> str:
    return "".join(t.text for t in tokens)
