from __future__ import annotations

import re
from typing import List, Sequence

from ..convert.fence import FenceTracker
from ..convert.tokenize import Token, TokenKind, find_code_span_end, find_link_end, iter_tokens


ELLIPSIS = "…"

_dots_re = re.compile(r"\.{3,}")


def replace_dots(text: str) -> str:
    """Turn each complete group of three dots into an ellipsis, left to right."""
    return _dots_re.sub(lambda m: ELLIPSIS * (len(m.group(0)) // 3) + "." * (len(m.group(0)) % 3), text)


def _replace_in_token(tok: Token) -> str:
    if tok.kind is TokenKind.INLINE_CODE:
        end = find_code_span_end(tok.text, 0) or len(tok.text)
        return tok.text[:end] + replace_dots(tok.text[end:])
    if tok.kind is TokenKind.LINK:
        end = find_link_end(tok.text, 0) or len(tok.text)
        return tok.text[:end] + replace_dots(tok.text[end:])
    if tok.kind is TokenKind.WHITESPACE or tok.kind is TokenKind.ESCAPED_PIPE:
        return tok.text
    return replace_dots(tok.text)


def replace_ellipsis(lines: Sequence[str]) -> List[str]:
    out: List[str] = []
    fences = FenceTracker()
    for line in lines:
        if fences.observe(line) or fences.in_fence:
            out.append(line)
            continue
        out.append("".join(_replace_in_token(tok) for tok in iter_tokens(line)))
    return out
