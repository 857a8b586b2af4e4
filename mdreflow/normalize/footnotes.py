from __future__ import annotations

import re
from typing import List, Optional, Sequence, Tuple

from ..convert.fence import FenceTracker
from ..convert.tokenize import TokenKind, iter_tokens


_inline_fn_re = re.compile(r"(?P<pre>^|[^0-9])(?P<punc>[.!?);:])(?P<style>[*_]*)(?P<num>\d+)(?P<boundary>\s|$)")
_atx_heading_re = re.compile(r"^\s*(?:>+\s*)*(?:[-*+]\s+|\d+[.)]\s+)*#{1,6}(?:\s|$)")
_footnote_line_re = re.compile(r"^(?P<indent>\s*)(?P<num>\d+)\.(?P<gap>\s+)(?P<rest>.*)$")
_definition_re = re.compile(r"^\s*(?:>\s*)*\[\^\d+\]:")


def convert_inline(text: str) -> str:
    """``text.2`` becomes ``text.[^2]``."""
    return _inline_fn_re.sub(
        lambda m: f"{m['pre']}{m['punc']}{m['style']}[^{m['num']}]{m['boundary']}",
        text,
    )


def _convert_line(line: str) -> str:
    # Code spans are copied verbatim; the text between them is converted
    parts: List[str] = []
    text: List[str] = []
    for tok in iter_tokens(line):
        if tok.kind is TokenKind.INLINE_CODE:
            parts.append(convert_inline("".join(text)))
            text = []
            parts.append(tok.text)
        else:
            text.append(tok.text)
    parts.append(convert_inline("".join(text)))
    return "".join(parts)


def _block_range(lines: Sequence[str]) -> Optional[Tuple[int, int]]:
    end = len(lines)
    while end > 0 and not lines[end - 1].strip():
        end -= 1
    start = end
    while start > 0:
        line = lines[start - 1]
        if line.strip() and not _footnote_line_re.match(line) and not line[:1].isspace():
            break
        start -= 1
    if start < end and any(_footnote_line_re.match(line) for line in lines[start:end]):
        return start, end
    return None


def _heading_before(lines: Sequence[str], start: int) -> bool:
    for line in reversed(lines[:start]):
        if line.strip():
            return line.lstrip().startswith("## ")
    return False


def _has_definitions(lines: Sequence[str], start: int) -> bool:
    fences = FenceTracker()
    for line in lines[:start]:
        if fences.observe(line) or fences.in_fence:
            continue
        if _definition_re.match(line):
            return True
    return False


def convert_block(lines: List[str]) -> None:
    """Rewrite the trailing numbered list under a final ``##`` heading as definitions."""
    found = _block_range(lines)
    if found is None:
        return
    start, end = found
    if not _heading_before(lines, start) or _has_definitions(lines, start):
        return
    for i in range(start, end):
        m = _footnote_line_re.match(lines[i])
        if m:
            lines[i] = f"{m['indent']}[^{m['num']}]:{m['gap']}{m['rest']}"


def convert_footnotes(lines: Sequence[str]) -> List[str]:
    out: List[str] = []
    fences = FenceTracker()
    for line in lines:
        if fences.observe(line) or fences.in_fence or _atx_heading_re.match(line):
            out.append(line)
        else:
            out.append(_convert_line(line))
    convert_block(out)
    return out
