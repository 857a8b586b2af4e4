from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from ..utils.width import display_width
from .tokenize import Token, TokenKind, tokenize


WRAP_COLS = 80

BULLET_RE = re.compile(r"^(\s*(?:[-*+]|\d+[.)])\s+(?:\[[ xX]\]\s+)?)(\S.*)$")
FOOTNOTE_DEF_RE = re.compile(r"^(\s*\[\^[^\]]+\]:\s*)(\S.*)$")
BLOCKQUOTE_RE = re.compile(r"^(\s*(?:>\s?)+)(.*)$")
HEADING_RE = re.compile(r"^\s{0,3}#{1,6}(?:\s|$)")
THEMATIC_RE = re.compile(r"^\s{0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
SETEXT_RE = re.compile(r"^\s{0,3}(?:=+|-+)\s*$")
LINK_DEF_RE = re.compile(r"^\s{0,3}\[[^\]^][^\]]*\]:\s")
HTML_BREAK_SUFFIXES = ("<br>", "<br/>", "<br />")
HTML_BLOCK_RE = re.compile(
    r"^\s{0,3}(?:<!--|<\?|</?(?:address|article|aside|blockquote|details|dd|div|dl|dt|figcaption|figure|footer|"
    r"form|h[1-6]|header|hr|li|main|nav|ol|p|pre|script|section|style|summary|table|tbody|td|tfoot|th|thead|tr|ul)"
    r"(?=[\s/>]|$))",
    re.IGNORECASE,
)


@dataclass
class WrapCursor:
    """Chunks collected for the output line being built."""

    width: int
    parts: List[str] = field(default_factory=list)
    used: int = 0
    hard_break: bool = False

    def fits(self, chunk_width: int) -> bool:
        if not self.parts:
            return True
        return self.used + 1 + chunk_width <= self.width

    def push(self, chunk: str, chunk_width: int) -> None:
        if self.parts:
            self.used += 1
        self.parts.append(chunk)
        self.used += chunk_width

    def take(self) -> str:
        line = " ".join(self.parts)
        self.parts = []
        self.used = 0
        return line


def _chunks(tokens: Iterable[Token]) -> List[str]:
    # Only whitespace is a legal break point; adjacent tokens stay glued.
    chunks: List[str] = []
    current: List[str] = []
    for tok in tokens:
        if tok.kind is TokenKind.WHITESPACE:
            if current:
                chunks.append("".join(current))
                current = []
        else:
            current.append(tok.text)
    if current:
        chunks.append("".join(current))
    return chunks


def wrap_tokens(tokens: Iterable[Token], width: int = WRAP_COLS, hard_break: bool = False) -> List[str]:
    """Greedily fill lines of at most ``width`` display columns.

    A chunk wider than ``width`` is placed alone on its own line.
    """
    cursor = WrapCursor(width=max(1, width), hard_break=hard_break)
    lines: List[str] = []
    for chunk in _chunks(tokens):
        chunk_width = display_width(chunk)
        if not cursor.fits(chunk_width):
            lines.append(cursor.take())
        cursor.push(chunk, chunk_width)
    if cursor.parts:
        lines.append(cursor.take())
    if cursor.hard_break and lines:
        lines[-1] += "  "
    return lines


def has_hard_break(line: str) -> bool:
    return line.endswith("  ") and bool(line.strip())


def ends_unit(line: str) -> bool:
    if has_hard_break(line):
        return True
    text = line.rstrip()
    if text.lower().endswith(HTML_BREAK_SUFFIXES):
        return True
    backslashes = len(text) - len(text.rstrip("\\"))
    return backslashes % 2 == 1


def _wrap_unit(unit: List[str], width: int) -> List[str]:
    text = " ".join(line.strip() for line in unit)
    return wrap_tokens(tokenize(text), width, hard_break=has_hard_break(unit[-1]))


def wrap_paragraph(
    lines: List[str],
    width: int = WRAP_COLS,
    prefix: str = "",
    continuation: Optional[str] = None,
) -> List[str]:
    """Wrap one paragraph or list item, splitting it at hard breaks."""
    if continuation is None:
        continuation = prefix
    available = max(1, width - display_width(prefix))
    wrapped: List[str] = []
    unit: List[str] = []
    for line in lines:
        unit.append(line)
        if ends_unit(line):
            wrapped.extend(_wrap_unit(unit, available))
            unit = []
    if unit:
        wrapped.extend(_wrap_unit(unit, available))
    return [(prefix if i == 0 else continuation) + line for i, line in enumerate(wrapped)]


def indent_width(line: str) -> int:
    lead = line[: len(line) - len(line.lstrip())]
    return len(lead.expandtabs(4))


def is_verbatim_line(line: str) -> bool:
    return bool(
        HEADING_RE.match(line)
        or THEMATIC_RE.match(line)
        or SETEXT_RE.match(line)
        or LINK_DEF_RE.match(line)
        or HTML_BLOCK_RE.match(line)
    )


def wrap_text(lines: Iterable[str], width: int = WRAP_COLS) -> List[str]:
    """Wrap a run of Markdown lines that holds no fences or tables."""
    out: List[str] = []
    buf: List[str] = []
    prefix = ""
    continuation = ""
    kind = "paragraph"
    list_col: Optional[int] = None

    def flush_buf():
        nonlocal buf
        if not buf:
            return
        out.extend(wrap_paragraph(buf, width, prefix, continuation))
        buf = []

    def start(new_kind: str, new_prefix: str, new_continuation: str, first: str):
        nonlocal kind, prefix, continuation, buf
        flush_buf()
        kind, prefix, continuation = new_kind, new_prefix, new_continuation
        buf = [first]

    for line in lines:
        if not line.strip():
            flush_buf()
            out.append("")
            continue
        if is_verbatim_line(line):
            flush_buf()
            out.append(line)
            continue

        m = BLOCKQUOTE_RE.match(line)
        if m:
            quote, content = m.group(1), m.group(2)
            if not content.strip() or is_verbatim_line(content) or BULLET_RE.match(content):
                flush_buf()
                out.append(line)
                continue
            if buf and kind == "quote" and quote.strip() == prefix.strip():
                buf.append(content)
                continue
            quote = quote if quote.endswith(" ") else quote + " "
            start("quote", quote, quote, content)
            continue

        m = BULLET_RE.match(line) or FOOTNOTE_DEF_RE.match(line)
        if m:
            marker = m.group(1)
            start("item", marker, " " * display_width(marker.expandtabs(4)), m.group(2))
            list_col = display_width(marker.expandtabs(4))
            continue

        if buf and kind != "quote":
            # paragraph or list continuation, including lazy continuation lines
            buf.append(line)
            continue

        indent = indent_width(line)
        if list_col is not None and indent < list_col:
            list_col = None
        if indent >= (list_col or 0) + 4:
            flush_buf()
            out.append(line)
            continue
        lead = line[: len(line) - len(line.lstrip())]
        start("paragraph", lead, lead, line)

    flush_buf()
    return out
