from __future__ import annotations

import re
from typing import List, Optional, Sequence

from lxml import etree, html
from markdownify import MarkdownConverter

from ..utils.logging import get_logger
from .table import leading_indent, reflow_table


logger = get_logger(__name__)

_open_tag_re = re.compile(r"<table(?=[\s>/]|$)", re.IGNORECASE)
_close_tag_re = re.compile(r"</table\s*>", re.IGNORECASE)
_pipe_re = re.compile(r"(\\*)\|")


def starts_html_table(line: str) -> bool:
    return bool(_open_tag_re.match(line.lstrip()))


def count_table_opens(line: str) -> int:
    return len(_open_tag_re.findall(line))


def count_table_closes(line: str) -> int:
    return len(_close_tag_re.findall(line))


def escape_pipes(text: str) -> str:
    """Escape every pipe, doubling any backslashes already in front of it."""
    return _pipe_re.sub(lambda m: m.group(1) * 2 + "\\|", text)


class TableConverter(MarkdownConverter):
    def _el_text(self, el) -> str:
        # Works for both BeautifulSoup Tag and lxml elements
        get_text = getattr(el, "get_text", None)
        if callable(get_text):
            text = " ".join(list(el.stripped_strings))
        else:
            text = getattr(el, "text", "") or ""
        text = " ".join(text.split())
        return escape_pipes(text)

    def convert_table(self, el, text, parent_tags):  # pipe tables
        # Build header from thead if present; otherwise fall back to first row
        rows = []
        header = []

        thead = el.find("thead")
        if thead is not None:
            tr = thead.find("tr")
            if tr is not None:
                header = [self._el_text(td) for td in tr.find_all(["th", "td"]) or []]

        trs = []
        for tr in el.find_all("tr"):
            if tr.find_parent("thead") is not None:
                continue
            # rows of a nested table belong to that table
            if tr.find_parent("table") is not el:
                continue
            trs.append(tr)

        if not header and trs:
            first = trs.pop(0)
            header = [self._el_text(td) for td in first.find_all(["th", "td"], recursive=False) or []]

        for tr in trs:
            cells = tr.find_all(["td", "th"], recursive=False)
            if not cells:
                continue
            rows.append([self._el_text(td) for td in cells])

        if not header:
            return ""

        n = max([len(header)] + [len(r) for r in rows])
        sep = ["---"] * n

        def line(cells):
            cells = cells + [""] * (n - len(cells))
            return "| " + " | ".join(cells) + " |"

        parts = ["", line(header), line(sep)]
        for r in rows:
            parts.append(line(r))
        parts.append("")
        return "\n".join(parts)


def _converter() -> TableConverter:
    return TableConverter(escape_asterisks=False, escape_underscores=False, strip="\n")


def table_to_markdown(table: html.HtmlElement) -> List[str]:
    # Clone the element into a standalone HTML string
    html_str = etree.tostring(table, encoding="unicode", with_tail=False)
    md = _converter().convert(html_str)
    return [line for line in md.splitlines() if line.strip()]


def _text_lines(text: Optional[str], indent: str) -> List[str]:
    return [indent + line.strip() for line in (text or "").splitlines() if line.strip()]


def html_table_to_markdown(lines: Sequence[str], keep_alignment: bool = False) -> List[str]:
    """Convert a buffered HTML table block into reflowed Markdown rows.

    Text and markup around the tables are kept as their own lines. Blocks
    without a top-level ``<table>`` element are returned unchanged.
    """
    lines = list(lines)
    source = "\n".join(line.rstrip() for line in lines)
    if not source.strip():
        return lines
    try:
        root = html.fragment_fromstring(source, create_parent="div")
    except etree.ParserError as e:
        logger.debug(f"Unparseable HTML table block: {e}")
        return lines
    if not any(child.tag == "table" for child in root):
        return lines

    indent = leading_indent(lines[0])
    out = _text_lines(root.text, indent)
    for child in root:
        md_lines = table_to_markdown(child) if child.tag == "table" else []
        if md_lines:
            out.extend(indent + row for row in reflow_table(md_lines, keep_alignment=keep_alignment))
        else:
            markup = etree.tostring(child, encoding="unicode", method="html", with_tail=False)
            out.extend(_text_lines(markup, indent))
        out.extend(_text_lines(child.tail, indent))
    return out
