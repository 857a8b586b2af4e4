from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from ..normalize.breaks import format_breaks
from ..normalize.code_emphasis import fix_code_emphasis
from ..normalize.ellipsis import replace_ellipsis
from ..normalize.fences import attach_orphan_specifiers, compress_fences
from ..normalize.footnotes import convert_footnotes
from ..normalize.headings import convert_setext_headings
from ..normalize.lists import renumber_lists
from ..utils.logging import get_logger
from .fence import FenceMarker, closes_fence, parse_fence
from .frontmatter import split_front_matter
from .html_to_markdown import count_table_closes, count_table_opens, html_table_to_markdown, starts_html_table
from .table import is_separator_line, reflow_table, split_unescaped_pipes
from .wrap import HEADING_RE, WRAP_COLS, wrap_text


logger = get_logger(__name__)


@dataclass
class ReflowOptions:
    wrap: bool = False
    renumber: bool = False
    breaks: bool = False
    ellipsis: bool = False
    fences: bool = False
    footnotes: bool = False
    headings: bool = False
    code_emphasis: bool = False
    width: int = WRAP_COLS
    keep_alignment: bool = False


class StreamState(Enum):
    STREAMING = "streaming"
    IN_MARKDOWN_TABLE = "in_markdown_table"
    IN_HTML_TABLE = "in_html_table"
    IN_CODE_FENCE = "in_code_fence"


def starts_markdown_table(line: str) -> bool:
    return line.lstrip().startswith("|") or is_separator_line(line)


def continues_markdown_table(line: str) -> bool:
    if not line.strip() or HEADING_RE.match(line) or parse_fence(line) is not None:
        return False
    return len(split_unescaped_pipes(line)) > 1 or is_separator_line(line)


class StreamClassifier:
    """Line-by-line driver that buffers tables and routes text to the wrap engine."""

    def __init__(self, options: Optional[ReflowOptions] = None):
        self.options = options or ReflowOptions()
        self.state = StreamState.STREAMING
        self.buffer: List[str] = []
        self.pending: List[str] = []
        self.fence: Optional[FenceMarker] = None
        self.html_depth = 0
        self.out: List[str] = []

    def feed(self, line: str) -> None:
        if self.state is StreamState.IN_CODE_FENCE:
            self.out.append(line)
            if self.fence is not None and closes_fence(line, self.fence):
                self.fence = None
                self.state = StreamState.STREAMING
            return

        if self.state is StreamState.IN_HTML_TABLE:
            self.buffer.append(line)
            self.html_depth += count_table_opens(line) - count_table_closes(line)
            if self.html_depth <= 0:
                self._flush_html_table()
            return

        if self.state is StreamState.IN_MARKDOWN_TABLE:
            if continues_markdown_table(line):
                self.buffer.append(line)
                return
            self._flush_markdown_table()

        self._stream(line)

    def _stream(self, line: str) -> None:
        marker = parse_fence(line)
        if marker is not None:
            self._flush_text()
            self.out.append(line)
            self.fence = marker
            self.state = StreamState.IN_CODE_FENCE
            return

        if starts_markdown_table(line):
            self._flush_text()
            self.buffer = [line]
            self.state = StreamState.IN_MARKDOWN_TABLE
            return

        if starts_html_table(line):
            self._flush_text()
            self.buffer = [line]
            self.html_depth = count_table_opens(line) - count_table_closes(line)
            self.state = StreamState.IN_HTML_TABLE
            if self.html_depth <= 0:
                self._flush_html_table()
            return

        self.pending.append(line)

    def _flush_text(self) -> None:
        if not self.pending:
            return
        lines, self.pending = self.pending, []
        if self.options.headings:
            lines = convert_setext_headings(lines)
        if self.options.code_emphasis:
            lines = fix_code_emphasis(lines)
        if self.options.wrap:
            lines = wrap_text(lines, self.options.width)
        self.out.extend(lines)

    def _flush_markdown_table(self) -> None:
        self.out.extend(reflow_table(self.buffer, keep_alignment=self.options.keep_alignment))
        self.buffer = []
        self.state = StreamState.STREAMING

    def _flush_html_table(self) -> None:
        self.out.extend(html_table_to_markdown(self.buffer, keep_alignment=self.options.keep_alignment))
        self.buffer = []
        self.html_depth = 0
        self.state = StreamState.STREAMING

    def finish(self) -> List[str]:
        """Flush whatever is still buffered and return the output lines."""
        if self.state is StreamState.IN_MARKDOWN_TABLE:
            self._flush_markdown_table()
        elif self.state is StreamState.IN_HTML_TABLE:
            logger.debug("Input ended inside an HTML table; converting what was buffered")
            self._flush_html_table()
        elif self.state is StreamState.IN_CODE_FENCE:
            logger.debug("Input ended inside a code fence")
            self.fence = None
            self.state = StreamState.STREAMING
        self._flush_text()
        return self.out


def classify(lines: Iterable[str], options: Optional[ReflowOptions] = None) -> List[str]:
    classifier = StreamClassifier(options)
    for line in lines:
        classifier.feed(line)
    return classifier.finish()


def reflow(lines: Iterable[str], options: Optional[ReflowOptions] = None) -> List[str]:
    """Reflow tables and, when enabled, wrap text and run the normalization passes.

    Table reflow and fence passthrough always run; everything else follows
    ``options``. A leading YAML front matter block is left untouched.
    """
    options = options or ReflowOptions()
    front, body = split_front_matter(list(lines))
    if options.fences:
        body = attach_orphan_specifiers(compress_fences(body))
    out = classify(body, options)
    if options.ellipsis:
        out = replace_ellipsis(out)
    if options.footnotes:
        out = convert_footnotes(out)
    if options.renumber:
        out = renumber_lists(out)
    if options.breaks:
        out = format_breaks(out)
    return front + out
