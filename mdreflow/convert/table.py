from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..utils.logging import get_logger
from ..utils.width import display_width, pad_to_width
from .tokenize import is_escaped


logger = get_logger(__name__)

MIN_SEPARATOR_WIDTH = 3


@dataclass
class TableModel:
    """Header plus body rows; every row holds exactly ``column_count`` cells."""

    header: List[str]
    rows: List[List[str]] = field(default_factory=list)
    alignments: List[str] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.header)

    def widths(self) -> List[int]:
        widths = [0] * self.column_count
        for row in [self.header] + self.rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], display_width(cell))
        return widths


def is_separator_cell(cell: str) -> bool:
    """Matches ``-``, ``---``, ``:--``, ``--:`` and ``:-:`` style cells."""
    body = cell.strip()
    if body.startswith(":"):
        body = body[1:]
    if body.endswith(":"):
        body = body[:-1]
    return bool(body) and all(ch == "-" for ch in body)


def is_separator_line(line: str) -> bool:
    stripped = line.strip()
    if "-" not in stripped or "|" not in stripped:
        return False
    return all(ch in "|:- \t" for ch in stripped)


def split_unescaped_pipes(text: str) -> List[str]:
    """Split on ``|`` characters not preceded by a backslash escape."""
    parts = []
    start = 0
    for i, ch in enumerate(text):
        if ch == "|" and not is_escaped(text, i):
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def _collect_cells(lines: Sequence[str]) -> List[Tuple[str, int]]:
    # Physical lines are joined with a single space: a line that does not end
    # with a pipe continues its last cell into the first cell of the next line.
    cells: List[Tuple[str, int]] = []
    open_cell = False
    for lineno, line in enumerate(lines):
        stripped = line.strip()
        if not stripped:
            continue
        parts = split_unescaped_pipes(stripped)
        starts_closed = stripped.startswith("|")
        ends_closed = len(parts) > 1 and parts[-1] == ""
        if starts_closed:
            parts = parts[1:]
        if ends_closed and parts:
            parts = parts[:-1]
        if not parts:
            open_cell = False
            continue
        if open_cell and not starts_closed:
            text, origin = cells[-1]
            cells[-1] = (text + " " + parts[0], origin)
            parts = parts[1:]
        for part in parts:
            cells.append((part, lineno))
        open_cell = not ends_closed
    return [(text.strip(), lineno) for text, lineno in cells]


def _ends_with_pipe(line: str) -> bool:
    stripped = line.rstrip()
    return stripped.endswith("|") and not is_escaped(stripped, len(stripped) - 1)


def _dash_cells_end(cells: List[Tuple[str, int]], idx: int, lineno: int) -> int:
    while idx < len(cells) and cells[idx][1] == lineno and is_separator_cell(cells[idx][0]):
        idx += 1
    return idx


def _find_separator_run(cells: List[Tuple[str, int]], lines: Sequence[str]) -> Optional[Tuple[int, int]]:
    candidates = [i for i, (text, _) in enumerate(cells) if is_separator_cell(text)]
    if not candidates:
        return None
    # a cell on a separator-only line wins over a stray "-" in the header
    start = next((i for i in candidates if is_separator_line(lines[cells[i][1]])), candidates[0])
    lineno = cells[start][1]
    end = _dash_cells_end(cells, start, lineno)
    # a closed separator line fixes the column count; only an open one wraps
    while end < len(cells) and not _ends_with_pipe(lines[lineno]):
        nxt = cells[end][1]
        if nxt == lineno or not is_separator_line(lines[nxt]):
            break
        lineno = nxt
        end = _dash_cells_end(cells, end, lineno)
    return start, end


def _alignment(cell: str) -> str:
    cell = cell.strip()
    left = cell.startswith(":")
    right = cell.endswith(":")
    if left and right:
        return "center"
    if right:
        return "right"
    if left:
        return "left"
    return ""


def _fit(cells: List[str], count: int) -> List[str]:
    return (cells + [""] * count)[:count]


def parse_table(lines: Sequence[str]) -> Optional[TableModel]:
    """Rebuild the logical rows of a possibly re-wrapped table block.

    Returns None when no separator row can be found.
    """
    cells = _collect_cells(lines)
    run = _find_separator_run(cells, lines)
    if run is None:
        return None
    start, end = run
    n = end - start
    texts = [text for text, _ in cells]
    header = _fit(texts[:start], n)
    alignments = [_alignment(cell) for cell in texts[start:end]]
    body = texts[end:]
    rows = [_fit(body[i : i + n], n) for i in range(0, len(body), n)]
    return TableModel(header=header, rows=rows, alignments=alignments)


def _separator_cell(width: int, alignment: str, keep_alignment: bool) -> str:
    dashes = "-" * max(width, MIN_SEPARATOR_WIDTH)
    if not keep_alignment or not alignment:
        return dashes
    if alignment in ("left", "center"):
        dashes = ":" + dashes[1:]
    if alignment in ("right", "center"):
        dashes = dashes[:-1] + ":"
    return dashes


def render_row(cells: Sequence[str], widths: Sequence[int], indent: str = "") -> str:
    padded = [pad_to_width(cell, widths[i]) for i, cell in enumerate(cells)]
    return f"{indent}| " + " | ".join(padded) + " |"


def render_table(model: TableModel, indent: str = "", keep_alignment: bool = False) -> List[str]:
    widths = model.widths()
    alignments = _fit(model.alignments, model.column_count)
    sep = [_separator_cell(w, alignments[i], keep_alignment) for i, w in enumerate(widths)]
    out = [render_row(model.header, widths, indent), f"{indent}| " + " | ".join(sep) + " |"]
    out.extend(render_row(row, widths, indent) for row in model.rows)
    return out


def leading_indent(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]


def reflow_table(lines: Sequence[str], keep_alignment: bool = False) -> List[str]:
    """Reflow a Markdown table block; malformed blocks come back unchanged."""
    lines = list(lines)
    if not lines:
        return []
    model = parse_table(lines)
    if model is None or model.column_count == 0:
        logger.debug(f"No separator row in {len(lines)}-line table block; leaving it untouched")
        return lines
    return render_table(model, indent=leading_indent(lines[0]), keep_alignment=keep_alignment)
