from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..convert.fence import closes_fence, parse_fence


_backtick_fence_re = re.compile(r"^(\s*)`{3,}([A-Za-z0-9_+.,-]*)\s*$")
_orphan_lang_re = re.compile(r"^[A-Za-z0-9_+.-]+(?:,[A-Za-z0-9_+.-]+)*$")


def _find_close(lines: Sequence[str], start: int) -> Optional[int]:
    marker = parse_fence(lines[start])
    if marker is None:
        return None
    for j in range(start + 1, len(lines)):
        if closes_fence(lines[j], marker):
            return j
    return None


def compress_fences(lines: Sequence[str]) -> List[str]:
    """Shorten backtick fences to exactly three backticks.

    Indentation and the language list are kept. A block whose body itself
    contains a backtick fence is left alone so the nesting survives.
    """
    out = list(lines)
    i = 0
    while i < len(out):
        if parse_fence(out[i]) is None:
            i += 1
            continue
        end = _find_close(out, i)
        m = _backtick_fence_re.match(out[i])
        body = out[i + 1 : end] if end is not None else out[i + 1 :]
        if m and not any(line.lstrip().startswith("```") for line in body):
            indent, lang = m.group(1), m.group(2)
            out[i] = f"{indent}```{lang}"
            if end is not None:
                out[end] = f"{out[end][: len(out[end]) - len(out[end].lstrip())]}```"
        i = end + 1 if end is not None else len(out)
    return out


def attach_orphan_specifiers(lines: Sequence[str]) -> List[str]:
    """Move a lone language word on the line before a bare opening fence onto the fence."""
    out: List[str] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if parse_fence(line) is None:
            out.append(line)
            i += 1
            continue
        end = _find_close(lines, i)
        if line.strip() == "```":
            idx = len(out) - 1
            while idx >= 0 and not out[idx].strip():
                idx -= 1
            standalone = idx >= 0 and (idx == 0 or not out[idx - 1].strip())
            if standalone and _orphan_lang_re.match(out[idx].strip()):
                lang = out[idx].strip()
                indent = line[: len(line) - len(line.lstrip())]
                del out[idx:]
                line = f"{indent}```{lang}"
        stop = end + 1 if end is not None else len(lines)
        out.append(line)
        out.extend(lines[i + 1 : stop])
        i = stop
    return out
