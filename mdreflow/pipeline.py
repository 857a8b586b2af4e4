from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .convert.stream import ReflowOptions, reflow
from .utils.io import FileProcessingError, join_lines, read_text_file, split_lines, write_text_file
from .utils.logging import get_logger


@dataclass
class RunConfig:
    files: List[Path] = field(default_factory=list)
    in_place: bool = False
    options: ReflowOptions = field(default_factory=ReflowOptions)
    workers: Optional[int] = None  # None=executor default


@dataclass
class FileResult:
    path: Path
    output: Optional[str] = None
    error: Optional[FileProcessingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def reflow_text(text: str, options: Optional[ReflowOptions] = None) -> str:
    return join_lines(reflow(split_lines(text), options))


def process_file(path: Path, options: Optional[ReflowOptions] = None, in_place: bool = False) -> Optional[str]:
    """Reflow one file; returns the new text, or None once written back in place."""
    logger = get_logger()
    text = read_text_file(path)
    fixed = reflow_text(text, options)
    if in_place:
        written = write_text_file(path, fixed)
        logger.debug(f"Rewrote {written.path} ({written.bytes_written} bytes)")
        return None
    return fixed


def _run_one(path: Path, cfg: RunConfig) -> FileResult:
    try:
        return FileResult(path=path, output=process_file(path, cfg.options, cfg.in_place))
    except FileProcessingError as e:
        return FileResult(path=path, error=e)


def run(cfg: RunConfig) -> List[FileResult]:
    """Process every file on a worker pool; results keep the input order."""
    logger = get_logger()
    if not cfg.files:
        return []
    with ThreadPoolExecutor(max_workers=cfg.workers) as pool:
        results = list(pool.map(lambda p: _run_one(p, cfg), cfg.files))
    for res in results:
        if res.error is not None:
            logger.error(str(res.error))
    failed = sum(1 for r in results if not r.ok)
    logger.debug(f"Processed {len(results)} file(s), {failed} failed")
    return results


def exit_code(results: List[FileResult]) -> int:
    return 1 if any(not r.ok for r in results) else 0
