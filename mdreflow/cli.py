from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional

import typer

from .version import __version__
from .utils.logging import get_logger, setup_logger
from .convert.stream import ReflowOptions
from .convert.wrap import WRAP_COLS
from .pipeline import RunConfig, exit_code, reflow_text, run


app = typer.Typer(add_completion=False, help="Reflow broken Markdown tables and wrap paragraphs.")


@app.command()
def main(
    files: Optional[List[Path]] = typer.Argument(None, help="Markdown files to fix; stdin when omitted", show_default=False),
    in_place: bool = typer.Option(False, "--in-place", help="Rewrite files in place"),
    wrap: bool = typer.Option(False, "--wrap", help="Wrap paragraphs and list items"),
    renumber: bool = typer.Option(False, "--renumber", help="Renumber ordered list items"),
    breaks: bool = typer.Option(False, "--breaks", help="Reformat thematic breaks as underscores"),
    ellipsis: bool = typer.Option(False, "--ellipsis", help='Replace "..." with the ellipsis character'),
    fences: bool = typer.Option(False, "--fences", help="Normalise fence delimiters to three backticks"),
    footnotes: bool = typer.Option(False, "--footnotes", help="Convert bare numeric references to footnote links"),
    headings: bool = typer.Option(False, "--headings", help="Convert Setext headings to ATX headings"),
    code_emphasis: bool = typer.Option(False, "--code-emphasis", help="Fix emphasis markers glued to inline code"),
    width: int = typer.Option(WRAP_COLS, "--width", min=1, help="Wrap width in display columns"),
    keep_alignment: bool = typer.Option(False, "--keep-alignment", help="Keep :--- alignment markers in separators"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Worker threads for multiple files"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    version: bool = typer.Option(False, "--version", help="Print version and exit"),
):
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if in_place and not files:
        raise typer.BadParameter("--in-place requires at least one file", param_hint="--in-place")

    setup_logger(log_level)
    options = ReflowOptions(
        wrap=wrap,
        renumber=renumber,
        breaks=breaks,
        ellipsis=ellipsis,
        fences=fences,
        footnotes=footnotes,
        headings=headings,
        code_emphasis=code_emphasis,
        width=width,
        keep_alignment=keep_alignment,
    )

    if not files:
        try:
            text = sys.stdin.read()
        except UnicodeDecodeError as e:
            get_logger().error(f"<stdin>: {e}")
            raise typer.Exit(code=1)
        typer.echo(reflow_text(text, options), nl=False)
        return

    cfg = RunConfig(files=list(files), in_place=in_place, options=options, workers=workers)
    results = run(cfg)
    for res in results:
        if res.output is not None:
            typer.echo(res.output, nl=False)
    code = exit_code(results)
    if code:
        raise typer.Exit(code=code)


def entrypoint():
    app()

if __name__ == "__main__":
    entrypoint()
