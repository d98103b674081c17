"""Typer CLI entrypoint for texrender."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError

from texrender.builder import Renderer, UnsupportedFormatError, source
from texrender.config import ProcessingConfig, ProcessingOptions
from texrender.logger import setup_logger

app = typer.Typer(help="Render TeX sources through an external typesetting toolchain.", no_args_is_help=True)


def _load_config() -> ProcessingConfig:
    try:
        return ProcessingConfig.from_env()
    except (ValidationError, ValueError) as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc


@app.callback()
def main() -> None:
    """texrender command group."""


@app.command()
def render(
    source_file: Path = typer.Argument(..., exists=True, readable=True, dir_okay=False),
    output: Path = typer.Option(..., "--output", "-o", dir_okay=False),
    include: list[Path] = typer.Option([], "--include", "-i", exists=True, dir_okay=False),
    preprocess: list[str] = typer.Option([], "--preprocess", "-p"),
    processor: str | None = typer.Option(None),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Render SOURCE_FILE to OUTPUT; the format comes from OUTPUT's extension."""

    setup_logger(verbose)
    renderer = Renderer(_load_config())

    try:
        renderer.infer_format(output)
    except UnsupportedFormatError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    options = ProcessingOptions(preprocess=preprocess or None, processor=processor)
    output.parent.mkdir(parents=True, exist_ok=True)

    outcome = renderer.write(source(path=source_file, include=include), output, options)
    if not outcome.ok:
        typer.echo(f"Render failed: {outcome.error}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Output: {output}")


@app.command()
def formats() -> None:
    """List configured output formats and their processors."""

    config = _load_config()
    for format_name, executable in config.processors.items():
        typer.echo(f"{format_name}: {executable}")
