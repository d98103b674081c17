"""Invoke external TeX toolchain commands against a staged source."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from texrender.config import ProcessingConfig, ProcessingOptions
from texrender.logger import logger
from texrender.models import Document, Outcome


@dataclass(frozen=True)
class CommandResult:
    """Exit status and combined stdout/stderr of one external command."""

    executable: str
    returncode: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


def run_command(executable: str, basename: str, directory: Path, config: ProcessingConfig) -> Outcome:
    """Run executable with its default args and basename, inside directory.

    Blocks until the command exits. The outcome value is a CommandResult; the
    outcome only fails when the executable could not be launched at all.
    """

    command = [executable, *config.args_for(executable), basename]
    logger.info(f"Running {' '.join(command)} in {directory}")

    try:
        process = subprocess.run(
            command,
            cwd=directory,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as exc:
        logger.error(f"Could not execute {executable}: {exc}")
        return Outcome.failure(f"Could not execute {executable}: {exc}")

    result = CommandResult(executable=executable, returncode=process.returncode, output=process.stdout or "")
    logger.debug(f"{executable} exited with status {result.returncode}")
    if result.output:
        logger.debug(result.output)
    return Outcome.success(result)


def tex_basename(path: Path) -> str:
    """File name without a trailing .tex extension."""

    return path.stem if path.suffix == ".tex" else path.name


def resolve_processor(
    format_name: str | None, options: ProcessingOptions, config: ProcessingConfig
) -> Outcome:
    """Pick the processor executable from per-call options or the config table."""

    processor = options.processor or config.processor_for(format_name)
    if not processor:
        return Outcome.failure(f"Could not find processor for format: {format_name}")
    return Outcome.success(processor)


def preprocess(basename: str, directory: Path, preprocessors: list[str], config: ProcessingConfig) -> Outcome:
    """Run each preprocessor in order; the first non-zero exit stops the pipeline."""

    for preprocessor in preprocessors:
        launched = run_command(preprocessor, basename, directory, config)
        if not launched.ok:
            return launched

        result: CommandResult = launched.value
        if not result.succeeded:
            logger.error(f"Preprocessing with {result.executable} failed (status {result.returncode})")
            return Outcome.failure(f"Preprocessing with {preprocessor} failed with output: {result.output}")

    return Outcome.success()


def process(
    doc: Document,
    format_name: str,
    processor: str,
    staged_path: Path,
    config: ProcessingConfig,
) -> Outcome:
    """Run the processor and return a copy of doc pointing at its output file."""

    directory = staged_path.parent
    basename = tex_basename(staged_path)
    output_path = directory / f"{basename}.{format_name}"

    launched = run_command(processor, basename, directory, config)
    if not launched.ok:
        return launched

    result: CommandResult = launched.value
    if not result.succeeded:
        logger.error(f"Processing with {result.executable} failed (status {result.returncode})")
        return Outcome.failure(f"Processing failed with output: {result.output}")

    if config.verify_output and not output_path.is_file():
        logger.error(f"Expected output not found: {output_path}")
        return Outcome.failure(f"Processor {processor} did not produce expected output at path: {output_path}")

    return Outcome.success(doc.model_copy(update={"format": format_name, "output_path": output_path}))
