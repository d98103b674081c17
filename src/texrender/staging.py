"""Staging of TeX sources and include files into throwaway directories."""

from __future__ import annotations

import atexit
import shutil
import tempfile
from pathlib import Path

from texrender.logger import logger
from texrender.models import Document, Outcome

RAW_SOURCE_NAME = "document.tex"

_staging_directories: list[Path] = []


def _cleanup_staging_directories() -> None:
    while _staging_directories:
        shutil.rmtree(_staging_directories.pop(), ignore_errors=True)


atexit.register(_cleanup_staging_directories)


def create_staging_directory(prefix: str) -> Outcome:
    """Create a uniquely named directory that is removed at interpreter exit."""

    try:
        directory = Path(tempfile.mkdtemp(prefix=f"{prefix}-"))
    except OSError as exc:
        logger.error(f"Could not create temporary directory: {exc}")
        return Outcome.failure("Could not create temporary location")

    _staging_directories.append(directory)
    logger.debug(f"Created staging directory {directory}")
    return Outcome.success(directory)


def stage_source(doc: Document, directory: Path) -> Outcome:
    """Write or copy the document source into directory; value is the staged path."""

    if doc.source is not None:
        path = directory / RAW_SOURCE_NAME
        try:
            path.write_text(doc.source, encoding="utf-8")
        except OSError:
            return Outcome.failure(f"Could not write to temporary file at path: {path}")
        return Outcome.success(path)

    if doc.source_path is not None:
        path = directory / doc.source_path.name
        try:
            shutil.copyfile(doc.source_path, path)
        except OSError:
            return Outcome.failure(
                f"Could not copy source file at path {doc.source_path} to temporary file at path: {path}"
            )
        return Outcome.success(path)

    return Outcome.failure("No :source or :source_path provided")


def copy_includes(directory: Path, includes: tuple[Path, ...] | list[Path]) -> Outcome:
    """Copy include files into directory in order, stopping at the first failure."""

    for include in includes:
        include = Path(include)
        try:
            shutil.copyfile(include, directory / include.name)
        except OSError:
            return Outcome.failure(f"Could not copy included file: {include}")
        logger.debug(f"Staged include {include}")
    return Outcome.success()
