"""Render orchestration for texrender.

A :class:`Renderer` stages a :class:`~texrender.models.Document` into a fresh
directory, runs the configured preprocessors and processor there, and hands
back the generated file either as bytes or as a copy at a destination path.

Every step returns an :class:`~texrender.models.Outcome`; the first failure
short-circuits the rest. ``render_or_fail`` and ``write_or_fail`` raise
:class:`~texrender.models.ProcessingError` instead.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from texrender.compiler import preprocess, process, resolve_processor, tex_basename
from texrender.config import ProcessingConfig, ProcessingOptions
from texrender.logger import logger
from texrender.models import Document, Outcome
from texrender.staging import copy_includes, create_staging_directory, stage_source


class UnsupportedFormatError(ValueError):
    """Raised when a destination extension has no configured processor."""


def source(
    text: str | None = None,
    *,
    path: Path | str | None = None,
    include: list[Path | str] | tuple[Path | str, ...] | Path | str = (),
) -> Document:
    """Define a document from raw TeX text, or from a .tex file plus includes."""

    if isinstance(include, (str, Path)):
        include = (include,)
    return Document(
        source=text,
        source_path=Path(path) if path is not None else None,
        include=tuple(Path(item) for item in include),
    )


def parse_format(path: Path | str) -> str | None:
    suffix = Path(path).suffix
    if not suffix:
        return None
    return suffix[1:]


class Renderer:
    """Runs the staging, preprocess and process pipeline against one config."""

    def __init__(self, config: ProcessingConfig | None = None) -> None:
        self.config = config or ProcessingConfig()

    def infer_format(self, path: Path | str) -> str:
        """Format token for a destination path, e.g. ``out.pdf`` -> ``pdf``."""

        format_name = parse_format(path)
        if format_name is None or format_name not in self.config.supported_formats:
            raise UnsupportedFormatError(f"Unsupported format: {format_name}")
        return format_name

    def process(self, doc: Document, format_name: str, options: ProcessingOptions | None = None) -> Outcome:
        """Produce the output file; the outcome value is doc with output_path set."""

        options = options or ProcessingOptions()

        if not doc.has_source:
            return Outcome.failure("No :source or :source_path provided")

        created = create_staging_directory(self.config.temp_prefix)
        if not created.ok:
            return created
        directory: Path = created.value

        staged = stage_source(doc, directory)
        if not staged.ok:
            return staged
        staged_path: Path = staged.value

        resolved = resolve_processor(format_name, options, self.config)
        if not resolved.ok:
            return resolved

        included = copy_includes(directory, doc.include)
        if not included.ok:
            return included

        preprocessors = options.preprocess if options.preprocess is not None else self.config.preprocess
        preprocessed = preprocess(tex_basename(staged_path), directory, preprocessors, self.config)
        if not preprocessed.ok:
            return preprocessed

        return process(doc, format_name, resolved.value, staged_path, self.config)

    def render(self, doc: Document, format_name: str, options: ProcessingOptions | None = None) -> Outcome:
        """Generate the document and return its content as bytes."""

        processed = self.process(doc, format_name, options)
        if not processed.ok:
            return processed
        return read_output(processed.value)

    def render_or_fail(self, doc: Document, format_name: str, options: ProcessingOptions | None = None) -> bytes:
        return self.render(doc, format_name, options).unwrap()

    def write(self, doc: Document, destination: Path | str, options: ProcessingOptions | None = None) -> Outcome:
        """Generate the document into destination; the format comes from its extension."""

        destination = Path(destination)
        try:
            format_name = self.infer_format(destination)
        except UnsupportedFormatError as exc:
            return Outcome.failure(str(exc))

        processed = self.process(doc, format_name, options)
        if not processed.ok:
            return processed

        output_path: Path = processed.value.output_path
        try:
            shutil.copyfile(output_path, destination)
        except OSError as exc:
            return Outcome.failure(str(exc))

        logger.info(f"Wrote {destination}")
        return Outcome.success()

    def write_or_fail(self, doc: Document, destination: Path | str, options: ProcessingOptions | None = None) -> None:
        self.write(doc, destination, options).unwrap()


def read_output(doc: Document) -> Outcome:
    if doc.output_path is None:
        return Outcome.failure("Could not read generated document at path: None")
    try:
        return Outcome.success(doc.output_path.read_bytes())
    except OSError:
        return Outcome.failure(f"Could not read generated document at path: {doc.output_path}")


_default_renderer = Renderer()


def render(doc: Document, format_name: str, options: ProcessingOptions | None = None) -> Outcome:
    return _default_renderer.render(doc, format_name, options)


def render_or_fail(doc: Document, format_name: str, options: ProcessingOptions | None = None) -> bytes:
    return _default_renderer.render_or_fail(doc, format_name, options)


def write(doc: Document, destination: Path | str, options: ProcessingOptions | None = None) -> Outcome:
    return _default_renderer.write(doc, destination, options)


def write_or_fail(doc: Document, destination: Path | str, options: ProcessingOptions | None = None) -> None:
    _default_renderer.write_or_fail(doc, destination, options)
