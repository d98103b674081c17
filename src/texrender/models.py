"""Domain models used by texrender."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProcessingError(RuntimeError):
    """Raised by the raising API tier when document processing fails."""


class Document(BaseModel):
    """One render request: raw TeX or a source file, plus include files."""

    model_config = ConfigDict(frozen=True)

    source: str | None = None
    source_path: Path | None = None
    include: tuple[Path, ...] = Field(default_factory=tuple)
    format: str | None = None
    output_path: Path | None = None

    @model_validator(mode="after")
    def validate_single_source(self) -> "Document":
        if self.source is not None and self.source_path is not None:
            raise ValueError("source and source_path are mutually exclusive")
        return self

    @property
    def has_source(self) -> bool:
        return self.source is not None or self.source_path is not None


class Outcome(BaseModel):
    """Success or failure of a processing step.

    A failed outcome carries a descriptive ``error`` message and no value.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    value: Any = None
    error: str | None = None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "Outcome":
        return cls(ok=False, error=error)

    def unwrap(self) -> Any:
        """Return the value, or raise ProcessingError with the failure message."""

        if not self.ok:
            raise ProcessingError(self.error)
        return self.value
