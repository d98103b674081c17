"""Configuration models for texrender."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

NONSTOP_MODE = "-interaction=nonstopmode"

DEFAULT_PROCESSORS = {
    "pdf": "pdflatex",
    "dvi": "latex",
}

DEFAULT_ARGS = {
    "latex": [NONSTOP_MODE],
    "pdflatex": [NONSTOP_MODE],
    "xelatex": [NONSTOP_MODE],
    "lualatex": [NONSTOP_MODE],
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ProcessingConfig(BaseModel):
    """Format-to-processor table and defaults shared by every render."""

    model_config = ConfigDict(frozen=True)

    processors: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_PROCESSORS))
    preprocess: list[str] = Field(default_factory=list)
    default_args: dict[str, list[str]] = Field(
        default_factory=lambda: {name: list(args) for name, args in DEFAULT_ARGS.items()}
    )
    temp_prefix: str = Field(default="texrender", min_length=1)
    verify_output: bool = True

    @field_validator("processors")
    @classmethod
    def validate_processors(cls, value: dict[str, str]) -> dict[str, str]:
        for format_name, executable in value.items():
            if not format_name or not executable:
                raise ValueError("processor entries need a non-empty format and executable")
        return value

    @property
    def supported_formats(self) -> list[str]:
        return list(self.processors)

    def processor_for(self, format_name: str | None) -> str | None:
        if format_name is None:
            return None
        return self.processors.get(format_name)

    def args_for(self, executable: str) -> list[str]:
        """Default arguments placed before the base name for an executable.

        Full paths such as /usr/bin/pdflatex fall back to their file name.
        """

        args = self.default_args.get(executable)
        if args is None:
            args = self.default_args.get(Path(executable).name, [])
        return list(args)

    @classmethod
    def from_env(cls) -> "ProcessingConfig":
        """Build a config from TEXRENDER_* variables, reading a .env file first."""

        load_dotenv()

        values: dict[str, object] = {}

        raw_processors = os.getenv("TEXRENDER_PROCESSORS")
        if raw_processors:
            processors: dict[str, str] = {}
            for entry in _split_list(raw_processors):
                format_name, sep, executable = entry.partition("=")
                if not sep:
                    raise ValueError(f"Invalid TEXRENDER_PROCESSORS entry '{entry}', expected format=executable")
                processors[format_name.strip()] = executable.strip()
            values["processors"] = processors

        raw_preprocess = os.getenv("TEXRENDER_PREPROCESS")
        if raw_preprocess is not None:
            values["preprocess"] = _split_list(raw_preprocess)

        temp_prefix = os.getenv("TEXRENDER_TEMP_PREFIX")
        if temp_prefix:
            values["temp_prefix"] = temp_prefix

        verify_output = os.getenv("TEXRENDER_VERIFY_OUTPUT")
        if verify_output is not None:
            values["verify_output"] = verify_output.strip().lower() in _TRUE_VALUES

        return cls(**values)


class ProcessingOptions(BaseModel):
    """Per-call overrides; unset fields fall back to the ProcessingConfig."""

    preprocess: list[str] | None = None
    processor: str | None = None


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]
