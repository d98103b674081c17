"""Jinja2 templating for raw TeX document sources."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined

from texrender.models import Document

_LATEX_ESCAPE_MAP = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


class RawTeX(str):
    """String inserted into a template without escaping."""


def raw(value: Any) -> RawTeX:
    return RawTeX(value)


def latex_escape(value: str) -> str:
    """Escape LaTeX special characters in user/content text."""

    return "".join(_LATEX_ESCAPE_MAP.get(char, char) for char in value)


def _finalize(value: Any) -> Any:
    if isinstance(value, RawTeX):
        return str(value)
    if isinstance(value, str):
        return latex_escape(value)
    return value


def _environment() -> Environment:
    environment = Environment(
        block_start_string=r"\BLOCK{",
        block_end_string="}",
        variable_start_string=r"\VAR{",
        variable_end_string="}",
        comment_start_string=r"\#{",
        comment_end_string="}",
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
        finalize=_finalize,
    )
    environment.filters["raw"] = raw
    environment.filters["latex"] = lambda value: RawTeX(latex_escape(str(value)))
    return environment


def render_template(template: str, **assigns: Any) -> str:
    """Render a TeX template; string values are escaped unless marked raw.

    Delimiters avoid TeX braces: ``\\VAR{name}`` inserts a value,
    ``\\BLOCK{for x in xs}`` ... ``\\BLOCK{endfor}`` controls flow and
    ``\\#{...}`` is a comment.
    """

    return _environment().from_string(template).render(**assigns)


def source_from_template(template: str, **assigns: Any) -> Document:
    return Document(source=render_template(template, **assigns))


def source_from_template_file(path: Path | str, **assigns: Any) -> Document:
    template = Path(path).read_text(encoding="utf-8")
    return source_from_template(template, **assigns)
