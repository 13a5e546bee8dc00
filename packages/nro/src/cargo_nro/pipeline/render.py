from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cargo_nro.core.errors import MalformedDiagnosticError
from rich.console import Console
from rich.text import Text


@dataclass(frozen=True, slots=True)
class RenderedDiagnostic:
    """
    Printable parts of one compiler diagnostic. `level` is kept so callers can
    count errors separately from warnings.
    """

    rendered: str
    children: tuple[str, ...]
    level: str | None = None


def _child_line(child: Any) -> str:
    if isinstance(child, dict):
        level = child.get("level")
        message = child.get("message")
        if isinstance(message, str):
            return f"  {level}: {message}" if level else f"  {message}"
    return f"  {child!r}"


def render_diagnostic(message: Any) -> RenderedDiagnostic:
    """
    Extract the human-readable parts of a rustc diagnostic payload.

    Raises MalformedDiagnosticError unless `message` is an object with a string
    `rendered` field. A missing `children` list renders as no children.
    """
    if not isinstance(message, dict):
        raise MalformedDiagnosticError(
            f"compiler message is not an object: {message!r}"
        )
    rendered = message.get("rendered")
    if not isinstance(rendered, str):
        raise MalformedDiagnosticError(
            f"compiler message has no rendered text: {rendered!r}"
        )

    children = message.get("children")
    if children is None:
        children = []
    if not isinstance(children, list):
        raise MalformedDiagnosticError(
            f"compiler message children is not a list: {children!r}"
        )

    level = message.get("level")
    return RenderedDiagnostic(
        rendered=rendered,
        children=tuple(_child_line(c) for c in children),
        level=level if isinstance(level, str) else None,
    )


def print_diagnostic(console: Console, diag: RenderedDiagnostic) -> None:
    # rustc may embed ANSI colour codes in `rendered`
    console.print(
        Text.from_ansi(diag.rendered.rstrip("\n")), highlight=False, soft_wrap=True
    )
    for line in diag.children:
        console.print(line, markup=False, highlight=False, soft_wrap=True)
