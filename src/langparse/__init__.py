"""Lexer and parser front end for a small structured language."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from langparse.diagnostics import DiagnosticSink
    from langparse.parser import ParseResult

__version__ = "0.1.0"


def parse(
    source: str,
    filename: str = "input.lang",
    sink: DiagnosticSink | None = None,
    max_depth: int | None = None,
) -> ParseResult:
    """Lex and parse source text into top-level expressions plus diagnostics."""
    from langparse.parser import DEFAULT_MAX_DEPTH
    from langparse.parser import parse as _parse

    if max_depth is None:
        max_depth = DEFAULT_MAX_DEPTH
    return _parse(source, filename, sink=sink, max_depth=max_depth)
