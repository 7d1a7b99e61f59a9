"""Diagnostic construction, formatting, and output sinks."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TextIO

from langparse.sourcemap import Location, SourceMap
from langparse.tokens import Span

RESET = "\x1b[0m"
RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
BLUE = "\x1b[34m"
CYAN = "\x1b[36m"


class Severity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_SEVERITY_COLORS: dict[Severity, str] = {
    Severity.INFO: GREEN,
    Severity.WARNING: YELLOW,
    Severity.ERROR: RED,
}


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single emitted message with its span resolved to a location."""

    severity: Severity
    message: str
    span: Span
    location: Location

    def format(self, color: bool = False) -> str:
        """Render the two-line form: message, then location arrow."""
        if color:
            head = f"{_SEVERITY_COLORS[self.severity]}{self.severity.value}: {RESET}{self.message}"
            arrow = f"  {CYAN}--> {BLUE}{self.location}{RESET}"
        else:
            head = f"{self.severity.value}: {self.message}"
            arrow = f"  --> {self.location}"
        return f"{head}\n{arrow}"

    def __str__(self) -> str:
        return self.format()


def format_snippet(diag: Diagnostic, source_map: SourceMap) -> str:
    """Source line with a caret underline beneath the diagnostic span."""
    line = diag.location.line
    col = diag.location.column
    source_line = source_map.line_text(line)

    # Underline the span while it stays on this line, at least one caret
    underline_len = max(1, min(len(diag.span), len(source_line) - col + 1))

    line_num = str(line)
    gutter_width = len(line_num) + 1
    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {' ' * (col - 1)}{'^' * underline_len}"
    )


class DiagnosticSink(Protocol):
    def write(self, diagnostic: Diagnostic, source_map: SourceMap) -> None: ...


class StreamSink:
    """Write diagnostics to a text stream, stderr by default."""

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        color: bool | None = None,
        source_context: bool = False,
    ) -> None:
        self._stream = stream if stream is not None else sys.stderr
        if color is None:
            color = self._stream.isatty()
        self._color = color
        self._source_context = source_context

    def write(self, diagnostic: Diagnostic, source_map: SourceMap) -> None:
        self._stream.write(diagnostic.format(self._color) + "\n")
        if self._source_context:
            self._stream.write(format_snippet(diagnostic, source_map) + "\n")


class MemorySink:
    """Collect diagnostics and their uncolored text in memory."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []
        self._chunks: list[str] = []

    def write(self, diagnostic: Diagnostic, source_map: SourceMap) -> None:
        self.diagnostics.append(diagnostic)
        self._chunks.append(diagnostic.format() + "\n")

    @property
    def text(self) -> str:
        return "".join(self._chunks)


class DiagnosticBuilder:
    """Fluent construction of one diagnostic; nothing is written until emit()."""

    def __init__(self, emitter: DiagnosticEmitter, severity: Severity) -> None:
        self._emitter = emitter
        self._severity = severity
        self._label = ""
        self._span = Span(0, 0)

    def with_severity(self, severity: Severity) -> DiagnosticBuilder:
        self._severity = severity
        return self

    def with_label(self, label: object) -> DiagnosticBuilder:
        self._label = str(label)
        return self

    def with_span(self, span: Span) -> DiagnosticBuilder:
        self._span = span
        return self

    def with_eoi_span(self) -> DiagnosticBuilder:
        self._span = self._emitter.source_map.eoi_span()
        return self

    def emit(self) -> Diagnostic:
        return self._emitter.emit(self._severity, self._label, self._span)


class DiagnosticEmitter:
    """Resolve spans and forward diagnostics to a sink for one compilation unit.

    Every emitted diagnostic is also retained in :attr:`diagnostics`. The
    error flag is sticky: once an error is emitted it is never cleared.
    """

    def __init__(self, source_map: SourceMap, sink: DiagnosticSink | None = None) -> None:
        self.source_map = source_map
        self._sink = sink if sink is not None else StreamSink()
        self.diagnostics: list[Diagnostic] = []
        self._has_error = False

    @property
    def has_error(self) -> bool:
        return self._has_error

    def info(self) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, Severity.INFO)

    def warning(self) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, Severity.WARNING)

    def error(self) -> DiagnosticBuilder:
        return DiagnosticBuilder(self, Severity.ERROR)

    def emit(self, severity: Severity, label: str, span: Span) -> Diagnostic:
        location = self.source_map.span_to_loc(span)
        diag = Diagnostic(severity, label, span, location)
        self.diagnostics.append(diag)
        if severity is Severity.ERROR:
            self._has_error = True
        self._sink.write(diag, self.source_map)
        return diag
