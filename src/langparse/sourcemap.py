"""Line index over source text for offset to line/column resolution."""

from __future__ import annotations

from dataclasses import dataclass

from langparse.tokens import Span


@dataclass(frozen=True, slots=True)
class Location:
    """A resolved source location, 1-based line and column."""

    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


class SourceMap:
    """Immutable partition of a source text into line ranges.

    Each range is half-open and ends just after its newline; a final line
    without a trailing newline is still included.
    """

    def __init__(self, file: str, text: str) -> None:
        self._file = file
        self._text = text
        lines: list[Span] = []
        start = 0
        while start < len(text):
            nl = text.find("\n", start)
            end = len(text) if nl == -1 else nl + 1
            lines.append(Span(start, end))
            start = end
        self._lines = tuple(lines)

    @property
    def file(self) -> str:
        return self._file

    @property
    def text(self) -> str:
        return self._text

    @property
    def lines(self) -> tuple[Span, ...]:
        return self._lines

    def span_to_loc(self, span: Span) -> Location:
        """Resolve the start of *span* to a 1-based (line, column)."""
        for i, line in enumerate(self._lines):
            if line.start <= span.start < line.end:
                return Location(self._file, i + 1, span.start - line.start + 1)
        if not self._lines:
            return Location(self._file, 1, span.start + 1)
        # Only reachable for a span at end of input
        last = self._lines[-1]
        return Location(self._file, len(self._lines), span.start - last.start + 1)

    def eoi_span(self) -> Span:
        """Empty span at the end of the final line."""
        if not self._lines:
            return Span(0, 0)
        end = self._lines[-1].end
        return Span(end, end)

    def line_text(self, line: int) -> str:
        """Text of a 1-based line without its line terminator."""
        if not 1 <= line <= len(self._lines):
            return ""
        span = self._lines[line - 1]
        return self._text[span.start : span.end].rstrip("\n").rstrip("\r")
