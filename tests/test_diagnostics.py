"""Test diagnostic building, formatting, and sinks."""

from __future__ import annotations

import io

from langparse.diagnostics import (
    CYAN,
    RED,
    RESET,
    YELLOW,
    DiagnosticEmitter,
    MemorySink,
    Severity,
    StreamSink,
)
from langparse.sourcemap import SourceMap
from langparse.tokens import Span


def make_emitter(text: str = "a = 1;\nb = ;\n", sink=None) -> tuple[DiagnosticEmitter, MemorySink]:
    sink = sink if sink is not None else MemorySink()
    return DiagnosticEmitter(SourceMap("test.lang", text), sink), sink


class TestBuilder:
    def test_error_two_lines(self):
        emitter, sink = make_emitter()
        emitter.error().with_label("expected a number").with_span(Span(11, 12)).emit()
        assert sink.text == "error: expected a number\n  --> test.lang:2:5\n"

    def test_warning_and_info(self):
        emitter, sink = make_emitter()
        emitter.warning().with_label("careful").with_span(Span(0, 1)).emit()
        emitter.info().with_label("note").with_span(Span(4, 5)).emit()
        assert sink.text.splitlines() == [
            "warning: careful",
            "  --> test.lang:1:1",
            "info: note",
            "  --> test.lang:1:5",
        ]

    def test_eoi_span(self):
        emitter, sink = make_emitter("x = 1")
        diag = emitter.error().with_label("expected ';' but found end of input").with_eoi_span().emit()
        assert diag.span == Span(5, 5)
        assert "test.lang:1:6" in sink.text

    def test_with_severity_overrides(self):
        emitter, sink = make_emitter()
        emitter.error().with_severity(Severity.WARNING).with_label("x").emit()
        assert sink.diagnostics[0].severity is Severity.WARNING
        assert not emitter.has_error

    def test_label_accepts_objects(self):
        emitter, sink = make_emitter()
        emitter.error().with_label(42).emit()
        assert sink.diagnostics[0].message == "42"


class TestStickyFlag:
    def test_error_sets_flag(self):
        emitter, _ = make_emitter()
        assert not emitter.has_error
        emitter.error().with_label("x").emit()
        emitter.info().with_label("y").emit()
        assert emitter.has_error

    def test_emitter_keeps_all_diagnostics(self):
        emitter, _ = make_emitter()
        emitter.error().with_label("x").emit()
        emitter.warning().with_label("y").emit()
        assert [d.message for d in emitter.diagnostics] == ["x", "y"]


class TestStreamSink:
    def test_uncolored(self):
        stream = io.StringIO()
        emitter, _ = make_emitter(sink=StreamSink(stream, color=False))
        emitter.error().with_label("boom").with_span(Span(0, 1)).emit()
        assert stream.getvalue() == "error: boom\n  --> test.lang:1:1\n"

    def test_colored(self):
        stream = io.StringIO()
        emitter, _ = make_emitter(sink=StreamSink(stream, color=True))
        emitter.error().with_label("boom").with_span(Span(0, 1)).emit()
        out = stream.getvalue()
        assert out.startswith(f"{RED}error: {RESET}boom")
        assert f"{CYAN}-->" in out

    def test_warning_color(self):
        stream = io.StringIO()
        emitter, _ = make_emitter(sink=StreamSink(stream, color=True))
        emitter.warning().with_label("hmm").emit()
        assert stream.getvalue().startswith(YELLOW)

    def test_auto_color_off_for_non_tty(self):
        stream = io.StringIO()
        emitter, _ = make_emitter(sink=StreamSink(stream))
        emitter.error().with_label("boom").emit()
        assert "\x1b[" not in stream.getvalue()

    def test_source_context(self):
        stream = io.StringIO()
        emitter, _ = make_emitter(sink=StreamSink(stream, color=False, source_context=True))
        emitter.error().with_label("bad").with_span(Span(11, 12)).emit()
        lines = stream.getvalue().splitlines()
        assert lines[2] == "  |"
        assert lines[3] == "2 | b = ;"
        assert lines[4] == "  |     ^"
