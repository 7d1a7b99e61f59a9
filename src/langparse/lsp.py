"""Minimal LSP server for langparse, diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from langparse import __version__
from langparse.diagnostics import Severity
from langparse.parser import parse
from langparse.sourcemap import SourceMap
from langparse.tokens import Span

server = LanguageServer(
    "langparse-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)

_SEVERITIES: dict[Severity, DiagnosticSeverity] = {
    Severity.ERROR: DiagnosticSeverity.Error,
    Severity.WARNING: DiagnosticSeverity.Warning,
    Severity.INFO: DiagnosticSeverity.Information,
}


def _position(source_map: SourceMap, offset: int) -> Position:
    """Convert a code-point offset to a position counted in UTF-16 code units."""
    loc = source_map.span_to_loc(Span(offset, offset))
    column = loc.column - 1
    prefix = source_map.line_text(loc.line)[:column]
    # Columns past the line text (terminators, end of input) count one unit each
    character = len(prefix.encode("utf-16-le")) // 2 + column - len(prefix)
    return Position(line=loc.line - 1, character=character)


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish every diagnostic."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    source_map = SourceMap(filename, source)

    result = parse(source, filename)
    diagnostics = [
        Diagnostic(
            range=Range(
                start=_position(source_map, d.span.start),
                end=_position(source_map, d.span.end),
            ),
            message=d.message,
            severity=_SEVERITIES[d.severity],
            source="langparse",
        )
        for d in result.diagnostics
    ]

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
