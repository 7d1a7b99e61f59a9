"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from langparse.debug import format_expr
from langparse.errors import LexError
from langparse.lexer import Lexer, tokenize
from langparse.parser import ParseResult, parse
from langparse.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns the token list."""

    def _lex(source: str) -> list[Token]:
        return tokenize(source)

    return _lex


@pytest.fixture
def lex_errors():
    """Return a helper that tokenizes source and returns (tokens, errors)."""

    def _lex(source: str) -> tuple[list[Token], list[LexError]]:
        lexer = Lexer(source)
        tokens = list(lexer)
        return tokens, lexer.take_errors()

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a ParseResult."""

    def _parse(source: str, filename: str = "test.lang") -> ParseResult:
        return parse(source, filename)

    return _parse


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def shapes(result: ParseResult) -> list[str]:
    """Compact span-free rendering of every top-level expression."""
    return [format_expr(e) for e in result.exprs]


def single(source: str) -> str:
    """Parse *source* cleanly and return its only top-level expression, rendered."""
    result = parse(source, "test.lang")
    assert not result.diagnostics, "\n".join(str(d) for d in result.diagnostics)
    assert len(result.exprs) == 1, shapes(result)
    return format_expr(result.exprs[0])


def error_count(source: str) -> int:
    """Number of error diagnostics produced for *source*."""
    return sum(1 for d in parse(source, "test.lang").diagnostics if d.severity.value == "error")
