"""Lexical error values and the internal invariant error."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from langparse.tokens import Span


class LexErrorKind(Enum):
    INVALID_ESCAPE = auto()
    UNTERMINATED_STRING = auto()
    UNTERMINATED_CHAR = auto()
    INVALID_CHAR_LITERAL = auto()
    INTEGER_OVERFLOW = auto()


@dataclass(frozen=True, slots=True)
class LexError:
    """A recoverable lexing problem, handed to the parser for reporting."""

    kind: LexErrorKind
    message: str
    span: Span


class InternalParserError(Exception):
    """Raised when a parser invariant is violated. Always a bug, never user input."""
