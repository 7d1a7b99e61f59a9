"""Lexer: pulls characters on demand and yields tokens with two-token lookahead."""

from __future__ import annotations

from enum import Enum

from langparse.errors import LexError, LexErrorKind
from langparse.tokens import (
    COMBINABLE_OPS,
    ESCAPES,
    KEYWORDS,
    QUOTES,
    SECOND_CHARS,
    SPECIAL_CHARS,
    U64_MAX,
    BinOp,
    Span,
    Token,
    TokenType,
)


class PeekCount(Enum):
    ONE = 1
    TWO = 2


class Lexer:
    """Tokenize source text lazily.

    Lexical problems never stop tokenization. They are recorded as
    :class:`LexError` values, drained by the consumer with
    :meth:`take_errors`, and set the sticky :attr:`has_error` flag.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._lookahead: list[Token | None] = []
        self._errors: list[LexError] = []
        self._has_error = False

    @property
    def has_error(self) -> bool:
        return self._has_error

    def take_errors(self) -> list[LexError]:
        """Return and clear the errors recorded since the last call."""
        errors = self._errors
        self._errors = []
        return errors

    # ------------------------------------------------------------------
    # Token interface
    # ------------------------------------------------------------------

    def peek(self, count: PeekCount = PeekCount.ONE) -> Token | None:
        """Return the next (or next-but-one) token without consuming it."""
        while len(self._lookahead) < count.value:
            self._lookahead.append(self._lex_token())
        return self._lookahead[count.value - 1]

    def next(self) -> Token | None:
        """Consume and return the next token, or None at end of input."""
        if self._lookahead:
            return self._lookahead.pop(0)
        return self._lex_token()

    def __iter__(self):
        while True:
            tok = self.next()
            if tok is None:
                return
            yield tok

    # ------------------------------------------------------------------
    # Character helpers
    # ------------------------------------------------------------------

    def _peek_char(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        return ch

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _error(self, kind: LexErrorKind, message: str, span: Span) -> None:
        self._errors.append(LexError(kind, message, span))
        self._has_error = True

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _lex_token(self) -> Token | None:
        while not self._at_end() and self._peek_char().isspace():
            self._advance()
        if self._at_end():
            return None

        ch = self._peek_char()
        if ch in SPECIAL_CHARS:
            return self._lex_special()
        if ch in QUOTES:
            return self._lex_quoted()
        return self._lex_word()

    def _lex_special(self) -> Token:
        start = self._pos
        ch = self._advance()
        tt, op = SPECIAL_CHARS[ch]
        second = self._peek_char()

        if tt == TokenType.BINOP and second in SECOND_CHARS:
            if second == "=" and op in COMBINABLE_OPS:
                self._advance()
                return Token(TokenType.BINOP_EQUALS, Span(start, self._pos), op)
            if second == ">" and op == BinOp.SUB:
                self._advance()
                return Token(TokenType.ARROW, Span(start, self._pos))

        return Token(tt, Span(start, self._pos), op)

    def _lex_quoted(self) -> Token:
        start = self._pos
        quote = self._advance()
        is_char = quote == "'"
        chars: list[str] = []

        while not self._at_end() and self._peek_char() != quote:
            ch = self._advance()
            if ch != "\\":
                chars.append(ch)
                continue
            if self._at_end():
                break
            esc_start = self._pos - 1
            esc = self._advance()
            if esc in ESCAPES:
                chars.append(ESCAPES[esc])
            else:
                self._error(
                    LexErrorKind.INVALID_ESCAPE,
                    f"invalid escape sequence '\\{esc}'",
                    Span(esc_start, self._pos),
                )

        text = "".join(chars)
        kind = "char" if is_char else "string"
        if self._at_end():
            self._error(
                LexErrorKind.UNTERMINATED_CHAR if is_char else LexErrorKind.UNTERMINATED_STRING,
                f"unterminated {kind} literal {quote}{text}{quote}",
                Span(start, self._pos),
            )
        else:
            self._advance()  # closing quote

        span = Span(start, self._pos)
        if is_char and len(text) > 1:
            self._error(
                LexErrorKind.INVALID_CHAR_LITERAL,
                f"invalid character literal '{text}'",
                span,
            )

        return Token(TokenType.CHAR if is_char else TokenType.STRING, span, text)

    def _lex_word(self) -> Token:
        start = self._pos
        while not self._at_end():
            ch = self._peek_char()
            if ch.isspace() or ch in SPECIAL_CHARS or ch in QUOTES:
                break
            self._advance()
        text = self._source[start : self._pos]
        span = Span(start, self._pos)

        if text.isascii() and text.isdigit():
            value = int(text)
            if value > U64_MAX:
                self._error(
                    LexErrorKind.INTEGER_OVERFLOW,
                    f"integer literal {text} does not fit in 64 bits",
                    span,
                )
                value = U64_MAX
            return Token(TokenType.NUM, span, value)

        keyword = KEYWORDS.get(text)
        if keyword is not None:
            return Token(keyword, span)
        return Token(TokenType.IDENTIFIER, span, text)


def tokenize(source: str) -> list[Token]:
    """Convenience function: tokenize source text and return the token list.

    Lexical errors are discarded; use :class:`Lexer` and
    :meth:`Lexer.take_errors` when they are needed.
    """
    return list(Lexer(source))
