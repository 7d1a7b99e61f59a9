"""Test the two-token lookahead buffer."""

from langparse.lexer import Lexer, PeekCount
from langparse.tokens import TokenType


class TestPeek:
    def test_peek_one_is_idempotent(self):
        lexer = Lexer("a b c")
        first = lexer.peek(PeekCount.ONE)
        for _ in range(5):
            assert lexer.peek(PeekCount.ONE) == first
        assert lexer.next() == first

    def test_peek_two_does_not_consume(self):
        lexer = Lexer("a b c")
        second = lexer.peek(PeekCount.TWO)
        assert second.value == "b"
        assert lexer.peek(PeekCount.ONE).value == "a"
        assert lexer.peek(PeekCount.TWO) == second

    def test_next_drains_fifo(self):
        lexer = Lexer("a b c")
        lexer.peek(PeekCount.TWO)
        assert [lexer.next().value for _ in range(3)] == ["a", "b", "c"]
        assert lexer.next() is None

    def test_peek_after_next_shifts(self):
        lexer = Lexer("a b c")
        lexer.peek(PeekCount.TWO)
        lexer.next()
        assert lexer.peek(PeekCount.ONE).value == "b"
        assert lexer.peek(PeekCount.TWO).value == "c"


class TestEndOfInput:
    def test_peek_empty(self):
        lexer = Lexer("")
        assert lexer.peek() is None
        assert lexer.peek(PeekCount.TWO) is None
        assert lexer.next() is None

    def test_peek_two_past_end(self):
        lexer = Lexer(";")
        assert lexer.peek(PeekCount.TWO) is None
        assert lexer.next().type == TokenType.SEMICOLON
        assert lexer.next() is None

    def test_next_repeatedly_at_end(self):
        lexer = Lexer("x")
        lexer.next()
        assert lexer.next() is None
        assert lexer.next() is None


class TestLazyErrors:
    def test_errors_appear_when_token_materializes(self):
        lexer = Lexer("a 'xy'")
        lexer.peek(PeekCount.ONE)
        assert lexer.take_errors() == []
        lexer.peek(PeekCount.TWO)
        assert len(lexer.take_errors()) == 1
