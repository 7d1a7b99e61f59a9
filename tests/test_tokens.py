"""Test punctuation, operators, keywords, identifiers and numbers."""

from langparse.tokens import BinOp, Span, TokenType, U64_MAX, describe_kinds

from tests.conftest import assert_types, assert_values


class TestPunctuation:
    def test_braces_and_parens(self, lex):
        tokens = lex("{}()")
        assert_types(
            tokens,
            [TokenType.LBRACE, TokenType.RBRACE, TokenType.LPAREN, TokenType.RPAREN],
        )

    def test_separators(self, lex):
        tokens = lex(": ; . ,")
        assert_types(
            tokens,
            [TokenType.COLON, TokenType.SEMICOLON, TokenType.DOT, TokenType.COMMA],
        )

    def test_equals(self, lex):
        tokens = lex("=")
        assert_types(tokens, [TokenType.EQUALS])

    def test_double_equals_is_two_tokens(self, lex):
        tokens = lex("==")
        assert_types(tokens, [TokenType.EQUALS, TokenType.EQUALS])

    def test_spans(self, lex):
        tokens = lex(" { }")
        assert tokens[0].span == Span(1, 2)
        assert tokens[1].span == Span(3, 4)


class TestOperators:
    def test_all_binops(self, lex):
        tokens = lex("+ - * / % & | !")
        assert all(t.type == TokenType.BINOP for t in tokens)
        assert_values(
            tokens,
            [
                BinOp.ADD,
                BinOp.SUB,
                BinOp.MUL,
                BinOp.DIV,
                BinOp.MOD,
                BinOp.AND,
                BinOp.OR,
                BinOp.NOT,
            ],
        )

    def test_operator_equals(self, lex):
        tokens = lex("+= -= *= /= %= &= |=")
        assert all(t.type == TokenType.BINOP_EQUALS for t in tokens)
        assert tokens[0].value == BinOp.ADD
        assert tokens[6].value == BinOp.OR
        assert tokens[1].span == Span(3, 5)

    def test_not_does_not_combine(self, lex):
        tokens = lex("!=")
        assert_types(tokens, [TokenType.BINOP, TokenType.EQUALS])
        assert tokens[0].value == BinOp.NOT

    def test_arrow(self, lex):
        tokens = lex("->")
        assert_types(tokens, [TokenType.ARROW])
        assert tokens[0].span == Span(0, 2)

    def test_greater_only_extends_minus(self, lex):
        tokens = lex("+>")
        assert_types(tokens, [TokenType.BINOP, TokenType.IDENTIFIER])
        assert tokens[1].value == ">"

    def test_operators_split_words(self, lex):
        tokens = lex("a+b")
        assert_types(tokens, [TokenType.IDENTIFIER, TokenType.BINOP, TokenType.IDENTIFIER])


class TestWords:
    def test_keywords(self, lex):
        tokens = lex("struct ret")
        assert_types(tokens, [TokenType.STRUCT, TokenType.RET])

    def test_keyword_prefix_is_identifier(self, lex):
        tokens = lex("structure")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].value == "structure"

    def test_identifier(self, lex):
        tokens = lex("foo_bar9")
        assert_types(tokens, [TokenType.IDENTIFIER])
        assert tokens[0].span == Span(0, 8)

    def test_number(self, lex):
        tokens = lex("12345")
        assert_types(tokens, [TokenType.NUM])
        assert tokens[0].value == 12345

    def test_mixed_digits_and_letters_is_identifier(self, lex):
        tokens = lex("12ab")
        assert_types(tokens, [TokenType.IDENTIFIER])

    def test_non_ascii_digits_are_not_numbers(self, lex):
        tokens = lex("٣")  # ARABIC-INDIC DIGIT THREE
        assert_types(tokens, [TokenType.IDENTIFIER])

    def test_largest_u64(self, lex_errors):
        tokens, errors = lex_errors(str(U64_MAX))
        assert tokens[0].value == U64_MAX
        assert errors == []


class TestWhitespace:
    def test_empty_source(self, lex):
        assert lex("") == []

    def test_only_whitespace(self, lex):
        assert lex(" \t\n\r\n ") == []

    def test_whitespace_between_tokens(self, lex):
        tokens = lex("a\n\tb")
        assert_values(tokens, ["a", "b"])
        assert tokens[1].span == Span(3, 4)

    def test_spans_never_overlap(self, lex):
        tokens = lex('x: i32 = (a + -b) * "s" -> c;')
        for prev, cur in zip(tokens, tokens[1:]):
            assert prev.span.end <= cur.span.start


class TestDescribe:
    def test_single(self):
        assert describe_kinds((TokenType.SEMICOLON,)) == "';'"

    def test_pair(self):
        assert describe_kinds((TokenType.COMMA, TokenType.RBRACE)) == "',' or '}'"

    def test_three(self):
        kinds = (TokenType.IDENTIFIER, TokenType.NUM, TokenType.RPAREN)
        assert describe_kinds(kinds) == "an identifier, a number or ')'"
