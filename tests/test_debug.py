"""Test AST rendering helpers."""

import io

import pytest

from langparse.ast import Error, Ident, TypedName
from langparse.debug import dump_ast, format_expr
from langparse.parser import parse


def dump(source: str) -> str:
    buf = io.StringIO()
    dump_ast(parse(source, "test.lang").exprs, file=buf)
    return buf.getvalue()


class TestFormatExpr:
    def test_none(self):
        assert format_expr(None) == "None"

    def test_error(self):
        assert format_expr(Error()) == "Error"

    def test_char_and_string_use_repr(self):
        result = parse("'a' \"b c\"", "test.lang")
        assert [format_expr(e) for e in result.exprs] == [
            "CharLiteral('a')",
            "StringLiteral('b c')",
        ]

    def test_rejects_non_expression(self):
        ident = Ident("x", None)
        with pytest.raises(TypeError):
            format_expr(TypedName(ident, ident))


class TestDumpAst:
    def test_binary(self):
        assert dump("1 + x") == (
            "Program\n"
            "  Add\n"
            "    Num 1 @0..1\n"
            "    Var x @4..5\n"
        )

    def test_struct(self):
        assert dump("a = struct { x: i32 }") == (
            "Program\n"
            "  Struct a @0..1\n"
            "    Field x @13..14 : i32 @16..19\n"
        )

    def test_function_declaration(self):
        assert dump("f = (a: i32) -> u8;") == (
            "Program\n"
            "  Function f @0..1\n"
            "    Arg a @5..6 : i32 @8..11\n"
            "    Returns u8 @16..18\n"
            "    (declaration)\n"
        )

    def test_function_body(self):
        assert dump("f = () { ret; }") == (
            "Program\n"
            "  Function f @0..1\n"
            "    Body\n"
            "      Ret\n"
        )

    def test_construct_and_assign(self):
        assert dump("p = P { .x = 1 };") == (
            "Program\n"
            "  Assign\n"
            "    Var p @0..1\n"
            "    Construct P @4..5\n"
            "      .x =\n"
            "        Num 1 @13..14\n"
        )

    def test_error_node(self):
        assert dump("}") == "Program\n  Error\n"
