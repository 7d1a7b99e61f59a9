"""Human-readable AST rendering: an indented tree dump and a compact one-line form."""

from __future__ import annotations

import sys
from typing import TextIO

from langparse.ast import (
    Add,
    And,
    Assign,
    CharLiteral,
    Construct,
    Div,
    Error,
    Expr,
    FieldAccess,
    Function,
    Ident,
    Mod,
    Mul,
    Neg,
    Num,
    Or,
    Ret,
    StringLiteral,
    Struct,
    Sub,
    TypedName,
    Var,
    VarDecl,
)


def format_expr(expr: Expr | None) -> str:
    """Render *expr* compactly without spans, e.g. ``Add(Num(1), Var(x))``."""
    match expr:
        case None:
            return "None"
        case Error():
            return "Error"
        case Var(name=name):
            return f"Var({name})"
        case Num(value=value):
            return f"Num({value})"
        case CharLiteral(value=value):
            return f"CharLiteral({value!r})"
        case StringLiteral(value=value):
            return f"StringLiteral({value!r})"
        case Neg(operand=operand):
            return f"Neg({format_expr(operand)})"
        case Add() | Sub() | Mul() | Div() | Mod() | And() | Or():
            return f"{type(expr).__name__}({format_expr(expr.lhs)}, {format_expr(expr.rhs)})"
        case Assign(target=target, value=value):
            return f"Assign({format_expr(target)}, {format_expr(value)})"
        case Struct(name=name, fields=fields):
            return f"Struct({name.name}, [{_typed_names(fields)}])"
        case Function(name=name, args=args, ret_type=ret_type, body=body):
            ret = ret_type.name if ret_type is not None else "None"
            if body is None:
                rendered = "None"
            else:
                rendered = "[" + ", ".join(format_expr(e) for e in body) + "]"
            return f"Function({name.name}, [{_typed_names(args)}], {ret}, {rendered})"
        case VarDecl(name=name, type=type_, value=value):
            return f"VarDecl({name.name}, {type_.name}, {format_expr(value)})"
        case Construct(name=name, fields=fields):
            inits = ", ".join(f"{f.name.name}={format_expr(f.value)}" for f in fields)
            return f"Construct({name.name}, [{inits}])"
        case FieldAccess(name=name, field=field):
            return f"FieldAccess({name.name}, {field.name})"
        case Ret(value=value):
            return f"Ret({format_expr(value)})"
    raise TypeError(f"not an expression node: {type(expr).__name__}")


def _typed_names(pairs: tuple[TypedName, ...]) -> str:
    return ", ".join(f"{p.name.name}: {p.type.name}" for p in pairs)


def dump_ast(exprs: list[Expr] | tuple[Expr, ...], *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable AST tree to *file*."""
    file.write("Program\n")
    for expr in exprs:
        _dump_expr(expr, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _ident(ident: Ident) -> str:
    return f"{ident.name} @{ident.span.start}..{ident.span.end}"


def _dump_expr(expr: Expr | None, depth: int, f: TextIO) -> None:
    pad = _indent(depth)
    if expr is None:
        f.write(f"{pad}(none)\n")
    elif isinstance(expr, Var):
        f.write(f"{pad}Var {expr.name} @{expr.span.start}..{expr.span.end}\n")
    elif isinstance(expr, (Num, CharLiteral, StringLiteral)):
        f.write(f"{pad}{type(expr).__name__} {expr.value!r} @{expr.span.start}..{expr.span.end}\n")
    elif isinstance(expr, Neg):
        f.write(f"{pad}Neg\n")
        _dump_expr(expr.operand, depth + 1, f)
    elif isinstance(expr, (Add, Sub, Mul, Div, Mod, And, Or)):
        f.write(f"{pad}{type(expr).__name__}\n")
        _dump_expr(expr.lhs, depth + 1, f)
        _dump_expr(expr.rhs, depth + 1, f)
    elif isinstance(expr, Assign):
        f.write(f"{pad}Assign\n")
        _dump_expr(expr.target, depth + 1, f)
        _dump_expr(expr.value, depth + 1, f)
    elif isinstance(expr, Struct):
        f.write(f"{pad}Struct {_ident(expr.name)}\n")
        for field in expr.fields:
            f.write(f"{_indent(depth + 1)}Field {_ident(field.name)} : {_ident(field.type)}\n")
    elif isinstance(expr, Function):
        f.write(f"{pad}Function {_ident(expr.name)}\n")
        for arg in expr.args:
            f.write(f"{_indent(depth + 1)}Arg {_ident(arg.name)} : {_ident(arg.type)}\n")
        if expr.ret_type is not None:
            f.write(f"{_indent(depth + 1)}Returns {_ident(expr.ret_type)}\n")
        if expr.body is None:
            f.write(f"{_indent(depth + 1)}(declaration)\n")
        else:
            f.write(f"{_indent(depth + 1)}Body\n")
            for stmt in expr.body:
                _dump_expr(stmt, depth + 2, f)
    elif isinstance(expr, VarDecl):
        f.write(f"{pad}VarDecl {_ident(expr.name)} : {_ident(expr.type)}\n")
        if expr.value is not None:
            _dump_expr(expr.value, depth + 1, f)
    elif isinstance(expr, Construct):
        f.write(f"{pad}Construct {_ident(expr.name)}\n")
        for init in expr.fields:
            f.write(f"{_indent(depth + 1)}.{init.name.name} =\n")
            _dump_expr(init.value, depth + 2, f)
    elif isinstance(expr, FieldAccess):
        f.write(f"{pad}FieldAccess {_ident(expr.name)} . {_ident(expr.field)}\n")
    elif isinstance(expr, Ret):
        f.write(f"{pad}Ret\n")
        if expr.value is not None:
            _dump_expr(expr.value, depth + 1, f)
    elif isinstance(expr, Error):
        f.write(f"{pad}Error\n")
