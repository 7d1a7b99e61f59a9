"""AST node types. ``Expr`` is a closed union of frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from langparse.tokens import Span


@dataclass(frozen=True, slots=True)
class Ident:
    """A name or type name with its source span."""

    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class TypedName:
    """``name : type`` pair in struct fields and parameter lists."""

    name: Ident
    type: Ident


@dataclass(frozen=True, slots=True)
class FieldInit:
    """``.name = value`` entry in a struct construction."""

    name: Ident
    value: Expr


@dataclass(frozen=True, slots=True)
class Error:
    """Placeholder for a failed parse; always paired with a diagnostic."""


@dataclass(frozen=True, slots=True)
class Var:
    name: str
    span: Span


@dataclass(frozen=True, slots=True)
class Num:
    value: int
    span: Span


@dataclass(frozen=True, slots=True)
class CharLiteral:
    value: str
    span: Span


@dataclass(frozen=True, slots=True)
class StringLiteral:
    value: str
    span: Span


@dataclass(frozen=True, slots=True)
class Neg:
    operand: Expr


@dataclass(frozen=True, slots=True)
class Add:
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True, slots=True)
class Sub:
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True, slots=True)
class Mul:
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True, slots=True)
class Div:
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True, slots=True)
class Mod:
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True, slots=True)
class And:
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True, slots=True)
class Or:
    lhs: Expr
    rhs: Expr


@dataclass(frozen=True, slots=True)
class Assign:
    """Assignment to a target that is not a declaration."""

    target: Expr
    value: Expr


@dataclass(frozen=True, slots=True)
class Struct:
    """``name = struct { field: type, ... }``"""

    name: Ident
    fields: tuple[TypedName, ...]


@dataclass(frozen=True, slots=True)
class Function:
    """``name = (arg: type, ...) [-> type] ( ; | { body } )``

    ``body`` is None for a forward declaration and a (possibly empty)
    tuple for a definition. ``ret_type`` is None without a ``->`` clause.
    """

    name: Ident
    args: tuple[TypedName, ...]
    ret_type: Ident | None
    body: tuple[Expr, ...] | None


@dataclass(frozen=True, slots=True)
class VarDecl:
    name: Ident
    type: Ident
    value: Expr | None


@dataclass(frozen=True, slots=True)
class Construct:
    """``name { .field = value, ... }``"""

    name: Ident
    fields: tuple[FieldInit, ...]


@dataclass(frozen=True, slots=True)
class FieldAccess:
    name: Ident
    field: Ident


@dataclass(frozen=True, slots=True)
class Ret:
    value: Expr | None


Expr = Union[
    Error,
    Var,
    Num,
    CharLiteral,
    StringLiteral,
    Neg,
    Add,
    Sub,
    Mul,
    Div,
    Mod,
    And,
    Or,
    Assign,
    Struct,
    Function,
    VarDecl,
    Construct,
    FieldAccess,
    Ret,
]

BinaryExpr = Union[Add, Sub, Mul, Div, Mod, And, Or]
