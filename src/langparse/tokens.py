"""Token types, spans, and the fixed character tables used by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class BinOp(Enum):
    ADD = auto()  # +
    SUB = auto()  # -
    MUL = auto()  # *
    DIV = auto()  # /
    MOD = auto()  # %
    AND = auto()  # &
    OR = auto()  # |
    NOT = auto()  # !


class TokenType(Enum):
    # Keywords
    STRUCT = auto()
    RET = auto()

    # Structural punctuation
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    COLON = auto()  # :
    SEMICOLON = auto()  # ;
    DOT = auto()  # .
    COMMA = auto()  # ,
    ARROW = auto()  # ->

    # Operators: value is the BinOp
    BINOP = auto()
    EQUALS = auto()  # =
    BINOP_EQUALS = auto()  # +=, -=, ...

    # Literals
    IDENTIFIER = auto()
    CHAR = auto()  # 'c', value is the decoded text
    STRING = auto()  # "...", value is the decoded text
    NUM = auto()  # unsigned 64-bit

    def describe(self) -> str:
        """Human-readable name used in diagnostics."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[TokenType, str] = {
    TokenType.STRUCT: "'struct'",
    TokenType.RET: "'ret'",
    TokenType.LBRACE: "'{'",
    TokenType.RBRACE: "'}'",
    TokenType.LPAREN: "'('",
    TokenType.RPAREN: "')'",
    TokenType.COLON: "':'",
    TokenType.SEMICOLON: "';'",
    TokenType.DOT: "'.'",
    TokenType.COMMA: "','",
    TokenType.ARROW: "'->'",
    TokenType.BINOP: "an operator",
    TokenType.EQUALS: "'='",
    TokenType.BINOP_EQUALS: "an operator",
    TokenType.IDENTIFIER: "an identifier",
    TokenType.CHAR: "a character literal",
    TokenType.STRING: "a string literal",
    TokenType.NUM: "a number",
}


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open [start, end) offset range into the source text."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its decoded value."""

    type: TokenType
    span: Span
    value: str | int | BinOp | None = None

    def describe(self) -> str:
        return self.type.describe()


def describe_kinds(kinds: tuple[TokenType, ...]) -> str:
    """Join token kinds as 'a', 'a or b', or 'a, b or c'."""
    names = [k.describe() for k in kinds]
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + " or " + names[-1]


U64_MAX = 2**64 - 1

SPECIAL_CHARS: dict[str, tuple[TokenType, BinOp | None]] = {
    "+": (TokenType.BINOP, BinOp.ADD),
    "-": (TokenType.BINOP, BinOp.SUB),
    "*": (TokenType.BINOP, BinOp.MUL),
    "/": (TokenType.BINOP, BinOp.DIV),
    "%": (TokenType.BINOP, BinOp.MOD),
    "|": (TokenType.BINOP, BinOp.OR),
    "&": (TokenType.BINOP, BinOp.AND),
    "!": (TokenType.BINOP, BinOp.NOT),
    ";": (TokenType.SEMICOLON, None),
    ".": (TokenType.DOT, None),
    ",": (TokenType.COMMA, None),
    "{": (TokenType.LBRACE, None),
    "}": (TokenType.RBRACE, None),
    "(": (TokenType.LPAREN, None),
    ")": (TokenType.RPAREN, None),
    "=": (TokenType.EQUALS, None),
    ":": (TokenType.COLON, None),
}

# Characters that may extend a special character into a two-character token.
SECOND_CHARS = frozenset("=>")

# Operators that have an "operator-equals" compound form.
COMBINABLE_OPS = frozenset(
    {BinOp.ADD, BinOp.SUB, BinOp.MUL, BinOp.DIV, BinOp.MOD, BinOp.AND, BinOp.OR}
)

KEYWORDS: dict[str, TokenType] = {
    "struct": TokenType.STRUCT,
    "ret": TokenType.RET,
}

ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
}

QUOTES = frozenset("\"'")
