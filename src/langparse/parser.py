"""Parser: recursive descent with precedence climbing and panic-mode recovery."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from langparse.ast import (
    Add,
    And,
    Assign,
    BinaryExpr,
    CharLiteral,
    Construct,
    Div,
    Error,
    Expr,
    FieldAccess,
    FieldInit,
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
from langparse.diagnostics import (
    Diagnostic,
    DiagnosticEmitter,
    DiagnosticSink,
    MemorySink,
    Severity,
)
from langparse.errors import InternalParserError
from langparse.lexer import Lexer, PeekCount
from langparse.sourcemap import SourceMap
from langparse.tokens import BinOp, Span, Token, TokenType, describe_kinds

DEFAULT_MAX_DEPTH = 128


class SkipMode(Enum):
    BEFORE = auto()  # stop with the target as the next token
    CONSUME = auto()  # consume the target, then stop


class Recovery(Enum):
    CONTINUE = auto()  # at the next-element marker
    BREAK = auto()  # at the enclosing clause terminator
    EOF = auto()


class Parser:
    """Build top-level expressions from a lexer, reporting through an emitter.

    Parsing never aborts on malformed input: each rule either substitutes an
    :class:`Error` node, supplies a default, or abandons the smallest
    enclosing list, then resynchronizes by skipping forward.

    Nesting is bounded by *max_depth*. Every nested expression, operator
    climbing step, parenthesis, construction body and function body counts
    one level, so a level costs at most a few interpreter frames. The limit
    is enforced at the opening delimiters, where the whole group is skipped.
    """

    def __init__(
        self,
        lexer: Lexer,
        emitter: DiagnosticEmitter,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._lexer = lexer
        self._emitter = emitter
        self._max_depth = max_depth
        self._depth = 0

    @property
    def has_error(self) -> bool:
        return self._emitter.has_error or self._lexer.has_error

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _forward_lex_errors(self) -> None:
        for err in self._lexer.take_errors():
            self._emitter.error().with_label(err.message).with_span(err.span).emit()

    def _next(self) -> Token | None:
        tok = self._lexer.next()
        self._forward_lex_errors()
        return tok

    def _peek(self, count: PeekCount = PeekCount.ONE) -> Token | None:
        tok = self._lexer.peek(count)
        self._forward_lex_errors()
        return tok

    def _at(self, *types: TokenType) -> bool:
        tok = self._peek()
        return tok is not None and tok.type in types

    def _at_eof(self) -> bool:
        return self._peek() is None

    def _report(self, label: str, span: Span | None = None) -> None:
        """Emit an error at *span*, or at end of input when span is None."""
        builder = self._emitter.error().with_label(label)
        if span is None:
            builder.with_eoi_span()
        else:
            builder.with_span(span)
        builder.emit()

    def _report_unexpected(self, expected: str, tok: Token | None) -> None:
        if tok is None:
            self._report(f"expected {expected} but found end of input")
        else:
            self._report(f"expected {expected} but got {tok.describe()}", tok.span)

    # ------------------------------------------------------------------
    # Recovery primitives
    # ------------------------------------------------------------------

    def _expect(self, *expected: TokenType) -> Token | None:
        """Consume the next token if its kind is in *expected*.

        On mismatch, report it and return None without consuming.
        """
        tok = self._peek()
        if tok is not None and tok.type in expected:
            return self._next()
        self._report_unexpected(describe_kinds(expected), tok)
        return None

    def _skip_until(self, *targets: tuple[TokenType, SkipMode]) -> None:
        """Skip tokens until a target is seen outside any nested braces/parens."""
        depth = 0
        while True:
            tok = self._peek()
            if tok is None:
                return
            if depth == 0:
                for tt, mode in targets:
                    if tok.type == tt:
                        if mode is SkipMode.CONSUME:
                            self._next()
                        return
            if tok.type in _OPENERS:
                depth += 1
            elif tok.type in _CLOSERS and depth > 0:
                depth -= 1
            self._next()

    def _recover(
        self,
        next_elem: TokenType | None,
        clause_end: TokenType | None,
    ) -> Recovery:
        """Resynchronize inside a delimited list. The marker is left unconsumed."""
        depth = 0
        while True:
            tok = self._peek()
            if tok is None:
                break
            if depth == 0:
                if next_elem is not None and tok.type == next_elem:
                    return Recovery.CONTINUE
                if clause_end is not None and tok.type == clause_end:
                    return Recovery.BREAK
            if tok.type in _OPENERS:
                depth += 1
            elif tok.type in _CLOSERS and depth > 0:
                depth -= 1
            self._next()

        if depth > 0:
            self._report("mismatched braces")
        return Recovery.EOF

    def _too_deep(self, open_tok: Token, close: TokenType) -> Error:
        """Report excessive nesting and skip the whole delimited group."""
        self._report("expression nested too deeply", open_tok.span)
        self._skip_until((close, SkipMode.CONSUME))
        return Error()

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def parse(self) -> list[Expr]:
        exprs: list[Expr] = []
        while not self._at_eof():
            exprs.append(self.parse_toplevel_decl())
        return exprs

    def parse_toplevel_decl(self) -> Expr:
        return self._parse_statement()

    def _parse_statement(self) -> Expr:
        primary = self._parse_primary()
        if primary is None:
            tok = self._peek()
            if tok is None:
                self._report("expected a primary expression but found end of input")
                return Error()
            if tok.type == TokenType.RET:
                return self._parse_ret()
            self._next()
            self._report(f"expected a primary expression but got {tok.describe()}", tok.span)
            return Error()

        tok = self._peek()
        if tok is None:
            return primary

        if tok.type == TokenType.EQUALS:
            return self._parse_assign(primary)

        if tok.type == TokenType.COLON:
            if isinstance(primary, Var):
                return self._parse_vardecl(primary)
            self._report("expected an identifier before ':'", tok.span)
            self._skip_until(
                (TokenType.SEMICOLON, SkipMode.CONSUME), (TokenType.RBRACE, SkipMode.BEFORE)
            )
            return Error()

        expr = primary
        if tok.type == TokenType.BINOP:
            expr = self._parse_binexp(primary, 0)
        if self._at(TokenType.SEMICOLON):
            self._next()
        return expr

    def _parse_ret(self) -> Ret:
        self._next()  # consume 'ret'
        if self._at(TokenType.SEMICOLON):
            self._next()
            return Ret(None)
        value = self.parse_expression()
        self._expect(TokenType.SEMICOLON)
        return Ret(value)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expr:
        """Parse a primary followed by any binary operator continuation."""
        self._depth += 1
        expr = self._parse_expression()
        self._depth -= 1
        return expr

    def _parse_expression(self) -> Expr:
        primary = self._parse_primary()
        if primary is None:
            tok = self._peek()
            if tok is None:
                self._report("expected a primary expression but found end of input")
                return Error()
            # Synchronization tokens are left for the enclosing rule
            if tok.type not in _SYNC_TOKENS:
                self._next()
            self._report(f"expected a primary expression but got {tok.describe()}", tok.span)
            return Error()

        if self._at(TokenType.BINOP):
            return self._parse_binexp(primary, 0)
        return primary

    def _parse_binexp(self, lhs: Expr, min_precedence: int) -> Expr:
        while True:
            op_prec = _precedence(self._peek())
            if op_prec is None or op_prec < min_precedence:
                break
            op = self._next()
            assert op is not None

            rhs = self._parse_primary()
            if rhs is None:
                width = len(op.span)
                self._report(
                    f"expected a primary expression after {op.describe()}",
                    Span(op.span.end, op.span.end + width),
                )
                rhs = Error()

            while True:
                next_prec = _precedence(self._peek())
                if next_prec is None or next_prec <= op_prec:
                    break
                self._depth += 1
                rhs = self._parse_binexp(rhs, op_prec + 1)
                self._depth -= 1

            lhs = _binary_node(op, lhs, rhs)

        return lhs

    def _parse_primary(self) -> Expr | None:
        negations = 0
        while True:
            tok = self._peek()
            if tok is None or tok.type != TokenType.BINOP or tok.value != BinOp.SUB:
                break
            self._next()
            negations += 1

        atom = self._parse_atom()
        if atom is None:
            return None
        for _ in range(negations):
            atom = Neg(atom)
        return atom

    def _parse_atom(self) -> Expr | None:
        tok = self._peek()
        if tok is None:
            return None

        if tok.type == TokenType.NUM:
            self._next()
            return Num(tok.value, tok.span)

        if tok.type == TokenType.IDENTIFIER:
            self._next()
            return self._parse_identifier_tail(Ident(tok.value, tok.span))

        if tok.type == TokenType.CHAR:
            self._next()
            return CharLiteral(tok.value, tok.span)

        if tok.type == TokenType.STRING:
            self._next()
            return StringLiteral(tok.value, tok.span)

        if tok.type == TokenType.LPAREN:
            open_tok = self._next()
            if self._depth >= self._max_depth:
                return self._too_deep(open_tok, TokenType.RPAREN)
            self._depth += 1
            inner = self.parse_expression()
            self._depth -= 1
            self._expect(TokenType.RPAREN)
            return inner

        return None

    def _parse_identifier_tail(self, name: Ident) -> Expr:
        if self._at(TokenType.LBRACE):
            return self._parse_construct(name)
        if self._at(TokenType.DOT):
            self._next()
            field = self._parse_ident("a field name")
            if field is None:
                return Error()
            return FieldAccess(name, field)
        return Var(name.name, name.span)

    def _parse_construct(self, name: Ident) -> Expr:
        open_tok = self._next()  # consume '{'
        if self._depth >= self._max_depth:
            return self._too_deep(open_tok, TokenType.RBRACE)

        self._depth += 1
        fields: list[FieldInit] = []
        while True:
            if self._at(TokenType.RBRACE):
                self._next()
                break
            if self._at_eof():
                self._report("expected '}' but found end of input")
                break

            field = self._parse_field_init()
            if field is not None:
                fields.append(field)
                sep = self._expect(TokenType.COMMA, TokenType.RBRACE)
                if sep is not None:
                    if sep.type == TokenType.RBRACE:
                        break
                    continue

            outcome = self._recover(TokenType.COMMA, TokenType.RBRACE)
            if outcome is Recovery.CONTINUE:
                self._next()
                continue
            if outcome is Recovery.BREAK:
                self._next()
            break
        self._depth -= 1

        return Construct(name, tuple(fields))

    def _parse_field_init(self) -> FieldInit | None:
        if self._expect(TokenType.DOT) is None:
            return None
        name = self._parse_ident("a field name")
        if name is None:
            return None
        if self._expect(TokenType.EQUALS) is None:
            return None
        return FieldInit(name, self.parse_expression())

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def _parse_ident(self, what: str) -> Ident | None:
        tok = self._peek()
        if tok is not None and tok.type == TokenType.IDENTIFIER:
            self._next()
            return Ident(tok.value, tok.span)
        self._report_unexpected(what, tok)
        return None

    def _parse_typed_name(self) -> TypedName | None:
        name = self._parse_ident("an identifier")
        if name is None:
            return None
        if self._expect(TokenType.COLON) is None:
            return None
        type_ = self._parse_ident("a type")
        if type_ is None:
            return None
        return TypedName(name, type_)

    # ------------------------------------------------------------------
    # Declarations and assignment
    # ------------------------------------------------------------------

    def _parse_vardecl(self, var: Var) -> Expr:
        self._next()  # consume ':'
        type_ = self._parse_ident("a type")
        if type_ is None:
            return Error()

        name = Ident(var.name, var.span)
        term = self._expect(TokenType.EQUALS, TokenType.SEMICOLON)
        if term is not None and term.type == TokenType.EQUALS:
            value = self.parse_expression()
            self._expect(TokenType.SEMICOLON)
            return VarDecl(name, type_, value)
        return VarDecl(name, type_, None)

    def _parse_assign(self, target: Expr) -> Expr:
        equals = self._next()
        assert equals is not None

        tok = self._peek()
        if tok is None:
            self._report("expected an expression but found end of input")
            return Assign(target, Error())

        if tok.type == TokenType.STRUCT:
            return self._parse_struct(self._binding_name(target, equals))
        if tok.type == TokenType.LPAREN:
            return self._parse_function(self._binding_name(target, equals))
        if tok.type == TokenType.RPAREN:
            return self._parse_stray_rparen(tok)

        value = self.parse_expression()
        self._expect(TokenType.SEMICOLON)
        return Assign(target, value)

    def _binding_name(self, target: Expr, equals: Token) -> Ident:
        if isinstance(target, Var):
            return Ident(target.name, target.span)
        self._report("expected an identifier", equals.span)
        return Ident("", Span(equals.span.start, equals.span.start))

    def _parse_struct(self, name: Ident) -> Expr:
        self._next()  # consume 'struct'

        if self._expect(TokenType.LBRACE) is None:
            # Carry on as if '{' were present when a field list plainly follows
            if not self._at(TokenType.RBRACE, TokenType.IDENTIFIER):
                second = self._peek(PeekCount.TWO)
                if second is None or second.type != TokenType.COLON:
                    return Error()

        fields: list[TypedName] = []
        if self._at(TokenType.RBRACE):
            self._next()
            return Struct(name, ())

        while not self._at_eof():
            field = self._parse_typed_name()
            if field is None:
                self._skip_until(
                    (TokenType.SEMICOLON, SkipMode.CONSUME), (TokenType.RBRACE, SkipMode.CONSUME)
                )
                return Error()
            fields.append(field)

            sep = self._expect(TokenType.COMMA, TokenType.RBRACE)
            if sep is None:
                self._skip_until(
                    (TokenType.SEMICOLON, SkipMode.CONSUME), (TokenType.RBRACE, SkipMode.CONSUME)
                )
                return Struct(name, tuple(fields))
            if sep.type == TokenType.RBRACE:
                return Struct(name, tuple(fields))

        self._report("expected '}' but found end of input")
        return Struct(name, tuple(fields))

    def _parse_function(self, name: Ident) -> Expr:
        self._next()  # consume '('

        args: list[TypedName] = []
        tok = self._peek()
        if tok is not None and tok.type == TokenType.LBRACE:
            # '(' directly followed by a body: the signature is missing its ')'
            self._report(f"expected ')' but got {tok.describe()}", tok.span)
        else:
            params = self._parse_params()
            if params is None:
                return Error()
            args = params

        ret_type = None
        if self._at(TokenType.ARROW):
            self._next()
            ret_type = self._parse_ident("a type")
            if ret_type is None and not self._at(TokenType.LBRACE, TokenType.SEMICOLON):
                self._next()  # drop the malformed type

        term = self._expect(TokenType.LBRACE, TokenType.SEMICOLON)
        if term is None or term.type == TokenType.SEMICOLON:
            return Function(name, tuple(args), ret_type, None)

        if self._depth >= self._max_depth:
            return self._too_deep(term, TokenType.RBRACE)

        self._depth += 1
        body: list[Expr] = []
        while not self._at_eof() and not self._at(TokenType.RBRACE):
            body.append(self._parse_statement())
        self._depth -= 1

        self._expect(TokenType.RBRACE)
        return Function(name, tuple(args), ret_type, tuple(body))

    def _parse_params(self) -> list[TypedName] | None:
        """Parse ``name: type, ...)`` after the opening paren.

        Returns None when the list cannot be closed before end of input.
        """
        params: list[TypedName] = []
        if self._at(TokenType.RPAREN):
            self._next()
            return params

        while not self._at_eof():
            param = self._parse_typed_name()
            if param is None:
                # A malformed parameter abandons the rest of the list
                if self._recover(None, TokenType.RPAREN) is Recovery.BREAK:
                    self._next()
                    return params
                return None
            params.append(param)

            sep = self._expect(TokenType.COMMA, TokenType.RPAREN)
            if sep is not None:
                if sep.type == TokenType.RPAREN:
                    return params
                continue

            outcome = self._recover(TokenType.COMMA, TokenType.RPAREN)
            if outcome is Recovery.CONTINUE:
                self._next()
                continue
            if outcome is Recovery.BREAK:
                self._next()
                return params
            return None

        self._report("expected ')' but found end of input")
        return None

    def _parse_stray_rparen(self, tok: Token) -> Error:
        self._next()
        self._report(f"expected '(' but got {tok.describe()}", tok.span)
        if self._at(TokenType.SEMICOLON):
            self._next()
        elif self._at(TokenType.LBRACE):
            self._next()
            self._skip_until((TokenType.RBRACE, SkipMode.CONSUME))
        else:
            self._skip_until(
                (TokenType.SEMICOLON, SkipMode.CONSUME), (TokenType.RBRACE, SkipMode.CONSUME)
            )
        return Error()


# Module-level constants
_OPENERS: frozenset[TokenType] = frozenset({TokenType.LBRACE, TokenType.LPAREN})
_CLOSERS: frozenset[TokenType] = frozenset({TokenType.RBRACE, TokenType.RPAREN})
_SYNC_TOKENS: frozenset[TokenType] = frozenset(
    {TokenType.SEMICOLON, TokenType.COMMA, TokenType.RBRACE, TokenType.RPAREN}
)

_PRECEDENCE: dict[BinOp, int] = {
    BinOp.MUL: 20,
    BinOp.DIV: 20,
    BinOp.MOD: 20,
    BinOp.ADD: 10,
    BinOp.SUB: 10,
    BinOp.AND: 5,
    BinOp.OR: 5,
}

_BINARY_NODES: dict[BinOp, type[BinaryExpr]] = {
    BinOp.ADD: Add,
    BinOp.SUB: Sub,
    BinOp.MUL: Mul,
    BinOp.DIV: Div,
    BinOp.MOD: Mod,
    BinOp.AND: And,
    BinOp.OR: Or,
}


def _precedence(tok: Token | None) -> int | None:
    if tok is None or tok.type != TokenType.BINOP:
        return None
    return _PRECEDENCE.get(tok.value)


def _binary_node(op: Token, lhs: Expr, rhs: Expr) -> Expr:
    node = _BINARY_NODES.get(op.value)
    if node is None:
        raise InternalParserError(f"operator {op.value} has no binary expression node")
    return node(lhs, rhs)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Best-effort AST together with every diagnostic produced."""

    exprs: tuple[Expr, ...]
    diagnostics: tuple[Diagnostic, ...]

    @property
    def has_error(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)


def parse(
    source: str,
    filename: str = "input.lang",
    *,
    sink: DiagnosticSink | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ParseResult:
    """Convenience function: lex and parse source text.

    Diagnostics go to *sink* (an in-memory sink when omitted) and are also
    returned on the result.
    """
    source_map = SourceMap(filename, source)
    emitter = DiagnosticEmitter(source_map, sink if sink is not None else MemorySink())
    parser = Parser(Lexer(source), emitter, max_depth=max_depth)
    exprs = parser.parse()
    return ParseResult(tuple(exprs), tuple(emitter.diagnostics))
