# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for C++ type and default-value expressions.

Converts a token stream produced by :mod:`scriptbind.frontend.lexer` into small
immutable syntax trees. Types cover the subset a binding signature can contain:
builtin word sequences, qualified and templated names, function signatures as
template arguments, pointers and references. Expressions cover literals, named
constants, unary sign and constructor-style calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from scriptbind.frontend.lexer import LexerError, Token, TokenType, tokenize

# ###############
# Public Interface
# ###############


class TypeSyntaxError(Exception):
    """Raised when a type or expression string is syntactically invalid.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


@dataclass(frozen=True)
class BuiltinType:
    """A fundamental type such as ``unsigned int``; ``kind`` is the normalized spelling."""

    kind: str
    const: bool = False


@dataclass(frozen=True)
class NamedType:
    """A (possibly qualified, possibly templated) named type."""

    name: str
    args: tuple[TypeNode | Expression, ...] = ()
    const: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rpartition("::")[2]


@dataclass(frozen=True)
class PointerType:
    pointee: TypeNode
    const: bool = False


@dataclass(frozen=True)
class ReferenceType:
    referent: TypeNode
    rvalue: bool = False


@dataclass(frozen=True)
class FunctionType:
    """A function signature, as used in ``Event<void(int, float)>``."""

    result: TypeNode
    params: tuple[TypeNode, ...] = ()


TypeNode = BuiltinType | NamedType | PointerType | ReferenceType | FunctionType


@dataclass(frozen=True)
class LiteralExpr:
    """A literal; ``kind`` is one of int, float, bool, string, char, null."""

    kind: str
    value: str


@dataclass(frozen=True)
class NameExpr:
    name: str

    @property
    def simple_name(self) -> str:
        return self.name.rpartition("::")[2]


@dataclass(frozen=True)
class UnaryExpr:
    op: str
    operand: Expression


@dataclass(frozen=True)
class CallExpr:
    """A constructor-style call ``T(args...)`` or ``T{args...}``."""

    callee: str
    args: tuple[Expression, ...] = ()


Expression = LiteralExpr | NameExpr | UnaryExpr | CallExpr


def parse_type(source: str) -> TypeNode:
    """Parse a C++ type string.

    Args:
        source: Type text, e.g. ``const Vector<SPtr<Mesh>>&``.

    Returns:
        The type syntax tree.

    Raises:
        TypeSyntaxError: If the text is not a valid type.
    """
    parser = _Parser(_tokenize(source))
    result = parser.parse_type()
    parser.expect_end()
    return result


def parse_expression(source: str) -> Expression:
    """Parse a C++ default-value expression string.

    Raises:
        TypeSyntaxError: If the text is not a supported expression.
    """
    parser = _Parser(_tokenize(source))
    result = parser.parse_expression()
    parser.expect_end()
    return result


def render_type(node: TypeNode) -> str:
    """Render a type tree back to normalized C++ text."""
    if isinstance(node, BuiltinType):
        return f"const {node.kind}" if node.const else node.kind
    if isinstance(node, NamedType):
        text = node.name
        if node.args:
            text += "<" + ", ".join(render_argument(arg) for arg in node.args) + ">"
        return f"const {text}" if node.const else text
    if isinstance(node, PointerType):
        text = render_type(node.pointee) + "*"
        return f"{text} const" if node.const else text
    if isinstance(node, ReferenceType):
        return render_type(node.referent) + ("&&" if node.rvalue else "&")
    params = ", ".join(render_type(param) for param in node.params)
    return f"{render_type(node.result)}({params})"


def render_expression(expr: Expression, *, managed: bool = False) -> str:
    """Render an expression tree as C++ text, or as C# text when *managed* is set.

    The managed rendering suffixes non-integral float literals with ``f`` and
    turns constructor calls into ``new T(...)`` with ``.`` scope separators.
    """
    if isinstance(expr, LiteralExpr):
        return _render_literal(expr, managed=managed)
    if isinstance(expr, NameExpr):
        return expr.name.replace("::", ".") if managed else expr.name
    if isinstance(expr, UnaryExpr):
        return expr.op + render_expression(expr.operand, managed=managed)
    args = ", ".join(render_expression(arg, managed=managed) for arg in expr.args)
    if managed:
        return f"new {expr.callee.replace('::', '.')}({args})"
    return f"{expr.callee}({args})"


def render_argument(arg: TypeNode | Expression) -> str:
    """Render a template argument, which is either a type or a constant expression."""
    if isinstance(arg, LiteralExpr | NameExpr | UnaryExpr | CallExpr):
        return render_expression(arg)
    return render_type(arg)


# ################
# Implementation
# ################

_BUILTIN_WORDS: frozenset[str] = frozenset(
    {
        "void",
        "bool",
        "char",
        "wchar_t",
        "char16_t",
        "char32_t",
        "short",
        "int",
        "long",
        "signed",
        "unsigned",
        "float",
        "double",
    }
)


def _tokenize(source: str) -> list[Token]:
    try:
        return tokenize(source)
    except LexerError as exc:
        raise TypeSyntaxError(str(exc).partition(": ")[2], exc.line, exc.column) from exc


def _render_literal(expr: LiteralExpr, *, managed: bool) -> str:
    if expr.kind == "string":
        escaped = expr.value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
        return f'"{escaped}"'
    if expr.kind == "char":
        return f"'{expr.value}'"
    if expr.kind == "null":
        return "null" if managed else "nullptr"
    if expr.kind == "float" and managed:
        return expr.value + "f"
    return expr.value


class _Parser:
    """Recursive-descent parser for type and expression token streams."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek_type(self) -> TokenType:
        """Return the token type of the current token."""
        return self._tokens[self._pos].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises TypeSyntaxError if the current token does not match.
        """
        tok = self._current()
        if tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise TypeSyntaxError(f"Expected {expected}, got {tok.value!r}", tok.line, tok.column)
        return self._advance()

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types (without consuming)."""
        return self._peek_type() in types

    def expect_end(self) -> None:
        tok = self._current()
        if not self._at_end():
            raise TypeSyntaxError(f"Unexpected trailing token {tok.value!r}", tok.line, tok.column)

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def parse_type(self) -> TypeNode:
        """Parse: const? base const? declarator* [ '(' params ')' ]"""
        is_const = self._skip_const()
        base = self._parse_base_type()
        is_const = self._skip_const() or is_const
        result: TypeNode = _with_const(base, is_const)

        while self._check(TokenType.STAR, TokenType.AMP, TokenType.AMPAMP):
            tok = self._advance()
            if tok.type == TokenType.STAR:
                result = PointerType(result, const=self._skip_const())
            else:
                result = ReferenceType(result, rvalue=tok.type == TokenType.AMPAMP)

        if self._check(TokenType.LPAREN):
            self._advance()
            params: list[TypeNode] = []
            if not self._check(TokenType.RPAREN):
                params.append(self.parse_type())
                while self._check(TokenType.COMMA):
                    self._advance()
                    params.append(self.parse_type())
            self._expect(TokenType.RPAREN)
            result = FunctionType(result, tuple(params))
        return result

    def _skip_const(self) -> bool:
        found = False
        while self._check(TokenType.CONST):
            self._advance()
            found = True
        return found

    def _parse_base_type(self) -> TypeNode:
        tok = self._current()
        if tok.type == TokenType.IDENTIFIER and tok.value in _BUILTIN_WORDS:
            words: list[str] = []
            while self._check(TokenType.IDENTIFIER) and self._current().value in _BUILTIN_WORDS:
                words.append(self._advance().value)
            return BuiltinType(" ".join(words))

        name = self._parse_qualified_name()
        args: tuple[TypeNode | Expression, ...] = ()
        if self._check(TokenType.LANGLE):
            args = self._parse_template_args()
        return NamedType(name, args)

    def _parse_qualified_name(self) -> str:
        """Parse: '::'? IDENT ('::' IDENT)*"""
        parts: list[str] = []
        if self._check(TokenType.SCOPE):
            self._advance()
        parts.append(self._expect(TokenType.IDENTIFIER).value)
        while self._check(TokenType.SCOPE):
            self._advance()
            parts.append(self._expect(TokenType.IDENTIFIER).value)
        return "::".join(parts)

    def _parse_template_args(self) -> tuple[TypeNode | Expression, ...]:
        self._expect(TokenType.LANGLE)
        args: list[TypeNode | Expression] = [self._parse_template_arg()]
        while self._check(TokenType.COMMA):
            self._advance()
            args.append(self._parse_template_arg())
        self._expect(TokenType.RANGLE)
        return tuple(args)

    def _parse_template_arg(self) -> TypeNode | Expression:
        if self._check(
            TokenType.INTEGER,
            TokenType.FLOAT,
            TokenType.MINUS,
            TokenType.TRUE,
            TokenType.FALSE,
        ):
            return self.parse_expression()
        return self.parse_type()

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expression(self) -> Expression:
        """Parse: ('-' | '+') expression | primary"""
        if self._check(TokenType.MINUS, TokenType.PLUS):
            op = self._advance().value
            operand = self.parse_expression()
            if op == "+":
                return operand
            if isinstance(operand, LiteralExpr) and operand.kind in ("int", "float"):
                value = operand.value[1:] if operand.value.startswith("-") else "-" + operand.value
                return LiteralExpr(operand.kind, value)
            return UnaryExpr(op, operand)
        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        tok = self._current()
        if tok.type == TokenType.INTEGER:
            self._advance()
            return LiteralExpr("int", tok.value)
        if tok.type == TokenType.FLOAT:
            self._advance()
            return LiteralExpr("float", tok.value)
        if tok.type in (TokenType.TRUE, TokenType.FALSE):
            self._advance()
            return LiteralExpr("bool", tok.value)
        if tok.type == TokenType.STRING:
            self._advance()
            return LiteralExpr("string", tok.value)
        if tok.type == TokenType.CHAR:
            self._advance()
            return LiteralExpr("char", tok.value)
        if tok.type == TokenType.NULLPTR:
            self._advance()
            return LiteralExpr("null", tok.value)
        if tok.type == TokenType.LPAREN:
            self._advance()
            inner = self.parse_expression()
            self._expect(TokenType.RPAREN)
            return inner
        if tok.type in (TokenType.IDENTIFIER, TokenType.SCOPE):
            return self._parse_name_or_call()
        raise TypeSyntaxError(f"Unexpected token {tok.value!r} in expression", tok.line, tok.column)

    def _parse_name_or_call(self) -> Expression:
        tok = self._current()
        if tok.type == TokenType.IDENTIFIER and tok.value in _BUILTIN_WORDS:
            callee = render_type(self._parse_base_type())
        else:
            callee = self._parse_qualified_name()
            if self._check(TokenType.LANGLE):
                callee += "<" + ", ".join(render_argument(arg) for arg in self._parse_template_args()) + ">"

        if self._check(TokenType.LPAREN):
            return CallExpr(callee, self._parse_call_args(TokenType.LPAREN, TokenType.RPAREN))
        if self._check(TokenType.LBRACE):
            return CallExpr(callee, self._parse_call_args(TokenType.LBRACE, TokenType.RBRACE))
        return NameExpr(callee)

    def _parse_call_args(self, opening: TokenType, closing: TokenType) -> tuple[Expression, ...]:
        self._expect(opening)
        args: list[Expression] = []
        if not self._check(closing):
            args.append(self.parse_expression())
            while self._check(TokenType.COMMA):
                self._advance()
                args.append(self.parse_expression())
        self._expect(closing)
        return tuple(args)


def _with_const(node: TypeNode, is_const: bool) -> TypeNode:
    if not is_const:
        return node
    if isinstance(node, BuiltinType):
        return BuiltinType(node.kind, const=True)
    if isinstance(node, NamedType):
        return NamedType(node.name, node.args, const=True)
    return node
