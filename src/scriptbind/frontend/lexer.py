# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for C++ type and default-value expressions.

Declaration documents carry types (``const std::vector<ResourceHandle<Mesh>>&``)
and default arguments (``Vector3(1.0f, 0.0f, 0.0f)``) as plain strings. This
module converts such a string into tokens for :mod:`scriptbind.frontend.typeparser`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the expression lexer."""

    # Keywords
    CONST = "const"
    TRUE = "true"
    FALSE = "false"
    NULLPTR = "nullptr"

    # Symbols and operators
    SCOPE = "::"
    LANGLE = "<"
    RANGLE = ">"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    COMMA = ","
    STAR = "*"
    AMP = "&"
    AMPAMP = "&&"
    MINUS = "-"
    PLUS = "+"

    # Literals
    STRING = "STRING"
    CHAR = "CHAR"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of input
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        value: The raw text of the token. Numeric literals have their C++
            suffixes removed; string and char tokens hold the decoded content.
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
    """

    type: TokenType
    value: str
    line: int
    column: int


class LexerError(Exception):
    """Raised when the scanner encounters an invalid character or unterminated literal.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str) -> list[Token]:
    """Tokenize a C++ type or expression string.

    Args:
        source: The expression text.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On unexpected characters or unterminated literals.
    """
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_KEYWORDS: dict[str, TokenType] = {
    "const": TokenType.CONST,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "nullptr": TokenType.NULLPTR,
}

_SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "<": TokenType.LANGLE,
    ">": TokenType.RANGLE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    ",": TokenType.COMMA,
    "*": TokenType.STAR,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
}

_ESCAPES: dict[str, str] = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", '"': '"', "'": "'"}

_INTEGER_SUFFIX_CHARS = "uUlL"
_FLOAT_SUFFIX_CHARS = "fFlL"


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(Token(TokenType.EOF, "", self._line, self._column))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self) -> str:
        """Return the character one position ahead, or '' at end of input."""
        if self._pos + 1 < len(self._source):
            return self._source[self._pos + 1]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._source) and self._current() in " \t\r\n":
            self._advance()

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        line = self._line
        col = self._column

        if ch == ":":
            if self._peek() != ":":
                raise LexerError("Unexpected character: ':'", line, col)
            self._advance()
            self._advance()
            self._tokens.append(Token(TokenType.SCOPE, "::", line, col))
        elif ch == "&":
            self._advance()
            if self._current() == "&":
                self._advance()
                self._tokens.append(Token(TokenType.AMPAMP, "&&", line, col))
            else:
                self._tokens.append(Token(TokenType.AMP, "&", line, col))
        elif ch == "." and self._peek().isdigit():
            self._scan_number(line, col)
        elif ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._tokens.append(Token(_SINGLE_CHAR_TOKENS[ch], ch, line, col))
        elif ch == '"':
            self._scan_quoted('"', TokenType.STRING, line, col)
        elif ch == "'":
            self._scan_quoted("'", TokenType.CHAR, line, col)
        elif ch.isdigit():
            self._scan_number(line, col)
        elif ch.isalpha() or ch == "_":
            self._scan_identifier_or_keyword(line, col)
        else:
            raise LexerError(f"Unexpected character: {ch!r}", line, col)

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_quoted(self, quote: str, token_type: TokenType, line: int, col: int) -> None:
        """Scan a string or character literal with escape sequences."""
        self._advance()  # opening quote
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._advance()  # closing quote
                self._tokens.append(Token(token_type, "".join(chars), line, col))
                return
            if ch == "\\":
                self._advance()
                esc = self._current()
                if esc not in _ESCAPES:
                    raise LexerError(f"Invalid escape sequence: '\\{esc}'", self._line, self._column)
                chars.append(_ESCAPES[esc])
                self._advance()
            else:
                chars.append(ch)
                self._advance()
        raise LexerError("Unterminated literal", line, col)

    def _scan_number(self, line: int, col: int) -> None:
        """Scan an integer or floating-point literal, dropping C++ suffixes.

        Hexadecimal integers keep their ``0x`` prefix. A float is any literal with
        a decimal point or an exponent.
        """
        start = self._pos
        if self._current() == "0" and self._peek() in ("x", "X"):
            self._advance()
            self._advance()
            while self._current() and self._current() in "0123456789abcdefABCDEF":
                self._advance()
            value = self._source[start : self._pos]
            self._skip_suffix(_INTEGER_SUFFIX_CHARS)
            self._tokens.append(Token(TokenType.INTEGER, value, line, col))
            return

        is_float = False
        while self._current().isdigit():
            self._advance()
        if self._current() == ".":
            is_float = True
            self._advance()
            while self._current().isdigit():
                self._advance()
        if self._current() in ("e", "E") and (
            self._peek().isdigit() or (self._peek() in ("+", "-") and self._peek_at(2).isdigit())
        ):
            is_float = True
            self._advance()
            if self._current() in ("+", "-"):
                self._advance()
            while self._current().isdigit():
                self._advance()

        value = self._source[start : self._pos]
        if is_float:
            self._skip_suffix(_FLOAT_SUFFIX_CHARS)
            self._tokens.append(Token(TokenType.FLOAT, value, line, col))
        else:
            self._skip_suffix(_INTEGER_SUFFIX_CHARS)
            self._tokens.append(Token(TokenType.INTEGER, value, line, col))

    def _peek_at(self, offset: int) -> str:
        if self._pos + offset < len(self._source):
            return self._source[self._pos + offset]
        return ""

    def _skip_suffix(self, allowed: str) -> None:
        while self._current() and self._current() in allowed:
            self._advance()

    def _scan_identifier_or_keyword(self, line: int, col: int) -> None:
        """Scan an identifier and map it to a keyword token type if applicable."""
        start = self._pos
        while self._pos < len(self._source) and (self._current().isalnum() or self._current() == "_"):
            self._advance()
        value = self._source[start : self._pos]
        token_type = _KEYWORDS.get(value, TokenType.IDENTIFIER)
        self._tokens.append(Token(token_type, value, line, col))
