# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declaration documents and the C++ type/expression parser."""

from scriptbind.frontend.declarations import (
    ConstructorDecl,
    DeclarationDocument,
    DeclarationError,
    EnumDecl,
    EnumEntryDecl,
    FieldDecl,
    FunctionDecl,
    InitializerDecl,
    MethodDecl,
    ParamDecl,
    RecordDecl,
    SymbolTable,
    load_declarations,
)
from scriptbind.frontend.lexer import LexerError, Token, TokenType, tokenize
from scriptbind.frontend.typeparser import (
    BuiltinType,
    CallExpr,
    Expression,
    FunctionType,
    LiteralExpr,
    NamedType,
    NameExpr,
    PointerType,
    ReferenceType,
    TypeNode,
    TypeSyntaxError,
    UnaryExpr,
    parse_expression,
    parse_type,
    render_argument,
    render_expression,
    render_type,
)

__all__ = [
    # Documents
    "DeclarationError",
    "DeclarationDocument",
    "EnumDecl",
    "EnumEntryDecl",
    "RecordDecl",
    "ConstructorDecl",
    "InitializerDecl",
    "MethodDecl",
    "FieldDecl",
    "FunctionDecl",
    "ParamDecl",
    "SymbolTable",
    "load_declarations",
    # Lexer
    "LexerError",
    "Token",
    "TokenType",
    "tokenize",
    # Types and expressions
    "TypeSyntaxError",
    "BuiltinType",
    "NamedType",
    "PointerType",
    "ReferenceType",
    "FunctionType",
    "TypeNode",
    "LiteralExpr",
    "NameExpr",
    "UnaryExpr",
    "CallExpr",
    "Expression",
    "parse_type",
    "parse_expression",
    "render_type",
    "render_expression",
    "render_argument",
]
