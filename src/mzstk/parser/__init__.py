"""
mzstk.parser - mzstk front end

Tokenizer and tree builder for .mzstk programs.
Converts source text into an Abstract Syntax Tree (AST).
"""

from mzstk.parser.errors import (
    TranslationError,
    LexError,
    StructuralError,
    ParseError,
    ResourceError,
)
from mzstk.parser.lexer import Lexer, Token, TokenType, tokenize, tokenize_file
from mzstk.parser.parser import (
    Parser,
    ASTNode,
    NodeType,
    DEFAULT_MAX_STACK_DEPTH,
    build,
    parse_file,
    parse_source,
)
from mzstk.parser.printer import format_ast, print_ast

__all__ = [
    # Errors
    "TranslationError",
    "LexError",
    "StructuralError",
    "ParseError",
    "ResourceError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "tokenize_file",
    # Tree builder
    "Parser",
    "ASTNode",
    "NodeType",
    "DEFAULT_MAX_STACK_DEPTH",
    "build",
    "parse_file",
    "parse_source",
    # Dump
    "format_ast",
    "print_ast",
]
