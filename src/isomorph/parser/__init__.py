# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for .isx files."""

from isomorph.parser.lexer import LexError, LexResult, Token, TokenKind, lex
from isomorph.parser.parser import ParseError, Parser, ParseResult, parse

__all__ = [
    "lex",
    "LexError",
    "LexResult",
    "Token",
    "TokenKind",
    "parse",
    "Parser",
    "ParseError",
    "ParseResult",
]
