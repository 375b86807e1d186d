# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for .isx files.

Converts raw source text into a sequence of tokens for subsequent parsing.
The scanner never raises: characters it cannot classify are reported as
:class:`LexError` records and skipped.
"""

import enum
from dataclasses import dataclass, field

# ###############
# Public Interface
# ###############


class TokenKind(enum.Enum):
    """All token kinds produced by the Isomorph lexer."""

    # Keywords
    DIAGRAM = "diagram"
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ABSTRACT = "abstract"
    PACKAGE = "package"
    IMPORT = "import"
    NOTE = "note"
    STYLE = "style"
    ON = "on"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    AT_KW = "at"
    STATIC = "static"
    FINAL = "final"
    VOID = "void"
    FOR = "for"
    ACTOR = "actor"
    USECASE = "usecase"
    COMPONENT = "component"
    NODE = "node"
    SEQUENCE = "sequence"
    FLOW = "flow"
    DEPLOYMENT = "deployment"
    LIST = "list"
    MAP = "map"
    SET = "set"
    OPTIONAL = "optional"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING_T = "string"

    # Relation operators
    INHERIT = "--|>"
    REALIZE = "..|>"
    INHERIT_R = "<|--"
    REALIZE_R = "<|.."
    DEPEND_R = "<.."
    AGGR_R = "o--"
    COMPOSE_R = "*--"
    ASSOC_DIR = "-->"
    DEPEND = "..>"
    AGGR = "--o"
    COMPOSE = "--*"
    RESTR = "--x"
    ASSOC = "--"

    # Multi-character punctuation
    STEREO_OPEN = "<<"
    DOTDOT = ".."

    # Single-character punctuation
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    COLON = ":"
    SEMI = ";"
    DOT = "."
    AT = "@"
    EQ = "="
    PIPE = "|"
    PLUS = "+"
    MINUS = "-"
    HASH = "#"
    TILDE = "~"
    LT = "<"
    GT = ">"
    QUESTION = "?"

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"
    COLOR = "COLOR"

    # Identifiers
    IDENT = "IDENT"

    # End of file
    EOF = "EOF"


RELATION_OPERATORS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.INHERIT,
        TokenKind.REALIZE,
        TokenKind.INHERIT_R,
        TokenKind.REALIZE_R,
        TokenKind.DEPEND_R,
        TokenKind.AGGR_R,
        TokenKind.COMPOSE_R,
        TokenKind.ASSOC_DIR,
        TokenKind.DEPEND,
        TokenKind.AGGR,
        TokenKind.COMPOSE,
        TokenKind.RESTR,
        TokenKind.ASSOC,
    }
)

KEYWORDS: frozenset[TokenKind] = frozenset(
    kind for kind in TokenKind if kind.value.isalpha() and kind.value.islower()
)


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        kind: The kind of token.
        value: The raw text of the token (or decoded string content for STRING tokens).
        start: 0-based offset of the first character of the token.
        end: 0-based offset one past the last character of the token.
        line: 1-based line number where the token starts.
        col: 1-based column number where the token starts.
    """

    kind: TokenKind
    value: str
    start: int
    end: int
    line: int
    col: int


@dataclass(frozen=True)
class LexError:
    """A character sequence the scanner could not turn into a token.

    Attributes:
        message: Human-readable description of the problem.
        line: 1-based line number of the error.
        col: 1-based column number of the error.
        pos: 0-based offset of the error in the source text.
    """

    message: str
    line: int
    col: int
    pos: int


@dataclass(frozen=True)
class LexResult:
    """Tokens and lexical errors produced from one source text."""

    tokens: list[Token] = field(default_factory=list)
    errors: list[LexError] = field(default_factory=list)


def lex(source: str) -> LexResult:
    """Tokenize Isomorph source text into a sequence of tokens.

    Comments and whitespace are consumed and not included in the output.
    The final token is always a single EOF token positioned at the end of
    the input.

    Args:
        source: The full text of an .isx file.

    Returns:
        A LexResult holding the tokens and any lexical errors encountered.
    """
    return _Lexer(source).run()


# ################
# Implementation
# ################

_KEYWORD_KINDS: dict[str, TokenKind] = {kind.value: kind for kind in KEYWORDS}

# Tried in order; every entry must come before any entry that is its prefix.
_OPERATORS: tuple[TokenKind, ...] = (
    TokenKind.INHERIT,
    TokenKind.REALIZE,
    TokenKind.INHERIT_R,
    TokenKind.REALIZE_R,
    TokenKind.DEPEND_R,
    TokenKind.AGGR_R,
    TokenKind.COMPOSE_R,
    TokenKind.ASSOC_DIR,
    TokenKind.DEPEND,
    TokenKind.AGGR,
    TokenKind.COMPOSE,
    TokenKind.RESTR,
    TokenKind.ASSOC,
    TokenKind.STEREO_OPEN,
    TokenKind.DOTDOT,
)

_SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMI,
    ".": TokenKind.DOT,
    "@": TokenKind.AT,
    "=": TokenKind.EQ,
    "|": TokenKind.PIPE,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "~": TokenKind.TILDE,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "?": TokenKind.QUESTION,
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or "a" <= ch <= "z" or "A" <= ch <= "Z"


def _is_ident_part(ch: str) -> bool:
    return _is_ident_start(ch) or _is_digit(ch)


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []
        self._errors: list[LexError] = []

    def run(self) -> LexResult:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace_and_comments()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(Token(TokenKind.EOF, "", self._pos, self._pos, self._line, self._column))
        return LexResult(tokens=self._tokens, errors=self._errors)

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, offset: int = 1) -> str:
        """Return the character *offset* positions ahead, or '' past end of input."""
        if self._pos + offset < len(self._source):
            return self._source[self._pos + offset]
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

    def _emit(self, kind: TokenKind, value: str, start: int, line: int, col: int) -> None:
        self._tokens.append(Token(kind, value, start, self._pos, line, col))

    def _error(self, message: str, line: int, col: int, pos: int) -> None:
        self._errors.append(LexError(message, line, col, pos))

    # ------------------------------------------------------------------
    # Whitespace and comment skipping
    # ------------------------------------------------------------------

    def _skip_whitespace_and_comments(self) -> None:
        """Skip all whitespace and comment runs at the current position."""
        while self._pos < len(self._source):
            ch = self._current()
            if ch in " \t\r\n":
                self._advance()
            elif ch == "/" and self._peek() == "/":
                self._skip_line_comment()
            elif ch == "/" and self._peek() == "*":
                self._skip_block_comment()
            else:
                break

    def _skip_line_comment(self) -> None:
        """Consume from '//' through end-of-line (exclusive of the newline itself)."""
        while self._pos < len(self._source) and self._current() != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        """Consume from '/*' through the matching '*/', or to end of input."""
        start = self._pos
        start_line = self._line
        start_col = self._column
        self._advance()  # /
        self._advance()  # *
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()  # *
                self._advance()  # /
                return
            self._advance()
        self._error("Unterminated block comment", start_line, start_col, start)

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        start = self._pos
        line = self._line
        col = self._column

        if ch == '"':
            self._scan_string(start, line, col)
        elif _is_digit(ch) or (ch == "-" and _is_digit(self._peek())):
            self._scan_number(start, line, col)
        elif ch == "o" and self._source.startswith("o--", self._pos):
            self._consume(3)
            self._emit(TokenKind.AGGR_R, "o--", start, line, col)
        elif _is_ident_start(ch):
            self._scan_identifier_or_keyword(start, line, col)
        elif self._scan_operator(start, line, col):
            pass
        elif ch == "#":
            self._scan_hash(start, line, col)
        elif ch in _SINGLE_CHAR_TOKENS:
            self._advance()
            self._emit(_SINGLE_CHAR_TOKENS[ch], ch, start, line, col)
        else:
            self._error(f"Unexpected character {ch!r}", line, col, start)
            self._advance()

    def _consume(self, count: int) -> None:
        for _ in range(count):
            self._advance()

    def _scan_operator(self, start: int, line: int, col: int) -> bool:
        """Scan a relation operator or multi-character punctuator, longest match first."""
        for kind in _OPERATORS:
            if self._source.startswith(kind.value, self._pos):
                self._consume(len(kind.value))
                self._emit(kind, kind.value, start, line, col)
                return True
        return False

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, start: int, line: int, col: int) -> None:
        """Scan a double-quoted string literal with escape sequences."""
        self._advance()  # opening "
        chars: list[str] = []
        while self._pos < len(self._source):
            ch = self._current()
            if ch == '"':
                self._advance()  # closing "
                self._emit(TokenKind.STRING, "".join(chars), start, line, col)
                return
            if ch == "\\":
                self._advance()
                if self._pos >= len(self._source):
                    break
                esc = self._advance()
                if esc == "n":
                    chars.append("\n")
                elif esc == "t":
                    chars.append("\t")
                else:
                    chars.append(esc)
            else:
                chars.append(self._advance())
        self._error("Unterminated string literal", line, col, start)
        self._emit(TokenKind.STRING, "".join(chars), start, line, col)

    def _scan_number(self, start: int, line: int, col: int) -> None:
        """Scan an integer or decimal literal, including a leading minus sign.

        A fraction requires at least one digit on both sides of the decimal point.
        """
        if self._current() == "-":
            self._advance()
        while self._pos < len(self._source) and _is_digit(self._current()):
            self._advance()
        if self._current() == "." and _is_digit(self._peek()):
            self._advance()  # consume the '.'
            while self._pos < len(self._source) and _is_digit(self._current()):
                self._advance()
        self._emit(TokenKind.NUMBER, self._source[start : self._pos], start, line, col)

    def _scan_hash(self, start: int, line: int, col: int) -> None:
        """Scan '#': a COLOR when exactly six hex digits follow, else the HASH symbol."""
        digits = self._source[self._pos + 1 : self._pos + 7]
        if len(digits) == 6 and all(d in _HEX_DIGITS for d in digits):
            self._consume(7)
            self._emit(TokenKind.COLOR, "#" + digits, start, line, col)
        else:
            self._advance()
            self._emit(TokenKind.HASH, "#", start, line, col)

    def _scan_identifier_or_keyword(self, start: int, line: int, col: int) -> None:
        """Scan an identifier and map it to a keyword kind if applicable."""
        while self._pos < len(self._source) and _is_ident_part(self._current()):
            self._advance()
        value = self._source[start : self._pos]
        kind = _KEYWORD_KINDS.get(value, TokenKind.IDENT)
        self._emit(kind, value, start, line, col)
