# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for .isx files.

Converts a token stream produced by the lexer into a :class:`Program` AST.
The parser is LL(1) and never raises: syntax errors are recorded as
:class:`ParseError` values and parsing continues, so callers always receive
a best-effort tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from isomorph.parser.ast import (
    BodyItem,
    DiagramDecl,
    DiagramKind,
    EntityDecl,
    EntityKind,
    EnumValueDecl,
    FieldDecl,
    GenericType,
    ImportDecl,
    LayoutAnnotation,
    LiteralExpr,
    Member,
    MethodDecl,
    Modifier,
    NoteDecl,
    NullableType,
    PackageDecl,
    ParamDecl,
    Program,
    RelationDecl,
    RelationKind,
    SimpleType,
    Span,
    StyleDecl,
    TypeExpr,
    VisibilitySymbol,
)
from isomorph.parser.lexer import KEYWORDS, RELATION_OPERATORS, Token, TokenKind, lex

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ParseError:
    """A syntax error detected while parsing.

    Attributes:
        message: Human-readable description of the error.
        line: 1-based line number of the error.
        col: 1-based column number of the error.
        pos: 0-based offset of the offending token in the source text.
    """

    message: str
    line: int
    col: int
    pos: int


@dataclass(frozen=True)
class ParseResult:
    """The parsed program together with all syntax errors found."""

    program: Program
    errors: list[ParseError] = field(default_factory=list)


def parse(source: str) -> ParseResult:
    """Parse Isomorph source text into a Program AST.

    Lexical errors are reported first, followed by parse errors.

    Args:
        source: The full text of an .isx file.

    Returns:
        A ParseResult holding the (possibly partial) program and all
        lexical and syntax errors.
    """
    lexed = lex(source)
    result = Parser(lexed.tokens).parse()
    lex_errors = [ParseError(e.message, e.line, e.col, e.pos) for e in lexed.errors]
    return ParseResult(program=result.program, errors=lex_errors + result.errors)


class Parser:
    """Recursive-descent parser for Isomorph token streams."""

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            end = tokens[-1].end if tokens else 0
            line = tokens[-1].line if tokens else 1
            col = tokens[-1].col if tokens else 1
            tokens = [*tokens, Token(TokenKind.EOF, "", end, end, line, col)]
        self._tokens = tokens
        self._pos = 0
        self._last_end = 0
        self._depth = 0
        self._errors: list[ParseError] = []

    def parse(self) -> ParseResult:
        """Parse the full token stream and return the program and errors."""
        first = self._current()
        imports: list[ImportDecl] = []
        diagrams: list[DiagramDecl] = []
        while not self._at_end():
            if self._check(TokenKind.IMPORT):
                imports.append(self._parse_import())
            elif self._check(TokenKind.DIAGRAM):
                diagrams.append(self._parse_diagram())
            else:
                tok = self._current()
                self._error(f"Unexpected token {tok.value!r} at top level", tok)
                self._advance()
        span = Span(start=first.start, end=self._current().end, line=first.line, col=first.col)
        program = Program(imports=imports, diagrams=diagrams, span=span)
        return ParseResult(program=program, errors=list(self._errors))

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        """Return the token *offset* positions ahead, clamped to EOF."""
        idx = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[idx]

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._current().kind == TokenKind.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if tok.kind != TokenKind.EOF:
            self._pos += 1
            self._last_end = tok.end
        return tok

    def _check(self, *kinds: TokenKind) -> bool:
        """Return True if the current token matches any of the given kinds (without
        consuming).
        """
        return self._current().kind in kinds

    def _error(self, message: str, tok: Token) -> None:
        self._errors.append(ParseError(message, tok.line, tok.col, tok.start))

    def _expect(self, kind: TokenKind) -> Token:
        """Consume the current token if it has the given kind.

        On mismatch, records a ParseError and returns the current token
        without consuming it.
        """
        tok = self._current()
        if tok.kind != kind:
            self._error(f"Expected {_describe(kind)}, got {_describe_token(tok)}", tok)
            return tok
        return self._advance()

    def _expect_name(self) -> str:
        """Consume an identifier, or a keyword used in a name position.

        Records a ParseError and returns '' for any other token.
        """
        tok = self._current()
        if _is_name(tok):
            return self._advance().value
        self._error(f"Expected identifier, got {_describe_token(tok)}", tok)
        return ""

    def _expect_ident(self) -> str:
        """Consume an identifier and return its text, or '' on mismatch."""
        tok = self._expect(TokenKind.IDENT)
        return tok.value if tok.kind == TokenKind.IDENT else ""

    def _span_from(self, first: Token) -> Span:
        """Return the span from *first* through the last consumed token."""
        end = max(self._last_end, first.start)
        return Span(start=first.start, end=end, line=first.line, col=first.col)

    def _skip_nested(self, open_kind: TokenKind, close_kind: TokenKind) -> None:
        """Skip tokens up to the closer matching an already consumed opener.

        The closer itself is left as the current token.
        """
        depth = 1
        while not self._at_end():
            kind = self._current().kind
            if kind == open_kind:
                depth += 1
            elif kind == close_kind:
                depth -= 1
                if depth == 0:
                    return
            self._advance()

    def _skip_unexpected(self, context: str) -> None:
        """Record an error for the current token and skip it."""
        tok = self._current()
        self._error(f"Unexpected token {tok.value!r} in {context}", tok)
        self._advance()

    # ------------------------------------------------------------------
    # Top-level declarations
    # ------------------------------------------------------------------

    def _parse_import(self) -> ImportDecl:
        """Parse: import "<path>" [;]"""
        first = self._expect(TokenKind.IMPORT)
        path_tok = self._expect(TokenKind.STRING)
        path = path_tok.value if path_tok.kind == TokenKind.STRING else ""
        if self._check(TokenKind.SEMI):
            self._advance()
        return ImportDecl(path=path, span=self._span_from(first))

    def _parse_diagram(self) -> DiagramDecl:
        """Parse: diagram <Name> : <kind> { <body-item>* }"""
        first = self._expect(TokenKind.DIAGRAM)
        name = self._expect_ident()
        self._expect(TokenKind.COLON)
        diagram_kind = self._parse_diagram_kind()
        self._expect(TokenKind.LBRACE)
        body = self._parse_body("diagram body")
        self._expect(TokenKind.RBRACE)
        return DiagramDecl(name=name, diagram_kind=diagram_kind, body=body, span=self._span_from(first))

    def _parse_diagram_kind(self) -> DiagramKind:
        """Parse the diagram kind, defaulting to 'class' when it is not recognized."""
        tok = self._current()
        kind = _DIAGRAM_KINDS.get(tok.value) if tok.kind != TokenKind.STRING else None
        if kind is not None:
            self._advance()
            return kind
        self._error(f"Unknown diagram kind {tok.value!r}", tok)
        if not self._check(TokenKind.LBRACE, TokenKind.EOF):
            self._advance()
        return DiagramKind.CLASS

    # ------------------------------------------------------------------
    # Body items
    # ------------------------------------------------------------------

    def _parse_body(self, context: str) -> list[BodyItem]:
        """Parse body items up to (not including) the closing brace."""
        items: list[BodyItem] = []
        while not self._check(TokenKind.RBRACE, TokenKind.EOF):
            start = self._pos
            item = self._parse_body_item(context)
            if item is not None:
                items.append(item)
            if self._pos == start:
                self._skip_unexpected(context)
        return items

    def _parse_body_item(self, context: str) -> BodyItem | None:
        """Parse one body item, dispatching on the current token."""
        tok = self._current()
        if tok.kind == TokenKind.AT:
            return self._parse_layout_annotation()
        if tok.kind == TokenKind.PACKAGE:
            return self._parse_package()
        if tok.kind == TokenKind.NOTE:
            return self._parse_note()
        if tok.kind == TokenKind.STYLE:
            return self._parse_style()
        if self._is_entity_start():
            return self._parse_entity()
        if tok.kind == TokenKind.IDENT and self._peek().kind in RELATION_OPERATORS:
            return self._parse_relation()
        self._skip_unexpected(context)
        return None

    def _is_entity_start(self) -> bool:
        kind = self._current().kind
        return kind in _MODIFIERS or kind in _ENTITY_KINDS

    # ------------------------------------------------------------------
    # Packages
    # ------------------------------------------------------------------

    def _parse_package(self) -> PackageDecl:
        """Parse: package <Name> { <body-item>* }"""
        first = self._expect(TokenKind.PACKAGE)
        name = self._expect_ident()
        lbrace = self._expect(TokenKind.LBRACE)
        body: list[BodyItem] = []
        if self._depth >= _MAX_NESTING_DEPTH:
            self._error("Nesting too deep", lbrace)
            if lbrace.kind == TokenKind.LBRACE:
                self._skip_nested(TokenKind.LBRACE, TokenKind.RBRACE)
        else:
            self._depth += 1
            body = self._parse_body("package body")
            self._depth -= 1
        self._expect(TokenKind.RBRACE)
        return PackageDecl(name=name, body=body, span=self._span_from(first))

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def _parse_entity(self) -> EntityDecl:
        """Parse: <modifier>* <kind> <Name> [<<Stereo>>] [extends ..] [implements ..] [{ .. }]"""
        first = self._current()
        modifiers = self._parse_modifiers()

        kind_tok = self._current()
        entity_kind = _ENTITY_KINDS.get(kind_tok.kind)
        if entity_kind is None:
            self._error(
                f"Expected entity kind after modifiers, got {_describe_token(kind_tok)}",
                kind_tok,
            )
            entity_kind = EntityKind.CLASS
        else:
            self._advance()

        name = self._expect_ident()

        stereotype: str | None = None
        if self._check(TokenKind.STEREO_OPEN):
            self._advance()  # consume <<
            stereotype = self._expect_ident()
            self._expect_stereotype_close()

        extends_clause: list[str] = []
        implements_clause: list[str] = []
        if self._check(TokenKind.EXTENDS):
            self._advance()
            extends_clause = self._parse_identifier_list()
        if self._check(TokenKind.IMPLEMENTS):
            self._advance()
            implements_clause = self._parse_identifier_list()

        members: list[Member] = []
        if self._check(TokenKind.LBRACE):
            self._advance()  # consume {
            while not self._check(TokenKind.RBRACE, TokenKind.EOF):
                start = self._pos
                member = self._parse_member(entity_kind)
                if member is not None:
                    members.append(member)
                if self._pos == start:
                    self._skip_unexpected(f"{entity_kind.value} body")
            self._expect(TokenKind.RBRACE)

        return EntityDecl(
            modifiers=modifiers,
            entity_kind=entity_kind,
            name=name,
            stereotype=stereotype,
            extends_clause=extends_clause,
            implements_clause=implements_clause,
            members=members,
            span=self._span_from(first),
        )

    def _expect_stereotype_close(self) -> None:
        """Consume '>>', which the lexer always emits as two adjacent GT tokens."""
        first = self._current()
        second = self._peek()
        if first.kind == TokenKind.GT and second.kind == TokenKind.GT and second.start == first.end:
            self._advance()
            self._advance()
            return
        self._error(f"Expected '>>', got {_describe_token(first)}", first)
        # Consume a lone '>' so that '<<Name>' does not derail the rest of the entity.
        if first.kind == TokenKind.GT:
            self._advance()

    def _parse_modifiers(self) -> list[Modifier]:
        modifiers: list[Modifier] = []
        while self._current().kind in _MODIFIERS:
            modifiers.append(_MODIFIERS[self._advance().kind])
        return modifiers

    def _parse_identifier_list(self) -> list[str]:
        """Parse a comma-separated list of identifiers."""
        names = [self._expect_ident()]
        while self._check(TokenKind.COMMA):
            self._advance()  # consume ,
            names.append(self._expect_ident())
        return [n for n in names if n]

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def _parse_member(self, entity_kind: EntityKind) -> Member | None:
        """Parse one member: an enum value, a field, or a method.

        Returns None for separators.
        """
        if self._check(TokenKind.SEMI):
            self._advance()
            return None
        if entity_kind == EntityKind.ENUM:
            if self._check(TokenKind.COMMA):
                self._advance()
                return None
            # Keywords other than modifiers are valid value names, e.g. `enum Kind { node, actor }`.
            tok = self._current()
            is_value_name = _is_name(tok) and tok.kind not in _MODIFIERS
            if is_value_name and self._peek().kind not in (TokenKind.COLON, TokenKind.LPAREN):
                return self._parse_enum_value()

        first = self._current()
        if first.kind not in _VISIBILITIES and first.kind not in _MODIFIERS and not _is_name(first):
            self._skip_unexpected(f"{entity_kind.value} body")
            return None
        visibility = self._parse_visibility()
        modifiers = self._parse_modifiers()
        name = self._expect_name()
        if not name:
            return None
        if self._check(TokenKind.LPAREN):
            return self._parse_method_rest(first, visibility, modifiers, name)
        return self._parse_field_rest(first, visibility, modifiers, name)

    def _parse_visibility(self) -> VisibilitySymbol:
        visibility = _VISIBILITIES.get(self._current().kind)
        if visibility is None:
            return VisibilitySymbol.NONE
        self._advance()
        return visibility

    def _parse_field_rest(
        self,
        first: Token,
        visibility: VisibilitySymbol,
        modifiers: list[Modifier],
        name: str,
    ) -> FieldDecl:
        """Parse: : <type> [= <literal>] [;]"""
        self._expect(TokenKind.COLON)
        field_type = self._parse_type_expr()
        default_value: LiteralExpr | None = None
        if self._check(TokenKind.EQ):
            self._advance()
            default_value = self._parse_literal()
        if self._check(TokenKind.SEMI):
            self._advance()
        return FieldDecl(
            visibility=visibility,
            modifiers=modifiers,
            name=name,
            type=field_type,
            default_value=default_value,
            span=self._span_from(first),
        )

    def _parse_method_rest(
        self,
        first: Token,
        visibility: VisibilitySymbol,
        modifiers: list[Modifier],
        name: str,
    ) -> MethodDecl:
        """Parse: ( <params> ) : <type> [;]"""
        self._expect(TokenKind.LPAREN)
        params: list[ParamDecl] = []
        if not self._check(TokenKind.RPAREN):
            params.append(self._parse_param())
            while self._check(TokenKind.COMMA):
                self._advance()
                params.append(self._parse_param())
        self._expect(TokenKind.RPAREN)
        self._expect(TokenKind.COLON)
        return_type = self._parse_type_expr()
        if self._check(TokenKind.SEMI):
            self._advance()
        return MethodDecl(
            visibility=visibility,
            modifiers=modifiers,
            name=name,
            params=params,
            return_type=return_type,
            span=self._span_from(first),
        )

    def _parse_param(self) -> ParamDecl:
        """Parse: <name> : <type>"""
        first = self._current()
        name = self._expect_name()
        self._expect(TokenKind.COLON)
        param_type = self._parse_type_expr()
        return ParamDecl(name=name, type=param_type, span=self._span_from(first))

    def _parse_enum_value(self) -> EnumValueDecl:
        tok = self._advance()
        return EnumValueDecl(name=tok.value, span=self._span_from(tok))

    # ------------------------------------------------------------------
    # Type expressions
    # ------------------------------------------------------------------

    def _parse_type_expr(self) -> TypeExpr:
        """Parse: <type-name> [< <type-expr> (, <type-expr>)* >] [?]

        The nullable suffix wraps the complete preceding type, so
        ``List<string>?`` is a nullable list rather than a list of
        nullable strings.
        """
        first = self._current()
        base: TypeExpr
        if first.kind == TokenKind.IDENT or first.kind in _TYPE_KEYWORDS:
            name = self._advance().value
            if self._check(TokenKind.LT) and self._depth >= _MAX_NESTING_DEPTH:
                self._error("Nesting too deep", self._advance())
                self._skip_nested(TokenKind.LT, TokenKind.GT)
                self._expect(TokenKind.GT)
                base = SimpleType(name=name, span=self._span_from(first))
            elif self._check(TokenKind.LT):
                self._depth += 1
                args = self._parse_type_args()
                self._depth -= 1
                base = GenericType(base=name, args=args, span=self._span_from(first))
            else:
                base = SimpleType(name=name, span=self._span_from(first))
        else:
            self._error(f"Expected type expression, got {_describe_token(first)}", first)
            base = SimpleType(name="any", span=self._span_from(first))

        if self._check(TokenKind.QUESTION):
            self._advance()
            return NullableType(inner=base, span=self._span_from(first))
        return base

    def _parse_type_args(self) -> list[TypeExpr]:
        """Parse: < <type-expr> (, <type-expr>)* >"""
        self._expect(TokenKind.LT)
        args = [self._parse_type_expr()]
        while self._check(TokenKind.COMMA):
            self._advance()
            args.append(self._parse_type_expr())
        self._expect(TokenKind.GT)
        return args

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def _parse_relation(self) -> RelationDecl:
        """Parse: <From> <operator> <To> [ [key = "value", ...] ]"""
        first = self._expect(TokenKind.IDENT)
        op = self._advance()
        rel_kind = RelationKind(op.value)
        to = self._expect_ident()

        label: str | None = None
        from_mult: str | None = None
        to_mult: str | None = None
        style: dict[str, str] = {}
        if self._check(TokenKind.LBRACKET):
            self._advance()  # consume [
            while not self._check(TokenKind.RBRACKET, TokenKind.EOF):
                start = self._pos
                key = self._expect_name()
                self._expect(TokenKind.EQ)
                value = self._parse_attribute_value()
                if key == "label":
                    label = value
                elif key == "fromMult":
                    from_mult = value
                elif key == "toMult":
                    to_mult = value
                elif key:
                    style[key] = value
                if self._check(TokenKind.COMMA):
                    self._advance()
                if self._pos == start:
                    self._skip_unexpected("relation attributes")
            self._expect(TokenKind.RBRACKET)

        return RelationDecl(
            from_=first.value,
            to=to,
            rel_kind=rel_kind,
            label=label,
            from_mult=from_mult,
            to_mult=to_mult,
            style=style,
            span=self._span_from(first),
        )

    def _parse_attribute_value(self) -> str:
        """Parse a string or color attribute value."""
        if self._check(TokenKind.COLOR):
            return self._advance().value
        tok = self._expect(TokenKind.STRING)
        return tok.value if tok.kind == TokenKind.STRING else ""

    # ------------------------------------------------------------------
    # Notes, styles, and layout annotations
    # ------------------------------------------------------------------

    def _parse_note(self) -> NoteDecl:
        """Parse: note "<text>" [on <Entity>]"""
        first = self._expect(TokenKind.NOTE)
        text_tok = self._expect(TokenKind.STRING)
        text = text_tok.value if text_tok.kind == TokenKind.STRING else ""
        on: str | None = None
        if self._check(TokenKind.ON):
            self._advance()
            on = self._expect_ident() or None
        return NoteDecl(text=text, on=on, span=self._span_from(first))

    def _parse_style(self) -> StyleDecl:
        """Parse: style <Entity> { <key> = <value> [;] ... }"""
        first = self._expect(TokenKind.STYLE)
        target = self._expect_ident()
        self._expect(TokenKind.LBRACE)
        styles: dict[str, str] = {}
        while not self._check(TokenKind.RBRACE, TokenKind.EOF):
            start = self._pos
            key = self._expect_name()
            self._expect(TokenKind.EQ)
            if self._check(TokenKind.NUMBER):
                value = self._advance().value
            else:
                value = self._parse_attribute_value()
            if key:
                styles[key] = value
            if self._check(TokenKind.SEMI, TokenKind.COMMA):
                self._advance()
            if self._pos == start:
                self._skip_unexpected("style block")
        self._expect(TokenKind.RBRACE)
        return StyleDecl(target=target, styles=styles, span=self._span_from(first))

    def _parse_layout_annotation(self) -> LayoutAnnotation:
        """Parse: @<Entity> at ( <x> , <y> )"""
        first = self._expect(TokenKind.AT)
        entity = self._expect_ident()
        self._expect(TokenKind.AT_KW)
        self._expect(TokenKind.LPAREN)
        x = self._parse_coordinate()
        self._expect(TokenKind.COMMA)
        y = self._parse_coordinate()
        self._expect(TokenKind.RPAREN)
        return LayoutAnnotation(entity=entity, x=x, y=y, span=self._span_from(first))

    def _parse_coordinate(self) -> float:
        tok = self._expect(TokenKind.NUMBER)
        if tok.kind != TokenKind.NUMBER:
            return 0.0
        return float(tok.value)

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _parse_literal(self) -> LiteralExpr:
        """Parse a string, number, or boolean literal."""
        tok = self._current()
        if tok.kind == TokenKind.STRING:
            self._advance()
            return LiteralExpr(value=tok.value, span=self._span_from(tok))
        if tok.kind == TokenKind.NUMBER:
            self._advance()
            value: int | float = float(tok.value) if "." in tok.value else int(tok.value)
            return LiteralExpr(value=value, span=self._span_from(tok))
        if tok.kind == TokenKind.IDENT and tok.value in ("true", "false"):
            self._advance()
            return LiteralExpr(value=tok.value == "true", span=self._span_from(tok))
        self._error(f"Expected literal value, got {_describe_token(tok)}", tok)
        return LiteralExpr(value="", span=self._span_from(tok))


# ################
# Implementation
# ################

# Deepest package or type-argument nesting the parser descends into. Deeper
# input is reported and skipped, which also bounds the depth of the AST.
_MAX_NESTING_DEPTH = 100

_DIAGRAM_KINDS: dict[str, DiagramKind] = {kind.value: kind for kind in DiagramKind}

_ENTITY_KINDS: dict[TokenKind, EntityKind] = {
    TokenKind.CLASS: EntityKind.CLASS,
    TokenKind.INTERFACE: EntityKind.INTERFACE,
    TokenKind.ENUM: EntityKind.ENUM,
    TokenKind.ACTOR: EntityKind.ACTOR,
    TokenKind.USECASE: EntityKind.USECASE,
    TokenKind.COMPONENT: EntityKind.COMPONENT,
    TokenKind.NODE: EntityKind.NODE,
}

_MODIFIERS: dict[TokenKind, Modifier] = {
    TokenKind.ABSTRACT: Modifier.ABSTRACT,
    TokenKind.STATIC: Modifier.STATIC,
    TokenKind.FINAL: Modifier.FINAL,
}

_VISIBILITIES: dict[TokenKind, VisibilitySymbol] = {
    TokenKind.PLUS: VisibilitySymbol.PUBLIC,
    TokenKind.MINUS: VisibilitySymbol.PRIVATE,
    TokenKind.HASH: VisibilitySymbol.PROTECTED,
    TokenKind.TILDE: VisibilitySymbol.PACKAGE,
}

_TYPE_KEYWORDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.LIST,
        TokenKind.MAP,
        TokenKind.SET,
        TokenKind.OPTIONAL,
        TokenKind.INT,
        TokenKind.FLOAT,
        TokenKind.BOOL,
        TokenKind.STRING_T,
        TokenKind.VOID,
    }
)


def _is_name(tok: Token) -> bool:
    """Return True for tokens usable as member, parameter, or attribute names."""
    return tok.kind == TokenKind.IDENT or tok.kind in KEYWORDS


def _describe(kind: TokenKind) -> str:
    """Return a readable name for a token kind, e.g. "'{'" or 'identifier'."""
    if kind == TokenKind.IDENT:
        return "identifier"
    if kind == TokenKind.STRING:
        return "string"
    if kind == TokenKind.NUMBER:
        return "number"
    if kind == TokenKind.COLOR:
        return "color"
    if kind == TokenKind.EOF:
        return "end of input"
    return repr(kind.value)


def _describe_token(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    if tok.kind == TokenKind.STRING:
        return f"string {tok.value!r}"
    return repr(tok.value)
