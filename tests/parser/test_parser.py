# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Isomorph recursive-descent parser."""

import pytest

from isomorph.parser import Parser, lex, parse
from isomorph.parser.ast import (
    DiagramKind,
    EntityDecl,
    EntityKind,
    EnumValueDecl,
    FieldDecl,
    GenericType,
    LayoutAnnotation,
    MethodDecl,
    Modifier,
    NoteDecl,
    NullableType,
    PackageDecl,
    Program,
    RelationDecl,
    RelationKind,
    SimpleType,
    StyleDecl,
    VisibilitySymbol,
)

# ###############
# Test Helpers
# ###############


def _parse(source: str) -> Program:
    """Parse source and assert that no errors were recorded."""
    result = parse(source)
    assert result.errors == [], f"Unexpected parse errors: {[e.message for e in result.errors]}"
    return result.program


def _body(source: str) -> list:
    """Parse a class-diagram body and return its items."""
    return _parse(f"diagram D : class {{ {source} }}").diagrams[0].body


def _entity(source: str) -> EntityDecl:
    items = _body(source)
    assert len(items) == 1
    assert isinstance(items[0], EntityDecl)
    return items[0]


def _field_type(type_source: str):
    entity = _entity(f"class A {{ x: {type_source} }}")
    member = entity.members[0]
    assert isinstance(member, FieldDecl)
    return member.type


# ###############
# Program Structure
# ###############


class TestProgram:
    def test_empty_source(self) -> None:
        program = _parse("")
        assert program.imports == []
        assert program.diagrams == []

    def test_single_empty_diagram(self) -> None:
        program = _parse("diagram Library : class { }")
        assert len(program.diagrams) == 1
        diagram = program.diagrams[0]
        assert diagram.name == "Library"
        assert diagram.diagram_kind == DiagramKind.CLASS
        assert diagram.body == []

    @pytest.mark.parametrize("kind", list(DiagramKind))
    def test_diagram_kinds(self, kind: DiagramKind) -> None:
        program = _parse(f"diagram D : {kind.value} {{ }}")
        assert program.diagrams[0].diagram_kind == kind

    def test_multiple_diagrams(self) -> None:
        program = _parse("diagram A : class { } diagram B : usecase { }")
        assert [d.name for d in program.diagrams] == ["A", "B"]

    def test_imports(self) -> None:
        program = _parse('import "shared/base.isx";\nimport "other.isx"\ndiagram D : class { }')
        assert [i.path for i in program.imports] == ["shared/base.isx", "other.isx"]

    def test_import_after_diagram_is_accepted(self) -> None:
        program = _parse('diagram D : class { } import "late.isx"')
        assert program.imports[0].path == "late.isx"

    def test_unknown_diagram_kind_defaults_to_class(self) -> None:
        result = parse("diagram D : mindmap { class A }")
        assert len(result.errors) == 1
        assert "Unknown diagram kind" in result.errors[0].message
        diagram = result.program.diagrams[0]
        assert diagram.diagram_kind == DiagramKind.CLASS
        assert diagram.body[0].name == "A"

    def test_missing_diagram_kind_keeps_body(self) -> None:
        result = parse("diagram D : { class A }")
        assert len(result.errors) == 1
        assert result.program.diagrams[0].body[0].name == "A"

    def test_parser_class_accepts_token_stream(self) -> None:
        tokens = lex("diagram D : flow { }").tokens
        result = Parser(tokens).parse()
        assert result.errors == []
        assert result.program.diagrams[0].diagram_kind == DiagramKind.FLOW

    def test_parser_appends_missing_eof(self) -> None:
        tokens = lex("diagram D : flow { }").tokens[:-1]
        result = Parser(tokens).parse()
        assert result.errors == []
        assert len(result.program.diagrams) == 1


# ###############
# Entities
# ###############


class TestEntities:
    @pytest.mark.parametrize("kind", list(EntityKind))
    def test_entity_kinds(self, kind: EntityKind) -> None:
        entity = _entity(f"{kind.value} Thing")
        assert entity.entity_kind == kind
        assert entity.name == "Thing"
        assert entity.members == []

    def test_entity_with_empty_body(self) -> None:
        assert _entity("class A { }").members == []

    def test_modifiers(self) -> None:
        entity = _entity("abstract class Shape")
        assert entity.modifiers == [Modifier.ABSTRACT]

    def test_multiple_modifiers_in_order(self) -> None:
        entity = _entity("static final class Util")
        assert entity.modifiers == [Modifier.STATIC, Modifier.FINAL]

    def test_stereotype(self) -> None:
        assert _entity("class Member <<entity>>").stereotype == "entity"

    def test_extends_and_implements(self) -> None:
        entity = _entity("class Book extends Item, Base implements Lendable, Printable { }")
        assert entity.extends_clause == ["Item", "Base"]
        assert entity.implements_clause == ["Lendable", "Printable"]

    def test_consecutive_entities_without_bodies(self) -> None:
        items = _body("actor Customer actor Clerk usecase Order")
        assert [i.name for i in items] == ["Customer", "Clerk", "Order"]

    def test_missing_kind_after_modifier(self) -> None:
        result = parse("diagram D : class { abstract Shape { } }")
        assert len(result.errors) == 1
        assert "Expected entity kind" in result.errors[0].message
        entity = result.program.diagrams[0].body[0]
        assert entity.entity_kind == EntityKind.CLASS
        assert entity.name == "Shape"

    def test_unclosed_stereotype(self) -> None:
        result = parse("diagram D : class { class A <<entity> { x: int } }")
        assert len(result.errors) == 1
        assert "'>>'" in result.errors[0].message
        entity = result.program.diagrams[0].body[0]
        assert entity.stereotype == "entity"
        assert entity.members[0].name == "x"

    def test_stereotype_close_must_be_adjacent(self) -> None:
        result = parse("diagram D : class { class A <<entity> > }")
        assert any("'>>'" in e.message for e in result.errors)


# ###############
# Members
# ###############


class TestMembers:
    def test_field(self) -> None:
        entity = _entity("class A { + name: string }")
        member = entity.members[0]
        assert isinstance(member, FieldDecl)
        assert member.visibility == VisibilitySymbol.PUBLIC
        assert member.name == "name"
        assert member.type == SimpleType(name="string", span=member.type.span)
        assert member.default_value is None

    @pytest.mark.parametrize(
        ("symbol", "expected"),
        [
            ("+", VisibilitySymbol.PUBLIC),
            ("-", VisibilitySymbol.PRIVATE),
            ("#", VisibilitySymbol.PROTECTED),
            ("~", VisibilitySymbol.PACKAGE),
            ("", VisibilitySymbol.NONE),
        ],
    )
    def test_visibility(self, symbol: str, expected: VisibilitySymbol) -> None:
        entity = _entity(f"class A {{ {symbol} x: int }}")
        assert entity.members[0].visibility == expected

    def test_protected_field_named_like_hex(self) -> None:
        entity = _entity("class A { #abc: int }")
        assert entity.members[0].visibility == VisibilitySymbol.PROTECTED
        assert entity.members[0].name == "abc"

    def test_member_modifiers(self) -> None:
        entity = _entity("class A { + static final MAX: int = 10 }")
        member = entity.members[0]
        assert member.modifiers == [Modifier.STATIC, Modifier.FINAL]
        assert member.default_value.value == 10

    @pytest.mark.parametrize(
        ("literal", "expected"),
        [
            ('"hi"', "hi"),
            ("42", 42),
            ("-7", -7),
            ("2.5", 2.5),
            ("true", True),
            ("false", False),
        ],
    )
    def test_default_values(self, literal: str, expected: object) -> None:
        entity = _entity(f"class A {{ x: int = {literal} }}")
        value = entity.members[0].default_value.value
        assert value == expected
        assert type(value) is type(expected)

    def test_method(self) -> None:
        entity = _entity("class A { + lend(member: Member, days: int): bool }")
        method = entity.members[0]
        assert isinstance(method, MethodDecl)
        assert method.name == "lend"
        assert [p.name for p in method.params] == ["member", "days"]
        assert method.params[1].type.name == "int"
        assert method.return_type.name == "bool"

    def test_method_without_params(self) -> None:
        method = _entity("class A { run(): void }").members[0]
        assert method.params == []
        assert method.return_type.name == "void"

    def test_abstract_method(self) -> None:
        method = _entity("abstract class A { + abstract area(): float }").members[0]
        assert method.modifiers == [Modifier.ABSTRACT]

    def test_keyword_as_member_name(self) -> None:
        entity = _entity("class A { set: int; note(): void }")
        assert [m.name for m in entity.members] == ["set", "note"]

    def test_semicolons_between_members(self) -> None:
        entity = _entity("class A { x: int; y: int; }")
        assert [m.name for m in entity.members] == ["x", "y"]

    def test_member_order_is_preserved(self) -> None:
        entity = _entity("class A { b: int a(): void c: int }")
        assert [m.name for m in entity.members] == ["b", "a", "c"]


class TestEnums:
    def test_enum_values_with_commas(self) -> None:
        entity = _entity("enum Status { AVAILABLE, LENT, LOST }")
        assert all(isinstance(m, EnumValueDecl) for m in entity.members)
        assert [m.name for m in entity.members] == ["AVAILABLE", "LENT", "LOST"]

    def test_enum_values_without_commas(self) -> None:
        entity = _entity("enum Status { A B C }")
        assert [m.name for m in entity.members] == ["A", "B", "C"]

    def test_trailing_comma(self) -> None:
        entity = _entity("enum Status { A, B, }")
        assert [m.name for m in entity.members] == ["A", "B"]

    def test_enum_may_declare_fields(self) -> None:
        entity = _entity("enum Status { A, label: string }")
        assert isinstance(entity.members[0], EnumValueDecl)
        assert isinstance(entity.members[1], FieldDecl)

    def test_keywords_as_enum_values(self) -> None:
        entity = _entity("enum Kind { node, actor, class }")
        assert all(isinstance(m, EnumValueDecl) for m in entity.members)
        assert [m.name for m in entity.members] == ["node", "actor", "class"]

    def test_modifier_in_enum_starts_a_field(self) -> None:
        entity = _entity("enum Status { A static count: int }")
        assert isinstance(entity.members[0], EnumValueDecl)
        field_decl = entity.members[1]
        assert isinstance(field_decl, FieldDecl)
        assert field_decl.modifiers == [Modifier.STATIC]
        assert field_decl.name == "count"

    def test_enum_values_parse_even_after_errors(self) -> None:
        result = parse("diagram D : class { enum E { A, , B, 5 } }")
        entity = result.program.diagrams[0].body[0]
        assert [m.name for m in entity.members] == ["A", "B"]
        assert len(result.errors) == 1


# ###############
# Type Expressions
# ###############


class TestTypeExpressions:
    def test_simple_type(self) -> None:
        assert _field_type("Book").name == "Book"

    @pytest.mark.parametrize("name", ["list", "map", "set", "optional", "int", "float", "bool", "string", "void"])
    def test_type_keywords(self, name: str) -> None:
        assert _field_type(name).name == name

    def test_generic_type(self) -> None:
        type_expr = _field_type("List<string>")
        assert isinstance(type_expr, GenericType)
        assert type_expr.base == "List"
        assert [a.name for a in type_expr.args] == ["string"]

    def test_nested_generic_type(self) -> None:
        type_expr = _field_type("Map<string, List<int>>")
        assert isinstance(type_expr, GenericType)
        inner = type_expr.args[1]
        assert isinstance(inner, GenericType)
        assert inner.base == "List"
        assert inner.args[0].name == "int"

    def test_nullable_type(self) -> None:
        type_expr = _field_type("string?")
        assert isinstance(type_expr, NullableType)
        assert type_expr.inner.name == "string"

    def test_nullable_wraps_whole_generic(self) -> None:
        type_expr = _field_type("List<int>?")
        assert isinstance(type_expr, NullableType)
        assert isinstance(type_expr.inner, GenericType)

    def test_nullable_generic_argument(self) -> None:
        type_expr = _field_type("List<int?>")
        assert isinstance(type_expr.args[0], NullableType)

    def test_missing_type_recovers(self) -> None:
        result = parse("diagram D : class { class A { x: ; y: int } }")
        assert len(result.errors) == 1
        assert "Expected type expression" in result.errors[0].message
        entity = result.program.diagrams[0].body[0]
        assert entity.members[0].type.name == "any"
        assert entity.members[1].name == "y"


# ###############
# Relations
# ###############


class TestRelations:
    @pytest.mark.parametrize("kind", list(RelationKind))
    def test_relation_operators(self, kind: RelationKind) -> None:
        items = _body(f"A {kind.value} B")
        relation = items[0]
        assert isinstance(relation, RelationDecl)
        assert relation.rel_kind == kind
        assert (relation.from_, relation.to) == ("A", "B")

    def test_reversed_operator_keeps_source_order(self) -> None:
        relation = _body("Item <|-- Book")[0]
        assert relation.from_ == "Item"
        assert relation.to == "Book"
        assert relation.rel_kind == RelationKind.INHERITANCE_REVERSED

    def test_relation_attributes(self) -> None:
        relation = _body('Member --> Book [label="borrows", fromMult="1", toMult="0..*", color=#ff0000]')[0]
        assert relation.label == "borrows"
        assert relation.from_mult == "1"
        assert relation.to_mult == "0..*"
        assert relation.style == {"color": "#ff0000"}

    def test_relation_model_dump_uses_from_alias(self) -> None:
        relation = _body("A --> B")[0]
        assert relation.model_dump(by_alias=True)["from"] == "A"

    def test_relation_referencing_unknown_entities_still_parses(self) -> None:
        relation = _body("Ghost --> Phantom")[0]
        assert relation.to == "Phantom"

    def test_aggregation_reversed_without_spaces(self) -> None:
        relation = _body("Aa o--B")[0]
        assert relation.rel_kind == RelationKind.AGGREGATION_REVERSED

    def test_unclosed_attribute_block(self) -> None:
        result = parse('diagram D : class { A --> B [label="x" }')
        assert result.errors
        assert result.program.diagrams[0].body[0].label == "x"


# ###############
# Packages, Notes, Styles, Layout
# ###############


class TestPackages:
    def test_package_contains_items(self) -> None:
        package = _body("package domain { class A class B A --> B }")[0]
        assert isinstance(package, PackageDecl)
        assert package.name == "domain"
        assert [type(i) for i in package.body] == [EntityDecl, EntityDecl, RelationDecl]

    def test_nested_packages(self) -> None:
        outer = _body("package outer { package inner { class A } }")[0]
        inner = outer.body[0]
        assert isinstance(inner, PackageDecl)
        assert inner.body[0].name == "A"


class TestNotes:
    def test_free_note(self) -> None:
        note = _body('note "Remember"')[0]
        assert isinstance(note, NoteDecl)
        assert note.text == "Remember"
        assert note.on is None

    def test_attached_note(self) -> None:
        note = _body('note "Physical copies" on Book')[0]
        assert note.on == "Book"


class TestStyles:
    def test_style_block(self) -> None:
        style = _body('style Member { fill = #ffeecc; stroke = "dashed", width = 2 }')[0]
        assert isinstance(style, StyleDecl)
        assert style.target == "Member"
        assert style.styles == {"fill": "#ffeecc", "stroke": "dashed", "width": "2"}

    def test_empty_style_block(self) -> None:
        assert _body("style A { }")[0].styles == {}


class TestLayout:
    def test_layout_annotation(self) -> None:
        layout = _body("@Book at (120, 80.5)")[0]
        assert isinstance(layout, LayoutAnnotation)
        assert layout.entity == "Book"
        assert (layout.x, layout.y) == (120.0, 80.5)

    def test_negative_coordinates(self) -> None:
        layout = _body("@Book at (-10, -2.5)")[0]
        assert (layout.x, layout.y) == (-10.0, -2.5)

    def test_missing_coordinate_defaults_to_zero(self) -> None:
        result = parse("diagram D : class { @Book at (, 5) }")
        assert len(result.errors) == 1
        layout = result.program.diagrams[0].body[0]
        assert (layout.x, layout.y) == (0.0, 5.0)


# ###############
# Spans
# ###############


class TestSpans:
    def test_entity_span_covers_declaration(self) -> None:
        source = "diagram D : class {\n  class A { x: int }\n}"
        entity = _parse(source).diagrams[0].body[0]
        assert source[entity.span.start : entity.span.end] == "class A { x: int }"
        assert (entity.span.line, entity.span.col) == (2, 3)

    def test_member_span(self) -> None:
        source = "diagram D : class { class A { + x: int = 5 } }"
        member = _parse(source).diagrams[0].body[0].members[0]
        assert source[member.span.start : member.span.end] == "+ x: int = 5"

    def test_relation_span(self) -> None:
        source = 'diagram D : class { A --> B [label="x"] }'
        relation = _parse(source).diagrams[0].body[0]
        assert source[relation.span.start : relation.span.end] == 'A --> B [label="x"]'

    def test_program_span_covers_source(self) -> None:
        source = "diagram D : class { }"
        program = _parse(source)
        assert (program.span.start, program.span.end) == (0, len(source))


# ###############
# Error Recovery
# ###############


class TestErrorRecovery:
    def test_garbage_at_top_level(self) -> None:
        result = parse("hello diagram D : class { }")
        assert len(result.errors) == 1
        assert "top level" in result.errors[0].message
        assert len(result.program.diagrams) == 1

    def test_unexpected_token_in_body_is_skipped(self) -> None:
        result = parse("diagram D : class { 42 class A }")
        assert len(result.errors) == 1
        assert result.program.diagrams[0].body[0].name == "A"

    def test_missing_closing_brace(self) -> None:
        result = parse("diagram D : class { class A { x: int }")
        assert len(result.errors) == 1
        assert "end of input" in result.errors[0].message
        assert result.program.diagrams[0].body[0].name == "A"

    def test_lex_errors_come_first(self) -> None:
        result = parse("diagram D : class { $ }\n}")
        assert "Unexpected character" in result.errors[0].message
        assert len(result.errors) == 2

    def test_error_positions(self) -> None:
        result = parse("diagram D : class {\n  class { }\n}")
        error = result.errors[0]
        assert (error.line, error.col) == (2, 9)
        assert "Expected identifier" in error.message

    @pytest.mark.parametrize(
        "source",
        [
            "diagram",
            "diagram D",
            "diagram D :",
            "diagram D : class {",
            "diagram D : class { class",
            "diagram D : class { class A {",
            "diagram D : class { class A { x:",
            "diagram D : class { class A { f(",
            "diagram D : class { A -->",
            "diagram D : class { A --> B [",
            "diagram D : class { enum E { , , ; , 1 2 } }",
            "diagram D : class { style A { = = } }",
            "diagram D : class { @ at ( ) }",
            "} } ) ] >> << -- ..",
            "diagram D : class { class A <<",
            "diagram D : class { package P { package Q {",
        ],
    )
    def test_parser_terminates_on_malformed_input(self, source: str) -> None:
        result = parse(source)
        assert isinstance(result.program, Program)
        assert result.errors

    def test_parsing_is_deterministic(self) -> None:
        source = "diagram D : class { class A { + x: Map<string, List<int>>? } A --> B }"
        assert parse(source) == parse(source)


# ###############
# Nesting Limit
# ###############


def _nested_packages(depth: int) -> str:
    return "diagram D : class { " + "package p { " * depth + "class A" + " }" * depth + " }"


def _nested_generic(depth: int) -> str:
    return "diagram D : class { class A { x: " + "List<" * depth + "int" + ">" * depth + " } }"


def _package_depth(items: list) -> int:
    depth = 0
    while items and isinstance(items[0], PackageDecl):
        depth += 1
        items = items[0].body
    return depth


def _generic_depth(type_expr) -> int:
    depth = 0
    while isinstance(type_expr, GenericType):
        depth += 1
        type_expr = type_expr.args[0]
    return depth


class TestNestingLimit:
    def test_moderate_package_nesting_is_accepted(self) -> None:
        program = _parse(_nested_packages(50))
        assert _package_depth(program.diagrams[0].body) == 50

    def test_deep_package_nesting_is_reported(self) -> None:
        result = parse(_nested_packages(350))
        assert [e.message for e in result.errors] == ["Nesting too deep"]
        # The package at the limit is kept with an empty body.
        assert _package_depth(result.program.diagrams[0].body) == 101

    def test_parsing_continues_after_deep_packages(self) -> None:
        source = _nested_packages(350)[:-1] + "class B }"
        result = parse(source)
        assert len(result.errors) == 1
        assert result.program.diagrams[0].body[-1].name == "B"

    def test_moderate_generic_nesting_is_accepted(self) -> None:
        assert _generic_depth(_field_type("List<" * 50 + "int" + ">" * 50)) == 50

    def test_deep_generic_nesting_is_reported(self) -> None:
        result = parse(_nested_generic(350))
        assert [e.message for e in result.errors] == ["Nesting too deep"]
        entity = result.program.diagrams[0].body[0]
        type_expr = entity.members[0].type
        assert _generic_depth(type_expr) == 100
        assert entity.members[0].name == "x"
