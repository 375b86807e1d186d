# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Static semantic analysis for parsed Isomorph programs.

Validates a Program AST against rules SS-1 through SS-14 and lowers it into
the Isomorph Object Model. Analysis is total: it always returns an IOM, even
for trees that came out of a parse with errors, and reports problems as
:class:`SemanticError` values.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from isomorph.parser.ast import (
    BodyItem,
    DiagramDecl,
    DiagramKind,
    EntityDecl,
    EntityKind,
    EnumValueDecl,
    FieldDecl,
    GenericType,
    LayoutAnnotation,
    LiteralExpr,
    MethodDecl,
    Modifier,
    NoteDecl,
    NullableType,
    PackageDecl,
    Program,
    RelationDecl,
    SimpleType,
    Span,
    StyleDecl,
    TypeExpr,
    VisibilitySymbol,
)
from isomorph.semantics.iom import (
    IOM,
    IOMDiagram,
    IOMEntity,
    IOMEnumValue,
    IOMField,
    IOMMethod,
    IOMNote,
    IOMPackage,
    IOMParam,
    IOMRelation,
    Position,
    Visibility,
    is_reversed,
    relation_kind,
)

# ###############
# Public Interface
# ###############


class Rule(Enum):
    """Static semantic rules enforced by the analyzer."""

    DUPLICATE_ENTITY = "SS-1"
    DUPLICATE_MEMBER = "SS-2"
    UNKNOWN_RELATION_ENDPOINT = "SS-3"
    EMPTY_ENUM = "SS-4"
    INTERFACE_FIELD_DEFAULT = "SS-5"
    CIRCULAR_INHERITANCE = "SS-6"
    UNKNOWN_STYLE_TARGET = "SS-7"
    DUPLICATE_ENUM_VALUE = "SS-8"
    ENTITY_KIND_NOT_ALLOWED = "SS-9"
    UNKNOWN_LAYOUT_TARGET = "SS-10"
    ABSTRACT_FINAL_CONFLICT = "SS-11"
    DUPLICATE_PARAMETER = "SS-12"
    UNKNOWN_EXTENDS = "SS-13"
    UNKNOWN_IMPLEMENTS = "SS-14"


@dataclass(frozen=True)
class SemanticError:
    """A rule violation detected during semantic analysis.

    Attributes:
        message: Human-readable description of the error.
        rule: Identifier of the violated rule, e.g. ``"SS-1"``.
        entity: Name of the entity the error concerns, if any.
        line: 1-based source line, if known.
        col: 1-based source column, if known.
    """

    message: str
    rule: str
    entity: str | None = None
    line: int | None = None
    col: int | None = None


@dataclass(frozen=True)
class AnalysisResult:
    """The IOM built from a program together with all semantic errors."""

    iom: IOM
    errors: list[SemanticError] = field(default_factory=list)


def analyze(program: Program) -> AnalysisResult:
    """Perform semantic analysis on a parsed Program.

    Each diagram is analyzed independently; entity names only need to be
    unique within their diagram. Per diagram the analyzer:

    1. Collects entities (recursing into packages), checking duplicate
       entity names (SS-1) and the per-entity rules SS-2, SS-4, SS-5,
       SS-8, SS-11 and SS-12.
    2. Attaches notes, styles and layout positions regardless of whether
       they appear before or after their target entity.
    3. Collects relations, checking both endpoints (SS-3). Relations with
       unknown endpoints are still part of the result.
    4. Runs whole-diagram checks: circular inheritance (SS-6), style
       targets (SS-7), entity kinds allowed by the diagram kind (SS-9),
       layout targets (SS-10), and ``extends`` / ``implements`` names
       (SS-13, SS-14).

    Args:
        program: The Program AST to analyze.

    Returns:
        An :class:`AnalysisResult`. An empty error list means the program
        is semantically valid.
    """
    diagrams: list[IOMDiagram] = []
    errors: list[SemanticError] = []
    for diagram in program.diagrams:
        iom_diagram, diagram_errors = _DiagramAnalyzer(diagram).analyze()
        diagrams.append(iom_diagram)
        errors.extend(diagram_errors)
    return AnalysisResult(iom=IOM(diagrams=diagrams), errors=errors)


def type_to_string(type_expr: TypeExpr) -> str:
    """Render a type expression back to source form, e.g. ``Map<string, List<int>>?``."""
    if isinstance(type_expr, SimpleType):
        return type_expr.name
    if isinstance(type_expr, GenericType):
        args = ", ".join(type_to_string(arg) for arg in type_expr.args)
        return f"{type_expr.base}<{args}>"
    # NullableType is the only remaining variant.
    assert isinstance(type_expr, NullableType)
    return f"{type_to_string(type_expr.inner)}?"


# ################
# Implementation
# ################

# Entity kinds accepted per diagram kind. Flow diagrams accept every kind.
_ALLOWED_KINDS: dict[DiagramKind, frozenset[EntityKind]] = {
    DiagramKind.CLASS: frozenset({EntityKind.CLASS, EntityKind.INTERFACE, EntityKind.ENUM}),
    DiagramKind.USECASE: frozenset({EntityKind.ACTOR, EntityKind.USECASE}),
    DiagramKind.SEQUENCE: frozenset({EntityKind.ACTOR}),
    DiagramKind.COMPONENT: frozenset({EntityKind.COMPONENT}),
    DiagramKind.DEPLOYMENT: frozenset({EntityKind.COMPONENT, EntityKind.NODE}),
}

_VISIBILITIES: dict[VisibilitySymbol, Visibility] = {
    VisibilitySymbol.PUBLIC: Visibility.PUBLIC,
    VisibilitySymbol.PRIVATE: Visibility.PRIVATE,
    VisibilitySymbol.PROTECTED: Visibility.PROTECTED,
    VisibilitySymbol.PACKAGE: Visibility.PACKAGE,
    VisibilitySymbol.NONE: Visibility.PUBLIC,
}


class _DiagramAnalyzer:
    """Builds one IOMDiagram and collects its semantic errors."""

    def __init__(self, diagram: DiagramDecl) -> None:
        self._diagram = diagram
        self._errors: list[SemanticError] = []
        self._entities: dict[str, IOMEntity] = {}
        # Span of the canonical (first) declaration of each entity.
        self._spans: dict[str, Span] = {}
        self._relations: list[IOMRelation] = []
        self._notes: list[IOMNote] = []
        self._style_decls: list[StyleDecl] = []
        self._layout_decls: list[LayoutAnnotation] = []

    def analyze(self) -> tuple[IOMDiagram, list[SemanticError]]:
        """Run all passes and checks and return the diagram and its errors."""
        packages = self._collect(self._diagram.body, package=None)
        self._attach_annotations()
        self._collect_relations(self._diagram.body)

        self._check_inheritance_cycles()
        self._check_style_targets()
        self._check_allowed_kinds()
        self._check_layout_targets()
        self._check_supertypes()

        iom_diagram = IOMDiagram(
            name=self._diagram.name,
            kind=self._diagram.diagram_kind,
            entities=self._entities,
            relations=self._relations,
            packages=packages,
            notes=self._notes,
        )
        return iom_diagram, self._errors

    def _error(
        self,
        rule: Rule,
        message: str,
        span: Span | None = None,
        entity: str | None = None,
    ) -> None:
        self._errors.append(
            SemanticError(
                message=message,
                rule=rule.value,
                entity=entity,
                line=span.line if span is not None else None,
                col=span.col if span is not None else None,
            )
        )

    # ------------------------------------------------------------------
    # Pass 1: collection
    # ------------------------------------------------------------------

    def _collect(self, items: list[BodyItem], package: str | None) -> list[IOMPackage]:
        """Collect entities, notes, styles and layouts; return the packages found."""
        packages: list[IOMPackage] = []
        for item in items:
            if isinstance(item, PackageDecl):
                sub_packages = self._collect(item.body, package=item.name)
                entity_names = list(dict.fromkeys(child.name for child in item.body if isinstance(child, EntityDecl)))
                packages.append(IOMPackage(name=item.name, entity_names=entity_names, sub_packages=sub_packages))
            elif isinstance(item, EntityDecl):
                self._collect_entity(item, package)
            elif isinstance(item, NoteDecl):
                self._notes.append(IOMNote(text=item.text, on_entity=item.on))
            elif isinstance(item, StyleDecl):
                self._style_decls.append(item)
            elif isinstance(item, LayoutAnnotation):
                self._layout_decls.append(item)
        return packages

    def _collect_entity(self, decl: EntityDecl, package: str | None) -> None:
        # Duplicates are still checked so that every rule they violate is reported.
        entity = self._build_entity(decl, package)
        if decl.name in self._entities:
            self._error(
                Rule.DUPLICATE_ENTITY,
                f"Duplicate entity name '{decl.name}'",
                decl.span,
                entity=decl.name,
            )
            return
        self._entities[decl.name] = entity
        self._spans[decl.name] = decl.span

    def _build_entity(self, decl: EntityDecl, package: str | None) -> IOMEntity:
        """Lower an entity declaration, checking SS-2, SS-4, SS-5, SS-8, SS-11, SS-12."""
        name = decl.name
        is_abstract = Modifier.ABSTRACT in decl.modifiers
        if is_abstract and Modifier.FINAL in decl.modifiers:
            self._error(
                Rule.ABSTRACT_FINAL_CONFLICT,
                f"Entity '{name}' cannot be both abstract and final",
                decl.span,
                entity=name,
            )

        fields: list[IOMField] = []
        methods: list[IOMMethod] = []
        enum_values: list[IOMEnumValue] = []
        member_names: set[str] = set()
        value_names: set[str] = set()

        for member in decl.members:
            if isinstance(member, EnumValueDecl):
                if member.name in value_names:
                    self._error(
                        Rule.DUPLICATE_ENUM_VALUE,
                        f"Duplicate enum value '{member.name}' in '{name}'",
                        member.span,
                        entity=name,
                    )
                value_names.add(member.name)
                enum_values.append(IOMEnumValue(name=member.name))
            elif isinstance(member, FieldDecl):
                self._check_member_name(name, member.name, member.span, member_names)
                if decl.entity_kind == EntityKind.INTERFACE and member.default_value is not None:
                    self._error(
                        Rule.INTERFACE_FIELD_DEFAULT,
                        f"Interface '{name}' field '{member.name}' cannot have a default value",
                        member.span,
                        entity=name,
                    )
                fields.append(
                    IOMField(
                        name=member.name,
                        type=type_to_string(member.type),
                        visibility=_VISIBILITIES[member.visibility],
                        is_static=Modifier.STATIC in member.modifiers,
                        is_final=Modifier.FINAL in member.modifiers,
                        default_value=_literal_to_string(member.default_value),
                    )
                )
            else:
                assert isinstance(member, MethodDecl)
                self._check_member_name(name, member.name, member.span, member_names)
                self._check_parameters(name, member)
                methods.append(
                    IOMMethod(
                        name=member.name,
                        params=[IOMParam(name=p.name, type=type_to_string(p.type)) for p in member.params],
                        return_type=type_to_string(member.return_type),
                        visibility=_VISIBILITIES[member.visibility],
                        is_static=Modifier.STATIC in member.modifiers,
                        is_abstract=is_abstract or Modifier.ABSTRACT in member.modifiers,
                    )
                )

        if decl.entity_kind == EntityKind.ENUM and not enum_values:
            self._error(
                Rule.EMPTY_ENUM,
                f"Enum '{name}' must declare at least one value",
                decl.span,
                entity=name,
            )

        return IOMEntity(
            id=name,
            name=name,
            kind=decl.entity_kind,
            stereotype=decl.stereotype,
            # Interfaces are implicitly abstract.
            is_abstract=is_abstract or decl.entity_kind == EntityKind.INTERFACE,
            package=package,
            fields=fields,
            methods=methods,
            enum_values=enum_values,
            extends_names=list(decl.extends_clause),
            implements_names=list(decl.implements_clause),
        )

    def _check_member_name(self, entity: str, member: str, span: Span, seen: set[str]) -> None:
        """Fields and methods share one namespace per entity (SS-2)."""
        if member in seen:
            self._error(
                Rule.DUPLICATE_MEMBER,
                f"Duplicate member '{member}' in '{entity}'",
                span,
                entity=entity,
            )
        seen.add(member)

    def _check_parameters(self, entity: str, method: MethodDecl) -> None:
        seen: set[str] = set()
        for param in method.params:
            if param.name in seen:
                self._error(
                    Rule.DUPLICATE_PARAMETER,
                    f"Duplicate parameter '{param.name}' in method '{method.name}' of '{entity}'",
                    param.span,
                    entity=entity,
                )
            seen.add(param.name)

    # ------------------------------------------------------------------
    # Pass 1.5: order-independent attachment
    # ------------------------------------------------------------------

    def _attach_annotations(self) -> None:
        """Attach notes, styles and positions to the entities they target.

        Runs after collection, so an annotation may appear before or after its
        entity. The last note and the last layout in source order win; style
        blocks are merged with later keys taking precedence. Entity records are
        frozen, so annotated entities are replaced by updated copies.
        """
        notes: dict[str, str] = {}
        for note in self._notes:
            if note.on_entity is not None and note.on_entity in self._entities:
                notes[note.on_entity] = note.text

        styles: dict[str, dict[str, str]] = {}
        for style in self._style_decls:
            if style.target in self._entities:
                styles.setdefault(style.target, {}).update(style.styles)

        positions: dict[str, Position] = {}
        for layout in self._layout_decls:
            if layout.entity in self._entities:
                positions[layout.entity] = Position(x=layout.x, y=layout.y)

        for name, entity in list(self._entities.items()):
            update: dict[str, object] = {}
            if name in notes:
                update["note"] = notes[name]
            if name in styles:
                update["styles"] = styles[name]
            if name in positions:
                update["position"] = positions[name]
            if update:
                self._entities[name] = entity.model_copy(update=update)

    # ------------------------------------------------------------------
    # Pass 2: relations
    # ------------------------------------------------------------------

    def _collect_relations(self, items: list[BodyItem]) -> None:
        for item in items:
            if isinstance(item, PackageDecl):
                self._collect_relations(item.body)
            elif isinstance(item, RelationDecl):
                for endpoint in (item.from_, item.to):
                    if endpoint not in self._entities:
                        self._error(
                            Rule.UNKNOWN_RELATION_ENDPOINT,
                            f"Relation references unknown entity '{endpoint}'",
                            item.span,
                        )
                self._relations.append(
                    IOMRelation(
                        id=f"rel_{len(self._relations)}",
                        from_=item.from_,
                        to=item.to,
                        kind=relation_kind(item.rel_kind),
                        is_reversed=is_reversed(item.rel_kind),
                        label=item.label,
                        from_mult=item.from_mult,
                        to_mult=item.to_mult,
                        styles=dict(item.style),
                    )
                )

    # ------------------------------------------------------------------
    # Whole-diagram checks
    # ------------------------------------------------------------------

    def _check_inheritance_cycles(self) -> None:
        """Report circular ``extends`` chains (SS-6).

        The walk keeps a per-path visited set, so a shared ancestor reached
        through two branches (a diamond) is not a cycle. Once an entity is
        reported, it and its direct parents are skipped, which reports a
        simple cycle once rather than once per member.
        """
        acyclic: set[str] = set()
        reported: set[str] = set()
        for name, entity in self._entities.items():
            if name in reported:
                continue
            if self._reaches_cycle(name, acyclic):
                self._error(
                    Rule.CIRCULAR_INHERITANCE,
                    f"Circular inheritance detected involving '{name}'",
                    self._spans[name],
                    entity=name,
                )
                reported.add(name)
                reported.update(entity.extends_names)

    def _reaches_cycle(self, start: str, acyclic: set[str]) -> bool:
        """Return True if a cycle is reachable from *start* along ``extends`` links.

        Uses an explicit stack so long inheritance chains do not exhaust the
        interpreter's recursion limit. Entities fully explored without finding
        a cycle are added to *acyclic*.
        """
        if start in acyclic:
            return False
        path = {start}
        stack: list[tuple[str, Iterator[str]]] = [(start, iter(self._entities[start].extends_names))]
        while stack:
            name, parents = stack[-1]
            for parent in parents:
                if parent in path:
                    return True
                if parent in acyclic or parent not in self._entities:
                    continue
                path.add(parent)
                stack.append((parent, iter(self._entities[parent].extends_names)))
                break
            else:
                stack.pop()
                path.discard(name)
                acyclic.add(name)
        return False

    def _check_style_targets(self) -> None:
        for style in self._style_decls:
            if style.target not in self._entities:
                self._error(
                    Rule.UNKNOWN_STYLE_TARGET,
                    f"Style references unknown entity '{style.target}'",
                    style.span,
                )

    def _check_allowed_kinds(self) -> None:
        allowed = _ALLOWED_KINDS.get(self._diagram.diagram_kind)
        if allowed is None:
            return
        for name, entity in self._entities.items():
            if entity.kind not in allowed:
                self._error(
                    Rule.ENTITY_KIND_NOT_ALLOWED,
                    f"Entity kind '{entity.kind.value}' is not valid in '{self._diagram.diagram_kind.value}' diagrams",
                    self._spans[name],
                    entity=name,
                )

    def _check_layout_targets(self) -> None:
        for layout in self._layout_decls:
            if layout.entity not in self._entities:
                self._error(
                    Rule.UNKNOWN_LAYOUT_TARGET,
                    f"Layout annotation references unknown entity '{layout.entity}'",
                    layout.span,
                )

    def _check_supertypes(self) -> None:
        """Check that every ``extends`` (SS-13) and ``implements`` (SS-14) name resolves."""
        for name, entity in self._entities.items():
            for parent in entity.extends_names:
                if parent not in self._entities:
                    self._error(
                        Rule.UNKNOWN_EXTENDS,
                        f"'{name}' extends unknown entity '{parent}'",
                        self._spans[name],
                        entity=name,
                    )
        for name, entity in self._entities.items():
            for iface in entity.implements_names:
                if iface not in self._entities:
                    self._error(
                        Rule.UNKNOWN_IMPLEMENTS,
                        f"'{name}' implements unknown entity '{iface}'",
                        self._spans[name],
                        entity=name,
                    )


def _literal_to_string(literal: LiteralExpr | None) -> str | None:
    if literal is None:
        return None
    if isinstance(literal.value, bool):
        return "true" if literal.value else "false"
    return str(literal.value)
