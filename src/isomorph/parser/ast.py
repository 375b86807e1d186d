# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Abstract syntax tree for .isx files.

Every node is an immutable pydantic model carrying a ``kind`` discriminator
and a :class:`Span` that covers exactly the source text it was parsed from.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class _Node(BaseModel):
    """Base class for all AST nodes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Span(_Node):
    """A source range: 0-based offsets plus the 1-based start line and column."""

    start: int
    end: int
    line: int
    col: int


class DiagramKind(Enum):
    """Kinds of diagram a ``diagram`` declaration can describe."""

    CLASS = "class"
    USECASE = "usecase"
    SEQUENCE = "sequence"
    COMPONENT = "component"
    FLOW = "flow"
    DEPLOYMENT = "deployment"


class EntityKind(Enum):
    """Kinds of entity that can be declared inside a diagram."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    ACTOR = "actor"
    USECASE = "usecase"
    COMPONENT = "component"
    NODE = "node"


class Modifier(Enum):
    ABSTRACT = "abstract"
    STATIC = "static"
    FINAL = "final"


class VisibilitySymbol(Enum):
    """Visibility prefix as written in the source; NONE when omitted."""

    PUBLIC = "+"
    PRIVATE = "-"
    PROTECTED = "#"
    PACKAGE = "~"
    NONE = ""


class RelationKind(Enum):
    """The thirteen relation operators, kept exactly as written."""

    ASSOCIATION = "--"
    DIRECTED_ASSOCIATION = "-->"
    INHERITANCE = "--|>"
    REALIZATION = "..|>"
    AGGREGATION = "--o"
    COMPOSITION = "--*"
    RESTRICTION = "--x"
    DEPENDENCY = "..>"
    INHERITANCE_REVERSED = "<|--"
    REALIZATION_REVERSED = "<|.."
    DEPENDENCY_REVERSED = "<.."
    AGGREGATION_REVERSED = "o--"
    COMPOSITION_REVERSED = "*--"


# ------------------------------------------------------------------
# Type expressions
# ------------------------------------------------------------------


class SimpleType(_Node):
    """A plain type name such as ``int`` or ``Book``."""

    kind: Literal["SimpleType"] = "SimpleType"
    name: str
    span: Span


class GenericType(_Node):
    """A parameterized type such as ``Map<string, List<int>>``."""

    kind: Literal["GenericType"] = "GenericType"
    base: str
    args: list[TypeExpr] = _Field(default_factory=list)
    span: Span


class NullableType(_Node):
    """A type followed by the ``?`` suffix."""

    kind: Literal["NullableType"] = "NullableType"
    inner: TypeExpr
    span: Span


TypeExpr = Annotated[
    SimpleType | GenericType | NullableType,
    _Field(discriminator="kind"),
]


# ------------------------------------------------------------------
# Members
# ------------------------------------------------------------------


class LiteralExpr(_Node):
    """A literal default value: string, number, or boolean."""

    kind: Literal["Literal"] = "Literal"
    value: str | bool | int | float
    span: Span


class FieldDecl(_Node):
    kind: Literal["FieldDecl"] = "FieldDecl"
    visibility: VisibilitySymbol = VisibilitySymbol.NONE
    modifiers: list[Modifier] = _Field(default_factory=list)
    name: str
    type: TypeExpr
    default_value: LiteralExpr | None = None
    span: Span


class ParamDecl(_Node):
    name: str
    type: TypeExpr
    span: Span


class MethodDecl(_Node):
    kind: Literal["MethodDecl"] = "MethodDecl"
    visibility: VisibilitySymbol = VisibilitySymbol.NONE
    modifiers: list[Modifier] = _Field(default_factory=list)
    name: str
    params: list[ParamDecl] = _Field(default_factory=list)
    return_type: TypeExpr
    span: Span


class EnumValueDecl(_Node):
    kind: Literal["EnumValueDecl"] = "EnumValueDecl"
    name: str
    span: Span


Member = Annotated[
    FieldDecl | MethodDecl | EnumValueDecl,
    _Field(discriminator="kind"),
]


# ------------------------------------------------------------------
# Body items
# ------------------------------------------------------------------


class EntityDecl(_Node):
    """A class, interface, enum, actor, use case, component, or node."""

    kind: Literal["EntityDecl"] = "EntityDecl"
    modifiers: list[Modifier] = _Field(default_factory=list)
    entity_kind: EntityKind
    name: str
    stereotype: str | None = None
    extends_clause: list[str] = _Field(default_factory=list)
    implements_clause: list[str] = _Field(default_factory=list)
    members: list[Member] = _Field(default_factory=list)
    span: Span


class RelationDecl(_Node):
    """A relation between two entities, e.g. ``Library --* Book [label="has"]``.

    Reversed operators (``<|--``, ``o--`` ...) keep their endpoints in source
    order; only ``rel_kind`` records the direction.
    """

    kind: Literal["RelationDecl"] = "RelationDecl"
    from_: str = _Field(alias="from")
    to: str
    rel_kind: RelationKind
    label: str | None = None
    from_mult: str | None = None
    to_mult: str | None = None
    style: dict[str, str] = _Field(default_factory=dict)
    span: Span


class NoteDecl(_Node):
    kind: Literal["NoteDecl"] = "NoteDecl"
    text: str
    on: str | None = None
    span: Span


class StyleDecl(_Node):
    kind: Literal["StyleDecl"] = "StyleDecl"
    target: str
    styles: dict[str, str] = _Field(default_factory=dict)
    span: Span


class LayoutAnnotation(_Node):
    """``@Entity at (x, y)``: a persisted canvas position."""

    kind: Literal["LayoutAnnotation"] = "LayoutAnnotation"
    entity: str
    x: float
    y: float
    span: Span


class PackageDecl(_Node):
    kind: Literal["PackageDecl"] = "PackageDecl"
    name: str
    body: list[BodyItem] = _Field(default_factory=list)
    span: Span


BodyItem = Annotated[
    PackageDecl | EntityDecl | RelationDecl | NoteDecl | StyleDecl | LayoutAnnotation,
    _Field(discriminator="kind"),
]


# ------------------------------------------------------------------
# Top level
# ------------------------------------------------------------------


class ImportDecl(_Node):
    kind: Literal["ImportDecl"] = "ImportDecl"
    path: str
    span: Span


class DiagramDecl(_Node):
    kind: Literal["DiagramDecl"] = "DiagramDecl"
    name: str
    diagram_kind: DiagramKind
    body: list[BodyItem] = _Field(default_factory=list)
    span: Span


class Program(_Node):
    """Root node produced by the parser."""

    kind: Literal["Program"] = "Program"
    imports: list[ImportDecl] = _Field(default_factory=list)
    diagrams: list[DiagramDecl] = _Field(default_factory=list)
    span: Span


# Resolve forward references in recursive models.
GenericType.model_rebuild()
NullableType.model_rebuild()
FieldDecl.model_rebuild()
ParamDecl.model_rebuild()
MethodDecl.model_rebuild()
EntityDecl.model_rebuild()
PackageDecl.model_rebuild()
DiagramDecl.model_rebuild()
Program.model_rebuild()
