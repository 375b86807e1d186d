# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""The Isomorph Object Model (IOM).

The IOM is the resolved output of semantic analysis and the input to
renderers. Relations refer to entities by name; the owning diagram's
``entities`` mapping is the only place entity records live.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from isomorph.parser.ast import DiagramKind, EntityKind, RelationKind

# ###############
# Public Interface
# ###############


class _Record(BaseModel):
    """Base class for IOM records. Records are immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Visibility(Enum):
    """UML visibility levels."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    PACKAGE = "package"


class IOMRelationKind(Enum):
    """Relation taxonomy shared by forward and reversed operators."""

    ASSOCIATION = "association"
    DIRECTED_ASSOCIATION = "directed-association"
    INHERITANCE = "inheritance"
    REALIZATION = "realization"
    AGGREGATION = "aggregation"
    COMPOSITION = "composition"
    DEPENDENCY = "dependency"
    RESTRICTION = "restriction"


class Position(_Record):
    """Position in 2D canvas space."""

    x: float
    y: float


class IOMField(_Record):
    name: str
    type: str
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_final: bool = False
    default_value: str | None = None


class IOMParam(_Record):
    name: str
    type: str


class IOMMethod(_Record):
    name: str
    params: list[IOMParam] = _Field(default_factory=list)
    return_type: str
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    is_abstract: bool = False


class IOMEnumValue(_Record):
    name: str


class IOMEntity(_Record):
    """A resolved class, interface, enum, actor, use case, component, or node."""

    id: str
    name: str
    kind: EntityKind
    stereotype: str | None = None
    is_abstract: bool = False
    package: str | None = None
    fields: list[IOMField] = _Field(default_factory=list)
    methods: list[IOMMethod] = _Field(default_factory=list)
    enum_values: list[IOMEnumValue] = _Field(default_factory=list)
    extends_names: list[str] = _Field(default_factory=list)
    implements_names: list[str] = _Field(default_factory=list)
    position: Position | None = None
    styles: dict[str, str] = _Field(default_factory=dict)
    note: str | None = None


class IOMRelation(_Record):
    """A relation between two entities, referenced by name.

    ``is_reversed`` is set for operators written right-to-left (``<|--``,
    ``o--`` ...); ``from_`` and ``to`` always keep source order.
    """

    id: str
    from_: str = _Field(alias="from")
    to: str
    kind: IOMRelationKind
    is_reversed: bool = False
    label: str | None = None
    from_mult: str | None = None
    to_mult: str | None = None
    styles: dict[str, str] = _Field(default_factory=dict)


class IOMPackage(_Record):
    name: str
    entity_names: list[str] = _Field(default_factory=list)
    sub_packages: list[IOMPackage] = _Field(default_factory=list)


class IOMNote(_Record):
    text: str
    on_entity: str | None = None


class IOMDiagram(_Record):
    """One analyzed diagram. ``entities`` preserves declaration order."""

    name: str
    kind: DiagramKind
    entities: dict[str, IOMEntity] = _Field(default_factory=dict)
    relations: list[IOMRelation] = _Field(default_factory=list)
    packages: list[IOMPackage] = _Field(default_factory=list)
    notes: list[IOMNote] = _Field(default_factory=list)


class IOM(_Record):
    """Root of the IOM: every diagram of one program."""

    diagrams: list[IOMDiagram] = _Field(default_factory=list)


def relation_kind(rel_kind: RelationKind) -> IOMRelationKind:
    """Map a relation operator to its kind, treating reversed forms like forward ones."""
    return _RELATION_KINDS[rel_kind]


def is_reversed(rel_kind: RelationKind) -> bool:
    """Return True for operators whose arrowhead points at the left-hand entity."""
    return rel_kind in _REVERSED


# ################
# Implementation
# ################

_RELATION_KINDS: dict[RelationKind, IOMRelationKind] = {
    RelationKind.ASSOCIATION: IOMRelationKind.ASSOCIATION,
    RelationKind.DIRECTED_ASSOCIATION: IOMRelationKind.DIRECTED_ASSOCIATION,
    RelationKind.INHERITANCE: IOMRelationKind.INHERITANCE,
    RelationKind.REALIZATION: IOMRelationKind.REALIZATION,
    RelationKind.AGGREGATION: IOMRelationKind.AGGREGATION,
    RelationKind.COMPOSITION: IOMRelationKind.COMPOSITION,
    RelationKind.RESTRICTION: IOMRelationKind.RESTRICTION,
    RelationKind.DEPENDENCY: IOMRelationKind.DEPENDENCY,
    RelationKind.INHERITANCE_REVERSED: IOMRelationKind.INHERITANCE,
    RelationKind.REALIZATION_REVERSED: IOMRelationKind.REALIZATION,
    RelationKind.DEPENDENCY_REVERSED: IOMRelationKind.DEPENDENCY,
    RelationKind.AGGREGATION_REVERSED: IOMRelationKind.AGGREGATION,
    RelationKind.COMPOSITION_REVERSED: IOMRelationKind.COMPOSITION,
}

_REVERSED: frozenset[RelationKind] = frozenset(
    {
        RelationKind.INHERITANCE_REVERSED,
        RelationKind.REALIZATION_REVERSED,
        RelationKind.DEPENDENCY_REVERSED,
        RelationKind.AGGREGATION_REVERSED,
        RelationKind.COMPOSITION_REVERSED,
    }
)

# Resolve forward references in self-referential models.
IOMPackage.model_rebuild()
