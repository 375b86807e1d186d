# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic analysis and the Isomorph Object Model."""

from isomorph.semantics.analyzer import AnalysisResult, Rule, SemanticError, analyze, type_to_string
from isomorph.semantics.iom import IOM, IOMDiagram, IOMEntity, IOMRelation, IOMRelationKind

__all__ = [
    "analyze",
    "AnalysisResult",
    "Rule",
    "SemanticError",
    "type_to_string",
    "IOM",
    "IOMDiagram",
    "IOMEntity",
    "IOMRelation",
    "IOMRelationKind",
]
