# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Display formatting for parse and semantic errors."""

from __future__ import annotations

from collections.abc import Iterable

from isomorph.parser.parser import ParseError
from isomorph.semantics.analyzer import SemanticError

# ###############
# Public Interface
# ###############


def format_parse_error(error: ParseError) -> str:
    """Format a parse error as ``[line:col] message``."""
    return f"[{error.line}:{error.col}] {error.message}"


def format_semantic_error(error: SemanticError) -> str:
    """Format a semantic error as ``[line:col] (rule) message``.

    Errors without a known location are rendered as ``(rule) message``.
    """
    if error.line is not None:
        return f"[{error.line}:{error.col}] ({error.rule}) {error.message}"
    return f"({error.rule}) {error.message}"


def format_all_errors(
    parse_errors: Iterable[ParseError],
    semantic_errors: Iterable[SemanticError],
) -> list[str]:
    """Format all errors, parse errors first, each group in its original order."""
    return [format_parse_error(e) for e in parse_errors] + [format_semantic_error(e) for e in semantic_errors]
