# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for diagnostic formatting."""

from isomorph.diagnostics import format_all_errors, format_parse_error, format_semantic_error
from isomorph.parser.parser import ParseError
from isomorph.semantics.analyzer import SemanticError

# ###############
# Test Helpers
# ###############


def _pe(message: str, line: int, col: int) -> ParseError:
    return ParseError(message=message, line=line, col=col, pos=0)


def _se(message: str, rule: str, line: int | None = None, col: int | None = None) -> SemanticError:
    return SemanticError(message=message, rule=rule, line=line, col=col)


# ###############
# Formatting
# ###############


class TestFormatParseError:
    def test_with_position(self) -> None:
        assert format_parse_error(_pe("Unexpected token", 3, 5)) == "[3:5] Unexpected token"

    def test_at_origin(self) -> None:
        assert format_parse_error(_pe("EOF", 1, 1)) == "[1:1] EOF"


class TestFormatSemanticError:
    def test_with_position(self) -> None:
        assert format_semantic_error(_se("Duplicate entity", "SS-1", 10, 3)) == "[10:3] (SS-1) Duplicate entity"

    def test_without_position(self) -> None:
        assert format_semantic_error(_se("Bad enum", "SS-4")) == "(SS-4) Bad enum"


class TestFormatAllErrors:
    def test_empty(self) -> None:
        assert format_all_errors([], []) == []

    def test_parse_errors_come_first(self) -> None:
        result = format_all_errors([_pe("P1", 5, 1), _pe("P2", 6, 1)], [_se("S1", "SS-1")])
        assert result == ["[5:1] P1", "[6:1] P2", "(SS-1) S1"]

    def test_order_within_groups_is_preserved(self) -> None:
        semantic = [_se(f"sem{i}", f"SS-{i}", i, 1) for i in range(1, 6)]
        result = format_all_errors([], reversed(semantic))
        assert [r.split()[-1] for r in result] == ["sem5", "sem4", "sem3", "sem2", "sem1"]
