# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""File-level checking pipeline for .isx sources.

Reads a source, parses it, analyzes the resulting Program, and filters the
semantic errors by the rules disabled in the project configuration. Parsing
and analysis never raise on bad input; only I/O failures surface as
:class:`CheckerError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from isomorph.config import IsomorphConfig
from isomorph.diagnostics import format_all_errors
from isomorph.parser.ast import Program
from isomorph.parser.parser import ParseError, parse
from isomorph.semantics.analyzer import SemanticError, analyze
from isomorph.semantics.iom import IOM

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class CheckerError(Exception):
    """Raised when a source file cannot be read."""


@dataclass
class CheckResult:
    """Outcome of checking one source.

    Attributes:
        path: The checked file, or ``None`` for in-memory sources.
        program: The (possibly partial) AST.
        iom: The IOM built from the AST.
        parse_errors: Lexical and syntax errors in source order.
        semantic_errors: Semantic errors not suppressed by configuration.
    """

    path: Path | None
    program: Program
    iom: IOM
    parse_errors: list[ParseError] = field(default_factory=list)
    semantic_errors: list[SemanticError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.parse_errors or self.semantic_errors)

    def messages(self) -> list[str]:
        """Return the formatted diagnostics, parse errors first."""
        return format_all_errors(self.parse_errors, self.semantic_errors)


def check_source(
    source: str,
    *,
    disabled_rules: Iterable[str] = frozenset(),
    path: Path | None = None,
) -> CheckResult:
    """Parse and analyze a source string.

    Args:
        source: The .isx text.
        disabled_rules: Rule ids (e.g. ``"SS-9"``) whose errors are dropped.
        path: Optional file the text came from, recorded in the result.

    Returns:
        A CheckResult; it always carries a Program and an IOM.
    """
    disabled = frozenset(disabled_rules)
    parse_result = parse(source)
    analysis = analyze(parse_result.program)
    semantic_errors = [e for e in analysis.errors if e.rule not in disabled]
    suppressed = len(analysis.errors) - len(semantic_errors)
    if suppressed:
        logger.debug("Suppressed %d semantic error(s) by disabled rules", suppressed)
    return CheckResult(
        path=path,
        program=parse_result.program,
        iom=analysis.iom,
        parse_errors=list(parse_result.errors),
        semantic_errors=semantic_errors,
    )


def check_file(path: Path, *, disabled_rules: Iterable[str] = frozenset()) -> CheckResult:
    """Read and check a single .isx file.

    Raises:
        CheckerError: If the file cannot be read.
    """
    try:
        source = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise CheckerError(f"Source file not found: {path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise CheckerError(f"Cannot read source file {path}: {exc}") from exc

    logger.debug("Checking %s", path)
    return check_source(source, disabled_rules=disabled_rules, path=path)


def discover_files(root: Path, config: IsomorphConfig) -> list[Path]:
    """Find the source files under ``root`` selected by the configuration.

    A file given directly as ``root`` is returned as-is. For a directory,
    every ``include`` pattern is globbed relative to it and files inside a
    directory named in ``exclude`` are dropped.

    Returns:
        The matching files, sorted and without duplicates.
    """
    if root.is_file():
        return [root]

    excluded = set(config.exclude)
    found: set[Path] = set()
    for pattern in config.include:
        for candidate in root.glob(pattern):
            if not candidate.is_file():
                continue
            if excluded.intersection(candidate.relative_to(root).parts[:-1]):
                continue
            found.add(candidate)
    files = sorted(found)
    logger.debug("Discovered %d source file(s) under %s", len(files), root)
    return files
