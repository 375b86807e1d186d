#!/usr/bin/env python3
# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally: formatting, lint, types, tests, examples, and build."""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=isomorph", "--cov-report=term-missing"]),
    ("Example check", ["uv", "run", "isomorph", "check", "examples/"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a summary table."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--fail-fast", action="store_true", help="Stop after the first failing step")
    parser.add_argument(
        "--only",
        action="append",
        default=[],
        metavar="STEP",
        help="Run only the named step (repeatable)",
    )
    args = parser.parse_args()

    steps = [step for step in STEPS if not args.only or step[0] in args.only]
    if not steps:
        print(chalk.red(f"No steps match: {', '.join(args.only)}"))
        return 2

    results: list[tuple[str, bool, float]] = []
    for name, cmd in steps:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        passed = proc.returncode == 0
        results.append((name, passed, time.monotonic() - start))
        if not passed and args.fail_fast:
            break

    _banner("Summary")
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    skipped = len(steps) - len(results)
    if skipped:
        print(chalk.yellow(f"  SKIP  {skipped} step(s) after failure"))

    print()
    return 0 if all(passed for _, passed, _ in results) and not skipped else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(f"  {title}"))
    print(sep)


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())
