# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the Isomorph command-line interface."""

import argparse
import logging
import sys
from pathlib import Path

from isomorph.checker import CheckerError, check_file, discover_files
from isomorph.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    IsomorphConfig,
    default_config_text,
    find_config,
    load_config,
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the Isomorph CLI."""
    parser = argparse.ArgumentParser(
        prog="isomorph",
        description="Isomorph: a textual DSL for architecture diagrams",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Create a default project configuration",
        description=f"Write a default {CONFIG_FILE_NAME} into a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize (default: current directory)",
    )

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check .isx files for syntax and semantic errors",
        description="Parse and analyze .isx files and report every diagnostic.",
    )
    check_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to check (default: current directory)",
    )
    check_parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Configuration file (default: nearest {CONFIG_FILE_NAME})",
    )

    # dump subcommand
    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the object model of a file as JSON",
        description="Analyze one .isx file and print its object model as JSON.",
    )
    dump_parser.add_argument("file", type=Path, help="The .isx file to dump")
    dump_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    args = parser.parse_args()
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


def configure_logging(level: int = logging.INFO, fmt: str | None = None) -> None:
    """Attach a stream handler to the root logger once and set its level."""
    if fmt is None:
        fmt = "%(levelname)s:%(name)s:%(message)s"
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(level)


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "dump":
        return _cmd_dump(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: configuration already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(default_config_text(), encoding="utf-8")
    print(f"Initialized Isomorph project at '{config_file}'.")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    # Each file is checked with the disabled rules of the config that found it.
    files: dict[Path, frozenset[str]] = {}
    for raw in args.paths:
        path = Path(raw)
        if not path.exists():
            print(f"Error: path '{path}' does not exist.", file=sys.stderr)
            return 1
        try:
            config = _resolve_config(args.config, path)
        except ConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        for source_file in discover_files(path, config):
            files.setdefault(source_file, config.disabled_rules)

    if not files:
        print("No .isx files found.")
        return 0

    print(f"Checking {len(files)} file(s)...")
    error_count = 0
    for source_file, disabled_rules in files.items():
        try:
            result = check_file(source_file, disabled_rules=disabled_rules)
        except CheckerError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            error_count += 1
            continue
        for message in result.messages():
            print(f"{source_file}: {message}", file=sys.stderr)
        error_count += len(result.parse_errors) + len(result.semantic_errors)

    if error_count:
        print(f"Found {error_count} error(s).", file=sys.stderr)
        return 1

    print("No issues found.")
    return 0


def _cmd_dump(args: argparse.Namespace) -> int:
    """Handle the dump subcommand."""
    try:
        config = _resolve_config(None, args.file)
        result = check_file(args.file, disabled_rules=config.disabled_rules)
    except (ConfigError, CheckerError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for message in result.messages():
        print(f"{args.file}: {message}", file=sys.stderr)
    print(result.iom.model_dump_json(indent=args.indent, by_alias=True))
    return 1 if result.has_errors else 0


def _resolve_config(explicit: Path | None, path: Path) -> IsomorphConfig:
    """Load the explicit configuration, else the nearest one, else the defaults."""
    if explicit is not None:
        return load_config(explicit)
    config_path = find_config(path if path.is_dir() else path.parent)
    if config_path is None:
        logger.debug("No %s found for %s; using defaults", CONFIG_FILE_NAME, path)
        return IsomorphConfig()
    return load_config(config_path)
