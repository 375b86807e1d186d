# Copyright 2026 Isomorph Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the ``.isomorph.yaml`` project configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from isomorph.semantics.analyzer import Rule

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".isomorph.yaml"

DEFAULT_INCLUDE = ["**/*.isx"]


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class IsomorphConfig:
    """The parsed configuration for an Isomorph project.

    Attributes:
        include: Glob patterns, relative to the project root, selecting source files.
        exclude: Directory names whose contents are never checked.
        disabled_rules: Semantic rule ids (e.g. ``"SS-9"``) not reported by ``check``.
    """

    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=list)
    disabled_rules: frozenset[str] = frozenset()


def load_config(path: Path) -> IsomorphConfig:
    """Load and parse an Isomorph configuration file.

    Args:
        path: Path to the ``.isomorph.yaml`` file.

    Returns:
        An IsomorphConfig populated from the file; omitted keys keep their defaults.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    logger.debug("Loading configuration from %s", path)
    return _parse_config(text, source_label=str(path))


def find_config(directory: Path) -> Path | None:
    """Return the configuration file in ``directory`` or its nearest ancestor, if any."""
    directory = directory.resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def default_config_text() -> str:
    """Return the content written by ``isomorph init``."""
    return (
        "# Isomorph project configuration\n"
        "\n"
        "include:\n"
        '  - "**/*.isx"\n'
        "exclude: []\n"
        "disabled-rules: []\n"
    )


# ################
# Implementation
# ################

_KNOWN_KEYS = frozenset({"include", "exclude", "disabled-rules"})
_KNOWN_RULES = frozenset(rule.value for rule in Rule)


def _parse_config(text: str, source_label: str = "<string>") -> IsomorphConfig:
    """Parse configuration YAML text into an IsomorphConfig.

    An empty document yields the default configuration.

    Raises:
        ConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return IsomorphConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    unknown = sorted(str(key) for key in data if key not in _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown field(s): {', '.join(unknown)}")

    config = IsomorphConfig()
    if "include" in data:
        config.include = _require_string_list(data, "include", source_label)
    if "exclude" in data:
        config.exclude = _require_string_list(data, "exclude", source_label)
    if "disabled-rules" in data:
        rules = _require_string_list(data, "disabled-rules", source_label)
        for rule in rules:
            if rule not in _KNOWN_RULES:
                raise ConfigError(f"{source_label}: unknown rule '{rule}' in 'disabled-rules'")
        config.disabled_rules = frozenset(rules)
    return config


def _require_string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    """Extract a list-of-strings field from a mapping, raising ConfigError on any other shape."""
    value = mapping[key]
    if not isinstance(value, list):
        raise ConfigError(f"{source_label}: '{key}' must be a list")
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise ConfigError(f"{source_label}: {key}[{index}] must be a string")
    return list(value)
