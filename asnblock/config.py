# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.

"""
Config file support for asnblock.

This module handles loading persistent settings from ~/.asnblock.conf.
Supports both YAML and INI formats.

Priority order: CLI args > ~/.asnblock.conf > hardcoded defaults
"""

import configparser
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.expanduser("~/.asnblock.conf")

# Mapping of config field names to their expected Python types
_CONFIG_FIELD_TYPES: Dict[str, type] = {
    "listen_host": str,
    "port": int,
    "whois_host": str,
    "whois_port": int,
    "whois_timeout": float,
    "max_response_bytes": int,
    "cache_dir": str,
    "log_level": str,
    "log_file": str,
    "debug_whois_log": str,
}


def _coerce_field(key: str, raw_value: Any) -> Any:
    """Coerce a raw config value to the expected type for the given field name."""
    field_type = _CONFIG_FIELD_TYPES[key]
    if isinstance(raw_value, field_type) and not isinstance(raw_value, bool):
        return raw_value
    if isinstance(raw_value, bool):
        raise ValueError(f"Invalid value for config field '{key}': expected {field_type.__name__}, got {raw_value!r}")
    try:
        return field_type(raw_value)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Invalid value for config field '{key}': expected {field_type.__name__}, got {raw_value!r}") from exc


def _collect_fields(items: Any, path: str, section: str) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, raw_value in items:
        if key not in _CONFIG_FIELD_TYPES:
            logger.warning("Unknown config key '%s' in %s section of '%s'; ignoring.", key, section, path)
            continue
        if raw_value is None:
            logger.warning("Config key '%s' has no value in '%s'; ignoring.", key, path)
            continue
        result[key] = _coerce_field(key, raw_value)
    return result


def load_ini_config(path: str) -> Dict[str, Any]:
    """
    Load and parse an INI-format config file.

    Supports ``=`` and ``:`` as key-value delimiters. Settings live in the
    ``[default]`` section.

    Args:
        path: Path to the INI config file.

    Returns:
        Dictionary of config values.

    Raises:
        ValueError: On parse errors or invalid field values.
    """
    parser = configparser.ConfigParser(allow_no_value=True, delimiters=("=", ":"), interpolation=None)
    try:
        read_files = parser.read(path, encoding="utf-8")
    except configparser.Error as exc:
        raise ValueError(f"Invalid config file '{path}': {exc}") from exc

    if not read_files:
        raise ValueError(f"Config file '{path}' could not be read.")

    if not parser.has_section("default"):
        return {}
    return _collect_fields(parser.items("default"), path, "[default]")


def load_yaml_config(path: str) -> Dict[str, Any]:
    """
    Load and parse a YAML-format config file.

    Requires PyYAML.  Uses ``yaml.safe_load`` to prevent arbitrary code
    execution.

    Args:
        path: Path to the YAML config file.

    Returns:
        Dictionary of config values.

    Raises:
        ImportError: If PyYAML is not installed.
        ValueError: On parse errors or invalid file content.
    """
    try:
        import yaml  # type: ignore[import-untyped]  # pylint: disable=import-outside-toplevel
    except ImportError as exc:
        raise ImportError("PyYAML is required for YAML config files. Install it with: pip install pyyaml") from exc

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file '{path}': {exc}") from exc
    except OSError as exc:
        raise ValueError(f"Cannot read config file '{path}': {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file '{path}' must contain a YAML mapping at the top level, got {type(data).__name__}.")

    default_section = data.get("default") or {}
    if not isinstance(default_section, dict):
        raise ValueError(f"The 'default' section in '{path}' must be a YAML mapping.")
    return _collect_fields(default_section.items(), path, "'default'")


def _is_yaml_file(path: str) -> bool:
    """
    Heuristically determine whether a config file uses YAML or INI format.

    INI files begin with a ``[section]`` header on the first non-blank,
    non-comment line.  Anything else is treated as YAML.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                stripped = line.strip()
                if stripped and not stripped.startswith("#"):
                    return not stripped.startswith("[")
    except OSError:
        pass
    return False


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load persistent settings from a config file.

    Auto-detects whether the file uses YAML or INI format.
    Returns an empty dict if the config file does not exist.

    Args:
        path: Path to the config file.  Defaults to ``~/.asnblock.conf``.

    Returns:
        Dictionary of config values.

    Raises:
        ValueError: If the file exists but cannot be parsed.
        ImportError: If a YAML file is found but PyYAML is not installed.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        return {}

    if _is_yaml_file(path):
        logger.debug("Loading YAML config from '%s'.", path)
        return load_yaml_config(path)

    logger.debug("Loading INI config from '%s'.", path)
    return load_ini_config(path)
