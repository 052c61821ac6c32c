#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the asapnotes CLI.

A config file supplies defaults for the command line. Three top-level keys
are recognized::

    settings_file = "~/.config/asapnotes/config.json"

    [render]
    wrap_lists = true
    link_target = "_self"

    [serve]
    host = "127.0.0.1"
    port = 8080
    heartbeat_timeout = 60

The same structure can be written as YAML or JSON, or placed under
``[tool.asapnotes]`` in a ``pyproject.toml``.
"""

import argparse
import json
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Optional

import yaml

from asapnotes.constants import CONFIG_FILENAMES
from asapnotes.options import MarkdownRendererOptions

PYPROJECT_FILENAME = "pyproject.toml"

KNOWN_SECTIONS = {
    "render": dict,
    "serve": dict,
    "settings_file": str,
}
SERVE_KEYS = {"host", "port", "heartbeat_timeout"}


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the [tool.asapnotes] section from a pyproject.toml file.

    Returns
    -------
    dict
        The section, or an empty dict when the file has none

    Raises
    ------
    argparse.ArgumentTypeError
        If pyproject.toml cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading pyproject.toml {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get("asapnotes")
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.asapnotes] section in {pyproject_path} must be a table, got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by walking up from ``start_dir``.

    Each directory is checked for the dedicated config files in priority
    order, then for a pyproject.toml with a ``[tool.asapnotes]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / PYPROJECT_FILENAME
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except argparse.ArgumentTypeError:
                # Unparseable pyproject.toml, keep searching
                pass

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def discover_config_file() -> Optional[Path]:
    """Discover a configuration file in the standard locations.

    The current directory and its parents are searched first, then the
    user's home directory (dedicated config files only).

    Returns
    -------
    Path or None
        Path to discovered config file, or None if not found

    """
    config_in_parents = find_config_in_parents()
    if config_in_parents:
        return config_in_parents

    home = Path.home()
    for filename in CONFIG_FILENAMES:
        config_path = home / filename
        if config_path.is_file():
            return config_path

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a JSON, TOML, YAML or pyproject.toml file.

    The format is chosen from the file name and extension.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, parsed, or has invalid format

    Examples
    --------
    >>> config = load_config_file(".asapnotes.toml")
    >>> config["render"]["wrap_lists"]
    True

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")

    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == PYPROJECT_FILENAME:
        return _load_pyproject_section(config_path)
    if ext == ".toml":
        return _load_structured(config_path, "TOML")
    if ext in (".yaml", ".yml"):
        return _load_structured(config_path, "YAML")
    if ext == ".json":
        return _load_structured(config_path, "JSON")
    raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml")


def _load_structured(config_path: Path, kind: str) -> Dict[str, Any]:
    try:
        if kind == "TOML":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif kind == "YAML":
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        else:
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise argparse.ArgumentTypeError(f"Invalid {kind} in config file {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading {kind} config {config_path}: {e}") from e

    # An empty YAML document loads as None
    if config is None and kind == "YAML":
        return {}
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"{kind} config file must contain a mapping at root level, got {type(config).__name__}"
        )
    return config


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check the shape of a loaded configuration.

    Unknown top-level keys are rejected so that typos are reported rather
    than silently ignored.

    Raises
    ------
    argparse.ArgumentTypeError
        If a key is unknown or a value has the wrong type

    """
    for key, value in config.items():
        expected = KNOWN_SECTIONS.get(key)
        if expected is None:
            known = ", ".join(sorted(KNOWN_SECTIONS))
            raise argparse.ArgumentTypeError(f"Unknown configuration key '{key}' (expected one of: {known})")
        if not isinstance(value, expected):
            raise argparse.ArgumentTypeError(
                f"Configuration key '{key}' must be a {expected.__name__}, got {type(value).__name__}"
            )

    unknown_serve = set(config.get("serve", {})) - SERVE_KEYS
    if unknown_serve:
        raise argparse.ArgumentTypeError(f"Unknown [serve] option(s): {', '.join(sorted(unknown_serve))}")

    try:
        MarkdownRendererOptions.from_mapping(config.get("render", {}))
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(f"Invalid [render] options: {e}") from e

    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries with deep merging.

    The override dictionary takes precedence over base for conflicting keys.
    Nested dictionaries are merged recursively, not replaced entirely.

    Examples
    --------
    >>> merge_configs({"serve": {"port": 8080}}, {"serve": {"host": "0.0.0.0"}})
    {'serve': {'port': 8080, 'host': '0.0.0.0'}}

    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config_with_priority(
    explicit_path: Optional[str] = None, env_var_path: Optional[str] = None
) -> Dict[str, Any]:
    """Load configuration with proper priority handling.

    Priority order (highest to lowest):
    1. Explicit config file path (--config flag)
    2. Environment variable config path (ASAPNOTES_CONFIG)
    3. Auto-discovered config file

    Returns
    -------
    dict
        Validated configuration dictionary (empty dict if no config found)

    Raises
    ------
    argparse.ArgumentTypeError
        If a config file is specified or discovered but cannot be loaded

    """
    if explicit_path:
        return validate_config(load_config_file(explicit_path))

    if env_var_path:
        return validate_config(load_config_file(env_var_path))

    discovered_path = discover_config_file()
    if discovered_path:
        return validate_config(load_config_file(discovered_path))

    return {}


def get_config_search_paths() -> list[Path]:
    """Get the representative paths checked during config discovery.

    The actual search walks up from the cwd to the filesystem root; the cwd
    entries stand for every directory on that walk.
    """
    cwd = Path.cwd()
    paths = [cwd / filename for filename in CONFIG_FILENAMES]
    paths.append(cwd / PYPROJECT_FILENAME)

    home = Path.home()
    paths.extend(home / filename for filename in CONFIG_FILENAMES)
    return paths
