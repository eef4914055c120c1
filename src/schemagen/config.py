"""
TOML-based config file loading for schemagen.

Searches for `.schemagen.toml`, `schemagen.toml`, or `pyproject.toml [tool.schemagen]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, cast

from schemagen.errors import ConfigurationError
from schemagen.options import OPTION_NAMES, GenerationOptions
from schemagen.target_version import BuildEnvironment

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = logging.getLogger(__name__)


@dataclass
class SchemagenConfig:
    """
    Parsed config from a TOML file. `options` only holds keys actually present
    in the file, so the merge can tell "not configured" from "set to default".
    """

    options: dict[str, Any] = field(default_factory=dict)
    # Host build facts, used for target-version resolution
    properties: dict[str, str] = field(default_factory=dict)
    compiler: dict[str, str] = field(default_factory=dict)


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".schemagen.toml", "schemagen.toml", "pyproject.toml"]

# Sub-tables that describe the build environment rather than options
_ENVIRONMENT_SECTIONS = ("properties", "compiler")

_FIELD_TYPES: dict[str, str] = {f.name: str(f.type) for f in fields(GenerationOptions)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.schemagen.toml` >
    `schemagen.toml` > `pyproject.toml` (only if it has `[tool.schemagen]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    # Only use pyproject.toml if it has [tool.schemagen]
                    if _pyproject_has_schemagen_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_schemagen_section(path: Path) -> bool:
    """Check if a pyproject.toml has a [tool.schemagen] section."""
    try:
        data = tomllib.loads(path.read_text())
        return "schemagen" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> SchemagenConfig:
    """
    Load a `SchemagenConfig` from a TOML file. Supports both standalone
    `schemagen.toml` / `.schemagen.toml` and `pyproject.toml` (extracts
    `[tool.schemagen]`). Malformed TOML is reported and yields an empty config.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        log.warning("%s: malformed TOML, ignoring config file: %s", config_path, e)
        return SchemagenConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("schemagen", {})

    return _parse_config_data(data, source=str(config_path))


def _parse_config_data(data: dict[str, Any], source: str = "<config>") -> SchemagenConfig:
    """Parse a flat or sectioned TOML dict into SchemagenConfig."""
    config = SchemagenConfig()
    # Flatten sections: [sources], [naming], ... merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if key in _ENVIRONMENT_SECTIONS and isinstance(value, dict):
            target = config.properties if key == "properties" else config.compiler
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                target[sub_key] = str(sub_value)
        elif isinstance(value, dict) and _snake(key) != "format_type_mapping":
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    for key, value in flat.items():
        name = _snake(key)
        if name not in OPTION_NAMES:
            log.warning("%s: unrecognized config key %r (ignored)", source, key)
            continue
        config.options[name] = _coerce(name, value)

    return config


def _snake(key: str) -> str:
    return key.replace("-", "_")


def _coerce(name: str, value: Any) -> Any:
    """Check a TOML value against the option's declared type."""
    declared = _FIELD_TYPES[name]
    if declared == "bool":
        if not isinstance(value, bool):
            raise ConfigurationError(name, value, "expected true or false")
        return value
    if declared.startswith("list[str]"):
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(name, value, "expected a list of strings")
        return list(cast(list[str], value))
    if declared.startswith("dict[str, str]"):
        if not isinstance(value, dict):
            raise ConfigurationError(name, value, "expected a table of strings")
        return {str(k): str(v) for k, v in cast(dict[str, Any], value).items()}
    if value is None or isinstance(value, (dict, list, bool)):
        raise ConfigurationError(name, value, "expected a string")
    return str(value)


def merge_cli_with_config(
    cli_opts: GenerationOptions,
    config: SchemagenConfig | None,
    explicit_flags: set[str],
) -> GenerationOptions:
    """
    Merge CLI options with config file settings.

    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for name, cfg_value in config.options.items():
        # Skip if CLI explicitly set this flag
        if name in explicit_flags:
            continue
        setattr(cli_opts, name, cfg_value)

    return cli_opts


def build_environment(
    config: SchemagenConfig | None, cli_properties: dict[str, str] | None = None
) -> BuildEnvironment:
    """Host build facts from the config file, with `-D` properties layered on top."""
    properties: dict[str, str] = dict(config.properties) if config else {}
    properties.update(cli_properties or {})
    compiler = dict(config.compiler) if config else {}
    return BuildEnvironment(properties=properties, compiler=compiler)
