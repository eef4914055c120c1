"""
Option checks that run before any source is read.

Static checks look at one option at a time. Cross-option checks enforce the
invariants between source modes and pattern filtering. Every failure raises
`ConfigurationError`.
"""

from __future__ import annotations

import codecs
import re
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

from schemagen.errors import ConfigurationError

if TYPE_CHECKING:
    from schemagen.options import GenerationOptions

_PACKAGE_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*(\.[A-Za-z_$][A-Za-z0-9_$]*)*$")


def check_source_mode(source: str | None, source_paths: Sequence[str] | None) -> None:
    """Exactly one of single-location or multi-location mode must be active."""
    if source is not None and source_paths:
        raise ConfigurationError(
            "source_paths",
            list(source_paths),
            "source_directory and source_paths are mutually exclusive",
        )
    if source is None and not source_paths:
        raise ConfigurationError(
            "source_directory", None, "one of source_directory or source_paths must be provided"
        )


def check_filter_compatibility(
    source: str | None,
    source_paths: Sequence[str] | None,
    includes: Sequence[str],
    excludes: Sequence[str],
) -> None:
    """Include/exclude patterns need a single source directory to anchor against."""
    if not includes and not excludes:
        return
    if source_paths:
        raise ConfigurationError(
            "source_paths",
            list(source_paths),
            "source includes and excludes are incompatible with source_paths",
        )
    if source is None:
        raise ConfigurationError(
            "includes",
            list(includes) + list(excludes),
            "source includes and excludes require source_directory",
        )


def check_output_directory(value: str | None) -> None:
    if value is None or not str(value).strip():
        raise ConfigurationError("output_directory", value, "output directory is required")


def check_output_encoding(value: str) -> None:
    try:
        codecs.lookup(value)
    except (LookupError, TypeError) as e:
        raise ConfigurationError("output_encoding", value, "unknown encoding") from e


def check_target_package(value: str) -> None:
    if value and not _PACKAGE_RE.match(value):
        raise ConfigurationError(
            "target_package", value, "expected empty or a dotted sequence of identifiers"
        )


def check_format_type_mapping(mapping: Mapping[str, str]) -> None:
    for name, type_name in mapping.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("format_type_mapping", name, "format name must not be blank")
        if not isinstance(type_name, str) or not type_name.strip():
            raise ConfigurationError(
                "format_type_mapping", f"{name}={type_name}", "type name must not be blank"
            )


def check_static_options(options: GenerationOptions) -> None:
    """Per-option checks that need no other option to decide."""
    check_output_directory(options.output_directory)
    check_output_encoding(options.output_encoding)
    check_target_package(options.target_package)
    check_format_type_mapping(options.format_type_mapping)
