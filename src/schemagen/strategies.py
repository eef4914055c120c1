"""
Strategy axes: configuration dimensions whose value must be one of a fixed,
named set of behaviors.

Each axis is a closed `str` enum. Raw option strings are matched
case-insensitively against member names; there is no partial matching and no
fallback to a default.
"""

from __future__ import annotations

from enum import Enum
from typing import TypeVar

from schemagen.errors import ConfigurationError


class AnnotationStyle(str, Enum):
    """Serialization annotation style applied to generated types."""

    JACKSON = "jackson"
    JACKSON2 = "jackson2"
    JSONB = "jsonb"
    JSONB2 = "jsonb2"
    GSON = "gson"
    MOSHI1 = "moshi1"
    NONE = "none"


class InclusionLevel(str, Enum):
    """Which property values serializers include in output."""

    ALWAYS = "always"
    NON_ABSENT = "non_absent"
    NON_DEFAULT = "non_default"
    NON_EMPTY = "non_empty"
    NON_NULL = "non_null"
    USE_DEFAULTS = "use_defaults"


class SourceType(str, Enum):
    """How input documents are interpreted."""

    JSONSCHEMA = "jsonschema"
    JSON = "json"
    YAMLSCHEMA = "yamlschema"
    YAML = "yaml"


class SourceSortOrder(str, Enum):
    """
    Order in which a directory's contents are processed.

    `OS` keeps the order the filesystem lists entries in. `FILES_FIRST` and
    `SUBDIRS_FIRST` sort each directory's entries by name, placing documents
    before (or after) subdirectories.
    """

    OS = "os"
    FILES_FIRST = "files_first"
    SUBDIRS_FIRST = "subdirs_first"


_E = TypeVar("_E", bound=Enum)


def _variant_table(axis: type[_E]) -> dict[str, _E]:
    return {member.name.lower(): member for member in axis}


def resolve_strategy(axis: type[_E], raw: str | None, option: str) -> _E:
    """
    Map a raw option string to a member of `axis`.

    Matching is case-insensitive on member names and otherwise exact. Anything
    outside the table raises `ConfigurationError` listing the allowed names.
    """
    table = _variant_table(axis)
    member = table.get(raw.lower()) if isinstance(raw, str) else None
    if member is None:
        allowed = ", ".join(m.name for m in axis)
        raise ConfigurationError(
            option, raw, f"unrecognized strategy value (allowed: {allowed})"
        )
    return member
