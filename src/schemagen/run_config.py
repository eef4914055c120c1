"""
The fully resolved, immutable configuration for one generation run.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path, PurePath
from types import MappingProxyType
from typing import Any

from schemagen.extensions import Annotator, ExtensionBinding, RuleFactory
from schemagen.source_locator import SourceLocation, SourceLocator
from schemagen.strategies import AnnotationStyle, InclusionLevel, SourceSortOrder, SourceType
from schemagen.validator import check_filter_compatibility, check_source_mode


@dataclass(frozen=True)
class RunConfiguration:
    """
    Read-only snapshot of every resolved option.

    Construction enforces the cross-field invariants: exactly one of
    `source_directory` / `source_paths` is set, and include/exclude patterns
    only accompany `source_directory`. Collections are stored as tuples and a
    read-only mapping, so instances are safe to share between workers.
    """

    # Locations
    output_directory: Path
    base_directory: Path
    source_directory: str | None
    source_paths: tuple[str, ...] | None
    target_version: str

    # Strategy axes and extension points
    annotation_style: AnnotationStyle
    inclusion_level: InclusionLevel
    source_type: SourceType
    source_sort_order: SourceSortOrder
    custom_annotator: ExtensionBinding[Annotator]
    custom_rule_factory: ExtensionBinding[RuleFactory]

    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    file_extensions: tuple[str, ...] = ()
    target_package: str = ""
    add_compile_source_root: bool = True
    remove_old_output: bool = False
    output_encoding: str = "UTF-8"

    # Feature toggles
    generate_builders: bool = False
    use_inner_class_builders: bool = False
    include_type_info: bool = False
    use_primitives: bool = False
    use_long_integers: bool = False
    use_big_integers: bool = False
    use_double_numbers: bool = True
    use_big_decimals: bool = False
    include_hashcode_and_equals: bool = True
    include_to_string: bool = True
    to_string_excludes: tuple[str, ...] = ()
    use_title_as_classname: bool = False
    include_jsr303_annotations: bool = False
    include_jsr305_annotations: bool = False
    use_jakarta_validation: bool = False
    use_optional_for_getters: bool = False
    use_joda_dates: bool = False
    use_joda_local_dates: bool = False
    use_joda_local_times: bool = False
    use_commons_lang3: bool = False
    parcelable: bool = False
    serializable: bool = False
    initialize_collections: bool = True
    include_constructors: bool = False
    constructors_required_properties_only: bool = False
    include_required_properties_constructor: bool = False
    include_all_properties_constructor: bool = True
    include_copy_constructor: bool = False
    include_constructor_properties_annotation: bool = False
    include_additional_properties: bool = True
    include_getters: bool = True
    include_setters: bool = True
    include_dynamic_accessors: bool = False
    include_dynamic_getters: bool = False
    include_dynamic_setters: bool = False
    include_dynamic_builders: bool = False
    include_generated_annotation: bool = True

    # Dates and formats
    date_time_type: str | None = None
    date_type: str | None = None
    time_type: str | None = None
    format_dates: bool = False
    format_times: bool = False
    format_date_times: bool = False
    custom_date_pattern: str | None = None
    custom_time_pattern: str | None = None
    custom_date_time_pattern: str | None = None
    format_type_mapping: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    # Naming
    property_word_delimiters: tuple[str, ...] = ("-", " ", "_")
    ref_fragment_path_delimiters: str = "#/."
    class_name_prefix: str = ""
    class_name_suffix: str = ""

    def __post_init__(self) -> None:
        check_source_mode(self.source_directory, self.source_paths)
        check_filter_compatibility(
            self.source_directory, self.source_paths, self.includes, self.excludes
        )
        if not isinstance(self.format_type_mapping, MappingProxyType):
            object.__setattr__(
                self, "format_type_mapping", MappingProxyType(dict(self.format_type_mapping))
            )

    def source_locations(self) -> Iterator[SourceLocation]:
        """A fresh, lazy iterator over the configured source locations."""
        locator = SourceLocator(self.source_directory, self.source_paths, self.base_directory)
        return locator.locate()

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view: enums by name, paths as strings, extensions by identifier."""
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, ExtensionBinding):
        return value.identifier
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, tuple):
        return list(value)
    return value
