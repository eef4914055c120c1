"""
Raw generation options as supplied by the host (CLI flags, config files, or an
embedding build tool).

`GenerationOptions` is a loose, mutable bag: values are unvalidated strings,
booleans, and lists. `schemagen.engine.plan_run()` turns it into an immutable
`RunConfiguration`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields

DEFAULT_OUTPUT_DIRECTORY = "generated-sources/schemagen"


@dataclass
class GenerationOptions:
    """Every user-facing option, with the documented default for each."""

    # Locations
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    source_directory: str | None = None
    source_paths: list[str] | None = None
    includes: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    file_extensions: list[str] = field(default_factory=list)
    target_package: str = ""
    skip: bool = False
    add_compile_source_root: bool = True
    remove_old_output: bool = False
    output_encoding: str = "UTF-8"

    # Strategy axes and extension points
    annotation_style: str = "jackson2"
    inclusion_level: str = "NON_NULL"
    source_type: str = "jsonschema"
    source_sort_order: str = "OS"
    custom_annotator: str = "noop"
    custom_rule_factory: str = "default"
    target_version: str | None = None

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
    to_string_excludes: list[str] = field(default_factory=list)
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
    format_type_mapping: dict[str, str] = field(default_factory=dict)

    # Naming
    property_word_delimiters: str = "- _"
    ref_fragment_path_delimiters: str = "#/."
    class_name_prefix: str = ""
    class_name_suffix: str = ""


OPTION_NAMES: frozenset[str] = frozenset(f.name for f in fields(GenerationOptions))

# Options that are still accepted but no longer have any effect.
DEPRECATED_OPTIONS: dict[str, str] = {
    "use_commons_lang3": "use_commons_lang3 is deprecated. Please remove it from your config.",
}


def deprecated_options_in_use(options: GenerationOptions) -> list[str]:
    """Warning messages for deprecated options set away from their default."""
    defaults = GenerationOptions()
    messages: list[str] = []
    for name, message in DEPRECATED_OPTIONS.items():
        if getattr(options, name) != getattr(defaults, name):
            messages.append(message)
    return messages

