"""
Run planning: turns raw `GenerationOptions` into a validated `RunPlan`.

Resolution happens in a fixed order, each step using the results of the one
before: target version, static option checks, source locator and file
filter, strategy and extension resolution, then construction of the
immutable `RunConfiguration`. Any `ConfigurationError` aborts planning, so the
generation engine only ever sees a fully valid plan.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, fields
from pathlib import Path
from types import MappingProxyType

from schemagen import extensions
from schemagen.errors import ConfigurationError
from schemagen.extensions import Annotator, ExtensionPoint, RuleFactory
from schemagen.file_filter import AllFileFilter, FileFilter, PatternFileFilter, PatternSet
from schemagen.options import OPTION_NAMES, GenerationOptions, deprecated_options_in_use
from schemagen.run_config import RunConfiguration
from schemagen.source_locator import SourceLocation, SourceLocator
from schemagen.strategies import (
    AnnotationStyle,
    InclusionLevel,
    SourceSortOrder,
    SourceType,
    resolve_strategy,
)
from schemagen.target_version import (
    BuildEnvironment,
    ResolvedTargetVersion,
    resolve_target_version,
    target_version_candidates,
)
from schemagen.validator import check_filter_compatibility, check_static_options

log = logging.getLogger(__name__)

# RunConfiguration fields computed by the planner rather than copied from options.
_RESOLVED_FIELDS = frozenset(
    {
        "output_directory",
        "base_directory",
        "source_directory",
        "source_paths",
        "target_version",
        "annotation_style",
        "inclusion_level",
        "source_type",
        "source_sort_order",
        "custom_annotator",
        "custom_rule_factory",
        "format_type_mapping",
        "property_word_delimiters",
    }
)

_COPIED_FIELDS = tuple(
    f.name
    for f in fields(RunConfiguration)
    if f.name in OPTION_NAMES and f.name not in _RESOLVED_FIELDS
)


@dataclass(frozen=True)
class RunPlan:
    """
    Everything the generation engine needs for one run. `config` is `None`
    when the run was skipped.
    """

    config: RunConfiguration | None
    file_filter: FileFilter
    target_version: ResolvedTargetVersion
    warnings: tuple[str, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.config is None

    def sources(self) -> Iterator[SourceLocation]:
        """A fresh, lazy iterator of source locations (empty when skipped)."""
        if self.config is None:
            return iter(())
        return self.config.source_locations()


def plan_run(
    options: GenerationOptions,
    environment: BuildEnvironment | None = None,
    base_dir: Path | None = None,
    *,
    annotator_point: ExtensionPoint[Annotator] | None = None,
    rule_factory_point: ExtensionPoint[RuleFactory] | None = None,
) -> RunPlan:
    """
    Resolve and validate `options` into a `RunPlan`.

    Relative paths are resolved against `base_dir` (default: the working
    directory). Extension names are looked up in the module-level registries
    of `schemagen.extensions` unless other extension points are given.
    """
    base = Path(base_dir).absolute() if base_dir is not None else Path.cwd()
    env = environment if environment is not None else BuildEnvironment()
    annotator_point = annotator_point if annotator_point is not None else extensions.annotators
    rule_factory_point = (
        rule_factory_point if rule_factory_point is not None else extensions.rule_factories
    )

    target_version = resolve_target_version(
        target_version_candidates(options.target_version, env), env.runtime_version
    )

    check_static_options(options)
    # Validated even for skipped runs, so a broken setup never goes unnoticed.
    annotation_style = resolve_strategy(
        AnnotationStyle, options.annotation_style, "annotation_style"
    )
    custom_annotator = annotator_point.resolve(options.custom_annotator)

    if options.skip:
        log.info("Skipping generation: skip is set")
        return RunPlan(config=None, file_filter=AllFileFilter(), target_version=target_version)

    check_filter_compatibility(
        options.source_directory, options.source_paths, options.includes, options.excludes
    )
    locator = SourceLocator(options.source_directory, options.source_paths, base)
    locations = locator.verify()
    file_filter = _build_file_filter(options, locator, locations)

    inclusion_level = resolve_strategy(InclusionLevel, options.inclusion_level, "inclusion_level")
    source_type = resolve_strategy(SourceType, options.source_type, "source_type")
    source_sort_order = resolve_strategy(
        SourceSortOrder, options.source_sort_order, "source_sort_order"
    )
    custom_rule_factory = rule_factory_point.resolve(options.custom_rule_factory)

    copied = {name: _freeze(getattr(options, name)) for name in _COPIED_FIELDS}
    config = RunConfiguration(
        output_directory=base / options.output_directory,
        base_directory=base,
        source_directory=options.source_directory,
        source_paths=tuple(options.source_paths) if options.source_paths else None,
        target_version=target_version.value,
        annotation_style=annotation_style,
        inclusion_level=inclusion_level,
        source_type=source_type,
        source_sort_order=source_sort_order,
        custom_annotator=custom_annotator,
        custom_rule_factory=custom_rule_factory,
        format_type_mapping=MappingProxyType(dict(options.format_type_mapping)),
        property_word_delimiters=tuple(options.property_word_delimiters),
        **copied,
    )

    warnings = tuple(deprecated_options_in_use(options))
    for message in warnings:
        log.warning(message)

    return RunPlan(
        config=config,
        file_filter=file_filter,
        target_version=target_version,
        warnings=warnings,
    )


def _build_file_filter(
    options: GenerationOptions,
    locator: SourceLocator,
    locations: Sequence[SourceLocation],
) -> FileFilter:
    """
    A single local directory always gets a pattern filter (default excludes
    apply even without configured patterns). Patterns on anything else are an
    error; every other layout reads all files.
    """
    filtering = bool(options.includes or options.excludes)
    if not locator.is_single:
        return AllFileFilter()

    location = locations[0]
    if location.path is not None and location.is_directory:
        patterns = PatternSet(
            base_directory=location.path,
            includes=tuple(options.includes),
            excludes=tuple(options.excludes),
        )
        return PatternFileFilter(patterns)
    if filtering:
        raise ConfigurationError(
            "source_directory",
            options.source_directory,
            "source includes and excludes require a local source directory",
        )
    return AllFileFilter()


def _freeze(value: object) -> object:
    if isinstance(value, list):
        return tuple(value)
    return value
