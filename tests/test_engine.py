"""Tests for run planning."""

from __future__ import annotations

import logging
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from schemagen.engine import plan_run
from schemagen.errors import ConfigurationError
from schemagen.extensions import Annotator, RuleFactory, default_annotators, default_rule_factories
from schemagen.file_filter import AllFileFilter, PatternFileFilter
from schemagen.options import GenerationOptions
from schemagen.run_config import RunConfiguration
from schemagen.strategies import AnnotationStyle, InclusionLevel, SourceSortOrder, SourceType
from schemagen.target_version import COMPILER_SOURCE_PROPERTY, BuildEnvironment

_ENV = BuildEnvironment(runtime_version="3.12.4")


def _schemas(tmp_path: Path) -> Path:
    root = tmp_path / "schemas"
    (root / "internal").mkdir(parents=True)
    (root / "public").mkdir()
    (root / "internal" / "x.json").write_text("{}")
    (root / "public" / "x.json").write_text("{}")
    return root


def test_single_directory_plan(tmp_path: Path):
    _schemas(tmp_path)
    plan = plan_run(GenerationOptions(source_directory="schemas"), _ENV, tmp_path)
    assert not plan.skipped
    assert plan.config is not None
    locations = list(plan.sources())
    assert len(locations) == 1
    assert locations[0].path == tmp_path / "schemas"
    assert locations[0].is_directory
    # Default excludes apply to a single directory even without patterns
    assert isinstance(plan.file_filter, PatternFileFilter)
    assert not plan.file_filter.accept(tmp_path / "schemas" / ".git" / "x.json")


def test_defaults_resolved(tmp_path: Path):
    _schemas(tmp_path)
    plan = plan_run(GenerationOptions(source_directory="schemas"), _ENV, tmp_path)
    config = plan.config
    assert config is not None
    assert config.annotation_style is AnnotationStyle.JACKSON2
    assert config.inclusion_level is InclusionLevel.NON_NULL
    assert config.source_type is SourceType.JSONSCHEMA
    assert config.source_sort_order is SourceSortOrder.OS
    assert config.custom_annotator.is_default
    assert config.custom_rule_factory.is_default
    assert config.output_directory == tmp_path / "generated-sources" / "schemagen"
    assert config.property_word_delimiters == ("-", " ", "_")
    assert config.target_version == "3.12"
    assert plan.target_version.source == "runtime"


def test_exclude_scenario(tmp_path: Path):
    root = _schemas(tmp_path)
    options = GenerationOptions(source_directory="schemas", excludes=["**/internal/**"])
    plan = plan_run(options, _ENV, tmp_path)
    assert not plan.file_filter.accept(root / "internal" / "x.json")
    assert plan.file_filter.accept(root / "public" / "x.json")


def test_multi_location_plan_preserves_order(tmp_path: Path):
    options = GenerationOptions(source_paths=["b.json", "a.json", "b.json"])
    plan = plan_run(options, _ENV, tmp_path)
    assert [loc.raw for loc in plan.sources()] == ["b.json", "a.json", "b.json"]
    assert isinstance(plan.file_filter, AllFileFilter)
    assert plan.config is not None
    assert plan.config.source_paths == ("b.json", "a.json", "b.json")
    assert plan.config.source_directory is None


def test_sources_returns_fresh_iterators(tmp_path: Path):
    plan = plan_run(GenerationOptions(source_paths=["a.json", "b.json"]), _ENV, tmp_path)
    assert len(list(plan.sources())) == 2
    assert len(list(plan.sources())) == 2


@pytest.mark.parametrize(
    "includes, excludes", [(["*.json"], []), ([], ["**/internal/**"])]
)
def test_patterns_with_multi_location_rejected(
    tmp_path: Path, includes: list[str], excludes: list[str]
):
    options = GenerationOptions(source_paths=["a.json", "b/"], includes=includes, excludes=excludes)
    with pytest.raises(ConfigurationError, match="incompatible with source_paths"):
        plan_run(options, _ENV, tmp_path)


def test_both_source_modes_rejected(tmp_path: Path):
    options = GenerationOptions(source_directory="schemas", source_paths=["a.json"])
    with pytest.raises(ConfigurationError, match="mutually exclusive"):
        plan_run(options, _ENV, tmp_path)


def test_no_source_mode_rejected(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="must be provided"):
        plan_run(GenerationOptions(), _ENV, tmp_path)


def test_patterns_without_source_rejected(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="require source_directory"):
        plan_run(GenerationOptions(includes=["*.json"]), _ENV, tmp_path)


def test_patterns_on_single_document_rejected(tmp_path: Path):
    (tmp_path / "a.json").write_text("{}")
    options = GenerationOptions(source_directory="a.json", includes=["*.json"])
    with pytest.raises(ConfigurationError, match="require a local source directory"):
        plan_run(options, _ENV, tmp_path)


def test_patterns_on_remote_directory_rejected(tmp_path: Path):
    options = GenerationOptions(
        source_directory="https://example.com/schemas/", excludes=["internal/"]
    )
    with pytest.raises(ConfigurationError, match="require a local source directory"):
        plan_run(options, _ENV, tmp_path)


def test_single_document_uses_all_file_filter(tmp_path: Path):
    (tmp_path / "a.json").write_text("{}")
    plan = plan_run(GenerationOptions(source_directory="a.json"), _ENV, tmp_path)
    assert isinstance(plan.file_filter, AllFileFilter)
    assert [loc.raw for loc in plan.sources()] == ["a.json"]


def test_unparsable_location_rejected(tmp_path: Path):
    options = GenerationOptions(source_paths=["a.json", "gopher://host/x.json"])
    with pytest.raises(ConfigurationError) as exc:
        plan_run(options, _ENV, tmp_path)
    assert exc.value.option == "source_paths"
    assert exc.value.value == "gopher://host/x.json"


@pytest.mark.parametrize(
    "option, value",
    [
        ("annotation_style", "jackson9"),
        ("inclusion_level", "sometimes"),
        ("source_type", "xml"),
        ("source_sort_order", "random"),
    ],
)
def test_unrecognized_strategy_aborts(tmp_path: Path, option: str, value: str):
    _schemas(tmp_path)
    options = GenerationOptions(source_directory="schemas", **{option: value})  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError, match="unrecognized strategy value") as exc:
        plan_run(options, _ENV, tmp_path)
    assert exc.value.option == option


def test_strategies_resolved_case_insensitively(tmp_path: Path):
    _schemas(tmp_path)
    options = GenerationOptions(
        source_directory="schemas",
        annotation_style="Jackson2",
        inclusion_level="non_empty",
        source_type="YAML",
        source_sort_order="files_first",
    )
    config = plan_run(options, _ENV, tmp_path).config
    assert config is not None
    assert config.annotation_style is AnnotationStyle.JACKSON2
    assert config.inclusion_level is InclusionLevel.NON_EMPTY
    assert config.source_type is SourceType.YAML
    assert config.source_sort_order is SourceSortOrder.FILES_FIRST


def test_target_version_from_environment(tmp_path: Path):
    env = BuildEnvironment(
        properties={COMPILER_SOURCE_PROPERTY: "11", "compiler.release": "17"},
        runtime_version="3.12",
    )
    plan = plan_run(GenerationOptions(source_paths=["a.json"]), env, tmp_path)
    assert plan.target_version.value == "11"
    assert plan.config is not None
    assert plan.config.target_version == "11"


def test_explicit_target_version_wins(tmp_path: Path):
    env = BuildEnvironment(properties={COMPILER_SOURCE_PROPERTY: "11"})
    options = GenerationOptions(source_paths=["a.json"], target_version="21")
    assert plan_run(options, env, tmp_path).target_version.value == "21"


def test_custom_extensions(tmp_path: Path):
    class Audit(Annotator):
        pass

    class Strict(RuleFactory):
        pass

    annotator_point = default_annotators()
    annotator_point.register("audit", Audit)
    rule_point = default_rule_factories()
    rule_point.register("strict", Strict)
    options = GenerationOptions(
        source_paths=["a.json"], custom_annotator="audit", custom_rule_factory="strict"
    )
    config = plan_run(
        options,
        _ENV,
        tmp_path,
        annotator_point=annotator_point,
        rule_factory_point=rule_point,
    ).config
    assert config is not None
    assert isinstance(config.custom_annotator.instance, Audit)
    assert isinstance(config.custom_rule_factory.instance, Strict)


def test_unknown_extension_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    from schemagen import extensions

    monkeypatch.setattr(extensions, "entry_points", lambda group: [])
    options = GenerationOptions(source_paths=["a.json"], custom_rule_factory="com.example.Rules")
    with pytest.raises(ConfigurationError) as exc:
        plan_run(options, _ENV, tmp_path)
    assert exc.value.option == "custom_rule_factory"


def test_skip_returns_empty_plan(tmp_path: Path):
    plan = plan_run(GenerationOptions(skip=True), _ENV, tmp_path)
    assert plan.skipped
    assert plan.config is None
    assert list(plan.sources()) == []


def test_skip_still_validates_annotation_style(tmp_path: Path):
    with pytest.raises(ConfigurationError, match="annotation_style"):
        plan_run(GenerationOptions(skip=True, annotation_style="bogus"), _ENV, tmp_path)


def test_deprecated_option_warns_once(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    options = GenerationOptions(source_paths=["a.json"], use_commons_lang3=True)
    with caplog.at_level(logging.WARNING, logger="schemagen"):
        plan = plan_run(options, _ENV, tmp_path)
    assert plan.warnings == ("use_commons_lang3 is deprecated. Please remove it from your config.",)
    messages = [r.getMessage() for r in caplog.records if "use_commons_lang3" in r.getMessage()]
    assert len(messages) == 1


def test_no_warnings_by_default(tmp_path: Path):
    assert plan_run(GenerationOptions(source_paths=["a.json"]), _ENV, tmp_path).warnings == ()


def test_configuration_is_immutable(tmp_path: Path):
    options = GenerationOptions(
        source_paths=["a.json"],
        format_type_mapping={"uuid": "java.util.UUID"},
        to_string_excludes=["secret"],
    )
    config = plan_run(options, _ENV, tmp_path).config
    assert config is not None
    with pytest.raises(FrozenInstanceError):
        config.use_primitives = True  # type: ignore[misc]
    with pytest.raises(TypeError):
        config.format_type_mapping["date"] = "java.time.LocalDate"  # type: ignore[index]
    assert config.to_string_excludes == ("secret",)
    # Later changes to the raw options do not leak into the plan
    options.format_type_mapping["date"] = "java.time.LocalDate"
    assert dict(config.format_type_mapping) == {"uuid": "java.util.UUID"}


def test_date_patterns_are_independent(tmp_path: Path):
    options = GenerationOptions(
        source_paths=["a.json"],
        custom_date_pattern="yyyy-MM-dd",
        custom_date_time_pattern="yyyy-MM-dd'T'HH:mm:ss",
    )
    config = plan_run(options, _ENV, tmp_path).config
    assert config is not None
    assert config.custom_date_pattern == "yyyy-MM-dd"
    assert config.custom_date_time_pattern == "yyyy-MM-dd'T'HH:mm:ss"
    assert config.custom_time_pattern is None


def test_run_configuration_constructor_enforces_source_mode(tmp_path: Path):
    config = plan_run(GenerationOptions(source_paths=["a.json"]), _ENV, tmp_path).config
    assert config is not None
    values = {name: getattr(config, name) for name in config.__dataclass_fields__}
    values["source_directory"] = "schemas"
    with pytest.raises(ConfigurationError, match="mutually exclusive"):
        RunConfiguration(**values)


def test_to_dict_is_plain(tmp_path: Path):
    config = plan_run(GenerationOptions(source_paths=["a.json"]), _ENV, tmp_path).config
    assert config is not None
    data = config.to_dict()
    assert data["annotation_style"] == "JACKSON2"
    assert data["custom_annotator"] == "noop"
    assert data["source_paths"] == ["a.json"]
    assert data["output_directory"] == str(tmp_path / "generated-sources" / "schemagen")


def test_relative_base_dir_is_anchored_at_working_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    _schemas(tmp_path / "proj")
    monkeypatch.chdir(tmp_path)
    plan = plan_run(GenerationOptions(source_directory="schemas"), _ENV, base_dir=Path("proj"))
    assert plan.config is not None
    [location] = list(plan.sources())
    assert location.path == tmp_path / "proj" / "schemas"
    assert location.url == (tmp_path / "proj" / "schemas").as_uri()
    assert location.is_directory
    assert plan.config.output_directory == tmp_path / "proj" / "generated-sources" / "schemagen"
