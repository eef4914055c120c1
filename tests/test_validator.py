"""Tests for static and cross-option configuration checks."""

from __future__ import annotations

import pytest

from schemagen.errors import ConfigurationError
from schemagen.options import GenerationOptions
from schemagen.validator import (
    check_filter_compatibility,
    check_source_mode,
    check_static_options,
)


def test_error_message_names_option_and_value():
    err = ConfigurationError("annotation_style", "jackson9", "unrecognized strategy value")
    assert str(err) == "Invalid annotation_style 'jackson9': unrecognized strategy value"
    assert isinstance(err, ValueError)


def test_source_mode_single_ok():
    check_source_mode("schemas", None)
    check_source_mode("schemas", [])


def test_source_mode_multi_ok():
    check_source_mode(None, ["a.json"])


def test_source_mode_both_rejected():
    with pytest.raises(ConfigurationError, match="mutually exclusive"):
        check_source_mode("schemas", ["a.json"])


def test_source_mode_neither_rejected():
    with pytest.raises(ConfigurationError, match="must be provided"):
        check_source_mode(None, None)


def test_filter_without_patterns_always_ok():
    check_filter_compatibility(None, ["a.json", "b/"], [], [])


@pytest.mark.parametrize(
    "includes, excludes",
    [(["*.json"], []), ([], ["**/internal/**"]), (["*.json"], ["x/"])],
)
def test_patterns_with_multi_location_rejected(includes: list[str], excludes: list[str]):
    with pytest.raises(ConfigurationError, match="incompatible with source_paths"):
        check_filter_compatibility(None, ["a.json", "b/"], includes, excludes)


def test_patterns_without_source_rejected():
    with pytest.raises(ConfigurationError, match="require source_directory") as exc:
        check_filter_compatibility(None, None, ["*.json"], [])
    assert exc.value.option == "includes"


def test_patterns_with_single_directory_ok():
    check_filter_compatibility("schemas", None, ["*.json"], ["internal/"])


def test_static_defaults_pass():
    check_static_options(GenerationOptions())


@pytest.mark.parametrize(
    "overrides, option",
    [
        ({"output_directory": ""}, "output_directory"),
        ({"output_directory": "   "}, "output_directory"),
        ({"output_encoding": "no-such-codec"}, "output_encoding"),
        ({"target_package": "com.example."}, "target_package"),
        ({"target_package": "1com.example"}, "target_package"),
        ({"format_type_mapping": {"uuid": ""}}, "format_type_mapping"),
        ({"format_type_mapping": {" ": "java.util.UUID"}}, "format_type_mapping"),
    ],
)
def test_static_checks_reject(overrides: dict[str, object], option: str):
    options = GenerationOptions(**overrides)  # type: ignore[arg-type]
    with pytest.raises(ConfigurationError) as exc:
        check_static_options(options)
    assert exc.value.option == option


@pytest.mark.parametrize("package", ["", "com.example.model", "model", "_private.$pkg"])
def test_target_package_accepts_valid_names(package: str):
    check_static_options(GenerationOptions(target_package=package))
