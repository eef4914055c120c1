#!/usr/bin/env python3
"""
schemagen: Plan code generation runs from JSON Schema documents

Common usage:
  schemagen --source-directory schemas/ --target-package com.example.model
  schemagen --list-files --source-directory schemas/ --exclude '**/internal/**'
  schemagen --list-sources schemas/a.json schemas/b/
  schemagen --show-config --source-directory schemas/

Options not exposed as flags can be set in `schemagen.toml`, `.schemagen.toml`,
or `[tool.schemagen]` in `pyproject.toml`. Explicit flags win over config files.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from schemagen.config import build_environment, find_config_file, load_config, merge_cli_with_config
from schemagen.engine import RunPlan, plan_run
from schemagen.errors import ConfigurationError
from schemagen.file_filter import expand_directory
from schemagen.options import GenerationOptions
from schemagen.run_config import RunConfiguration

log = logging.getLogger(__name__)


@dataclass
class CliRequest:
    """Command-line input beyond the generation options themselves."""

    options: GenerationOptions
    explicit_flags: set[str]
    properties: dict[str, str] = field(default_factory=dict)
    config_file: str | None = None
    list_sources: bool = False
    list_files: bool = False
    show_config: bool = False
    version: bool = False
    verbose: bool = False


# argparse dest -> GenerationOptions field, for flags that map straight through
_OPTION_FLAGS: dict[str, str] = {
    "source_directory": "source_directory",
    "output_directory": "output_directory",
    "target_package": "target_package",
    "annotation_style": "annotation_style",
    "inclusion_level": "inclusion_level",
    "source_type": "source_type",
    "source_sort_order": "source_sort_order",
    "custom_annotator": "custom_annotator",
    "custom_rule_factory": "custom_rule_factory",
    "target_version": "target_version",
    "output_encoding": "output_encoding",
    "include": "includes",
    "exclude": "excludes",
    "file_extension": "file_extensions",
    "skip": "skip",
    "generate_builders": "generate_builders",
    "use_primitives": "use_primitives",
    "include_type_info": "include_type_info",
    "include_jsr303_annotations": "include_jsr303_annotations",
    "use_commons_lang3": "use_commons_lang3",
}


def _parse_key_values(entries: list[str], option: str) -> dict[str, str]:
    """Parse repeated `KEY=VALUE` arguments."""
    result: dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(option, entry, "expected KEY=VALUE")
        result[key.strip()] = value.strip()
    return result


def _build_parser() -> argparse.ArgumentParser:
    # Use the module's docstring as the description
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="schemagen",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        argument_default=argparse.SUPPRESS,
    )
    parser.add_argument(
        "source_paths",
        nargs="*",
        metavar="SOURCE",
        default=[],
        help="Source documents or directories (multi-location mode; "
        "mutually exclusive with --source-directory)",
    )
    parser.add_argument(
        "-s",
        "--source-directory",
        metavar="LOCATION",
        help="Single source document or directory (path or URL)",
    )
    parser.add_argument(
        "-o",
        "--output-directory",
        metavar="DIR",
        help="Directory for generated sources (default: generated-sources/schemagen)",
    )
    parser.add_argument("-p", "--target-package", metavar="PACKAGE", help="Package for generated types")
    parser.add_argument(
        "--annotation-style", metavar="STYLE", help="Serialization annotation style (default: jackson2)"
    )
    parser.add_argument(
        "--inclusion-level", metavar="LEVEL", help="Property inclusion level (default: NON_NULL)"
    )
    parser.add_argument(
        "--source-type", metavar="TYPE", help="How sources are interpreted (default: jsonschema)"
    )
    parser.add_argument(
        "--source-sort-order", metavar="ORDER", help="Directory processing order (default: OS)"
    )
    parser.add_argument("--custom-annotator", metavar="NAME", help="Registered annotator name")
    parser.add_argument(
        "--custom-rule-factory", metavar="NAME", help="Registered rule factory name"
    )
    parser.add_argument(
        "--target-version",
        metavar="VERSION",
        help="Target language version (default: detected from build properties)",
    )
    parser.add_argument("--output-encoding", metavar="ENCODING", help="Encoding of generated files")
    parser.add_argument(
        "--include",
        action="append",
        metavar="PATTERN",
        help="Include pattern relative to the source directory (e.g. '**/*.json'). Can be repeated",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="Exclude pattern relative to the source directory. Can be repeated",
    )
    parser.add_argument(
        "--file-extension",
        action="append",
        metavar="EXT",
        help="Only read documents with this extension. Can be repeated",
    )
    parser.add_argument(
        "--format-type-mapping",
        action="append",
        metavar="FORMAT=TYPE",
        help="Map a schema format to a target type. Can be repeated",
    )
    parser.add_argument(
        "-D",
        dest="properties",
        action="append",
        metavar="KEY=VALUE",
        help="Build property, e.g. -D compiler.source=17. Can be repeated",
    )
    parser.add_argument("--skip", action="store_true", help="Validate configuration but plan no work")
    parser.add_argument("--generate-builders", action="store_true", help="Generate builder methods")
    parser.add_argument("--use-primitives", action="store_true", help="Use primitive types")
    parser.add_argument(
        "--include-type-info", action="store_true", help="Include type info annotations"
    )
    parser.add_argument(
        "--include-jsr303-annotations", action="store_true", help="Include validation annotations"
    )
    parser.add_argument(
        "--use-commons-lang3", action="store_true", help="Deprecated; has no effect"
    )
    parser.add_argument(
        "--config", dest="config_file", metavar="FILE", help="Config file (default: discovered)"
    )
    parser.add_argument(
        "--list-sources", action="store_true", help="Print resolved source locations and exit"
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        help="Print the documents a run would read from the source directory and exit",
    )
    parser.add_argument(
        "--show-config", action="store_true", help="Print the resolved configuration as JSON"
    )
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _parse_args(args: list[str] | None = None) -> CliRequest:
    """
    Parse command-line arguments.

    Every flag defaults to "absent", so only options the user actually passed
    end up in `explicit_flags` (for config merge precedence).
    """
    opts = vars(_build_parser().parse_args(args))

    options = GenerationOptions()
    explicit_flags: set[str] = set()
    for dest, field_name in _OPTION_FLAGS.items():
        if dest in opts:
            setattr(options, field_name, opts[dest])
            explicit_flags.add(field_name)
    if opts.get("source_paths"):
        options.source_paths = list(opts["source_paths"])
        explicit_flags.add("source_paths")
    if "format_type_mapping" in opts:
        options.format_type_mapping = _parse_key_values(
            opts["format_type_mapping"], "format_type_mapping"
        )
        explicit_flags.add("format_type_mapping")

    return CliRequest(
        options=options,
        explicit_flags=explicit_flags,
        properties=_parse_key_values(opts.get("properties", []), "properties"),
        config_file=opts.get("config_file"),
        list_sources=opts.get("list_sources", False),
        list_files=opts.get("list_files", False),
        show_config=opts.get("show_config", False),
        version=opts.get("version", False),
        verbose=opts.get("verbose", False),
    )


def _print_files(plan: RunPlan, config: RunConfiguration) -> None:
    for location in config.source_locations():
        if location.path is not None and location.is_directory:
            for path in expand_directory(
                location.path,
                plan.file_filter,
                config.source_sort_order,
                config.file_extensions,
            ):
                print(path)
        else:
            print(location.path if location.path is not None else location.url)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the schemagen CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for configuration errors, 2 for other errors)
    """
    try:
        request = _parse_args(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if request.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    # Display version information if requested
    if request.version:
        try:
            version = importlib.metadata.version("schemagen")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    try:
        # Load and merge config file settings
        config_path = (
            Path(request.config_file) if request.config_file else find_config_file(Path.cwd())
        )
        config = None
        if config_path:
            log.debug("Using config file %s", config_path)
            config = load_config(config_path)
            merge_cli_with_config(request.options, config, request.explicit_flags)

        environment = build_environment(config, request.properties)
        plan = plan_run(request.options, environment)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    run_config = plan.config
    if run_config is None:
        print("Skipping generation (skip is set)")
        return 0

    if request.show_config:
        print(json.dumps(run_config.to_dict(), indent=2, sort_keys=True))
        return 0

    if request.list_sources:
        for location in plan.sources():
            print(location.url)
        return 0

    if request.list_files:
        try:
            _print_files(plan, run_config)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        return 0

    count = sum(1 for _ in plan.sources())
    print(
        f"Planned {count} source location(s) -> {run_config.output_directory} "
        f"(target version {plan.target_version.value} from {plan.target_version.source})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
