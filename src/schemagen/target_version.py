"""
Resolution of the language version generated sources should target.

Candidates are consulted in priority order and evaluated lazily; the first one
that yields a non-blank value wins. The running interpreter's own version is
the final fallback, so resolution never fails.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field

log = logging.getLogger(__name__)

COMPILER_SOURCE_PROPERTY = "compiler.source"
COMPILER_RELEASE_PROPERTY = "compiler.release"

RUNTIME_CANDIDATE = "runtime"

_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?")


def current_runtime_version() -> str:
    return f"{sys.version_info.major}.{sys.version_info.minor}"


def normalize_runtime_version(version: str) -> str:
    """
    Reduce a full runtime version string to `major.minor` (or `major` when
    there is no minor part): `"3.12.1"` -> `"3.12"`, `"1.8.0_292"` -> `"1.8"`.
    """
    match = _VERSION_RE.match(version.strip())
    if match is None:
        return version.strip()
    major, minor = match.groups()
    return f"{major}.{minor}" if minor is not None else major


@dataclass(frozen=True)
class BuildEnvironment:
    """
    Facts about the host build, consulted only for target-version resolution.

    `compiler` holds the compiler step's own settings (`source`, `release`).
    """

    properties: Mapping[str, str] = field(default_factory=dict)
    compiler: Mapping[str, str] = field(default_factory=dict)
    runtime_version: str = field(default_factory=current_runtime_version)


@dataclass(frozen=True)
class TargetVersionCandidate:
    name: str
    supplier: Callable[[], str | None]


@dataclass(frozen=True)
class ResolvedTargetVersion:
    source: str
    value: str


def target_version_candidates(
    explicit: str | None, environment: BuildEnvironment
) -> list[TargetVersionCandidate]:
    """The prioritized candidates, highest priority first (runtime excluded)."""
    return [
        TargetVersionCandidate("target_version", lambda: explicit),
        TargetVersionCandidate(
            COMPILER_SOURCE_PROPERTY,
            lambda: environment.properties.get(COMPILER_SOURCE_PROPERTY),
        ),
        TargetVersionCandidate(
            COMPILER_RELEASE_PROPERTY,
            lambda: environment.properties.get(COMPILER_RELEASE_PROPERTY),
        ),
        TargetVersionCandidate("compiler source", lambda: environment.compiler.get("source")),
        TargetVersionCandidate("compiler release", lambda: environment.compiler.get("release")),
    ]


def resolve_target_version(
    candidates: Iterable[TargetVersionCandidate], runtime_version: str | None = None
) -> ResolvedTargetVersion:
    """
    Return the first candidate with a present value. Later suppliers are not
    called once a value is found. Falls back to `runtime_version` (default:
    the running interpreter).
    """
    for candidate in candidates:
        value = candidate.supplier()
        if value is not None and str(value).strip():
            return _resolved(candidate.name, str(value).strip())
    runtime = runtime_version if runtime_version is not None else current_runtime_version()
    return _resolved(RUNTIME_CANDIDATE, normalize_runtime_version(runtime))


def _resolved(source: str, value: str) -> ResolvedTargetVersion:
    log.debug("Using %s to set target version for generated sources (%s)", source, value)
    return ResolvedTargetVersion(source=source, value=value)
