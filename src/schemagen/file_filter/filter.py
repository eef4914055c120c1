"""
Include/exclude predicates over candidate source paths.

Patterns use gitignore syntax (compiled with `pathspec`) and are evaluated
against the candidate's path relative to the filter's base directory. Matching
is case-insensitive.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath
from typing import Protocol

import pathspec

from schemagen.errors import ConfigurationError
from schemagen.file_filter.types import PatternSet

log = logging.getLogger(__name__)


class FileFilter(Protocol):
    """Decides whether a candidate path belongs to the input set."""

    def accept(self, path: str | PurePath, *, is_dir: bool = False) -> bool: ...


class AllFileFilter:
    """Accepts every path. Used when no pattern filter is active."""

    def accept(self, path: str | PurePath, *, is_dir: bool = False) -> bool:
        return True

    def __call__(self, path: str | PurePath, *, is_dir: bool = False) -> bool:
        return True

    def __repr__(self) -> str:
        return "AllFileFilter()"


def _compile(patterns: list[str]) -> pathspec.GitIgnoreSpec:
    return pathspec.GitIgnoreSpec.from_lines([p.lower() for p in patterns])


class PatternFileFilter:
    """
    Filters candidate paths against a `PatternSet`.

    A document is accepted iff it matches at least one include pattern (or no
    includes were configured) and matches none of the configured or default
    excludes. Excludes always win over includes. A directory is accepted unless
    it is excluded; include patterns only apply to documents.

    The base directory is canonicalized once at construction. Calls to
    `accept()` never touch the filesystem.
    """

    def __init__(self, patterns: PatternSet) -> None:
        self._patterns: PatternSet = patterns
        self._base: Path = _canonical_directory(patterns.base_directory)
        # Candidates may be spelled via the configured (non-canonical) base too.
        configured = Path(os.path.normpath(os.path.abspath(patterns.base_directory)))
        self._bases: tuple[Path, ...] = (
            (self._base,) if configured == self._base else (self._base, configured)
        )
        self._include_spec: pathspec.GitIgnoreSpec | None = (
            _compile(list(patterns.includes)) if patterns.includes else None
        )
        self._exclude_spec: pathspec.GitIgnoreSpec = _compile(patterns.effective_exclude)
        log.debug(
            "Pattern filter at %s: includes=%s excludes=%s",
            self._base,
            list(patterns.includes),
            list(patterns.excludes),
        )

    @property
    def base_directory(self) -> Path:
        """Canonical base directory that patterns are anchored at."""
        return self._base

    @property
    def patterns(self) -> PatternSet:
        return self._patterns

    def accept(self, path: str | PurePath, *, is_dir: bool = False) -> bool:
        rel = self._relative(path)
        if rel is None:
            return False
        if rel == "":
            # The base directory itself.
            return is_dir
        if is_dir:
            return not self._exclude_spec.match_file(rel + "/")
        if self._exclude_spec.match_file(rel):
            return False
        return self._include_spec is None or self._include_spec.match_file(rel)

    def __call__(self, path: str | PurePath, *, is_dir: bool = False) -> bool:
        return self.accept(path, is_dir=is_dir)

    def _relative(self, path: str | PurePath) -> str | None:
        """Lower-cased posix path relative to the base, or `None` if outside it."""
        candidate = PurePath(path)
        if not candidate.is_absolute():
            rel = PurePath(os.path.normpath(candidate))
            if rel.parts and rel.parts[0] == os.pardir:
                return None
            return "" if str(rel) == os.curdir else rel.as_posix().lower()
        normalized = PurePath(os.path.normpath(candidate))
        for base in self._bases:
            try:
                rel = normalized.relative_to(base)
            except ValueError:
                continue
            return "" if str(rel) == os.curdir else rel.as_posix().lower()
        return None

    def __repr__(self) -> str:
        return f"PatternFileFilter(base={str(self._base)!r})"


def _canonical_directory(directory: Path) -> Path:
    """Resolve `directory` to a real, readable directory or fail."""
    try:
        canonical = Path(directory).resolve(strict=True)
    except OSError as e:
        raise ConfigurationError(
            "source_directory", str(directory), f"could not create file filter: {e}"
        ) from e
    if not canonical.is_dir():
        raise ConfigurationError(
            "source_directory", str(directory), "could not create file filter: not a directory"
        )
    if not os.access(canonical, os.R_OK | os.X_OK):
        raise ConfigurationError(
            "source_directory", str(directory), "could not create file filter: not readable"
        )
    return canonical
