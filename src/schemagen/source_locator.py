"""
Parsing of configured source location strings and the lazy sequence of
locations a run reads from.

A location is either a single document or a directory. Directories are not
expanded here; the generation engine traverses them, constrained by the
active file filter.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

from schemagen.errors import ConfigurationError
from schemagen.validator import check_source_mode

# A scheme needs two or more characters so that `C:\schemas` stays a path.
_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]+):")

SUPPORTED_SCHEMES: frozenset[str] = frozenset(
    {"file", "http", "https", "ftp", "jar", "classpath", "resource", "java"}
)
_NETWORK_SCHEMES = frozenset({"http", "https", "ftp"})


class LocationKind(str, Enum):
    DOCUMENT = "document"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class SourceLocation:
    """
    An addressable input. `url` is always set; `path` is set only for local
    (`file:`) locations.
    """

    raw: str
    url: str
    kind: LocationKind
    path: Path | None = None

    @property
    def is_directory(self) -> bool:
        return self.kind is LocationKind.DIRECTORY

    @property
    def is_local(self) -> bool:
        return self.path is not None

    def __str__(self) -> str:
        return self.url


def parse_location(
    raw: str, option: str = "source_directory", base_dir: Path | None = None
) -> SourceLocation:
    """
    Parse one configured location string.

    URL-shaped strings must use a supported scheme (and a host, for network
    schemes). Anything else is a filesystem path, made absolute against
    `base_dir` (default: the working directory). Fails with
    `ConfigurationError` naming the offending string.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigurationError(option, raw, "source location must not be blank")
    if "\x00" in raw:
        raise ConfigurationError(option, raw, "source location contains a NUL character")

    value = raw.strip()
    match = _SCHEME_RE.match(value)
    if match:
        return _parse_url(value, match.group(1).lower(), option)
    return _parse_path(value, base_dir)


def _parse_url(value: str, scheme: str, option: str) -> SourceLocation:
    if scheme not in SUPPORTED_SCHEMES:
        allowed = ", ".join(sorted(SUPPORTED_SCHEMES))
        raise ConfigurationError(
            option, value, f"unsupported URL scheme {scheme!r} (supported: {allowed})"
        )
    try:
        parts = urlsplit(value)
    except ValueError as e:
        raise ConfigurationError(option, value, f"malformed URL: {e}") from e

    if scheme in _NETWORK_SCHEMES and not parts.hostname:
        raise ConfigurationError(option, value, "URL has no host")

    if scheme == "file":
        if parts.netloc not in ("", "localhost"):
            raise ConfigurationError(option, value, "file URLs must not name a remote host")
        path = Path(url2pathname(parts.path))
        kind = _kind_for(value, path)
        return SourceLocation(raw=value, url=value, kind=kind, path=path)

    kind = LocationKind.DIRECTORY if value.endswith("/") else LocationKind.DOCUMENT
    return SourceLocation(raw=value, url=value, kind=kind)


def _parse_path(value: str, base_dir: Path | None) -> SourceLocation:
    base = Path(base_dir).absolute() if base_dir is not None else Path.cwd()
    path = Path(os.path.normpath(base / value))
    return SourceLocation(raw=value, url=path.as_uri(), kind=_kind_for(value, path), path=path)


def _kind_for(value: str, path: Path) -> LocationKind:
    if value.endswith(("/", os.sep)) or path.is_dir():
        return LocationKind.DIRECTORY
    return LocationKind.DOCUMENT


class SourceLocator:
    """
    Produces the ordered sequence of source locations for one run.

    Exactly one of `source` (single-location mode) or `source_paths`
    (multi-location mode, list order and duplicates preserved) must be set.
    """

    def __init__(
        self,
        source: str | None = None,
        source_paths: Sequence[str] | None = None,
        base_dir: Path | None = None,
    ) -> None:
        check_source_mode(source, source_paths)
        self._source: str | None = source
        self._source_paths: tuple[str, ...] = tuple(source_paths or ())
        self._base_dir: Path | None = base_dir

    @property
    def is_single(self) -> bool:
        return self._source is not None

    def locate(self) -> Iterator[SourceLocation]:
        """Lazily parse each configured string, in order. Not restartable."""
        if self._source is not None:
            yield parse_location(self._source, "source_directory", self._base_dir)
            return
        for raw in self._source_paths:
            yield parse_location(raw, "source_paths", self._base_dir)

    def verify(self) -> tuple[SourceLocation, ...]:
        """Parse every configured string up front, failing on the first bad one."""
        return tuple(self.locate())
