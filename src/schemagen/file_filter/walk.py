"""
Directory expansion for previewing which documents a run would read.

The generation engine owns real traversal; this mirrors its ordering rules so
`schemagen --list-files` can show the effective input set.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from schemagen.file_filter.filter import FileFilter
from schemagen.strategies import SourceSortOrder


def expand_directory(
    root: Path,
    file_filter: FileFilter,
    sort_order: SourceSortOrder = SourceSortOrder.OS,
    file_extensions: Sequence[str] = (),
) -> Iterator[Path]:
    """
    Walk `root` recursively, pruning directories the filter rejects, and yield
    accepted documents in the order `sort_order` prescribes.

    With `file_extensions`, only documents ending in one of them are yielded.
    """
    extensions = tuple(ext.lower() for ext in file_extensions)
    yield from _walk(Path(root), file_filter, sort_order, extensions, set())


def _walk(
    directory: Path,
    file_filter: FileFilter,
    sort_order: SourceSortOrder,
    extensions: tuple[str, ...],
    visited: set[str],
) -> Iterator[Path]:
    # Symlinked directories can form cycles
    real = os.path.realpath(directory)
    if real in visited:
        return
    visited.add(real)

    with os.scandir(directory) as it:
        entries = list(it)
    if sort_order is not SourceSortOrder.OS:
        entries.sort(key=lambda e: e.name)

    if sort_order is SourceSortOrder.FILES_FIRST:
        entries.sort(key=lambda e: e.is_dir())
    elif sort_order is SourceSortOrder.SUBDIRS_FIRST:
        entries.sort(key=lambda e: not e.is_dir())

    for entry in entries:
        path = directory / entry.name
        if entry.is_dir():
            # Prune excluded directories (prevents descent)
            if file_filter.accept(path, is_dir=True):
                yield from _walk(path, file_filter, sort_order, extensions, visited)
        elif _has_extension(entry.name, extensions) and file_filter.accept(path):
            yield path


def _has_extension(name: str, extensions: tuple[str, ...]) -> bool:
    return not extensions or name.lower().endswith(extensions)
