"""
Include/exclude filtering of source documents under a single base directory.

Usage::

    from schemagen.file_filter import PatternFileFilter, PatternSet

    patterns = PatternSet(
        base_directory=Path("schemas"),
        includes=("**/*.json",),
        excludes=("**/internal/**",),
    )
    file_filter = PatternFileFilter(patterns)
    file_filter.accept(Path("schemas/public/address.json").absolute())
"""

from schemagen.file_filter.defaults import DEFAULT_EXCLUDES
from schemagen.file_filter.filter import AllFileFilter, FileFilter, PatternFileFilter
from schemagen.file_filter.types import PatternSet
from schemagen.file_filter.walk import expand_directory

__all__ = [
    "DEFAULT_EXCLUDES",
    "AllFileFilter",
    "FileFilter",
    "PatternFileFilter",
    "PatternSet",
    "expand_directory",
]
