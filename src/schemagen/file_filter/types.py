"""Pattern configuration for source filtering."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from schemagen.file_filter.defaults import DEFAULT_EXCLUDES


@dataclass(frozen=True)
class PatternSet:
    """
    Ordered include and exclude patterns anchored at `base_directory`.

    An empty `includes` means "include everything". `DEFAULT_EXCLUDES` are
    always appended to the configured excludes.
    """

    base_directory: Path
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()

    @property
    def is_filtering(self) -> bool:
        """True when any include or exclude pattern was configured."""
        return bool(self.includes or self.excludes)

    @property
    def effective_exclude(self) -> list[str]:
        """Configured excludes followed by the defaults."""
        return list(self.excludes) + list(DEFAULT_EXCLUDES)
