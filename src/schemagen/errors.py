"""Error type raised for every fatal configuration problem."""

from __future__ import annotations

from typing import Any


class ConfigurationError(ValueError):
    """
    A configured value violates a structural invariant.

    Always raised during resolution, before any document is read or any output
    is written. `option` names the offending option and `value` carries the raw
    value that was rejected.
    """

    def __init__(self, option: str, value: Any, reason: str) -> None:
        self.option: str = option
        self.value: Any = value
        self.reason: str = reason
        super().__init__(f"Invalid {option} {value!r}: {reason}")
