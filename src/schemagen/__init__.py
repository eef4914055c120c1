"""
Configuration resolution and source selection for JSON Schema code generation.

`plan_run()` turns loosely specified `GenerationOptions` into a validated,
immutable `RunPlan` before any document is read.
"""

from schemagen.engine import RunPlan, plan_run
from schemagen.errors import ConfigurationError
from schemagen.options import GenerationOptions
from schemagen.run_config import RunConfiguration
from schemagen.source_locator import SourceLocation
from schemagen.target_version import BuildEnvironment

__all__ = [
    "BuildEnvironment",
    "ConfigurationError",
    "GenerationOptions",
    "RunConfiguration",
    "RunPlan",
    "SourceLocation",
    "plan_run",
]
