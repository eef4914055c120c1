"""
Extension points: pluggable implementations selected by a configured name.

Each extension point is a registry mapping identifiers to factories. Factories
come from explicit `register()` calls or from installed packages advertising
an entry point in the point's group, for example::

    [project.entry-points."schemagen.annotators"]
    lombok = "schemagen_lombok:LombokAnnotator"

A blank name, or the name of the built-in default, selects the default. Any
other name that cannot be found or instantiated is a `ConfigurationError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any, Final, Generic, TypeVar

from schemagen.errors import ConfigurationError

log = logging.getLogger(__name__)

ANNOTATOR_GROUP: Final[str] = "schemagen.annotators"
RULE_FACTORY_GROUP: Final[str] = "schemagen.rule_factories"


class Annotator:
    """Adds annotations to generated types and properties. The base adds none."""

    def annotate_type(self, type_name: str, schema: Any) -> list[str]:
        return []

    def annotate_property(self, property_name: str, schema: Any) -> list[str]:
        return []


class NoopAnnotator(Annotator):
    """The default annotator."""


class RuleFactory:
    """
    Supplies the rules the generation engine applies to each schema construct.
    Subclasses override individual rules; the base keeps the built-in set.
    """

    def rule_names(self) -> tuple[str, ...]:
        return ()


T = TypeVar("T")


@dataclass(frozen=True)
class ExtensionBinding(Generic[T]):
    """A resolved extension: which identifier was asked for, where it came from."""

    identifier: str
    source: str  # "default", "registered", or "module:attr" of an entry point
    instance: T

    @property
    def is_default(self) -> bool:
        return self.source == "default"


def _qualified_name(obj: Any) -> str | None:
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None)
    if module is None or qualname is None:
        return None
    return f"{module}.{qualname}"


class ExtensionPoint(Generic[T]):
    """
    Registry for one extension point.

    Typical lifecycle:
      annotators.register("audit", AuditAnnotator)
      binding = annotators.resolve(options.custom_annotator)
    """

    def __init__(
        self,
        option: str,
        default_identifier: str,
        default_factory: Callable[[], T],
        entry_point_group: str,
    ) -> None:
        self.option: str = option
        self.default_identifier: str = default_identifier
        self._default_factory: Callable[[], T] = default_factory
        self._group: str = entry_point_group
        self._factories: dict[str, Callable[[], T]] = {}
        default_names = {default_identifier}
        qualified = _qualified_name(default_factory)
        if qualified is not None:
            default_names.add(qualified)
        self._default_names: frozenset[str] = frozenset(default_names)

    def register(self, identifier: str, factory: Callable[[], T]) -> None:
        """Register a factory (a class or any zero-argument callable)."""
        if identifier in self._default_names or identifier in self._factories:
            raise ValueError(f"{self.option}: {identifier!r} is already registered")
        self._factories[identifier] = factory

    def registered(self) -> tuple[str, ...]:
        """Identifiers registered explicitly (entry points excluded)."""
        return (self.default_identifier, *sorted(self._factories))

    def resolve(self, name: str | None) -> ExtensionBinding[T]:
        if name is None or not name.strip():
            return self._bind(self.default_identifier, "default", self._default_factory)
        identifier = name.strip()
        if identifier in self._default_names:
            return self._bind(identifier, "default", self._default_factory)
        factory = self._factories.get(identifier)
        if factory is not None:
            return self._bind(identifier, "registered", factory)
        source, factory = self._load_entry_point(identifier)
        return self._bind(identifier, source, factory)

    def _load_entry_point(self, identifier: str) -> tuple[str, Callable[[], T]]:
        matches = [ep for ep in entry_points(group=self._group) if ep.name == identifier]
        if not matches:
            known = ", ".join(self.registered())
            raise ConfigurationError(
                self.option,
                identifier,
                f"no implementation registered under this name (known: {known}; "
                f"or install a package providing entry point group {self._group!r})",
            )
        ep = matches[0]
        source = f"{ep.module}:{ep.attr}"
        try:
            loaded = ep.load()
        except Exception as e:
            raise ConfigurationError(
                self.option, identifier, f"could not load {source}: {e!r}"
            ) from e
        # Accept either a factory/class or a ready-made instance.
        if callable(loaded):
            return source, loaded
        return source, lambda: loaded

    def _bind(self, identifier: str, source: str, factory: Callable[[], T]) -> ExtensionBinding[T]:
        try:
            instance = factory()
        except Exception as e:
            raise ConfigurationError(
                self.option, identifier, f"could not instantiate implementation: {e!r}"
            ) from e
        log.debug("Resolved %s %r from %s", self.option, identifier, source)
        return ExtensionBinding(identifier=identifier, source=source, instance=instance)


def default_annotators() -> ExtensionPoint[Annotator]:
    return ExtensionPoint("custom_annotator", "noop", NoopAnnotator, ANNOTATOR_GROUP)


def default_rule_factories() -> ExtensionPoint[RuleFactory]:
    return ExtensionPoint("custom_rule_factory", "default", RuleFactory, RULE_FACTORY_GROUP)


annotators: ExtensionPoint[Annotator] = default_annotators()
rule_factories: ExtensionPoint[RuleFactory] = default_rule_factories()
