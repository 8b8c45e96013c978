"""Storage for bindings, shared instances and resolution markers."""

import logging
from types import MappingProxyType
from typing import Any, Hashable, Mapping, Optional

from bindery.domain import Binding

__all__ = ["BindingRegistry"]

logger = logging.getLogger(__name__)


class BindingRegistry:
    """Registry of bindings, shared instances and resolved identifiers.

    Keys are expected to be normalised already; the registry never rewrites
    them. An identifier with a cached instance counts as both bound and
    resolved, whatever the other maps say.
    """

    def __init__(self):
        self._bindings: dict[Hashable, Binding] = {}
        self._instances: dict[Hashable, Any] = {}
        self._resolved: set[Hashable] = set()
        self._types: dict[str, type] = {}

    def add_binding(self, abstract: Hashable, binding: Binding):
        """Register ``binding`` under ``abstract``, replacing any previous one.

        Args:
            abstract: The normalised identifier.
            binding: The factory and shared flag to store.
        """
        self._bindings[abstract] = binding

    def binding(self, abstract: Hashable) -> Optional[Binding]:
        return self._bindings.get(abstract)

    def has_binding(self, abstract: Hashable) -> bool:
        return abstract in self._bindings

    def add_instance(self, abstract: Hashable, instance: Any):
        self._instances[abstract] = instance

    def instance(self, abstract: Hashable) -> Any:
        return self._instances[abstract]

    def has_instance(self, abstract: Hashable) -> bool:
        return abstract in self._instances

    def forget_instance(self, abstract: Hashable):
        self._instances.pop(abstract, None)

    def forget_instances(self):
        self._instances.clear()

    def mark_resolved(self, abstract: Hashable):
        self._resolved.add(abstract)

    def is_resolved(self, abstract: Hashable) -> bool:
        return abstract in self._resolved or abstract in self._instances

    def is_bound(self, abstract: Hashable) -> bool:
        return abstract in self._bindings or abstract in self._instances

    def remove(self, abstract: Hashable):
        """Drop every trace of ``abstract``: binding, instance and resolved marker."""
        self._bindings.pop(abstract, None)
        self._instances.pop(abstract, None)
        self._resolved.discard(abstract)

    def flush(self):
        logger.debug(
            "Flushing %d bindings and %d instances",
            len(self._bindings),
            len(self._instances),
        )
        self._resolved.clear()
        self._bindings.clear()
        self._instances.clear()

    def snapshot(self) -> Mapping[Hashable, Binding]:
        """Return a read-only copy of the bindings as they stand now."""
        return MappingProxyType(dict(self._bindings))

    def remember_type(self, name: str, cls: type):
        """Index a class under its dotted name, so classes that cannot be
        imported by path (such as those defined inside functions) can still be
        located from their normalised identifier."""
        self._types[name] = cls

    def known_type(self, name: str) -> Optional[type]:
        return self._types.get(name)
