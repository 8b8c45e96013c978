"""Helpers that give every concrete the uniform ``factory(container, parameters)`` shape."""

import inspect
from typing import TYPE_CHECKING, Any, Callable, Hashable, Optional

from bindery.domain import Parameters

if TYPE_CHECKING:
    from bindery.container import Container

__all__ = ["Factory", "is_factory", "class_factory", "value_factory", "share"]

Factory = Callable[["Container", Parameters], Any]

_UNSET = object()


def is_factory(obj: Any) -> bool:
    """Callables are factories, except classes, which are built instead."""
    return callable(obj) and not inspect.isclass(obj)


def class_factory(abstract: Hashable, concrete: Hashable) -> Factory:
    """Wrap a class name in a factory.

    When ``concrete`` is ``abstract`` itself the factory builds it directly;
    otherwise it resolves ``concrete`` through the container, following the
    binding chain registered for it.
    """

    def factory(container: "Container", parameters: Optional[Parameters] = None) -> Any:
        if concrete == abstract:
            return container.build(concrete, parameters)
        return container.make(concrete, parameters)

    factory.__qualname__ = f"class_factory[{abstract!s} -> {concrete!s}]"
    return factory


def value_factory(value: Any) -> Factory:
    def factory(container: "Container", parameters: Optional[Parameters] = None) -> Any:
        return value

    return factory


def share(factory: Factory) -> Factory:
    """Memoise a factory independently of any container's instance cache.

    The first invocation of the returned factory calls ``factory`` and keeps its
    result, ``None`` included; later invocations return that result without
    calling ``factory`` again, whichever container they are given.

    Example:
        >>> connection = share(lambda c, p: Connection())
        >>> container.bind("db.read", connection)
        >>> container.bind("db.write", connection)
        >>> container.make("db.read") is container.make("db.write")   # True
    """
    result = _UNSET

    def shared(container: "Container", parameters: Optional[Parameters] = None) -> Any:
        nonlocal result
        if result is _UNSET:
            result = factory(container, parameters)
        return result

    return shared
