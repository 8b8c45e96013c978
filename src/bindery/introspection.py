"""Reflection over constructors and callables.

The container never asks callers to describe dependencies: it reads them from
signatures and type hints at resolution time. A parameter is injectable when
its annotation names a class (``Optional[T]`` and ``T | None`` are unwrapped),
or when it is annotated with ``Annotated[T, "qualifier"]``, in which case the
qualifier is the identifier that gets resolved.
"""

import inspect
import logging
import types
from typing import (
    Annotated,
    Any,
    Callable,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from bindery.domain import Dependency
from bindery.naming import dotted_name

__all__ = [
    "dependencies_of",
    "has_constructor",
    "is_instantiable",
    "owner_name",
]

logger = logging.getLogger(__name__)

_NONE_TYPE = type(None)
_UNION_TYPES = tuple(
    t for t in (Union, getattr(types, "UnionType", None)) if t is not None
)


def is_instantiable(target: Any) -> bool:
    """Check whether ``target`` is a class that can be constructed directly.

    Interfaces in the Python sense (abstract base classes with abstract methods
    and ``typing.Protocol`` classes) are not instantiable.
    """
    return (
        inspect.isclass(target)
        and not inspect.isabstract(target)
        and not getattr(target, "_is_protocol", False)
    )


def has_constructor(cls: type) -> bool:
    return cls.__init__ is not object.__init__ or cls.__new__ is not object.__new__


def owner_name(target: Any) -> str:
    if inspect.isclass(target):
        return dotted_name(target)
    return getattr(target, "__qualname__", None) or repr(target)


def dependencies_of(target: Callable) -> list[Dependency]:
    """Extract the parameters of a class constructor or a callable, in declaration order.

    Args:
        target: A class (its constructor is inspected) or any callable.

    Returns:
        One Dependency per parameter. Signatures that cannot be inspected, such
        as those of some builtin types, produce an empty list.

    Example:
        >>> class Mailer:
        ...     def __init__(self, transport: Transport, sender: str = "noreply"): ...
        >>> dependencies_of(Mailer)
        >>> # [Dependency("transport", Transport, Transport, ...),
        >>> #  Dependency("sender", str, None, ..., default="noreply")]
    """
    function = _annotated_function(target)
    try:
        sig = inspect.signature(function if inspect.isclass(target) else target)
    except (TypeError, ValueError):
        logger.debug("No inspectable signature for %r", target)
        return []

    if inspect.isclass(target):
        sig = _without_receiver(sig)

    hints = _type_hints(function, sig)
    return [
        _make_dependency(param, hints.get(name))
        for name, param in sig.parameters.items()
    ]


def _annotated_function(target: Any) -> Any:
    if inspect.isclass(target):
        if target.__init__ is not object.__init__:
            return target.__init__
        return target.__new__
    if inspect.isroutine(target):
        return target
    # callable instances carry their hints on __call__
    return getattr(type(target), "__call__", target)


def _without_receiver(sig: inspect.Signature) -> inspect.Signature:
    # __init__ and __new__ are reflected unbound, so self or cls comes first
    params = list(sig.parameters.values())
    if params and params[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        params = params[1:]
    return sig.replace(parameters=params)


def _type_hints(function: Any, sig: inspect.Signature) -> dict[str, Any]:
    try:
        return get_type_hints(function, include_extras=True)
    except (NameError, TypeError):
        logger.debug(
            "Evaluating annotations of %r one by one", function, exc_info=True
        )

    globalns = getattr(inspect.unwrap(function), "__globals__", {})
    return {
        name: _evaluate(param.annotation, globalns)
        for name, param in sig.parameters.items()
        if param.annotation is not inspect.Parameter.empty
    }


def _evaluate(annotation: Any, globalns: dict[str, Any]) -> Any:
    """Evaluate a string annotation, leaving it as a string when it names
    something unavailable at runtime, such as a ``TYPE_CHECKING`` import."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns)
    except (NameError, AttributeError, SyntaxError, TypeError):
        return annotation


def _make_dependency(param: inspect.Parameter, annotation: Any) -> Dependency:
    if annotation is None:
        return Dependency(param.name, None, None, param.kind, param.default)

    annotation = _unwrap_optional(annotation)

    if get_origin(annotation) is Annotated:
        base_type, *metadata = get_args(annotation)
        base_type = _unwrap_optional(base_type)
        qualifier = next((m for m in metadata if isinstance(m, str)), None)
        if qualifier:
            return Dependency(param.name, base_type, qualifier, param.kind, param.default)
        annotation = base_type

    abstract = annotation if _names_a_class(annotation) else None
    return Dependency(param.name, annotation, abstract, param.kind, param.default)


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in _UNION_TYPES:
        args = [a for a in get_args(annotation) if a is not _NONE_TYPE]
        if len(args) == 1:
            return args[0]
    return annotation


def _names_a_class(annotation: Optional[Any]) -> bool:
    # builtins (int, str, list, ...) are scalars as far as injection goes
    return (
        inspect.isclass(annotation)
        and annotation is not Any
        and annotation.__module__ != "builtins"
    )
