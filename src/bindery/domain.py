"""Domain models used throughout the container."""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Mapping, Optional, Union

__all__ = ["Binding", "Dependency", "Parameters"]

Parameters = Mapping[Union[str, int], Any]


@dataclass(frozen=True)
class Binding:
    """The way an abstract identifier is turned into an object.

    Attributes:
        concrete: A factory invoked as ``concrete(container, parameters)``.
        shared: Whether the first result is cached and reused.
    """

    concrete: Callable[..., Any]
    shared: bool = False


@dataclass(frozen=True)
class Dependency:
    """Represents a parameter of a constructor or callable that may be injected.

    Attributes:
        parameter_name: The parameter name in the signature.
        declared_type: The annotated type, after unwrapping ``Optional``, if any.
        abstract: The identifier to resolve for this parameter, or None when the
            parameter is scalar and can only come from supplied values or its default.
        kind: The ``inspect.Parameter`` kind.
        default: The declared default value, or ``inspect.Parameter.empty``.
    """

    parameter_name: str
    declared_type: Optional[Any]
    abstract: Optional[Hashable]
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    default: Any = inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def is_variadic(self) -> bool:
        return self.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        )

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY
