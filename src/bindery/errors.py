__all__ = [
    "ContainerError",
    "NotInstantiableError",
    "TargetNotFoundError",
    "DependencyError",
    "CircularDependencyError",
    "InvalidCallTargetError",
]


class ContainerError(Exception):
    """Base class for every failure raised while binding or resolving."""

    pass


class NotInstantiableError(ContainerError):
    """Raised when a build target is an interface, an abstract class or not a class at all."""

    pass


class TargetNotFoundError(ContainerError):
    """Raised when a dotted path names nothing importable."""

    pass


class DependencyError(ContainerError):
    """Raised when a constructor or callable parameter cannot be satisfied."""

    pass


class CircularDependencyError(DependencyError):
    """Raised when a target re-enters its own resolution chain."""

    pass


class InvalidCallTargetError(ContainerError, ValueError):
    """Raised when a call target does not determine a method to invoke."""

    pass
