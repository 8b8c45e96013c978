"""Normalisation of abstract identifiers and lookup of classes by dotted path."""

import importlib
import inspect
from typing import Any, Hashable

from bindery.errors import TargetNotFoundError

__all__ = ["normalize", "dotted_name", "display_name", "locate"]

SEPARATOR = "."


def dotted_name(cls: type) -> str:
    """Return the ``module.QualName`` path of a class.

    Example:
        >>> dotted_name(collections.OrderedDict)  # "collections.OrderedDict"
    """
    return f"{cls.__module__}.{cls.__qualname__}"


def normalize(abstract: Any) -> Hashable:
    """Canonicalise an abstract identifier so equivalent spellings share a key.

    Strings lose surrounding whitespace and any leading separators, classes are
    replaced by their dotted path, and anything else is returned unchanged.

    Example:
        >>> normalize(".app.Mailer")   # "app.Mailer"
        >>> normalize(Mailer)          # "app.Mailer"
    """
    if isinstance(abstract, str):
        return abstract.strip().lstrip(SEPARATOR)
    if inspect.isclass(abstract):
        return dotted_name(abstract)
    return abstract


def display_name(target: Any) -> str:
    if isinstance(target, str):
        return target
    if inspect.isclass(target):
        return dotted_name(target)
    return getattr(target, "__qualname__", None) or repr(target)


def locate(path: str) -> Any:
    """Import the object named by a dotted path.

    The longest importable module prefix is imported, then the remaining
    segments are looked up as attributes, so nested classes resolve too.

    Raises:
        TargetNotFoundError: If no prefix imports or an attribute is missing.
    """
    if not path:
        raise TargetNotFoundError("Target [] does not exist.")

    segments = path.split(SEPARATOR)

    for split in range(len(segments), 0, -1):
        module_name = SEPARATOR.join(segments[:split])
        try:
            target = importlib.import_module(module_name)
        except ImportError:
            continue

        for attribute in segments[split:]:
            try:
                target = getattr(target, attribute)
            except AttributeError:
                raise TargetNotFoundError(f"Target [{path}] does not exist.") from None
        return target

    raise TargetNotFoundError(f"Target [{path}] does not exist.")
