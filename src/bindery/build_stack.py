"""Per-thread record of the targets currently being resolved."""

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator

from bindery.errors import CircularDependencyError
from bindery.naming import display_name

__all__ = ["BuildStack"]


class BuildStack(threading.local):
    """Ordered chain of targets under resolution in the current thread.

    Every thread sees its own chain, so concurrent resolutions never mix their
    diagnostic context. Entering a target that is already on the chain raises
    CircularDependencyError instead of recursing until the interpreter gives up.

    Example:
        >>> stack = BuildStack("building")
        >>> with stack.enter("app.Mailer"):
        ...     stack.describe()   # "app.Mailer"
    """

    def __init__(self, activity: str = "resolving"):
        self.activity = activity
        self._frames: list[Hashable] = []

    def __contains__(self, item: Hashable) -> bool:
        return item in self._frames

    def __len__(self) -> int:
        return len(self._frames)

    def __bool__(self) -> bool:
        return bool(self._frames)

    @property
    def frames(self) -> tuple[Hashable, ...]:
        return tuple(self._frames)

    @contextmanager
    def enter(self, target: Hashable) -> Iterator[None]:
        """Push ``target`` for the duration of the block, popping it on any exit.

        Raises:
            CircularDependencyError: If ``target`` is already on the chain.
        """
        if target in self._frames:
            cycle = " -> ".join(display_name(f) for f in self._frames + [target])
            raise CircularDependencyError(
                f"Circular dependency detected while {self.activity} [{cycle}]"
            )

        self._frames.append(target)
        try:
            yield
        finally:
            self._frames.pop()

    def describe(self) -> str:
        return ", ".join(display_name(f) for f in self._frames)

    def clear(self) -> None:
        self._frames.clear()

    def __repr__(self) -> str:
        return f"BuildStack({self.activity!r}, [{self.describe()}])"
