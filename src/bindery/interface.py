"""The abstract surface every container implementation offers to its collaborators."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Union

from bindery.domain import Parameters

__all__ = ["ContainerInterface"]


class ContainerInterface(ABC):
    @abstractmethod
    def bound(self, abstract: Any) -> bool:
        """Check whether ``abstract`` has a binding or a registered instance."""

    @abstractmethod
    def resolved(self, abstract: Any) -> bool:
        """Check whether ``abstract`` has been resolved at least once."""

    @abstractmethod
    def bind(self, abstract: Any, concrete: Any = None, shared: bool = False):
        """Register how ``abstract`` is produced."""

    @abstractmethod
    def singleton(self, abstract: Any, concrete: Any = None):
        """Register a shared binding."""

    @abstractmethod
    def instance(self, abstract: Any, instance: Any):
        """Register an existing object as the shared instance of ``abstract``."""

    @abstractmethod
    def call(
        self,
        callback: Union[Callable, str, tuple, list],
        parameters: Optional[Parameters] = None,
        default_method: Optional[str] = None,
    ) -> Any:
        """Invoke ``callback``, injecting the parameters it does not receive."""

    @abstractmethod
    def make(self, abstract: Any, parameters: Optional[Parameters] = None) -> Any:
        """Resolve ``abstract`` into an object."""

    def resolve(self, abstract: Any, parameters: Optional[Parameters] = None) -> Any:
        return self.make(abstract, parameters)
