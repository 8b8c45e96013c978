"""
The inversion-of-control container.

A container maps abstract identifiers to the way they are produced, and turns
those identifiers into fully-wired objects on request. Classes need no
registration at all: asking for a class builds it, reading its constructor
signature and resolving every class-typed parameter recursively. Bindings are
only needed to pick an implementation for an interface, to share a single
instance, or to produce something with a factory.

Identifiers may be classes or strings. A class and its dotted path name the
same entry, so ``make(Mailer)`` and ``make("app.mail.Mailer")`` agree.

Example:
    >>> container = Container()
    >>> container.singleton(Logger, FileLogger)
    >>> container.bind("mail.transport", lambda c, p: SmtpTransport(p.get("host", "localhost")))
    >>> mailer = container.make(Mailer)
    >>> container.call("app.mail.Mailer@send", {"to": "a@example.com"})
"""

import inspect
import logging
from typing import Any, Callable, ClassVar, Hashable, Mapping, Optional, Union, get_type_hints

from bindery import factories
from bindery.build_stack import BuildStack
from bindery.domain import Binding, Dependency, Parameters
from bindery.errors import (
    CircularDependencyError,
    ContainerError,
    DependencyError,
    InvalidCallTargetError,
    NotInstantiableError,
)
from bindery.factories import is_factory, class_factory, value_factory
from bindery.interface import ContainerInterface
from bindery.introspection import (
    dependencies_of,
    has_constructor,
    is_instantiable,
    owner_name,
)
from bindery.naming import display_name, locate, normalize
from bindery.registry import BindingRegistry

__all__ = ["Container"]

logger = logging.getLogger(__name__)

CALL_DELIMITER = "@"
STATIC_DELIMITER = "::"

CallTarget = Union[Callable, str, tuple, list]


class Container(ContainerInterface):
    """Registry of bindings plus the engine that resolves them.

    The container is not synchronised: share one between threads only if
    registration happens before the threads start. Resolution chains are
    tracked per thread, so concurrent ``make`` calls never confuse each
    other's diagnostics.

    Classes are keyed by their dotted path. When two distinct classes share a
    path (classes created by calling one function twice, for instance), the
    first one seen owns the path and the others are keyed by the class object
    itself, so they can only be addressed by passing the class.
    """

    _instance: ClassVar[Optional[ContainerInterface]] = None

    def __init__(self):
        self._registry = BindingRegistry()
        self._resolving = BuildStack("resolving")
        self._building = BuildStack("building")

    @classmethod
    def get_instance(cls) -> Optional[ContainerInterface]:
        """Return the process-wide container, if one has been set."""
        return Container._instance

    @classmethod
    def set_instance(cls, container: Optional[ContainerInterface]):
        Container._instance = container

    @classmethod
    def clear_instance(cls):
        Container._instance = None

    def bound(self, abstract: Any) -> bool:
        return self._registry.is_bound(self._normalize(abstract))

    def resolved(self, abstract: Any) -> bool:
        return self._registry.is_resolved(self._normalize(abstract))

    def get_bindings(self) -> Mapping[Hashable, Binding]:
        return self._registry.snapshot()

    def forget_instance(self, abstract: Any):
        self._registry.forget_instance(self._normalize(abstract))

    def forget_instances(self):
        self._registry.forget_instances()

    def flush(self):
        """Forget every binding, shared instance and resolved marker."""
        self._registry.flush()

    def bind(self, abstract: Any, concrete: Any = None, shared: bool = False):
        """Register how ``abstract`` is produced.

        Args:
            abstract: The identifier being bound, a class or a string.
            concrete: A factory ``(container, parameters) -> object``, a class or
                class path to build or resolve, or any other value to hand out
                as-is. Defaults to ``abstract`` itself.
            shared: Cache the first result and return it on every later ``make``.

        If ``abstract`` has already been resolved, it is resolved again straight
        away so the container's own cache reflects the new binding. Objects
        already handed out are left untouched.
        """
        abstract = self._normalize(abstract)
        self._registry.forget_instance(abstract)

        if concrete is None:
            concrete = abstract

        if is_factory(concrete):
            factory = concrete
        elif isinstance(concrete, str) or inspect.isclass(concrete) or concrete == abstract:
            factory = class_factory(abstract, self._normalize(concrete))
        else:
            factory = value_factory(concrete)

        self._registry.add_binding(abstract, Binding(factory, shared))
        logger.debug("Bound %s (shared=%s)", display_name(abstract), shared)

        if self._registry.is_resolved(abstract):
            self.make(abstract)

    def singleton(self, abstract: Any, concrete: Any = None):
        self.bind(abstract, concrete, True)

    def instance(self, abstract: Any, instance: Any) -> Any:
        """Register ``instance`` as the shared object for ``abstract``.

        Returns:
            The instance, unchanged.
        """
        abstract = self._normalize(abstract)
        bound = self._registry.is_bound(abstract)

        self._registry.add_instance(abstract, instance)
        logger.debug("Registered instance for %s", display_name(abstract))

        if bound:
            self.make(abstract)

        return instance

    def is_shared(self, abstract: Any) -> bool:
        abstract = self._normalize(abstract)

        if self._registry.has_instance(abstract):
            return True

        binding = self._registry.binding(abstract)
        return binding is not None and binding.shared is True

    def is_buildable(self, concrete: Any, abstract: Any) -> bool:
        return concrete == abstract or is_factory(concrete)

    def share(self, factory: factories.Factory) -> factories.Factory:
        return factories.share(factory)

    def make(self, abstract: Any, parameters: Optional[Parameters] = None) -> Any:
        """Resolve ``abstract`` into an object.

        Shared instances are returned from the cache. Otherwise the bound factory
        is invoked, or, for an unbound identifier, the class it names is built.

        Args:
            abstract: The identifier to resolve.
            parameters: Values overriding injection, keyed by parameter name or
                by position in the constructor's parameter list.

        Raises:
            NotInstantiableError: If an interface or abstract class has no binding.
            DependencyError: If a constructor parameter cannot be satisfied.
            CircularDependencyError: If ``abstract`` depends on itself.
        """
        abstract = self._normalize(abstract)

        if self._registry.has_instance(abstract):
            return self._registry.instance(abstract)

        with self._resolving.enter(abstract):
            binding = self._registry.binding(abstract)
            concrete = binding.concrete if binding else abstract

            if self.is_buildable(concrete, abstract):
                obj = self.build(concrete, parameters)
            else:
                obj = self.make(concrete, parameters)

        if self.is_shared(abstract):
            self._registry.add_instance(abstract, obj)

        self._registry.mark_resolved(abstract)
        return obj

    def build(self, concrete: Any, parameters: Optional[Parameters] = None) -> Any:
        """Produce an object from a factory or a class, bypassing bindings for ``concrete`` itself.

        Factories are invoked with this container and the parameters. Classes
        are constructed with each constructor parameter taken from
        ``parameters`` by name, else resolved from its declared class, else
        given its default value.

        Raises:
            NotInstantiableError: If ``concrete`` is not a constructible class.
            TargetNotFoundError: If ``concrete`` is a path that cannot be imported.
            DependencyError: If a constructor parameter cannot be satisfied.
        """
        if is_factory(concrete):
            return concrete(self, dict(parameters or {}))

        cls = self._target_class(concrete)

        if not is_instantiable(cls):
            previous = (
                f" while building [{self._building.describe()}]" if self._building else ""
            )
            raise NotInstantiableError(
                f"Target [{display_name(concrete)}] is not instantiable{previous}."
            )

        with self._building.enter(self._normalize(cls)):
            if not has_constructor(cls):
                logger.debug("Building %s without arguments", display_name(cls))
                return cls()

            dependencies = dependencies_of(cls)
            supplied, _ = self._keyed_by_name(dependencies, parameters, cls, strict=True)
            args, kwargs = self._collect_arguments(
                dependencies, supplied, cls, fallback_to_default=True
            )

        logger.debug("Building %s", display_name(cls))
        return cls(*args, **kwargs)

    def call(
        self,
        callback: CallTarget,
        parameters: Optional[Parameters] = None,
        default_method: Optional[str] = None,
    ) -> Any:
        """Invoke ``callback``, injecting every parameter it is not given.

        Args:
            callback: A callable, a dotted path to a function, ``"Class@method"``,
                ``"Class::method"`` or a ``(target, "method")`` pair. A bare class
                or class path is accepted together with ``default_method``.
            parameters: Values keyed by parameter name or position. Entries that
                match no parameter are passed on, integers positionally and
                strings as keywords.
            default_method: The method to call when ``callback`` names a class
                but no method.

        Returns:
            Whatever the callback returns.

        Raises:
            InvalidCallTargetError: If no method can be determined, or it does not exist.
            DependencyError: If a parameter has no value, no class and no default.
                Such parameters are never silently omitted from the call, since
                Python would reject the call anyway.

        Example:
            >>> container.call("app.mail.Mailer@send", {"to": "a@example.com"})
            >>> container.call(Handler, default_method="handle")
        """
        if self._names_class_method(callback, default_method):
            segments = callback.split(CALL_DELIMITER) if isinstance(callback, str) else [callback]
            method = segments[1] if len(segments) == 2 else default_method

            if not method:
                raise InvalidCallTargetError("Method not provided.")

            return self.call((self.make(segments[0]), method), parameters)

        function = self._callable_from(callback)
        dependencies = dependencies_of(function)
        supplied, extra_positional = self._keyed_by_name(
            dependencies, parameters, function, strict=False
        )
        args, kwargs = self._collect_arguments(
            dependencies, supplied, function, fallback_to_default=False
        )

        args.extend(extra_positional)
        kwargs.update((k, v) for k, v in supplied.items() if isinstance(k, str))
        return function(*args, **kwargs)

    def wrap(self, callback: CallTarget, parameters: Optional[Parameters] = None) -> Callable[[], Any]:
        """Defer ``call(callback, parameters)`` until the returned thunk is invoked."""

        def wrapped() -> Any:
            return self.call(callback, parameters)

        return wrapped

    def provides(self, abstract: Any = None, shared: bool = False) -> Callable:
        """Decorator to register a class or a provider function.

        Args:
            abstract: The identifier to bind. Classes default to themselves;
                functions default to their return annotation when it is a class,
                otherwise to their name with any ``make_`` prefix removed.
            shared: Register a shared binding.

        Provider functions are invoked through ``call``, so their own parameters
        are injected too.

        Example:
            @container.provides(Logger, shared=True)
            class FileLogger(Logger):
                ...

            @container.provides()
            def make_mailer(transport: Transport) -> Mailer:
                return Mailer(transport)
        """

        def decorator(obj):
            if inspect.isclass(obj):
                self.bind(obj if abstract is None else abstract, obj, shared)
            elif callable(obj):
                key = _provided_key(obj) if abstract is None else abstract
                self.bind(
                    key,
                    lambda container, parameters: container.call(obj, parameters),
                    shared,
                )
            else:
                raise ContainerError(f"{obj!r} is not a class or function")
            return obj

        return decorator

    def __contains__(self, abstract: Any) -> bool:
        return self.bound(abstract)

    def __getitem__(self, abstract: Any) -> Any:
        return self.make(abstract)

    def __setitem__(self, abstract: Any, value: Any):
        self.bind(abstract, value if is_factory(value) else value_factory(value))

    def __delitem__(self, abstract: Any):
        abstract = self._normalize(abstract)
        if not self._registry.is_bound(abstract):
            raise KeyError(abstract)
        self._registry.remove(abstract)

    def _normalize(self, abstract: Any) -> Hashable:
        key = normalize(abstract)
        if inspect.isclass(abstract):
            known = self._registry.known_type(key)
            if known is not None and known is not abstract:
                # another class already owns this dotted path
                return abstract
            self._registry.remember_type(key, abstract)
        return key

    def _locate(self, name: str) -> Any:
        known = self._registry.known_type(name)
        return known if known is not None else locate(name)

    def _target_class(self, concrete: Any) -> Any:
        if inspect.isclass(concrete):
            self._normalize(concrete)
            return concrete
        if isinstance(concrete, str):
            return self._locate(normalize(concrete))
        return concrete

    def _keyed_by_name(
        self,
        dependencies: list[Dependency],
        parameters: Optional[Parameters],
        owner: Any,
        strict: bool,
    ) -> tuple[dict[Hashable, Any], list[Any]]:
        """Remap positional entries of ``parameters`` onto parameter names.

        Returns:
            The parameters keyed by name, and the positional values beyond the
            end of the parameter list in index order. With ``strict``, such
            values raise DependencyError instead.
        """
        assignable = [d for d in dependencies if not d.is_variadic]
        supplied: dict[Hashable, Any] = {}
        overflow: dict[int, Any] = {}

        for key, value in (parameters or {}).items():
            if not isinstance(key, int) or isinstance(key, bool):
                supplied[key] = value
            elif 0 <= key < len(assignable):
                supplied[assignable[key].parameter_name] = value
            elif strict:
                raise DependencyError(
                    f"Positional parameter [{key}] is out of range for {owner_name(owner)}"
                )
            else:
                overflow[key] = value

        return supplied, [overflow[k] for k in sorted(overflow)]

    def _collect_arguments(
        self,
        dependencies: list[Dependency],
        supplied: dict[Hashable, Any],
        owner: Any,
        fallback_to_default: bool,
    ) -> tuple[list[Any], dict[str, Any]]:
        """Assemble call arguments in declaration order, consuming ``supplied``."""
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for dependency in dependencies:
            if dependency.is_variadic:
                continue

            name = dependency.parameter_name
            if name in supplied:
                value = supplied.pop(name)
            elif dependency.abstract is not None:
                value = self._resolve_dependency(dependency, owner, fallback_to_default)
            elif dependency.has_default:
                value = dependency.default
            else:
                raise DependencyError(
                    f"Unresolvable dependency resolving [{name}] in {owner_name(owner)}"
                )

            if dependency.is_keyword_only:
                kwargs[name] = value
            else:
                args.append(value)

        return args, kwargs

    def _resolve_dependency(
        self, dependency: Dependency, owner: Any, fallback_to_default: bool
    ) -> Any:
        try:
            return self.make(dependency.abstract)
        except CircularDependencyError:
            raise
        except ContainerError:
            if not (fallback_to_default and dependency.has_default):
                raise
            logger.debug(
                "Could not resolve [%s] of %s, using its default",
                dependency.parameter_name,
                owner_name(owner),
                exc_info=True,
            )
            return dependency.default

    def _names_class_method(self, callback: Any, default_method: Optional[str]) -> bool:
        if isinstance(callback, str) and CALL_DELIMITER in callback:
            return True
        if not default_method:
            return False
        return inspect.isclass(callback) or (
            isinstance(callback, str) and STATIC_DELIMITER not in callback
        )

    def _callable_from(self, callback: CallTarget) -> Callable:
        if isinstance(callback, str):
            if STATIC_DELIMITER not in callback:
                function = self._locate(normalize(callback))
                if not callable(function):
                    raise InvalidCallTargetError(f"Target [{callback}] is not callable.")
                return function
            callback = tuple(callback.split(STATIC_DELIMITER, 1))

        if isinstance(callback, (tuple, list)):
            if len(callback) != 2:
                raise InvalidCallTargetError(
                    f"Call target {callback!r} is not a (target, method) pair."
                )
            target, method = callback
            if isinstance(target, str):
                target = self._locate(normalize(target))
            try:
                return getattr(target, method)
            except AttributeError:
                raise InvalidCallTargetError(
                    f"Method [{method}] does not exist on [{display_name(target)}]."
                ) from None

        if callable(callback):
            return callback

        raise InvalidCallTargetError(f"Target [{callback!r}] is not callable.")


def _provided_key(func: Callable) -> Any:
    try:
        return_type = get_type_hints(func).get("return", None)
    except NameError:
        return_type = None

    if inspect.isclass(return_type) and return_type.__module__ != "builtins":
        return return_type
    return _inferred_name(func)


def _inferred_name(func: Callable) -> str:
    name = func.__name__
    if name.startswith("make_"):
        return name[5:]
    else:
        return name
