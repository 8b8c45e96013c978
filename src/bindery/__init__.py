"""Bindery inversion-of-control container.

Bindery maps abstract identifiers (classes, or their dotted paths, or plain
names) to the way they are produced, and resolves them into fully-wired
objects. Constructor dependencies are discovered from standard type hints at
resolution time, so concrete classes need no registration at all; bindings are
only declared to choose implementations, share instances or plug in factories.

Key Features:
    - Bindings to classes, class paths, factories or plain values
    - Shared (singleton) bindings and directly registered instances
    - Automatic constructor injection by declared type, with name overrides
    - Invocation of functions and methods with injected parameters
    - Circular dependency detection with the offending chain in the message

Basic Usage:
    >>> from bindery.container import Container
    >>>
    >>> container = Container()
    >>> container.singleton(Logger, FileLogger)
    >>>
    >>> @container.provides()
    >>> def make_database(logger: Logger) -> Database:
    ...     return Database(logger)
    >>>
    >>> service = container.make(UserService)

The package consists of several modules:
    - container: The Container class, resolution and invocation
    - registry: Storage of bindings, shared instances and resolution markers
    - introspection: Discovery of injectable parameters from signatures
    - factories: Factory wrappers, including per-factory memoisation
    - build_stack: Per-thread resolution chains and cycle detection
    - naming: Identifier normalisation and lookup by dotted path
    - domain: Core domain models (Binding, Dependency)
    - errors: Container-specific exceptions
"""
