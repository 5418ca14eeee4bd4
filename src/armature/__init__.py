"""Armature object-graph resolution engine.

Armature builds fully configured objects on demand from per-class
configuration and a registry of named services. Constructor parameters and
setter values are attached to classes and inherited along the class
hierarchy, and any of them may be deferred: a new instance, a shared named
service, or the result of a computation, produced only when needed.

Key Features:
    - Constructor introspection with three precedence layers: declared
      defaults, inherited per-class configuration, call-time overrides
    - Setter injection, inherited and overridden per method name
    - Explicit choice between shared services and fresh instances
    - Services resolved at most once, even under concurrent access
    - Cycle detection instead of unbounded recursion

Basic Usage:
    >>> from armature.container import Container
    >>>
    >>> container = Container()
    >>> container.params[Database] = {"host": "localhost"}
    >>> container.setters[Model]["set_db"] = container.lazy_get("database")
    >>> container.set("database", container.lazy_new(Database))
    >>> container.set("posts", container.lazy_new(PostModel))
    >>> posts = container.get("posts")

The framework consists of several core modules:
    - container: The Container facade used by application code
    - class_config: Per-class parameter and setter configuration
    - forge: Construction of configured instances
    - deferred: Deferred values (NewInstance, NamedService, Invoke)
    - services: Named service registry
    - factory: Repeatable instance factories
    - type_registry: Type introspection and explicit registration
    - builders: Wiring a container from configuration classes
    - errors: Framework-specific exceptions
"""
