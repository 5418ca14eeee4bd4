"""Registration and introspection of constructible types.

The :class:`TypeRegistry` is the reflection collaborator of the forge. It
turns a type identifier (a class, a registered name, or an alias) into a
:class:`~armature.domain.TypeDescriptor` carrying the constructor signature and
the ancestry chain used to merge inherited configuration.

Classes need no registration: their signature is read with :mod:`inspect` and
their ancestry is their MRO. Explicit registration exists for factories that
are not classes, for types that should be addressed by a short name, and for
declaring an ancestry that differs from the Python class hierarchy.
"""

import inspect
from typing import Any, Callable, Iterable, Optional, Union

from armature.domain import ConstructorSignature, TypeDescriptor
from armature.errors import TypeNotConstructible

__all__ = ["TypeId", "TypeRegistry", "type_key"]


TypeId = Union[str, type]
"""Identifier of a constructible type.

Example:
    >>> container.new_instance(Database)            # by class
    >>> container.new_instance("app.db.Database")   # by canonical key
    >>> container.new_instance("database")          # by registered alias
"""


def type_key(target: type) -> str:
    """Return the canonical key of a class: its module and qualified name.

    Example:
        >>> type_key(collections.OrderedDict)  # Returns "collections.OrderedDict"
    """
    return f"{target.__module__}.{target.__qualname__}"


class TypeRegistry:
    """Describes constructible types, by introspection or explicit registration."""

    def __init__(self):
        self._descriptors: dict[str, TypeDescriptor] = {}
        self._aliases: dict[str, str] = {}

    def key_for(self, type_id: TypeId) -> str:
        """Normalise a type identifier to its canonical key.

        Raises:
            TypeNotConstructible: If ``type_id`` is neither a class nor a string.
        """
        if inspect.isclass(type_id):
            return type_key(type_id)
        if isinstance(type_id, str):
            return self._aliases.get(type_id, type_id)
        raise TypeNotConstructible(
            type_id, "type identifiers must be classes or strings"
        )

    def register_class(self, cls: type, name: Optional[str] = None) -> TypeDescriptor:
        """Register a class, optionally under an alias.

        Args:
            cls: The class to register.
            name: An optional alias by which the class can be requested and configured.

        Returns:
            The descriptor of the class.
        """
        descriptor = self._describe_class(cls)
        self._descriptors[descriptor.type_id] = descriptor
        if name is not None:
            self._aliases[name] = descriptor.type_id
        return descriptor

    def register_factory(
        self,
        type_id: str,
        factory: Callable,
        ancestry: Iterable[TypeId] = (),
        signature: Optional[ConstructorSignature] = None,
    ) -> TypeDescriptor:
        """Register a factory callable as a constructible type.

        Args:
            type_id: The name under which the type is requested and configured.
            factory: The callable that constructs instances.
            ancestry: Ancestors of the type, most general first. The type itself
                is appended if not already last.
            signature: A statically declared signature; introspected from
                ``factory`` if omitted.

        Returns:
            The registered descriptor.

        Raises:
            TypeNotConstructible: If no signature is given and ``factory``
                cannot be introspected.
        """
        key = self.key_for(type_id)
        if signature is None:
            signature = _introspect(key, factory)

        chain = tuple(self.key_for(ancestor) for ancestor in ancestry)
        if not chain or chain[-1] != key:
            chain += (key,)

        descriptor = TypeDescriptor(key, factory, signature, chain)
        self._descriptors[key] = descriptor
        return descriptor

    def constructible(self, name: Optional[str] = None) -> Callable:
        """Decorator to register a class, optionally under an alias.

        Example:
            @types.constructible("database")
            class Database:
                def __init__(self, host: str):
                    self.host = host
        """

        def decorator(cls: type) -> type:
            if not inspect.isclass(cls):
                raise TypeNotConstructible(cls, "only classes can be decorated")
            self.register_class(cls, name)
            return cls

        return decorator

    def describe(self, type_id: TypeId) -> TypeDescriptor:
        """Produce the descriptor for a type.

        Raises:
            TypeNotConstructible: If the type is unknown, abstract, or its
                constructor cannot be introspected.
        """
        descriptor = self._registered(type_id)
        if descriptor is not None:
            return descriptor
        if inspect.isclass(type_id):
            return self._describe_class(type_id)
        raise TypeNotConstructible(type_id, "no type is registered under this name")

    def ancestry(self, type_id: TypeId) -> tuple[str, ...]:
        """Return the ancestry chain of a type, most general first.

        Unknown names have a chain consisting of themselves only.
        """
        descriptor = self._registered(type_id)
        if descriptor is not None:
            return descriptor.ancestry
        if inspect.isclass(type_id):
            return _class_ancestry(type_id)
        return (self.key_for(type_id),)

    def __contains__(self, type_id: TypeId) -> bool:
        return self._registered(type_id) is not None

    def _registered(self, type_id: TypeId) -> Optional[TypeDescriptor]:
        descriptor = self._descriptors.get(self.key_for(type_id))
        # distinct classes may share a module and qualified name
        if inspect.isclass(type_id) and descriptor is not None:
            if descriptor.factory is not type_id:
                return None
        return descriptor

    def _describe_class(self, cls: type) -> TypeDescriptor:
        if inspect.isabstract(cls):
            raise TypeNotConstructible(
                cls, f"abstract methods {sorted(cls.__abstractmethods__)}"
            )
        return TypeDescriptor(
            type_key(cls), cls, _introspect(cls, cls), _class_ancestry(cls)
        )


def _class_ancestry(cls: type) -> tuple[str, ...]:
    return tuple(type_key(c) for c in reversed(cls.__mro__) if c is not object)


def _introspect(type_id: Any, factory: Callable) -> ConstructorSignature:
    try:
        return ConstructorSignature.of(factory)
    except (ValueError, TypeError) as e:
        raise TypeNotConstructible(type_id, str(e)) from e
