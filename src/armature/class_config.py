"""Per-type constructor parameter and setter configuration.

Configuration is attached to type identifiers and inherited along each type's
ancestry chain. Queries merge key by key, most general ancestor first, so a
subclass overrides only the keys it defines itself:

    >>> store.params[AbstractModel]["db"] = container.lazy_get("database")
    >>> store.params[BlogModel]["table"] = "posts"
    >>> store.unified_params(BlogModel)
    {'db': NamedService(name='database'), 'table': 'posts'}

Merged views are computed from the current store state on every query.
"""

import threading
from collections.abc import MutableMapping
from typing import Any, Iterable, Iterator, Mapping

from armature.errors import ContainerLocked, TypeNotConstructible
from armature.type_registry import TypeId, TypeRegistry

__all__ = ["ClassConfigStore", "ConfigSection", "TypeSpec"]


class TypeSpec(MutableMapping):
    """The configuration entries (parameter or setter name to value) of one type."""

    def __init__(self, store: "ClassConfigStore", entries: Mapping[str, Any] = None):
        self._store = store
        self._entries: dict[str, Any] = dict(entries or {})

    def snapshot(self) -> dict[str, Any]:
        with self._store._lock:
            return dict(self._entries)

    def __getitem__(self, name: str) -> Any:
        return self._entries[name]

    def __setitem__(self, name: str, value: Any):
        with self._store._lock:
            self._store._check_unlocked()
            self._entries[name] = value

    def __delitem__(self, name: str):
        with self._store._lock:
            self._store._check_unlocked()
            del self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TypeSpec({self.snapshot()!r})"


class ConfigSection(MutableMapping):
    """Mapping from type identifiers to their :class:`TypeSpec`.

    Reading the spec of an unconfigured type creates an empty one, so entries
    can be written directly:

        >>> section[Database]["host"] = "localhost"

    Membership tests never create entries.
    """

    def __init__(self, store: "ClassConfigStore"):
        self._store = store
        self._specs: dict[str, TypeSpec] = {}

    def snapshot(self, type_id: TypeId) -> dict[str, Any]:
        spec = self._specs.get(self._store.key_for(type_id))
        return spec.snapshot() if spec is not None else {}

    def __getitem__(self, type_id: TypeId) -> TypeSpec:
        key = self._store.key_for(type_id)
        with self._store._lock:
            if key in self._specs:
                return self._specs[key]
            spec = TypeSpec(self._store)
            # a locked store hands out a detached spec which refuses writes
            if not self._store.is_locked():
                self._specs[key] = spec
            return spec

    def __setitem__(self, type_id: TypeId, entries: Mapping[str, Any]):
        key = self._store.key_for(type_id)
        with self._store._lock:
            self._store._check_unlocked()
            self._specs[key] = TypeSpec(self._store, entries)

    def __delitem__(self, type_id: TypeId):
        key = self._store.key_for(type_id)
        with self._store._lock:
            self._store._check_unlocked()
            del self._specs[key]

    def __contains__(self, type_id: object) -> bool:
        try:
            key = self._store.key_for(type_id)
        except TypeNotConstructible:
            return False
        return key in self._specs

    def __iter__(self) -> Iterator[str]:
        with self._store._lock:
            return iter(list(self._specs))

    def __len__(self) -> int:
        return len(self._specs)


class ClassConfigStore:
    """Holds constructor parameter and setter specs per type.

    Attributes:
        params: Constructor parameter specs, keyed by type.
        setters: Setter specs (method name to value), keyed by type.
    """

    def __init__(self, types: TypeRegistry):
        self._types = types
        self._lock = threading.RLock()
        self._locked = False
        self.params = ConfigSection(self)
        self.setters = ConfigSection(self)

    def key_for(self, type_id: TypeId) -> str:
        return self._types.key_for(type_id)

    def set_params(self, type_id: TypeId, spec: Mapping[str, Any]):
        """Add or overwrite constructor parameter entries for a type."""
        self.params[type_id].update(spec)

    def set_setter(self, type_id: TypeId, method_name: str, value: Any):
        """Add or overwrite the value passed to one setter method of a type."""
        self.setters[type_id][method_name] = value

    def unified_params(self, type_id: TypeId) -> dict[str, Any]:
        """Merge the parameter specs of a type's ancestry, key by key.

        Returns:
            A new dictionary; the entry of the most specific ancestor defining
            a key wins. Unconfigured types yield an empty dictionary.
        """
        return self.params_along(self._types.ancestry(type_id))

    def unified_setters(self, type_id: TypeId) -> dict[str, Any]:
        """Merge the setter specs of a type's ancestry, method by method.

        A subclass entry for a method name replaces the ancestor's entry for
        that method; values are never merged into each other.
        """
        return self.setters_along(self._types.ancestry(type_id))

    def params_along(self, ancestry: Iterable[str]) -> dict[str, Any]:
        """Merge parameter specs over an explicit ancestry chain, most general first."""
        return _unify(self.params, ancestry)

    def setters_along(self, ancestry: Iterable[str]) -> dict[str, Any]:
        """Merge setter specs over an explicit ancestry chain, most general first."""
        return _unify(self.setters, ancestry)

    def lock(self):
        """Refuse all further writes."""
        with self._lock:
            self._locked = True

    def is_locked(self) -> bool:
        return self._locked

    def _check_unlocked(self):
        if self._locked:
            raise ContainerLocked("Configuration is locked and cannot be modified")


def _unify(section: ConfigSection, ancestry: Iterable[str]) -> dict[str, Any]:
    unified: dict[str, Any] = {}
    for ancestor in ancestry:
        unified.update(section.snapshot(ancestor))
    return unified
