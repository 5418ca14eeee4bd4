"""The container: one object wiring configuration, construction and services.

A :class:`Container` is created explicitly and passed by reference; there is
no global instance. Configuration is written during a wiring phase, optionally
closed off with :meth:`Container.lock`, and objects are built lazily on first
request:

    >>> container = Container()
    >>> container.params[Database] = {"host": "localhost", "user": "u", "password": "p"}
    >>> container.params[AbstractModel]["db"] = container.lazy_get("database")
    >>> container.set("database", container.lazy_new(Database))
    >>> container.set("blog_model", container.lazy_new(BlogModel))
    >>> container.get("blog_model").db is container.get("database")
    True
"""

import logging
from typing import Any, Callable, Mapping, Optional

from armature.class_config import ClassConfigStore
from armature.deferred import Invoke, NamedService, NewInstance
from armature.factory import Factory, FactoryBuilder
from armature.forge import Forge
from armature.services import ServiceRegistry
from armature.type_registry import TypeId, TypeRegistry

__all__ = ["Container"]

logger = logging.getLogger(__name__)


class Container:
    """Builds configured objects and holds shared named services.

    Attributes:
        types: The registry describing constructible types.
        config: The per-type configuration store.
        params: Constructor parameter specs per type, e.g.
            ``container.params[Database]["host"] = "localhost"``.
        setters: Setter specs per type, e.g.
            ``container.setters[Model]["set_db"] = container.lazy_get("database")``.
    """

    def __init__(self, types: Optional[TypeRegistry] = None):
        self.types = types if types is not None else TypeRegistry()
        self.config = ClassConfigStore(self.types)
        self.params = self.config.params
        self.setters = self.config.setters
        self._forge = Forge(self.types, self.config)
        self._services = ServiceRegistry()
        self._factories = FactoryBuilder(self)

    def set(self, name: str, definition: Any):
        """Define a named service. Nothing is resolved until it is first fetched."""
        self._services.set(name, definition)

    def get(self, name: str) -> Any:
        """Return the shared instance of a named service."""
        return self._services.get(name, self)

    def has(self, name: str) -> bool:
        return self._services.has(name)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def new_instance(
        self,
        type_id: TypeId,
        params: Optional[Mapping[str, Any]] = None,
        setters: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Construct a new, fully configured instance of a type right away."""
        return self._forge.new_instance(self, type_id, params, setters)

    def lazy_new(
        self,
        type_id: TypeId,
        params: Optional[Mapping[str, Any]] = None,
        setters: Optional[Mapping[str, Any]] = None,
    ) -> NewInstance:
        """Defer construction of a new instance of a type."""
        return NewInstance(type_id, params or {}, setters or {})

    def lazy_get(self, name: str) -> NamedService:
        """Defer fetching a named service."""
        return NamedService(name)

    def lazy(self, computation: Callable, *args: Any, **kwargs: Any) -> Invoke:
        """Defer calling ``computation`` with the given arguments."""
        return Invoke(computation, args, kwargs)

    def new_factory(
        self,
        type_id: TypeId,
        params: Optional[Mapping[str, Any]] = None,
        setters: Optional[Mapping[str, Any]] = None,
    ) -> Factory:
        """Return a callable creating a new instance of a type on each call."""
        return self._factories.new_factory(type_id, params, setters)

    def lock(self):
        """Prevent further changes to services and per-type configuration."""
        self._services.lock()
        self.config.lock()
        logger.debug("Container locked")

    def is_locked(self) -> bool:
        return self._services.is_locked() or self.config.is_locked()

    def service_names(self) -> list[str]:
        return self._services.service_names()

    def resolved_service_names(self) -> list[str]:
        return self._services.resolved_service_names()
