"""Named services, resolved once and shared.

A service is defined by a value or a deferred value. The first ``get`` of a
name resolves its definition and caches the result; every later ``get``
returns that same instance for the lifetime of the registry.

Resolution of a name is claimed by one thread at a time. Other threads asking
for the same name wait for the claim to be released and then read the cache,
while threads resolving different names proceed independently. Waiting threads
are tracked so that a dependency cycle spread over several threads raises
:class:`~armature.errors.CyclicDependency` rather than deadlocking.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator

from armature.deferred import resolve_value
from armature.errors import ContainerLocked, CyclicDependency, UnknownService
from armature.resolution import (
    ResolutionContext,
    ResolutionStep,
    active_path,
    entering,
)

__all__ = ["ServiceRegistry"]

logger = logging.getLogger(__name__)


class _Claims:
    """Which thread is resolving which service name, and who is waiting on whom."""

    def __init__(self):
        self._released = threading.Condition(threading.Lock())
        self._owners: dict[str, int] = {}
        self._waiting: dict[int, str] = {}

    @contextmanager
    def claim(self, name: str) -> Iterator[None]:
        me = threading.get_ident()
        with self._released:
            while name in self._owners:
                self._check_for_deadlock(name, me)
                self._waiting[me] = name
                try:
                    self._released.wait()
                finally:
                    del self._waiting[me]
            self._owners[name] = me
        try:
            yield
        finally:
            with self._released:
                del self._owners[name]
                self._released.notify_all()

    def _check_for_deadlock(self, name: str, me: int):
        """Follow the wait-for chain from ``name``; it must not lead back to us."""
        chain = [name]
        owner = self._owners.get(name)
        while owner is not None:
            if owner == me:
                raise CyclicDependency(
                    list(active_path())
                    + [ResolutionStep.of_service(waited) for waited in chain[1:]]
                )
            awaited = self._waiting.get(owner)
            if awaited is None:
                return
            chain.append(awaited)
            owner = self._owners.get(awaited)


class ServiceRegistry:
    """Holds service definitions and the instances resolved from them."""

    def __init__(self):
        self._definitions: dict[str, Any] = {}
        self._instances: dict[str, Any] = {}
        self._claims = _Claims()
        self._locked = False

    def set(self, name: str, definition: Any):
        """Define a service without resolving it.

        Args:
            name: The service name.
            definition: A concrete value, or a deferred value resolved on first ``get``.

        Raises:
            ContainerLocked: If the registry has been locked.
        """
        if self._locked:
            raise ContainerLocked(f"Cannot define service '{name}': registry is locked")
        if name in self._instances:
            logger.warning(
                "Service '%s' is already resolved; the cached instance is kept", name
            )
        self._definitions[name] = definition
        logger.debug("Defined service '%s'", name)

    def get(self, name: str, context: ResolutionContext) -> Any:
        """Return the instance of a service, resolving it on first access.

        Raises:
            UnknownService: If no definition was set for ``name``.
            CyclicDependency: If ``name`` is already being resolved on the
                active path, or by a thread waiting on this one.
        """
        try:
            return self._instances[name]
        except KeyError:
            pass
        if name not in self._definitions:
            raise UnknownService(name)

        with entering(ResolutionStep.of_service(name)):
            with self._claims.claim(name):
                if name in self._instances:
                    return self._instances[name]

                instance = resolve_value(self._definitions[name], context)
                self._instances[name] = instance
                logger.debug("Resolved service '%s'", name)
                return instance

    def has(self, name: str) -> bool:
        return name in self._definitions

    def service_names(self) -> list[str]:
        """Names of all defined services, resolved or not."""
        return list(self._definitions)

    def resolved_service_names(self) -> list[str]:
        """Names of services that have been resolved and cached."""
        return list(self._instances)

    def lock(self):
        self._locked = True

    def is_locked(self) -> bool:
        return self._locked
