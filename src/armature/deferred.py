"""Values whose production is deferred until they are needed.

A deferred value describes *how* to obtain a value; it never holds one. The
three variants make the sharing of a dependency an explicit choice made at
configuration time:

    - :class:`NewInstance` builds a fresh object on every resolution.
    - :class:`NamedService` returns the registry's shared instance.
    - :class:`Invoke` calls a computation on every resolution.

Anything that is not a :class:`DeferredValue` is used as it is. In particular a
plain function is a value, never an implicit computation; wrap it in
:class:`Invoke` to have it called.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from armature.resolution import ResolutionContext

__all__ = [
    "DeferredValue",
    "NewInstance",
    "NamedService",
    "Invoke",
    "frozen_mapping",
    "resolve_value",
]


def frozen_mapping(entries: Optional[Mapping[str, Any]] = None) -> Mapping[str, Any]:
    """Return a read-only copy of ``entries``."""
    return MappingProxyType(dict(entries or {}))


class DeferredValue(ABC):
    """Description of a value to be computed later."""

    @abstractmethod
    def resolve(self, context: ResolutionContext) -> Any:
        """Produce the value described by this deferred value."""


@dataclass(frozen=True)
class NewInstance(DeferredValue):
    """Resolves to a new instance of a type, configured as by ``new_instance``.

    Attributes:
        type_id: The type to construct.
        params: Constructor parameter overrides, held as a read-only copy.
        setters: Setter overrides keyed by method name, held as a read-only copy.
    """

    type_id: Any
    params: Mapping[str, Any] = field(default_factory=dict)
    setters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", frozen_mapping(self.params))
        object.__setattr__(self, "setters", frozen_mapping(self.setters))

    def __hash__(self) -> int:
        # values may be unhashable; names suffice to agree with equality
        return hash(
            (self.type_id, tuple(sorted(self.params)), tuple(sorted(self.setters)))
        )

    def resolve(self, context: ResolutionContext) -> Any:
        return context.new_instance(self.type_id, self.params, self.setters)


@dataclass(frozen=True)
class NamedService(DeferredValue):
    """Resolves to the shared instance of a named service."""

    name: str

    def resolve(self, context: ResolutionContext) -> Any:
        return context.get(self.name)


@dataclass(frozen=True)
class Invoke(DeferredValue):
    """Resolves to the result of calling a computation.

    Arguments that are themselves deferred values are resolved before the call.
    """

    computation: Callable
    args: tuple = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "kwargs", frozen_mapping(self.kwargs))

    def __hash__(self) -> int:
        return hash((self.computation, len(self.args), tuple(sorted(self.kwargs))))

    def resolve(self, context: ResolutionContext) -> Any:
        args = [resolve_value(arg, context) for arg in self.args]
        kwargs = {
            name: resolve_value(value, context) for name, value in self.kwargs.items()
        }
        return self.computation(*args, **kwargs)


def resolve_value(value: Any, context: ResolutionContext) -> Any:
    """Resolve ``value`` if it is deferred, otherwise return it unchanged."""
    if isinstance(value, DeferredValue):
        return value.resolve(context)
    return value
