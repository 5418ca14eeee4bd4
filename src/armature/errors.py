"""Exceptions raised while configuring and resolving object graphs."""

from typing import Any, Iterable

__all__ = [
    "DependencyError",
    "UnknownService",
    "TypeNotConstructible",
    "MissingRequiredParameter",
    "UnknownSetterMethod",
    "CyclicDependency",
    "ContainerLocked",
]


class DependencyError(Exception):
    """Base class for every error raised by armature."""

    pass


class UnknownService(DependencyError, KeyError):
    """Raised when a service is requested that was never defined."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Service '{self.name}' is not defined"


class TypeNotConstructible(DependencyError):
    """Raised when no constructor signature can be produced for a type."""

    def __init__(self, type_id: Any, reason: str):
        super().__init__(f"Type {type_id!r} is not constructible: {reason}")
        self.type_id = type_id
        self.reason = reason


class MissingRequiredParameter(DependencyError):
    """Raised when a constructor parameter has no override, configuration or default."""

    def __init__(self, type_id: str, names: Iterable[str]):
        self.type_id = type_id
        self.names = list(names)
        super().__init__(
            f"Missing required constructor parameters {self.names} for {type_id}"
        )


class UnknownSetterMethod(DependencyError):
    """Raised when a configured setter does not exist on the constructed instance."""

    def __init__(self, type_id: str, method_name: str):
        super().__init__(f"{type_id} has no setter method '{method_name}'")
        self.type_id = type_id
        self.method_name = method_name


class CyclicDependency(DependencyError):
    """Raised when resolution re-enters a type or service already being resolved.

    Attributes:
        path: The resolution steps from the outermost request down to the
            repeated step, which appears both first in the cycle and last.
    """

    def __init__(self, path: Iterable[Any]):
        self.path = list(path)
        super().__init__(
            "Cyclic dependency: " + " -> ".join(str(step) for step in self.path)
        )


class ContainerLocked(DependencyError):
    """Raised when a locked container or configuration store is modified."""

    pass
