"""Resolution context and cycle tracking.

Every construction of a type and every first resolution of a service is a
*step* on the active resolution path. The path lives in a context variable, so
it starts empty in each thread and for each top-level request, and steps are
removed as they complete. Entering a step that is already on the path means
the object graph refers back to something still being built.
"""

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Protocol

from armature.errors import CyclicDependency

__all__ = ["ResolutionContext", "ResolutionStep", "active_path", "entering"]


class ResolutionContext(Protocol):
    """What deferred values need in order to resolve themselves."""

    def new_instance(
        self,
        type_id: Any,
        params: Optional[Mapping[str, Any]] = None,
        setters: Optional[Mapping[str, Any]] = None,
    ) -> Any: ...

    def get(self, name: str) -> Any: ...


@dataclass(frozen=True)
class ResolutionStep:
    kind: str
    key: str

    @staticmethod
    def of_type(type_id: str) -> "ResolutionStep":
        return ResolutionStep("type", type_id)

    @staticmethod
    def of_service(name: str) -> "ResolutionStep":
        return ResolutionStep("service", name)

    def __str__(self) -> str:
        return f"{self.kind} '{self.key}'"


_active_path: ContextVar[tuple[ResolutionStep, ...]] = ContextVar(
    "armature_resolution_path", default=()
)


def active_path() -> tuple[ResolutionStep, ...]:
    return _active_path.get()


@contextmanager
def entering(step: ResolutionStep) -> Iterator[None]:
    """Push a step onto the active path for the duration of the block.

    Raises:
        CyclicDependency: If ``step`` is already on the active path.
    """
    path = _active_path.get()
    if step in path:
        cycle_start = path.index(step)
        raise CyclicDependency(path[cycle_start:] + (step,))

    token = _active_path.set(path + (step,))
    try:
        yield
    finally:
        _active_path.reset(token)
