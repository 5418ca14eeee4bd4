"""Repeatable callables that build a new instance each time they are called."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from armature.deferred import frozen_mapping
from armature.resolution import ResolutionContext
from armature.type_registry import TypeId

__all__ = ["Factory", "FactoryBuilder"]


@dataclass(frozen=True)
class Factory:
    """A callable bound to a type and its overrides.

    Unlike a :class:`~armature.deferred.NewInstance`, a factory is a plain value:
    it can be injected, stored and called any number of times by application
    code, and is never resolved by the forge on the way in.

    Example:
        >>> make_post = container.new_factory(Post, {"status": "draft"})
        >>> first, second = make_post(), make_post(title="Hello")
    """

    context: ResolutionContext = field(repr=False, compare=False)
    type_id: TypeId
    params: Mapping[str, Any] = field(default_factory=dict)
    setters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "params", frozen_mapping(self.params))
        object.__setattr__(self, "setters", frozen_mapping(self.setters))

    def __hash__(self) -> int:
        return hash(
            (self.type_id, tuple(sorted(self.params)), tuple(sorted(self.setters)))
        )

    def __call__(self, **params: Any) -> Any:
        """Build a new instance; keyword arguments override the bound parameters."""
        return self.context.new_instance(
            self.type_id, {**self.params, **params}, self.setters
        )


class FactoryBuilder:
    def __init__(self, context: ResolutionContext):
        self._context = context

    def new_factory(
        self,
        type_id: TypeId,
        params: Optional[Mapping[str, Any]] = None,
        setters: Optional[Mapping[str, Any]] = None,
    ) -> Factory:
        return Factory(self._context, type_id, params or {}, setters or {})
