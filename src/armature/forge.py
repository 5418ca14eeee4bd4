"""Construction of configured instances.

The :class:`Forge` builds objects from three layers of constructor arguments,
in increasing precedence: the constructor's declared defaults, the unified
configuration inherited along the type's ancestry, and call-time overrides.
Deferred values among the chosen arguments are resolved just before the
constructor is called. Setters are then applied in the same way.
"""

import logging
from typing import Any, Mapping, Optional

from armature.class_config import ClassConfigStore
from armature.deferred import resolve_value
from armature.domain import TypeDescriptor
from armature.errors import MissingRequiredParameter, UnknownSetterMethod
from armature.resolution import ResolutionContext, ResolutionStep, entering
from armature.type_registry import TypeId, TypeRegistry

__all__ = ["Forge"]

logger = logging.getLogger(__name__)


class Forge:
    """Build configured instances of types on demand. Nothing is cached."""

    def __init__(self, types: TypeRegistry, config: ClassConfigStore):
        self._types = types
        self._config = config

    def new_instance(
        self,
        context: ResolutionContext,
        type_id: TypeId,
        params: Optional[Mapping[str, Any]] = None,
        setters: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Construct and configure a new instance of a type.

        Args:
            context: Used to resolve deferred arguments and setter values.
            type_id: The type to construct.
            params: Constructor parameter overrides.
            setters: Setter overrides, keyed by method name.

        Returns:
            The newly constructed instance.

        Raises:
            TypeNotConstructible: If the type cannot be described.
            MissingRequiredParameter: If a required parameter has no value.
            UnknownSetterMethod: If a configured setter does not exist.
            CyclicDependency: If the type is already being constructed on the
                active resolution path.
        """
        descriptor = self._types.describe(type_id)

        with entering(ResolutionStep.of_type(descriptor.type_id)):
            chosen = self._choose_arguments(descriptor, params or {})
            instance = self._construct(descriptor, chosen, context)

            unified_setters = self._config.setters_along(descriptor.ancestry)
            unified_setters.update(setters or {})
            for method_name, value in unified_setters.items():
                _apply_setter(descriptor, instance, method_name, value, context)

        logger.debug("Constructed new instance of %s", descriptor.type_id)
        return instance

    def _choose_arguments(
        self, descriptor: TypeDescriptor, overrides: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Pick the value of each constructor parameter by precedence.

        No value is resolved here, so a missing parameter leaves nothing built.
        """
        signature = descriptor.signature
        unified = self._config.params_along(descriptor.ancestry)

        chosen: dict[str, Any] = {}
        missing = []
        for parameter in signature.parameters:
            if parameter.name in overrides:
                chosen[parameter.name] = overrides[parameter.name]
            elif parameter.name in unified:
                chosen[parameter.name] = unified[parameter.name]
            elif parameter.has_default:
                chosen[parameter.name] = parameter.default
            else:
                missing.append(parameter.name)

        if missing:
            raise MissingRequiredParameter(descriptor.type_id, missing)

        extra = {**unified, **overrides}.keys() - set(signature.names)
        if extra and signature.accepts_extra_keywords:
            for name in extra:
                chosen[name] = overrides[name] if name in overrides else unified[name]
        elif extra:
            logger.debug(
                "Ignoring values for %s, which %s does not accept",
                sorted(extra),
                descriptor.type_id,
            )

        return chosen

    def _construct(
        self,
        descriptor: TypeDescriptor,
        chosen: dict[str, Any],
        context: ResolutionContext,
    ) -> Any:
        resolved = {name: resolve_value(value, context) for name, value in chosen.items()}

        positional = [
            resolved.pop(parameter.name)
            for parameter in descriptor.signature.parameters
            if parameter.is_positional_only
        ]
        return descriptor.factory(*positional, **resolved)


def _apply_setter(
    descriptor: TypeDescriptor,
    instance: Any,
    method_name: str,
    value: Any,
    context: ResolutionContext,
):
    method = getattr(instance, method_name, None)
    if method is None or not callable(method):
        raise UnknownSetterMethod(descriptor.type_id, method_name)
    method(resolve_value(value, context))
