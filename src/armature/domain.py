"""Domain models used throughout the framework."""

import inspect
from dataclasses import dataclass
from typing import Any, Callable

__all__ = ["ConstructorParameter", "ConstructorSignature", "TypeDescriptor"]


@dataclass(frozen=True)
class ConstructorParameter:
    """A single named input to a constructor.

    Attributes:
        name: The parameter name in the constructor signature.
        kind: The :class:`inspect.Parameter` kind; positional-only parameters
            are passed positionally, all others by keyword.
        default: The declared default, or ``inspect.Parameter.empty`` if the
            parameter is required.
    """

    name: str
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    default: Any = inspect.Parameter.empty

    @property
    def has_default(self) -> bool:
        return self.default is not inspect.Parameter.empty

    @property
    def is_positional_only(self) -> bool:
        return self.kind == inspect.Parameter.POSITIONAL_ONLY


@dataclass(frozen=True)
class ConstructorSignature:
    """The ordered inputs of a constructor.

    Attributes:
        parameters: Named parameters in declaration order. Variadic ``*args``
            parameters are never included.
        accepts_extra_keywords: True if the constructor takes ``**kwargs``, in
            which case configured values naming no parameter are passed through.
    """

    parameters: tuple[ConstructorParameter, ...]
    accepts_extra_keywords: bool = False

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(parameter.name for parameter in self.parameters)

    @staticmethod
    def of(target: Callable) -> "ConstructorSignature":
        """Introspect the signature of a class or other callable.

        Raises:
            ValueError: If no signature can be found for ``target``.
            TypeError: If ``target`` is not callable.
        """
        parameters = []
        accepts_extra_keywords = False
        for parameter in inspect.signature(target).parameters.values():
            if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
                continue
            if parameter.kind == inspect.Parameter.VAR_KEYWORD:
                accepts_extra_keywords = True
                continue
            parameters.append(
                ConstructorParameter(parameter.name, parameter.kind, parameter.default)
            )
        return ConstructorSignature(tuple(parameters), accepts_extra_keywords)


@dataclass(frozen=True)
class TypeDescriptor:
    """Everything the forge needs to know to construct a type.

    Attributes:
        type_id: The canonical key of the type, used for configuration lookup.
        factory: The callable invoked to construct an instance; a class or a
            factory function.
        signature: The constructor signature of ``factory``.
        ancestry: Canonical keys of the type's ancestors, most general first,
            ending with ``type_id`` itself.
    """

    type_id: str
    factory: Callable
    signature: ConstructorSignature
    ancestry: tuple[str, ...]
