"""Optional helper for wiring a container from configuration classes.

Nothing in the core depends on this module. Application code may equally
create a :class:`~armature.container.Container`, configure it directly and
call :meth:`~armature.container.Container.lock` itself.
"""

import inspect
import logging
from typing import AbstractSet, Iterable, Optional, Union

from armature.container import Container
from armature.type_registry import TypeRegistry

__all__ = ["ContainerConfig", "make_container"]

logger = logging.getLogger(__name__)


class ContainerConfig:
    """A unit of container wiring.

    ``define`` runs while the container is still open and declares services and
    per-type configuration. ``modify`` runs after the container has been
    locked and may fetch services to adjust them.

    Attributes:
        profiles: Profile patterns under which this config is active. No
            patterns means active in all profiles; ``"!name"`` excludes a profile.

    Example:
        >>> class DatabaseConfig(ContainerConfig):
        ...     profiles = ("!test",)
        ...
        ...     def define(self, container):
        ...         container.params[Database]["host"] = "db.internal"
        ...         container.set("database", container.lazy_new(Database))
    """

    profiles: tuple[str, ...] = ()

    @classmethod
    def is_active(cls, active_profiles: AbstractSet[str]) -> bool:
        """Whether this config applies when ``active_profiles`` are selected.

        An excluded profile that is active always wins. Otherwise the config
        applies if it names no profiles, or if any profile it names is active.
        """
        required = {p for p in cls.profiles if not p.startswith("!")}
        excluded = {p[1:] for p in cls.profiles if p.startswith("!")}
        if excluded & active_profiles:
            return False
        return not required or bool(required & active_profiles)

    def define(self, container: Container):
        pass

    def modify(self, container: Container):
        pass


def make_container(
    configs: Iterable[Union[ContainerConfig, type]],
    profiles: Optional[AbstractSet[str]] = None,
    types: Optional[TypeRegistry] = None,
) -> Container:
    """Construct a container and apply configuration to it.

    Every selected config's ``define`` is called in order, the container is
    locked, and then every ``modify`` is called in the same order.

    Args:
        configs: Config instances, or config classes which are constructed by
            the new container itself.
        profiles: An optional set of active profile names used to select
            configs. If None, all configs are applied regardless of profile.
        types: An optional type registry to share with the new container.

    Returns:
        The configured, locked :class:`Container`.

    Raises:
        DependencyError: If a config class cannot be constructed.
    """
    container = Container(types)
    selected = [
        config for config in configs if profiles is None or config.is_active(profiles)
    ]
    instances = [
        container.new_instance(config) if inspect.isclass(config) else config
        for config in selected
    ]

    for config in instances:
        logger.debug("Defining %s", type(config).__name__)
        config.define(container)

    container.lock()

    for config in instances:
        logger.debug("Modifying %s", type(config).__name__)
        config.modify(container)

    return container
