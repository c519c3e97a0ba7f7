"""Service Registry - Named, lazily built dependencies.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from roadrouter_core.errors import (
    DuplicateServiceName,
    InvalidServiceName,
    ReservedServiceName,
    ServiceNotFound,
)

logger = logging.getLogger(__name__)

ServiceFactory = Callable[..., Any]


class ServiceRegistry:
    """Name to factory map injected into route handlers.

    Factories are never invoked at registration or scoping time; each
    ``get`` call runs the factory again, so a factory that should hand
    out a singleton has to cache it itself.

    Unlike routes, a name can be registered only once.

    Usage:
        services = ServiceRegistry()
        services.register("db", lambda: connect("sqlite://"))
        services.register("mailer", make_mailer)

        scoped = services.only(["db"])
        scoped.get("db")      # runs the factory
        scoped.get("mailer")  # ServiceNotFound
    """

    RESERVED_NAMES: FrozenSet[str] = frozenset()

    def __init__(self, services: Optional[Dict[str, ServiceFactory]] = None):
        self._services: Dict[str, ServiceFactory] = {}
        for name, factory in (services or {}).items():
            self.register(name, factory)

    def register(self, name: str, factory: ServiceFactory) -> "ServiceRegistry":
        """Register a service.

        Args:
            name: Service name (no whitespace, not a registry attribute)
            factory: Callable building the service

        Raises:
            InvalidServiceName: Empty name or name with whitespace
            ReservedServiceName: Name shadows a registry attribute
            DuplicateServiceName: Name already registered
        """
        if not isinstance(name, str):
            raise InvalidServiceName(
                f"Service name must be a string, got {type(name).__name__}"
            )
        if not name or any(char.isspace() for char in name):
            raise InvalidServiceName(
                f"Whitespace not allowed in service name {name!r}"
                if name else "Service name cannot be empty"
            )
        if name in self.RESERVED_NAMES:
            raise ReservedServiceName(
                f"{name!r} is a reserved name of {type(self).__name__}"
            )
        if name in self._services:
            raise DuplicateServiceName(f"Service {name!r} is already registered")
        if not callable(factory):
            raise TypeError(f"Factory for service {name!r} must be callable")

        self._services[name] = factory
        logger.debug(f"Registered service {name!r}")
        return self

    def unregister(self, *names: str) -> "ServiceRegistry":
        """Remove services by name (unknown names are ignored)."""
        for name in names:
            self._services.pop(name, None)
        return self

    def has(self, name: str) -> bool:
        """Check if a service exists."""
        return name in self._services

    def get(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Build a service.

        Extra arguments are passed to the factory.

        Raises:
            ServiceNotFound: Name not registered
        """
        factory = self._services.get(name)
        if factory is None:
            raise ServiceNotFound(f"Service {name!r} was not found")
        return factory(*args, **kwargs)

    def find(self, name: str, *args: Any, **kwargs: Any) -> Tuple[Any, bool]:
        """Build a service if registered.

        Returns:
            Tuple of (service, True), or (None, False) when missing
        """
        if name not in self._services:
            return None, False
        return self._services[name](*args, **kwargs), True

    def only(self, names: Iterable[str]) -> "ServiceRegistry":
        """Scoped copy holding the registered services among names.

        The original registry is not modified and no factory is invoked.
        """
        wanted = set(names)
        scoped = type(self)()
        scoped._services = {
            name: factory
            for name, factory in self._services.items()
            if name in wanted
        }
        return scoped

    def all(self) -> Dict[str, ServiceFactory]:
        """Copy of the name to factory map."""
        return dict(self._services)

    def keys(self) -> List[str]:
        """Registered service names."""
        return list(self._services)

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __iter__(self) -> Iterator[str]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)

    def __repr__(self) -> str:
        return f"ServiceRegistry({self.keys()!r})"


ServiceRegistry.RESERVED_NAMES = frozenset(
    name for name in dir(ServiceRegistry) if not name.startswith("_")
)


__all__ = [
    "ServiceRegistry",
    "ServiceFactory",
]
