# file: scopekit/registry.py

import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from scopekit.exceptions import (
    DuplicateServiceRegistrationError,
    ServiceNotFoundError,
    ServiceTypeMismatchError,
    type_name,
)


def is_instance_of(instance: Any, service_type: Any) -> bool:
    """
    isinstance() that tolerates types it cannot check (e.g. protocols that
    are not runtime_checkable, or typing constructs). Those are accepted.
    """
    try:
        return isinstance(instance, service_type)
    except TypeError:
        return True


class ServiceRegistry:
    """
    A type-keyed, single-instance service store.

    Every Scope owns exactly one registry. Entries are insertion-only:
    the first instance registered for a type wins and later attempts are
    reported, never applied.
    """
    def __init__(self):
        # Maps service type -> instance, in registration order
        self._services: Dict[Any, Any] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def services(self) -> List[Any]:
        """All registered instances, in registration order."""
        return list(self._services.values())

    @property
    def service_types(self) -> List[Any]:
        return list(self._services.keys())

    def register(self, instance: Any, service_type: Optional[Type] = None) -> bool:
        """
        Registers an instance under a service type.

        Args:
            instance: The service instance. Must not be None.
            service_type: The key to register under. Defaults to the
                          instance's concrete class. Registering under an
                          interface (ABC or runtime protocol) lets consumers
                          depend on the abstraction.

        Returns:
            bool: True if the instance was stored, False if another instance
                  already owns the type (the conflict is logged).
        """
        if instance is None:
            raise ValueError("Service instance cannot be None.")

        if service_type is None:
            service_type = type(instance)
        elif not is_instance_of(instance, service_type):
            raise ServiceTypeMismatchError(
                f"Instance of {type_name(type(instance))} does not implement "
                f"{type_name(service_type)}."
            )

        if service_type in self._services:
            self.logger.error(str(DuplicateServiceRegistrationError(service_type)))
            return False

        self._services[service_type] = instance
        self.logger.debug(f"Registered {type_name(service_type)}")
        return True

    def get(self, service_type: Any) -> Any:
        """Returns the stored instance or raises ServiceNotFoundError."""
        if service_type in self._services:
            return self._services[service_type]
        raise ServiceNotFoundError(service_type)

    def try_get(self, service_type: Any) -> Tuple[Optional[Any], bool]:
        """Same lookup as get(), but returns (None, False) instead of raising."""
        try:
            return self._services[service_type], True
        except (KeyError, TypeError):
            # TypeError: unhashable "types" are simply not registered
            return None, False

    def __getitem__(self, service_type: Any) -> Any:
        """Allows dictionary-style access, e.g., registry[AudioService]"""
        return self.get(service_type)

    def __contains__(self, service_type: Any) -> bool:
        """Allows 'in' check, e.g., AudioService in registry"""
        try:
            return service_type in self._services
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._services)
