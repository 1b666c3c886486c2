# file: scopekit/lifecycle/destroy_manager.py

import logging
from typing import Any, List, Optional

from scopekit.lifecycle.capabilities import Destroyable, require_capability


class DestroyManager:
    """Teardown-callback dispatcher. Handles are called in registration order."""

    def __init__(self):
        self._destroyables: List[Any] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def handles(self) -> List[Any]:
        return list(self._destroyables)

    def check_capability(self, instance: Any, declared_type: Optional[type] = None):
        require_capability(
            instance, Destroyable, declared_type,
            where="DestroyManager.register"
        )

    def register(self, instance: Any, declared_type: Optional[type] = None) -> bool:
        """Registers a teardown handle. The same instance twice is a no-op."""
        self.check_capability(instance, declared_type)

        if any(handle is instance for handle in self._destroyables):
            return False

        self._destroyables.append(instance)
        return True

    def destroy_all(self):
        """
        Calls destroy() on every handle.
        NOTE: not idempotent; the owning Scope makes sure this runs once.
        """
        handles = list(self._destroyables)
        self.logger.debug(f"Destroying {len(handles)} handle(s)")
        for handle in handles:
            handle.destroy()
