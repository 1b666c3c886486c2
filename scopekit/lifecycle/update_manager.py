# file: scopekit/lifecycle/update_manager.py

import logging
from typing import Any, Dict, List, Optional

from scopekit.lifecycle.capabilities import TickPhase, require_capability


class UpdateManager:
    """
    Per-tick callback dispatcher with three ordered phases.

    Each phase keeps an insertion-ordered list of handles. The host drives
    the phases; this class never decides when a tick happens.
    """
    def __init__(self):
        self._handles: Dict[TickPhase, List[Any]] = {phase: [] for phase in TickPhase}
        self.logger = logging.getLogger(self.__class__.__name__)

    def check_capability(self, phase: TickPhase, instance: Any, declared_type: Optional[type] = None):
        """Validates a registration without performing it."""
        require_capability(
            instance, phase.capability, declared_type,
            where=f"UpdateManager.register({phase.name})"
        )

    def register(self, phase: TickPhase, instance: Any, declared_type: Optional[type] = None) -> bool:
        """
        Registers an instance for a tick phase.

        Returns:
            bool: False if the same instance was already registered for
                  this phase (the call is then a no-op).
        """
        self.check_capability(phase, instance, declared_type)

        handles = self._handles[phase]
        if any(handle is instance for handle in handles):
            return False

        handles.append(instance)
        self.logger.debug(f"Registered {type(instance).__name__} for {phase.name}")
        return True

    def register_updatable(self, instance: Any, declared_type: Optional[type] = None) -> bool:
        return self.register(TickPhase.UPDATE, instance, declared_type)

    def register_fixed_updatable(self, instance: Any, declared_type: Optional[type] = None) -> bool:
        return self.register(TickPhase.FIXED_UPDATE, instance, declared_type)

    def register_late_updatable(self, instance: Any, declared_type: Optional[type] = None) -> bool:
        return self.register(TickPhase.LATE_UPDATE, instance, declared_type)

    def unregister(self, phase: TickPhase, instance: Any) -> bool:
        """Removes an instance from a phase. Returns False if it was not registered."""
        handles = self._handles[phase]
        for index, handle in enumerate(handles):
            if handle is instance:
                del handles[index]
                return True
        return False

    def handles(self, phase: TickPhase) -> List[Any]:
        """A copy of the handles registered for a phase, in call order."""
        return list(self._handles[phase])

    def tick(self, phase: TickPhase, delta_time: float):
        """
        Calls every handle of a phase once, in registration order.
        Iterates a snapshot, so handles may register or unregister
        others while the phase runs.
        """
        for handle in list(self._handles[phase]):
            getattr(handle, phase.callback_name)(delta_time)

    def update_all(self, delta_time: float):
        self.tick(TickPhase.UPDATE, delta_time)

    def fixed_update_all(self, delta_time: float):
        self.tick(TickPhase.FIXED_UPDATE, delta_time)

    def late_update_all(self, delta_time: float):
        self.tick(TickPhase.LATE_UPDATE, delta_time)
