# file: scopekit/lifecycle/capabilities.py
"""
Lifecycle capabilities a service can expose to its scope.

These are runtime-checkable protocols: any object with the right method
qualifies, no inheritance needed.
"""
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from scopekit.exceptions import CapabilityMismatchError, type_name


@runtime_checkable
class Updatable(Protocol):
    def update(self, delta_time: float) -> None: ...


@runtime_checkable
class FixedUpdatable(Protocol):
    def fixed_update(self, delta_time: float) -> None: ...


@runtime_checkable
class LateUpdatable(Protocol):
    def late_update(self, delta_time: float) -> None: ...


@runtime_checkable
class Destroyable(Protocol):
    def destroy(self) -> None: ...


class TickPhase(Enum):
    """The three per-tick phases, in the order the host runs them."""
    UPDATE = "update"               # pre-physics
    FIXED_UPDATE = "fixed_update"   # physics
    LATE_UPDATE = "late_update"     # post-physics

    @property
    def capability(self) -> type:
        return _PHASE_CAPABILITIES[self]

    @property
    def callback_name(self) -> str:
        return self.value


_PHASE_CAPABILITIES = {
    TickPhase.UPDATE: Updatable,
    TickPhase.FIXED_UPDATE: FixedUpdatable,
    TickPhase.LATE_UPDATE: LateUpdatable,
}


def require_capability(instance: Any, capability: type, declared_type: Any = None, where: str = ""):
    """
    Verifies that both the declared type (if any) and the instance implement
    the capability. Raises CapabilityMismatchError otherwise.
    """
    if instance is None:
        raise ValueError("Service instance cannot be None.")

    if declared_type is not None:
        try:
            declared_ok = issubclass(declared_type, capability)
        except TypeError:
            declared_ok = False
        if not declared_ok:
            raise CapabilityMismatchError(
                f"Invalid argument in {where}: Type '{type_name(declared_type)}' does not "
                f"implement the required interface '{capability.__name__}'."
            )

    if not isinstance(instance, capability):
        raise CapabilityMismatchError(
            f"Service instance of type '{type_name(type(instance))}' does not "
            f"implement {capability.__name__}."
        )
