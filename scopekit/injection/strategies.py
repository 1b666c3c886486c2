# file: scopekit/injection/strategies.py

import abc
import logging
from enum import Enum
from typing import Any, Union

from scopekit.exceptions import InjectionError, NoSetterError, type_name

# Get a logger for this module
logger = logging.getLogger(__name__)


def _scope_name(scope: Any) -> str:
    return getattr(scope, "name", None) or "Unknown"


def _target_name(target: Any) -> str:
    return type(target).__name__ if target is not None else "Unknown"


class InjectionErrorStrategy(abc.ABC):
    """
    Abstract base class for injection error handling strategies.
    Decides whether a member that cannot be injected stops the pass.
    """

    @abc.abstractmethod
    def handle_injection_error(self, target: Any, member: Any, service_type: Any, scope: Any):
        """
        Called when a tagged member's service is not registered anywhere in
        the resolving scope's chain.

        Args:
            target: The object being injected.
            member: The MemberDescriptor that failed.
            service_type: The declared type that was looked up.
            scope: The scope the lookup started from.
        """
        pass

    @abc.abstractmethod
    def handle_no_setter_error(self, target: Any, member: Any):
        """Called for a tagged property that has no setter."""
        pass


class WarnStrategy(InjectionErrorStrategy):
    """
    Logs a warning and lets the injector carry on with the next member.
    Every tagged member is attempted.
    """

    def handle_injection_error(self, target, member, service_type, scope):
        logger.warning(
            f"Could not inject {type_name(service_type)} into {_target_name(target)}.{member.name}. "
            f"Service not registered in scope '{_scope_name(scope)}'."
        )

    def handle_no_setter_error(self, target, member):
        logger.warning(
            f"Property {_target_name(target)}.{member.name} is tagged for injection but has no setter. Skipping."
        )


class ThrowStrategy(InjectionErrorStrategy):
    """
    Raises on the first failure, aborting the rest of the injection pass.
    Members after the failing one stay untouched.
    """

    def handle_injection_error(self, target, member, service_type, scope):
        raise InjectionError(
            f"Failed to inject service of type {type_name(service_type)} into "
            f"{_target_name(target)}.{member.name}. Service not registered in scope "
            f"'{_scope_name(scope)}'. Make sure the service is registered before injection occurs.",
            target=target, member=member, service_type=service_type, scope=scope
        )

    def handle_no_setter_error(self, target, member):
        raise NoSetterError(
            f"Property {_target_name(target)}.{member.name} is tagged for injection but has no setter. "
            f"Add a setter to enable dependency injection.",
            target=target, member=member, service_type=member.service_type
        )


class StrategyMode(Enum):
    WARNING = "warning"
    THROW = "throw"


def strategy_for_mode(mode: Union[StrategyMode, str]) -> InjectionErrorStrategy:
    """
    Factory function to create the strategy named in configuration.
    Unknown modes fall back to the warning strategy.
    """
    try:
        mode = StrategyMode(mode.lower() if isinstance(mode, str) else mode)
    except ValueError:
        logger.warning(f"Unknown injection error strategy: {mode}. Defaulting to 'warning'.")
        return WarnStrategy()

    if mode is StrategyMode.THROW:
        return ThrowStrategy()
    return WarnStrategy()
