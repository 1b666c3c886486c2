# file: scopekit/injection/injector.py

import logging
from typing import Any, Optional, Tuple

from scopekit.directory import ScopeDirectory, directory as default_directory
from scopekit.exceptions import NullTargetError, type_name
from scopekit.injection.introspection import Introspector, MemberDescriptor, ReflectiveIntrospector
from scopekit.injection.strategies import InjectionErrorStrategy, WarnStrategy


class MemberInjector:
    """
    Populates an object's tagged fields and properties from a scope.

    Members that already hold a value are left alone, so injecting twice
    (or after a partial manual injection) is harmless. What happens when a
    service is missing is up to the active error strategy.
    """

    def __init__(self, directory: Optional[ScopeDirectory] = None,
                 introspector: Optional[Introspector] = None):
        self.directory = directory if directory is not None else default_directory
        self.introspector = introspector if introspector is not None else ReflectiveIntrospector()
        self._error_strategy: InjectionErrorStrategy = WarnStrategy()
        self.logger = logging.getLogger(self.__class__.__name__)

    def set_error_strategy(self, strategy: Optional[InjectionErrorStrategy]):
        """Swaps the process-wide error strategy. None restores the warning strategy."""
        self._error_strategy = strategy if strategy is not None else WarnStrategy()

    def get_error_strategy(self) -> InjectionErrorStrategy:
        return self._error_strategy

    def resolve_scope_for(self, target: Any):
        return self.directory.scope_for(target)

    def inject(self, target: Any, scope=None) -> int:
        """
        Injects every tagged member of target, inherited and private ones
        included.

        Args:
            target: The object to populate. None fails fast.
            scope: Scope to resolve from. Defaults to the target's own
                   scope (nearest ancestor -> scene -> global).

        Returns:
            int: The number of members written.
        """
        if target is None:
            raise NullTargetError("Target is None, cannot inject dependencies.")

        if scope is None:
            scope = self.resolve_scope_for(target)

        injected = 0
        for member in self.introspector.describe_injectables(type(target)):
            if self.inject_member(target, member, scope):
                injected += 1
        return injected

    def inject_member(self, target: Any, member: MemberDescriptor, scope=None) -> bool:
        """Injects a single member. Returns True if a value was written."""
        if target is None:
            raise NullTargetError("Target is None, cannot inject dependencies.")

        if not member.has_setter:
            self._error_strategy.handle_no_setter_error(target, member)
            return False

        if member.get_value(target) is not None:
            return False

        if member.use_global:
            injection_scope = self.directory.global_scope
        else:
            injection_scope = scope if scope is not None else self.resolve_scope_for(target)

        service, found = self.try_get_service(injection_scope, member.service_type)
        if not found:
            self._error_strategy.handle_injection_error(target, member, member.service_type, injection_scope)
            return False

        member.set_value(target, service)
        self.logger.debug(
            f"Injected {type_name(member.service_type)} into {type(target).__name__}.{member.name}"
        )
        return True

    def try_get_service(self, scope, service_type: Any) -> Tuple[Optional[Any], bool]:
        """Looks a service up through a scope's chain. Never raises."""
        if scope is None:
            return None, False
        try:
            service, found = scope.try_get(service_type)
        except Exception as e:
            self.logger.error(f"Error getting service {type_name(service_type)}: {e}", exc_info=True)
            return None, False
        return service, found and service is not None


# One injector (and therefore one error strategy) for the whole process.
injector = MemberInjector()
