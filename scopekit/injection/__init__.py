# file: scopekit/injection/__init__.py

from scopekit.injection.attributes import Inject, inject
from scopekit.injection.event_bus import ServiceRegisteredEvent, ServiceRegistrationEventBus
from scopekit.injection.injector import MemberInjector
from scopekit.injection.introspection import (
    Introspector,
    ManualIntrospector,
    MemberDescriptor,
    MemberKind,
    ReflectiveIntrospector,
)
from scopekit.injection.runtime_injectable import RuntimeInjectable
from scopekit.injection.strategies import (
    InjectionErrorStrategy,
    StrategyMode,
    ThrowStrategy,
    WarnStrategy,
    strategy_for_mode,
)

__all__ = [
    "Inject",
    "inject",
    "ServiceRegisteredEvent",
    "ServiceRegistrationEventBus",
    "MemberInjector",
    "Introspector",
    "ManualIntrospector",
    "MemberDescriptor",
    "MemberKind",
    "ReflectiveIntrospector",
    "RuntimeInjectable",
    "InjectionErrorStrategy",
    "StrategyMode",
    "ThrowStrategy",
    "WarnStrategy",
    "strategy_for_mode",
]
