# file: scopekit/injection/runtime_injectable.py

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from scopekit.exceptions import type_name
from scopekit.host import Component
from scopekit.injection.event_bus import ServiceRegisteredEvent, ServiceRegistrationEventBus, event_bus as default_event_bus
from scopekit.injection.injector import MemberInjector, injector as default_injector
from scopekit.injection.introspection import MemberDescriptor


class RuntimeInjectable(Component):
    """
    Base class for components whose dependencies may be registered after
    they are created.

    On attach, every tagged member that is still empty is either injected
    right away (if its scope can already resolve it) or gets a one-shot
    subscription on the registration bus. When a matching scope registers
    the service, that member alone is injected and the subscription is
    dropped. Destroying the component drops whatever is still pending.
    """

    def __init__(self, injector: Optional[MemberInjector] = None,
                 event_bus: Optional[ServiceRegistrationEventBus] = None):
        super().__init__()
        self._runtime_injector = injector if injector is not None else default_injector
        self._runtime_event_bus = event_bus if event_bus is not None else default_event_bus
        # Maps member attribute -> (service type, callback)
        self._runtime_subscriptions: Dict[str, Tuple[Any, Callable]] = {}
        self._runtime_scope = None
        self._runtime_initialized = False
        self._runtime_logger = logging.getLogger(self.__class__.__name__)

    @property
    def pending_members(self) -> List[str]:
        """Members still waiting for their service."""
        return list(self._runtime_subscriptions.keys())

    def on_attach(self):
        self.initialize_runtime_injection()

    def on_destroy(self):
        self.unsubscribe_all()

    def initialize_runtime_injection(self):
        if self._runtime_initialized:
            return
        self._runtime_initialized = True

        self._runtime_scope = self._runtime_injector.resolve_scope_for(self)
        self._subscribe_to_missing_services()

    def check_for_runtime_injection(self):
        """Rescans the tagged members, e.g. after some were cleared."""
        if not self._runtime_initialized:
            self.initialize_runtime_injection()
            return
        self._subscribe_to_missing_services()

    def _subscribe_to_missing_services(self):
        for member in self._runtime_injector.introspector.describe_injectables(type(self)):
            if not member.has_setter:
                continue
            if member.get_value(self) is not None:
                continue
            self._subscribe_to_service(member)

    def _target_scope(self, member: MemberDescriptor):
        if member.use_global:
            return self._runtime_injector.directory.global_scope
        return self._runtime_scope

    def _subscribe_to_service(self, member: MemberDescriptor):
        _, found = self._runtime_injector.try_get_service(self._target_scope(member), member.service_type)
        if found:
            self._try_inject_member(member)
            return

        if member.attribute in self._runtime_subscriptions:
            return

        def callback(event: ServiceRegisteredEvent):
            # Accept registrations from any scope this member would resolve
            # through (own scope, ancestors, scene, global), not only the
            # exact scope: an outer registration is just as visible to get().
            # Building the chain may bootstrap a scene scope or create the
            # global scope; both happen at most once.
            target_scope = self._target_scope(member)
            if target_scope is None or event.scope not in target_scope.resolution_chain():
                return
            self._try_inject_member(member)
            self._unsubscribe_from_service(member.attribute)

        self._runtime_event_bus.subscribe(member.service_type, callback)
        self._runtime_subscriptions[member.attribute] = (member.service_type, callback)
        self._runtime_logger.debug(
            f"Waiting for {type_name(member.service_type)} to inject {type(self).__name__}.{member.name}"
        )

    def _try_inject_member(self, member: MemberDescriptor) -> bool:
        if member.get_value(self) is not None:
            return False
        if not self._runtime_injector.inject_member(self, member, self._target_scope(member)):
            return False
        self.on_service_injected(member, member.service_type, member.get_value(self))
        return True

    def _unsubscribe_from_service(self, attribute: str):
        subscription = self._runtime_subscriptions.pop(attribute, None)
        if subscription is None:
            return
        service_type, callback = subscription
        self._runtime_event_bus.unsubscribe(service_type, callback)

    def unsubscribe_all(self):
        for attribute in list(self._runtime_subscriptions.keys()):
            self._unsubscribe_from_service(attribute)

    def on_service_injected(self, member: MemberDescriptor, service_type: Any, service: Any):
        """Hook called after a member was injected at runtime."""
        self._runtime_logger.debug(
            f"Runtime injected {type_name(service_type)} into {type(self).__name__}.{member.name}"
        )
