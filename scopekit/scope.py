# file: scopekit/scope.py

import logging
from typing import Any, List, Optional, Tuple, Type, TypeVar

from scopekit.directory import ScopeDirectory, ScopeKind, directory as default_directory
from scopekit.exceptions import ServiceNotFoundError
from scopekit.host import Component
from scopekit.injection.event_bus import ServiceRegistrationEventBus, event_bus as default_event_bus
from scopekit.lifecycle import DestroyManager, TickPhase, UpdateManager
from scopekit.registry import ServiceRegistry

T = TypeVar("T")


class Scope(Component):
    """
    A resolution context: one service registry plus the lifecycle
    dispatchers for the services registered in it.

    Scopes are attached to host nodes. Lookups that miss locally continue
    up the chain: nearest ancestor scope -> scene scope -> global scope,
    first hit wins.
    """

    def __init__(self, name: Optional[str] = None,
                 directory: Optional[ScopeDirectory] = None,
                 event_bus: Optional[ServiceRegistrationEventBus] = None):
        super().__init__()
        self._name = name
        self.directory = directory if directory is not None else default_directory
        self.event_bus = event_bus if event_bus is not None else default_event_bus

        self.registry = ServiceRegistry()
        self.update_manager = UpdateManager()
        self.destroy_manager = DestroyManager()

        self._torn_down = False
        self.logger = logging.getLogger(self.__class__.__name__)

    def __repr__(self):
        return f"Scope({self.name!r}, {self.kind.value})"

    @property
    def name(self) -> str:
        if self._name:
            return self._name
        if self.node is not None:
            return self.node.name
        return f"Scope@{id(self):x}"

    @property
    def kind(self) -> ScopeKind:
        return self.directory.kind_of(self)

    @property
    def is_global(self) -> bool:
        return self.directory.is_global(self)

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    # --- Configuration ---

    def configure_as_global(self) -> bool:
        """Claims the global identity. Conflicts are logged, never raised."""
        return self.directory.claim_global(self)

    def configure_for_scene(self) -> bool:
        """Binds this scope to its node's scene. Conflicts are logged, never raised."""
        return self.directory.bind_scene(self, self.scene)

    # --- Registration ---

    def register(self, instance: Any, service_type: Optional[type] = None) -> "Scope":
        """
        Registers a service in this scope and announces it on the
        registration bus. Returns self so calls can be chained.
        """
        self._register_service(instance, service_type)
        return self

    def register_updatable(self, instance: Any, service_type: Optional[type] = None) -> "Scope":
        self._register_for_phase(TickPhase.UPDATE, instance, service_type)
        return self

    def register_fixed_updatable(self, instance: Any, service_type: Optional[type] = None) -> "Scope":
        self._register_for_phase(TickPhase.FIXED_UPDATE, instance, service_type)
        return self

    def register_late_updatable(self, instance: Any, service_type: Optional[type] = None) -> "Scope":
        self._register_for_phase(TickPhase.LATE_UPDATE, instance, service_type)
        return self

    def register_destroyable(self, instance: Any, service_type: Optional[type] = None) -> "Scope":
        # Validate before touching the registry: both registrations or neither
        self.destroy_manager.check_capability(instance, service_type)
        if self._register_service(instance, service_type):
            self.destroy_manager.register(instance, service_type)
        return self

    def _register_for_phase(self, phase: TickPhase, instance: Any, service_type: Optional[type]):
        self.update_manager.check_capability(phase, instance, service_type)
        if self._register_service(instance, service_type):
            self.update_manager.register(phase, instance, service_type)

    def _register_service(self, instance: Any, service_type: Optional[type]) -> bool:
        if service_type is None:
            service_type = type(instance)
        if not self.registry.register(instance, service_type):
            return False
        self.event_bus.publish(service_type, instance, self)
        return True

    # --- Resolution ---

    def get(self, service_type: Type[T]) -> T:
        """
        Resolves a service through the scope chain.
        Raises ServiceNotFoundError if no scope in the chain has it.
        """
        service, found = self.registry.try_get(service_type)
        if found:
            return service

        parent = self.parent_scope()
        if parent is not None:
            return parent.get(service_type)

        raise ServiceNotFoundError(service_type, self.name)

    def try_get(self, service_type: Type[T]) -> Tuple[Optional[T], bool]:
        """Resolves a service through the scope chain. Never raises."""
        service, found = self.registry.try_get(service_type)
        if found:
            return service, True

        parent = self.parent_scope()
        if parent is not None:
            return parent.try_get(service_type)

        return None, False

    def parent_scope(self) -> Optional["Scope"]:
        """
        The next scope in the resolution chain:
        None for the global scope, else the nearest ancestor node owning a
        scope, else the scope serving this scope's scene (or the global).
        """
        if self.is_global:
            return None

        if self.node is not None and self.node.parent is not None:
            ancestor = self.node.parent.get_component_in_parent(Scope)
            if ancestor is not None:
                return ancestor

        return self.directory.scope_for_scene(self.scene, requester=self)

    def resolution_chain(self) -> List["Scope"]:
        """Every scope a lookup from here would consult, in order."""
        chain = [self]
        parent = self.parent_scope()
        while parent is not None and parent not in chain:
            chain.append(parent)
            parent = parent.parent_scope()
        return chain

    # --- Host notifications ---

    def on_tick(self, phase: TickPhase, delta_time: float):
        self.update_manager.tick(phase, delta_time)

    def update(self, delta_time: float):
        self.update_manager.update_all(delta_time)

    def fixed_update(self, delta_time: float):
        self.update_manager.fixed_update_all(delta_time)

    def late_update(self, delta_time: float):
        self.update_manager.late_update_all(delta_time)

    def on_destroy(self):
        self.teardown()

    def teardown(self):
        """
        Runs the teardown handles once, then releases this scope's global or
        scene identity. Later calls are ignored.
        """
        if self._torn_down:
            return
        self._torn_down = True
        self.logger.debug(f"Tearing down {self.name}")
        try:
            self.destroy_manager.destroy_all()
        finally:
            self.directory.release(self)
