# file: scopekit/orchestrator.py

import logging
from typing import Any, List, Optional

from scopekit.bootstrap import Bootstrapper
from scopekit.directory import ScopeDirectory
from scopekit.host import Node
from scopekit.injection.injector import MemberInjector, injector as default_injector
from scopekit.injection.strategies import strategy_for_mode
from scopekit.scope import Scope
from scopekit.utils.config_loader import ConfigLoader


class InjectionOrchestrator:
    """
    Sweeps a scope's scene once its configuration is complete and injects
    every live object found there.

    Each scope is swept at most once until it is re-triggered with
    reinject_scope() (or released from the directory).
    """

    def __init__(self, injector: Optional[MemberInjector] = None,
                 directory: Optional[ScopeDirectory] = None):
        self.injector = injector if injector is not None else default_injector
        self.directory = directory if directory is not None else self.injector.directory
        self.logger = logging.getLogger(self.__class__.__name__)

        self.inject_inactive_objects = False
        self.inject_children = True

        # Scopes are compared by identity
        self._injected_scopes: List[Scope] = []
        self.directory.add_release_listener(self.forget)

    def configure(self, config_loader: ConfigLoader):
        """Applies the injection and orchestrator sections of the configuration."""
        injection_config = config_loader.section("injection")
        orchestrator_config = config_loader.section("orchestrator")

        mode = injection_config.get("error_strategy", "warning")
        self.injector.set_error_strategy(strategy_for_mode(mode))
        self.inject_inactive_objects = bool(orchestrator_config.get("inject_inactive_objects", False))
        self.inject_children = bool(orchestrator_config.get("inject_children", True))
        self.logger.info(
            f"Orchestrator configured: error_strategy={mode}, "
            f"inject_inactive_objects={self.inject_inactive_objects}, inject_children={self.inject_children}"
        )

    def is_injected(self, scope: Scope) -> bool:
        return any(injected is scope for injected in self._injected_scopes)

    def forget(self, scope: Scope):
        self._injected_scopes = [s for s in self._injected_scopes if s is not scope]

    def reset(self):
        self._injected_scopes = []
        self.inject_inactive_objects = False
        self.inject_children = True

    def configuration_complete(self, scope: Scope) -> int:
        """
        Signal from the bootstrap side that the scope is fully configured.
        Performs the one-time sweep; returns how many objects were injected.
        """
        if self.is_injected(scope):
            self.logger.debug(f"Scope {scope.name} already injected. Skipping sweep.")
            return 0
        return self._sweep(scope)

    def reinject_scope(self, scope: Scope) -> int:
        """Clears the scope's 'already injected' flag and sweeps again."""
        self.forget(scope)
        return self._sweep(scope)

    def reinject_object(self, node: Optional[Node]) -> int:
        """Injects the components of one node (and its children if configured)."""
        if node is None:
            return 0

        if self.inject_children:
            components = node.get_components_in_children(include_inactive=self.inject_inactive_objects)
        else:
            components = node.get_components()

        injected_count = 0
        for component in components:
            if self._is_injectable(component):
                self.injector.inject(component)
                injected_count += 1
        return injected_count

    def _sweep(self, scope: Scope) -> int:
        scene = scope.scene
        if scene is None:
            self.logger.warning(f"Scope {scope.name} is not part of a scene. Injection skipped.")
            return 0

        injected_count = 0
        for node in scene.all_nodes(include_inactive=self.inject_inactive_objects):
            for component in node.get_components():
                if not self._is_injectable(component):
                    continue
                # Each object resolves from its own nearest scope
                self.injector.inject(component)
                injected_count += 1

        self._injected_scopes.append(scope)
        self.logger.info(f"Injected dependencies into {injected_count} components in scene '{scene.name}'")
        return injected_count

    @staticmethod
    def _is_injectable(component: Any) -> bool:
        return component is not None and not isinstance(component, (Scope, Bootstrapper))


# One orchestrator for the whole process.
orchestrator = InjectionOrchestrator()
