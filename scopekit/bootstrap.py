# file: scopekit/bootstrap.py

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from scopekit.host import Component, Scene
from scopekit.scope import Scope


class Bootstrapper(Component, ABC):
    """
    Configures the Scope living on the same node, at most once.

    Subclasses implement bootstrap() to claim an identity for the scope and
    may override configure_services() to register the scope's services.
    A bootstrapper that finishes its work later (e.g. after the host has
    loaded something) sets defer_completion and calls
    mark_bootstrap_complete() itself.
    """

    defer_completion = False

    def __init__(self):
        super().__init__()
        self._scope: Optional[Scope] = None
        self._has_been_bootstrapped = False
        self._is_bootstrap_complete = False
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def scope(self) -> Optional[Scope]:
        """The scope on this bootstrapper's node (added if the node has none)."""
        if self._scope is None and self.node is not None:
            self._scope = self.node.get_component(Scope) or self.node.add_component(Scope())
        return self._scope

    @property
    def is_bootstrap_complete(self) -> bool:
        return self._is_bootstrap_complete

    @property
    def has_been_bootstrapped(self) -> bool:
        return self._has_been_bootstrapped

    def bootstrap_on_demand(self):
        """Runs the bootstrap once. Further calls do nothing."""
        if self._has_been_bootstrapped:
            return
        if self.scope is None:
            raise RuntimeError(f"{type(self).__name__} must be attached to a node before bootstrapping.")

        self._has_been_bootstrapped = True
        self._is_bootstrap_complete = False

        self.bootstrap()
        self.configure_services(self.scope)

        if not self._is_bootstrap_complete and not self.defer_completion:
            self.mark_bootstrap_complete()

    @abstractmethod
    def bootstrap(self):
        """Claims the scope's identity (global, scene, ...)."""
        pass

    def configure_services(self, scope: Scope):
        """Hook for registering services. Optional to implement."""
        pass

    def mark_bootstrap_complete(self):
        if self._is_bootstrap_complete:
            return
        self._is_bootstrap_complete = True
        self.on_bootstrap_complete()

    def on_bootstrap_complete(self):
        pass


class GlobalBootstrapper(Bootstrapper):
    """Bootstrapper for the scope whose services outlive any single scene."""

    def bootstrap(self):
        self.scope.configure_as_global()


class SceneBootstrapper(Bootstrapper):
    """
    Bootstrapper for a scene's scope. When it reports completion, the
    orchestrator sweeps the scene and injects every live object once.
    """

    def bootstrap(self):
        self.scope.configure_for_scene()

    def on_bootstrap_complete(self):
        from scopekit.orchestrator import orchestrator

        self.logger.debug(f"Scene scope {self.scope.name} configured.")
        orchestrator.configuration_complete(self.scope)


def bootstrap_scene(scene: Scene) -> List[Bootstrapper]:
    """Bootstraps every bootstrapper found in a scene, roots first."""
    bootstrappers = []
    for node in scene.all_nodes():
        for bootstrapper in node.get_components(Bootstrapper):
            bootstrapper.bootstrap_on_demand()
            bootstrappers.append(bootstrapper)
    return bootstrappers
