# file: scopekit/directory.py

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from scopekit.exceptions import DuplicateScopeConfigurationError, ScopeKitError
from scopekit.host import Node, Scene, World

if TYPE_CHECKING:
    from scopekit.scope import Scope


class ScopeKind(Enum):
    GLOBAL = "global"
    SCENE = "scene"
    ANONYMOUS = "anonymous"


class ScopeDirectory:
    """
    Process-wide map of which Scope is global and which Scope is bound to
    which scene.

    At most one scope holds the global identity and at most one scope is
    bound to a given scene. Scopes are located (and, for the global scope and
    unconfigured scene bootstrappers, created) lazily on demand.
    """

    GLOBAL_SCOPE_NAME = "Scope [Global]"

    def __init__(self, world: Optional[World] = None):
        self.world = world if world is not None else World()
        self._global: Optional["Scope"] = None
        self._scene_scopes: Dict[Scene, "Scope"] = {}
        self._release_listeners: List[Callable[["Scope"], Any]] = []
        self.logger = logging.getLogger(self.__class__.__name__)

    def reset(self, world: Optional[World] = None):
        """
        Forgets every binding and installs a fresh world. Used between
        scenario runs (and tests). Release listeners are kept.
        """
        self._global = None
        self._scene_scopes = {}
        self.world = world if world is not None else World()

    # --- Global scope ---

    @property
    def global_scope(self) -> "Scope":
        """
        The global scope. If none is configured yet, the first
        GlobalBootstrapper in the world is bootstrapped; failing that, a
        fresh global node is created and bootstrapped.
        """
        if self._global is not None:
            return self._global

        # Imported here: bootstrap builds on Scope, which builds on this module
        from scopekit.bootstrap import GlobalBootstrapper

        bootstrapper = self.world.find_first_component(GlobalBootstrapper)
        if bootstrapper is not None:
            bootstrapper.bootstrap_on_demand()
            if self._global is not None:
                return self._global

        self.logger.info("No global scope configured. Creating one on demand.")
        container = Node(self.GLOBAL_SCOPE_NAME, scene=self.world.persistent_scene)
        container.add_component(GlobalBootstrapper()).bootstrap_on_demand()
        return self._global

    def peek_global(self) -> Optional["Scope"]:
        """The global scope if one exists. Never creates one."""
        return self._global

    def is_global(self, scope: "Scope") -> bool:
        return scope is not None and scope is self._global

    def claim_global(self, scope: "Scope") -> bool:
        if self._global is scope:
            self.logger.warning(f"{scope.name} is already configured as global.")
            return True
        if self._global is not None:
            error = DuplicateScopeConfigurationError(
                f"Cannot configure {scope.name} as global: "
                f"{self._global.name} is already configured as global."
            )
            self.logger.error(str(error))
            return False
        self._global = scope
        self.logger.debug(f"{scope.name} configured as global.")
        return True

    # --- Scene scopes ---

    def bind_scene(self, scope: "Scope", scene: Optional[Scene]) -> bool:
        if scene is None:
            self.logger.error(f"Cannot configure {scope.name} for a scene: it is not part of any scene.")
            return False
        bound = self._scene_scopes.get(scene)
        if bound is scope:
            self.logger.warning(f"{scope.name} is already configured for {scene!r}.")
            return True
        if bound is not None:
            error = DuplicateScopeConfigurationError(
                f"Cannot configure {scope.name} for {scene!r}: "
                f"{bound.name} is already configured for this scene."
            )
            self.logger.error(str(error))
            return False
        self._scene_scopes[scene] = scope
        self.logger.debug(f"{scope.name} configured for {scene!r}.")
        return True

    def scope_bound_to(self, scene: Optional[Scene]) -> Optional["Scope"]:
        if scene is None:
            return None
        return self._scene_scopes.get(scene)

    def kind_of(self, scope: "Scope") -> ScopeKind:
        if scope is self._global:
            return ScopeKind.GLOBAL
        if any(bound is scope for bound in self._scene_scopes.values()):
            return ScopeKind.SCENE
        return ScopeKind.ANONYMOUS

    def release(self, scope: "Scope"):
        """Drops whatever identity the scope held and notifies listeners."""
        if scope is self._global:
            self._global = None
        else:
            for scene, bound in list(self._scene_scopes.items()):
                if bound is scope:
                    del self._scene_scopes[scene]
        for listener in list(self._release_listeners):
            listener(scope)

    def add_release_listener(self, listener: Callable[["Scope"], Any]):
        if listener not in self._release_listeners:
            self._release_listeners.append(listener)

    # --- Lookup ---

    def scope_for_scene(self, scene: Optional[Scene], requester: Any = None) -> "Scope":
        """
        The scope serving a scene: the bound scene scope, else the scope of
        an unconfigured root-level SceneBootstrapper (bootstrapped now), else
        the global scope. The requester is never returned, so a scene scope
        asking for its own fallback gets the global scope.
        """
        from scopekit.bootstrap import SceneBootstrapper

        if scene is not None:
            bound = self._scene_scopes.get(scene)
            if bound is not None:
                return bound if bound is not requester else self.global_scope

            for root in scene.root_nodes():
                bootstrapper = root.get_component(SceneBootstrapper)
                # Bootstrapped ones either hold the binding or lost the claim
                if bootstrapper is None or bootstrapper.has_been_bootstrapped:
                    continue
                if bootstrapper.scope is requester:
                    continue
                self._bootstrap_for_lookup(bootstrapper)
                bound = self._scene_scopes.get(scene)
                if bound is not None and bound is not requester:
                    return bound

        return self.global_scope

    def _bootstrap_for_lookup(self, bootstrapper):
        """
        Bootstraps a scene scope that a lookup ran into. A failing completion
        sweep is logged here so the lookup itself never raises; explicit
        bootstrap_on_demand() and bootstrap_scene() calls still propagate.
        """
        try:
            bootstrapper.bootstrap_on_demand()
        except ScopeKitError as e:
            self.logger.error(
                f"Bootstrapping {bootstrapper.scope.name} on demand failed: {e}",
                exc_info=True
            )

    def scope_for(self, target: Any) -> "Scope":
        """
        The scope a target resolves from: nearest Scope on the target's node
        or its ancestors, then its scene's scope, then the global scope.
        """
        from scopekit.scope import Scope

        node = target if isinstance(target, Node) else getattr(target, "node", None)
        if node is None:
            return self.global_scope

        scope = node.get_component_in_parent(Scope)
        if scope is not None:
            return scope
        return self.scope_for_scene(node.scene, requester=target)


# One directory for the whole process.
directory = ScopeDirectory()
