# file: scopekit/host.py
"""
A minimal in-memory host object model.

The scope engine only needs a few things from its host: a node hierarchy,
a scene key per node, a way to enumerate the live objects of a scene, a
per-tick callback and a teardown notification. World / Scene / Node /
Component provide exactly that, and any richer host can mirror the same
surface.
"""
import logging
from typing import Iterator, List, Optional, Type, TypeVar

from scopekit.lifecycle.capabilities import TickPhase

C = TypeVar("C")

logger = logging.getLogger(__name__)


class Component:
    """Base class for objects attached to a Node."""

    def __init__(self):
        self.node: Optional["Node"] = None

    @property
    def scene(self) -> Optional["Scene"]:
        return self.node.scene if self.node is not None else None

    def on_attach(self):
        """Called once, right after the component is added to a node."""
        pass

    def on_destroy(self):
        """Called when the owning node is destroyed."""
        pass


class Node:
    """An element of a scene's object hierarchy."""

    def __init__(self, name: str, scene: Optional["Scene"] = None, parent: Optional["Node"] = None):
        self.name = name
        self.scene: Optional[Scene] = None
        self.parent: Optional[Node] = None
        self.children: List[Node] = []
        self.components: List[object] = []
        self.active = True
        self.destroyed = False

        if parent is not None:
            parent.add_child(self)
        elif scene is not None:
            scene._add_root(self)

    def __repr__(self):
        return f"Node({self.name!r})"

    @property
    def active_in_hierarchy(self) -> bool:
        node = self
        while node is not None:
            if not node.active:
                return False
            node = node.parent
        return True

    def add_child(self, child: "Node") -> "Node":
        """Re-parents child under this node (moving it into this node's scene)."""
        child._detach()
        child.parent = self
        self.children.append(child)
        child._set_scene(self.scene)
        return child

    def add_component(self, component: C) -> C:
        """Attaches a component and sends it its creation notification."""
        if getattr(component, "node", None) is not None:
            raise ValueError(f"{type(component).__name__} is already attached to {component.node!r}")
        component.node = self
        self.components.append(component)
        on_attach = getattr(component, "on_attach", None)
        if callable(on_attach):
            on_attach()
        return component

    def get_component(self, component_type: Type[C]) -> Optional[C]:
        for component in self.components:
            if isinstance(component, component_type):
                return component
        return None

    def get_components(self, component_type: Optional[type] = None) -> List[object]:
        if component_type is None:
            return list(self.components)
        return [c for c in self.components if isinstance(c, component_type)]

    def get_component_in_parent(self, component_type: Type[C]) -> Optional[C]:
        """First matching component on this node or its nearest ancestor."""
        node = self
        while node is not None:
            component = node.get_component(component_type)
            if component is not None:
                return component
            node = node.parent
        return None

    def get_components_in_children(self, component_type: Optional[type] = None,
                                   include_inactive: bool = False) -> List[object]:
        """Matching components on this node and all of its descendants."""
        found = []
        for node in self.walk():
            if not include_inactive and not node.active_in_hierarchy:
                continue
            found.extend(node.get_components(component_type))
        return found

    def walk(self) -> Iterator["Node"]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in list(self.children):
            yield from child.walk()

    def destroy(self):
        """
        Tears the node down: children first, then every component receives
        on_destroy(), then the node leaves its scene.
        """
        if self.destroyed:
            return
        for child in list(self.children):
            child.destroy()
        for component in list(self.components):
            on_destroy = getattr(component, "on_destroy", None)
            if callable(on_destroy):
                on_destroy()
        self.destroyed = True
        self._detach()

    def _detach(self):
        if self.parent is not None:
            self.parent.children.remove(self)
            self.parent = None
        elif self.scene is not None:
            self.scene._remove_root(self)

    def _set_scene(self, scene: Optional["Scene"]):
        for node in self.walk():
            node.scene = scene


class Scene:
    """A partition of the world; the key a scene scope is bound to."""

    def __init__(self, name: str, world: Optional["World"] = None):
        self.name = name
        self.world = world
        self._roots: List[Node] = []

    def __repr__(self):
        return f"Scene({self.name!r})"

    def create_node(self, name: str, parent: Optional[Node] = None) -> Node:
        if parent is not None:
            if parent.scene is not self:
                raise ValueError(f"{parent!r} does not belong to {self!r}")
            return Node(name, parent=parent)
        return Node(name, scene=self)

    def root_nodes(self) -> List[Node]:
        return list(self._roots)

    def all_nodes(self, include_inactive: bool = True) -> List[Node]:
        nodes = []
        for root in list(self._roots):
            for node in root.walk():
                if include_inactive or node.active_in_hierarchy:
                    nodes.append(node)
        return nodes

    def _add_root(self, node: Node):
        node._set_scene(self)
        self._roots.append(node)

    def _remove_root(self, node: Node):
        if node in self._roots:
            self._roots.remove(node)


class World:
    """Owns every scene, including the persistent one that outlives scene unloads."""

    PERSISTENT_SCENE_NAME = "Persistent"

    def __init__(self):
        self.scenes: List[Scene] = []
        self._persistent_scene: Optional[Scene] = None

    @property
    def persistent_scene(self) -> Scene:
        if self._persistent_scene is None:
            self._persistent_scene = self.create_scene(self.PERSISTENT_SCENE_NAME)
        return self._persistent_scene

    def create_scene(self, name: str) -> Scene:
        scene = Scene(name, world=self)
        self.scenes.append(scene)
        return scene

    def unload_scene(self, scene: Scene):
        """Destroys every root node of the scene and forgets it."""
        for root in scene.root_nodes():
            root.destroy()
        if scene in self.scenes:
            self.scenes.remove(scene)
        if scene is self._persistent_scene:
            self._persistent_scene = None
        logger.debug(f"Unloaded {scene!r}")

    def find_first_component(self, component_type: Type[C]) -> Optional[C]:
        for scene in list(self.scenes):
            for node in scene.all_nodes():
                component = node.get_component(component_type)
                if component is not None:
                    return component
        return None

    def tick(self, delta_time: float, fixed_delta_time: Optional[float] = None):
        """
        Runs one frame: every phase is delivered to all active components
        exposing on_tick() before the next phase starts.
        """
        if fixed_delta_time is None:
            fixed_delta_time = delta_time
        for phase in TickPhase:
            phase_delta = fixed_delta_time if phase is TickPhase.FIXED_UPDATE else delta_time
            for scene in list(self.scenes):
                for node in scene.all_nodes(include_inactive=False):
                    for component in list(node.components):
                        on_tick = getattr(component, "on_tick", None)
                        if callable(on_tick):
                            on_tick(phase, phase_delta)
