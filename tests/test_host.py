# file: tests/test_host.py

import pytest

from scopekit.host import Component, World
from scopekit.lifecycle import TickPhase


class Probe(Component):
    def __init__(self, label, log):
        super().__init__()
        self.label = label
        self.log = log

    def on_attach(self):
        self.log.append(("attach", self.label))

    def on_destroy(self):
        self.log.append(("destroy", self.label))

    def on_tick(self, phase, delta_time):
        self.log.append((phase, self.label))


@pytest.fixture
def level():
    return World().create_scene("Level")


def test_add_component_attaches_once(level):
    log = []
    node = level.create_node("Node")
    probe = node.add_component(Probe("a", log))

    assert probe.node is node
    assert probe.scene is level
    assert log == [("attach", "a")]
    with pytest.raises(ValueError):
        level.create_node("Other").add_component(probe)


def test_component_lookup_walks_ancestors(level):
    root = level.create_node("Root")
    probe = root.add_component(Probe("root", []))
    leaf = level.create_node("Leaf", parent=level.create_node("Mid", parent=root))

    assert leaf.get_component(Probe) is None
    assert leaf.get_component_in_parent(Probe) is probe


def test_active_in_hierarchy(level):
    root = level.create_node("Root")
    child = level.create_node("Child", parent=root)
    root.active = False

    assert child.active
    assert not child.active_in_hierarchy
    assert level.all_nodes(include_inactive=False) == []
    assert level.all_nodes() == [root, child]


def test_components_in_children_respects_activity(level):
    root = level.create_node("Root")
    child = level.create_node("Child", parent=root)
    on_root = root.add_component(Probe("root", []))
    on_child = child.add_component(Probe("child", []))
    child.active = False

    assert root.get_components_in_children(Probe) == [on_root]
    assert root.get_components_in_children(Probe, include_inactive=True) == [on_root, on_child]


def test_create_node_rejects_foreign_parent(level):
    foreign = level.world.create_scene("Foreign").create_node("Stranger")
    with pytest.raises(ValueError):
        level.create_node("Child", parent=foreign)


def test_destroy_tears_down_children_first(level):
    log = []
    root = level.create_node("Root")
    root.add_component(Probe("root", log))
    child = level.create_node("Child", parent=root)
    child.add_component(Probe("child", log))
    log.clear()

    root.destroy()
    root.destroy()

    assert log == [("destroy", "child"), ("destroy", "root")]
    assert root.destroyed and child.destroyed
    assert level.root_nodes() == []


def test_unload_scene_destroys_roots():
    world = World()
    scene = world.create_scene("Level")
    node = scene.create_node("Root")

    world.unload_scene(scene)

    assert node.destroyed
    assert scene not in world.scenes


def test_persistent_scene_is_created_lazily():
    world = World()
    assert world.scenes == []

    persistent = world.persistent_scene

    assert persistent.name == World.PERSISTENT_SCENE_NAME
    assert world.persistent_scene is persistent


def test_tick_runs_each_phase_across_all_components():
    world = World()
    log = []
    scene = world.create_scene("Level")
    scene.create_node("A").add_component(Probe("a", log))
    scene.create_node("B").add_component(Probe("b", log))
    log.clear()

    world.tick(0.016)

    assert log == [
        (TickPhase.UPDATE, "a"), (TickPhase.UPDATE, "b"),
        (TickPhase.FIXED_UPDATE, "a"), (TickPhase.FIXED_UPDATE, "b"),
        (TickPhase.LATE_UPDATE, "a"), (TickPhase.LATE_UPDATE, "b"),
    ]
