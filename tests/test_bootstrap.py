# file: tests/test_bootstrap.py

import pytest

from scopekit.bootstrap import GlobalBootstrapper, SceneBootstrapper, bootstrap_scene
from scopekit.directory import ScopeKind, directory
from scopekit.orchestrator import orchestrator
from scopekit.scope import Scope


class AudioService:
    pass


class CountingBootstrapper(SceneBootstrapper):
    def __init__(self):
        super().__init__()
        self.bootstrap_calls = 0
        self.configured_scopes = []

    def bootstrap(self):
        self.bootstrap_calls += 1
        super().bootstrap()

    def configure_services(self, scope):
        self.configured_scopes.append(scope)
        scope.register(AudioService())


class DeferredBootstrapper(SceneBootstrapper):
    defer_completion = True


def test_bootstrap_runs_at_most_once(scene):
    bootstrapper = scene.create_node("SceneContext").add_component(CountingBootstrapper())

    bootstrapper.bootstrap_on_demand()
    bootstrapper.bootstrap_on_demand()

    assert bootstrapper.bootstrap_calls == 1
    assert bootstrapper.configured_scopes == [bootstrapper.scope]
    assert bootstrapper.is_bootstrap_complete


def test_scene_bootstrapper_binds_and_registers(scene):
    bootstrapper = scene.create_node("SceneContext").add_component(CountingBootstrapper())
    bootstrapper.bootstrap_on_demand()

    scope = bootstrapper.scope
    assert scope.kind is ScopeKind.SCENE
    assert directory.scope_bound_to(scene) is scope
    assert isinstance(scope.get(AudioService), AudioService)


def test_scope_reuses_existing_component(scene):
    node = scene.create_node("SceneContext")
    existing = node.add_component(Scope("Existing"))
    bootstrapper = node.add_component(SceneBootstrapper())

    assert bootstrapper.scope is existing
    assert node.get_components(Scope) == [existing]


def test_bootstrap_requires_a_node():
    with pytest.raises(RuntimeError):
        SceneBootstrapper().bootstrap_on_demand()


def test_completion_triggers_the_scene_sweep(scene):
    bootstrapper = scene.create_node("SceneContext").add_component(SceneBootstrapper())
    bootstrapper.bootstrap_on_demand()

    assert orchestrator.is_injected(bootstrapper.scope)


def test_deferred_completion_waits_for_mark(scene):
    bootstrapper = scene.create_node("SceneContext").add_component(DeferredBootstrapper())

    bootstrapper.bootstrap_on_demand()
    assert bootstrapper.has_been_bootstrapped
    assert not bootstrapper.is_bootstrap_complete
    assert not orchestrator.is_injected(bootstrapper.scope)

    bootstrapper.mark_bootstrap_complete()
    assert bootstrapper.is_bootstrap_complete
    assert orchestrator.is_injected(bootstrapper.scope)


def test_global_bootstrapper_claims_global(world):
    bootstrapper = world.persistent_scene.create_node("Globals").add_component(GlobalBootstrapper())
    bootstrapper.bootstrap_on_demand()

    assert directory.peek_global() is bootstrapper.scope
    # Global completion does not sweep anything
    assert not orchestrator.is_injected(bootstrapper.scope)


def test_bootstrap_scene_runs_every_bootstrapper(scene):
    first = scene.create_node("SceneContext").add_component(CountingBootstrapper())
    holder = scene.create_node("Holder")
    second = scene.create_node("Nested", parent=holder).add_component(CountingBootstrapper())

    bootstrapped = bootstrap_scene(scene)

    assert bootstrapped == [first, second]
    assert first.bootstrap_calls == 1 and second.bootstrap_calls == 1
    # Only the first one gets the scene binding
    assert first.scope.kind is ScopeKind.SCENE
    assert second.scope.kind is ScopeKind.ANONYMOUS
