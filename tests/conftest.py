# file: tests/conftest.py

import pytest
from unittest.mock import MagicMock, patch

import scopekit
from scopekit.bootstrap import SceneBootstrapper
from scopekit.directory import directory
from scopekit.host import World
from scopekit.scope import Scope

# --- Process-wide state ---

@pytest.fixture(autouse=True)
def reset_scopekit():
    """Every test starts with a fresh world and no scopes, subscriptions or sweeps."""
    scopekit.reset(World())
    yield
    scopekit.reset()

@pytest.fixture
def world() -> World:
    return directory.world

@pytest.fixture
def scene(world):
    return world.create_scene("Level")

@pytest.fixture
def global_scope() -> Scope:
    return directory.global_scope

def make_scene_scope(scene, name: str = "SceneContext") -> Scope:
    """Creates a root node with a SceneBootstrapper and bootstraps it."""
    node = scene.create_node(name)
    bootstrapper = node.add_component(SceneBootstrapper())
    bootstrapper.bootstrap_on_demand()
    return bootstrapper.scope

@pytest.fixture
def scene_scope(scene) -> Scope:
    return make_scene_scope(scene)

@pytest.fixture
def scene_scope_factory():
    """Returns make_scene_scope, for tests that need several scene scopes."""
    return make_scene_scope

@pytest.fixture
def temp_config_dir(tmp_path):
    """Creates a temporary directory for config files."""
    return tmp_path

# --- Global Mock for psutil.Process ---
# This ensures that MemoryLogFilter uses a mock process during tests,
# preventing actual system calls.
class MockProcess:
    def memory_info(self):
        return MagicMock(rss=100 * 1024 * 1024) # Default 100MB RSS

mock_psutil_process = MockProcess()

@pytest.fixture(scope="session", autouse=True)
def mock_psutil_process_globally():
    """Globally patches psutil.Process for all tests."""
    with patch('psutil.Process', return_value=mock_psutil_process):
        yield
