# file: tests/test_lifecycle.py

import pytest

from scopekit.exceptions import CapabilityMismatchError
from scopekit.lifecycle import (
    DestroyManager,
    FixedUpdatable,
    TickPhase,
    Updatable,
    UpdateManager,
)


class Recorder:
    """Implements every tick phase and teardown, logging calls to a shared list."""

    def __init__(self, label, calls):
        self.label = label
        self.calls = calls

    def update(self, delta_time):
        self.calls.append(("update", self.label, delta_time))

    def fixed_update(self, delta_time):
        self.calls.append(("fixed_update", self.label, delta_time))

    def late_update(self, delta_time):
        self.calls.append(("late_update", self.label, delta_time))

    def destroy(self):
        self.calls.append(("destroy", self.label))


class OnlyUpdates:
    def update(self, delta_time):
        pass


@pytest.fixture
def update_manager():
    return UpdateManager()


# --- UpdateManager ---

def test_phase_calls_handles_in_registration_order(update_manager):
    calls = []
    for label in (1, 2, 3):
        update_manager.register_updatable(Recorder(label, calls))

    update_manager.update_all(0.016)

    assert calls == [("update", 1, 0.016), ("update", 2, 0.016), ("update", 3, 0.016)]


def test_phases_are_independent(update_manager):
    calls = []
    updater = Recorder("u", calls)
    fixed = Recorder("f", calls)
    update_manager.register(TickPhase.UPDATE, updater)
    update_manager.register(TickPhase.FIXED_UPDATE, fixed)

    update_manager.fixed_update_all(0.02)
    update_manager.late_update_all(0.016)

    assert calls == [("fixed_update", "f", 0.02)]


def test_duplicate_registration_is_a_noop(update_manager):
    calls = []
    handle = Recorder("a", calls)

    assert update_manager.register_late_updatable(handle) is True
    assert update_manager.register_late_updatable(handle) is False

    update_manager.late_update_all(1.0)
    assert calls == [("late_update", "a", 1.0)]


def test_instance_without_capability_is_rejected(update_manager):
    with pytest.raises(CapabilityMismatchError):
        update_manager.register_fixed_updatable(OnlyUpdates())
    assert update_manager.handles(TickPhase.FIXED_UPDATE) == []


def test_declared_type_without_capability_is_rejected(update_manager):
    """The declared type is checked too, even if the instance would qualify."""
    class Unrelated:
        pass

    with pytest.raises(CapabilityMismatchError):
        update_manager.register_updatable(Recorder("x", []), Unrelated)


def test_declared_type_with_capability_is_accepted(update_manager):
    handle = OnlyUpdates()
    assert update_manager.register_updatable(handle, OnlyUpdates) is True
    assert issubclass(OnlyUpdates, Updatable)
    assert not issubclass(OnlyUpdates, FixedUpdatable)


def test_none_instance_is_rejected(update_manager):
    with pytest.raises(ValueError):
        update_manager.register_updatable(None)


def test_unregister(update_manager):
    handle = OnlyUpdates()
    update_manager.register_updatable(handle)

    assert update_manager.unregister(TickPhase.UPDATE, handle) is True
    assert update_manager.unregister(TickPhase.UPDATE, handle) is False
    assert update_manager.handles(TickPhase.UPDATE) == []


def test_handle_registered_during_tick_runs_next_tick(update_manager):
    calls = []
    late_joiner = Recorder("late", calls)

    class Spawner:
        def update(self, delta_time):
            update_manager.register_updatable(late_joiner)

    update_manager.register_updatable(Spawner())

    update_manager.update_all(0.1)
    assert calls == []

    update_manager.update_all(0.2)
    assert calls == [("update", "late", 0.2)]


# --- DestroyManager ---

def test_destroy_all_runs_in_registration_order():
    calls = []
    manager = DestroyManager()
    for label in (1, 2, 3):
        manager.register(Recorder(label, calls))

    manager.destroy_all()

    assert calls == [("destroy", 1), ("destroy", 2), ("destroy", 3)]


def test_destroy_all_is_not_idempotent():
    """The dispatcher itself does not guard against double teardown."""
    calls = []
    manager = DestroyManager()
    manager.register(Recorder("a", calls))

    manager.destroy_all()
    manager.destroy_all()

    assert calls == [("destroy", "a"), ("destroy", "a")]


def test_destroy_manager_rejects_missing_capability():
    manager = DestroyManager()
    with pytest.raises(CapabilityMismatchError):
        manager.register(OnlyUpdates())


def test_destroy_manager_deduplicates_by_identity():
    handle = Recorder("a", [])
    manager = DestroyManager()

    assert manager.register(handle) is True
    assert manager.register(handle) is False
    assert manager.handles == [handle]
