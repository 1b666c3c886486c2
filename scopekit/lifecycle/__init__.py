# file: scopekit/lifecycle/__init__.py

from scopekit.lifecycle.capabilities import (
    Destroyable,
    FixedUpdatable,
    LateUpdatable,
    TickPhase,
    Updatable,
)
from scopekit.lifecycle.destroy_manager import DestroyManager
from scopekit.lifecycle.update_manager import UpdateManager

__all__ = [
    "Destroyable",
    "FixedUpdatable",
    "LateUpdatable",
    "TickPhase",
    "Updatable",
    "DestroyManager",
    "UpdateManager",
]
