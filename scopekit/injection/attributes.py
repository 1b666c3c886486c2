# file: scopekit/injection/attributes.py
"""
Markers that tag members for injection.

Fields are tagged through their class annotation:

    class Player(Component):
        audio: Annotated[AudioService, Inject()] = None
        saves: Annotated[SaveService, Inject(use_global=True)] = None

Properties are tagged by decorating the getter; the getter's return
annotation is the service type:

    @property
    @inject()
    def audio(self) -> AudioService:
        return self._audio

    @audio.setter
    def audio(self, value):
        self._audio = value
"""
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class Inject:
    """
    Injection tag.

    use_global: resolve from the global scope instead of the target's
                own resolution chain.
    """
    use_global: bool = False


INJECT_MARKER_ATTR = "__inject__"


def inject(use_global: bool = False) -> Callable:
    """Decorator tagging a property getter for injection."""
    marker = Inject(use_global=use_global)

    def decorator(getter: Callable) -> Callable:
        setattr(getter, INJECT_MARKER_ATTR, marker)
        return getter

    return decorator
