# file: scopekit/injection/event_bus.py

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List

from scopekit.exceptions import type_name

if TYPE_CHECKING:
    from scopekit.scope import Scope


@dataclass(frozen=True)
class ServiceRegisteredEvent:
    """Payload delivered to subscribers after a successful registration."""
    service_type: Any
    service: Any
    scope: "Scope"


Callback = Callable[[ServiceRegisteredEvent], Any]


class ServiceRegistrationEventBus:
    """
    Synchronous bus announcing service registrations, keyed by service type.

    Used by runtime injection: objects that are missing a dependency
    subscribe here and get it as soon as some scope registers it.
    """

    def __init__(self):
        # A dictionary mapping service type to a list of callbacks
        self._listeners: Dict[Any, List[Callback]] = defaultdict(list)
        self.logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, service_type: Any, callback: Callback):
        """
        Subscribes a callback to registrations of a service type.
        Subscribing the same callback twice for a type is a no-op.
        """
        callbacks = self._listeners[service_type]
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(self, service_type: Any, callback: Callback):
        """Removes a specific callback from a service type."""
        if service_type not in self._listeners:
            return
        try:
            self._listeners[service_type].remove(callback)
        except ValueError:
            # Callback was not found, which is fine
            pass
        if not self._listeners[service_type]:
            del self._listeners[service_type]

    def publish(self, service_type: Any, service: Any, scope: "Scope"):
        """
        Announces a registration to every subscriber of its type.

        Callbacks run synchronously in subscription order over a copy of the
        subscriber list, so they may subscribe or unsubscribe while the event
        is being delivered. A failing callback is logged and does not stop
        the others.
        """
        if service_type not in self._listeners:
            return  # No one is listening, do nothing

        event = ServiceRegisteredEvent(service_type, service, scope)
        for callback in list(self._listeners[service_type]):
            try:
                callback(event)
            except Exception as e:
                self.logger.error(
                    f"Error invoking callback for {type_name(service_type)}: {e}",
                    exc_info=True
                )

    def subscriber_count(self, service_type: Any) -> int:
        callbacks = self._listeners.get(service_type)
        return len(callbacks) if callbacks else 0

    def clear(self):
        """Drops every subscription."""
        self._listeners.clear()


# One bus for the whole process, like the scope directory.
event_bus = ServiceRegistrationEventBus()
