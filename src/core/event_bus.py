"""
In-process event bus.

The RNG module answers roll.requested with roll.completed or roll.failed, and
the activity log records every roll.completed. Publishing is synchronous:
publish() returns after every listener has run.
"""

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, Dict, List, Optional

from .models import Event, EventTypeDefinition

logger = logging.getLogger(__name__)

Listener = Callable[[Event], None]


class EventBus:
    """
    Routes events to the listeners subscribed to their type.

    Event types registered with a definition have their data checked against
    its JSON Schema before any listener sees it; unregistered types are
    delivered unchecked.

    Example:
        >>> bus = EventBus()
        >>> bus.subscribe('roll.completed', lambda e: print(e.data['result']['total']))
        >>> bus.publish(Event.create('roll.completed', {...}))
    """

    def __init__(self):
        self.listeners: DefaultDict[str, List[Listener]] = defaultdict(list)
        self.event_types: Dict[str, EventTypeDefinition] = {}

    def register_event_type(self, definition: EventTypeDefinition) -> None:
        self.event_types[definition.type] = definition

    def subscribe(self, event_type: str, callback: Listener) -> None:
        """Add a listener; subscribing the same callback twice has no effect."""
        if callback not in self.listeners[event_type]:
            self.listeners[event_type].append(callback)

    def unsubscribe(self, event_type: str, callback: Listener) -> None:
        if callback in self.listeners.get(event_type, []):
            self.listeners[event_type].remove(callback)

    def publish(self, event: Event) -> None:
        """
        Deliver an event to its listeners in subscription order.

        Raises:
            jsonschema.ValidationError: If the type is registered and the data
                does not match its schema. Nothing is delivered.
        """
        definition = self.event_types.get(event.event_type)
        if definition is not None:
            definition.validate(event.data)

        logger.debug(f"{event.event_type} {event.event_id} from {event.actor_id or '-'}")

        for callback in list(self.listeners.get(event.event_type, [])):
            try:
                callback(event)
            except Exception:
                # Remaining listeners still run
                logger.exception(f"Listener {callback!r} failed on {event.event_type}")

    def clear_listeners(self, event_type: Optional[str] = None) -> None:
        """Drop the listeners of one event type, or of every type."""
        if event_type is None:
            self.listeners.clear()
        else:
            self.listeners.pop(event_type, None)

    def get_listener_count(self, event_type: Optional[str] = None) -> int:
        """Listeners of one event type, or the total across types."""
        if event_type is not None:
            return len(self.listeners.get(event_type, []))
        return sum(len(callbacks) for callbacks in self.listeners.values())
