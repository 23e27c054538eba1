"""
Records passed over the event bus.

- Event: something that happened (a roll was requested, a roll completed)
- EventTypeDefinition: an event name, the module that owns it and the JSON
  Schema its data must match
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import uuid

import jsonschema


def generate_id(prefix: str) -> str:
    """Short unique id such as 'evt_3f9a0c1b22de'."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def now() -> datetime:
    """Timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Event:
    """
    Immutable bus message.

    Attributes:
        event_id: Unique id, 'evt_' prefixed
        timestamp: UTC creation time
        event_type: Dotted name, e.g. 'roll.completed'
        actor_id: Character or client that caused it, if known
        data: Payload, checked against the type's schema on publish
    """
    event_id: str
    timestamp: datetime
    event_type: str
    actor_id: Optional[str]
    data: Dict[str, Any]

    @classmethod
    def create(cls, event_type: str, data: Dict[str, Any],
               actor_id: Optional[str] = None,
               event_id: Optional[str] = None) -> 'Event':
        """New event stamped with the current time and a fresh id unless one is given."""
        return cls(
            event_id=event_id or generate_id('evt'),
            timestamp=now(),
            event_type=event_type,
            actor_id=actor_id,
            data=data
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'event_id': self.event_id,
            'timestamp': self.timestamp.isoformat(),
            'event_type': self.event_type,
            'actor_id': self.actor_id,
            'data': self.data
        }


@dataclass(frozen=True)
class EventTypeDefinition:
    """
    Declares an event type on the bus.

    Attributes:
        type: Event name, e.g. 'roll.requested'
        description: What the event means
        module: Name of the module that publishes it
        data_schema: JSON Schema for Event.data; empty accepts anything
    """
    type: str
    description: str
    module: str
    data_schema: Dict[str, Any] = field(default_factory=dict)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Check event data against data_schema.

        Raises:
            jsonschema.ValidationError: If the data does not match
        """
        jsonschema.validate(data, self.data_schema)
