"""
Unit tests for the event bus and event records.
"""

import jsonschema
import pytest

from src.core.event_bus import EventBus
from src.core.models import Event, EventTypeDefinition
from src.modules.rng.events import roll_completed_event, roll_requested_event


@pytest.fixture
def bus():
    """Bus with roll.requested registered."""
    bus = EventBus()
    bus.register_event_type(roll_requested_event())
    return bus


@pytest.fixture
def received():
    """List that doubles as a listener."""
    return []


class TestSubscriptions:
    """Test listener bookkeeping."""

    def test_subscribe_counts(self, bus, received):
        bus.subscribe('roll.completed', received.append)
        bus.subscribe('roll.failed', received.append)
        assert bus.get_listener_count('roll.completed') == 1
        assert bus.get_listener_count() == 2

    def test_subscribe_twice_is_once(self, bus, received):
        """Test the same callback is only registered once per type."""
        bus.subscribe('roll.completed', received.append)
        bus.subscribe('roll.completed', received.append)
        assert bus.get_listener_count('roll.completed') == 1

    def test_unsubscribe(self, bus, received):
        bus.subscribe('roll.completed', received.append)
        bus.unsubscribe('roll.completed', received.append)
        assert bus.get_listener_count('roll.completed') == 0

    def test_unsubscribe_unknown(self, bus, received):
        """Test removing something never subscribed is ignored."""
        bus.unsubscribe('roll.completed', received.append)
        assert bus.get_listener_count() == 0

    def test_clear_one_type(self, bus, received):
        bus.subscribe('roll.completed', received.append)
        bus.subscribe('roll.failed', received.append)
        bus.clear_listeners('roll.completed')
        assert bus.get_listener_count('roll.completed') == 0
        assert bus.get_listener_count('roll.failed') == 1

    def test_clear_all(self, bus, received):
        bus.subscribe('roll.completed', received.append)
        bus.subscribe('roll.failed', received.append)
        bus.clear_listeners()
        assert bus.get_listener_count() == 0


class TestPublishing:
    """Test event delivery."""

    def test_delivery_order(self, bus):
        """Test listeners run in subscription order with the same event."""
        calls = []
        bus.subscribe('roll.completed', lambda e: calls.append(('log', e.event_id)))
        bus.subscribe('roll.completed', lambda e: calls.append(('sheet', e.event_id)))

        event = Event.create('roll.completed', {'total': 9})
        bus.publish(event)

        assert calls == [('log', event.event_id), ('sheet', event.event_id)]

    def test_only_matching_type(self, bus, received):
        bus.subscribe('roll.failed', received.append)
        bus.publish(Event.create('roll.completed', {}))
        assert received == []

    def test_failing_listener(self, bus, received):
        """Test a raising listener does not stop later listeners."""
        def broken(event):
            raise RuntimeError("sheet not loaded")

        bus.subscribe('roll.completed', broken)
        bus.subscribe('roll.completed', received.append)

        bus.publish(Event.create('roll.completed', {}))

        assert len(received) == 1

    def test_sequence(self, bus):
        seen = []
        bus.subscribe('roll.completed', lambda e: seen.append(e.data['n']))
        for n in range(3):
            bus.publish(Event.create('roll.completed', {'n': n}))
        assert seen == [0, 1, 2]


class TestSchemaValidation:
    """Test data checks for registered event types."""

    def test_valid_request(self, bus, received):
        bus.subscribe('roll.requested', received.append)
        bus.publish(Event.create('roll.requested', {'kind': 'pool', 'formula': '2d6'}))
        assert len(received) == 1

    @pytest.mark.parametrize("data", [
        {},
        {'kind': 'spell'},
        {'kind': 'attack'},
        {'kind': 'check', 'advantage_level': -11},
        {'kind': 'check', 'modifier': 1.5},
    ])
    def test_invalid_request(self, bus, received, data):
        """Test invalid data raises and reaches no listener."""
        bus.subscribe('roll.requested', received.append)
        with pytest.raises(jsonschema.ValidationError):
            bus.publish(Event.create('roll.requested', data))
        assert received == []

    def test_completed_schema(self):
        """Test roll.completed requires a result with a total."""
        definition = roll_completed_event()
        with pytest.raises(jsonschema.ValidationError):
            definition.validate({'description': 'Dagger attack', 'result': {'formula': '1d4'}})

    def test_empty_schema_accepts_anything(self):
        definition = EventTypeDefinition(type='note', description='Free text', module='test')
        definition.validate({'text': 'anything'})


class TestEvent:
    """Test the Event record."""

    def test_create(self):
        event = Event.create('roll.completed', {'total': 9}, actor_id='char_1')
        assert event.event_id.startswith('evt_')
        assert event.timestamp.tzinfo is not None
        assert event.actor_id == 'char_1'

    def test_to_dict(self):
        event = Event.create('roll.completed', {'total': 9}, event_id='evt_fixed')
        assert event.to_dict()['event_id'] == 'evt_fixed'
        assert event.to_dict()['data'] == {'total': 9}
        assert event.to_dict()['actor_id'] is None
