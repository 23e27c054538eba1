"""
Activity Log Module - capped history of rolls and hit point changes.

The log lives outside the dice engine: it receives finished RollResults
(directly or from roll.completed events) and keeps the newest entries first,
dropping the oldest once the cap is reached.

Usage:
    log = ActivityLog(max_entries=100)
    log.attach(bus)                       # record every roll.completed
    log.record_roll(result, 'Strength check')
    log.add(create_damage_entry(5))
    log.entries()[0].description          # "Took 5 damage"
"""

import json
import logging
import threading
from pathlib import Path
from typing import List, Optional

from src.core.config import get_config
from src.core.event_bus import EventBus
from src.core.models import Event
from src.modules.rng.results import RollResult

from .entries import (
    DamageEntry,
    HealingEntry,
    InitiativeEntry,
    LogEntry,
    RollEntry,
    TempHPEntry,
    create_damage_entry,
    create_healing_entry,
    create_initiative_entry,
    create_roll_entry,
    create_temp_hp_entry,
    entry_from_dict,
)

logger = logging.getLogger(__name__)


class ActivityLog:
    """
    Append-only, newest-first activity log with a size cap.

    Args:
        max_entries: Cap on stored entries (MAX_ROLL_HISTORY if omitted)
        path: Optional JSON file to load from and save to after every change
    """

    def __init__(self, max_entries: Optional[int] = None, path: Optional[str] = None):
        if max_entries is None:
            max_entries = get_config().max_roll_history
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.max_entries = max_entries
        self.path = Path(path) if path else None
        self._entries: List[LogEntry] = []
        self._lock = threading.Lock()

        if self.path and self.path.exists():
            self._load()

    def entries(self, limit: Optional[int] = None) -> List[LogEntry]:
        """Entries newest first."""
        with self._lock:
            entries = list(self._entries)
        return entries[:limit] if limit is not None else entries

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: LogEntry) -> LogEntry:
        """Prepend an entry and trim the oldest beyond the cap."""
        with self._lock:
            self._entries.insert(0, entry)
            del self._entries[self.max_entries:]
            self._save()
        return entry

    def record_roll(self, result: RollResult, description: str) -> RollEntry:
        return self.add(create_roll_entry(result, description))

    def record_initiative(self, result: RollResult) -> InitiativeEntry:
        return self.add(create_initiative_entry(result))

    def clear(self) -> None:
        with self._lock:
            self._entries = []
            self._save()

    def attach(self, event_bus: EventBus) -> None:
        """Record every roll.completed event published on the bus."""
        event_bus.subscribe('roll.completed', self.on_roll_completed)

    def on_roll_completed(self, event: Event) -> None:
        result = RollResult.from_dict(event.data['result'])
        self.record_roll(result, event.data.get('description', ''))

    def to_list(self) -> List[dict]:
        return [entry.to_dict() for entry in self.entries()]

    def _save(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump([entry.to_dict() for entry in self._entries], f, indent=2)

    def _load(self) -> None:
        try:
            with open(self.path, 'r') as f:
                raw = json.load(f)
            if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
                raise ValueError("expected a list of entry objects")
            self._entries = [entry_from_dict(item) for item in raw][:self.max_entries]
            logger.info(f"Loaded {len(self._entries)} activity log entries from {self.path}")
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable activity log {self.path}: {e}")
            self._entries = []


__all__ = [
    'ActivityLog',
    'DamageEntry',
    'HealingEntry',
    'InitiativeEntry',
    'LogEntry',
    'RollEntry',
    'TempHPEntry',
    'create_damage_entry',
    'create_healing_entry',
    'create_initiative_entry',
    'create_roll_entry',
    'create_temp_hp_entry',
]
