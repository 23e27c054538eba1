"""
Activity log entry types.

Entries are immutable: an edited roll is a new entry, never an update.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from src.core.models import generate_id, now
from src.modules.rng.results import RollResult

TARGET_TYPES = ('hp', 'temp_hp')


@dataclass(frozen=True)
class LogEntry:
    """
    Base activity log entry.

    Attributes:
        id: Unique identifier
        timestamp: When the entry was created
        description: Text shown in the log
    """
    id: str
    timestamp: datetime
    description: str

    type = 'entry'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'timestamp': self.timestamp.isoformat(),
            'description': self.description,
        }


@dataclass(frozen=True)
class RollEntry(LogEntry):
    """A dice roll with the label the caller gave it ("Strength check")."""
    result: RollResult = None

    type = 'roll'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['result'] = self.result.to_dict()
        return data


@dataclass(frozen=True)
class DamageEntry(LogEntry):
    amount: int = 0
    target_type: str = 'hp'

    type = 'damage'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({'amount': self.amount, 'target_type': self.target_type})
        return data


@dataclass(frozen=True)
class HealingEntry(LogEntry):
    amount: int = 0

    type = 'healing'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['amount'] = self.amount
        return data


@dataclass(frozen=True)
class TempHPEntry(LogEntry):
    amount: int = 0
    previous: Optional[int] = None

    type = 'temp_hp'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({'amount': self.amount, 'previous': self.previous})
        return data


@dataclass(frozen=True)
class InitiativeEntry(LogEntry):
    """Initiative roll; the combat tracker grants max(1, total) actions."""
    result: RollResult = None
    actions_granted: int = 1

    type = 'initiative'

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({'result': self.result.to_dict(), 'actions_granted': self.actions_granted})
        return data


def create_roll_entry(result: RollResult, description: str) -> RollEntry:
    return RollEntry(id=generate_id('log'), timestamp=now(), description=description,
                     result=result)


def create_damage_entry(amount: int, target_type: str = 'hp') -> DamageEntry:
    """Record damage taken by the character."""
    if target_type not in TARGET_TYPES:
        raise ValueError(f"target_type must be one of {TARGET_TYPES}, got {target_type!r}")
    suffix = ' (temporary HP)' if target_type == 'temp_hp' else ''
    return DamageEntry(
        id=generate_id('log'),
        timestamp=now(),
        description=f"Took {amount} damage{suffix}",
        amount=amount,
        target_type=target_type,
    )


def create_healing_entry(amount: int) -> HealingEntry:
    return HealingEntry(id=generate_id('log'), timestamp=now(),
                        description=f"Healed {amount} HP", amount=amount)


def create_temp_hp_entry(amount: int, previous: Optional[int] = None) -> TempHPEntry:
    if previous is not None:
        description = f"Gained {amount} temporary HP (replaced {previous})"
    else:
        description = f"Gained {amount} temporary HP"
    return TempHPEntry(id=generate_id('log'), timestamp=now(), description=description,
                       amount=amount, previous=previous)


def create_initiative_entry(result: RollResult) -> InitiativeEntry:
    actions_granted = max(1, result.total)
    return InitiativeEntry(
        id=generate_id('log'),
        timestamp=now(),
        description=f"Initiative {result.total} - Combat started with {actions_granted} actions",
        result=result,
        actions_granted=actions_granted,
    )


def entry_from_dict(data: Dict[str, Any]) -> LogEntry:
    """Rebuild an entry from its to_dict() form."""
    common = {
        'id': data['id'],
        'timestamp': datetime.fromisoformat(data['timestamp']),
        'description': data['description'],
    }
    entry_type = data['type']
    if entry_type == 'roll':
        return RollEntry(result=RollResult.from_dict(data['result']), **common)
    if entry_type == 'damage':
        return DamageEntry(amount=data['amount'], target_type=data['target_type'], **common)
    if entry_type == 'healing':
        return HealingEntry(amount=data['amount'], **common)
    if entry_type == 'temp_hp':
        return TempHPEntry(amount=data['amount'], previous=data.get('previous'), **common)
    if entry_type == 'initiative':
        return InitiativeEntry(result=RollResult.from_dict(data['result']),
                               actions_granted=data['actions_granted'], **common)
    raise ValueError(f"Unknown log entry type: {entry_type!r}")
