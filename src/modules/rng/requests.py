"""
Roll requests: what a caller asks the engine to roll.

- CheckRequest: one advantage-resolved die plus a flat modifier
  (attribute checks, saves, skill checks, initiative)
- AttackRequest: a damage formula paired with a to-hit die, with criticals
  and fumbles
- PoolRequest: a plain formula (custom dice pools, ability rolls)
"""

from dataclasses import dataclass
from typing import Optional, Union


def format_modifier(modifier: int) -> str:
    """'+2', '-1' or '' for zero."""
    return f"{modifier:+d}" if modifier else ''


@dataclass(frozen=True)
class CheckRequest:
    """Single-die check, e.g. a Strength check at +2 with advantage 1."""
    modifier: int = 0
    advantage_level: int = 0
    sides: int = 20

    @property
    def formula(self) -> str:
        return f"d{self.sides}{format_modifier(self.modifier)}"


@dataclass(frozen=True)
class AttackRequest:
    """
    Weapon or ability attack.

    Attributes:
        formula: Damage formula, e.g. "2d6+3"
        modifier: Extra flat damage (attribute modifier)
        advantage_level: Applied to the to-hit die
        to_hit_sides: Size of the to-hit die; None rolls damage only
        allow_criticals: Maxed damage dice earn bonus dice
        allow_fumbles: A natural 1 on the to-hit die is a miss
        vicious: One extra non-exploding die when any critical occurred
    """
    formula: str
    modifier: int = 0
    advantage_level: int = 0
    to_hit_sides: Optional[int] = 20
    allow_criticals: bool = True
    allow_fumbles: bool = True
    vicious: bool = False


@dataclass(frozen=True)
class PoolRequest:
    """Plain formula roll with no advantage, criticals or fumbles."""
    formula: str


RollRequest = Union[CheckRequest, AttackRequest, PoolRequest]


def build_request(data: dict) -> RollRequest:
    """
    Build a request from roll.requested event data or an API payload.

    The payload is expected to have passed ROLL_REQUEST_SCHEMA already.

    Examples:
        {'kind': 'check', 'modifier': 2, 'advantage_level': 1}
        {'kind': 'attack', 'formula': '1d8', 'modifier': 3, 'vicious': True}
        {'kind': 'pool', 'formula': '4d6'}
    """
    kind = data['kind']
    if kind == 'check':
        return CheckRequest(
            modifier=data.get('modifier', 0),
            advantage_level=data.get('advantage_level', 0),
            sides=data.get('sides', 20),
        )
    if kind == 'attack':
        return AttackRequest(
            formula=data['formula'],
            modifier=data.get('modifier', 0),
            advantage_level=data.get('advantage_level', 0),
            to_hit_sides=data.get('to_hit_sides', 20),
            allow_criticals=data.get('allow_criticals', True),
            allow_fumbles=data.get('allow_fumbles', True),
            vicious=data.get('vicious', False),
        )
    if kind == 'pool':
        return PoolRequest(formula=data['formula'])
    raise ValueError(f"Unknown roll kind: {kind!r}")
