"""
Roll results: the single output type of the dice engine.

A RollResult is assembled once and never changed. Its total is computed from
the kept dice and the modifier on every access, so it cannot disagree with
the dice it reports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .critical import CriticalInfo, FumbleInfo, NO_CRITICALS, NO_FUMBLE
from .roller import DieCategory, DieResult


class RollKind(Enum):
    """Which kind of request produced a result."""
    CHECK = "check"
    ATTACK = "attack"
    POOL = "pool"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RollResult:
    """Complete, immutable result of one roll."""
    formula: str                            # Formula text as rolled
    kind: RollKind
    dice: Tuple[DieResult, ...]             # Kept dice, in draw order
    dropped_dice: Tuple[DieResult, ...]     # Rolled but not counted, in draw order
    modifier: int                           # Sum of flat modifiers
    advantage_level: int = 0
    num_criticals: int = 0
    is_fumble: bool = False
    group_signs: Tuple[int, ...] = ()       # Sign of each dice group
    to_hit_group: Optional[int] = None      # Group index of the to-hit dice, if any

    @property
    def total(self) -> int:
        """Kept dice, each signed by its group, plus the modifier."""
        return sum(self.sign_of(die) * die.value for die in self.dice) + self.modifier

    @property
    def is_critical_hit(self) -> bool:
        return self.num_criticals > 0

    @property
    def is_miss(self) -> bool:
        """A fumbled attack misses regardless of its damage."""
        return self.is_fumble

    @property
    def effective_total(self) -> int:
        """Total to apply to game state: zero for a miss."""
        return 0 if self.is_miss else self.total

    @property
    def to_hit_die(self) -> Optional[DieResult]:
        for die in self.dropped_dice:
            if die.category is DieCategory.TO_HIT:
                return die
        return None

    @property
    def all_dice(self) -> List[DieResult]:
        """Every die physically rolled, in draw order."""
        return sorted(self.dice + self.dropped_dice, key=lambda die: die.draw_index)

    def sign_of(self, die: DieResult) -> int:
        if die.group_index < len(self.group_signs):
            return self.group_signs[die.group_index]
        return 1

    def replay_values(self) -> List[int]:
        """
        The draws of this roll in order.

        Feeding them to a ScriptedRandomSource and evaluating the same request
        reproduces this result.
        """
        return [die.value for die in self.all_dice]

    def get_breakdown(self) -> str:
        """
        Human-readable breakdown of the roll.

        Dropped dice are struck through:
            "~~[4]~~ + [17] + ~~[9]~~ + 2 = 19"
            "to-hit [1] | [8] + [5] + 3 = 16 | 1 critical | MISS"
        """
        segments = []

        to_hit = [d for d in self.all_dice if d.group_index == self.to_hit_group]
        if to_hit:
            segments.append('to-hit ' + ' '.join(_format_die(d) for d in to_hit))

        expression = ''
        for die in self.all_dice:
            if die.group_index == self.to_hit_group:
                continue
            negative = self.sign_of(die) < 0
            if not expression:
                expression = f"-{_format_die(die)}" if negative else _format_die(die)
            else:
                expression += f" {'-' if negative else '+'} {_format_die(die)}"

        if not expression:
            expression = str(self.modifier)
        elif self.modifier:
            expression += f" {'-' if self.modifier < 0 else '+'} {abs(self.modifier)}"
        segments.append(f"{expression} = {self.total}")

        if self.num_criticals:
            plural = 's' if self.num_criticals > 1 else ''
            segments.append(f"{self.num_criticals} critical{plural}")
        if self.is_fumble:
            segments.append("MISS")

        return ' | '.join(segments)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for event data and JSON responses."""
        return {
            'formula': self.formula,
            'kind': self.kind.value,
            'dice': [die.to_dict() for die in self.dice],
            'dropped_dice': [die.to_dict() for die in self.dropped_dice],
            'modifier': self.modifier,
            'total': self.total,
            'effective_total': self.effective_total,
            'advantage_level': self.advantage_level,
            'is_critical_hit': self.is_critical_hit,
            'num_criticals': self.num_criticals,
            'is_fumble': self.is_fumble,
            'is_miss': self.is_miss,
            'group_signs': list(self.group_signs),
            'to_hit_group': self.to_hit_group,
            'breakdown': self.get_breakdown(),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'RollResult':
        """Rebuild a result from to_dict() output. Derived keys are ignored."""
        return RollResult(
            formula=data['formula'],
            kind=RollKind(data['kind']),
            dice=tuple(_die_from_dict(d) for d in data['dice']),
            dropped_dice=tuple(_die_from_dict(d) for d in data['dropped_dice']),
            modifier=data['modifier'],
            advantage_level=data.get('advantage_level', 0),
            num_criticals=data.get('num_criticals', 0),
            is_fumble=data.get('is_fumble', False),
            group_signs=tuple(data.get('group_signs', ())),
            to_hit_group=data.get('to_hit_group'),
        )


def _format_die(die: DieResult) -> str:
    text = f"[{die.value}]"
    return text if die.kept or die.category is DieCategory.TO_HIT else f"~~{text}~~"


def _die_from_dict(data: Dict[str, Any]) -> DieResult:
    return DieResult(
        sides=data['sides'],
        value=data['value'],
        group_index=data['group_index'],
        kept=data['kept'],
        category=DieCategory(data['category']),
        draw_index=data['draw_index'],
    )


def assemble(
    formula: str,
    dice: Sequence[DieResult],
    dropped_dice: Sequence[DieResult],
    modifier: int,
    advantage_level: int = 0,
    critical_info: CriticalInfo = NO_CRITICALS,
    fumble_info: FumbleInfo = NO_FUMBLE,
    kind: RollKind = RollKind.POOL,
    group_signs: Sequence[int] = (),
    to_hit_group: Optional[int] = None,
) -> RollResult:
    """
    Merge the pieces of a roll into one RollResult.

    Bonus dice from criticals join the kept dice. No total is passed in: the
    result derives it from the dice it holds.
    """
    kept = sorted(tuple(dice) + critical_info.bonus_dice, key=lambda die: die.draw_index)
    dropped = sorted(dropped_dice, key=lambda die: die.draw_index)

    return RollResult(
        formula=formula,
        kind=kind,
        dice=tuple(kept),
        dropped_dice=tuple(dropped),
        modifier=modifier,
        advantage_level=advantage_level,
        num_criticals=critical_info.num_criticals,
        is_fumble=fumble_info.is_fumble,
        group_signs=tuple(group_signs),
        to_hit_group=to_hit_group,
    )
