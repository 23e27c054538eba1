"""
Advantage and disadvantage for single-die checks.

Advantage N rolls 1 + N dice and keeps the highest; disadvantage N (a
negative level) rolls 1 + N dice and keeps the lowest. Exactly one die is
kept. When several dice share the extreme value the first one rolled is kept.
"""

from dataclasses import dataclass
from typing import Tuple

from .dice_parser import check_die_size
from .random_source import RandomSource
from .roller import DieCategory, DieResult, DrawCounter


@dataclass(frozen=True)
class AdvantageRoll:
    """Outcome of an advantage-resolved die."""
    dice: Tuple[DieResult, ...]            # The single kept die
    dropped_dice: Tuple[DieResult, ...]    # Everything else that was rolled

    @property
    def kept_die(self) -> DieResult:
        return self.dice[0]


class AdvantageResolver:
    """Rolls and resolves a single check die under an advantage level."""

    @staticmethod
    def resolve(draws: DrawCounter, advantage_level: int, sides: int = 20,
                group_index: int = 0) -> AdvantageRoll:
        """
        Roll 1 + |advantage_level| dice and keep exactly one.

        Args:
            draws: Draw counter of the current roll
            advantage_level: >0 advantage, <0 disadvantage, 0 straight roll
            sides: Die size (20 for checks)
            group_index: Group index to tag the dice with
        """
        rolled = [draws.draw_die(sides, group_index) for _ in range(1 + abs(advantage_level))]

        kept_position = 0
        for position, die in enumerate(rolled):
            best = rolled[kept_position].value
            # Strict comparison keeps the earliest die on ties
            if advantage_level > 0 and die.value > best:
                kept_position = position
            elif advantage_level < 0 and die.value < best:
                kept_position = position

        dice = (rolled[kept_position],)
        dropped = tuple(
            die.drop() for position, die in enumerate(rolled) if position != kept_position
        )
        return AdvantageRoll(dice=dice, dropped_dice=dropped)


def resolve_advantage(sides: int, advantage_level: int, source: RandomSource) -> AdvantageRoll:
    """
    Resolve one check die straight from a random source.

    Example:
        >>> roll = resolve_advantage(20, 2, ScriptedRandomSource([4, 17, 9]))
        >>> roll.kept_die.value, [d.value for d in roll.dropped_dice]
        (17, [4, 9])
    """
    check_die_size(sides)
    return AdvantageResolver.resolve(DrawCounter(source), advantage_level, sides)
