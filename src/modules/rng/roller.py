"""
Dice rolling: turns dice terms into individual die results.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List

from .dice_parser import DiceTerm, ParsedFormula
from .random_source import RandomSource


class DieCategory(Enum):
    """Why a die is in a result."""
    NORMAL = "normal"
    DROPPED = "dropped"      # Lost to advantage/disadvantage
    CRITICAL = "critical"    # Bonus die from a critical
    VICIOUS = "vicious"      # Extra die from the vicious option
    TO_HIT = "to_hit"        # Resolved to-hit die of an attack

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DieResult:
    """One physical die."""
    sides: int
    value: int                    # Face rolled, always in [1, sides]
    group_index: int              # Dice group of the formula it came from
    kept: bool = True             # Counts towards the total?
    category: DieCategory = DieCategory.NORMAL
    draw_index: int = 0           # Position in the invocation's draw sequence

    @property
    def is_max(self) -> bool:
        return self.value == self.sides

    @property
    def is_min(self) -> bool:
        return self.value == 1

    def drop(self, category: DieCategory = DieCategory.DROPPED) -> 'DieResult':
        """Copy of this die marked as not counting towards the total."""
        return replace(self, kept=False, category=category)

    def to_dict(self) -> dict:
        return {
            'sides': self.sides,
            'value': self.value,
            'group_index': self.group_index,
            'kept': self.kept,
            'category': self.category.value,
            'draw_index': self.draw_index,
        }


class DrawCounter:
    """
    Numbers the draws of one roll invocation.

    Wraps the caller's RandomSource so every die records where in the draw
    sequence it came from, which is what makes a result replayable.
    """

    def __init__(self, source: RandomSource):
        self.source = source
        self.count = 0

    def draw_die(self, sides: int, group_index: int,
                 category: DieCategory = DieCategory.NORMAL) -> DieResult:
        value = self.source.draw(sides)
        die = DieResult(
            sides=sides,
            value=value,
            group_index=group_index,
            kept=True,
            category=category,
            draw_index=self.count,
        )
        self.count += 1
        return die


class DiceRoller:
    """Rolls dice terms against a random source."""

    @staticmethod
    def roll_term(term: DiceTerm, draws: DrawCounter, group_index: int) -> List[DieResult]:
        """
        Roll every die of one dice group.

        The term's sign is not stored on the dice; it is applied when the
        result sums its total.
        """
        return [draws.draw_die(term.sides, group_index) for _ in range(term.count)]

    @classmethod
    def roll_formula(cls, parsed: ParsedFormula, draws: DrawCounter) -> List[DieResult]:
        """Roll all dice groups of a formula in order; group indices follow dice_terms."""
        dice = []
        for group_index, term in enumerate(parsed.dice_terms):
            dice.extend(cls.roll_term(term, draws, group_index))
        return dice


def roll_term(term: DiceTerm, source: RandomSource, group_index: int = 0) -> List[DieResult]:
    """Roll one dice term straight from a random source."""
    return DiceRoller.roll_term(term, DrawCounter(source), group_index)
