"""
Critical hit and fumble classification for attack rolls.

- Every kept damage die showing its maximum face is one critical and earns one
  bonus die of the same size in the same group, so a subtracted group
  subtracts its bonus die too. Bonus dice never trigger further criticals.
- A to-hit die showing a 1 is a fumble: the attack misses whatever damage
  was rolled.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .roller import DieCategory, DieResult, DrawCounter


@dataclass(frozen=True)
class CriticalInfo:
    """Criticals found on the damage dice and the bonus dice they produced."""
    num_criticals: int = 0
    bonus_dice: Tuple[DieResult, ...] = ()

    @property
    def is_critical_hit(self) -> bool:
        return self.num_criticals > 0


@dataclass(frozen=True)
class FumbleInfo:
    """Fumble verdict for the resolved to-hit die."""
    is_fumble: bool = False
    to_hit_die: Optional[DieResult] = None


NO_CRITICALS = CriticalInfo()
NO_FUMBLE = FumbleInfo()


def critical_dice(dice: Sequence[DieResult]) -> Tuple[DieResult, ...]:
    """Kept, non-bonus dice that rolled their maximum face."""
    return tuple(
        die for die in dice
        if die.kept and die.category is DieCategory.NORMAL and die.is_max
    )


class CriticalClassifier:
    """Applies the critical and fumble policy to an attack."""

    @staticmethod
    def classify_criticals(dice: Sequence[DieResult], draws: DrawCounter,
                           vicious: bool = False) -> CriticalInfo:
        """
        Count criticals and roll their bonus dice.

        Args:
            dice: Kept damage dice
            draws: Draw counter of the current roll
            vicious: Roll one extra non-exploding die when any critical occurred
        """
        criticals = critical_dice(dice)
        if not criticals:
            return NO_CRITICALS

        bonus = [
            draws.draw_die(die.sides, die.group_index, DieCategory.CRITICAL)
            for die in criticals
        ]
        if vicious:
            first = criticals[0]
            bonus.append(draws.draw_die(first.sides, first.group_index, DieCategory.VICIOUS))

        return CriticalInfo(num_criticals=len(criticals), bonus_dice=tuple(bonus))

    @staticmethod
    def detect_fumble(to_hit_die: DieResult) -> FumbleInfo:
        """A natural minimum on the resolved to-hit die is a fumble."""
        return FumbleInfo(is_fumble=to_hit_die.is_min, to_hit_die=to_hit_die)
