"""
Unit tests for advantage and disadvantage.
"""

import pytest

from src.modules.rng.advantage import AdvantageResolver, resolve_advantage
from src.modules.rng.dice_parser import UnsupportedDieError
from src.modules.rng.random_source import ScriptedRandomSource, SystemRandomSource
from src.modules.rng.roller import DieCategory, DrawCounter


class TestAdvantage:
    """Test keeping the highest or lowest die."""

    def test_straight_roll(self):
        """Test level 0 rolls one die and drops nothing."""
        roll = resolve_advantage(20, 0, ScriptedRandomSource([13]))
        assert roll.kept_die.value == 13
        assert roll.dropped_dice == ()

    def test_advantage_keeps_highest(self):
        """Test advantage 2 rolls three dice and keeps the highest."""
        roll = resolve_advantage(20, 2, ScriptedRandomSource([4, 17, 9]))

        assert roll.kept_die.value == 17
        assert roll.kept_die.kept
        assert [d.value for d in roll.dropped_dice] == [4, 9]
        assert all(not d.kept for d in roll.dropped_dice)
        assert all(d.category is DieCategory.DROPPED for d in roll.dropped_dice)

    def test_disadvantage_keeps_lowest(self):
        """Test disadvantage 1 rolls two dice and keeps the lowest."""
        roll = resolve_advantage(20, -1, ScriptedRandomSource([15, 6]))
        assert roll.kept_die.value == 6
        assert [d.value for d in roll.dropped_dice] == [15]

    def test_advantage_tie_keeps_first(self):
        """Test the earliest die wins a tie under advantage."""
        roll = resolve_advantage(20, 2, ScriptedRandomSource([18, 18, 3]))
        assert roll.kept_die.draw_index == 0
        assert [d.draw_index for d in roll.dropped_dice] == [1, 2]

    def test_disadvantage_tie_keeps_first(self):
        """Test the earliest die wins a tie under disadvantage."""
        roll = resolve_advantage(20, -2, ScriptedRandomSource([9, 2, 2]))
        assert roll.kept_die.draw_index == 1
        assert [d.draw_index for d in roll.dropped_dice] == [0, 2]

    @pytest.mark.parametrize("level", [-3, -2, -1, 0, 1, 2, 3])
    def test_exactly_one_kept(self, level):
        """Test 1 + |level| dice are rolled and exactly one is kept."""
        roll = resolve_advantage(20, level, SystemRandomSource(seed=level + 10))
        assert len(roll.dice) == 1
        assert len(roll.dropped_dice) == abs(level)

        values = [d.value for d in roll.dropped_dice]
        if level > 0:
            assert all(roll.kept_die.value >= v for v in values)
        elif level < 0:
            assert all(roll.kept_die.value <= v for v in values)

    def test_group_index(self):
        """Test the dice are tagged with the requested group index."""
        draws = DrawCounter(ScriptedRandomSource([5, 11]))
        roll = AdvantageResolver.resolve(draws, 1, sides=20, group_index=3)
        assert roll.kept_die.group_index == 3
        assert roll.dropped_dice[0].group_index == 3

    def test_unsupported_die_draws_nothing(self):
        """Test an unsupported die is rejected before any draw."""
        source = ScriptedRandomSource([5])
        with pytest.raises(UnsupportedDieError):
            resolve_advantage(7, 0, source)
        assert source.remaining == 1
