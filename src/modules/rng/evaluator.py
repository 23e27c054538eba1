"""
The roll evaluator: one entry point for every kind of roll.

evaluate(request, source) parses, rolls, resolves advantage, classifies
criticals and fumbles, and assembles the RollResult. Formulas are parsed
before the first draw, so a bad formula never consumes randomness.
"""

import logging
from typing import Optional

from .advantage import AdvantageResolver
from .critical import CriticalClassifier, FumbleInfo, NO_CRITICALS, NO_FUMBLE
from .dice_parser import DEFAULT_MAX_DICE_PER_GROUP, DiceParser, check_die_size
from .random_source import RandomSource, SystemRandomSource
from .requests import AttackRequest, CheckRequest, PoolRequest, RollRequest, format_modifier
from .results import RollKind, RollResult, assemble
from .roller import DiceRoller, DieCategory, DrawCounter

logger = logging.getLogger(__name__)


def evaluate(request: RollRequest, source: Optional[RandomSource] = None,
             max_dice_per_group: int = DEFAULT_MAX_DICE_PER_GROUP) -> RollResult:
    """
    Evaluate a roll request.

    Args:
        request: CheckRequest, AttackRequest or PoolRequest
        source: Random source to draw from (a fresh unseeded one if omitted)
        max_dice_per_group: Largest dice count accepted in one group

    Returns:
        RollResult

    Raises:
        FormulaError: If the formula or a die size is invalid
        TypeError: If request is not a known request type
    """
    source = source or SystemRandomSource()

    if isinstance(request, CheckRequest):
        result = _evaluate_check(request, source)
    elif isinstance(request, AttackRequest):
        result = _evaluate_attack(request, source, max_dice_per_group)
    elif isinstance(request, PoolRequest):
        result = _evaluate_pool(request, source, max_dice_per_group)
    else:
        raise TypeError(f"Unknown roll request: {request!r}")

    logger.debug(f"{result.kind} {result.formula}: {result.get_breakdown()}")
    return result


def _evaluate_check(request: CheckRequest, source: RandomSource) -> RollResult:
    check_die_size(request.sides, request.formula)

    draws = DrawCounter(source)
    roll = AdvantageResolver.resolve(draws, request.advantage_level, request.sides)

    return assemble(
        formula=request.formula,
        dice=roll.dice,
        dropped_dice=roll.dropped_dice,
        modifier=request.modifier,
        advantage_level=request.advantage_level,
        kind=RollKind.CHECK,
        group_signs=(1,),
    )


def _evaluate_attack(request: AttackRequest, source: RandomSource,
                     max_dice_per_group: int) -> RollResult:
    parsed = DiceParser.parse(request.formula, max_dice_per_group)
    formula = parsed.to_notation() + format_modifier(request.modifier)
    if request.to_hit_sides is not None:
        check_die_size(request.to_hit_sides, formula)

    group_signs = tuple(term.sign for term in parsed.dice_terms)
    draws = DrawCounter(source)
    dropped = []
    fumble = NO_FUMBLE
    to_hit_group = None

    if request.to_hit_sides is not None:
        to_hit_group = len(group_signs)
        to_hit = AdvantageResolver.resolve(
            draws, request.advantage_level, request.to_hit_sides, to_hit_group
        )
        # The to-hit die decides hit or miss but adds nothing to the damage
        to_hit_die = to_hit.kept_die.drop(DieCategory.TO_HIT)
        dropped.extend(to_hit.dropped_dice)
        dropped.append(to_hit_die)
        if request.allow_fumbles:
            fumble = CriticalClassifier.detect_fumble(to_hit_die)
        else:
            fumble = FumbleInfo(is_fumble=False, to_hit_die=to_hit_die)

    damage = DiceRoller.roll_formula(parsed, draws)

    criticals = NO_CRITICALS
    if request.allow_criticals:
        criticals = CriticalClassifier.classify_criticals(
            damage, draws, vicious=request.vicious
        )

    return assemble(
        formula=formula,
        dice=damage,
        dropped_dice=dropped,
        modifier=parsed.modifier + request.modifier,
        advantage_level=request.advantage_level,
        critical_info=criticals,
        fumble_info=fumble,
        kind=RollKind.ATTACK,
        group_signs=group_signs,
        to_hit_group=to_hit_group,
    )


def _evaluate_pool(request: PoolRequest, source: RandomSource,
                   max_dice_per_group: int) -> RollResult:
    parsed = DiceParser.parse(request.formula, max_dice_per_group)
    draws = DrawCounter(source)
    dice = DiceRoller.roll_formula(parsed, draws)

    return assemble(
        formula=parsed.to_notation(),
        dice=dice,
        dropped_dice=(),
        modifier=parsed.modifier,
        kind=RollKind.POOL,
        group_signs=tuple(term.sign for term in parsed.dice_terms),
    )


def roll_check(modifier: int = 0, advantage_level: int = 0,
               source: Optional[RandomSource] = None) -> RollResult:
    """Roll a d20 check: kept die + modifier."""
    return evaluate(CheckRequest(modifier=modifier, advantage_level=advantage_level), source)


def roll_attack(formula: str, modifier: int = 0, advantage_level: int = 0,
                source: Optional[RandomSource] = None, **options) -> RollResult:
    """
    Roll an attack: d20 to-hit plus the damage formula.

    Extra keyword options are passed to AttackRequest (vicious, allow_criticals, ...).
    """
    request = AttackRequest(
        formula=formula, modifier=modifier, advantage_level=advantage_level, **options
    )
    return evaluate(request, source)


def roll_pool(formula: str, source: Optional[RandomSource] = None) -> RollResult:
    """Roll a plain formula."""
    return evaluate(PoolRequest(formula=formula), source)
