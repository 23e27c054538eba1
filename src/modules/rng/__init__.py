"""
RNG Module - the dice formula engine and its event wiring.

Provides:
- Dice formula parsing (1d20, 2d6+3, 4d8 + 2d4 - 1)
- Advantage/disadvantage on check dice
- Critical hits (bonus dice) and fumbles (automatic misses) on attacks
- Injected random sources for deterministic and replayable rolls
- Event-driven roll processing

Usage:
    # Roll directly
    result = evaluate(AttackRequest('2d6+3'), ScriptedRandomSource([14, 4, 2]))
    print(result.get_breakdown())  # "to-hit [14] | [4] + [2] + 3 = 9"

    # Or request a roll via event
    bus.publish(Event.create('roll.requested', {
        'kind': 'check',
        'modifier': 2,
        'advantage_level': 1,
        'description': 'Strength check'
    }))

    def on_roll(event):
        print(event.data['result']['breakdown'])

    bus.subscribe('roll.completed', on_roll)
"""

import logging
import threading
from typing import List, Optional

from src.core.config import Config, get_config
from src.core.event_bus import EventBus
from src.core.models import Event, EventTypeDefinition
from src.core.result import Result

from .advantage import AdvantageRoll, resolve_advantage
from .critical import CriticalInfo, FumbleInfo
from .dice_parser import (
    SUPPORTED_DIE_SIZES,
    DiceParser,
    DiceTerm,
    FormulaError,
    FormulaSyntaxError,
    ModifierTerm,
    ParsedFormula,
    UnsupportedDieError,
    parse,
)
from .evaluator import evaluate, roll_attack, roll_check, roll_pool
from .events import roll_completed_event, roll_failed_event, roll_requested_event
from .random_source import RandomSource, ScriptedRandomSource, SystemRandomSource
from .requests import AttackRequest, CheckRequest, PoolRequest, RollRequest, build_request
from .results import RollKind, RollResult, assemble
from .roller import DieCategory, DieResult, roll_term

logger = logging.getLogger(__name__)


class RNGModule:
    """
    Serves roll requests for the rest of the application.

    Owns the shared random source. Evaluations are serialized so that two
    rolls never interleave their draws on that source.
    """

    name = "rng"

    def __init__(self, seed: Optional[int] = None,
                 source: Optional[RandomSource] = None,
                 config: Optional[Config] = None):
        """
        Initialize RNG module.

        Args:
            seed: Optional random seed (falls back to DICE_SEED)
            source: Random source to use instead of a seeded SystemRandomSource
            config: Configuration (the global config if omitted)
        """
        self.config = config or get_config()
        if seed is None:
            seed = self.config.dice_seed
        self.source = source or SystemRandomSource(seed=seed)
        self.event_bus: Optional[EventBus] = None
        self._lock = threading.Lock()

    def register_event_types(self) -> List[EventTypeDefinition]:
        return [
            roll_requested_event(),
            roll_completed_event(),
            roll_failed_event()
        ]

    def initialize(self, event_bus: EventBus) -> None:
        """Register event types and subscribe to roll requests."""
        self.event_bus = event_bus
        for definition in self.register_event_types():
            event_bus.register_event_type(definition)
        event_bus.subscribe('roll.requested', self.on_roll_requested)

    def roll_direct(self, request: RollRequest) -> RollResult:
        """
        Evaluate a request against the module's random source.

        Raises:
            FormulaError: If the formula or a die size is invalid
        """
        with self._lock:
            return evaluate(request, self.source, self.config.max_dice_per_group)

    def try_roll(self, request: RollRequest) -> Result:
        """Evaluate a request, reporting formula errors as a failed Result."""
        try:
            return Result.ok(self.roll_direct(request))
        except FormulaError as e:
            return Result.fail(str(e), e.code)

    def handle_request(self, data: dict, actor_id: Optional[str] = None) -> Result:
        """
        Roll from request data and announce the outcome.

        Steps:
        1. Build the request (data must match ROLL_REQUEST_SCHEMA)
        2. Evaluate it
        3. Publish roll.completed, or roll.failed when the formula is rejected

        Returns:
            Result holding the RollResult, or the formula error
        """
        description = data.get('description', '')
        request_id = data.get('request_id')

        result = self.try_roll(build_request(data))

        if not result.success:
            logger.warning(f"Roll rejected for {actor_id or 'anonymous'}: {result.error}")

        if self.event_bus:
            if result.success:
                self.event_bus.publish(Event.create(
                    event_type='roll.completed',
                    actor_id=actor_id,
                    data={
                        'description': description,
                        'request_id': request_id,
                        'result': result.data.to_dict()
                    }
                ))
            else:
                self.event_bus.publish(Event.create(
                    event_type='roll.failed',
                    actor_id=actor_id,
                    data={
                        'description': description,
                        'request_id': request_id,
                        'error': result.error,
                        'error_code': result.error_code
                    }
                ))

        return result

    def on_roll_requested(self, event: Event) -> None:
        """Process a roll.requested event."""
        self.handle_request(event.data, event.actor_id)


__all__ = [
    'RNGModule',
    'SUPPORTED_DIE_SIZES',
    'AdvantageRoll',
    'AttackRequest',
    'CheckRequest',
    'CriticalInfo',
    'DiceParser',
    'DiceTerm',
    'DieCategory',
    'DieResult',
    'FormulaError',
    'FormulaSyntaxError',
    'FumbleInfo',
    'ModifierTerm',
    'ParsedFormula',
    'PoolRequest',
    'RandomSource',
    'RollKind',
    'RollRequest',
    'RollResult',
    'ScriptedRandomSource',
    'SystemRandomSource',
    'UnsupportedDieError',
    'assemble',
    'build_request',
    'evaluate',
    'parse',
    'resolve_advantage',
    'roll_attack',
    'roll_check',
    'roll_pool',
    'roll_term',
]
