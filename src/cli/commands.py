#!/usr/bin/env python3
"""
Command-line interface for SheetRoll.

Roll formulas, checks and attacks from the terminal, inspect how a formula
parses, or serve the JSON API.
"""

import argparse
import json
import sys

from src.core.config import get_config
from src.core.logging_config import setup_logging
from src.modules.rng import (
    AttackRequest,
    CheckRequest,
    DiceParser,
    DiceTerm,
    FormulaError,
    PoolRequest,
    RollResult,
    SystemRandomSource,
    evaluate,
)


def _print_result(result: RollResult, args, label: str) -> None:
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    print(f"🎲 {label}: {result.formula}")
    print(f"  {result.get_breakdown()}")
    if result.is_critical_hit:
        print(f"  🎯 {result.num_criticals} critical hit(s)")
    if result.is_miss:
        print("  💀 Fumble - the attack misses")
    print(f"  Total: {result.effective_total}")


def _roll(request, args, label: str) -> None:
    config = get_config()
    seed = args.seed if args.seed is not None else config.dice_seed
    try:
        result = evaluate(request, SystemRandomSource(seed), config.max_dice_per_group)
    except FormulaError as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(1)
    _print_result(result, args, label)


def cmd_roll(args):
    """Roll a plain formula."""
    _roll(PoolRequest(formula=args.formula), args, "Roll")


def cmd_check(args):
    """Roll a d20 check."""
    request = CheckRequest(modifier=args.modifier, advantage_level=args.advantage)
    _roll(request, args, args.label or "Check")


def cmd_attack(args):
    """Roll an attack: to-hit die plus damage."""
    request = AttackRequest(
        formula=args.formula,
        modifier=args.modifier,
        advantage_level=args.advantage,
        to_hit_sides=None if args.no_to_hit else 20,
        vicious=args.vicious
    )
    _roll(request, args, args.label or "Attack")


def cmd_parse(args):
    """Show how a formula parses."""
    try:
        parsed = DiceParser.parse(args.formula, get_config().max_dice_per_group)
    except FormulaError as e:
        print(f"✗ {e.code}: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps({
            'notation': parsed.to_notation(),
            'terms': [
                {'count': t.count, 'sides': t.sides, 'sign': t.sign}
                if isinstance(t, DiceTerm) else {'value': t.value}
                for t in parsed.terms
            ]
        }, indent=2))
        return

    print(f"✓ {parsed.to_notation()}")
    for term in parsed.terms:
        if isinstance(term, DiceTerm):
            sign = '-' if term.sign < 0 else '+'
            print(f"  dice      {sign}{term.count}d{term.sides}")
        else:
            print(f"  modifier  {term.value:+d}")


def cmd_serve(args):
    """Serve the JSON API."""
    from src.web.server import run_server
    run_server(host=args.host, port=args.port, debug=args.debug)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='SheetRoll - dice formula engine for character sheets',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--log-level', default=None, help='Logging level (default: LOG_LEVEL)')

    # Options shared by the rolling commands
    roll_options = argparse.ArgumentParser(add_help=False)
    roll_options.add_argument('--seed', type=int, default=None, help='Random seed')
    roll_options.add_argument('--json', action='store_true', help='Print JSON')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # roll
    parser_roll = subparsers.add_parser('roll', parents=[roll_options], help='Roll a formula')
    parser_roll.add_argument('formula', help='Dice formula, e.g. "4d8 + 2d4 - 1"')
    parser_roll.set_defaults(func=cmd_roll)

    # check
    parser_check = subparsers.add_parser('check', parents=[roll_options],
                                         help='Roll a d20 check')
    parser_check.add_argument('--modifier', type=int, default=0, help='Flat modifier')
    parser_check.add_argument('--advantage', type=int, default=0,
                              help='Advantage level (negative for disadvantage)')
    parser_check.add_argument('--label', help='Label, e.g. "Strength check"')
    parser_check.set_defaults(func=cmd_check)

    # attack
    parser_attack = subparsers.add_parser('attack', parents=[roll_options],
                                          help='Roll an attack')
    parser_attack.add_argument('formula', help='Damage formula, e.g. "1d8"')
    parser_attack.add_argument('--modifier', type=int, default=0, help='Flat damage modifier')
    parser_attack.add_argument('--advantage', type=int, default=0,
                               help='Advantage level on the to-hit die')
    parser_attack.add_argument('--vicious', action='store_true',
                               help='Extra die on a critical hit')
    parser_attack.add_argument('--no-to-hit', action='store_true',
                               help='Roll damage only (no fumbles)')
    parser_attack.add_argument('--label', help='Label, e.g. "Dagger attack"')
    parser_attack.set_defaults(func=cmd_attack)

    # parse
    parser_parse = subparsers.add_parser('parse', help='Show how a formula parses')
    parser_parse.add_argument('formula', help='Dice formula')
    parser_parse.add_argument('--json', action='store_true', help='Print JSON')
    parser_parse.set_defaults(func=cmd_parse)

    # serve
    parser_serve = subparsers.add_parser('serve', help='Serve the JSON API')
    parser_serve.add_argument('--host', default=None, help='Host to bind to (default: HOST)')
    parser_serve.add_argument('--port', type=int, default=None, help='Port (default: PORT)')
    parser_serve.add_argument('--debug', action='store_true', default=None,
                              help='Enable debug mode')
    parser_serve.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    config = get_config()
    setup_logging(level=args.log_level or config.log_level, log_file=config.log_file)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    args.func(args)


if __name__ == '__main__':
    main()
