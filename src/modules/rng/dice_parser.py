"""
Dice formula parser.

A formula is one or more terms joined by '+' or '-':
- 1d20 (single die)
- 2d6+3 (dice group with a flat modifier)
- 4d8 + 2d4 - 1 (several groups, spacing ignored)
- d20 (count defaults to 1)
- -1d4 (a leading sign is allowed)

There is one precedence level and no grouping, so the parser is a single
left-to-right scan.
"""

import re
from dataclasses import dataclass
from typing import Tuple, Union

from src.core.result import ErrorCode

SUPPORTED_DIE_SIZES = (4, 6, 8, 10, 12, 20, 100)
DEFAULT_MAX_DICE_PER_GROUP = 100


class FormulaError(Exception):
    """Raised when a dice formula cannot be evaluated."""

    code = ErrorCode.FORMULA_SYNTAX

    def __init__(self, message: str, formula: str = None):
        super().__init__(message)
        self.formula = formula


class FormulaSyntaxError(FormulaError):
    """Malformed formula: empty, doubled operators, missing die size, etc."""

    code = ErrorCode.FORMULA_SYNTAX


class UnsupportedDieError(FormulaError):
    """Die size outside SUPPORTED_DIE_SIZES."""

    code = ErrorCode.UNSUPPORTED_DIE

    def __init__(self, sides: int, formula: str = None):
        sizes = ', '.join(f"d{s}" for s in SUPPORTED_DIE_SIZES)
        super().__init__(f"Unsupported die d{sides}. Valid types are: {sizes}", formula)
        self.sides = sides


def check_die_size(sides: int, formula: str = None) -> int:
    """Return sides unchanged, or raise UnsupportedDieError."""
    if sides not in SUPPORTED_DIE_SIZES:
        raise UnsupportedDieError(sides, formula)
    return sides


@dataclass(frozen=True)
class DiceTerm:
    """A group of identical dice, e.g. the 2d6 in 2d6+3."""
    count: int
    sides: int
    sign: int = 1

    def __str__(self) -> str:
        return f"{self.count}d{self.sides}"


@dataclass(frozen=True)
class ModifierTerm:
    """A flat signed number, e.g. the -1 in 1d8-1."""
    value: int

    def __str__(self) -> str:
        return str(abs(self.value))


Term = Union[DiceTerm, ModifierTerm]


@dataclass(frozen=True)
class ParsedFormula:
    """Complete parsed formula: terms in source order plus the original text."""
    terms: Tuple[Term, ...]
    source: str

    @property
    def dice_terms(self) -> Tuple[DiceTerm, ...]:
        return tuple(t for t in self.terms if isinstance(t, DiceTerm))

    @property
    def modifier(self) -> int:
        """Sum of all flat modifier terms."""
        return sum(t.value for t in self.terms if isinstance(t, ModifierTerm))

    def to_notation(self) -> str:
        """
        Canonical text for the formula.

        Examples:
            " 4d8 + 2d4 - 1 " -> "4d8+2d4-1"
            "d20+0"          -> "1d20+0"
        """
        parts = []
        for index, term in enumerate(self.terms):
            if isinstance(term, DiceTerm):
                negative = term.sign < 0
            else:
                negative = term.value < 0
            if index == 0:
                parts.append(f"-{term}" if negative else str(term))
            else:
                parts.append(f"{'-' if negative else '+'}{term}")
        return ''.join(parts)

    def __str__(self) -> str:
        return self.source


class DiceParser:
    """Parser for dice formulas."""

    SIGN_PATTERN = re.compile(r'\s*([+-])')
    TERM_PATTERN = re.compile(r'\s*(?:(?P<count>[0-9]*)[dD](?P<sides>[0-9]*)|(?P<value>[0-9]+))')
    END_PATTERN = re.compile(r'\s*\Z')

    @classmethod
    def parse(cls, formula: str,
              max_dice_per_group: int = DEFAULT_MAX_DICE_PER_GROUP) -> ParsedFormula:
        """
        Parse a formula into an ordered sequence of terms.

        Examples:
            "2d6+3" -> ParsedFormula(terms=(DiceTerm(2, 6, 1), ModifierTerm(3)), ...)
            "d20-1" -> ParsedFormula(terms=(DiceTerm(1, 20, 1), ModifierTerm(-1)), ...)

        Args:
            formula: Formula string
            max_dice_per_group: Largest count accepted for one dice group

        Returns:
            ParsedFormula

        Raises:
            FormulaSyntaxError: If the formula is malformed
            UnsupportedDieError: If a die size is not supported
        """
        if not isinstance(formula, str):
            raise FormulaSyntaxError("Formula must be a string", formula)
        if not formula.strip():
            raise FormulaSyntaxError("Formula cannot be empty", formula)

        terms = []
        pos = 0
        while True:
            sign = 1
            sign_match = cls.SIGN_PATTERN.match(formula, pos)
            if sign_match:
                sign = -1 if sign_match.group(1) == '-' else 1
                pos = sign_match.end()
            elif terms:
                raise FormulaSyntaxError(
                    f"Expected '+' or '-' at position {pos} in '{formula}'", formula
                )

            term_match = cls.TERM_PATTERN.match(formula, pos)
            if not term_match:
                raise FormulaSyntaxError(
                    f"Expected a dice group or number at position {pos} in '{formula}'",
                    formula
                )
            terms.append(cls._build_term(term_match, sign, formula, max_dice_per_group))
            pos = term_match.end()

            if cls.END_PATTERN.match(formula, pos):
                break

        return ParsedFormula(terms=tuple(terms), source=formula)

    @classmethod
    def _build_term(cls, match: 're.Match', sign: int, formula: str,
                    max_dice_per_group: int) -> Term:
        if match.group('value') is not None:
            return ModifierTerm(sign * int(match.group('value')))

        sides_text = match.group('sides')
        if not sides_text:
            raise FormulaSyntaxError(f"Missing die size in '{formula}'", formula)
        if len(sides_text) > 1 and sides_text.startswith('0'):
            raise FormulaSyntaxError(f"Die size '{sides_text}' has a leading zero", formula)

        count = int(match.group('count') or 1)
        if count < 1:
            raise FormulaSyntaxError(f"Dice count must be at least 1, got {count}", formula)
        if count > max_dice_per_group:
            raise FormulaSyntaxError(
                f"Dice count too large (max {max_dice_per_group}), got {count}", formula
            )

        sides = check_die_size(int(sides_text), formula)
        return DiceTerm(count=count, sides=sides, sign=sign)

    @classmethod
    def validate(cls, formula: str,
                 max_dice_per_group: int = DEFAULT_MAX_DICE_PER_GROUP) -> bool:
        """
        Check if a formula is valid without keeping the parse.

        Returns:
            True if valid, False otherwise
        """
        try:
            cls.parse(formula, max_dice_per_group)
            return True
        except FormulaError:
            return False


def parse(formula: str) -> ParsedFormula:
    """Module-level shortcut for DiceParser.parse."""
    return DiceParser.parse(formula)
