"""
Success/failure values for SheetRoll's outer layers.

The dice engine raises FormulaError. The RNG module, the HTTP API and the
event handlers turn that into a Result, so a rejected formula is reported to
the caller rather than raised through it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorCode(Enum):
    """Machine-readable reason a roll or request was rejected."""

    FORMULA_SYNTAX = "formula_syntax"                       # Malformed formula text
    UNSUPPORTED_DIE = "unsupported_die"                     # Die size not in the supported set
    SCHEMA_VALIDATION_FAILED = "schema_validation_failed"   # Payload failed its JSON Schema
    INVALID_INPUT = "invalid_input"                         # Unknown roll kind, entry type or bad query

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Result:
    """
    Outcome of an operation at an application boundary.

    Attributes:
        success: True when data holds the value
        data: The value, a RollResult for rolls
        error: Message for the user on failure
        error_code: ErrorCode value on failure

    Example:
        >>> result = rng_module.try_roll(PoolRequest("2d7"))
        >>> result.success, result.error_code
        (False, 'unsupported_die')
    """
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> 'Result':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: Union[ErrorCode, str, None] = None) -> 'Result':
        """Failed result; an ErrorCode is stored as its string value."""
        if isinstance(code, ErrorCode):
            code = code.value
        return cls(success=False, error=error, error_code=code)

    def to_dict(self) -> Dict[str, Any]:
        """JSON envelope used by the HTTP API."""
        if self.success:
            return {'success': True, 'data': self.data}
        return {'success': False, 'error': self.error, 'error_code': self.error_code}

    def __bool__(self) -> bool:
        return self.success
