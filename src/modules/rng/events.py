"""
Event definitions for RNG module.
"""

from src.core.models import EventTypeDefinition

MAX_ADVANTAGE_LEVEL = 10

# Shared by roll.requested events and the HTTP API
ROLL_REQUEST_SCHEMA = {
    "type": "object",
    "properties": {
        "kind": {
            "type": "string",
            "enum": ["check", "attack", "pool"],
            "description": "Which evaluator path to take"
        },
        "formula": {
            "type": "string",
            "description": "Dice formula (2d6+3, 1d8, 4d8 + 2d4 - 1)"
        },
        "modifier": {
            "type": "integer",
            "description": "Flat modifier added to the total",
            "default": 0
        },
        "advantage_level": {
            "type": "integer",
            "minimum": -MAX_ADVANTAGE_LEVEL,
            "maximum": MAX_ADVANTAGE_LEVEL,
            "description": "Positive for advantage, negative for disadvantage",
            "default": 0
        },
        "sides": {
            "type": "integer",
            "description": "Check die size",
            "default": 20
        },
        "to_hit_sides": {
            "type": ["integer", "null"],
            "description": "To-hit die size for attacks; null rolls damage only",
            "default": 20
        },
        "allow_criticals": {"type": "boolean", "default": True},
        "allow_fumbles": {"type": "boolean", "default": True},
        "vicious": {"type": "boolean", "default": False},
        "description": {
            "type": "string",
            "description": "Label for the activity log (\"Strength check\", \"Dagger attack\")",
            "default": ""
        },
        "request_id": {
            "type": "string",
            "description": "Caller's correlation id, echoed on the outcome event"
        }
    },
    "required": ["kind"],
    "allOf": [
        {
            "if": {"properties": {"kind": {"enum": ["attack", "pool"]}}},
            "then": {"required": ["formula"]}
        }
    ]
}


def roll_requested_event() -> EventTypeDefinition:
    """Event published when a character wants to make a roll."""
    return EventTypeDefinition(
        type="roll.requested",
        description="Request to roll dice",
        module="rng",
        data_schema=ROLL_REQUEST_SCHEMA
    )


def roll_completed_event() -> EventTypeDefinition:
    """
    Event published when a roll is completed.

    Carries the full RollResult.to_dict() for display and the activity log.
    """
    return EventTypeDefinition(
        type="roll.completed",
        description="Roll completed with full breakdown",
        module="rng",
        data_schema={
            "type": "object",
            "properties": {
                "description": {"type": "string"},
                "request_id": {"type": ["string", "null"]},
                "result": {
                    "type": "object",
                    "properties": {
                        "formula": {"type": "string"},
                        "kind": {"type": "string"},
                        "dice": {"type": "array"},
                        "dropped_dice": {"type": "array"},
                        "modifier": {"type": "integer"},
                        "total": {"type": "integer"},
                        "is_miss": {"type": "boolean"},
                        "num_criticals": {"type": "integer", "minimum": 0}
                    },
                    "required": ["formula", "kind", "dice", "dropped_dice", "modifier", "total"]
                }
            },
            "required": ["description", "result"]
        }
    )


def roll_failed_event() -> EventTypeDefinition:
    """Event published when a roll request could not be evaluated."""
    return EventTypeDefinition(
        type="roll.failed",
        description="Roll request rejected (bad formula or die size)",
        module="rng",
        data_schema={
            "type": "object",
            "properties": {
                "description": {"type": "string"},
                "request_id": {"type": ["string", "null"]},
                "error": {"type": "string"},
                "error_code": {"type": "string"}
            },
            "required": ["error", "error_code"]
        }
    )
