"""
Rolls Blueprint - JSON API for the dice engine and the activity log.

Endpoints:
- POST /api/roll/check       - d20 check: {"modifier": 2, "advantage_level": 1, "description": "..."}
- POST /api/roll/attack      - attack: {"formula": "1d8", "modifier": 3, "vicious": false, ...}
- POST /api/roll/pool        - plain formula: {"formula": "4d6"}
- POST /api/roll/initiative  - initiative check, logged with actions granted
- POST /api/formula/validate - {"formula": "2d6+3"} -> valid / error code
- POST /api/formula/parse    - {"formula": "2d6+3"} -> terms and canonical notation
- GET  /api/log              - activity log, newest first (?limit=N)
- POST /api/log/<entry_type> - damage, healing or temp_hp entry
- DELETE /api/log            - clear the activity log
"""

import logging

import jsonschema
from flask import Blueprint, current_app, jsonify, request

from src.core.result import ErrorCode
from src.modules.activity_log import (
    create_damage_entry,
    create_healing_entry,
    create_temp_hp_entry,
)
from src.modules.rng import CheckRequest, DiceParser, DiceTerm, FormulaError
from src.modules.rng.events import MAX_ADVANTAGE_LEVEL, ROLL_REQUEST_SCHEMA

logger = logging.getLogger(__name__)

rolls_bp = Blueprint('rolls', __name__)

ROLL_KINDS = ('check', 'attack', 'pool')

FORMULA_SCHEMA = {
    "type": "object",
    "properties": {"formula": {"type": "string"}},
    "required": ["formula"]
}

INITIATIVE_SCHEMA = {
    "type": "object",
    "properties": {
        "modifier": {"type": "integer", "default": 0},
        "advantage_level": {
            "type": "integer",
            "minimum": -MAX_ADVANTAGE_LEVEL,
            "maximum": MAX_ADVANTAGE_LEVEL,
            "default": 0
        }
    }
}

HP_ENTRY_SCHEMA = {
    "type": "object",
    "properties": {
        "amount": {"type": "integer", "minimum": 0},
        "target_type": {"type": "string", "enum": ["hp", "temp_hp"]},
        "previous": {"type": ["integer", "null"]}
    },
    "required": ["amount"]
}


def _payload(schema: dict):
    """
    Read and validate the JSON body.

    Returns:
        (data, None) when valid, (None, error response) otherwise
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        return None, (jsonify({
            'success': False,
            'error': f"Invalid request: {e.message}",
            'error_code': ErrorCode.SCHEMA_VALIDATION_FAILED.value
        }), 400)
    return data, None


def _formula_error(e: FormulaError):
    return jsonify({
        'success': False,
        'error': str(e),
        'error_code': e.code.value
    }), 400


# ========== Roll Endpoints ==========

@rolls_bp.route('/api/roll/<kind>', methods=['POST'])
def api_roll(kind):
    """
    Roll a check, attack or pool.

    Returns:
        {
            "success": true,
            "description": "Dagger attack",
            "result": {... RollResult.to_dict() ...}
        }
    """
    if kind == 'initiative':
        return api_roll_initiative()
    if kind not in ROLL_KINDS:
        return jsonify({
            'success': False,
            'error': f'Unknown roll kind: {kind}',
            'error_code': ErrorCode.INVALID_INPUT.value
        }), 404

    raw = request.get_json(silent=True) or {}
    if not isinstance(raw, dict):
        raw = {}
    data = dict(raw, kind=kind)
    try:
        jsonschema.validate(data, ROLL_REQUEST_SCHEMA)
    except jsonschema.ValidationError as e:
        return jsonify({
            'success': False,
            'error': f"Invalid request: {e.message}",
            'error_code': ErrorCode.SCHEMA_VALIDATION_FAILED.value
        }), 400

    result = current_app.rng_module.handle_request(data, actor_id=data.get('actor_id'))
    if not result.success:
        return jsonify(result.to_dict()), 400

    return jsonify({
        'success': True,
        'description': data.get('description', ''),
        'result': result.data.to_dict()
    })


def api_roll_initiative():
    """Initiative is a d20 check; the log records the actions it grants."""
    data, error = _payload(INITIATIVE_SCHEMA)
    if error:
        return error

    request_obj = CheckRequest(
        modifier=data.get('modifier', 0),
        advantage_level=data.get('advantage_level', 0)
    )
    roll = current_app.rng_module.roll_direct(request_obj)
    entry = current_app.activity_log.record_initiative(roll)

    return jsonify({
        'success': True,
        'actions_granted': entry.actions_granted,
        'result': roll.to_dict()
    })


# ========== Formula Tools ==========

@rolls_bp.route('/api/formula/validate', methods=['POST'])
def api_validate_formula():
    """Tell a form whether its roll control should be enabled."""
    data, error = _payload(FORMULA_SCHEMA)
    if error:
        return error

    max_dice = current_app.config['SHEETROLL'].max_dice_per_group
    try:
        DiceParser.parse(data['formula'], max_dice)
    except FormulaError as e:
        return jsonify({
            'success': True,
            'valid': False,
            'error': str(e),
            'error_code': e.code.value
        })
    return jsonify({'success': True, 'valid': True})


@rolls_bp.route('/api/formula/parse', methods=['POST'])
def api_parse_formula():
    data, error = _payload(FORMULA_SCHEMA)
    if error:
        return error

    max_dice = current_app.config['SHEETROLL'].max_dice_per_group
    try:
        parsed = DiceParser.parse(data['formula'], max_dice)
    except FormulaError as e:
        return _formula_error(e)

    terms = []
    for term in parsed.terms:
        if isinstance(term, DiceTerm):
            terms.append({'type': 'dice', 'count': term.count, 'sides': term.sides,
                          'sign': term.sign})
        else:
            terms.append({'type': 'modifier', 'value': term.value})

    return jsonify({
        'success': True,
        'source': parsed.source,
        'notation': parsed.to_notation(),
        'modifier': parsed.modifier,
        'terms': terms
    })


# ========== Activity Log ==========

@rolls_bp.route('/api/log', methods=['GET'])
def api_get_log():
    limit = request.args.get('limit', type=int)
    if limit is not None and limit < 0:
        return jsonify({
            'success': False,
            'error': f'limit must not be negative, got {limit}',
            'error_code': ErrorCode.INVALID_INPUT.value
        }), 400

    entries = current_app.activity_log.entries(limit)
    return jsonify({
        'success': True,
        'entries': [entry.to_dict() for entry in entries]
    })


@rolls_bp.route('/api/log/<entry_type>', methods=['POST'])
def api_add_log_entry(entry_type):
    """Record a hit point change reported by the character layer."""
    if entry_type not in ('damage', 'healing', 'temp_hp'):
        return jsonify({
            'success': False,
            'error': f'Unknown entry type: {entry_type}',
            'error_code': ErrorCode.INVALID_INPUT.value
        }), 404

    data, error = _payload(HP_ENTRY_SCHEMA)
    if error:
        return error

    if entry_type == 'damage':
        entry = create_damage_entry(data['amount'], data.get('target_type', 'hp'))
    elif entry_type == 'healing':
        entry = create_healing_entry(data['amount'])
    else:
        entry = create_temp_hp_entry(data['amount'], data.get('previous'))

    current_app.activity_log.add(entry)
    return jsonify({'success': True, 'entry': entry.to_dict()}), 201


@rolls_bp.route('/api/log', methods=['DELETE'])
def api_clear_log():
    current_app.activity_log.clear()
    logger.info("Activity log cleared")
    return jsonify({'success': True})
