"""
Integration tests for complete workflows through the JSON API.
"""

import pytest

from src.modules.rng import ScriptedRandomSource
from src.web.server import create_app


@pytest.fixture
def make_client(config):
    """Build a test client whose dice come up as the given values."""
    def make(*values):
        app = create_app(config, source=ScriptedRandomSource(values))
        app.config['TESTING'] = True
        return app.test_client()
    return make


def test_check_roll_is_logged(make_client):
    """Test a check with advantage is rolled and recorded in the log."""
    client = make_client(4, 17, 9)

    response = client.post('/api/roll/check', json={
        'modifier': 2,
        'advantage_level': 2,
        'description': 'Strength check'
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data['success']
    assert data['description'] == 'Strength check'
    assert data['result']['total'] == 19
    assert len(data['result']['dropped_dice']) == 2
    assert data['result']['formula'] == 'd20+2'

    log = client.get('/api/log').get_json()
    assert log['entries'][0]['type'] == 'roll'
    assert log['entries'][0]['description'] == 'Strength check'
    assert log['entries'][0]['result']['total'] == 19


def test_attack_critical_and_fumble(make_client):
    """Test an attack with a critical, then a fumbled attack."""
    client = make_client(12, 8, 5, 1, 4, 2)

    hit = client.post('/api/roll/attack', json={
        'formula': '1d8',
        'modifier': 2,
        'description': 'Dagger attack'
    }).get_json()
    assert hit['result']['num_criticals'] == 1
    assert hit['result']['total'] == 15
    assert hit['result']['effective_total'] == 15

    miss = client.post('/api/roll/attack', json={
        'formula': '2d6+3',
        'description': 'Longsword attack'
    }).get_json()
    assert miss['result']['is_miss'] is True
    assert miss['result']['total'] == 9
    assert miss['result']['effective_total'] == 0
    assert miss['result']['breakdown'] == "to-hit [1] | [4] + [2] + 3 = 9 | MISS"

    entries = client.get('/api/log').get_json()['entries']
    assert [e['description'] for e in entries] == ['Longsword attack', 'Dagger attack']


def test_pool_roll(make_client):
    client = make_client(1, 2, 3, 4, 1, 2)
    data = client.post('/api/roll/pool', json={'formula': '4d8 + 2d4 - 1'}).get_json()
    assert data['result']['formula'] == '4d8+2d4-1'
    assert data['result']['total'] == 12


def test_rejected_formulas(make_client):
    """Test bad formulas return error codes and are not logged."""
    client = make_client(3)

    response = client.post('/api/roll/pool', json={'formula': '2d6++3'})
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'formula_syntax'

    response = client.post('/api/roll/attack', json={'formula': '1d7'})
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'unsupported_die'

    assert client.get('/api/log').get_json()['entries'] == []


def test_invalid_payloads(make_client):
    """Test schema validation of roll requests."""
    client = make_client()

    response = client.post('/api/roll/pool', json={})
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'schema_validation_failed'

    response = client.post('/api/roll/check', json={'advantage_level': 11})
    assert response.status_code == 400

    response = client.post('/api/roll/check', json={'modifier': 'two'})
    assert response.status_code == 400


def test_unknown_routes(make_client):
    client = make_client()
    assert client.post('/api/roll/spell', json={}).status_code == 404
    assert client.post('/api/log/mana', json={'amount': 1}).status_code == 404
    assert client.get('/api/roll/check').status_code == 405


def test_initiative(make_client):
    """Test initiative reports and logs the actions granted."""
    client = make_client(9, 1)

    data = client.post('/api/roll/initiative', json={'modifier': 1}).get_json()
    assert data['actions_granted'] == 10
    assert data['result']['total'] == 10

    data = client.post('/api/roll/initiative', json={'modifier': -3}).get_json()
    assert data['actions_granted'] == 1

    entry = client.get('/api/log?limit=1').get_json()['entries'][0]
    assert entry['type'] == 'initiative'
    assert entry['description'] == "Initiative -2 - Combat started with 1 actions"


def test_formula_tools(make_client):
    """Test formula validation and parsing endpoints."""
    client = make_client()

    assert client.post('/api/formula/validate', json={'formula': '2d6+3'}).get_json()['valid']

    invalid = client.post('/api/formula/validate', json={'formula': '1d7'}).get_json()
    assert invalid['valid'] is False
    assert invalid['error_code'] == 'unsupported_die'

    parsed = client.post('/api/formula/parse', json={'formula': '4d8 + 2d4 - 1'}).get_json()
    assert parsed['notation'] == '4d8+2d4-1'
    assert parsed['modifier'] == -1
    assert parsed['terms'][0] == {'type': 'dice', 'count': 4, 'sides': 8, 'sign': 1}
    assert parsed['terms'][2] == {'type': 'modifier', 'value': -1}

    response = client.post('/api/formula/parse', json={'formula': '2d'})
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'formula_syntax'


def test_hit_point_entries(make_client):
    """Test damage, healing and temporary HP entries."""
    client = make_client()

    response = client.post('/api/log/damage', json={'amount': 5})
    assert response.status_code == 201
    client.post('/api/log/healing', json={'amount': 3})
    client.post('/api/log/temp_hp', json={'amount': 6, 'previous': 4})

    descriptions = [e['description'] for e in client.get('/api/log').get_json()['entries']]
    assert descriptions == [
        'Gained 6 temporary HP (replaced 4)',
        'Healed 3 HP',
        'Took 5 damage',
    ]

    assert client.post('/api/log/damage', json={'amount': -1}).status_code == 400

    assert client.delete('/api/log').get_json()['success']
    assert client.get('/api/health').get_json()['log_entries'] == 0


def test_log_cap(config):
    """Test the log keeps only MAX_ROLL_HISTORY entries."""
    config.max_roll_history = 3
    app = create_app(config, source=ScriptedRandomSource([1, 2, 3, 4, 5]))
    client = app.test_client()

    for number in range(5):
        client.post('/api/roll/pool', json={'formula': '1d6', 'description': f'Roll {number}'})

    entries = client.get('/api/log').get_json()['entries']
    assert [e['description'] for e in entries] == ['Roll 4', 'Roll 3', 'Roll 2']


def test_log_limit(make_client):
    """Test the limit query keeps the newest entries and rejects negatives."""
    client = make_client()
    for amount in (1, 2, 3):
        client.post('/api/log/healing', json={'amount': amount})

    entries = client.get('/api/log?limit=2').get_json()['entries']
    assert [e['amount'] for e in entries] == [3, 2]
    assert client.get('/api/log?limit=0').get_json()['entries'] == []

    response = client.get('/api/log?limit=-1')
    assert response.status_code == 400
    assert response.get_json()['error_code'] == 'invalid_input'
