"""
Integration tests for the command-line interface.
"""

import json
import logging
import sys

import pytest

from src.cli.commands import main


@pytest.fixture(autouse=True)
def restore_root_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, 'argv', ['sheetroll', *args])
    main()


def test_roll_json(config, monkeypatch, capsys):
    """Test a seeded roll printed as JSON."""
    run_cli(monkeypatch, 'roll', '2d6+3', '--seed', '1', '--json')

    data = json.loads(capsys.readouterr().out)
    assert data['formula'] == '2d6+3'
    assert data['kind'] == 'pool'
    assert data['total'] == sum(d['value'] for d in data['dice']) + 3


def test_seeded_rolls_repeat(config, monkeypatch, capsys):
    """Test the same seed prints the same roll."""
    run_cli(monkeypatch, 'attack', '1d8', '--seed', '42', '--json')
    first = json.loads(capsys.readouterr().out)
    run_cli(monkeypatch, 'attack', '1d8', '--seed', '42', '--json')
    second = json.loads(capsys.readouterr().out)

    assert first == second


def test_check_with_disadvantage(config, monkeypatch, capsys):
    run_cli(monkeypatch, 'check', '--advantage', '-1', '--modifier', '2', '--seed', '3', '--json')

    data = json.loads(capsys.readouterr().out)
    assert data['formula'] == 'd20+2'
    assert len(data['dice']) == 1
    assert len(data['dropped_dice']) == 1


def test_roll_text_output(config, monkeypatch, capsys):
    """Test the human-readable output."""
    run_cli(monkeypatch, 'check', '--label', 'Strength check', '--seed', '5')

    out = capsys.readouterr().out
    assert 'Strength check: d20' in out
    assert 'Total:' in out


def test_bad_formula(config, monkeypatch, capsys):
    """Test formula errors exit with status 1."""
    with pytest.raises(SystemExit) as exc_info:
        run_cli(monkeypatch, 'roll', '2d6++3')

    assert exc_info.value.code == 1
    assert 'Error' in capsys.readouterr().err


def test_parse(config, monkeypatch, capsys):
    """Test the parse command shows canonical notation and terms."""
    run_cli(monkeypatch, 'parse', '4d8 + 2d4 - 1')
    out = capsys.readouterr().out
    assert '4d8+2d4-1' in out
    assert 'modifier  -1' in out

    run_cli(monkeypatch, 'parse', 'd20', '--json')
    data = json.loads(capsys.readouterr().out)
    assert data == {'notation': '1d20', 'terms': [{'count': 1, 'sides': 20, 'sign': 1}]}


def test_no_command(config, monkeypatch):
    with pytest.raises(SystemExit):
        run_cli(monkeypatch)
