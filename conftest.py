"""
Shared pytest fixtures.
"""

import pytest

from src.core.config import Config, reset_config
from src.modules.rng import ScriptedRandomSource

CONFIG_ENV_VARS = (
    'HOST', 'PORT', 'DEBUG', 'LOG_LEVEL', 'LOG_FILE', 'DICE_SEED',
    'MAX_DICE_PER_GROUP', 'MAX_ROLL_HISTORY', 'ACTIVITY_LOG_PATH',
)


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts without a cached global config."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove config variables from the environment; restored after the test."""
    for name in CONFIG_ENV_VARS:
        # setenv first so monkeypatch restores the original state, even for
        # values load_dotenv writes later
        monkeypatch.setenv(name, '')
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def config(clean_env):
    """Default configuration."""
    return Config()


@pytest.fixture
def scripted():
    """Factory for scripted random sources: scripted(4, 17, 9)."""
    def make(*values):
        return ScriptedRandomSource(values)
    return make
