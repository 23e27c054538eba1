"""
SheetRoll settings.

Every setting is read from an environment variable. A .env file (loaded with
python-dotenv) can supply them; variables already in the environment win.

    HOST, PORT, DEBUG        API server
    LOG_LEVEL, LOG_FILE      logging
    DICE_SEED                seed for the shared random source
    MAX_DICE_PER_GROUP       largest dice count in one group
    MAX_ROLL_HISTORY         activity log cap
    ACTIVITY_LOG_PATH        JSON file the activity log persists to
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, '').strip()
    return int(raw) if raw else default


def _env_bool(name: str) -> bool:
    return os.getenv(name, '').strip().lower() in ('true', '1', 'yes', 'on')


class Config:
    """
    Snapshot of the settings, taken when the object is created.

    Args:
        env_file: .env file to load. Without it, PROJECT_ROOT/.env is loaded
                  when present.

    Example:
        config = Config()
        config.max_dice_per_group   # 100
        config.dice_seed            # None unless DICE_SEED is set
    """

    def __init__(self, env_file: Optional[str] = None):
        dotenv_path = Path(env_file) if env_file else PROJECT_ROOT / '.env'
        if dotenv_path.is_file():
            load_dotenv(dotenv_path)
            logger.info(f"Read settings from {dotenv_path}")
        elif env_file:
            logger.warning(f"Settings file {env_file} not found")

        # API server
        self.host = os.getenv('HOST') or '127.0.0.1'
        self.port = _env_int('PORT', 5000)
        self.debug = _env_bool('DEBUG')

        # Logging
        self.log_level = (os.getenv('LOG_LEVEL') or 'INFO').upper()
        self.log_file = os.getenv('LOG_FILE') or None

        # Dice engine
        self.dice_seed = _env_int('DICE_SEED', None)
        self.max_dice_per_group = _env_int('MAX_DICE_PER_GROUP', 100)

        # Activity log
        self.max_roll_history = _env_int('MAX_ROLL_HISTORY', 100)
        self.activity_log_path = os.getenv('ACTIVITY_LOG_PATH') or None

    def problems(self) -> List[str]:
        """Settings SheetRoll cannot run with."""
        found = []
        if self.log_level not in LOG_LEVELS:
            found.append(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level}")
        if self.max_dice_per_group < 1:
            found.append(f"MAX_DICE_PER_GROUP must be at least 1, got {self.max_dice_per_group}")
        if self.max_roll_history < 1:
            found.append(f"MAX_ROLL_HISTORY must be at least 1, got {self.max_roll_history}")
        return found

    def validate(self) -> bool:
        """Log every problem; True when there are none."""
        problems = self.problems()
        for problem in problems:
            logger.error(problem)

        if self.dice_seed is not None and not self.debug:
            logger.warning("DICE_SEED is set outside debug mode; rolls are predictable.")

        return not problems

    def __repr__(self) -> str:
        return (
            f"Config(port={self.port}, debug={self.debug}, "
            f"max_dice_per_group={self.max_dice_per_group}, "
            f"max_roll_history={self.max_roll_history}, "
            f"seeded={self.dice_seed is not None})"
        )


_config: Optional[Config] = None


def get_config() -> Config:
    """Process-wide Config, created and validated on first use."""
    global _config
    if _config is None:
        _config = Config()
        _config.validate()
    return _config


def reset_config() -> None:
    """Forget the process-wide Config; the next get_config() reads the environment again."""
    global _config
    _config = None


__all__ = ['Config', 'get_config', 'reset_config']
