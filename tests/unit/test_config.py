"""
Unit tests for configuration loading.
"""

from src.core.config import Config, get_config, reset_config


class TestConfig:
    """Test environment-driven settings."""

    def test_defaults(self, clean_env):
        """Test defaults without any environment."""
        config = Config()

        assert config.host == '127.0.0.1'
        assert config.port == 5000
        assert config.debug is False
        assert config.log_level == 'INFO'
        assert config.log_file is None
        assert config.dice_seed is None
        assert config.max_dice_per_group == 100
        assert config.max_roll_history == 100
        assert config.activity_log_path is None
        assert config.validate()

    def test_environment_overrides(self, clean_env):
        """Test values are read from the environment."""
        clean_env.setenv('DICE_SEED', '7')
        clean_env.setenv('MAX_ROLL_HISTORY', '50')
        clean_env.setenv('MAX_DICE_PER_GROUP', '20')
        clean_env.setenv('DEBUG', 'yes')
        clean_env.setenv('LOG_LEVEL', 'debug')

        config = Config()

        assert config.dice_seed == 7
        assert config.max_roll_history == 50
        assert config.max_dice_per_group == 20
        assert config.debug is True
        assert config.log_level == 'DEBUG'

    def test_env_file(self, clean_env, tmp_path):
        """Test settings from an explicit .env file."""
        env_file = tmp_path / '.env'
        env_file.write_text('MAX_DICE_PER_GROUP=12\nPORT=8080\n')

        config = Config(env_file=str(env_file))

        assert config.max_dice_per_group == 12
        assert config.port == 8080

    def test_validate_rejects_bad_values(self, clean_env):
        """Test validation of log level and limits."""
        clean_env.setenv('LOG_LEVEL', 'LOUD')
        assert not Config().validate()

        clean_env.setenv('LOG_LEVEL', 'INFO')
        clean_env.setenv('MAX_ROLL_HISTORY', '0')
        assert not Config().validate()

    def test_global_config(self, clean_env):
        """Test get_config() caches until reset_config()."""
        first = get_config()
        assert get_config() is first

        reset_config()
        assert get_config() is not first
