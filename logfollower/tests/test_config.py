"""
Tests for configuration loading and validation.
"""

import pytest
import yaml

from logfollower.config.config import Config, ConfigError, TailerConfig
from logfollower.config.settings import Settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ('LOGFOLLOWER_CONFIG', 'LOGFOLLOWER_POLL_INTERVAL',
                 'LOGFOLLOWER_PAUSE_TIMEOUT', 'LOGFOLLOWER_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)


class TestConfig:
    """Tests for the Config class."""

    def test_defaults(self):
        config = Config()

        assert config.tailer.poll_interval == Settings.DEFAULT_POLL_INTERVAL == 1.0
        assert config.tailer.pause_timeout == 1.0
        assert config.tailer.start_paused is False
        assert config.logging.level == "INFO"
        assert config.validate() == []

    def test_load_missing_file_returns_defaults(self, tmp_path):
        config = Config.load(tmp_path / "absent.yaml")

        assert config.tailer == TailerConfig()

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("tailer:\n  poll_interval: 0.25\n  start_paused: true\nlogging:\n  level: DEBUG\n")

        config = Config.load(path)

        assert config.tailer.poll_interval == 0.25
        assert config.tailer.start_paused is True
        assert config.tailer.pause_timeout == 1.0
        assert config.logging.level == "DEBUG"

    def test_load_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("tailer:\n  chunk_size: 128\n")
        monkeypatch.setenv('LOGFOLLOWER_CONFIG', str(path))

        assert Config.load().tailer.chunk_size == 128

    def test_empty_file_returns_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert Config.load(path).to_dict() == Config().to_dict()

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("tailer: [unclosed\n")

        with pytest.raises(ConfigError):
            Config.load(path)

    def test_unknown_key_raises(self, tmp_path):
        path = tmp_path / "unknown.yaml"
        path.write_text("tailer:\n  follow_symlinks: true\n")

        with pytest.raises(ConfigError):
            Config.load(path)

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv('LOGFOLLOWER_POLL_INTERVAL', '0.5')
        monkeypatch.setenv('LOGFOLLOWER_LOG_LEVEL', 'WARNING')

        config = Config()

        assert config.tailer.poll_interval == 0.5
        assert config.logging.level == 'WARNING'
        assert config.get_env_overrides() == {
            'tailer.poll_interval': 0.5,
            'logging.level': 'WARNING',
        }

    def test_cli_overrides(self):
        config = Config()

        config.apply_cli_overrides({'poll_interval': 3.0, 'paused': True, 'log_level': None})

        assert config.tailer.poll_interval == 3.0
        assert config.tailer.start_paused is True
        assert config.logging.level == "INFO"

    def test_validate_reports_errors(self):
        config = Config()
        config.tailer.poll_interval = 0
        config.tailer.chunk_size = -1
        config.tailer.encoding = "no-such-codec"
        config.logging.level = "LOUD"

        errors = config.validate()

        assert len(errors) == 4
        assert any("poll interval" in error for error in errors)
        assert any("no-such-codec" in error for error in errors)

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "saved.yaml"
        config = Config()
        config.tailer.poll_interval = 2.5

        config.save(path)

        assert yaml.safe_load(path.read_text())['tailer']['poll_interval'] == 2.5
        assert Config.load(path).tailer.poll_interval == 2.5
