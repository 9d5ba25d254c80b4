"""
Configuration management for LogFollower.

This module provides classes and methods for loading, validating,
and managing application configuration with CLI integration support.
"""

import yaml
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, asdict, field
from .settings import Settings


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded."""
    pass


@dataclass
class TailerConfig:
    """Configuration for the log tailer."""
    poll_interval: float = Settings.DEFAULT_POLL_INTERVAL  # seconds
    pause_timeout: float = Settings.DEFAULT_PAUSE_TIMEOUT  # seconds
    chunk_size: int = Settings.DEFAULT_CHUNK_SIZE  # bytes per read
    encoding: str = Settings.DEFAULT_ENCODING
    start_paused: bool = False


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = Settings.DEFAULT_LOG_LEVEL
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class for LogFollower."""
    tailer: TailerConfig = field(default_factory=TailerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        # Environment variable overrides
        if os.getenv('LOGFOLLOWER_POLL_INTERVAL'):
            self.tailer.poll_interval = float(os.getenv('LOGFOLLOWER_POLL_INTERVAL'))
        if os.getenv('LOGFOLLOWER_PAUSE_TIMEOUT'):
            self.tailer.pause_timeout = float(os.getenv('LOGFOLLOWER_PAUSE_TIMEOUT'))
        if os.getenv('LOGFOLLOWER_LOG_LEVEL'):
            self.logging.level = os.getenv('LOGFOLLOWER_LOG_LEVEL')

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from a YAML file or return default configuration.

        Args:
            config_path: Path to configuration file

        Returns:
            Config instance

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping
        """
        # Check for config path in environment if not provided
        if not config_path:
            env_config_path = os.getenv('LOGFOLLOWER_CONFIG')
            if env_config_path:
                config_path = Path(env_config_path)

        if config_path and Path(config_path).exists():
            with open(config_path, 'r') as f:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid configuration file {config_path}: {e}") from e
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ConfigError(f"Configuration file {config_path} must contain a mapping")
            return cls.from_dict(data)
        else:
            # Return default configuration
            return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """
        Create Config instance from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance
        """
        tailer_data = data.get('tailer')
        logging_data = data.get('logging')

        try:
            tailer = TailerConfig(**tailer_data) if isinstance(tailer_data, dict) else TailerConfig()
            logging_config = LoggingConfig(**logging_data) if isinstance(logging_data, dict) else LoggingConfig()
        except TypeError as e:
            raise ConfigError(f"Unknown configuration key: {e}") from e

        return cls(tailer=tailer, logging=logging_config)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert Config instance to dictionary.

        Returns:
            Configuration dictionary
        """
        return asdict(self)

    def save(self, config_path: Path) -> None:
        """
        Save configuration to a YAML file.

        Args:
            config_path: Path to save configuration file
        """
        with open(config_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def validate(self) -> List[str]:
        """
        Validate the configuration and return a list of errors.

        Returns:
            List of validation errors, empty if valid
        """
        errors = []

        if self.tailer.poll_interval <= 0:
            errors.append("Tailer poll interval must be positive")
        if self.tailer.pause_timeout <= 0:
            errors.append("Tailer pause timeout must be positive")
        if self.tailer.chunk_size <= 0:
            errors.append("Tailer chunk size must be positive")
        try:
            ''.encode(self.tailer.encoding)
        except LookupError:
            errors.append(f"Unknown encoding: {self.tailer.encoding}")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid logging level: {self.logging.level}. Valid values: {', '.join(valid_log_levels)}")

        return errors

    def get_env_overrides(self) -> Dict[str, Any]:
        """
        Get configuration values that are overridden by environment variables.

        Returns:
            Dictionary of environment variable overrides
        """
        overrides = {}

        if os.getenv('LOGFOLLOWER_POLL_INTERVAL'):
            overrides['tailer.poll_interval'] = float(os.getenv('LOGFOLLOWER_POLL_INTERVAL'))
        if os.getenv('LOGFOLLOWER_PAUSE_TIMEOUT'):
            overrides['tailer.pause_timeout'] = float(os.getenv('LOGFOLLOWER_PAUSE_TIMEOUT'))
        if os.getenv('LOGFOLLOWER_LOG_LEVEL'):
            overrides['logging.level'] = os.getenv('LOGFOLLOWER_LOG_LEVEL')

        return overrides

    def apply_cli_overrides(self, cli_options: Dict[str, Any]) -> None:
        """
        Apply command-line interface options as overrides to the configuration.

        Args:
            cli_options: Dictionary of CLI options to apply
        """
        if cli_options.get('poll_interval'):
            self.tailer.poll_interval = cli_options['poll_interval']
        if cli_options.get('encoding'):
            self.tailer.encoding = cli_options['encoding']
        if cli_options.get('log_level'):
            self.logging.level = cli_options['log_level']
        if cli_options.get('paused') is not None:
            self.tailer.start_paused = cli_options['paused']
