"""Configuration module for LogFollower."""

from .config import Config, ConfigError, LoggingConfig, TailerConfig
from .settings import Settings

__all__ = ['Config', 'ConfigError', 'LoggingConfig', 'TailerConfig', 'Settings']
