"""
Settings management for LogFollower.

This module provides application-wide settings and constants.
"""


class Settings:
    """Application settings and constants."""

    # Application settings
    APP_NAME: str = "LogFollower"

    # Default paths
    DEFAULT_CONFIG_PATH: str = "./logfollower.yaml"

    # Tailer settings
    DEFAULT_POLL_INTERVAL: float = 1.0  # seconds between passes
    DEFAULT_PAUSE_TIMEOUT: float = 1.0  # seconds per wait while paused
    DEFAULT_CHUNK_SIZE: int = 65536  # bytes handed to the parser per read
    DEFAULT_ENCODING: str = "utf-8"

    # Logging settings
    DEFAULT_LOG_LEVEL: str = "INFO"
