"""Parsers module for LogFollower."""

from .base_parser import StreamParser
from .line_parser import LineParser

__all__ = ['StreamParser', 'LineParser']
