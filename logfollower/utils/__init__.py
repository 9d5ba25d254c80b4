"""Utilities module for LogFollower."""

from .formatting import FormattingUtils

__all__ = ['FormattingUtils']
