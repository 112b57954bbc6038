"""Utility modules for disposable containers."""

from .logging import setup_logging

__all__ = [
    "setup_logging",
]
