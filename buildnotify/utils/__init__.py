"""Utility modules for buildnotify."""

from .logging import get_logger, register_secret, setup_logging

__all__ = [
    "get_logger",
    "register_secret",
    "setup_logging",
]
