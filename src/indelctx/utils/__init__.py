"""
Utility modules for indelctx.

Provides logging and timing helpers.
"""

from .logging import PACKAGE_LOGGER, log_call, setup_logging, timed

__all__ = [
    "PACKAGE_LOGGER",
    "log_call",
    "setup_logging",
    "timed",
]
