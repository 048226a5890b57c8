"""
hashwatch Utilities Package.

Common utilities shared across all backend modules.
Requires Python 3.11+.
"""

from utils.config import Settings, get_settings
from utils.console import ConsoleReporter
from utils.errors import DigestError, HashWatchError, RebuildError, StartupError
from utils.logger import close_logging, configure_logging, get_logger, logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "ConsoleReporter",
    "HashWatchError",
    "StartupError",
    "DigestError",
    "RebuildError",
    "configure_logging",
    "close_logging",
    "get_logger",
    "logger",
    "LoggerMixin",
]
