"""Level-gated logging used by the location utilities."""

from __future__ import annotations

import enum
import logging
import time
from typing import Optional

DEFAULT_DEBUG_LEVEL = 0xFF

_log = logging.getLogger("gnsslocutils")


class LogLevel(enum.IntEnum):
    """Configured verbosity threshold of each message kind."""

    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4
    VERBOSE = 5


_PREFIX = {
    LogLevel.ERROR: "W/",
    LogLevel.WARNING: "W/",
    LogLevel.INFO: "I/",
    LogLevel.DEBUG: "D/",
    LogLevel.VERBOSE: "V/",
}

_NATIVE_LEVEL = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.VERBOSE: logging.DEBUG,
}


class LocLogger:
    """Holds the debug level and timestamp switch read from configuration.

    A debug level of 0xff means "not configured": every message goes out at
    its own native level. A level between 1 and 5 lets through messages up to
    that verbosity, all emitted as errors. Any other level silences output.
    """

    def __init__(
        self, debug_level: int = DEFAULT_DEBUG_LEVEL, timestamp: int = 0
    ) -> None:
        self.debug_level = debug_level
        self.timestamp = timestamp

    def configure(self, debug_level: int, timestamp: int) -> None:
        """Set the debug level and timestamp switch."""
        self.debug_level = debug_level
        self.timestamp = timestamp

    def enabled(self, level: LogLevel) -> bool:
        """Return True if a message of ``level`` would be emitted."""
        level = LogLevel(level)
        if LogLevel.ERROR <= self.debug_level <= LogLevel.VERBOSE:
            return self.debug_level >= level
        return self.debug_level == DEFAULT_DEBUG_LEVEL

    def log(self, level: LogLevel, message: str) -> Optional[str]:
        """Emit ``message`` if enabled; return the emitted text or None."""
        level = LogLevel(level)
        if not self.enabled(level):
            return None
        text = _PREFIX[level] + message
        if self.debug_level == DEFAULT_DEBUG_LEVEL:
            _log.log(_NATIVE_LEVEL[level], text)
        else:
            _log.error(text)
        return text


loc_logger = LocLogger()


def logger_init(debug_level: int, timestamp: int) -> None:
    """Configure the shared logger."""
    loc_logger.configure(debug_level, timestamp)


def get_timestamp(now: Optional[float] = None) -> str:
    """Format ``now`` (epoch seconds, default current time) as HH:MM:SS.uuuuuu in UTC."""
    if now is None:
        total_us = time.time_ns() // 1000
    else:
        total_us = round(now * 1_000_000)
    seconds, usec = divmod(total_us, 1_000_000)
    hh = seconds // 3600 % 24
    mm = (seconds % 3600) // 60
    ss = seconds % 60
    return f"{hh:02d}:{mm:02d}:{ss:02d}.{usec:06d}"