"""
Logging for ldpsc

Thin layer over the standard ``logging`` package:
- keyword context is appended to messages as ``key=value`` pairs
- warnings and errors are tagged with the caller's file:line unless the
  call passes ``show_location=False``
- ``logger.error(..., exc_type=E)`` logs and then raises ``E`` so call sites
  can report and abort in one statement

Usage:
    from ldpsc.logger import logger, set_log_level, LogLevel

    logger.debug("Parsed declaration", name="read", params=3)
    logger.error("No compiler found", exc_type=BuildError)
"""

import os
import logging
from enum import IntEnum


class LogLevel(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


_LOGGER_NAME = 'ldpsc'
_raise_on_error = True


def _level_from_env() -> int:
    name = os.environ.get('LDPSC_LOG_LEVEL', 'WARNING').upper()
    try:
        return LogLevel[name]
    except KeyError:
        return LogLevel.WARNING


class _ContextFormatter(logging.Formatter):
    """Render ``ldpsc: LEVEL: message`` with file:line for warnings and above"""

    def format(self, record):
        text = f"ldpsc: {record.levelname.lower()}: {record.getMessage()}"
        if record.levelno >= logging.WARNING and getattr(record, 'show_location', True):
            text += f" [{os.path.basename(record.pathname)}:{record.lineno}]"
        return text


class Logger:
    """Structured logger with keyword context"""

    def __init__(self, name: str = _LOGGER_NAME):
        self._log = logging.getLogger(name)
        if not self._log.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(_ContextFormatter())
            self._log.addHandler(handler)
        self._log.setLevel(_level_from_env())
        self._log.propagate = False

    @staticmethod
    def _compose(message: str, context: dict) -> str:
        if not context:
            return message
        extra = ', '.join(f"{key}={value!r}" for key, value in context.items())
        return f"{message} ({extra})"

    def set_level(self, level):
        self._log.setLevel(int(level))

    def get_level(self) -> int:
        return self._log.level

    def is_enabled(self, level) -> bool:
        return self._log.isEnabledFor(int(level))

    def debug(self, message: str, **context):
        if self._log.isEnabledFor(logging.DEBUG):
            self._log.debug(self._compose(message, context), stacklevel=2)

    def info(self, message: str, **context):
        self._log.info(self._compose(message, context), stacklevel=2)

    def warning(self, message: str, **context):
        self._log.warning(self._compose(message, context), stacklevel=2)

    def error(self, message: str, exc_type=None, show_location: bool = True, **context):
        """Log an error, then raise ``exc_type(message)`` if one is given.

        Args:
            message: Human readable description
            exc_type: Exception class to raise after logging (optional)
            show_location: Append the caller's file:line (off for messages
                meant for end users)
            **context: Extra key/value pairs appended to the log line

        Raises:
            exc_type: When given and raise-on-error mode is enabled
        """
        self._log.error(self._compose(message, context), stacklevel=2,
                        extra={'show_location': show_location})
        if exc_type is not None and _raise_on_error:
            raise exc_type(message)


logger = Logger()


def set_log_level(level):
    """Set the global log level (a LogLevel or a ``logging`` level int)."""
    logger.set_level(level)


def set_raise_on_error(enabled: bool):
    """Toggle whether ``logger.error(..., exc_type=...)`` raises."""
    global _raise_on_error
    _raise_on_error = bool(enabled)


