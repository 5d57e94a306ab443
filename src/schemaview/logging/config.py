"""
Logging setup for schemaview.

The library only creates loggers; ``configure_logging`` is called by the
CLI or by an application that wants schemaview's records formatted.
"""

import logging
import sys
from enum import Enum
from typing import Any, TextIO

from schemaview.logging.context import ContextFilter
from schemaview.logging.formatters import JSONFormatter, TextFormatter

ROOT_LOGGER_NAME = "schemaview"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


class ViewLogger(logging.LoggerAdapter):
    """
    Logger whose keyword arguments become record fields.

        logger.debug("Emitted view", pseudonym="public", field_count=3)

    Records report the caller's file and line, not this module's.
    """

    _LOGGING_KEYWORDS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})

    def __init__(self, name: str) -> None:
        super().__init__(logging.getLogger(name), {})

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        fields = {key: kwargs.pop(key) for key in list(kwargs) if key not in self._LOGGING_KEYWORDS}
        kwargs["extra"] = {**(kwargs.get("extra") or {}), **fields}
        return msg, kwargs


def get_logger(name: str) -> ViewLogger:
    """Get a schemaview logger, usually ``get_logger(__name__)``."""
    return ViewLogger(name)


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    format: LogFormat | str = LogFormat.TEXT,
    output: TextIO | None = None,
    use_colors: bool | None = None,
) -> None:
    """
    Send schemaview records to one stream.

    Replaces any handler installed by an earlier call and stops records
    from propagating to the root logger.

    Args:
        level: Minimum level
        format: ``json`` for tooling, ``text`` for terminals
        output: Stream to write to (defaults to stderr)
        use_colors: Color text output; defaults to whether the stream is a terminal
    """
    level = LogLevel(level.upper()) if isinstance(level, str) else level
    format = LogFormat(format.lower()) if isinstance(format, str) else format
    output = output or sys.stderr

    if format == LogFormat.JSON:
        formatter: logging.Formatter = JSONFormatter()
    else:
        if use_colors is None:
            use_colors = output.isatty()
        formatter = TextFormatter(use_colors=use_colors)

    handler = logging.StreamHandler(output)
    handler.setFormatter(formatter)
    handler.addFilter(ContextFilter())

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level.value)
    logger.propagate = False
