"""
schemaview structured logging.

Records carry the generation scope (file, schema, view, field) and the
diagnostic codes they report, formatted as text or JSON.
"""

from schemaview.logging.config import (
    LogFormat,
    LogLevel,
    ViewLogger,
    configure_logging,
    get_logger,
)
from schemaview.logging.context import CONTEXT_FIELDS, with_log_context
from schemaview.logging.formatters import JSONFormatter, TextFormatter

__all__ = [
    # Configuration
    "configure_logging",
    "get_logger",
    "ViewLogger",
    "LogLevel",
    "LogFormat",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    # Scope
    "CONTEXT_FIELDS",
    "with_log_context",
]
