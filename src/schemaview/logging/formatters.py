"""
Log formatters for schemaview.

Both formatters split a record into the same three parts: the generation
scope (``CONTEXT_FIELDS``), the diagnostic codes it reports (``codes``)
and any other structured fields passed to the logger.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from schemaview.logging.context import CONTEXT_FIELDS

# Attributes every LogRecord has; anything else on a record was passed by the caller
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def split_record(record: logging.LogRecord) -> tuple[dict[str, str], list[str], dict[str, Any]]:
    """Return the scope, the diagnostic codes and the remaining fields of a record."""
    scope = {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }
    codes = [str(code) for code in getattr(record, "codes", None) or ()]
    fields = {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRIBUTES
        and key not in CONTEXT_FIELDS
        and key != "codes"
        and not key.startswith("_")
    }
    return scope, codes, fields


def scope_label(scope: dict[str, str]) -> str:
    """
    Compact label for a scope.

    ``{"source_path": "src/models.py", "schema_name": "User",
    "view_name": "PublicUser", "field_name": "email"}`` becomes
    ``models.py:User.email -> PublicUser``.
    """
    target = ".".join(scope[name] for name in ("schema_name", "field_name") if name in scope)
    if "view_name" in scope:
        target = f"{target} -> {scope['view_name']}" if target else scope["view_name"]
    if "source_path" in scope:
        filename = Path(scope["source_path"]).name
        return f"{filename}:{target}" if target else filename
    return target


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

        {"time": ..., "level": "WARNING", "logger": "schemaview.codegen.emitter",
         "message": "View generation failed",
         "scope": {"schema_name": "User", "view_name": "PublicUser"},
         "codes": ["UNDECLARED_VIEW"]}

    ``scope``, ``codes`` and ``fields`` are left out when empty.
    """

    def __init__(self, include_fields: bool = True) -> None:
        super().__init__()
        self.include_fields = include_fields

    def format(self, record: logging.LogRecord) -> str:
        scope, codes, fields = split_record(record)
        entry: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if scope:
            entry["scope"] = scope
        if codes:
            entry["codes"] = codes
        if fields and self.include_fields:
            entry["fields"] = fields
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    One line per record for terminals.

        WARNING  models.py:User -> PublicUser: View generation failed [UNDECLARED_VIEW]
        DEBUG    models.py:User -> PublicUser: Emitted view field_count=3 pseudonym=public
    """

    LEVEL_COLORS = {
        "DEBUG": "\033[2m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        scope, codes, fields = split_record(record)

        level = f"{record.levelname:8}"
        if self.use_colors and record.levelname in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelname]}{level}{self.RESET}"

        label = scope_label(scope)
        parts = [level, " ", f"{label}: " if label else "", record.getMessage()]
        if codes:
            parts.append(f" [{', '.join(codes)}]")
        if fields:
            parts.append(" " + " ".join(f"{key}={value}" for key, value in sorted(fields.items())))

        line = "".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line
