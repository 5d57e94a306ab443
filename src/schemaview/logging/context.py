"""
Generation scope for log records.

Readers and the emitter open nested scopes while they work (source file,
schema, view, field). Every record logged inside a scope is stamped with
those fields by ``ContextFilter``.
"""

import contextvars
import logging
from collections.abc import Iterator
from contextlib import contextmanager

CONTEXT_FIELDS = ("source_path", "schema_name", "view_name", "field_name")

_scope: contextvars.ContextVar[dict[str, str]] = contextvars.ContextVar(
    "schemaview_log_scope", default={}
)


def current_scope() -> dict[str, str]:
    """Fields of the innermost open scope."""
    return dict(_scope.get())


@contextmanager
def with_log_context(**fields: str | None) -> Iterator[None]:
    """
    Open a scope that extends the enclosing one.

    Only ``CONTEXT_FIELDS`` are accepted. A None value leaves the enclosing
    value in place.

    Example:
        with with_log_context(schema_name="User"):
            with with_log_context(view_name="PublicUser"):
                logger.debug("Emitted view")  # stamped with both
    """
    unknown = sorted(set(fields) - set(CONTEXT_FIELDS))
    if unknown:
        raise TypeError(f"unknown log scope fields: {', '.join(unknown)}")

    scope = dict(_scope.get())
    scope.update((name, value) for name, value in fields.items() if value is not None)
    token = _scope.set(scope)
    try:
        yield
    finally:
        _scope.reset(token)


class ContextFilter(logging.Filter):
    """Stamps records with the current scope; fields passed at the call site win."""

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in _scope.get().items():
            if getattr(record, name, None) is None:
                setattr(record, name, value)
        return True
