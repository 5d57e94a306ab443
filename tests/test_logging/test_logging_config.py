"""Tests for structured logging."""

import io
import json
import logging

import pytest

from schemaview.codegen.emitter import generate_views
from schemaview.core.types import ViewNamespace
from schemaview.logging import (
    JSONFormatter,
    TextFormatter,
    configure_logging,
    get_logger,
    with_log_context,
)
from schemaview.logging.context import ContextFilter, current_scope
from schemaview.logging.formatters import scope_label


def make_record(message: str = "Emitted view", **fields) -> logging.LogRecord:
    record = logging.LogRecord(
        name="schemaview.codegen.emitter",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in fields.items():
        setattr(record, key, value)
    return record


class TestLogScope:
    """Tests for nested log scopes."""

    def test_nested_scopes_extend(self):
        with with_log_context(schema_name="User"):
            with with_log_context(view_name="PublicUser", field_name=None):
                assert current_scope() == {"schema_name": "User", "view_name": "PublicUser"}
            assert current_scope() == {"schema_name": "User"}
        assert current_scope() == {}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError, match="unknown log scope fields: tenant"):
            with with_log_context(tenant="acme"):
                pass

    def test_filter_keeps_call_site_fields(self):
        record = make_record(view_name="AdminUser")
        with with_log_context(schema_name="User", view_name="PublicUser"):
            assert ContextFilter().filter(record)
        assert record.schema_name == "User"
        assert record.view_name == "AdminUser"


class TestFormatters:
    """Tests for log formatters."""

    def test_scope_label(self):
        scope = {
            "source_path": "src/models.py",
            "schema_name": "User",
            "view_name": "PublicUser",
            "field_name": "email",
        }
        assert scope_label(scope) == "models.py:User.email -> PublicUser"
        assert scope_label({"source_path": "models.py"}) == "models.py"
        assert scope_label({"view_name": "PublicUser"}) == "PublicUser"
        assert scope_label({}) == ""

    def test_json_formatter(self):
        record = make_record(
            "View generation failed",
            schema_name="User",
            view_name="PublicUser",
            codes=["UNDECLARED_VIEW", "CONFLICTING_HIDE_OPTIONAL"],
            field_count=3,
        )
        data = json.loads(JSONFormatter().format(record))
        assert data["level"] == "WARNING"
        assert data["logger"] == "schemaview.codegen.emitter"
        assert data["message"] == "View generation failed"
        assert data["scope"] == {"schema_name": "User", "view_name": "PublicUser"}
        assert data["codes"] == ["UNDECLARED_VIEW", "CONFLICTING_HIDE_OPTIONAL"]
        assert data["fields"] == {"field_count": 3}

    def test_json_formatter_omits_empty_parts(self):
        data = json.loads(JSONFormatter(include_fields=False).format(make_record(field_count=3)))
        assert set(data) == {"time", "level", "logger", "message"}

    def test_text_formatter(self):
        record = make_record(
            "View generation failed",
            source_path="models.py",
            schema_name="User",
            view_name="PublicUser",
            codes=["UNDECLARED_VIEW"],
        )
        line = TextFormatter(use_colors=False).format(record)
        assert line == "WARNING  models.py:User -> PublicUser: View generation failed [UNDECLARED_VIEW]"

    def test_text_formatter_fields(self):
        line = TextFormatter(use_colors=False).format(make_record(pseudonym="public", field_count=3))
        assert line.endswith("Emitted view field_count=3 pseudonym=public")


class TestConfigureLogging:
    """Tests for configure_logging and the logger."""

    def test_pipeline_logs_with_scope(self, make_field, make_schema):
        output = io.StringIO()
        configure_logging(level="DEBUG", format="json", output=output)

        namespace = ViewNamespace.from_dict({"public": "PublicUser", "admin": "AdminUser"})
        schema = make_schema(make_field("id"), make_field("secret", ("hide", ["staff"])))
        generate_views(schema, namespace)

        records = [json.loads(line) for line in output.getvalue().splitlines()]
        failed = [r for r in records if r["message"] == "View generation failed"]
        assert [r["scope"]["view_name"] for r in failed] == ["PublicUser", "AdminUser"]
        assert all(r["scope"]["schema_name"] == "User" for r in failed)
        assert all(r["codes"] == ["UNDECLARED_VIEW"] for r in failed)

    def test_level_filters_records(self):
        output = io.StringIO()
        configure_logging(level="WARNING", format="text", output=output, use_colors=False)
        logger = get_logger("schemaview.test")
        logger.debug("hidden")
        logger.warning("shown", view_name="PublicUser")
        assert output.getvalue() == "WARNING  PublicUser: shown\n"

    def test_colors_default_to_terminal_detection(self):
        output = io.StringIO()
        configure_logging(level="WARNING", output=output)
        get_logger("schemaview.test").warning("plain")
        assert "\033[" not in output.getvalue()

    def test_records_point_at_the_caller(self, caplog):
        logger = get_logger("schemaview.test")
        with caplog.at_level(logging.DEBUG, logger="schemaview"):
            logger.debug("located", field_count=1)
        record = caplog.records[0]
        assert record.filename == "test_logging_config.py"
        assert record.funcName == "test_records_point_at_the_caller"
        assert record.field_count == 1
