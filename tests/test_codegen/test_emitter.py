"""Tests for view emission."""

import logging

import pytest

from schemaview.codegen.emitter import ViewEmitter, generate_views, resolve_field
from schemaview.core.errors import (
    CONFLICTING_HIDE_OPTIONAL,
    DUPLICATE_VIEW_NAME,
    UNDECLARED_VIEW,
    ViewGenerationError,
)
from schemaview.core.options import DEFAULT_OPTIONS, LENIENT_OPTIONS
from schemaview.core.types import SchemaDefinition, ViewMapping, ViewNamespace


@pytest.fixture
def scenario_namespace() -> ViewNamespace:
    return ViewNamespace.from_dict({"public": "PublicView", "admin": "AdminView"})


class TestResolveField:
    """Tests for per-view field resolution."""

    def test_no_directives_always_shown(self, make_field):
        field = make_field("id", type_source="int")
        for pseudonym in ("public", "admin"):
            resolved = resolve_field(field, pseudonym)
            assert resolved.type_source == "int"
            assert not resolved.optional

    def test_hide(self, make_field):
        field = make_field("secret", ("hide", ["public"]))
        assert resolve_field(field, "public") is None
        assert resolve_field(field, "admin") is not None

    def test_show(self, make_field):
        field = make_field("x", ("show", ["admin"]))
        assert resolve_field(field, "public") is None
        assert resolve_field(field, "admin") is not None

    def test_optional(self, make_field):
        field = make_field("note", ("optional", ["public"]), default="'n/a'")
        public = resolve_field(field, "public")
        assert public.optional
        assert public.default_source is None
        admin = resolve_field(field, "admin")
        assert not admin.optional
        assert admin.default_source == "'n/a'"

    def test_optional_with_show_policy(self, make_field):
        field = make_field("x", ("show", ["admin"]), ("optional", ["public"]))
        assert resolve_field(field, "public").optional
        assert not resolve_field(field, "admin").optional
        assert resolve_field(field, "internal") is None


class TestScenarios:
    """End-to-end emission scenarios."""

    def test_hide_and_optional(self, make_field, make_schema, scenario_namespace):
        schema = make_schema(
            make_field("id", type_source="int"),
            make_field("secret", ("hide", ["public"])),
            make_field("note", ("optional", ["public"])),
        )
        report = generate_views(schema, scenario_namespace)
        assert report.ok
        assert [view.name for view in report.views] == ["PublicView", "AdminView"]

        public = report.get_view("PublicView")
        assert public.list_fields() == ["id", "note"]
        assert public.get_field("note").optional

        admin = report.get_view("AdminView")
        assert admin.list_fields() == ["id", "secret", "note"]
        assert not admin.get_field("note").optional

    def test_show_only(self, make_field, make_schema):
        namespace = ViewNamespace.from_dict({"p": "P", "a": "A"})
        report = generate_views(make_schema(make_field("x", ("show", ["a"]))), namespace)
        assert report.get_view("P").fields == ()
        assert report.get_view("A").list_fields() == ["x"]

    def test_undeclared_view(self, make_field, make_schema, scenario_namespace):
        schema = make_schema(
            make_field("id"),
            make_field("email", ("hide", ["staff"])),
        )
        report = generate_views(schema, scenario_namespace)
        assert not report.ok
        assert report.views == []
        assert set(report.failures) == {"public", "admin"}
        assert [(d.code, d.message) for d in report.diagnostics] == [
            (UNDECLARED_VIEW, "undeclared view: staff")
        ]

    def test_declaration_order_is_kept(self, make_field, make_schema, scenario_namespace):
        names = ["zeta", "alpha", "mid", "beta"]
        schema = make_schema(*(make_field(name) for name in names))
        report = generate_views(schema, scenario_namespace)
        for view in report.views:
            assert view.list_fields() == names

    def test_pass_through_attributes(self, make_field, scenario_namespace):
        schema = SchemaDefinition(
            name="User",
            fields=(make_field("id"),),
            decorators=("@final",),
            bases=("BaseModel",),
            keywords=("frozen=True",),
            docstring="A user.",
            body=("LIMIT = 3",),
        )
        view = generate_views(schema, scenario_namespace).views[0]
        assert view.schema_name == "User"
        assert view.decorators == ("@final",)
        assert view.bases == ("BaseModel",)
        assert view.keywords == ("frozen=True",)
        assert view.docstring == "A user."
        assert view.body == ("LIMIT = 3",)

    def test_empty_namespace(self, make_field, make_schema, caplog):
        with caplog.at_level(logging.WARNING, logger="schemaview"):
            report = generate_views(make_schema(make_field("id")), ViewNamespace())
        assert report.ok
        assert report.views == []
        assert "Schema declares no views" in caplog.text

    def test_duplicate_view_name(self, make_field, make_schema):
        namespace = ViewNamespace.from_dict({"public": "UserView", "admin": "UserView"})
        report = generate_views(make_schema(make_field("id")), namespace)
        assert [view.pseudonym for view in report.views] == ["public"]
        assert [d.code for d in report.failures["admin"]] == [DUPLICATE_VIEW_NAME]


class TestFailures:
    """Tests for failing views."""

    def test_views_fail_independently(self, make_field, make_schema):
        namespace = ViewNamespace.from_dict({"a": "Same", "b": "Same", "c": "Other"})
        report = generate_views(make_schema(make_field("id")), namespace)
        assert [view.name for view in report.views] == ["Same", "Other"]
        assert list(report.failures) == ["b"]

    def test_short_circuit_on_first_failing_field(self, make_field, make_schema, scenario_namespace):
        schema = make_schema(
            make_field("a", ("hide", ["staff"])),
            make_field("b", ("hide", ["public"]), ("optional", ["public"])),
        )
        report = generate_views(schema, scenario_namespace)
        assert [d.code for d in report.diagnostics] == [UNDECLARED_VIEW]

    def test_collect_all_errors(self, make_field, make_schema, scenario_namespace):
        schema = make_schema(
            make_field("a", ("hide", ["staff"])),
            make_field("b", ("hide", ["public"]), ("optional", ["public"])),
        )
        report = generate_views(schema, scenario_namespace, LENIENT_OPTIONS)
        assert [d.code for d in report.diagnostics] == [UNDECLARED_VIEW, CONFLICTING_HIDE_OPTIONAL]

    def test_all_diagnostics_of_failing_field(self, make_field, make_schema, scenario_namespace):
        schema = make_schema(make_field("a", ("hide", ["staff", "public"]), ("optional", ["public"])))
        report = generate_views(schema, scenario_namespace)
        assert [d.code for d in report.failures["public"]] == [UNDECLARED_VIEW, CONFLICTING_HIDE_OPTIONAL]

    def test_references_sharing_a_location_are_all_reported(
        self, make_field, make_schema, scenario_namespace
    ):
        schema = make_schema(make_field("a", ("hide", ["staff"]), ("optional", ["staff"])))
        report = generate_views(schema, scenario_namespace)
        assert [d.code for d in report.diagnostics] == [
            UNDECLARED_VIEW,
            UNDECLARED_VIEW,
            CONFLICTING_HIDE_OPTIONAL,
        ]

    def test_identical_view_failures_reported_once(self, make_field, make_schema, scenario_namespace):
        report = generate_views(make_schema(make_field("a", ("hide", ["staff"]))), scenario_namespace)
        assert list(report.failures) == ["public", "admin"]
        assert len(report.diagnostics) == 1

    def test_raise_for_errors(self, make_field, make_schema, scenario_namespace):
        report = generate_views(make_schema(make_field("a", ("hide", ["staff"]))), scenario_namespace)
        with pytest.raises(ViewGenerationError) as exc_info:
            report.raise_for_errors()
        assert exc_info.value.message == "cannot generate views of User: PublicView, AdminView"
        assert exc_info.value.details["views"] == ["PublicView", "AdminView"]
        assert len(exc_info.value.diagnostics) == 1

    def test_raise_for_errors_when_ok(self, make_field, make_schema, scenario_namespace):
        generate_views(make_schema(make_field("id")), scenario_namespace).raise_for_errors()


class TestViewEmitter:
    """Tests for ViewEmitter directly."""

    def test_emit_raises_for_failing_view(self, make_field, make_schema, scenario_namespace):
        emitter = ViewEmitter(make_schema(make_field("a", ("show", ["staff"]))), scenario_namespace)
        with pytest.raises(ViewGenerationError) as exc_info:
            emitter.emit(ViewMapping(pseudonym="public", view_name="PublicView"))
        assert exc_info.value.message == "cannot generate view PublicView of User"
        assert exc_info.value.details == {"view": "PublicView", "schema": "User"}

    def test_validation_is_cached(self, make_field, make_schema, scenario_namespace, monkeypatch):
        emitter = ViewEmitter(make_schema(make_field("id")), scenario_namespace, DEFAULT_OPTIONS)
        calls = []
        original = emitter._validator.validate

        def counting(field_def):
            calls.append(field_def.name)
            return original(field_def)

        monkeypatch.setattr(emitter._validator, "validate", counting)
        for mapping in scenario_namespace.mappings:
            emitter.emit(mapping)
        assert calls == ["id"]
