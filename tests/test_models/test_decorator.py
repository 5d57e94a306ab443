"""Tests for the views class decorator."""

import sys
from typing import Annotated

import pytest
from pydantic import BaseModel

from schemaview.core.errors import (
    CONFLICTING_HIDE_OPTIONAL,
    UNDECLARED_VIEW,
    ConflictingVisibilityError,
    ViewGenerationError,
)
from schemaview.directives.markers import hide, optional, show
from schemaview.models.decorator import derive_views, views


@views(public="PublicProfile", admin="AdminProfile")
class Profile(BaseModel):
    id: int
    bio: Annotated[str, optional("public")]
    secret: Annotated[str, hide("public")]


class TestViewsDecorator:
    """Tests for @views."""

    def test_class_is_returned(self):
        assert issubclass(Profile, BaseModel)
        assert set(Profile.model_fields) == {"id", "bio", "secret"}

    def test_views_are_exported(self):
        module = sys.modules[__name__]
        assert module.PublicProfile is Profile.__views__["PublicProfile"]
        assert module.AdminProfile is Profile.__views__["AdminProfile"]

    def test_exported_views_work(self):
        public = Profile.__views__["PublicProfile"](id=1)
        assert public.model_dump() == {"id": 1, "bio": None}

    def test_failing_view_raises(self):
        with pytest.raises(ViewGenerationError) as exc_info:

            @views(public="PublicBad")
            class Bad(BaseModel):
                x: Annotated[int, hide("staff")]

        assert [d.code for d in exc_info.value.diagnostics] == [UNDECLARED_VIEW]
        assert exc_info.value.details["views"] == ["PublicBad"]

    def test_conflicting_directives_raise(self):
        with pytest.raises(ConflictingVisibilityError):

            @views(public="PublicBad", admin="AdminBad")
            class Bad(BaseModel):
                x: Annotated[int, hide("public"), show("admin")]


class TestDeriveViews:
    """Tests for derive_views."""

    def test_export_disabled(self):
        class Draft(BaseModel):
            title: str

        derive_views(Draft, {"public": "PublicDraft"}, export=False)
        assert not hasattr(sys.modules[__name__], "PublicDraft")

    def test_every_undeclared_reference_is_reported(self):
        class Draft:
            title: Annotated[int, hide("staff"), optional("staff")]

        with pytest.raises(ViewGenerationError) as exc_info:
            derive_views(Draft, {"public": "PublicDraftNote"}, export=False)
        assert [d.code for d in exc_info.value.diagnostics] == [
            UNDECLARED_VIEW,
            UNDECLARED_VIEW,
            CONFLICTING_HIDE_OPTIONAL,
        ]

    def test_no_view_is_built_on_failure(self):
        class Draft(BaseModel):
            title: Annotated[str, hide("staff")]

        with pytest.raises(ViewGenerationError):
            derive_views(Draft, {"public": "PublicDraftView"}, export=False)
        assert not hasattr(Draft, "__views__")
