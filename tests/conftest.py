"""
Shared test fixtures.
"""

import logging
import textwrap

import pytest

from schemaview.core.types import (
    DirectiveBlock,
    FieldDefinition,
    PseudonymRef,
    SchemaDefinition,
    SourceLocation,
    ViewNamespace,
)
from schemaview.directives.interpreter import interpret_directives

# === Schema Sources ===

USER_SOURCE = '''\
"""User schema."""

from typing import Annotated

from pydantic import BaseModel

from schemaview import hide, optional, show, views


@views(public=PublicUser, admin=AdminUser)
class User(BaseModel):
    """A registered user."""

    id: int
    name: str
    password_hash: Annotated[str, hide(public, admin)]
    email: Annotated[str, optional(public)]
    audit_log: Annotated[list[str], show(admin)] = []
'''


# === Fixtures ===


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo handlers installed by configure_logging between tests."""
    yield
    logger = logging.getLogger("schemaview")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def user_source() -> str:
    """Source of a schema module with two views."""
    return USER_SOURCE


@pytest.fixture
def schema_file(tmp_path):
    """Write schema source to a temporary module and return its path."""

    def write(source: str = USER_SOURCE, name: str = "models.py"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return write


@pytest.fixture
def namespace() -> ViewNamespace:
    """Namespace declaring the public and admin views."""
    return ViewNamespace.from_dict({"public": "PublicUser", "admin": "AdminUser"})


@pytest.fixture
def make_field():
    """
    Build a field from directive blocks.

    Blocks are (category, [pseudonym, ...]) pairs, interpreted in order.
    """

    def build(name: str, *blocks: tuple[str, list[str]], type_source: str = "str", default=None):
        location = SourceLocation(path="models.py", symbol=f"User.{name}")
        directive_blocks = [
            DirectiveBlock(
                category=category,
                references=tuple(PseudonymRef.parse(ref, location) for ref in refs),
                location=location,
            )
            for category, refs in blocks
        ]
        return FieldDefinition(
            name=name,
            type_source=type_source,
            default_source=default,
            directives=interpret_directives(name, directive_blocks),
            location=location,
        )

    return build


@pytest.fixture
def make_schema():
    """Build a schema from fields."""

    def build(*fields: FieldDefinition, name: str = "User") -> SchemaDefinition:
        return SchemaDefinition(name=name, fields=tuple(fields), bases=("BaseModel",))

    return build
