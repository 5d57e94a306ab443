"""
Example schema with three views.

Generate the view module without importing this file:

    schemaview generate examples/user-views/schema.py -o examples/user-views

or import it, which builds the view models at import time (see demo.py).
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from schemaview import hide, optional, show, views


@views(public="PublicUser", admin="AdminUser", signup="SignupForm")
class User(BaseModel):
    """A registered user."""

    id: Annotated[int, optional("signup")]
    username: str
    email: Annotated[str, hide("public")]
    password_hash: Annotated[str, hide("public", "admin", "signup")]
    password: Annotated[str, show("signup")] = ""
    created_at: Annotated[datetime, hide("signup")] = Field(default_factory=datetime.now)
    audit_log: Annotated[list[str], show("admin")] = Field(default_factory=list)
