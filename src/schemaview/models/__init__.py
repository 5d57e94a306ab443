"""
schemaview Models Module.

Materialises views as Pydantic model classes at import time.
"""

from schemaview.models.base import BaseView, project
from schemaview.models.decorator import derive_views, views
from schemaview.models.factory import ViewFactory

__all__ = [
    "BaseView",
    "project",
    "ViewFactory",
    "derive_views",
    "views",
]
