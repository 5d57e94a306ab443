"""
Base view model utilities.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T", bound=BaseModel)


class BaseView(BaseModel):
    """
    Base class for views of schemas that are not Pydantic models.

    Views are immutable projections of a schema instance. They can be built
    from any object exposing the view's fields as attributes, or from a
    mapping.
    """

    model_config = ConfigDict(
        from_attributes=True,  # Allow projecting from schema instances
        frozen=True,  # Views are immutable
        extra="ignore",  # Fields the view omits are dropped
    )

    @classmethod
    def from_source(cls: type[T], obj: Any) -> T:
        """Create a view from a schema instance or a mapping."""
        return project(obj, cls)

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        """Create a view from a dictionary."""
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert view to a dictionary."""
        return self.model_dump()


def project(obj: Any, view_class: type[T]) -> T:
    """
    Project a schema instance onto a view class.

    Works for any generated view, including views derived from Pydantic
    schemas (which do not inherit from BaseView). Fields the view omits are
    never read from ``obj``.
    """
    data = {}
    for name, info in view_class.model_fields.items():
        if isinstance(obj, Mapping):
            if name not in obj:
                continue
            value = obj[name]
        elif hasattr(obj, name):
            value = getattr(obj, name)
        else:
            continue
        data[info.alias or name] = value
    return view_class.model_validate(data)
