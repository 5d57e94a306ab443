"""
View model factory.

Materialises generated views as Pydantic model classes, using the live
types of the schema class they were derived from.
"""

import dataclasses
import types
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr, create_model
from pydantic.fields import FieldInfo

from schemaview.core.types import GeneratedField, GeneratedView, Visibility
from schemaview.logging import get_logger
from schemaview.models.base import BaseView

logger = get_logger(__name__)

_COPIED_FIELD_ATTRIBUTES = ("alias", "title", "description")


class ViewFactory:
    """
    Factory for building Pydantic view models from one schema class.

    Generated views:
    - Only include the fields the view keeps, in declaration order
    - Keep the source field's type, default, alias and description
    - Make optional fields ``Optional[T]`` defaulting to ``None``
    - Keep private fields as Pydantic private attributes
    - Inherit the source's bases and ``model_config`` when the source is a
      Pydantic model, and ``BaseView`` otherwise
    """

    def __init__(self, source: type) -> None:
        """
        Initialize the factory.

        Args:
            source: The schema class views are derived from
        """
        self.source = source
        self._cache: dict[str, type[BaseModel]] = {}

    @property
    def is_pydantic_source(self) -> bool:
        return issubclass(self.source, BaseModel)

    def build(self, view: GeneratedView) -> type[BaseModel]:
        """Get or create the model class for a view."""
        if view.name in self._cache:
            return self._cache[view.name]

        public = [f for f in view.fields if f.visibility == Visibility.PUBLIC]
        private = [f for f in view.fields if f.visibility == Visibility.PRIVATE]

        fields: dict[str, tuple[Any, FieldInfo]] = {}
        for field in public:
            fields[field.name] = (self._annotation(field), self._field_info(field))

        view_class = create_model(
            view.name,
            __base__=self._view_base(view, private),
            __module__=self.source.__module__,
            __doc__=view.docstring,
            **fields,  # type: ignore
        )
        self._cache[view.name] = view_class
        logger.debug(
            "Built view model",
            view_name=view.name,
            field_count=len(public),
            private_count=len(private),
        )
        return view_class

    def build_all(self, views: list[GeneratedView]) -> dict[str, type[BaseModel]]:
        """
        Build model classes for several views.

        Returns a dict mapping view names to model classes.
        """
        return {view.name: self.build(view) for view in views}

    def _annotation(self, field: GeneratedField) -> Any:
        annotation = Any if field.annotation is None else field.annotation
        return Optional[annotation] if field.optional else annotation

    def _field_info(self, field: GeneratedField) -> FieldInfo:
        """Field definition for a public field, carried over from the source."""
        kwargs: dict[str, Any] = {}

        source_info = self._source_field_info(field.name)
        if source_info is not None:
            for attr in _COPIED_FIELD_ATTRIBUTES:
                value = getattr(source_info, attr)
                if value is not None:
                    kwargs[attr] = value

        if field.optional:
            kwargs["default"] = None
        elif source_info is None:
            kwargs.update(self._plain_default(field.name))
        elif source_info.default_factory is not None:
            kwargs["default_factory"] = source_info.default_factory
        elif not source_info.is_required():
            kwargs["default"] = source_info.default
        else:
            kwargs["default"] = ...

        return Field(**kwargs)

    def _source_field_info(self, name: str) -> FieldInfo | None:
        if self.is_pydantic_source:
            return self.source.model_fields.get(name)
        return None

    def _plain_default(self, name: str) -> dict[str, Any]:
        """Default of a field on a dataclass or plain class (``...`` if required)."""
        if dataclasses.is_dataclass(self.source):
            for dc_field in dataclasses.fields(self.source):
                if dc_field.name != name:
                    continue
                if dc_field.default_factory is not dataclasses.MISSING:
                    return {"default_factory": dc_field.default_factory}
                if dc_field.default is not dataclasses.MISSING:
                    return {"default": dc_field.default}
                return {"default": ...}
        return {"default": self.source.__dict__.get(name, ...)}

    def _private_attribute(self, field: GeneratedField) -> Any:
        if field.optional:
            return PrivateAttr(default=None)
        if self.is_pydantic_source:
            existing = self.source.__private_attributes__.get(field.name)
            if existing is not None:
                return PrivateAttr(default=existing.default, default_factory=existing.default_factory)
        if field.name in self.source.__dict__:
            return PrivateAttr(default=self.source.__dict__[field.name])
        return PrivateAttr()

    def _view_base(self, view: GeneratedView, private: list[GeneratedField]) -> type[BaseModel]:
        """
        Base class for one view.

        Returns ``BaseView`` directly when nothing needs carrying over;
        otherwise a holder class with the private attributes and, for
        Pydantic sources, the source's bases and ``model_config``.
        """
        if not private and not self.is_pydantic_source:
            return BaseView

        namespace: dict[str, Any] = {
            "__module__": self.source.__module__,
            "__annotations__": {f.name: self._annotation(f) for f in private},
        }
        for field in private:
            namespace[field.name] = self._private_attribute(field)

        if self.is_pydantic_source:
            bases = self.source.__bases__
            namespace["model_config"] = dict(self.source.model_config)
        else:
            bases = (BaseView,)

        return types.new_class(
            f"_{view.name}Base",
            bases,
            exec_body=lambda ns: ns.update(namespace),
        )
