"""
Shared type definitions for schemaview.

Everything here is constructed fresh for one generation run and frozen once
built. Readers produce ``SchemaDefinition`` + ``ViewNamespace``; the emitter
turns them into ``GeneratedView`` records.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class DirectiveCategory(str, Enum):
    """Supported directive categories."""

    HIDE = "hide"
    SHOW = "show"
    OPTIONAL = "optional"


class DefaultPolicy(str, Enum):
    """How a field behaves in views its directives do not mention."""

    SHOW = "show"
    HIDE = "hide"


class Visibility(str, Enum):
    """Access qualifier of a schema or a field."""

    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def of(cls, name: str) -> "Visibility":
        """Python spells privacy with a leading underscore."""
        return cls.PRIVATE if name.startswith("_") else cls.PUBLIC


OptionalStyle = Literal["union", "optional"]


class SourceLocation(BaseModel):
    """Where something was declared."""

    path: str | None = None
    line: int | None = None  # 1-based
    column: int | None = None  # 1-based
    symbol: str | None = None  # e.g. "User.secret"

    model_config = {"frozen": True}

    def __str__(self) -> str:
        parts = [self.path or "<unknown>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


class PseudonymRef(BaseModel):
    """A pseudonym as written inside one directive block."""

    segments: tuple[str, ...]
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        return ".".join(self.segments)

    @property
    def is_single_segment(self) -> bool:
        return len(self.segments) == 1

    @classmethod
    def parse(cls, text: str, location: SourceLocation | None = None) -> "PseudonymRef":
        """Build a reference from dotted text ("public" or "a.b")."""
        return cls(segments=tuple(text.split(".")), location=location or SourceLocation())


class DirectiveBlock(BaseModel):
    """
    One raw annotation block on a field, e.g. ``hide(public, admin)``.

    The category is kept as written; the interpreter decides whether it is
    one of the supported categories.
    """

    category: str
    references: tuple[PseudonymRef, ...] = ()
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = {"frozen": True}


class DirectiveSet(BaseModel):
    """
    Interpreted directives of a single field.

    ``hide``/``show``/``optional`` hold every reference of that category in
    declaration order. ``explicit_override`` records which of hide/show set
    the default policy; a set built by the interpreter never holds both.
    """

    hide: tuple[PseudonymRef, ...] = ()
    show: tuple[PseudonymRef, ...] = ()
    optional: tuple[PseudonymRef, ...] = ()
    default_policy: DefaultPolicy = DefaultPolicy.SHOW
    explicit_override: DirectiveCategory | None = None

    model_config = {"frozen": True}

    def references(self, category: DirectiveCategory) -> tuple[PseudonymRef, ...]:
        """Get the references listed under one category."""
        return getattr(self, category.value)

    def names(self, category: DirectiveCategory) -> frozenset[str]:
        """Get the pseudonym names listed under one category."""
        return frozenset(ref.name for ref in self.references(category))

    def all_references(self) -> list[tuple[DirectiveCategory, PseudonymRef]]:
        """All references, hide first, then show, then optional."""
        return [
            (category, ref)
            for category in DirectiveCategory
            for ref in self.references(category)
        ]


class FieldDefinition(BaseModel):
    """A field of the canonical schema."""

    name: str
    type_source: str
    # Live type object; only set by the runtime reader
    annotation: Any = Field(default=None, exclude=True)
    visibility: Visibility = Visibility.PUBLIC
    default_source: str | None = None
    directives: DirectiveSet = Field(default_factory=DirectiveSet)
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = {"frozen": True}


class SchemaDefinition(BaseModel):
    """The canonical record views are derived from."""

    name: str
    visibility: Visibility = Visibility.PUBLIC
    fields: tuple[FieldDefinition, ...] = ()

    # Pass-through attributes, copied verbatim onto every view
    decorators: tuple[str, ...] = ()
    bases: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    docstring: str | None = None
    body: tuple[str, ...] = ()

    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = {"frozen": True}

    def get_field(self, name: str) -> FieldDefinition | None:
        """Get a field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def list_fields(self) -> list[str]:
        """List all field names in declaration order."""
        return [field.name for field in self.fields]


class ViewMapping(BaseModel):
    """Associates a directive pseudonym with a generated view name."""

    pseudonym: str
    view_name: str
    location: SourceLocation = Field(default_factory=SourceLocation)

    model_config = {"frozen": True}


class ViewNamespace(BaseModel):
    """
    All views declared for one schema.

    Fixed before generation starts and only ever read afterwards.
    """

    mappings: tuple[ViewMapping, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def from_dict(cls, mapping: dict[str, str]) -> "ViewNamespace":
        """Build a namespace from ``{pseudonym: view_name}``."""
        return cls(
            mappings=tuple(
                ViewMapping(pseudonym=pseudonym, view_name=view_name)
                for pseudonym, view_name in mapping.items()
            )
        )

    def __contains__(self, pseudonym: object) -> bool:
        return any(m.pseudonym == pseudonym for m in self.mappings)

    def get(self, pseudonym: str) -> ViewMapping | None:
        """Get the mapping for a pseudonym."""
        for mapping in self.mappings:
            if mapping.pseudonym == pseudonym:
                return mapping
        return None

    @property
    def pseudonyms(self) -> list[str]:
        return [m.pseudonym for m in self.mappings]


class SchemaDeclaration(BaseModel):
    """A schema together with the views declared for it."""

    schema_def: SchemaDefinition
    namespace: ViewNamespace

    model_config = {"frozen": True}


class GeneratedField(BaseModel):
    """A field that survived into a generated view."""

    name: str
    type_source: str
    annotation: Any = Field(default=None, exclude=True)
    optional: bool = False
    visibility: Visibility = Visibility.PUBLIC
    default_source: str | None = None

    model_config = {"frozen": True}

    def render_type(self, style: OptionalStyle = "union") -> str:
        """Render the field type, wrapping optional fields."""
        if not self.optional:
            return self.type_source
        quote = self.type_source[:1]
        if quote in ("'", '"') and self.type_source.endswith(quote):
            # Forward reference: keep the whole annotation inside the string
            inner = GeneratedField(name=self.name, type_source=self.type_source[1:-1], optional=True)
            return f"{quote}{inner.render_type(style)}{quote}"
        if style == "optional":
            return f"Optional[{self.type_source}]"
        return f"{self.type_source} | None"


class GeneratedView(BaseModel):
    """One emitted view of a schema."""

    name: str
    pseudonym: str
    schema_name: str
    visibility: Visibility = Visibility.PUBLIC
    fields: tuple[GeneratedField, ...] = ()

    decorators: tuple[str, ...] = ()
    bases: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    docstring: str | None = None
    body: tuple[str, ...] = ()

    model_config = {"frozen": True}

    def get_field(self, name: str) -> GeneratedField | None:
        """Get a generated field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def list_fields(self) -> list[str]:
        """List surviving field names in order."""
        return [field.name for field in self.fields]
