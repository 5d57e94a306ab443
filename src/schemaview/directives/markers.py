"""
Directive markers for use inside ``typing.Annotated``.

Example:
    class User(BaseModel):
        id: int
        secret: Annotated[str, hide("public")]
        note: Annotated[str, optional("public")]

Source files read without importing may also use bare names
(``hide(public)``); imported classes need strings.
"""

from dataclasses import dataclass

from schemaview.core.types import DirectiveCategory


@dataclass(frozen=True)
class Directive:
    """One directive block attached to a field annotation."""

    category: str
    names: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"{self.category}({', '.join(self.names)})"


def hide(*names: str) -> Directive:
    """Hide the field from the named views; show it everywhere else."""
    return Directive(DirectiveCategory.HIDE.value, tuple(names))


def show(*names: str) -> Directive:
    """Show the field only in the named views."""
    return Directive(DirectiveCategory.SHOW.value, tuple(names))


def optional(*names: str) -> Directive:
    """Include the field as optional in the named views."""
    return Directive(DirectiveCategory.OPTIONAL.value, tuple(names))
