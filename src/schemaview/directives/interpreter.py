"""
Directive interpreter.

Turns the raw directive blocks of one field into a DirectiveSet. The three
categories are accumulated independently; the default policy is derived
from whichever of hide/show appeared first, and the other one appearing
later is a contradiction.
"""

from collections.abc import Iterable

from schemaview.core.errors import (
    ConflictingVisibilityError,
    DirectiveSyntaxError,
    UnknownDirectiveError,
)
from schemaview.core.types import (
    DefaultPolicy,
    DirectiveBlock,
    DirectiveCategory,
    DirectiveSet,
    PseudonymRef,
)
from schemaview.logging import get_logger

logger = get_logger(__name__)

_CATEGORIES = {category.value: category for category in DirectiveCategory}


class DirectiveInterpreter:
    """
    Interprets directive blocks field by field.

    The interpreter holds no state between calls.
    """

    def interpret(
        self,
        field_name: str,
        blocks: Iterable[DirectiveBlock],
    ) -> DirectiveSet:
        """
        Interpret the blocks of one field.

        Raises:
            DirectiveSyntaxError: a pseudonym is not a single-segment name
            UnknownDirectiveError: a block category is not hide/show/optional
            ConflictingVisibilityError: the field has both hide and show blocks
        """
        collected: dict[DirectiveCategory, list[PseudonymRef]] = {
            category: [] for category in DirectiveCategory
        }
        override: DirectiveCategory | None = None

        for block in blocks:
            for ref in block.references:
                self._check_reference(ref)

            category = _CATEGORIES.get(block.category)
            if category is None:
                raise UnknownDirectiveError(block.category, location=block.location)

            if category in (DirectiveCategory.HIDE, DirectiveCategory.SHOW):
                if override is not None and override != category:
                    raise ConflictingVisibilityError(field_name, location=block.location)
                override = category

            collected[category].extend(block.references)

        default_policy = (
            DefaultPolicy.HIDE if override == DirectiveCategory.SHOW else DefaultPolicy.SHOW
        )
        directives = DirectiveSet(
            hide=tuple(collected[DirectiveCategory.HIDE]),
            show=tuple(collected[DirectiveCategory.SHOW]),
            optional=tuple(collected[DirectiveCategory.OPTIONAL]),
            default_policy=default_policy,
            explicit_override=override,
        )
        logger.debug(
            "Interpreted directives",
            field_name=field_name,
            default_policy=default_policy.value,
            hide=sorted(directives.names(DirectiveCategory.HIDE)),
            show=sorted(directives.names(DirectiveCategory.SHOW)),
            optional=sorted(directives.names(DirectiveCategory.OPTIONAL)),
        )
        return directives

    def _check_reference(self, ref: PseudonymRef) -> None:
        if not ref.is_single_segment or not ref.segments[0]:
            raise DirectiveSyntaxError(
                f"expected single-segment identifier, got `{ref.name}`",
                location=ref.location,
            )


_default_interpreter = DirectiveInterpreter()


def interpret_directives(
    field_name: str,
    blocks: Iterable[DirectiveBlock],
) -> DirectiveSet:
    """Interpret the directive blocks of one field."""
    return _default_interpreter.interpret(field_name, blocks)
