"""
Generator options and preset profiles.
"""

from dataclasses import dataclass, replace
from typing import Literal

from schemaview.core.types import OptionalStyle


@dataclass(frozen=True)
class GeneratorOptions:
    """
    Options for one generation run.

    There is no environment or file based configuration: callers build an
    instance (or pick a profile) and pass it down the pipeline.
    """

    # Name of the class decorator that declares views
    decorator_name: str = "views"

    # Collect every failing field's diagnostics instead of stopping at the first
    collect_all_errors: bool = False

    # How optional fields are rendered: "T | None" or "Optional[T]"
    optional_style: OptionalStyle = "union"

    # Name of the generated module (file is <module_name>.py)
    module_name: str = "views"

    # Whether to emit the "auto-generated" module docstring
    header: bool = True

    def with_overrides(self, **changes: object) -> "GeneratorOptions":
        """Return a copy with some options replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]


DEFAULT_OPTIONS = GeneratorOptions()

LENIENT_OPTIONS = GeneratorOptions(collect_all_errors=True)


def for_mode(mode: Literal["strict", "lenient"]) -> GeneratorOptions:
    """
    Get the options profile for a mode.

    - strict: stop at the first failing field (the defaults)
    - lenient: report every failing field before giving up
    """
    if mode == "strict":
        return DEFAULT_OPTIONS
    if mode == "lenient":
        return LENIENT_OPTIONS
    raise ValueError(f"Unknown mode: {mode}")
