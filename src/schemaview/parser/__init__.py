"""
schemaview Parser Module.

Readers that build schema declarations from Python source text or from
live classes.
"""

from schemaview.parser.introspect import ClassSchemaReader
from schemaview.parser.source import SourceModule, SourceSchemaReader

__all__ = [
    "ClassSchemaReader",
    "SourceModule",
    "SourceSchemaReader",
]
