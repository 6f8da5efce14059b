"""
Validation — Metadata and structure rules for standards documents.
"""

from sdv.validation.grammar import (
    Cursor,
    Literal,
    OneOf,
    Repeat,
    Rule,
    Sequence,
    evaluate,
    match_all,
)
from sdv.validation.metadata import validate_head
from sdv.validation.structure import StructureValidator

__all__ = [
    "Cursor",
    "Literal",
    "OneOf",
    "Repeat",
    "Rule",
    "Sequence",
    "evaluate",
    "match_all",
    "validate_head",
    "StructureValidator",
]
