"""
IR — Validation output models

DocumentMetadata and ValidationReport are the only artifacts that leave
the validator.
"""

from sdv.ir.enums import (
    DiagnosticLevel,
    PubStage,
    PubState,
    PubType,
    ValidationStatus,
)
from sdv.ir.schema import (
    DiagnosticEntry,
    DocumentMetadata,
    ValidationReport,
)

__all__ = [
    # Enums
    "PubType",
    "PubState",
    "PubStage",
    "DiagnosticLevel",
    "ValidationStatus",
    # Models
    "DocumentMetadata",
    "DiagnosticEntry",
    "ValidationReport",
]
