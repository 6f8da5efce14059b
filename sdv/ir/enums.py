"""
IR Enums — Publication codes, states and report statuses.

The string values are the exact tokens carried in document head metadata.
"""

from enum import Enum


# ============================================================================
# Publication identity
# ============================================================================

class PubType(str, Enum):
    """Publication type (head field ``pubType``)."""

    AG = "AG"    # Administrative Guideline
    OM = "OM"    # Operations Manual
    ST = "ST"    # Standard
    RP = "RP"    # Recommended Practice
    EG = "EG"    # Engineering Guideline
    ER = "ER"    # Engineering Report
    RDD = "RDD"  # Registered Disclosure Document

    @property
    def is_engineering_document(self) -> bool:
        """Engineering documents carry a stage and a technology committee."""
        return self in ENGINEERING_PUB_TYPES


ENGINEERING_PUB_TYPES = frozenset({
    PubType.ST,
    PubType.RP,
    PubType.EG,
    PubType.ER,
    PubType.RDD,
})


class PubState(str, Enum):
    """Publication state (head field ``pubState``)."""

    DRAFT = "draft"
    PUB = "pub"


class PubStage(str, Enum):
    """
    Approval stage (head field ``pubStage``).

    - WD: Working Draft
    - CD: Committee Draft
    - FCD: Final Committee Draft
    - DP: Draft Publication
    - PUB: Published
    """

    WD = "WD"
    CD = "CD"
    FCD = "FCD"
    DP = "DP"
    PUB = "PUB"


# A document may be marked non-confidential only at these stages
PUBLIC_STAGES = frozenset({PubStage.CD, PubStage.PUB})


# ============================================================================
# Reporting
# ============================================================================

class DiagnosticLevel(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationStatus(str, Enum):
    """Overall outcome of a validation run."""

    PASSED = "passed"    # No diagnostics
    FAILED = "failed"    # Recoverable diagnostics were recorded
    FATAL = "fatal"      # Aborted on a fatal metadata condition
