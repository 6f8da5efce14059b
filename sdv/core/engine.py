"""
Engine — Validation run orchestration.

The engine runs the metadata validator, then the structure validator,
and packages the outcome. A fatal metadata condition stops the run
before any structural check.

The engine is NOT where validation rules live.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from sdv.config.loader import get_profile
from sdv.config.models import ValidatorProfile
from sdv.core.diagnostics import DiagnosticSink
from sdv.core.errors import FatalValidationError
from sdv.core.logging import ValidationLogger
from sdv.ir.enums import ValidationStatus
from sdv.ir.schema import DiagnosticEntry, DocumentMetadata, ValidationReport
from sdv.tree.loader import load_document
from sdv.tree.node import Document
from sdv.validation.metadata import validate_head
from sdv.validation.structure import StructureValidator

ProfileArg = Union[ValidatorProfile, str, None]

# itemprop of the head meta declaring a fixture's expected outcome
FIXTURE_EXPECTATION = "test"


class Engine:
    """
    Validates documents against one profile.

    Holds the body grammar built for the profile; holds no per-run state,
    so one engine may validate any number of documents.
    """

    def __init__(self, profile: Optional[ValidatorProfile] = None) -> None:
        self.profile = profile or get_profile()
        self.structure = StructureValidator(self.profile.settings)

    def validate(self, document: Document, sink: DiagnosticSink) -> DocumentMetadata:
        """
        Validate a document.

        Args:
            document: Parsed document
            sink: Receives recoverable diagnostics

        Returns:
            The document's metadata, whatever the structural outcome

        Raises:
            FatalValidationError: A metadata prerequisite is violated;
                structural validation did not run
        """
        vlog = ValidationLogger(document.source)

        try:
            vlog.phase_start("metadata")
            metadata = validate_head(
                document.head,
                sink,
                title=document.title,
                settings=self.profile.settings,
            )
            vlog.phase_end("metadata", diagnostics=len(sink))
        except FatalValidationError as e:
            vlog.fatal("metadata", e.message)
            vlog.complete(ValidationStatus.FATAL.value, diagnostics=len(sink))
            raise

        vlog.phase_start("structure")
        self.structure.validate_body(document.body, sink)
        vlog.phase_end("structure", diagnostics=len(sink))

        status = ValidationStatus.FAILED if sink.has_failed() else ValidationStatus.PASSED
        vlog.complete(status.value, diagnostics=len(sink))
        return metadata

    def validate_document(self, document: Document) -> ValidationReport:
        """Validate a document and package the outcome as a report."""
        sink = DiagnosticSink()
        start = time.perf_counter()

        metadata = None
        fatal_reason = None
        try:
            metadata = self.validate(document, sink)
        except FatalValidationError as e:
            fatal_reason = e.message

        if fatal_reason is not None:
            status = ValidationStatus.FATAL
        elif sink.has_failed():
            status = ValidationStatus.FAILED
        else:
            status = ValidationStatus.PASSED

        return ValidationReport(
            source=document.source,
            profile=self.profile.name,
            status=status,
            metadata=metadata,
            diagnostics=[
                DiagnosticEntry(index=i, message=d.message, location=d.location)
                for i, d in enumerate(sink.error_list())
            ],
            fatal_reason=fatal_reason,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )


# Engines by profile name
_engines: dict[str, Engine] = {}


def get_engine(profile: ProfileArg = None) -> Engine:
    """Get or create the engine for a profile (name, object or default)."""
    if isinstance(profile, ValidatorProfile):
        return Engine(profile)

    resolved = get_profile(profile)
    if resolved.name not in _engines:
        _engines[resolved.name] = Engine(resolved)
    return _engines[resolved.name]


def validate(document: Document, sink: DiagnosticSink, profile: ProfileArg = None) -> DocumentMetadata:
    """
    Validate a document into a caller-owned sink.

    Raises FatalValidationError on a fatal metadata condition.
    """
    return get_engine(profile).validate(document, sink)


def validate_document(document: Document, profile: ProfileArg = None) -> ValidationReport:
    """Validate a document; never raises on document content."""
    return get_engine(profile).validate_document(document)


# =============================================================================
# Fixtures
# =============================================================================

@dataclass(frozen=True)
class FixtureOutcome:
    """Result of checking one fixture against its declared expectation."""

    path: Path
    expected: Optional[str]   # "valid", "invalid", or None when undeclared
    report: ValidationReport

    @property
    def passed(self) -> bool:
        if self.expected == "valid":
            return self.report.status == ValidationStatus.PASSED
        if self.expected == "invalid":
            return self.report.has_failed
        return False


def fixture_expectation(document: Document) -> Optional[str]:
    """Value of <meta itemprop="test">, lowercased."""
    for node in document.head.iter_descendants():
        if node.tag == "meta" and node.get("itemprop") == FIXTURE_EXPECTATION:
            value = (node.get("content") or "").strip().lower()
            return value if value in ("valid", "invalid") else None
    return None


def run_fixture(path: Union[str, Path], profile: ProfileArg = None) -> FixtureOutcome:
    """Validate a fixture file and compare with its expectation."""
    document = load_document(path)
    return FixtureOutcome(
        path=Path(path),
        expected=fixture_expectation(document),
        report=validate_document(document, profile),
    )


def run_fixtures(directory: Union[str, Path], profile: ProfileArg = None) -> list[FixtureOutcome]:
    """Run every *.html fixture in a directory, in file name order."""
    return [run_fixture(p, profile) for p in sorted(Path(directory).glob("*.html"))]
