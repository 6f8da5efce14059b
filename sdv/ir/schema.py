"""
IR Schema — Pydantic models for validation output.

DocumentMetadata is handed to the renderer and build pipeline;
ValidationReport is what the CLI and CI consume.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from sdv.ir.enums import (
    DiagnosticLevel,
    PubStage,
    PubState,
    PubType,
    ValidationStatus,
)

SCHEMA_VERSION = "0.1.0"


class DocumentMetadata(BaseModel):
    """
    Publication identity read from the document head.

    Built once per validation run and immutable thereafter. Field aliases
    are the exact ``itemprop`` names used in the head.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pub_title: str = Field(..., alias="pubTitle", description="Document title")
    pub_type: PubType = Field(..., alias="pubType")
    pub_state: PubState = Field(..., alias="pubState")
    pub_stage: Optional[PubStage] = Field(None, alias="pubStage")
    pub_number: Optional[str] = Field(None, alias="pubNumber", description="Numeric string")
    pub_part: Optional[str] = Field(None, alias="pubPart", description="Numeric string")
    pub_version: Optional[str] = Field(None, alias="pubVersion", description="e.g. 2023 or 2023-05")
    pub_suite_title: Optional[str] = Field(None, alias="pubSuiteTitle")
    pub_tc: Optional[str] = Field(None, alias="pubTC", description="Technology committee")
    pub_confidential: Optional[bool] = Field(None, alias="pubConfidential")
    pub_date_time: Optional[str] = Field(None, alias="pubDateTime", description="Partial ISO date")
    effective_date_time: Optional[str] = Field(None, alias="effectiveDateTime")
    pub_revision_of: Optional[str] = Field(None, alias="pubRevisionOf")

    @property
    def is_published(self) -> bool:
        return self.pub_state == PubState.PUB

    @property
    def is_engineering_document(self) -> bool:
        return self.pub_type.is_engineering_document

    @property
    def full_title(self) -> str:
        """Title prefixed with the suite title, as shown on the cover."""
        if self.pub_suite_title:
            return f"{self.pub_suite_title}: {self.pub_title}"
        return self.pub_title

    @property
    def designation(self) -> Optional[str]:
        """Publication designation such as ``ST 2067-21:2023``."""
        if self.pub_number is None:
            return None
        designation = f"{self.pub_type.value} {self.pub_number}"
        if self.pub_part is not None:
            designation += f"-{self.pub_part}"
        if self.pub_version is not None:
            designation += f":{self.pub_version}"
        return designation


class DiagnosticEntry(BaseModel):
    """A diagnostic as reported to the user."""

    index: int = Field(..., description="Position in detection order")
    level: DiagnosticLevel = DiagnosticLevel.ERROR
    message: str
    location: Optional[str] = Field(None, description="Offending element, e.g. li or section#sec-scope")

    def format(self) -> str:
        if self.location:
            return f"[{self.level.value}] {self.message} ({self.location})"
        return f"[{self.level.value}] {self.message}"


class ValidationReport(BaseModel):
    """The complete outcome of validating one document."""

    version: str = Field(default=SCHEMA_VERSION, description="Report schema version")
    source: Optional[str] = Field(None, description="Path of the validated document")
    timestamp: datetime = Field(default_factory=datetime.now)
    profile: str = Field("default", description="Validator profile used")

    status: ValidationStatus
    metadata: Optional[DocumentMetadata] = Field(
        None, description="Absent when the run aborted on a fatal condition"
    )
    diagnostics: list[DiagnosticEntry] = Field(default_factory=list)
    fatal_reason: Optional[str] = None

    duration_ms: float = Field(0.0, description="Wall-clock time of the run")

    @property
    def has_failed(self) -> bool:
        return self.status != ValidationStatus.PASSED

    def error_messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]
