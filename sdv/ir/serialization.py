"""
Report Serialization — JSON import/export for validation reports.
"""

from pathlib import Path
from typing import Union

from sdv.ir.schema import ValidationReport


def to_json(report: ValidationReport, indent: int = 2) -> str:
    """Serialize a ValidationReport to JSON string (head field names as keys)."""
    return report.model_dump_json(indent=indent, by_alias=True)


def from_json(json_str: str) -> ValidationReport:
    """Deserialize a ValidationReport from JSON string."""
    return ValidationReport.model_validate_json(json_str)


def save(report: ValidationReport, path: Union[str, Path]) -> None:
    """Save a ValidationReport to a JSON file."""
    path = Path(path)
    path.write_text(to_json(report))


def load(path: Union[str, Path]) -> ValidationReport:
    """Load a ValidationReport from a JSON file."""
    path = Path(path)
    return from_json(path.read_text())
