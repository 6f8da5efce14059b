"""
Profile Models — Settings that tune the validator for a document corpus.
"""

from dataclasses import dataclass, field

DEFAULT_ITEMTYPE = "http://smpte.org/standards/documents"


@dataclass(frozen=True)
class ValidatorSettings:
    """Tunable rules. Defaults describe the current document schema."""

    # Required value of head@itemtype
    itemtype: str = DEFAULT_ITEMTYPE

    # Minimum number of <tbody> elements per table. Older documents have
    # tables without any and need 0.
    table_min_tbody: int = 1


@dataclass(frozen=True)
class ValidatorProfile:
    """A named, versioned set of validator settings."""

    name: str
    version: str = "1.0"
    description: str = ""
    settings: ValidatorSettings = field(default_factory=ValidatorSettings)
