"""
Structure Validator — The body grammar, front matter through bibliography.
"""

from typing import Optional

from sdv.config.models import ValidatorSettings
from sdv.core.diagnostics import DiagnosticSink
from sdv.core.logging import LogChannel, get_logger
from sdv.tree.node import Node
from sdv.validation.content_model import ContentModel
from sdv.validation.grammar import (
    Sequence,
    exactly_one,
    literal,
    match_all,
    optional,
    sequence,
    tag_literal,
    zero_or_more,
)
from sdv.validation.sections import (
    CONFORMANCE_ID,
    FOREWORD_ID,
    INTRODUCTION_ID,
    SCOPE_ID,
    AnnexMatcher,
    ClauseMatcher,
    match_bibliography,
    match_definitions,
    match_elements_annex,
    match_normative_references,
)

log = get_logger(LogChannel.STRUCTURE)

MISSING_SCOPE = "Mandatory Scope clause missing"


def build_body_grammar(content_model: ContentModel) -> Sequence:
    """Grammar for the children of <body>."""
    return sequence(
        "Body section",
        optional(tag_literal("section", FOREWORD_ID)),
        optional(tag_literal("section", INTRODUCTION_ID)),
        exactly_one(tag_literal("section", SCOPE_ID), missing=MISSING_SCOPE),
        optional(tag_literal("section", CONFORMANCE_ID)),
        optional(literal("normative references", match_normative_references)),
        optional(literal("terms and definitions", match_definitions)),
        zero_or_more(literal("clause", ClauseMatcher(content_model))),
        zero_or_more(literal("annex", AnnexMatcher(content_model))),
        optional(literal("elements annex", match_elements_annex)),
        optional(literal("bibliography", match_bibliography)),
    )


class StructureValidator:
    """
    Validates the body of a document against the body grammar.

    Never raises on document content; every problem goes to the sink.
    The grammar is built once per settings and may be reused across runs.
    """

    def __init__(self, settings: Optional[ValidatorSettings] = None):
        self.settings = settings or ValidatorSettings()
        self.content_model = ContentModel(self.settings)
        self.grammar = build_body_grammar(self.content_model)

    def validate_body(self, body: Node, sink: DiagnosticSink) -> bool:
        """Returns True when the body matched without diagnostics."""
        errors_before = len(sink)
        matched = match_all(self.grammar, body, sink)
        log.verbose(
            "body_validated",
            sections=body.child_count,
            matched=matched,
            diagnostics=len(sink) - errors_before,
        )
        return matched and len(sink) == errors_before
