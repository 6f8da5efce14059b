"""
Table Matcher — caption, optional thead, tbody rows, optional tfoot.
"""

from sdv.config.models import ValidatorSettings
from sdv.core.diagnostics import DiagnosticSink
from sdv.tree.node import Node
from sdv.validation.grammar import (
    Sequence,
    exactly_one,
    match_all,
    optional,
    repeat,
    sequence,
    tag_literal,
)

MISSING_CAPTION = "Table is missing a caption"
MISSING_TBODY = "Table must contain at least one <tbody> element"


def build_table_grammar(settings: ValidatorSettings) -> Sequence:
    """Grammar for the children of a <table>."""
    return sequence(
        "Table",
        exactly_one(tag_literal("caption"), missing=MISSING_CAPTION),
        optional(tag_literal("thead")),
        repeat(tag_literal("tbody"), min=settings.table_min_tbody, missing=MISSING_TBODY),
        optional(tag_literal("tfoot")),
    )


class TableMatcher:
    """Matches <table> and checks the order of its sections."""

    def __init__(self, settings: ValidatorSettings):
        self.grammar = build_table_grammar(settings)

    def __call__(self, node: Node, sink: DiagnosticSink) -> bool:
        if node.tag != "table":
            return False
        if not sink.speculative:
            match_all(self.grammar, node, sink)
        return True
