"""
Content Model — Which elements may appear where inside clause prose.

Two families of rules, each a function (node, sink) -> bool:

- Phrasing: inline elements. Terminal ones take no element children,
  containers take phrasing children only, <math> is opaque.
- Block: paragraphs, formulas, lists, definition lists, preformatted
  text, figures, asides and tables.

Flow content is either. A rule returns True when the node belongs to its
family; problems inside the node are logged (when not speculating) but do
not change the classification.
"""

from typing import Callable, Optional

from sdv.config.models import ValidatorSettings
from sdv.core.diagnostics import DiagnosticSink
from sdv.tree.node import Node
from sdv.validation.grammar import Cursor
from sdv.validation.tables import TableMatcher

ContentRule = Callable[[Node, DiagnosticSink], bool]

# Inline elements that must not contain child elements
TERMINAL_PHRASING = frozenset({
    "a",
    "br",
    "code",
    "dfn",
    "kbd",
    "q",
    "samp",
    "strong",
    "time",
    "var",
    "wbr",
})

# Inline elements whose children must be phrasing content
CONTAINER_PHRASING = frozenset({
    "b",
    "bdi",
    "bdo",
    "em",
    "i",
    "s",
    "span",
    "sub",
    "sup",
    "u",
})

# Structure not inspected
OPAQUE_PHRASING = frozenset({"math"})

PHRASING_ELEMENTS = TERMINAL_PHRASING | CONTAINER_PHRASING | OPAQUE_PHRASING

FORMULA_CLASS = "formula"


def check_children(node: Node, rule: ContentRule, expected: str, sink: DiagnosticSink) -> None:
    """Log every child of node that rule does not accept."""
    for child in node.children:
        if not rule(child, sink):
            sink.error(
                f"<{child.tag}> element is not permitted in {node.describe()}: expected {expected}",
                child,
            )


# =============================================================================
# Phrasing
# =============================================================================

def match_phrasing(node: Node, sink: DiagnosticSink) -> bool:
    """Inline content."""
    if node.tag in OPAQUE_PHRASING:
        return True

    if node.tag in TERMINAL_PHRASING:
        if not sink.speculative and node.children:
            sink.error(f"<{node.tag}> element must not contain child elements", node)
        return True

    if node.tag in CONTAINER_PHRASING:
        if not sink.speculative:
            check_children(node, match_phrasing, "phrasing content", sink)
        return True

    return False


def check_text_only(node: Node, sink: DiagnosticSink) -> None:
    if node.children:
        sink.error(f"<{node.tag}> element must contain text only", node)


# =============================================================================
# Definition lists
# =============================================================================

def is_definition_source(dd: Node) -> bool:
    """A <dd> holding exactly one terminal <a> element."""
    if dd.child_count != 1:
        return False
    anchor = dd.first_child
    return anchor.tag == "a" and anchor.child_count == 0


def check_definition_groups(dl: Node, sink: DiagnosticSink, prefix: str = "Definition list") -> None:
    """
    Check that a <dl> is a run of groups: one or more <dt>, one <dd>, and an
    optional second <dd> that is a definition source.
    """
    cursor = Cursor.over(dl)

    while not cursor.at_end:
        node = cursor.peek()

        if node.tag not in ("dt", "dd"):
            sink.error(f"{prefix}: <{node.tag}> element is not permitted in {dl.describe()}", node)
            cursor = cursor.advance()
            continue

        terms = 0
        while not cursor.at_end and cursor.peek().tag == "dt":
            check_children(cursor.peek(), match_phrasing, "phrasing content", sink)
            terms += 1
            cursor = cursor.advance()

        if terms == 0:
            sink.error(f"{prefix}: definition group has no <dt> element", node)

        definition = cursor.peek()
        if definition is None or definition.tag != "dd":
            sink.error(f"{prefix}: definition group has no <dd> element", node)
            continue

        check_children(definition, match_phrasing, "phrasing content", sink)
        cursor = cursor.advance()

        source = cursor.peek()
        if source is not None and source.tag == "dd":
            if not is_definition_source(source):
                sink.error(
                    f"{prefix}: a second <dd> element must be a definition source "
                    f"containing exactly one <a> element",
                    source,
                )
            cursor = cursor.advance()


# =============================================================================
# Block and flow
# =============================================================================

class ContentModel:
    """
    Block and flow rules.

    Holds the table matcher, whose grammar depends on the validator
    settings; everything else is fixed.
    """

    def __init__(self, settings: Optional[ValidatorSettings] = None):
        self.settings = settings or ValidatorSettings()
        self.match_table = TableMatcher(self.settings)
        self._block_rules: dict[str, ContentRule] = {
            "p": self._match_paragraph,
            "div": self._match_div,
            "ul": self._match_list,
            "ol": self._match_list,
            "dl": self._match_definition_list,
            "pre": self._match_text_only,
            "blockquote": self._match_text_only,
            "figure": self._match_opaque,
            "aside": self._match_opaque,
            "table": self.match_table,
        }

    def match_block(self, node: Node, sink: DiagnosticSink) -> bool:
        rule = self._block_rules.get(node.tag)
        if rule is None:
            return False
        return rule(node, sink)

    def match_flow(self, node: Node, sink: DiagnosticSink) -> bool:
        return match_phrasing(node, sink) or self.match_block(node, sink)

    def check_flow_children(self, node: Node, sink: DiagnosticSink) -> None:
        check_children(node, self.match_flow, "flow content", sink)

    # -------------------------------------------------------------------------

    def _match_paragraph(self, node: Node, sink: DiagnosticSink) -> bool:
        if not sink.speculative:
            check_children(node, match_phrasing, "phrasing content", sink)
        return True

    def _match_div(self, node: Node, sink: DiagnosticSink) -> bool:
        if sink.speculative:
            return True

        if node.has_class(FORMULA_CLASS):
            if node.child_count != 1 or node.first_child.tag != "math":
                sink.error("Formula must contain exactly one <math> element", node)
            if not node.id:
                sink.error("Formula is missing an id", node)
        else:
            self.check_flow_children(node, sink)
        return True

    def _match_list(self, node: Node, sink: DiagnosticSink) -> bool:
        if sink.speculative:
            return True

        for item in node.children:
            if item.tag == "li":
                self.check_flow_children(item, sink)
            else:
                sink.error(
                    f"<{item.tag}> element is not permitted in {node.describe()}: expected <li>",
                    item,
                )
        return True

    def _match_definition_list(self, node: Node, sink: DiagnosticSink) -> bool:
        if not sink.speculative:
            check_definition_groups(node, sink)
        return True

    def _match_text_only(self, node: Node, sink: DiagnosticSink) -> bool:
        if not sink.speculative:
            check_text_only(node, sink)
        return True

    def _match_opaque(self, node: Node, sink: DiagnosticSink) -> bool:
        return True
