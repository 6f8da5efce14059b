"""
Section Matchers — The body sections of a standards document.

Each matcher is a Literal matcher: it classifies a <section> by tag, id and
class, and when committed checks the section's content and logs every
problem it finds. Reference lists and the elements annex keep scanning
after a bad entry so one run reports them all.
"""

from sdv.core.diagnostics import DiagnosticSink
from sdv.tree.node import Node
from sdv.validation.content_model import ContentModel, check_definition_groups
from sdv.validation.grammar import (
    Cursor,
    evaluate,
    literal,
    match_all,
    one_of,
    one_or_more,
    optional,
    select,
    sequence,
    zero_or_more,
)

# =============================================================================
# Section ids
# =============================================================================

FOREWORD_ID = "sec-foreword"
INTRODUCTION_ID = "sec-introduction"
SCOPE_ID = "sec-scope"
CONFORMANCE_ID = "sec-conformance"
NORMATIVE_REFERENCES_ID = "sec-normative-references"
DEFINITIONS_ID = "sec-terms-and-definitions"
ELEMENTS_ID = "sec-elements"
BIBLIOGRAPHY_ID = "sec-bibliography"

EXTERNAL_DEFINITIONS_ID = "terms-ext-defs"
INTERNAL_DEFINITIONS_ID = "terms-int-defs"

# Never matched as a clause or an annex
RESERVED_SECTION_IDS = frozenset({
    FOREWORD_ID,
    INTRODUCTION_ID,
    SCOPE_ID,
    CONFORMANCE_ID,
    NORMATIVE_REFERENCES_ID,
    DEFINITIONS_ID,
    ELEMENTS_ID,
    BIBLIOGRAPHY_ID,
})

ANNEX_CLASS = "annex"

TOP_LEVEL_HEADING = 2


def is_section(node: Node, section_id: str) -> bool:
    return node.tag == "section" and node.id == section_id


# =============================================================================
# Reference lists
# =============================================================================

def check_reference_list(section: Node, prefix: str, sink: DiagnosticSink) -> None:
    """
    A reference section holds a single <ul>; each <li> carries exactly one
    <cite> with an id and at most one <a>.
    """
    if section.child_count != 1 or section.first_child.tag != "ul":
        sink.error(f"{prefix} section must contain a single <ul> element.", section)
        return

    for item in section.first_child.children:
        if item.tag != "li":
            sink.error(f"{prefix}: the <ul> element must contain only <li> elements.", item)
            continue

        cites = item.find_all("cite")
        if len(cites) == 1:
            if not cites[0].id:
                sink.error(f"{prefix}: each <cite> element must contain an id attribute.", cites[0])
        else:
            sink.error(f"{prefix}: each <li> element must contain a single <cite> element.", item)

        if len(item.find_all("a")) > 1:
            sink.error(f"{prefix}: each <li> element must contain at most one <a> element.", item)


def match_normative_references(node: Node, sink: DiagnosticSink) -> bool:
    if not is_section(node, NORMATIVE_REFERENCES_ID):
        return False
    if not sink.speculative:
        check_reference_list(node, "Normative references", sink)
    return True


def match_bibliography(node: Node, sink: DiagnosticSink) -> bool:
    if not is_section(node, BIBLIOGRAPHY_ID):
        return False
    if not sink.speculative:
        check_reference_list(node, "Bibliography references", sink)
    return True


# =============================================================================
# Terms and definitions
# =============================================================================

def match_external_definitions(node: Node, sink: DiagnosticSink) -> bool:
    """<ul id=terms-ext-defs>: each <li> is exactly one <a>."""
    if node.tag != "ul" or node.id != EXTERNAL_DEFINITIONS_ID:
        return False
    if sink.speculative:
        return True

    for item in node.children:
        if item.tag != "li":
            sink.error("External definitions: the <ul> element must contain only <li> elements.", item)
        elif item.child_count != 1 or item.first_child.tag != "a":
            sink.error("External definitions: each <li> element must contain exactly one <a> element.", item)
    return True


def match_internal_definitions(node: Node, sink: DiagnosticSink) -> bool:
    """<dl id=terms-int-defs>: groups of terms and definitions."""
    if node.tag != "dl" or node.id != INTERNAL_DEFINITIONS_ID:
        return False
    if not sink.speculative:
        check_definition_groups(node, sink, prefix="Internal definitions")
    return True


DEFINITIONS_GRAMMAR = sequence(
    "Terms and definitions section",
    optional(literal("external definitions", match_external_definitions)),
    optional(literal("internal definitions", match_internal_definitions)),
)


def match_definitions(node: Node, sink: DiagnosticSink) -> bool:
    if not is_section(node, DEFINITIONS_ID):
        return False
    if not sink.speculative:
        match_all(DEFINITIONS_GRAMMAR, node, sink)
    return True


# =============================================================================
# Elements annex
# =============================================================================

def is_element_link(item: Node) -> bool:
    """An <li> holding a single <a> with title, id and href."""
    if item.child_count != 1:
        return False
    anchor = item.first_child
    return (
        anchor.tag == "a"
        and bool(anchor.id)
        and bool(anchor.get("title"))
        and bool(anchor.get("href"))
    )


def match_elements_annex(node: Node, sink: DiagnosticSink) -> bool:
    if not is_section(node, ELEMENTS_ID):
        return False
    if sink.speculative:
        return True

    if node.child_count != 1 or node.first_child.tag != "ol":
        sink.error("The Elements Annex section must contain a single <ol> element.", node)
        return True

    for item in node.first_child.children:
        if item.tag != "li":
            sink.error("The <ol> element of the Elements Annex must contain only <li> elements.", item)
        elif not is_element_link(item):
            sink.error(
                "Each <li> element of the Elements Annex must contain a single <a> element "
                "with a title, id and href attributes.",
                item,
            )
    return True


# =============================================================================
# Clauses and annexes
# =============================================================================

class SectionMatcher:
    """
    A clause-shaped <section> at a given heading level.

    The section starts with an <hN> heading, then holds either one or more
    sub-sections (validated one level deeper) or flow content, never both.
    """

    def __init__(self, content_model: ContentModel, level: int = TOP_LEVEL_HEADING, kind: str = "Clause"):
        self.content_model = content_model
        self.level = level
        self.kind = kind
        self._sub_sections = None

    @property
    def sub_sections(self) -> "SectionMatcher":
        # Built on demand: the recursion is only as deep as the document
        if self._sub_sections is None:
            self._sub_sections = SectionMatcher(self.content_model, self.level + 1, self.kind)
        return self._sub_sections

    def accepts(self, node: Node) -> bool:
        return node.tag == "section"

    def __call__(self, node: Node, sink: DiagnosticSink) -> bool:
        if not self.accepts(node):
            return False
        if not sink.speculative:
            self.check_content(node, sink)
        return True

    def check_content(self, node: Node, sink: DiagnosticSink) -> None:
        cursor = Cursor.over(node)

        heading = cursor.peek()
        if heading is not None and heading.tag == f"h{self.level}":
            cursor = cursor.advance()
        else:
            sink.error(f"{self.kind} is missing a heading", node)

        if cursor.at_end:
            return

        label = f"{self.kind} {node.describe()}"
        sub_clauses = sequence(label, one_or_more(literal("sub-clause", self.sub_sections)))
        prose = sequence(label, zero_or_more(literal("flow content", self.content_model.match_flow)))

        chosen = select(one_of(sub_clauses, prose), cursor)
        if chosen is not None:
            evaluate(chosen, cursor, sink)
        else:
            self._check_mixed_content(node, cursor, sink)

    def _check_mixed_content(self, node: Node, cursor: Cursor, sink: DiagnosticSink) -> None:
        has_sub_clauses = False
        has_blocks = False

        for child in cursor.remaining():
            if self.sub_sections(child, sink):
                has_sub_clauses = True
            elif self.content_model.match_flow(child, sink):
                has_blocks = True
            else:
                sink.error(f"Unknown element <{child.tag}> in {self.kind.lower()} {node.describe()}", child)

        if has_sub_clauses and has_blocks:
            sink.error(f"{self.kind} combines sub-clauses and text", node)


class ClauseMatcher(SectionMatcher):
    """A numbered top-level clause."""

    def accepts(self, node: Node) -> bool:
        return (
            node.tag == "section"
            and not node.has_class(ANNEX_CLASS)
            and node.id not in RESERVED_SECTION_IDS
        )


class AnnexMatcher(SectionMatcher):
    """A clause-shaped section marked as an annex."""

    def __init__(self, content_model: ContentModel):
        super().__init__(content_model, TOP_LEVEL_HEADING, kind="Annex")

    def accepts(self, node: Node) -> bool:
        return (
            node.tag == "section"
            and node.has_class(ANNEX_CLASS)
            and node.id not in RESERVED_SECTION_IDS
        )
