"""
Tree Loader — Build the read-only document tree from HTML markup.

Parsing is delegated to BeautifulSoup with the html5lib tree builder, which
follows HTML5 tree construction: optional end tags (p, li, dt, dd, ...) are
closed implicitly and table rows get their implied <tbody>. This module
only converts the parsed tree into immutable Nodes.
"""

from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup, CData, NavigableString, Tag

from sdv.core.logging import LogChannel, get_logger
from sdv.tree.node import Document, Node

PARSER = "html5lib"

# String types that count as text content; comments, doctypes and
# processing instructions do not
TEXT_TYPES = (NavigableString, CData)

log = get_logger(LogChannel.LOADER)


def _attribute_value(value) -> str:
    # Multi-valued attributes (class, rel, ...) come back as lists
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return "" if value is None else str(value)


def to_node(tag: Tag) -> Node:
    """Convert a BeautifulSoup Tag (and its subtree) into a Node."""
    attributes = {name: _attribute_value(value) for name, value in tag.attrs.items()}
    classes = frozenset(attributes.get("class", "").split())

    # Text is assembled from the converted children, so each string is
    # visited once however deep the tree is
    children = []
    text = []
    for child in tag.children:
        if isinstance(child, Tag):
            node = to_node(child)
            children.append(node)
            text.append(node.text)
        elif type(child) in TEXT_TYPES:
            text.append(str(child))

    return Node(
        tag=tag.name,
        id=attributes.get("id") or None,
        classes=classes,
        attributes=attributes,
        children=tuple(children),
        text="".join(text),
    )


def parse_html(markup: Union[str, bytes], source: Optional[str] = None) -> Document:
    """
    Parse an HTML document into a Document.

    The HTML5 parser always produces <head>; a frameset document has no
    <body> and yields an empty one, so validation still runs and reports
    what is wrong.
    """
    soup = BeautifulSoup(markup, PARSER)

    head = to_node(soup.head) if soup.head is not None else Node(tag="head")
    if soup.body is not None:
        body = to_node(soup.body)
    else:
        log.warning("body_missing", source=source)
        body = Node(tag="body")

    log.debug(
        "document_parsed",
        source=source,
        head_children=head.child_count,
        body_children=body.child_count,
    )

    return Document(head=head, body=body, source=source)


def load_document(path: Union[str, Path]) -> Document:
    """Read and parse an HTML file."""
    path = Path(path)
    return parse_html(path.read_bytes(), source=str(path))
