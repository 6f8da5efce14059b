"""
Document Tree — Read-only view of a parsed standards document.

Validators never mutate a Node. They walk child tuples through cursors
(see sdv.validation.grammar), so speculative matching has no side effects
on the source tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional


def _freeze_attributes(attributes: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(attributes or {}))


@dataclass(frozen=True, eq=False)
class Node:
    """An element of the document tree.

    Only element children are kept in ``children``; ``text`` holds the
    element's full text content.
    """

    tag: str
    id: Optional[str] = None
    classes: frozenset[str] = field(default_factory=frozenset)
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    children: tuple["Node", ...] = ()
    text: Optional[str] = None

    def __post_init__(self) -> None:
        # Normalize caller-provided containers into their immutable forms
        object.__setattr__(self, "tag", self.tag.lower())
        object.__setattr__(self, "classes", frozenset(self.classes))
        object.__setattr__(self, "children", tuple(self.children))
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", _freeze_attributes(self.attributes))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get an attribute value."""
        return self.attributes.get(name, default)

    def has_class(self, name: str) -> bool:
        return name in self.classes

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def first_child(self) -> Optional["Node"]:
        return self.children[0] if self.children else None

    def iter_descendants(self) -> Iterator["Node"]:
        """Depth-first, document-order walk of all descendant elements."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def find_all(self, tag: str) -> list["Node"]:
        """All descendants with the given tag name, in document order."""
        return [n for n in self.iter_descendants() if n.tag == tag]

    def describe(self) -> str:
        """Short human-readable reference, e.g. ``section#sec-scope``."""
        if self.id:
            return f"{self.tag}#{self.id}"
        return self.tag

    def __repr__(self) -> str:
        return f"<Node {self.describe()} children={len(self.children)}>"


@dataclass(frozen=True)
class Document:
    """A parsed document: its head and body subtrees."""

    head: Node
    body: Node
    source: Optional[str] = None

    @property
    def title(self) -> Optional[str]:
        return title_of(self.head)


def title_of(head: Node) -> Optional[str]:
    """Text of the head's <title> element, None if absent or blank."""
    for child in head.children:
        if child.tag == "title":
            return (child.text or "").strip() or None
    return None


def element(
    tag: str,
    *children: Node,
    id: Optional[str] = None,
    classes: Optional[list[str]] = None,
    text: Optional[str] = None,
    **attributes: str,
) -> Node:
    """
    Build a Node in code.

    A trailing underscore is stripped from keyword attribute names so that
    reserved words can be passed (``for_="x"``). ``id`` is also stored as an
    attribute.
    """
    attrs = {k.rstrip("_"): v for k, v in attributes.items()}
    if id is not None:
        attrs["id"] = id
    if classes:
        attrs["class"] = " ".join(classes)
    if text is None:
        text = "".join(c.text or "" for c in children)
    return Node(
        tag=tag,
        id=id,
        classes=frozenset(classes or ()),
        attributes=attrs,
        children=tuple(children),
        text=text,
    )
