"""
Tree — The read-only document tree and its HTML loader.
"""

from sdv.tree.node import Document, Node, element

__all__ = ["Document", "Node", "element"]
