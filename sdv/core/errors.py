"""
Errors — Conditions that abort a validation run.
"""

from typing import Optional

from sdv.tree.node import Node


class FatalValidationError(Exception):
    """
    A metadata prerequisite is violated; further checks are meaningless.

    Raised out of validate() before structural validation runs. The
    message is not recorded in the diagnostic sink.
    """

    def __init__(self, message: str, node: Optional[Node] = None):
        super().__init__(message)
        self.message = message
        self.node = node
