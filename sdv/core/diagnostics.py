"""
Diagnostics — The sink that collects recoverable validation problems.

One sink belongs to one validation run. It is passed explicitly into every
validation call; there is no module-level sink.
"""

from dataclasses import dataclass
from typing import Optional

from sdv.core.logging import LogChannel, get_logger
from sdv.tree.node import Node


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem, in detection order."""

    message: str
    node: Optional[Node] = None

    @property
    def location(self) -> Optional[str]:
        return self.node.describe() if self.node is not None else None

    def __str__(self) -> str:
        if self.node is not None:
            return f"{self.message} ({self.node.describe()})"
        return self.message


class DiagnosticSink:
    """
    Append-only collector of diagnostics.

    error() always records and marks the run as failed. warn() and info()
    do not record anything; they only reach the structured log.
    """

    speculative = False

    def __init__(self) -> None:
        self._failed = False
        self._errors: list[Diagnostic] = []
        self._log = get_logger(LogChannel.SYSTEM)

    def error(self, message: str, node: Optional[Node] = None) -> None:
        self._failed = True
        self._errors.append(Diagnostic(message=message, node=node))

    def warn(self, message: str, node: Optional[Node] = None) -> None:
        self._log.verbose("validation_warning", message=message, location=_where(node))

    def info(self, message: str, node: Optional[Node] = None) -> None:
        self._log.debug("validation_info", message=message, location=_where(node))

    def has_failed(self) -> bool:
        return self._failed

    def error_list(self) -> list[Diagnostic]:
        """Recorded diagnostics in detection order (a copy)."""
        return list(self._errors)

    def messages(self) -> list[str]:
        return [d.message for d in self._errors]

    def __len__(self) -> int:
        return len(self._errors)


class SilentSink(DiagnosticSink):
    """Sink for speculative matching: everything is discarded."""

    speculative = True

    def error(self, message: str, node: Optional[Node] = None) -> None:
        pass

    def warn(self, message: str, node: Optional[Node] = None) -> None:
        pass

    def info(self, message: str, node: Optional[Node] = None) -> None:
        pass


# Shared: SilentSink holds no state
SILENT = SilentSink()


def _where(node: Optional[Node]) -> Optional[str]:
    return node.describe() if node is not None else None
