"""
Unit tests for the diagnostic sink.
"""

from sdv.core.diagnostics import SILENT, Diagnostic, DiagnosticSink, SilentSink
from sdv.core.errors import FatalValidationError
from sdv.tree.node import element


class TestDiagnosticSink:
    """Tests for recording diagnostics."""

    def test_starts_clean(self, sink):
        assert not sink.has_failed()
        assert sink.error_list() == []
        assert len(sink) == 0

    def test_error_records_and_fails(self, sink):
        node = element("section", id="sec-scope")
        sink.error("Something is wrong", node)

        assert sink.has_failed()
        assert sink.error_list() == [Diagnostic("Something is wrong", node)]

    def test_detection_order(self, sink):
        for message in ("first", "second", "third"):
            sink.error(message)

        assert sink.messages() == ["first", "second", "third"]

    def test_error_list_is_a_copy(self, sink):
        sink.error("recorded")
        sink.error_list().clear()

        assert len(sink) == 1

    def test_warn_and_info_do_not_record(self, sink):
        sink.warn("just a warning", element("head"))
        sink.info("just information")

        assert not sink.has_failed()
        assert len(sink) == 0

    def test_sinks_are_independent(self):
        first, second = DiagnosticSink(), DiagnosticSink()
        first.error("only in first")

        assert second.error_list() == []
        assert not second.has_failed()


class TestDiagnostic:
    """Tests for the diagnostic record."""

    def test_location(self):
        diagnostic = Diagnostic("Missing heading", element("section", id="sec-a"))

        assert diagnostic.location == "section#sec-a"
        assert str(diagnostic) == "Missing heading (section#sec-a)"

    def test_without_node(self):
        diagnostic = Diagnostic("pubNumber invalid")

        assert diagnostic.location is None
        assert str(diagnostic) == "pubNumber invalid"


class TestSilentSink:
    """Tests for the speculative sink."""

    def test_is_speculative(self):
        assert SILENT.speculative
        assert isinstance(SILENT, SilentSink)
        assert not DiagnosticSink.speculative

    def test_discards_everything(self):
        sink = SilentSink()
        sink.error("discarded")
        sink.warn("discarded")
        sink.info("discarded")

        assert not sink.has_failed()
        assert sink.error_list() == []


class TestFatalValidationError:
    """Tests for the fatal tier."""

    def test_carries_message_and_node(self):
        node = element("meta")
        error = FatalValidationError("pubType invalid", node)

        assert str(error) == "pubType invalid"
        assert error.message == "pubType invalid"
        assert error.node is node
