"""
Unit tests for the table matcher.
"""

from sdv.config.models import ValidatorSettings
from sdv.core.diagnostics import SILENT
from sdv.tree.node import element
from sdv.validation.tables import MISSING_CAPTION, MISSING_TBODY, TableMatcher


def table(*tags):
    return element("table", *(element(t) for t in tags))


class TestTableOrder:
    """Tests for caption, thead, tbody, tfoot ordering."""

    def test_caption_bodies_footer(self, sink, settings):
        assert TableMatcher(settings)(table("caption", "tbody", "tbody", "tfoot"), sink)
        assert len(sink) == 0

    def test_all_parts(self, sink, settings):
        TableMatcher(settings)(table("caption", "thead", "tbody", "tfoot"), sink)
        assert len(sink) == 0

    def test_missing_caption(self, sink, settings):
        TableMatcher(settings)(table("thead", "tbody"), sink)
        assert sink.messages() == [MISSING_CAPTION]

    def test_missing_caption_still_checks_order(self, sink, settings):
        TableMatcher(settings)(table("thead", "tfoot", "tbody"), sink)

        assert sink.messages() == [
            MISSING_CAPTION,
            MISSING_TBODY,
            "Table contains out of order or unknown children: tbody",
        ]

    def test_missing_tbody(self, sink, settings):
        TableMatcher(settings)(table("caption", "thead"), sink)
        assert sink.messages() == [MISSING_TBODY]

    def test_unknown_child(self, sink, settings):
        TableMatcher(settings)(table("caption", "tbody", "tr"), sink)
        assert sink.messages() == ["Table contains out of order or unknown children: tr"]


class TestLegacyTables:
    """The legacy profile accepts tables without tbody."""

    def test_no_tbody_accepted(self, sink, legacy_settings):
        TableMatcher(legacy_settings)(table("caption", "thead", "tfoot"), sink)
        assert len(sink) == 0

    def test_caption_still_required(self, sink, legacy_settings):
        TableMatcher(legacy_settings)(table("tbody"), sink)
        assert sink.messages() == [MISSING_CAPTION]


class TestClassification:
    """Tests for the matcher as a classifier."""

    def test_only_tables_match(self, sink):
        matcher = TableMatcher(ValidatorSettings())
        assert not matcher(element("div"), sink)

    def test_speculative_match_skips_checks(self):
        matcher = TableMatcher(ValidatorSettings())
        assert matcher(table("tr"), SILENT)
