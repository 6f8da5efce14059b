"""
Tests for head metadata validation.
"""

import pytest

from sdv.config.models import ValidatorSettings
from sdv.core.errors import FatalValidationError
from sdv.ir.enums import PubStage, PubState, PubType
from sdv.validation.metadata import validate_head

PUBLISHED_STANDARD = {
    "pubType": "ST",
    "pubState": "pub",
    "pubStage": "PUB",
    "pubTC": "31FS",
    "pubNumber": "2067",
    "pubPart": "21",
    "pubSuiteTitle": "Interoperable Master Format",
    "pubVersion": "2023",
    "pubDateTime": "2023-05-17",
}


class TestValidMetadata:
    """Tests for documents whose metadata validates."""

    def test_minimal(self, check_head):
        metadata, sink = check_head()

        assert not sink.has_failed()
        assert metadata.pub_title == "Test Document"
        assert metadata.pub_type == PubType.AG
        assert metadata.pub_state == PubState.DRAFT
        assert metadata.pub_number is None

    def test_published_standard(self, check_head):
        metadata, sink = check_head(meta=PUBLISHED_STANDARD)

        assert not sink.has_failed()
        assert metadata.pub_stage == PubStage.PUB
        assert metadata.pub_tc == "31FS"
        assert metadata.designation == "ST 2067-21:2023"
        assert metadata.full_title == "Interoperable Master Format: Test Document"

    def test_optional_fields(self, check_head):
        metadata, sink = check_head(meta={
            "pubRevisionOf": "ST 2067-21:2020",
            "pubConfidential": "TRUE",
            "effectiveDateTime": "2024-01",
        })

        assert not sink.has_failed()
        assert metadata.pub_revision_of == "ST 2067-21:2020"
        assert metadata.pub_confidential is True
        assert metadata.effective_date_time == "2024-01"

    @pytest.mark.parametrize("value", ["2023", "2023-05", "2023-05-17", "2023-05-17T10:30Z", "2023-05-17T10:30:00+02:00"])
    def test_date_formats(self, check_head, value):
        metadata, sink = check_head(meta={"pubDateTime": value})

        assert not sink.has_failed()
        assert metadata.pub_date_time == value

    def test_serializes_with_head_field_names(self, check_head):
        metadata, _ = check_head(meta={"pubNumber": "12"})
        data = metadata.model_dump(mode="json", by_alias=True)

        assert data["pubType"] == "AG"
        assert data["pubNumber"] == "12"
        assert data["pubTitle"] == "Test Document"


class TestFatalConditions:
    """Conditions that abort validation."""

    def test_unknown_pub_type(self, check_head):
        with pytest.raises(FatalValidationError, match="pubType invalid"):
            check_head(meta={"pubType": "XX"})

    def test_missing_pub_type(self, check_head):
        with pytest.raises(FatalValidationError, match="pubType invalid"):
            check_head(meta={"pubType": None})

    def test_missing_title(self, check_head):
        with pytest.raises(FatalValidationError, match="title"):
            check_head(title=None)

    def test_blank_title(self, check_head):
        with pytest.raises(FatalValidationError):
            check_head(title="   ")

    def test_unknown_pub_state(self, check_head):
        with pytest.raises(FatalValidationError, match="pubState invalid"):
            check_head(meta={"pubState": "final"})

    def test_published_without_date(self, check_head):
        with pytest.raises(FatalValidationError, match="pubDateTime must be present for pub state"):
            check_head(meta={"pubState": "pub", "pubNumber": "1"})

    def test_published_om_without_effective_date(self, check_head):
        meta = {"pubType": "OM", "pubState": "pub", "pubDateTime": "2023-01-01"}
        with pytest.raises(FatalValidationError, match="Published OM requires effectiveDateTime"):
            check_head(meta=meta)

    def test_engineering_document_without_stage(self, check_head):
        with pytest.raises(FatalValidationError, match="pubStage invalid"):
            check_head(meta={"pubType": "RP", "pubTC": "35PM"})

    def test_engineering_document_with_unknown_stage(self, check_head):
        with pytest.raises(FatalValidationError, match="pubStage invalid"):
            check_head(meta={"pubType": "EG", "pubTC": "35PM", "pubStage": "XX"})

    def test_engineering_document_without_tc(self, check_head):
        with pytest.raises(FatalValidationError, match="pubTC invalid"):
            check_head(meta={"pubType": "ER", "pubStage": "WD"})

    def test_published_standard_without_version(self, check_head):
        meta = dict(PUBLISHED_STANDARD, pubVersion=None)
        with pytest.raises(FatalValidationError, match="pubVersion"):
            check_head(meta=meta)

    def test_non_confidential_draft_stage(self, check_head):
        meta = {"pubType": "ST", "pubStage": "WD", "pubTC": "31FS", "pubConfidential": "false"}
        with pytest.raises(FatalValidationError, match="pubConfidential"):
            check_head(meta=meta)

    def test_non_confidential_without_stage(self, check_head):
        with pytest.raises(FatalValidationError, match="pubConfidential"):
            check_head(meta={"pubConfidential": "false"})

    def test_non_confidential_public_stage(self, check_head):
        meta = {"pubType": "ST", "pubStage": "CD", "pubTC": "31FS", "pubConfidential": "false"}
        metadata, sink = check_head(meta=meta)

        assert metadata.pub_confidential is False
        assert not sink.has_failed()

    def test_fatal_message_is_not_recorded(self, head_of, sink):
        head = head_of(meta={"pubType": "XX"})

        with pytest.raises(FatalValidationError) as exc_info:
            validate_head(head, sink)

        assert exc_info.value.message == "pubType invalid"
        assert exc_info.value.node is not None
        assert len(sink) == 0


class TestRecoverableConditions:
    """Problems that are logged while validation continues."""

    def test_part_without_number(self, check_head):
        metadata, sink = check_head(meta={"pubPart": "2", "pubSuiteTitle": "Suite"})

        assert sink.messages() == ["pubNumber must be specified if pubPart is specified"]
        assert metadata.pub_part is None

    def test_part_without_suite_title(self, check_head):
        metadata, sink = check_head(meta={"pubNumber": "2067", "pubPart": "2"})

        assert sink.messages() == ["pubSuiteTitle must be specified if pubPart is specified"]
        assert metadata.pub_part is None
        assert metadata.pub_number == "2067"

    def test_version_without_number(self, check_head):
        metadata, sink = check_head(meta={"pubVersion": "2023"})

        assert sink.messages() == ["pubNumber must be specified if pubVersion is specified"]
        assert metadata.pub_version is None

    @pytest.mark.parametrize("field,value", [
        ("pubNumber", "12a"),
        ("pubPart", "one"),
        ("pubVersion", "2023.1"),
        ("pubDateTime", "17/05/2023"),
        ("effectiveDateTime", "2023-5-1"),
    ])
    def test_malformed_field_is_nulled(self, check_head, field, value):
        meta = {field: value}
        if field != "pubNumber":
            meta["pubNumber"] = "1"

        metadata, sink = check_head(meta=meta)

        assert f"{field} invalid" in sink.messages()
        assert metadata.model_dump(by_alias=True)[field] is None

    def test_invalid_confidential_flag(self, check_head):
        metadata, sink = check_head(meta={"pubConfidential": "maybe"})

        assert sink.messages() == ["pubConfidential invalid"]
        assert metadata.pub_confidential is None

    def test_unknown_stage_on_non_engineering_type(self, check_head):
        metadata, sink = check_head(meta={"pubStage": "XX"})

        assert sink.messages() == ["pubStage invalid"]
        assert metadata.pub_stage is None

    def test_duplicate_field_uses_first(self, check_head):
        metadata, sink = check_head(extra_head='<meta itemprop="pubNumber" content="99">', meta={"pubNumber": "12"})

        assert sink.messages() == ["Multiple pubNumber elements"]
        assert metadata.pub_number == "12"

    def test_empty_content_is_absent(self, check_head):
        metadata, sink = check_head(meta={"pubNumber": "  "})

        assert not sink.has_failed()
        assert metadata.pub_number is None

    def test_published_without_number_only_warns(self, check_head):
        metadata, sink = check_head(meta={"pubState": "pub", "pubDateTime": "2023"})

        assert not sink.has_failed()
        assert metadata.is_published

    def test_several_problems_in_one_run(self, check_head):
        _, sink = check_head(meta={
            "pubNumber": "x",
            "pubPart": "2",
            "pubConfidential": "perhaps",
        })

        assert sink.messages() == [
            "pubNumber invalid",
            "pubConfidential invalid",
            "pubNumber must be specified if pubPart is specified",
        ]


class TestHeadSentinel:
    """Tests for head@itemscope and head@itemtype."""

    def test_boolean_itemscope(self, check_head):
        _, sink = check_head(head_attributes='itemscope itemtype="http://smpte.org/standards/documents"')
        assert not sink.has_failed()

    def test_missing_itemscope(self, check_head):
        _, sink = check_head(head_attributes='itemtype="http://smpte.org/standards/documents"')
        assert sink.messages() == ["head@itemscope is invalid"]

    def test_wrong_itemtype(self, check_head):
        _, sink = check_head(head_attributes='itemscope itemtype="http://example.com/documents"')
        assert sink.messages() == ["head@itemtype is invalid"]

    def test_itemtype_from_settings(self, head_of, sink):
        head = head_of(head_attributes='itemscope itemtype="http://example.com/documents"')
        validate_head(head, sink, settings=ValidatorSettings(itemtype="http://example.com/documents"))

        assert not sink.has_failed()

    def test_sentinel_problems_precede_fatal(self, check_head, sink):
        with pytest.raises(FatalValidationError):
            check_head(head_attributes="", meta={"pubType": "XX"})

        assert sink.messages() == ["head@itemscope is invalid", "head@itemtype is invalid"]
