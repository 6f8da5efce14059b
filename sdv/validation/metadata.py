"""
Metadata Validator — Publication identity fields from the document head.

Each field is a ``<meta itemprop="FIELD" content="VALUE">`` element under
``<head itemscope itemtype="...">``.

Two severities:
- Fatal: prerequisites without which later checks are meaningless. Raised
  as FatalValidationError; nothing further is checked.
- Recoverable: logged to the sink, the offending field is nulled and
  validation continues.
"""

import re
from typing import Optional

from sdv.config.models import ValidatorSettings
from sdv.core.diagnostics import DiagnosticSink
from sdv.core.errors import FatalValidationError
from sdv.core.logging import LogChannel, get_logger
from sdv.ir.enums import PUBLIC_STAGES, PubStage, PubState, PubType
from sdv.ir.schema import DocumentMetadata
from sdv.tree.node import Node, title_of

log = get_logger(LogChannel.METADATA)

NUMBER_PATTERN = re.compile(r"^\d+$")
VERSION_PATTERN = re.compile(r"^\d+(-\d+)?$")
DATE_PATTERN = re.compile(
    r"^\d{4}(-\d{2}(-\d{2}(T\d{2}:\d{2}(:\d{2})?(Z|[+-]\d{2}:\d{2})?)?)?)?$"
)

# Values accepted for head@itemscope (boolean attribute)
ITEMSCOPE_VALUES = frozenset({"", "itemscope"})


def _parse_enum(enum_cls, value: Optional[str]):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


class HeadReader:
    """Looks up meta fields in a head element."""

    def __init__(self, head: Node, sink: DiagnosticSink):
        self.head = head
        self.sink = sink
        self._metas: dict[str, list[Node]] = {}
        for node in head.iter_descendants():
            name = node.get("itemprop")
            if node.tag == "meta" and name:
                self._metas.setdefault(name, []).append(node)

    def node(self, name: str) -> Optional[Node]:
        nodes = self._metas.get(name)
        return nodes[0] if nodes else None

    def read(self, name: str) -> Optional[str]:
        """Content of the field, None when absent or blank."""
        nodes = self._metas.get(name, [])
        if not nodes:
            return None
        if len(nodes) > 1:
            self.sink.error(f"Multiple {name} elements", nodes[1])
        content = (nodes[0].get("content") or "").strip()
        return content or None

    def read_matching(self, name: str, pattern: re.Pattern) -> Optional[str]:
        """Like read(), but a value not matching pattern is logged and nulled."""
        value = self.read(name)
        if value is not None and not pattern.match(value):
            self.sink.error(f"{name} invalid", self.node(name))
            return None
        return value


def check_sentinel(head: Node, settings: ValidatorSettings, sink: DiagnosticSink) -> None:
    """head@itemscope and head@itemtype mark the head as document metadata."""
    if head.get("itemscope") not in ITEMSCOPE_VALUES:
        sink.error("head@itemscope is invalid", head)
    if head.get("itemtype") != settings.itemtype:
        sink.error("head@itemtype is invalid", head)


def validate_head(
    head: Node,
    sink: DiagnosticSink,
    title: Optional[str] = None,
    settings: Optional[ValidatorSettings] = None,
) -> DocumentMetadata:
    """
    Validate head metadata and build the DocumentMetadata record.

    Args:
        head: The <head> element
        sink: Receives recoverable diagnostics
        title: Document title; read from head/title when not given
        settings: Validator settings (default profile values when None)

    Returns:
        Validated, immutable DocumentMetadata

    Raises:
        FatalValidationError: On the first fatal condition
    """
    settings = settings or ValidatorSettings()
    reader = HeadReader(head, sink)

    check_sentinel(head, settings, sink)

    # Fatal prerequisites
    pub_title = title if title is not None else title_of(head)
    if not pub_title:
        raise FatalValidationError("Document title is missing", head)

    pub_type = _parse_enum(PubType, reader.read("pubType"))
    if pub_type is None:
        raise FatalValidationError("pubType invalid", reader.node("pubType") or head)

    pub_state = _parse_enum(PubState, reader.read("pubState"))
    if pub_state is None:
        raise FatalValidationError("pubState invalid", reader.node("pubState") or head)

    # Field formats
    pub_number = reader.read_matching("pubNumber", NUMBER_PATTERN)
    pub_part = reader.read_matching("pubPart", NUMBER_PATTERN)
    pub_version = reader.read_matching("pubVersion", VERSION_PATTERN)
    pub_date_time = reader.read_matching("pubDateTime", DATE_PATTERN)
    effective_date_time = reader.read_matching("effectiveDateTime", DATE_PATTERN)
    pub_suite_title = reader.read("pubSuiteTitle")
    pub_tc = reader.read("pubTC")
    pub_revision_of = reader.read("pubRevisionOf")

    pub_confidential = None
    confidential_value = reader.read("pubConfidential")
    if confidential_value is not None:
        if confidential_value.lower() in ("true", "false"):
            pub_confidential = confidential_value.lower() == "true"
        else:
            sink.error("pubConfidential invalid", reader.node("pubConfidential"))

    stage_value = reader.read("pubStage")
    pub_stage = _parse_enum(PubStage, stage_value)
    if stage_value is not None and pub_stage is None and not pub_type.is_engineering_document:
        sink.error("pubStage invalid", reader.node("pubStage"))

    # Cross-field rules
    if pub_part is not None:
        if pub_number is None:
            sink.error("pubNumber must be specified if pubPart is specified", reader.node("pubPart"))
            pub_part = None
        elif pub_suite_title is None:
            sink.error("pubSuiteTitle must be specified if pubPart is specified", reader.node("pubPart"))
            pub_part = None

    if pub_version is not None and pub_number is None:
        sink.error("pubNumber must be specified if pubVersion is specified", reader.node("pubVersion"))
        pub_version = None

    published = pub_state == PubState.PUB

    if published and pub_number is None and pub_type != PubType.OM:
        sink.warn("pubNumber should be specified for a published document", head)

    # Fatal rules that depend on the state and type
    if published and pub_date_time is None:
        raise FatalValidationError("pubDateTime must be present for pub state", head)

    if pub_type == PubType.OM and published and effective_date_time is None:
        raise FatalValidationError("Published OM requires effectiveDateTime", head)

    if pub_type.is_engineering_document:
        if pub_stage is None:
            raise FatalValidationError("pubStage invalid", reader.node("pubStage") or head)
        if pub_tc is None:
            raise FatalValidationError("pubTC invalid", reader.node("pubTC") or head)
        if published and pub_version is None:
            raise FatalValidationError("pubVersion must be present for a published engineering document", head)

    if pub_confidential is False and pub_stage not in PUBLIC_STAGES:
        raise FatalValidationError(
            "pubConfidential can be false only at the CD or PUB stage",
            reader.node("pubConfidential"),
        )

    metadata = DocumentMetadata(
        pub_title=pub_title,
        pub_type=pub_type,
        pub_state=pub_state,
        pub_stage=pub_stage,
        pub_number=pub_number,
        pub_part=pub_part,
        pub_version=pub_version,
        pub_suite_title=pub_suite_title,
        pub_tc=pub_tc,
        pub_confidential=pub_confidential,
        pub_date_time=pub_date_time,
        effective_date_time=effective_date_time,
        pub_revision_of=pub_revision_of,
    )

    log.verbose(
        "metadata_validated",
        pub_type=pub_type.value,
        pub_state=pub_state.value,
        designation=metadata.designation,
    )
    return metadata
