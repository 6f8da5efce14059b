"""
Shared fixtures: HTML document builders and validation helpers.
"""

from pathlib import Path
from typing import Optional

import pytest

from sdv.config.loader import clear_cache
from sdv.config.models import DEFAULT_ITEMTYPE, ValidatorSettings
from sdv.core.diagnostics import DiagnosticSink
from sdv.core.logging import configure_logging
from sdv.tree.loader import parse_html
from sdv.validation.metadata import validate_head

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "html"

# Smallest metadata set that validates
DEFAULT_META = {
    "pubType": "AG",
    "pubState": "draft",
}

SCOPE = '<section id="sec-scope"><p>This document specifies the thing.</p></section>'

HEAD_ATTRIBUTES = f'itemscope="itemscope" itemtype="{DEFAULT_ITEMTYPE}"'


def render_html(
    body: str = SCOPE,
    meta: Optional[dict] = None,
    title: Optional[str] = "Test Document",
    head_attributes: str = HEAD_ATTRIBUTES,
    extra_head: str = "",
) -> str:
    """
    Build an HTML document.

    ``meta`` entries override DEFAULT_META; a value of None drops the field.
    """
    fields = dict(DEFAULT_META)
    fields.update(meta or {})

    lines = ["<!DOCTYPE html>", "<html>", f"<head {head_attributes}>"]
    if title is not None:
        lines.append(f"<title>{title}</title>")
    for name, value in fields.items():
        if value is not None:
            lines.append(f'<meta itemprop="{name}" content="{value}">')
    if extra_head:
        lines.append(extra_head)
    lines += ["</head>", f"<body>{body}</body>", "</html>"]
    return "\n".join(lines)


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep test output free of log lines."""
    configure_logging(level="silent", force=True)
    yield


@pytest.fixture(autouse=True)
def fresh_profiles(monkeypatch):
    """Every test starts from the packaged profiles."""
    monkeypatch.delenv("SDV_PROFILE", raising=False)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def sink():
    return DiagnosticSink()


@pytest.fixture
def settings():
    return ValidatorSettings()


@pytest.fixture
def legacy_settings():
    return ValidatorSettings(table_min_tbody=0)


@pytest.fixture
def make_html():
    return render_html


@pytest.fixture
def make_document():
    """Build a parsed Document from the same arguments as render_html."""
    def _make(**kwargs):
        return parse_html(render_html(**kwargs), source="test.html")
    return _make


@pytest.fixture
def head_of(make_document):
    """Build a document and return its head node."""
    def _head(**kwargs):
        return make_document(**kwargs).head
    return _head


@pytest.fixture
def check_head(head_of, sink):
    """Validate the head of a built document; returns (metadata, sink)."""
    def _check(meta=None, **kwargs):
        head = head_of(meta=meta, **kwargs)
        metadata = validate_head(head, sink)
        return metadata, sink
    return _check


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def write_html(tmp_path):
    """Write a built document to a temporary file and return its path."""
    def _write(name="doc.html", **kwargs):
        path = tmp_path / name
        path.write_text(render_html(**kwargs))
        return path
    return _write
