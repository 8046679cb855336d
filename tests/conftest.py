"""
Shared fixtures for converter tests.

Run with: pytest tests -v
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from wixconvert_core.fixing import Wix3Converter
from wixconvert_core.reporting import MessageCollector
from wixconvert_core.xml import parse_document, serialize_document

DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'
WIX_OPEN = '<Wix xmlns="http://wixtoolset.org/schemas/v4/wxs">'


def wix(body: str) -> str:
    """Wrap element markup (already indented for depth 1) in a v4 document."""
    return f"{DECLARATION}{WIX_OPEN}\n{body}\n</Wix>"


@pytest.fixture
def collector():
    """Create an in-memory message sink."""
    return MessageCollector()


@pytest.fixture
def convert(collector):
    """
    Convert XML text and return (error_count, output_text).

    Keyword arguments are passed to Wix3Converter.
    """
    def _convert(xml: str, **kwargs):
        converter = Wix3Converter(collector, **kwargs)
        loaded = parse_document(xml, source="test.wxs")
        assert loaded.ok, loaded.detail
        errors = converter.convert_document(loaded.document)
        return errors, serialize_document(loaded.document)

    return _convert
