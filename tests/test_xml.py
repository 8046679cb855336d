"""
Reader and writer tests.

Run with: pytest tests/test_xml.py -v
"""

import pytest

from wixconvert_core.xml import (
    XMLNS_ATTRIBUTE,
    CData,
    Comment,
    Element,
    FailureKind,
    ProcessingInstruction,
    QName,
    Text,
    declaration_name,
    find_elements_by_local_name,
    get_element_path,
    is_namespace_declaration,
    load_document,
    parse_document,
    save_document,
    serialize_document,
)

V3 = "http://schemas.microsoft.com/wix/2006/wi"
UTIL3 = "http://schemas.microsoft.com/wix/UtilExtension"


def parse(xml):
    result = parse_document(xml, source="test.wxs")
    assert result.ok, result.detail
    return result.document


class TestReader:
    """Tests for parse_document and load_document."""

    def test_declaration_is_read(self):
        """Version and encoding come from the XML declaration."""
        doc = parse('<?xml version="1.0" encoding="utf-8"?>\n<Wix />')
        assert doc.declaration.version == "1.0"
        assert doc.declaration.encoding == "utf-8"

    def test_missing_declaration(self):
        """A document without a declaration has none."""
        assert parse("<Wix />").declaration is None

    def test_prolog_and_epilog_whitespace_kept(self):
        """Whitespace around the root element is kept as text nodes."""
        doc = parse('<?xml version="1.0"?>\n<Wix />\n')
        assert isinstance(doc.children[0], Text)
        assert doc.children[0].value == "\n"
        assert isinstance(doc.children[1], Element)
        assert isinstance(doc.children[2], Text)

    def test_names_are_resolved(self):
        """Element and attribute prefixes resolve to namespaces."""
        doc = parse(f'<Wix xmlns="{V3}" xmlns:util="{UTIL3}"><util:User util:Id="u" Name="n" /></Wix>')
        root = doc.root
        assert root.name == QName(V3, "Wix")
        user = root.elements()[0]
        assert user.name == QName(UTIL3, "User")
        assert user.prefix == "util"
        assert user.get(QName(UTIL3, "Id")) == "u"
        assert user.get("Name") == "n"

    def test_namespace_declarations_are_attributes(self):
        """xmlns declarations stay in the attribute list, in order."""
        doc = parse(f'<Wix A="1" xmlns="{V3}" xmlns:util="{UTIL3}" />')
        names = list(doc.root.attributes)
        assert names == [QName("", "A"), XMLNS_ATTRIBUTE, declaration_name("util")]
        assert all(is_namespace_declaration(n) for n in names[1:])

    def test_line_numbers(self):
        """Elements carry the line of their start tag."""
        doc = parse("<Wix>\n  <Fragment>\n    <Property Id='A' />\n  </Fragment>\n</Wix>")
        prop = find_elements_by_local_name(doc, "Property")[0]
        assert doc.root.line == 1
        assert prop.line == 3

    def test_cdata_is_separate_node(self):
        """CDATA sections are not merged into surrounding text."""
        doc = parse("<Wix>\n  <![CDATA[a < b]]>\n</Wix>")
        kinds = [type(child) for child in doc.root.children]
        assert kinds == [Text, CData, Text]
        assert doc.root.children[1].value == "a < b"

    def test_comments_and_processing_instructions(self):
        """Comments and preprocessor instructions are kept."""
        doc = parse('<Wix><!-- note --><?define X = "1"?></Wix>')
        comment, pi = doc.root.children
        assert isinstance(comment, Comment)
        assert comment.value == " note "
        assert isinstance(pi, ProcessingInstruction)
        assert pi.target == "define"
        assert pi.data.strip() == 'X = "1"'

    def test_malformed_input(self):
        """Broken markup is returned as a failure, not raised."""
        result = parse_document("<Wix>\n<Fragment></Wix>")
        assert not result.ok
        assert result.failure == FailureKind.MALFORMED_INPUT
        assert result.line == 2

    def test_unbound_prefix_is_malformed(self):
        """Prefixes must be declared."""
        result = parse_document("<Wix><util:User /></Wix>")
        assert result.failure == FailureKind.MALFORMED_INPUT
        assert "util" in result.detail

    def test_missing_file(self, tmp_path):
        """A missing file is a load failure."""
        result = load_document(tmp_path / "missing.wxs")
        assert result.failure == FailureKind.NOT_FOUND

    def test_load_file(self, tmp_path):
        """Files are parsed with their path as source."""
        path = tmp_path / "a.wxs"
        path.write_text("<Wix />", encoding="utf-8")
        result = load_document(path)
        assert result.ok
        assert result.document.source == str(path)


class TestWriter:
    """Tests for serialize_document and save_document."""

    @pytest.mark.parametrize("xml", [
        '<?xml version="1.0" encoding="utf-8"?>\n<Wix xmlns="http://wixtoolset.org/schemas/v4/wxs">\n'
        '    <Fragment>\n        <Property Id="A" Value="1" />\n    </Fragment>\n</Wix>\n',
        '<Wix><?define X = "1"?><!-- c --><Property Id="P"><![CDATA[x]]></Property></Wix>',
        f'<Wix xmlns="{V3}" xmlns:util="{UTIL3}"><util:User Id="u" /></Wix>',
    ])
    def test_round_trip(self, xml):
        """Untouched documents serialize back to the same text."""
        assert serialize_document(parse(xml)) == xml

    def test_attribute_escaping(self):
        """Quotes, ampersands and angle brackets are escaped."""
        root = Element("Wix")
        root.set("Value", 'a "b" & <c>')
        doc = parse("<Wix />")
        doc.remove(doc.root)
        doc.append(root)
        assert serialize_document(doc) == '<Wix Value="a &quot;b&quot; &amp; &lt;c>" />'

    def test_text_escaping(self):
        """Markup characters in text are escaped."""
        doc = parse("<Wix>a &amp; b &lt; c</Wix>")
        assert serialize_document(doc) == "<Wix>a &amp; b &lt; c</Wix>"

    def test_duplicate_declarations_are_omitted(self):
        """A declaration repeating the in-scope binding is not written."""
        doc = parse(f'<Wix xmlns="{V3}"><Fragment xmlns="{V3}" /></Wix>')
        assert serialize_document(doc) == f'<Wix xmlns="{V3}"><Fragment /></Wix>'

    def test_prefix_generated_for_unbound_namespace(self):
        """An element moved into an undeclared namespace gets a declaration."""
        doc = parse("<Wix><Fragment /></Wix>")
        doc.root.elements()[0].name = QName("urn:x", "Fragment")
        assert serialize_document(doc) == '<Wix><p1:Fragment xmlns:p1="urn:x" /></Wix>'

    def test_save_document(self, tmp_path):
        """Saving writes the serialized document."""
        path = tmp_path / "out.wxs"
        doc = parse('<?xml version="1.0" encoding="utf-8"?>\n<Wix />')
        result = save_document(doc, path)
        assert result.saved
        assert path.read_text(encoding="utf-8") == '<?xml version="1.0" encoding="utf-8"?>\n<Wix />'

    def test_save_to_missing_directory_fails(self, tmp_path):
        """I/O errors are returned as a failed SaveResult."""
        result = save_document(parse("<Wix />"), tmp_path / "nope" / "out.wxs")
        assert not result.saved
        assert result.failure == FailureKind.IO_ERROR


class TestUtils:
    """Tests for tree helpers."""

    def test_element_path(self):
        """Paths count same-named siblings."""
        doc = parse("<Wix><Fragment /><Fragment><Property /></Fragment></Wix>")
        prop = find_elements_by_local_name(doc, "Property")[0]
        assert get_element_path(prop) == "/Wix/Fragment[2]/Property[1]"
