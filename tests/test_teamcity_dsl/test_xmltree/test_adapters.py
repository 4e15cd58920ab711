"""Tests for the lxml adapter."""

import pytest
from lxml import etree

from teamcity_dsl.shared.config import SerializationConfig
from teamcity_dsl.shared.errors import XmlError
from teamcity_dsl.xmltree import XmlDocument, XmlElement, to_lxml

XSI = "http://www.w3.org/2001/XMLSchema-instance"


class TestToLxml:
    """Test conversion of XmlDocument trees into lxml elements."""

    def test_empty_document_converts_to_none(self) -> None:
        """Test the empty document case."""
        assert to_lxml(XmlDocument()) is None

    def test_schema_attributes_are_namespaced(self) -> None:
        """Test xmlns declarations and prefixed attributes."""
        attributes = SerializationConfig().schema_attributes("u-1")
        document = XmlDocument(lambda x: x.node("project", attributes, lambda x: x.node("name", "P")))

        root = to_lxml(document)

        assert root.tag == "project"
        assert root.nsmap["xsi"] == XSI
        assert root.get(f"{{{XSI}}}noNamespaceSchemaLocation") == attributes[
            "xsi:noNamespaceSchemaLocation"
        ]
        assert root.get("uuid") == "u-1"
        assert root.findtext("name") == "P"

    def test_xpath_queries(self) -> None:
        """Test that converted trees support XPath."""
        element = XmlElement("parameters", lambda x: (
            x.node("param", {"name": "a", "value": "1"}),
            x.node("param", {"name": "b", "value": "2"}),
        ))

        root = to_lxml(element)

        assert root.xpath("param[@name='b']/@value") == ["2"]

    def test_comments_and_cdata(self) -> None:
        """Test conversion of reserved nodes."""
        element = XmlElement("a", lambda x: (
            x.node("p", lambda x: x.cdata("x < y")),
            x.comment("note"),
        ))

        root = to_lxml(element)

        assert root.find("p").text == "x < y"
        comment = root[1]
        assert comment.tag is etree.Comment
        assert comment.text == "note"
        assert b"<![CDATA[x < y]]>" in etree.tostring(root)

    def test_content_after_children_becomes_tail(self) -> None:
        """Test mixed content ordering."""
        root = to_lxml(XmlElement("a", "tail", lambda x: x.node("b")))

        assert root.text is None
        assert root.find("b").tail == "tail"

    def test_undeclared_prefix_raises(self) -> None:
        """Test that unknown prefixes are reported."""
        with pytest.raises(XmlError, match="Undeclared namespace prefix"):
            to_lxml(XmlElement("a", {"foo:bar": "1"}))
