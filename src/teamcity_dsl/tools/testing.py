"""Testing helpers for code built on the TeamCity DSL.

Rebuilds XML trees from their JSON projection so tests can compare a
serialized tree against the text it was produced from.
"""

from typing import Any, Dict, Mapping

from teamcity_dsl.shared.errors import XmlError
from teamcity_dsl.xmltree import XmlDocument, XmlElement


def element_from_json(data: Mapping[str, Any]) -> XmlElement:
    """Rebuild an element from the output of :meth:`XmlElement.to_json`.

    Raises:
        XmlError: if ``data`` has no ``name``.
    """
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise XmlError(f"JSON element without a name: {data!r}")

    element = XmlElement(name)
    attributes = data.get("attributes")
    if attributes is not None:
        element.attributes = dict(attributes)
    element.content = data.get("content")

    for child in data.get("children", []):
        element.node(element_from_json(child))
    return element


def document_from_json(data: Mapping[str, Any]) -> XmlDocument:
    """Rebuild a document from the output of :meth:`XmlDocument.to_json`."""
    document = XmlDocument()
    if data:
        document.node(element_from_json(data))
    return document


def documents_to_json(documents: Mapping[str, XmlDocument]) -> Dict[str, Any]:
    """Project a path -> document mapping into plain JSON data."""
    return {path: document.to_json() for path, document in documents.items()}
