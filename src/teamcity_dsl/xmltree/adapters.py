"""Conversion of XmlDocument trees to lxml.

Useful for inspecting generated configuration with XPath or validating it
against an XSD; the conversion is one-way.
"""

from typing import Dict, Optional, Tuple, Union

from lxml import etree

from teamcity_dsl.shared.errors import XmlError
from teamcity_dsl.xmltree.document import XmlDocument, XmlElement

_XMLNS_PREFIX = "xmlns:"


def _split_namespaces(
    element: XmlElement, inherited: Dict[str, str]
) -> Tuple[Dict[str, str], Dict[str, str], Dict[str, str]]:
    """Separate xmlns declarations from ordinary attributes."""
    declared: Dict[str, str] = {}
    attributes: Dict[str, str] = {}
    for key, value in (element.attributes or {}).items():
        if key.startswith(_XMLNS_PREFIX):
            declared[key[len(_XMLNS_PREFIX):]] = value
        else:
            attributes[key] = value
    scope = dict(inherited)
    scope.update(declared)
    return declared, attributes, scope


def _qualify(name: str, scope: Dict[str, str]) -> str:
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    if prefix not in scope:
        raise XmlError(f"Undeclared namespace prefix '{prefix}' in '{name}'")
    return f"{{{scope[prefix]}}}{local}"


def _append_text(target: etree._Element, text: str, as_tail: bool) -> None:
    current = target.tail if as_tail else target.text
    value = text if current is None else current + text
    if as_tail:
        target.tail = value
    else:
        target.text = value


def _convert(
    element: XmlElement,
    scope: Dict[str, str],
    parent: Optional[etree._Element] = None,
) -> etree._Element:
    declared, attributes, scope = _split_namespaces(element, scope)
    tag = _qualify(element.name, scope)
    if parent is None:
        converted = etree.Element(tag, nsmap=declared or None)
    else:
        converted = etree.SubElement(parent, tag, nsmap=declared or None)

    for key, value in attributes.items():
        converted.set(_qualify(key, scope), value)

    last: Optional[etree._Element] = None
    for child in element.children:
        if child.is_cdata:
            text = child.content or ""
            if last is None and converted.text is None:
                converted.text = etree.CDATA(text)
            else:
                _append_text(last if last is not None else converted, text, last is not None)
        elif child.is_comment:
            last = etree.Comment(child.content or "")
            converted.append(last)
        else:
            last = _convert(child, scope, converted)

    if element.content is not None:
        _append_text(last if last is not None else converted, element.content, last is not None)

    return converted


def to_lxml(node: Union[XmlDocument, XmlElement]) -> Optional[etree._Element]:
    """Convert a document (or a single element) into an ``lxml`` element.

    Returns ``None`` for an empty document.
    """
    if isinstance(node, XmlDocument):
        if node.root is None:
            return None
        node = node.root
    return _convert(node, {})
