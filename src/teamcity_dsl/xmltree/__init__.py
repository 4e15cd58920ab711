"""XML document model for TeamCity configuration.

Key Components:
    XmlDocument: Single-root document container
    XmlElement: Element with attributes, content, children, comment and CDATA nodes
    XmlFormatter: Pretty-printing pass over rendered XML text
    to_lxml: One-way conversion into lxml elements
"""

from .document import (
    CDATA_NAME,
    COMMENT_NAME,
    NodeArgs,
    XmlDocument,
    XmlElement,
    escape_attribute,
    escape_content,
    parse_node_args,
)
from .formatting import XmlFormatter, format_xml
from .adapters import to_lxml

__all__ = [
    "CDATA_NAME",
    "COMMENT_NAME",
    "NodeArgs",
    "XmlDocument",
    "XmlElement",
    "escape_attribute",
    "escape_content",
    "parse_node_args",
    "XmlFormatter",
    "format_xml",
    "to_lxml",
]
