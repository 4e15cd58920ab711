"""XML document model for TeamCity configuration files.

This module implements a small DSL for building XML trees:

    doc = XmlDocument(lambda x: x.node("users", lambda x: (
        x.node("user", {"id": "1"}, lambda x: (
            x.node("first-name", "Brad"),
            x.node("last-name", "Jones"),
        )),
    )))

``node()`` is overloaded by argument type: after the element name it accepts
an attribute mapping, a text content string and a builder callable, in the
same combinations the configuration kinds use. Rendering is deliberately
minimal, see :class:`~teamcity_dsl.shared.config.EscapePolicy`.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from teamcity_dsl.shared.config import EscapePolicy, RenderConfig
from teamcity_dsl.shared.errors import DuplicateRootError, NodeArgumentError
from teamcity_dsl.xmltree.formatting import format_xml

# Reserved element names rendered with special syntax instead of a tag
COMMENT_NAME = "--"
CDATA_NAME = "CDATA"

_MAX_NODE_ARGS = 4

ElementBuilder = Callable[["XmlElement"], Any]


@dataclass
class NodeArgs:
    """Normalized arguments of an overloaded ``node()`` call."""

    name: str
    attributes: Optional[Dict[str, str]] = None
    content: Optional[str] = None
    builder: Optional[ElementBuilder] = None


def _check_attribute(key: Any, value: Any) -> None:
    if not isinstance(key, str) or not isinstance(value, str):
        raise NodeArgumentError(
            f"Attribute name and value must be strings, got {key!r}={value!r}"
        )


def parse_node_args(*args: Any) -> NodeArgs:
    """Interpret the positional arguments of ``node()`` by value type.

    Supported shapes after the name: ``content``, ``attributes``,
    ``attributes, content``, ``builder``, ``attributes, builder``,
    ``content, builder`` and ``attributes, content, builder``.

    Raises:
        NodeArgumentError: if no arguments are given, the name is not a
            string, or an argument does not fit any shape.
    """
    if not args:
        raise NodeArgumentError("No args to parse")

    name = args[0]
    if not isinstance(name, str):
        raise NodeArgumentError("an element name must be provided")
    if not name:
        raise NodeArgumentError("element name cannot be empty")
    if len(args) > _MAX_NODE_ARGS:
        raise NodeArgumentError(
            f"node() takes at most {_MAX_NODE_ARGS} arguments ({len(args)} given)"
        )

    result = NodeArgs(name=name)
    rest = list(args[1:])

    if rest and isinstance(rest[0], Mapping):
        attributes = dict(rest.pop(0))
        for key, value in attributes.items():
            _check_attribute(key, value)
        result.attributes = attributes

    if rest and isinstance(rest[0], str):
        result.content = rest.pop(0)

    if rest and callable(rest[0]):
        result.builder = rest.pop(0)

    if rest:
        raise NodeArgumentError(
            f"Unexpected argument for <{name}>: {rest[0]!r}"
        )

    return result


def escape_attribute(value: str, policy: EscapePolicy = EscapePolicy.QUOTES_ONLY) -> str:
    """Escape an attribute value according to ``policy``."""
    if policy is EscapePolicy.FULL:
        value = value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return value.replace('"', "&quot;")


def escape_content(value: str, policy: EscapePolicy = EscapePolicy.QUOTES_ONLY) -> str:
    """Escape text content according to ``policy``; raw under QUOTES_ONLY."""
    if policy is EscapePolicy.FULL:
        return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return value


class XmlElement:
    """A single element (or comment / CDATA node) in an XmlDocument.

    Attributes and content stay ``None`` until set so that the JSON projection
    can omit them. Children render in insertion order, followed by content.
    """

    def __init__(self, *args: Any) -> None:
        node_args = parse_node_args(*args)
        self.name: str = node_args.name
        self.attributes: Optional[Dict[str, str]] = node_args.attributes
        self.content: Optional[str] = node_args.content
        self.parent: Optional[Union["XmlDocument", "XmlElement"]] = None
        self.children: List["XmlElement"] = []
        if node_args.builder is not None:
            node_args.builder(self)

    def __repr__(self) -> str:
        return f"XmlElement(name={self.name!r}, children={len(self.children)})"

    def __str__(self) -> str:
        return self.to_string()

    @property
    def is_comment(self) -> bool:
        """Check if this node renders as an XML comment."""
        return self.name == COMMENT_NAME

    @property
    def is_cdata(self) -> bool:
        """Check if this node renders as a CDATA section."""
        return self.name == CDATA_NAME

    def node(self, *args: Any) -> "XmlElement":
        """Append a child element and return it.

        Accepts a pre-built :class:`XmlElement` (re-parented as is) or the
        overloaded name/attributes/content/builder arguments.
        """
        child = _make_node(args)
        child.parent = self
        self.children.append(child)
        return child

    def attribute(self, key: str, value: str) -> None:
        """Set or overwrite one attribute."""
        _check_attribute(key, value)
        if self.attributes is None:
            self.attributes = {}
        self.attributes[key] = value

    def comment(self, value: str) -> "XmlElement":
        """Add a comment node."""
        return self.node(COMMENT_NAME, value)

    def cdata(self, value: str) -> "XmlElement":
        """Add a CDATA node."""
        return self.node(CDATA_NAME, value)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        if self.attributes is None:
            return default
        return self.attributes.get(name, default)

    def find_child(self, name: str) -> Optional["XmlElement"]:
        """Find first direct child with matching name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List["XmlElement"]:
        """Find all direct children with matching name."""
        return [child for child in self.children if child.name == name]

    def find(self, name: str) -> Optional["XmlElement"]:
        """Find first descendant with matching name, depth first."""
        for element in self.iter():
            if element is not self and element.name == name:
                return element
        return None

    def find_all(self, name: str) -> List["XmlElement"]:
        """Find all descendants with matching name in document order."""
        return [e for e in self.iter() if e is not self and e.name == name]

    def iter(self) -> Iterator["XmlElement"]:
        """Iterate over this element and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter()

    def to_json(self) -> Dict[str, Any]:
        """Convert the element (and its children) into plain data.

        Optional keys are omitted rather than set to ``None``.
        """
        obj: Dict[str, Any] = {
            "name": self.name,
            "children": [child.to_json() for child in self.children],
        }
        if self.attributes is not None:
            obj["attributes"] = dict(self.attributes)
        if self.content is not None:
            obj["content"] = self.content
        return obj

    def to_string(
        self,
        pretty: Optional[bool] = None,
        config: Optional[RenderConfig] = None,
    ) -> str:
        """Render the element (and its children) as XML text.

        Args:
            pretty: Run the formatting pass over the result. Defaults to
                ``config.pretty``.
            config: Escaping and formatting options.
        """
        config = config or RenderConfig()
        if pretty is None:
            pretty = config.pretty

        parts: List[str] = []
        self._render(parts, config.escape_policy)
        xml = "".join(parts)

        if pretty:
            return format_xml(xml, config.formatter)
        return xml

    def _render(self, parts: List[str], policy: EscapePolicy) -> None:
        content = self.content if self.content is not None else ""

        # Comments & CDATA aren't really nodes
        if self.is_comment:
            parts.append(f"<!-- {content} -->")
            return
        if self.is_cdata:
            parts.append(f"<![CDATA[{content}]]>")
            return

        parts.append(f"<{self.name}")
        for key, value in (self.attributes or {}).items():
            parts.append(f' {key}="{escape_attribute(value, policy)}"')

        if not self.children and self.content is None:
            parts.append("/>")
            return

        parts.append(">")
        for child in self.children:
            child._render(parts, policy)
        if self.content is not None:
            parts.append(escape_content(self.content, policy))
        parts.append(f"</{self.name}>")


class XmlDocument:
    """An XML document holding exactly one root element.

    The root is added by the first and only call to :meth:`node`.
    """

    def __init__(self, builder: Optional[Callable[["XmlDocument"], Any]] = None) -> None:
        self.root: Optional[XmlElement] = None
        if builder is not None:
            builder(self)

    def __repr__(self) -> str:
        root = self.root.name if self.root is not None else None
        return f"XmlDocument(root={root!r})"

    def __str__(self) -> str:
        return self.to_string()

    def node(self, *args: Any) -> XmlElement:
        """Add the root node to the document.

        Raises:
            DuplicateRootError: if the document already has a root.
        """
        if self.root is not None:
            raise DuplicateRootError(self.root.name)

        element = _make_node(args)
        element.parent = self
        self.root = element
        return element

    def iter_elements(self) -> Iterator[XmlElement]:
        """Iterate over all elements in document order."""
        if self.root is not None:
            yield from self.root.iter()

    def find(self, name: str) -> Optional[XmlElement]:
        """Find first element with matching name, including the root."""
        return next((e for e in self.iter_elements() if e.name == name), None)

    def find_all(self, name: str) -> List[XmlElement]:
        """Find all elements with matching name, including the root."""
        return [e for e in self.iter_elements() if e.name == name]

    def to_json(self) -> Dict[str, Any]:
        """Convert the document into plain data; ``{}`` when empty."""
        if self.root is None:
            return {}
        return self.root.to_json()

    def to_string(
        self,
        pretty: Optional[bool] = None,
        config: Optional[RenderConfig] = None,
    ) -> str:
        """Render the document as XML text; ``""`` when empty."""
        if self.root is None:
            return ""
        return self.root.to_string(pretty, config)


def _make_node(args: tuple) -> XmlElement:
    if args and isinstance(args[0], XmlElement):
        if len(args) > 1:
            raise NodeArgumentError("A pre-built XmlElement cannot take further arguments")
        return args[0]

    node_args = parse_node_args(*args)
    element = XmlElement(node_args.name)
    element.attributes = node_args.attributes
    element.content = node_args.content
    if node_args.builder is not None:
        node_args.builder(element)
    return element
