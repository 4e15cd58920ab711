"""Tests for the composition tree.

Uses a reduced schema: a ``Root`` document holding ``Item`` children that
contribute a single ``<wrap>`` section.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import pytest

from teamcity_dsl.construct import Construct
from teamcity_dsl.shared.config import SerializationConfig
from teamcity_dsl.shared.errors import ExtensionError, SingletonError
from teamcity_dsl.xmltree import XmlDocument, XmlElement


@dataclass(frozen=True)
class ItemProps:
    id: str


@dataclass(frozen=True)
class RootProps:
    id: str = "root"


class Root(Construct[RootProps]):
    items: Sequence["Item"] = ()
    settings: Optional["Settings"] = None

    def __init__(
        self,
        builder: Optional[Callable[["Root"], Any]] = None,
        config: Optional[SerializationConfig] = None,
    ) -> None:
        super().__init__(None, RootProps(), builder, config)

    def to_xml(self) -> XmlDocument:
        return XmlDocument(lambda x: x.node("root", self.apply_fragments))


class Item(Construct[ItemProps]):
    def __init__(self, parent: Root, props: ItemProps) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "items", self)

        def render_items(x: XmlElement) -> None:
            wrap = x.node("wrap")
            for item in parent.items:
                wrap.node(item.to_xml())

        parent.register_fragment(Item, render_items)

    def to_xml(self) -> XmlElement:
        return XmlElement("item", {"id": self.props.id})


class Settings(Construct[None]):
    def __init__(self, parent: Root) -> None:
        super().__init__(parent, None)
        parent.claim_singleton("settings", self)

    def to_xml(self) -> XmlElement:
        return XmlElement("settings")


class SubRoot(Root):
    pass


Root.attach_extension("item", Item)


class TestConstructTree:
    """Test construction, navigation and configuration lookup."""

    def test_builder_runs_synchronously(self) -> None:
        """Test that the builder has run when the constructor returns."""
        seen = []
        root = Root(lambda r: seen.append(r))

        assert seen == [root]

    def test_get_root(self) -> None:
        """Test walking up to the tree root."""
        root = Root()
        item = Item(root, ItemProps("T1"))

        assert item.parent is root
        assert item.get_root() is root
        assert root.get_root() is root

    def test_config_comes_from_root(self) -> None:
        """Test that descendants share the root's configuration."""
        config = SerializationConfig(output_directory="out")
        root = Root(config=config)
        item = Item(root, ItemProps("T1"))

        assert item.config is config

    def test_default_config(self) -> None:
        """Test the default configuration of a tree without one."""
        root = Root()

        assert root.config == SerializationConfig()
        assert root.config is root.config

    def test_repr_includes_props(self) -> None:
        """Test the debugging representation."""
        assert repr(Item(Root(), ItemProps("T1"))) == "Item(props=ItemProps(id='T1'))"


class TestCollections:
    """Test typed child collections."""

    def test_collection_is_empty_before_first_child(self) -> None:
        """Test reading a collection before any child registers."""
        root = Root()

        assert root.items == ()
        assert root.children("items") == ()
        assert list(root.items) == []

    def test_push_appends_in_order(self) -> None:
        """Test ordered appends through Construct.push."""
        root = Root()
        first = Item(root, ItemProps("T1"))
        second = Item(root, ItemProps("T2"))

        assert list(root.items) == [first, second]
        assert root.children("items") == (first, second)

    def test_collections_are_per_instance(self) -> None:
        """Test that collections are not shared between instances."""
        one = Root()
        Item(one, ItemProps("T1"))

        assert Root().items == ()


class TestDocumentRegistry:
    """Test document proposals to the root."""

    def test_first_proposal_wins(self) -> None:
        """Test that a second document at one path is dropped."""
        root = Root()
        item = Item(root, ItemProps("T1"))
        first = XmlDocument(lambda x: x.node("first"))
        second = XmlDocument(lambda x: x.node("second"))

        assert item.register_document("a.xml", first) is True
        assert item.register_document("a.xml", second) is False
        assert root.documents["a.xml"] is first

    def test_documents_view_is_read_only(self) -> None:
        """Test that the registry cannot be modified through the view."""
        root = Root()

        with pytest.raises(TypeError):
            root.documents["a.xml"] = XmlDocument()

    def test_duplicate_is_logged(self, caplog) -> None:
        """Test the debug record for a dropped duplicate."""
        root = Root()
        root.register_document("a.xml", XmlDocument())

        with caplog.at_level(logging.DEBUG, logger="teamcity_dsl.construct.base"):
            root.register_document("a.xml", XmlDocument())

        record = caplog.records[-1]
        assert record.message == "Duplicate document dropped"
        assert record.path == "a.xml"
        assert record.component == "construct"


class TestFragmentRegistry:
    """Test serialization callbacks contributed by children."""

    def test_same_kind_siblings_share_one_section(self) -> None:
        """Test that N siblings render one wrapper with N children."""
        root = Root(lambda r: (
            r.item(ItemProps("T1")),
            r.item(ItemProps("T2")),
            r.item(ItemProps("T3")),
        ))

        wrap = root.to_xml().root.find_children("wrap")

        assert len(wrap) == 1
        assert [c.get_attribute("id") for c in wrap[0].children] == ["T1", "T2", "T3"]

    def test_first_callback_for_key_wins(self) -> None:
        """Test that register_fragment keeps the first callback."""
        root = Root()

        assert root.register_fragment("k", lambda x: x.node("first")) is True
        assert root.register_fragment("k", lambda x: x.node("second")) is False
        assert root.to_xml().to_string() == "<root><first/></root>"

    def test_callbacks_run_in_insertion_order(self) -> None:
        """Test fragment ordering."""
        root = Root()
        root.register_fragment("b", lambda x: x.node("b"))
        root.register_fragment("a", lambda x: x.node("a"))

        assert root.to_xml().to_string() == "<root><b/><a/></root>"

    def test_end_to_end_reduced_schema(self) -> None:
        """Test the full construct to text pipeline."""
        root = Root(lambda r: (
            r.item(ItemProps("T1")),
            r.item(ItemProps("T2")),
        ))

        assert root.to_xml().to_string() == '<root><wrap><item id="T1"/><item id="T2"/></wrap></root>'


class TestSingletons:
    """Test per-parent singleton children."""

    def test_second_instance_raises(self) -> None:
        """Test that a singleton can only be claimed once."""
        root = Root()
        settings = Settings(root)

        assert root.settings is settings
        with pytest.raises(SingletonError, match="Settings is a singleton"):
            Settings(root)


class TestExtensions:
    """Test factory lookup through attached extensions."""

    def test_extension_call_creates_child(self) -> None:
        """Test calling an attached factory."""
        root = Root()
        item = root.item(ItemProps("T1"))

        assert isinstance(item, Item)
        assert item.parent is root

    def test_extensions_are_inherited(self) -> None:
        """Test lookup through the class hierarchy."""
        root = SubRoot()

        assert isinstance(root.item(ItemProps("T1")), Item)
        assert "item" in SubRoot.extensions_for()

    def test_unknown_extension_raises(self) -> None:
        """Test that unknown names raise an AttributeError subclass."""
        root = Root()

        with pytest.raises(ExtensionError, match="no attribute or extension 'nothing'"):
            root.nothing()
        assert not hasattr(root, "nothing")

    def test_private_names_bypass_registry(self) -> None:
        """Test that private lookups fail with a plain AttributeError."""
        with pytest.raises(AttributeError) as exc_info:
            getattr(Root(), "_missing")

        assert not isinstance(exc_info.value, ExtensionError)
