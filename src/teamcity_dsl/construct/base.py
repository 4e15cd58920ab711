"""The composition tree every configuration kind is built on.

A construct is created with its parent and an immutable props record. If a
builder callable is supplied it runs before the constructor returns, so the
whole subtree exists (and has registered its contributions) by the time the
parent finishes constructing:

    Project(ProjectProps(id="MyPipeline"), lambda p: (
        p.build(BuildProps(id="Compile")),
    ))

Descendants affect ancestor output in two ways only:

* ``register_document(path, doc)`` proposes a whole output document to the
  root; the first proposal for a path wins.
* ``register_fragment(key, callback)`` adds a serialization callback to a
  node; the first callback for a key wins. Keys identify the contributing
  *kind*, and callbacks read the parent's live child collection, so N
  siblings of one kind render one section containing all N.
"""

import functools
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from teamcity_dsl.construct.extensions import ExtensionFactory, extension_registry
from teamcity_dsl.shared.config import SerializationConfig
from teamcity_dsl.shared.errors import ExtensionError, SingletonError
from teamcity_dsl.shared.logging import CorrelationLogger, get_logger
from teamcity_dsl.xmltree import XmlDocument, XmlElement

TProps = TypeVar("TProps")

FragmentCallback = Callable[[XmlElement], Any]
XmlOutput = Union[Dict[str, XmlDocument], XmlDocument, XmlElement]

_logger = get_logger(__name__, component="construct")


class Construct(ABC, Generic[TProps]):
    """Base class of every node in the configuration tree."""

    def __init__(
        self,
        parent: Optional["Construct[Any]"],
        props: TProps,
        builder: Optional[Callable[[Any], Any]] = None,
        config: Optional[SerializationConfig] = None,
    ) -> None:
        """Initialize the construct and run ``builder`` against it.

        Args:
            parent: Owning construct; ``None`` only for a tree root
            props: Immutable configuration record of this kind
            builder: Optional callable invoked with the new construct
            config: Serialization settings, only consulted on a tree root
        """
        self.parent = parent
        self.props = props
        self._config = config
        self._documents: Dict[str, XmlDocument] = {}
        self._fragments: Dict[Hashable, FragmentCallback] = {}
        if builder is not None:
            builder(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(props={self.props!r})"

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        factory = extension_registry.resolve(type(self), name)
        if factory is None:
            raise ExtensionError(
                f"'{type(self).__name__}' object has no attribute or extension '{name}'"
            )
        return functools.partial(factory, self)

    @classmethod
    def attach_extension(cls, name: str, factory: ExtensionFactory) -> None:
        """Make ``factory(node, *args, **kwargs)`` callable as ``node.<name>(...)``."""
        extension_registry.attach(cls, name, factory)

    @classmethod
    def extensions_for(cls) -> List[str]:
        """List extension names attached to this kind and its bases."""
        return extension_registry.names(cls)

    # Tree navigation

    def get_root(self) -> "Construct[Any]":
        """Walk parent links up to the tree root."""
        node: Construct[Any] = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def config(self) -> SerializationConfig:
        """Serialization settings of the tree this construct belongs to."""
        root = self.get_root()
        if root._config is None:
            root._config = SerializationConfig()
        return root._config

    @property
    def logger(self) -> CorrelationLogger:
        return _logger.with_correlation(self.config.correlation_id)

    # Registries

    @property
    def documents(self) -> Mapping[str, XmlDocument]:
        """Read-only view of documents proposed to this (root) construct."""
        return MappingProxyType(self._documents)

    def register_document(self, path: str, document: XmlDocument) -> bool:
        """Propose ``document`` at ``path`` to the tree root.

        Returns:
            True if the document was stored, False if ``path`` was taken.
        """
        root = self.get_root()
        if path in root._documents:
            self.logger.debug("Duplicate document dropped", extra={"path": path})
            return False

        root._documents[path] = document
        self.logger.debug("Document registered", extra={"path": path})
        return True

    def register_fragment(self, key: Hashable, callback: FragmentCallback) -> bool:
        """Add a serialization callback to this construct, once per ``key``.

        Returns:
            True if the callback was stored, False if ``key`` was taken.
        """
        if key in self._fragments:
            return False

        self._fragments[key] = callback
        self.logger.debug(
            "Fragment registered",
            extra={"owner": type(self).__name__, "key": getattr(key, "__name__", repr(key))},
        )
        return True

    def apply_fragments(self, element: XmlElement) -> None:
        """Run every registered callback against ``element`` in insertion order."""
        for callback in list(self._fragments.values()):
            callback(element)

    # Child collections

    def add_child(self, collection: str, child: Any) -> None:
        """Append ``child`` to the named ordered collection, creating it if absent."""
        items = self.__dict__.get(collection)
        if not isinstance(items, list):
            items = []
            setattr(self, collection, items)
        items.append(child)

    def children(self, collection: str) -> Tuple[Any, ...]:
        """Snapshot of a named collection; empty before any child registers."""
        return tuple(self.__dict__.get(collection) or ())

    @staticmethod
    def push(parent: "Construct[Any]", collection: str, value: Any) -> None:
        """Append ``value`` to ``parent``'s named collection."""
        parent.add_child(collection, value)

    def claim_singleton(self, attribute: str, child: "Construct[Any]") -> None:
        """Store ``child`` as this construct's only ``attribute``.

        Raises:
            SingletonError: if ``attribute`` is already set.
        """
        if self.__dict__.get(attribute) is not None:
            parent_id = getattr(self.props, "id", None)
            raise SingletonError(type(child).__name__, parent_id)
        setattr(self, attribute, child)

    @abstractmethod
    def to_xml(self) -> XmlOutput:
        """Serialize this construct into XML."""
