"""Capability registration for construct kinds.

Leaf modules add factory methods to parent kinds (``project.build(...)``,
``build.vcs_trigger(...)``) by attaching them here at import time instead of
patching the parent class. Lookups walk the kind's MRO so an extension
attached to a base kind is available on every subclass.
"""

from typing import Any, Callable, Dict, List, Optional

from teamcity_dsl.shared.errors import ExtensionError
from teamcity_dsl.shared.logging import get_logger

ExtensionFactory = Callable[..., Any]


class ExtensionRegistry:
    """Maps (construct kind, extension name) to a factory callable."""

    def __init__(self) -> None:
        self._factories: Dict[type, Dict[str, ExtensionFactory]] = {}
        self.logger = get_logger(__name__, component="extension_registry")

    def attach(self, kind: type, name: str, factory: ExtensionFactory) -> None:
        """Attach ``factory`` to ``kind`` under ``name``.

        Re-attaching the same factory is a no-op.

        Raises:
            ExtensionError: if ``name`` is private, shadows a real attribute of
                ``kind`` or is already bound to a different factory.
        """
        if not name.isidentifier() or name.startswith("_"):
            raise ExtensionError(f"Invalid extension name: {name!r}")
        if any(name in vars(klass) for klass in kind.__mro__):
            raise ExtensionError(
                f"Extension '{name}' would shadow an attribute of {kind.__name__}"
            )

        table = self._factories.setdefault(kind, {})
        existing = table.get(name)
        if existing is not None and existing is not factory:
            raise ExtensionError(
                f"Extension '{name}' is already attached to {kind.__name__}"
            )

        table[name] = factory
        self.logger.debug(
            "Extension attached",
            extra={"kind": kind.__name__, "extension": name},
        )

    def resolve(self, kind: type, name: str) -> Optional[ExtensionFactory]:
        """Find the factory for ``name`` on ``kind`` or one of its bases."""
        for klass in kind.__mro__:
            factory = self._factories.get(klass, {}).get(name)
            if factory is not None:
                return factory
        return None

    def names(self, kind: type) -> List[str]:
        """List the extensions available on ``kind``, including inherited ones."""
        found: List[str] = []
        for klass in kind.__mro__:
            for name in self._factories.get(klass, {}):
                if name not in found:
                    found.append(name)
        return found


extension_registry = ExtensionRegistry()
