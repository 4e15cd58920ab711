"""Common behaviour of VCS roots.

A VCS root defines how TeamCity talks to a version control system. Roots
are created in a project, are visible to every build of that project and
its sub projects, and each serializes to
``<output>/<project>/vcsRoots/<id>.xml``.
"""

import uuid
from abc import abstractmethod
from typing import Any, Callable

from teamcity_dsl.construct import Construct
from teamcity_dsl.project.project import Project
from teamcity_dsl.xmltree import XmlDocument, XmlElement


class BaseVcsRoot(Construct[Any]):
    """Base class of every VCS root kind.

    Props of a subclass must provide ``id`` and may provide ``uuid`` and
    ``name``.
    """

    vcs_type: str = ""

    def __init__(self, parent: Project, props: Any) -> None:
        self.uuid = getattr(props, "uuid", None) or str(uuid.uuid4())
        super().__init__(parent, props)
        Construct.push(parent, "vcs_roots", self)
        self.register_document(
            self.config.path(parent.props.id, "vcsRoots", f"{props.id}.xml"),
            self.to_xml(),
        )

    def _base_to_xml(self, builder: Callable[[XmlElement], Any]) -> XmlDocument:
        # type sits between the schema location and uuid
        attributes = self.config.schema_attributes(self.uuid)
        attributes.pop("uuid")
        attributes["type"] = self.vcs_type
        attributes["uuid"] = self.uuid

        def build_root(x: XmlElement) -> None:
            x.node("name", getattr(self.props, "name", None) or self.props.id)
            builder(x)

        return XmlDocument(lambda doc: doc.node("vcs-root", attributes, build_root))

    @abstractmethod
    def to_xml(self) -> XmlDocument:
        """Serialize the root into its own document."""
