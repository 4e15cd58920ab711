"""Projects, the root of every pipeline definition.

A project owns build configurations, VCS roots, parameters and sub-projects
and serializes to ``<output>/<id>/project-config.xml`` plus every document
its descendants proposed.
"""

import dataclasses
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence, Union

from teamcity_dsl.construct import Construct
from teamcity_dsl.shared.config import SerializationConfig
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlDocument, XmlElement

if TYPE_CHECKING:
    from teamcity_dsl.build.build import Build
    from teamcity_dsl.cleanup import Cleanup
    from teamcity_dsl.parameter.parameter import Parameter
    from teamcity_dsl.project.extensions import BaseProjectExtension
    from teamcity_dsl.vcs_roots.base import BaseVcsRoot


@dataclass(frozen=True)
class ProjectProps:
    """Configuration of a project.

    Attributes:
        id: Directory name under the output directory and the reference used
            by the rest of the schema (``Foo_Bar`` -> ``.teamcity/Foo_Bar/``)
        name: Human friendly name, defaults to ``id``
        uuid: Internal identifier, generated when omitted
        description: Optional description
        parent_project: Parent project or its id
    """

    id: str
    name: Optional[str] = None
    uuid: Optional[str] = None
    description: Optional[str] = None
    parent_project: Optional[Union["Project", str]] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("Project id cannot be empty")


class Project(Construct[ProjectProps]):
    """Entry point into the DSL.

    ```python
    Project(ProjectProps(id="MyPipeline"), lambda p: (
        p.build(BuildProps(id="Compile")),
    ))
    ```
    """

    builds: Sequence["Build"] = ()
    vcs_roots: Sequence["BaseVcsRoot"] = ()
    sub_projects: Sequence["Project"] = ()
    parameters: Sequence["Parameter"] = ()
    extensions: Sequence["BaseProjectExtension"] = ()
    cleanup_rules: Optional["Cleanup"] = None

    def __init__(
        self,
        props: ProjectProps,
        builder: Optional[Callable[["Project"], Any]] = None,
        config: Optional[SerializationConfig] = None,
    ) -> None:
        self.uuid = props.uuid or str(uuid.uuid4())
        super().__init__(None, props, builder, config)

    @property
    def display_name(self) -> str:
        return self.props.name or self.props.id

    @property
    def parent_id(self) -> Optional[str]:
        parent = self.props.parent_project
        if isinstance(parent, Project):
            return parent.props.id
        return parent

    def sub_project(
        self,
        props: ProjectProps,
        builder: Optional[Callable[["Project"], Any]] = None,
    ) -> "Project":
        """Add a sub project sharing this project's serialization config.

        Sub projects are document roots of their own; their documents are
        merged into this project's output by :meth:`to_xml`.
        """
        child = Project(
            dataclasses.replace(props, parent_project=self),
            builder,
            config=self.config,
        )
        Construct.push(self, "sub_projects", child)
        return child

    def _build_document(self) -> XmlDocument:
        config = self.config

        def build_root(x: XmlElement) -> None:
            x.node("name", self.display_name)

            if self.parent_id is not None:
                x.attribute("parent-id", self.parent_id)

            if self.props.description is not None:
                x.node("description", self.props.description)

            # Allow child constructs to contribute to this document
            self.apply_fragments(x)

        return XmlDocument(
            lambda doc: doc.node("project", config.schema_attributes(self.uuid), build_root)
        )

    def to_xml(self) -> Dict[str, XmlDocument]:
        """Serialize the project tree into output path -> document."""
        documents: Dict[str, XmlDocument] = dict(self.documents)

        for sub_project in self.sub_projects:
            documents.update(sub_project.to_xml())

        documents[self.config.path(self.props.id, "project-config.xml")] = (
            self._build_document()
        )

        self.logger.info(
            "Project serialized",
            extra={"project_id": self.props.id, "document_count": len(documents)},
        )
        return documents
