"""Build configurations.

A build configuration belongs to a project and serializes to
``<output>/<project>/buildTypes/<id>.xml``. Everything nested inside
``<settings>`` is contributed by child constructs through fragments.
"""

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

from teamcity_dsl.construct import Construct
from teamcity_dsl.project.project import Project
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlDocument, XmlElement

if TYPE_CHECKING:
    from teamcity_dsl.build.extensions import BaseBuildExtension
    from teamcity_dsl.build.options import BuildOptions
    from teamcity_dsl.build.requirements import BuildRequirement
    from teamcity_dsl.build.runners import BaseBuildRunner
    from teamcity_dsl.build.triggers import BaseBuildTrigger
    from teamcity_dsl.build.vcs_settings import BuildVcsSettings
    from teamcity_dsl.cleanup import Cleanup
    from teamcity_dsl.parameter.parameter import Parameter


@dataclass(frozen=True)
class BuildProps:
    """Configuration of a build configuration.

    Attributes:
        id: File name of the generated document and the reference used by
            triggers, dependencies and URLs
        uuid: Internal identifier, generated when omitted
        name: Human friendly name, defaults to ``id``
        description: Optional description
    """

    id: str
    uuid: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("Build id cannot be empty")


class Build(Construct[BuildProps]):
    """A build configuration inside a project.

    The document is proposed to the project once the builder has run, so
    every child must be declared inside the builder.
    """

    parameters: Sequence["Parameter"] = ()
    vcs_entries: Sequence["BuildVcsSettings"] = ()
    requirements: Sequence["BuildRequirement"] = ()
    triggers: Sequence["BaseBuildTrigger"] = ()
    runners: Sequence["BaseBuildRunner"] = ()
    extensions: Sequence["BaseBuildExtension"] = ()
    build_options: Optional["BuildOptions"] = None
    cleanup_rules: Optional["Cleanup"] = None

    def __init__(
        self,
        parent: Project,
        props: BuildProps,
        builder: Optional[Callable[["Build"], Any]] = None,
    ) -> None:
        self.uuid = props.uuid or str(uuid.uuid4())
        super().__init__(parent, props, builder)
        Construct.push(parent, "builds", self)
        self.register_document(
            self.config.path(parent.props.id, "buildTypes", f"{props.id}.xml"),
            self.to_xml(),
        )

    def to_xml(self) -> XmlDocument:
        config = self.config

        def build_root(x: XmlElement) -> None:
            x.node("name", self.props.name or self.props.id)

            if self.props.description is not None:
                x.node("description", self.props.description)

            x.node("settings", self.apply_fragments)

        return XmlDocument(
            lambda doc: doc.node("build-type", config.schema_attributes(self.uuid), build_root)
        )


Project.attach_extension("build", Build)
