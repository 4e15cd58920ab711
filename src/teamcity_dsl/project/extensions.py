"""Project features.

Every feature renders as an ``<extension id=... type=...>`` element inside
the project's ``<project-extensions>`` section.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Union

from teamcity_dsl.construct import Construct
from teamcity_dsl.construct.helpers import add_param, bool_str, choice
from teamcity_dsl.project.project import Project
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.vcs_roots.base import BaseVcsRoot
from teamcity_dsl.xmltree import XmlElement


class BaseProjectExtension(Construct[Any]):
    """Base class of every project feature; props of a subclass must provide ``id``."""

    def __init__(self, parent: Project, props: Any) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "extensions", self)

        def render_extensions(x: XmlElement) -> None:
            extensions = x.node("project-extensions")
            for extension in parent.extensions:
                extensions.node(extension.to_xml())

        parent.register_fragment(BaseProjectExtension, render_extensions)

    @abstractmethod
    def to_xml(self) -> XmlElement:
        """Serialize the feature into an ``<extension>`` element."""


class VersionedSettingsMode(str, Enum):
    ALWAYS_USE_CURRENT = "ALWAYS_USE_CURRENT"
    PREFER_CURRENT = "PREFER_CURRENT"
    PREFER_VCS = "PREFER_VCS"


class SettingsFormat(str, Enum):
    XML = "xml"
    KOTLIN = "kotlin"


@dataclass(frozen=True)
class KotlinFormat:
    """Kotlin DSL settings format.

    Attributes:
        generate_portable_dsl: Use relative ids in the generated DSL
        context: Extra ``context.<key>`` parameters
    """

    generate_portable_dsl: bool = True
    context: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class VersionedSettingsProps:
    """Store project settings in version control.

    Attributes:
        id: Feature id, unique within the project
        vcs_root: Root the settings are stored in, or its id
        enabled: Synchronization enabled
        mode: Which settings win when starting a build
        show_changes: Show settings changes in builds
        use_credentials_json: Store secure values outside of the settings
        format: ``xml``, ``kotlin`` or a :class:`KotlinFormat`
    """

    id: str
    vcs_root: Union[BaseVcsRoot, str]
    enabled: bool = True
    mode: Union[VersionedSettingsMode, str] = VersionedSettingsMode.PREFER_VCS
    show_changes: bool = True
    use_credentials_json: bool = True
    format: Union[SettingsFormat, str, KotlinFormat] = SettingsFormat.XML

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("Extension id cannot be empty")

    @property
    def vcs_root_id(self) -> str:
        if isinstance(self.vcs_root, BaseVcsRoot):
            return self.vcs_root.props.id
        return self.vcs_root


class VersionedSettingsProjectExtension(BaseProjectExtension):
    props: VersionedSettingsProps

    def to_xml(self) -> XmlElement:
        props = self.props

        def build(x: XmlElement) -> None:
            add_param(x, "enabled", bool_str(props.enabled))
            add_param(x, "rootId", props.vcs_root_id)
            add_param(x, "buildSettings", choice(VersionedSettingsMode, props.mode, "mode"))
            add_param(x, "showChanges", bool_str(props.show_changes))
            if props.use_credentials_json:
                add_param(x, "credentialsStorageType", "credentialsJSON")

            if isinstance(props.format, KotlinFormat):
                add_param(x, "format", SettingsFormat.KOTLIN.value)
                add_param(x, "useRelativeIds", bool_str(props.format.generate_portable_dsl))
                for key, value in props.format.context.items():
                    add_param(x, f"context.{key}", value)
            elif choice(SettingsFormat, props.format, "format") == SettingsFormat.KOTLIN.value:
                add_param(x, "format", SettingsFormat.KOTLIN.value)
                add_param(x, "useRelativeIds", "true")

        return XmlElement("extension", {"id": props.id, "type": "versionedSettings"}, build)


Project.attach_extension("versioned_settings", VersionedSettingsProjectExtension)
