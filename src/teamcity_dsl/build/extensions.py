"""Build features.

Every feature renders as ``<extension id=... type=...>`` with a
``<parameters>`` block inside the build's ``<build-extensions>`` section.
"""

from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.construct import Construct
from teamcity_dsl.construct.helpers import add_lines_param, add_param, bool_str, choice
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlElement


class BaseBuildExtension(Construct[Any]):
    """Base class of every build feature; props of a subclass must provide ``id``."""

    extension_type: str = ""

    def __init__(self, parent: Build, props: Any) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "extensions", self)

        def render_extensions(x: XmlElement) -> None:
            extensions = x.node("build-extensions")
            for extension in parent.extensions:
                extensions.node(extension.to_xml())

        parent.register_fragment(BaseBuildExtension, render_extensions)

    def _base_to_xml(self, builder: Callable[[XmlElement], Any]) -> XmlElement:
        return XmlElement(
            "extension",
            {"id": self.props.id, "type": self.extension_type},
            lambda x: x.node("parameters", builder),
        )

    @abstractmethod
    def to_xml(self) -> XmlElement:
        """Serialize the feature into an ``<extension>`` element."""


class FilesCleanUp(str, Enum):
    DO_NOT_CLEANUP = "DO_NOT_CLEANUP"
    BEFORE_NEXT_BUILD = "BEFORE_NEXT_BUILD"
    AFTER_BUILD_FINISH = "AFTER_BUILD_FINISH"


class LockingProcesses(str, Enum):
    DO_NOT_DETECT = "DO_NOT_DETECT"
    REPORT = "REPORT"
    KILL = "KILL"


@dataclass(frozen=True)
class SwabraBuildExtensionProps:
    """Build files cleaner.

    Attributes:
        id: Feature id, unique within the build
        files_clean_up: When files created by the build are removed
        clean_checkout: Force a clean checkout when the directory is dirty
        locking_processes: What to do with processes locking the directory
        paths_to_monitor: Rules for the monitored paths
        verbose_output: Log every removed file
    """

    id: str
    files_clean_up: Union[FilesCleanUp, str] = FilesCleanUp.BEFORE_NEXT_BUILD
    clean_checkout: bool = False
    locking_processes: Union[LockingProcesses, str] = LockingProcesses.DO_NOT_DETECT
    paths_to_monitor: Sequence[str] = ()
    verbose_output: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("Extension id cannot be empty")


class SwabraBuildExtension(BaseBuildExtension):
    extension_type = "swabra"
    props: SwabraBuildExtensionProps

    def to_xml(self) -> XmlElement:
        props = self.props

        def build(x: XmlElement) -> None:
            files_clean_up = choice(FilesCleanUp, props.files_clean_up, "files_clean_up")
            if files_clean_up == FilesCleanUp.BEFORE_NEXT_BUILD.value:
                add_param(x, "swabra.enabled", "swabra.before.build")
            elif files_clean_up == FilesCleanUp.AFTER_BUILD_FINISH.value:
                add_param(x, "swabra.enabled", "swabra.after.build")

            locking = choice(LockingProcesses, props.locking_processes, "locking_processes")
            if locking != LockingProcesses.DO_NOT_DETECT.value:
                add_param(x, "swabra.processes", locking.lower())

            add_lines_param(x, "swabra.rules", props.paths_to_monitor)
            add_param(x, "swabra.strict", bool_str(props.clean_checkout))
            add_param(x, "swabra.verbose", bool_str(props.verbose_output))

        return self._base_to_xml(build)


@dataclass(frozen=True)
class SshAgentBuildExtensionProps:
    """Load an uploaded SSH key into an ssh-agent for the build.

    Attributes:
        id: Feature id, unique within the build
        key_name: Name of the key uploaded to the project
    """

    id: str
    key_name: str

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("Extension id cannot be empty")
        if not self.key_name:
            raise ConfigurationError("key_name cannot be empty")


class SshAgentBuildExtension(BaseBuildExtension):
    extension_type = "ssh-agent-build-feature"
    props: SshAgentBuildExtensionProps

    def to_xml(self) -> XmlElement:
        return self._base_to_xml(lambda x: add_param(x, "teamcitySshKey", self.props.key_name))


Build.attach_extension("swabra_extension", SwabraBuildExtension)
Build.attach_extension("ssh_agent_extension", SshAgentBuildExtension)
