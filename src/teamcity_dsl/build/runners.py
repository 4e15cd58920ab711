"""Build steps.

Every runner renders as ``<runner id=... type=...>`` inside the build's
``<build-runners>`` section, in declaration order.
"""

import shlex
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.build.conditions import BuildCondition
from teamcity_dsl.construct import Construct
from teamcity_dsl.construct.helpers import add_param, bool_str, choice
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlElement


class ExecutionPolicy(str, Enum):
    """When a step runs relative to the outcome of earlier steps."""

    DEFAULT = "default"
    EXECUTE_IF_SUCCESS = "execute_if_success"
    EXECUTE_IF_FAILED = "execute_if_failed"
    EXECUTE_ALWAYS = "execute_always"


class ContainerPlatform(str, Enum):
    LINUX = "linux"
    WINDOWS = "windows"


class BaseBuildRunner(Construct[Any]):
    """Base class of every build step.

    Props of a subclass must provide ``id``, ``name``, ``execution_policy``
    and ``conditions``.
    """

    runner_type: str = ""

    def __init__(self, parent: Build, props: Any) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "runners", self)

        def render_runners(x: XmlElement) -> None:
            runners = x.node("build-runners")
            for runner in parent.runners:
                runners.node(runner.to_xml())

        parent.register_fragment(BaseBuildRunner, render_runners)

    def _base_to_xml(self, builder: Callable[[XmlElement], Any]) -> XmlElement:
        def build(x: XmlElement) -> None:
            if self.props.name is not None:
                x.attribute("name", self.props.name)

            if self.props.conditions:
                conditions = x.node("conditions")
                for condition in self.props.conditions:
                    conditions.node(condition.to_xml())

            parameters = x.node("parameters")
            add_param(
                parameters,
                "teamcity.step.mode",
                choice(ExecutionPolicy, self.props.execution_policy, "execution_policy"),
            )
            builder(parameters)

        return XmlElement("runner", {"id": self.props.id, "type": self.runner_type}, build)

    @abstractmethod
    def to_xml(self) -> XmlElement:
        """Serialize the step into a ``<runner>`` element."""


@dataclass(frozen=True)
class Executable:
    """Run ``cmd`` with ``args``."""

    cmd: str
    args: Sequence[str] = ()


@dataclass(frozen=True)
class Script:
    """Run an inline shell or batch script."""

    script: str


@dataclass(frozen=True)
class ContainerSettings:
    """Run the step inside a docker container.

    Attributes:
        image: Image to run
        platform: Image platform
        pull: Always pull the image before running
        args: Extra ``docker run`` arguments
    """

    image: str
    platform: Union[ContainerPlatform, str] = ContainerPlatform.LINUX
    pull: bool = False
    args: Sequence[str] = ()


@dataclass(frozen=True)
class CommandLineBuildRunnerProps:
    """A command line step.

    Attributes:
        id: Step id, unique within the build
        command: An :class:`Executable` or a :class:`Script`
        name: Human friendly step name
        execution_policy: When the step runs
        conditions: Parameter conditions that must hold for the step to run
        cwd: Working directory relative to the checkout directory
        fmt_std_err_as_errors: Report stderr output as build errors
        run_in_container: Optional docker settings
    """

    id: str
    command: Union[Executable, Script]
    name: Optional[str] = None
    execution_policy: Union[ExecutionPolicy, str] = ExecutionPolicy.DEFAULT
    conditions: Sequence[BuildCondition] = ()
    cwd: Optional[str] = None
    fmt_std_err_as_errors: bool = False
    run_in_container: Optional[ContainerSettings] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("Runner id cannot be empty")
        if not isinstance(self.command, (Executable, Script)):
            raise ConfigurationError("command must be an Executable or a Script")


class CommandLineBuildRunner(BaseBuildRunner):
    """Runs an executable or an inline script.

    ```python
    b.command_line_runner(CommandLineBuildRunnerProps(
        id="Test",
        command=Script("make test"),
    ))
    ```
    """

    runner_type = "simpleRunner"
    props: CommandLineBuildRunnerProps

    def to_xml(self) -> XmlElement:
        props = self.props

        def build(x: XmlElement) -> None:
            if props.cwd is not None:
                add_param(x, "teamcity.build.workingDir", props.cwd)

            add_param(x, "log.stderr.as.errors", bool_str(props.fmt_std_err_as_errors))

            container = props.run_in_container
            if container is not None:
                add_param(x, "plugin.docker.imageId", container.image)
                add_param(
                    x,
                    "plugin.docker.imagePlatform",
                    choice(ContainerPlatform, container.platform, "platform"),
                )
                add_param(x, "plugin.docker.pull.enabled", bool_str(container.pull))
                if container.args:
                    add_param(x, "plugin.docker.run.parameters", shlex.join(container.args))

            command = props.command
            if isinstance(command, Executable):
                add_param(x, "command.executable", command.cmd)
                if command.args:
                    add_param(x, "command.parameters", shlex.join(command.args))
            else:
                add_param(x, "use.custom.script", "true")
                x.node("param", {"name": "script.content"}, command.script)

        return self._base_to_xml(build)


Build.attach_extension("command_line_runner", CommandLineBuildRunner)
