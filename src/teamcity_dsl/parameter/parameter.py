"""Project and build parameters.

Parameter names carry their meaning by prefix: ``system.`` values are passed
to the build tool, ``env.`` values become environment variables (minus the
prefix), anything else can only be referenced as ``%name%``.
"""

from dataclasses import dataclass
from typing import Optional, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.construct import Construct
from teamcity_dsl.parameter.spec import ParameterSpec, build_spec
from teamcity_dsl.project.project import Project
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlElement


@dataclass(frozen=True)
class ParameterProps:
    """A parameter definition.

    Attributes:
        name: Parameter key, may contain dots (``foo.bar.baz``)
        value: Parameter value, may reference other parameters (``%foo%``)
        spec: Optional typed specification (checkbox, select, ...)
    """

    name: str
    value: str
    spec: Optional[ParameterSpec] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("Parameter name cannot be empty")


class Parameter(Construct[ParameterProps]):
    """A parameter of a project or a build configuration.

    ```python
    Project(ProjectProps(id="MyPipeline"), lambda p: (
        p.parameter(ParameterProps(name="foo", value="abc")),
        p.build(BuildProps(id="MyBuild"), lambda b: (
            b.parameter(ParameterProps(name="bar", value="xyz")),
        )),
    ))
    ```
    """

    def __init__(self, parent: Union[Project, Build], props: ParameterProps) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "parameters", self)

        def render_parameters(x: XmlElement) -> None:
            with_parameters = x.node("parameters")
            for parameter in parent.parameters:
                with_parameters.node(parameter.to_xml())

        parent.register_fragment(Parameter, render_parameters)

    def __str__(self) -> str:
        return f"%{self.props.name}%"

    def to_xml(self) -> XmlElement:
        def build(x: XmlElement) -> None:
            if self.props.spec is not None:
                x.attribute("spec", build_spec(self.props.spec))
            if "\n" in self.props.value:
                x.content = self.props.value
            else:
                x.attribute("value", self.props.value)

        return XmlElement("param", {"name": self.props.name}, build)


Project.attach_extension("parameter", Parameter)
Build.attach_extension("parameter", Parameter)
