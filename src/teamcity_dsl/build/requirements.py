"""Agent requirements of a build configuration."""

from dataclasses import dataclass
from typing import Optional, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.build.conditions import Condition, condition_element, validate_condition
from teamcity_dsl.construct import Construct
from teamcity_dsl.xmltree import XmlElement


@dataclass(frozen=True)
class BuildRequirementProps:
    """An agent requirement.

    Attributes:
        id: Requirement id, unique within the build
        name: Agent parameter to test (``teamcity.agent.jvm.os.name``)
        condition: Comparison to apply
        value: Operand, not allowed for ``exists`` / ``not-exists``
    """

    id: str
    name: str
    condition: Union[Condition, str]
    value: Optional[str] = None

    def __post_init__(self) -> None:
        validate_condition(self.condition, self.value)


class BuildRequirement(Construct[BuildRequirementProps]):
    """Limits which agents may run a build."""

    def __init__(self, parent: Build, props: BuildRequirementProps) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "requirements", self)

        def render_requirements(x: XmlElement) -> None:
            requirements = x.node("requirements")
            for requirement in parent.requirements:
                requirements.node(requirement.to_xml())

        parent.register_fragment(BuildRequirement, render_requirements)

    def to_xml(self) -> XmlElement:
        return condition_element(
            self.props.condition,
            {"id": self.props.id, "name": self.props.name},
            self.props.value,
        )


Build.attach_extension("requirement", BuildRequirement)
