"""Comparison conditions shared by agent requirements and step conditions.

Both render as an element named after the condition, e.g.
``<starts-with name="teamcity.agent.name" value="linux"/>``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

from teamcity_dsl.construct.helpers import choice
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlElement


class Condition(str, Enum):
    EQUALS = "equals"
    DOES_NOT_EQUAL = "does-not-equal"
    MORE_THAN = "more-than"
    NO_MORE_THAN = "no-more-than"
    LESS_THAN = "less-than"
    NO_LESS_THAN = "no-less-than"
    STARTS_WITH = "starts-with"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does-not-contain"
    ENDS_WITH = "ends-with"
    MATCHES = "matches"
    DOES_NOT_MATCH = "does-not-match"
    VER_MORE_THAN = "ver-more-than"
    VER_NO_MORE_THAN = "ver-no-more-than"
    VER_LESS_THAN = "ver-less-than"
    VER_NO_LESS_THAN = "ver-no-less-than"
    EXISTS = "exists"
    NOT_EXISTS = "not-exists"


WITHOUT_VALUE = frozenset({Condition.EXISTS.value, Condition.NOT_EXISTS.value})


def validate_condition(condition: Union[Condition, str], value: Optional[str]) -> str:
    """Return the element name for ``condition``.

    Raises:
        ConfigurationError: for unknown conditions, or a value given to
            ``exists`` / ``not-exists``.
    """
    name = choice(Condition, condition, "condition")
    if name in WITHOUT_VALUE and value is not None:
        raise ConfigurationError(f"Condition '{name}' does not take a value")
    return name


def condition_element(
    condition: Union[Condition, str],
    attributes: Dict[str, str],
    value: Optional[str] = None,
) -> XmlElement:
    element = XmlElement(validate_condition(condition, value), attributes)
    if value is not None:
        element.attribute("value", value)
    return element


@dataclass(frozen=True)
class BuildCondition:
    """Run a build step only when a parameter satisfies ``condition``."""

    name: str
    condition: Union[Condition, str]
    value: Optional[str] = None

    def __post_init__(self) -> None:
        validate_condition(self.condition, self.value)

    def to_xml(self) -> XmlElement:
        return condition_element(self.condition, {"name": self.name}, self.value)
