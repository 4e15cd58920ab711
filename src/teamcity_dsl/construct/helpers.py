"""Value conversions shared by the configuration kinds."""

from enum import Enum
from typing import Iterable, Optional, Type, TypeVar, Union

from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlElement

TEnum = TypeVar("TEnum", bound=Enum)

DEFAULT_BRANCH_FILTER = ("+:*",)


def bool_str(value: bool) -> str:
    """Render a boolean the way TeamCity expects it."""
    return "true" if value else "false"


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines)


def choice(enum_cls: Type[TEnum], value: Union[TEnum, str], field_name: str) -> str:
    """Validate ``value`` against ``enum_cls`` and return its string value.

    Raises:
        ConfigurationError: if ``value`` is not a member of ``enum_cls``.
    """
    try:
        return str(enum_cls(value).value)
    except ValueError as e:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise ConfigurationError(
            f"{field_name} must be one of {allowed}, got {value!r}"
        ) from e


def add_param(
    element: XmlElement, name: str, value: str, tag: str = "param"
) -> XmlElement:
    """Append ``<param name=... value=.../>``."""
    return element.node(tag, {"name": name, "value": value})


def add_lines_param(
    element: XmlElement,
    name: str,
    lines: Optional[Iterable[str]],
    tag: str = "param",
) -> Optional[XmlElement]:
    """Append a param holding newline separated ``lines`` as CDATA.

    Nothing is added when ``lines`` is empty or ``None``.
    """
    items = list(lines or ())
    if not items:
        return None
    return element.node(tag, {"name": name}, lambda x: x.cdata(join_lines(items)))
