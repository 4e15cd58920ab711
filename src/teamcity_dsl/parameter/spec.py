"""Typed parameter specifications.

TeamCity stores the type of a parameter as a single ``spec`` attribute, for
example ``checkbox label='Deploy?' checkedValue='yes'``. Each variant below
carries a ``type`` discriminant and the fields relevant to it;
:func:`build_spec` renders any of them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Mapping, Optional, Sequence, Tuple, Union

from teamcity_dsl.construct.helpers import choice
from teamcity_dsl.shared.errors import ParameterSpecError


class Display(str, Enum):
    """How a parameter appears in the custom run dialog."""

    HIDDEN = "hidden"
    PROMPT = "prompt"
    NORMAL = "normal"


class ValidationMode(str, Enum):
    ANY = "any"
    NOT_EMPTY = "not_empty"
    REGEX = "regex"


@dataclass(frozen=True)
class _SpecBase:
    label: Optional[str] = None
    description: Optional[str] = None
    display: Optional[Union[Display, str]] = None
    read_only: bool = False

    type: ClassVar[str] = ""

    def _common_fields(self) -> List[Tuple[str, str]]:
        fields: List[Tuple[str, str]] = []
        if self.label is not None:
            fields.append(("label", self.label))
        if self.display is not None:
            fields.append(("display", choice(Display, self.display, "display")))
        if self.description is not None:
            fields.append(("description", self.description))
        if self.read_only:
            fields.append(("readOnly", "true"))
        return fields

    def _type_fields(self) -> List[Tuple[str, str]]:
        return []

    def fields(self) -> List[Tuple[str, str]]:
        return self._common_fields() + self._type_fields()


@dataclass(frozen=True)
class TextSpec(_SpecBase):
    """Plain text, optionally validated."""

    validation_mode: Union[ValidationMode, str] = ValidationMode.ANY
    validation_message: Optional[str] = None
    regexp: Optional[str] = None

    type: ClassVar[str] = "text"

    def __post_init__(self) -> None:
        mode = choice(ValidationMode, self.validation_mode, "validation_mode")
        if mode == ValidationMode.REGEX.value and self.regexp is None:
            raise ParameterSpecError("validation_mode=regex but no regexp has been set")

    def _type_fields(self) -> List[Tuple[str, str]]:
        fields = [
            ("validationMode", choice(ValidationMode, self.validation_mode, "validation_mode"))
        ]
        if self.validation_message is not None:
            fields.append(("validationMessage", self.validation_message))
        if self.regexp is not None and fields[0][1] == ValidationMode.REGEX.value:
            fields.append(("regexp", self.regexp))
        return fields


@dataclass(frozen=True)
class PasswordSpec(_SpecBase):
    """Value is masked with ``***`` in the UI and build logs."""

    type: ClassVar[str] = "password"


@dataclass(frozen=True)
class CheckboxSpec(_SpecBase):
    """Boolean like parameter rendered as a checkbox."""

    checked_value: Optional[str] = None
    unchecked_value: Optional[str] = None

    type: ClassVar[str] = "checkbox"

    def __post_init__(self) -> None:
        if self.checked_value is None:
            raise ParameterSpecError("checkbox parameters require a checked_value")

    def _type_fields(self) -> List[Tuple[str, str]]:
        fields = [("checkedValue", str(self.checked_value))]
        if self.unchecked_value is not None:
            fields.append(("uncheckedValue", self.unchecked_value))
        return fields


@dataclass(frozen=True)
class SelectSpec(_SpecBase):
    """Enum like parameter rendered as a select control.

    ``items`` is either a list of values or a mapping of label to value.
    """

    items: Union[Sequence[str], Mapping[str, str]] = field(default_factory=tuple)
    multiple: bool = False
    value_separator: Optional[str] = None

    type: ClassVar[str] = "select"

    def __post_init__(self) -> None:
        if not self.items:
            raise ParameterSpecError("select parameters require at least one item")

    def _type_fields(self) -> List[Tuple[str, str]]:
        fields: List[Tuple[str, str]] = []
        if self.multiple:
            fields.append(("multiple", "true"))
        if self.value_separator is not None:
            fields.append(("valueSeparator", self.value_separator))

        if isinstance(self.items, Mapping):
            values = list(self.items.values())
            labels = list(self.items.keys())
        else:
            values = list(self.items)
            labels = []

        fields.extend((f"data_{i}", value) for i, value in enumerate(values))
        fields.extend((f"label_{i}", label) for i, label in enumerate(labels))
        return fields


ParameterSpec = Union[TextSpec, PasswordSpec, CheckboxSpec, SelectSpec]


def build_spec(spec: ParameterSpec) -> str:
    """Render ``spec`` into TeamCity's ``spec`` attribute syntax.

    >>> build_spec(CheckboxSpec(label="Deploy?", checked_value="yes"))
    "checkbox label='Deploy?' checkedValue='yes'"
    """
    if not isinstance(spec, _SpecBase) or not spec.type:
        raise ParameterSpecError(f"Unsupported parameter spec: {spec!r}")

    parts = [spec.type]
    parts.extend(f"{key}='{value}'" for key, value in spec.fields())
    return " ".join(parts)
