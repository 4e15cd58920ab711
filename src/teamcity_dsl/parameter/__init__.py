"""Project and build parameters with their typed specifications."""

from .spec import (
    CheckboxSpec,
    Display,
    ParameterSpec,
    PasswordSpec,
    SelectSpec,
    TextSpec,
    ValidationMode,
    build_spec,
)
from .parameter import Parameter, ParameterProps

__all__ = [
    "CheckboxSpec",
    "Display",
    "ParameterSpec",
    "PasswordSpec",
    "SelectSpec",
    "TextSpec",
    "ValidationMode",
    "build_spec",
    "Parameter",
    "ParameterProps",
]
