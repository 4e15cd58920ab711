"""Configuration classes for TeamCity DSL serialization.

This module provides configuration objects controlling where generated
documents are placed, which schema they reference and how XML text is
rendered (escaping policy and pretty-printing).
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from teamcity_dsl.shared.errors import ConfigValidationError

DEFAULT_OUTPUT_DIRECTORY = ".teamcity"
DEFAULT_XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
DEFAULT_SCHEMA_LOCATION = (
    "https://www.jetbrains.com/teamcity/schemas/2020.1/project-config.xsd"
)


class EscapePolicy(Enum):
    """How attribute values and text content are escaped on render."""

    QUOTES_ONLY = "quotes_only"  # only " in attribute values, content is raw
    FULL = "full"                # &, <, > everywhere plus " in attributes


@dataclass(frozen=True)
class FormatterConfig:
    """Configuration for the pretty-printing pass."""

    indentation: str = "  "
    collapse_content: bool = True
    whitespace_at_end_of_self_closing: bool = False
    line_separator: str = "\n"

    def __post_init__(self) -> None:
        """Validate formatter configuration."""
        if self.indentation.strip(" \t"):
            raise ValueError("indentation must only contain spaces or tabs")
        if self.line_separator not in ("\n", "\r\n"):
            raise ValueError("line_separator must be '\\n' or '\\r\\n'")


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for turning XmlDocuments into text."""

    pretty: bool = False
    escape_policy: EscapePolicy = EscapePolicy.QUOTES_ONLY
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    def __post_init__(self) -> None:
        """Validate render configuration."""
        if not isinstance(self.escape_policy, EscapePolicy):
            raise ValueError(
                f"escape_policy must be one of {[p.name for p in EscapePolicy]}"
            )


@dataclass(frozen=True)
class SerializationConfig:
    """Complete configuration for serializing a construct tree.

    Immutable; derive variants with :meth:`override` or the preset factories.
    """

    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    schema_location: str = DEFAULT_SCHEMA_LOCATION
    xsi_namespace: str = DEFAULT_XSI_NAMESPACE
    render: RenderConfig = field(default_factory=RenderConfig)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete serialization configuration."""
        try:
            self.render.__post_init__()
            self.render.formatter.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if not self.output_directory or self.output_directory.strip() != self.output_directory:
            raise ConfigValidationError(
                "output_directory must be a non-empty path without surrounding whitespace",
                field_name="output_directory",
            )
        if self.output_directory.endswith("/"):
            raise ConfigValidationError(
                "output_directory must not end with '/'",
                field_name="output_directory",
                suggestions=[f"Use '{self.output_directory.rstrip('/')}'"],
            )

    def path(self, *parts: str) -> str:
        """Join ``parts`` below the output directory using forward slashes."""
        return "/".join((self.output_directory,) + parts)

    def schema_attributes(self, uuid: str) -> Dict[str, str]:
        """Attributes carried by the root element of every generated document."""
        return {
            "xmlns:xsi": self.xsi_namespace,
            "xsi:noNamespaceSchemaLocation": self.schema_location,
            "uuid": uuid,
        }

    def override(self, **kwargs: Any) -> "SerializationConfig":
        """Create a new configuration with specific overrides.

        Nested fields use double underscores:

            >>> config = SerializationConfig()
            >>> config.override(render__pretty=True).render.pretty
            True
        """
        render_overrides: Dict[str, Any] = {}
        formatter_overrides: Dict[str, Any] = {}
        top_level: Dict[str, Any] = {}

        for key, value in kwargs.items():
            if key.startswith("render__formatter__"):
                formatter_overrides[key[len("render__formatter__"):]] = value
            elif key.startswith("render__"):
                render_overrides[key[len("render__"):]] = value
            else:
                top_level[key] = value

        try:
            render = top_level.pop("render", self.render)
            if formatter_overrides:
                render = replace(render, formatter=replace(render.formatter, **formatter_overrides))
            if render_overrides:
                render = replace(render, **render_overrides)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e), field_name="render") from e

        try:
            return replace(self, render=render, **top_level)
        except TypeError as e:
            raise ConfigValidationError(
                str(e), field_name=", ".join(sorted(top_level)) or None
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        formatter = self.render.formatter
        return {
            "output_directory": self.output_directory,
            "schema_location": self.schema_location,
            "xsi_namespace": self.xsi_namespace,
            "correlation_id": self.correlation_id,
            "render": {
                "pretty": self.render.pretty,
                "escape_policy": self.render.escape_policy.name,
                "formatter": {
                    "indentation": formatter.indentation,
                    "collapse_content": formatter.collapse_content,
                    "whitespace_at_end_of_self_closing": (
                        formatter.whitespace_at_end_of_self_closing
                    ),
                    "line_separator": formatter.line_separator,
                },
            },
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SerializationConfig":
        """Create configuration from a dictionary produced by :meth:`to_dict`."""
        render_data = dict(data.get("render", {}))
        try:
            formatter = FormatterConfig(**render_data.pop("formatter", {}))
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e), field_name="render.formatter") from e

        policy = render_data.pop("escape_policy", EscapePolicy.QUOTES_ONLY.name)
        try:
            escape_policy = policy if isinstance(policy, EscapePolicy) else EscapePolicy[policy]
        except KeyError as e:
            raise ConfigValidationError(
                f"Unknown escape policy: {policy}",
                field_name="render.escape_policy",
                suggestions=[p.name for p in EscapePolicy],
            ) from e

        try:
            render = RenderConfig(escape_policy=escape_policy, formatter=formatter, **render_data)
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e), field_name="render") from e

        top_level = {k: v for k, v in data.items() if k != "render"}
        try:
            return cls(render=render, **top_level)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "SerializationConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def default(cls) -> "SerializationConfig":
        """Flat output with the documented quotes-only escaping."""
        return cls()

    @classmethod
    def pretty(cls) -> "SerializationConfig":
        """Two-space indented output, suitable for committing to a repository."""
        return cls(render=RenderConfig(pretty=True))

    @classmethod
    def strict_escaping(cls) -> "SerializationConfig":
        """Pretty output that also escapes ``&``, ``<`` and ``>``."""
        return cls(render=RenderConfig(pretty=True, escape_policy=EscapePolicy.FULL))
