"""Exception hierarchy for the TeamCity DSL.

Every error raised by the library is a programming error in the pipeline
definition; none of them is caught internally.
"""

from typing import List, Optional


class TeamCityDslError(Exception):
    """Base exception for all library errors."""


class XmlError(TeamCityDslError):
    """Base exception for XML document model errors."""


class DuplicateRootError(XmlError):
    """Raised when a second root element is added to an XmlDocument."""

    def __init__(self, existing: Optional[str] = None) -> None:
        message = "An XmlDocument can only have a single root node"
        if existing:
            message += f" (already rooted at <{existing}>)"
        super().__init__(message)
        self.existing = existing


class NodeArgumentError(XmlError, TypeError):
    """Raised when node() receives arguments it cannot interpret."""


class ConstructError(TeamCityDslError):
    """Base exception for composition tree errors."""


class SingletonError(ConstructError):
    """Raised when a second instance of a per-parent singleton is created."""

    def __init__(self, kind: str, parent_id: Optional[str] = None) -> None:
        message = f"{kind} is a singleton"
        if parent_id:
            message += f" and is already defined on '{parent_id}'"
        super().__init__(message)
        self.kind = kind
        self.parent_id = parent_id


class ExtensionError(ConstructError, AttributeError):
    """Raised for conflicting or unknown construct extensions."""


class ConfigurationError(TeamCityDslError, ValueError):
    """Raised when the props of a configuration kind are inconsistent."""


class ParameterSpecError(ConfigurationError):
    """Raised when a parameter spec cannot be rendered."""


class CleanupPolicyError(ConfigurationError):
    """Raised when a cleanup policy keeps neither days nor builds."""


class TriggerConfigurationError(ConfigurationError):
    """Raised when a build trigger is missing a dependent setting."""


class ConfigError(TeamCityDslError):
    """Base exception for serialization configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []
