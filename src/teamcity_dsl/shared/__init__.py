"""Shared utilities for the TeamCity DSL.

This module provides the configuration objects, exception hierarchy and
logging helpers used across the XML model, the composition tree and the
configuration kinds.
"""

from .config import (
    EscapePolicy,
    FormatterConfig,
    RenderConfig,
    SerializationConfig,
)
from .errors import (
    CleanupPolicyError,
    ConfigError,
    ConfigurationError,
    ConfigValidationError,
    ConstructError,
    DuplicateRootError,
    ExtensionError,
    NodeArgumentError,
    ParameterSpecError,
    SingletonError,
    TeamCityDslError,
    TriggerConfigurationError,
    XmlError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "EscapePolicy",
    "FormatterConfig",
    "RenderConfig",
    "SerializationConfig",
    "CleanupPolicyError",
    "ConfigError",
    "ConfigurationError",
    "ConfigValidationError",
    "ConstructError",
    "DuplicateRootError",
    "ExtensionError",
    "NodeArgumentError",
    "ParameterSpecError",
    "SingletonError",
    "TeamCityDslError",
    "TriggerConfigurationError",
    "XmlError",
    "CorrelationLogger",
    "get_logger",
]
