"""Projects and project features."""

from .project import Project, ProjectProps
from .extensions import (
    BaseProjectExtension,
    KotlinFormat,
    SettingsFormat,
    VersionedSettingsMode,
    VersionedSettingsProjectExtension,
    VersionedSettingsProps,
)

__all__ = [
    "Project",
    "ProjectProps",
    "BaseProjectExtension",
    "KotlinFormat",
    "SettingsFormat",
    "VersionedSettingsMode",
    "VersionedSettingsProjectExtension",
    "VersionedSettingsProps",
]
