"""TeamCity DSL.

Describe TeamCity projects as a tree of Python objects and serialize them to
the XML configuration files TeamCity reads from ``.teamcity/``.

    project = Project(ProjectProps(id="MyPipeline"), lambda p: (
        p.build(BuildProps(id="Compile"), lambda b: (
            b.command_line_runner(CommandLineBuildRunnerProps(
                id="Make", command=Script("make"),
            )),
        )),
    ))
    files = render_project(project)

Importing the package attaches every factory (``project.build``,
``build.vcs_trigger``, ...) to its parent kind.
"""

__version__ = "0.1.0"
__author__ = "TeamCity DSL Team"

from .shared import (
    CleanupPolicyError,
    ConfigError,
    ConfigurationError,
    ConfigValidationError,
    ConstructError,
    DuplicateRootError,
    EscapePolicy,
    ExtensionError,
    FormatterConfig,
    NodeArgumentError,
    ParameterSpecError,
    RenderConfig,
    SerializationConfig,
    SingletonError,
    TeamCityDslError,
    TriggerConfigurationError,
    XmlError,
)
from .xmltree import XmlDocument, XmlElement, format_xml, to_lxml
from .construct import Construct
from .project import (
    KotlinFormat,
    Project,
    ProjectProps,
    VersionedSettingsProjectExtension,
    VersionedSettingsProps,
)
from .vcs_roots import (
    AnonymousAuth,
    CustomSshKeyAuth,
    DefaultSshKeyAuth,
    GitVcsRoot,
    GitVcsRootProps,
    PasswordAuth,
    UploadedSshKeyAuth,
)
from .build import (
    Build,
    BuildCondition,
    BuildOptions,
    BuildOptionsProps,
    BuildProps,
    BuildRequirement,
    BuildRequirementProps,
    BuildVcsSettings,
    BuildVcsSettingsProps,
    CommandLineBuildRunner,
    CommandLineBuildRunnerProps,
    ContainerSettings,
    CronBuildTrigger,
    CronBuildTriggerProps,
    CronExpression,
    Executable,
    RetryBuildTrigger,
    RetryBuildTriggerProps,
    Script,
    SshAgentBuildExtension,
    SshAgentBuildExtensionProps,
    SwabraBuildExtension,
    SwabraBuildExtensionProps,
    VcsBuildTrigger,
    VcsBuildTriggerProps,
    WatchBuild,
)
from .parameter import (
    CheckboxSpec,
    Parameter,
    ParameterProps,
    PasswordSpec,
    SelectSpec,
    TextSpec,
)
from .cleanup import Cleanup, CleanupLevel, CleanupPolicy, CleanupProps
from .output import render_documents, render_project

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Entry points
    "Project",
    "ProjectProps",
    "render_documents",
    "render_project",

    # Configuration kinds
    "Build",
    "BuildProps",
    "Parameter",
    "ParameterProps",
    "CheckboxSpec",
    "PasswordSpec",
    "SelectSpec",
    "TextSpec",
    "GitVcsRoot",
    "GitVcsRootProps",
    "AnonymousAuth",
    "CustomSshKeyAuth",
    "DefaultSshKeyAuth",
    "PasswordAuth",
    "UploadedSshKeyAuth",
    "BuildVcsSettings",
    "BuildVcsSettingsProps",
    "BuildOptions",
    "BuildOptionsProps",
    "BuildRequirement",
    "BuildRequirementProps",
    "BuildCondition",
    "Cleanup",
    "CleanupLevel",
    "CleanupPolicy",
    "CleanupProps",
    "VcsBuildTrigger",
    "VcsBuildTriggerProps",
    "CronBuildTrigger",
    "CronBuildTriggerProps",
    "CronExpression",
    "WatchBuild",
    "RetryBuildTrigger",
    "RetryBuildTriggerProps",
    "CommandLineBuildRunner",
    "CommandLineBuildRunnerProps",
    "ContainerSettings",
    "Executable",
    "Script",
    "SwabraBuildExtension",
    "SwabraBuildExtensionProps",
    "SshAgentBuildExtension",
    "SshAgentBuildExtensionProps",
    "VersionedSettingsProjectExtension",
    "VersionedSettingsProps",
    "KotlinFormat",

    # Composition tree and XML model
    "Construct",
    "XmlDocument",
    "XmlElement",
    "format_xml",
    "to_lxml",

    # Configuration
    "EscapePolicy",
    "FormatterConfig",
    "RenderConfig",
    "SerializationConfig",

    # Errors
    "TeamCityDslError",
    "XmlError",
    "DuplicateRootError",
    "NodeArgumentError",
    "ConstructError",
    "SingletonError",
    "ExtensionError",
    "ConfigurationError",
    "ParameterSpecError",
    "CleanupPolicyError",
    "TriggerConfigurationError",
    "ConfigError",
    "ConfigValidationError",
]
