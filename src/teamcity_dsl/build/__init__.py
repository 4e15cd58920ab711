"""Build configurations and everything that lives inside their settings.

Key Components:
    Build: A build configuration document
    BuildOptions: Singleton general, checkout and failure settings
    BuildVcsSettings: VCS roots attached to a build
    BuildRequirement: Agent requirements
    Triggers: VcsBuildTrigger, CronBuildTrigger, RetryBuildTrigger
    Runners: CommandLineBuildRunner
    Features: SwabraBuildExtension, SshAgentBuildExtension
"""

from .build import Build, BuildProps
from .conditions import BuildCondition, Condition
from .extensions import (
    BaseBuildExtension,
    FilesCleanUp,
    LockingProcesses,
    SshAgentBuildExtension,
    SshAgentBuildExtensionProps,
    SwabraBuildExtension,
    SwabraBuildExtensionProps,
)
from .options import (
    BuildConfigurationType,
    BuildOptions,
    BuildOptionsProps,
    CheckoutMode,
    PublishArtifacts,
)
from .requirements import BuildRequirement, BuildRequirementProps
from .runners import (
    BaseBuildRunner,
    CommandLineBuildRunner,
    CommandLineBuildRunnerProps,
    ContainerPlatform,
    ContainerSettings,
    ExecutionPolicy,
    Executable,
    Script,
)
from .triggers import (
    BaseBuildTrigger,
    CronBuildTrigger,
    CronBuildTriggerProps,
    CronExpression,
    QuietPeriodMode,
    RetryBuildTrigger,
    RetryBuildTriggerProps,
    VcsBuildTrigger,
    VcsBuildTriggerProps,
    WatchBuild,
    WatchBuildRule,
)
from .vcs_settings import BuildVcsSettings, BuildVcsSettingsProps

__all__ = [
    "Build",
    "BuildProps",
    "BuildCondition",
    "Condition",
    "BaseBuildExtension",
    "FilesCleanUp",
    "LockingProcesses",
    "SshAgentBuildExtension",
    "SshAgentBuildExtensionProps",
    "SwabraBuildExtension",
    "SwabraBuildExtensionProps",
    "BuildConfigurationType",
    "BuildOptions",
    "BuildOptionsProps",
    "CheckoutMode",
    "PublishArtifacts",
    "BuildRequirement",
    "BuildRequirementProps",
    "BaseBuildRunner",
    "CommandLineBuildRunner",
    "CommandLineBuildRunnerProps",
    "ContainerPlatform",
    "ContainerSettings",
    "ExecutionPolicy",
    "Executable",
    "Script",
    "BaseBuildTrigger",
    "CronBuildTrigger",
    "CronBuildTriggerProps",
    "CronExpression",
    "QuietPeriodMode",
    "RetryBuildTrigger",
    "RetryBuildTriggerProps",
    "VcsBuildTrigger",
    "VcsBuildTriggerProps",
    "WatchBuild",
    "WatchBuildRule",
    "BuildVcsSettings",
    "BuildVcsSettingsProps",
]
