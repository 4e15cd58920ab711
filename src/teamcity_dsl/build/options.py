"""General settings, checkout behaviour and failure conditions of a build.

Only one :class:`BuildOptions` may exist per build configuration.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.construct import Construct
from teamcity_dsl.construct.helpers import (
    DEFAULT_BRANCH_FILTER,
    add_lines_param,
    add_param,
    bool_str,
    choice,
)
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlElement


class BuildConfigurationType(str, Enum):
    REGULAR = "REGULAR"
    DEPLOYMENT = "DEPLOYMENT"
    COMPOSITE = "COMPOSITE"


class PublishArtifacts(str, Enum):
    EVEN_FAILURES = "EVEN_FAILURES"
    SUCCESSFUL = "SUCCESSFUL"
    ALWAYS = "ALWAYS"


class CheckoutMode(str, Enum):
    MANUAL = "MANUAL"
    ON_SERVER = "ON_SERVER"
    ON_AGENT = "ON_AGENT"
    PREFER_ON_AGENT = "PREFER_ON_AGENT"


@dataclass(frozen=True)
class BuildOptionsProps:
    """Options of a build configuration.

    Attributes:
        build_configuration_type: Regular, deployment or composite build
        build_number_format: Build number pattern
        publish_artifacts: When artifacts are published
        artifact_paths: Artifact rules (``dist/** => dist.zip``)
        enable_hanging_builds_detection: Detect hanging builds
        allow_triggering_personal_builds: Allow personal builds
        enable_status_widget: Expose the external status widget
        maximum_number_of_builds: Concurrent running builds, 0 for unlimited
        checkout_mode: Where sources are checked out
        checkout_directory: Custom checkout directory
        clean_build: Delete all files in the checkout directory before a build
        show_dependencies_changes: Show changes from snapshot dependencies
        exclude_default_branch_changes: Hide default branch changes in
            feature branch builds
        branch_filter: Branches this configuration builds
        execution_timeout_min: Fail the build after this many minutes, 0 for none
        should_fail_build_on_bad_exit_code: Fail on a non-zero exit code
        should_fail_build_if_tests_failed: Fail when a test fails
        support_test_retry: Treat a passing retry as success
        should_fail_build_on_any_error_message: Fail on any logged error
        should_fail_build_on_java_crash: Fail on an out of memory or crash
    """

    build_configuration_type: Union[BuildConfigurationType, str] = BuildConfigurationType.REGULAR
    build_number_format: str = "%build.counter%"
    publish_artifacts: Union[PublishArtifacts, str] = PublishArtifacts.EVEN_FAILURES
    artifact_paths: Sequence[str] = ()
    enable_hanging_builds_detection: bool = False
    allow_triggering_personal_builds: bool = False
    enable_status_widget: bool = True
    maximum_number_of_builds: int = 0
    checkout_mode: Union[CheckoutMode, str] = CheckoutMode.ON_AGENT
    checkout_directory: Optional[str] = None
    clean_build: bool = True
    show_dependencies_changes: bool = False
    exclude_default_branch_changes: bool = False
    branch_filter: Sequence[str] = DEFAULT_BRANCH_FILTER
    execution_timeout_min: int = 0
    should_fail_build_on_bad_exit_code: bool = True
    should_fail_build_if_tests_failed: bool = True
    support_test_retry: bool = False
    should_fail_build_on_any_error_message: bool = False
    should_fail_build_on_java_crash: bool = False

    def __post_init__(self) -> None:
        if self.maximum_number_of_builds < 0:
            raise ConfigurationError("maximum_number_of_builds cannot be negative")
        if self.execution_timeout_min < 0:
            raise ConfigurationError("execution_timeout_min cannot be negative")


class BuildOptions(Construct[BuildOptionsProps]):
    """Singleton ``<options>`` block of a build."""

    def __init__(self, parent: Build, props: Optional[BuildOptionsProps] = None) -> None:
        super().__init__(parent, props or BuildOptionsProps())
        parent.claim_singleton("build_options", self)
        parent.register_fragment(BuildOptions, lambda x: x.node(self.to_xml()))

    def to_xml(self) -> XmlElement:
        props = self.props

        def build(x: XmlElement) -> None:
            configuration_type = choice(
                BuildConfigurationType, props.build_configuration_type, "build_configuration_type"
            )
            if configuration_type != BuildConfigurationType.REGULAR.value:
                add_param(x, "buildConfigurationType", configuration_type, tag="option")

            add_param(x, "buildNumberPattern", props.build_number_format, tag="option")

            publish = choice(PublishArtifacts, props.publish_artifacts, "publish_artifacts")
            if publish != PublishArtifacts.EVEN_FAILURES.value:
                add_param(x, "publishArtifactCondition", publish, tag="option")

            add_lines_param(x, "artifactRules", props.artifact_paths, tag="option")
            add_param(
                x,
                "enableHangingBuildsDetection",
                bool_str(props.enable_hanging_builds_detection),
                tag="option",
            )
            add_param(
                x,
                "allowPersonalBuildTriggering",
                bool_str(props.allow_triggering_personal_builds),
                tag="option",
            )
            add_param(x, "allowExternalStatus", bool_str(props.enable_status_widget), tag="option")
            add_param(x, "maximumNumberOfBuilds", str(props.maximum_number_of_builds), tag="option")

            checkout_mode = choice(CheckoutMode, props.checkout_mode, "checkout_mode")
            if checkout_mode != CheckoutMode.PREFER_ON_AGENT.value:
                add_param(x, "checkoutMode", checkout_mode, tag="option")
            if props.checkout_directory is not None:
                add_param(x, "checkoutDirectory", props.checkout_directory, tag="option")

            add_param(x, "cleanBuild", bool_str(props.clean_build), tag="option")
            add_param(
                x, "showDependenciesChanges", bool_str(props.show_dependencies_changes), tag="option"
            )
            add_param(
                x,
                "excludeDefaultBranchChanges",
                bool_str(props.exclude_default_branch_changes),
                tag="option",
            )
            add_lines_param(
                x, "branchFilter", props.branch_filter or DEFAULT_BRANCH_FILTER, tag="option"
            )
            add_param(x, "executionTimeoutMin", str(props.execution_timeout_min), tag="option")
            add_param(
                x,
                "shouldFailBuildOnBadExitCode",
                bool_str(props.should_fail_build_on_bad_exit_code),
                tag="option",
            )
            add_param(
                x,
                "shouldFailBuildIfTestsFailed",
                bool_str(props.should_fail_build_if_tests_failed),
                tag="option",
            )
            add_param(x, "supportTestRetry", bool_str(props.support_test_retry), tag="option")
            add_param(
                x,
                "shouldFailBuildOnAnyErrorMessage",
                bool_str(props.should_fail_build_on_any_error_message),
                tag="option",
            )
            add_param(
                x,
                "shouldFailBuildOnJavaCrash",
                bool_str(props.should_fail_build_on_java_crash),
                tag="option",
            )

        return XmlElement("options", build)


Build.attach_extension("options", BuildOptions)
