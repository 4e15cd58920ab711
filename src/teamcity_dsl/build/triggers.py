"""Build triggers.

Every trigger renders as ``<build-trigger id=... type=...>`` with a
``<parameters>`` block inside the build's ``<build-triggers>`` section.
"""

from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.construct import Construct
from teamcity_dsl.construct.helpers import (
    DEFAULT_BRANCH_FILTER,
    add_lines_param,
    add_param,
    bool_str,
    choice,
)
from teamcity_dsl.shared.errors import TriggerConfigurationError
from teamcity_dsl.xmltree import XmlElement


class BaseBuildTrigger(Construct[Any]):
    """Base class of every trigger; props of a subclass must provide ``id``."""

    trigger_type: str = ""

    def __init__(self, parent: Build, props: Any) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "triggers", self)

        def render_triggers(x: XmlElement) -> None:
            triggers = x.node("build-triggers")
            for trigger in parent.triggers:
                triggers.node(trigger.to_xml())

        parent.register_fragment(BaseBuildTrigger, render_triggers)

    def _base_to_xml(self, builder: Callable[[XmlElement], Any]) -> XmlElement:
        return XmlElement(
            "build-trigger",
            {"id": self.props.id, "type": self.trigger_type},
            lambda x: x.node("parameters", builder),
        )

    @abstractmethod
    def to_xml(self) -> XmlElement:
        """Serialize the trigger into a ``<build-trigger>`` element."""


def _check_id(trigger_id: str) -> None:
    if not trigger_id:
        raise TriggerConfigurationError("Trigger id cannot be empty")


# VCS trigger


class QuietPeriodMode(str, Enum):
    DO_NOT_USE = "DO_NOT_USE"
    USE_DEFAULT = "USE_DEFAULT"


@dataclass(frozen=True)
class VcsBuildTriggerProps:
    """Trigger a build when changes are detected.

    Attributes:
        id: Trigger id, unique within the build
        watch_changes_in_dependencies: Also trigger on changes in snapshot
            dependencies
        per_checkin_triggering: One build per detected change
        group_checkins_by_committer: With per check-in triggering, group
            changes of one committer into a single build
        quiet_period: ``DO_NOT_USE``, ``USE_DEFAULT`` or seconds to wait
            after the last change
        enable_queue_optimization: Let newer builds replace queued ones
        trigger_rules: Rules restricting which changes trigger
        branch_filter: Branches this trigger applies to
    """

    id: str
    watch_changes_in_dependencies: bool = False
    per_checkin_triggering: bool = False
    group_checkins_by_committer: Optional[bool] = None
    quiet_period: Union[QuietPeriodMode, str, int] = QuietPeriodMode.DO_NOT_USE
    enable_queue_optimization: bool = True
    trigger_rules: Sequence[str] = ()
    branch_filter: Sequence[str] = DEFAULT_BRANCH_FILTER

    def __post_init__(self) -> None:
        _check_id(self.id)
        if isinstance(self.quiet_period, bool):
            raise TriggerConfigurationError("quiet_period must be a mode or a number of seconds")
        if isinstance(self.quiet_period, int) and self.quiet_period < 0:
            raise TriggerConfigurationError("quiet_period cannot be negative")


class VcsBuildTrigger(BaseBuildTrigger):
    trigger_type = "vcsTrigger"
    props: VcsBuildTriggerProps

    def to_xml(self) -> XmlElement:
        props = self.props

        def build(x: XmlElement) -> None:
            add_param(
                x, "watchChangesInDependencies", bool_str(props.watch_changes_in_dependencies)
            )

            if props.per_checkin_triggering:
                add_param(x, "perCheckinTriggering", "true")
                if props.group_checkins_by_committer is not None:
                    add_param(
                        x, "groupCheckinsByCommitter", bool_str(props.group_checkins_by_committer)
                    )

            if isinstance(props.quiet_period, int):
                add_param(x, "quietPeriod", str(props.quiet_period))
                mode = "USE_CUSTOM"
            else:
                mode = choice(QuietPeriodMode, props.quiet_period, "quiet_period")
            add_param(x, "quietPeriodMode", mode)

            add_param(x, "enableQueueOptimization", bool_str(props.enable_queue_optimization))
            add_lines_param(x, "triggerRules", props.trigger_rules)
            add_lines_param(x, "branchFilter", props.branch_filter or DEFAULT_BRANCH_FILTER)

        return self._base_to_xml(build)


# Schedule trigger


class WatchBuildRule(str, Enum):
    LAST_FINISHED = "lastFinished"
    LAST_SUCCESSFUL = "lastSuccessful"
    LAST_PINNED = "lastPinned"
    BUILD_TAG = "buildTag"


@dataclass(frozen=True)
class CronExpression:
    """Quartz style cron fields."""

    second: str
    minute: str
    hour: str
    day_of_month: str
    month: str
    day_of_week: str
    year: str = "*"


@dataclass(frozen=True)
class WatchBuild:
    """Only trigger when a build of another configuration changed.

    Attributes:
        build_type_id: Watched build configuration
        for_: Which build of the watched configuration counts
        promote_build: Promote the watched build
        tag: Tag of the watched build, required for ``buildTag``
    """

    build_type_id: str
    for_: Union[WatchBuildRule, str]
    promote_build: bool = True
    tag: Optional[str] = None

    def __post_init__(self) -> None:
        rule = choice(WatchBuildRule, self.for_, "for_")
        if rule == WatchBuildRule.BUILD_TAG.value and self.tag is None:
            raise TriggerConfigurationError(
                "watch_build.for_=buildTag so you must supply a watch_build.tag value"
            )


@dataclass(frozen=True)
class CronBuildTriggerProps:
    """Trigger a build on a schedule.

    Attributes:
        id: Trigger id, unique within the build
        cron_expression: When to trigger
        timezone: Time zone the expression is evaluated in
        trigger_rules: Rules restricting which changes count as pending
        watch_build: Optional watched build configuration
        enforce_clean_checkout: Clean all files before the build
        enforce_clean_checkout_for_dependencies: Also clean snapshot
            dependencies
        trigger_build_with_pending_changes_only: Skip when nothing changed
        trigger_build_on_all_compatible_agents: One build per agent
        enable_queue_optimization: Let newer builds replace queued ones
        branch_filter: Branches this trigger applies to
    """

    id: str
    cron_expression: CronExpression
    timezone: str = "Etc/UTC"
    trigger_rules: Sequence[str] = ()
    watch_build: Optional[WatchBuild] = None
    enforce_clean_checkout: bool = False
    enforce_clean_checkout_for_dependencies: Optional[bool] = None
    trigger_build_with_pending_changes_only: bool = False
    trigger_build_on_all_compatible_agents: bool = False
    enable_queue_optimization: bool = True
    branch_filter: Sequence[str] = ()

    def __post_init__(self) -> None:
        _check_id(self.id)


class CronBuildTrigger(BaseBuildTrigger):
    trigger_type = "schedulingTrigger"
    props: CronBuildTriggerProps

    def to_xml(self) -> XmlElement:
        props = self.props
        cron = props.cron_expression

        def build(x: XmlElement) -> None:
            add_param(x, "schedulingPolicy", "cron")
            add_param(x, "timezone", props.timezone)
            add_param(x, "cronExpression_dm", cron.day_of_month)
            add_param(x, "cronExpression_dw", cron.day_of_week)
            add_param(x, "cronExpression_hour", cron.hour)
            add_param(x, "cronExpression_min", cron.minute)
            add_param(x, "cronExpression_month", cron.month)
            add_param(x, "cronExpression_sec", cron.second)
            add_param(x, "cronExpression_year", cron.year)

            add_lines_param(x, "triggerRules", props.trigger_rules)
            add_lines_param(x, "branchFilter", props.branch_filter)

            add_param(
                x,
                "triggerBuildWithPendingChangesOnly",
                bool_str(props.trigger_build_with_pending_changes_only),
            )
            add_param(
                x,
                "triggerBuildOnAllCompatibleAgents",
                bool_str(props.trigger_build_on_all_compatible_agents),
            )
            add_param(x, "enableQueueOptimization", bool_str(props.enable_queue_optimization))

            if props.enforce_clean_checkout:
                add_param(x, "enforceCleanCheckout", "true")
                if props.enforce_clean_checkout_for_dependencies is not None:
                    add_param(
                        x,
                        "enforceCleanCheckoutForDependencies",
                        bool_str(props.enforce_clean_checkout_for_dependencies),
                    )

            watch = props.watch_build
            if watch is not None:
                rule = choice(WatchBuildRule, watch.for_, "for_")
                add_param(x, "revisionRuleDependsOn", watch.build_type_id)
                add_param(x, "revisionRule", rule)
                if rule == WatchBuildRule.BUILD_TAG.value:
                    add_param(x, "revisionRuleBuildTag", str(watch.tag))
                add_param(x, "promoteWatchedBuild", bool_str(watch.promote_build))

        return self._base_to_xml(build)


# Retry trigger


@dataclass(frozen=True)
class RetryBuildTriggerProps:
    """Re-queue a failed build.

    Attributes:
        id: Trigger id, unique within the build
        enqueue_timeout: Seconds to wait before re-queueing
        retry_attempts: Maximum number of retries
        use_same_revisions: Retry with the revisions of the failed build
        move_to_the_queue_top: Put the retried build at the top of the queue
        branch_filter: Branches this trigger applies to
    """

    id: str
    enqueue_timeout: int
    retry_attempts: Optional[int] = None
    use_same_revisions: bool = True
    move_to_the_queue_top: bool = False
    branch_filter: Sequence[str] = DEFAULT_BRANCH_FILTER

    def __post_init__(self) -> None:
        _check_id(self.id)
        if self.enqueue_timeout < 0:
            raise TriggerConfigurationError("enqueue_timeout cannot be negative")


class RetryBuildTrigger(BaseBuildTrigger):
    trigger_type = "retryBuildTrigger"
    props: RetryBuildTriggerProps

    def to_xml(self) -> XmlElement:
        props = self.props

        def build(x: XmlElement) -> None:
            add_param(x, "enqueueTimeout", str(props.enqueue_timeout))
            if props.retry_attempts is not None:
                add_param(x, "retryAttempts", str(props.retry_attempts))
            add_param(x, "reRunBuildWithTheSameRevisions", bool_str(props.use_same_revisions))
            add_param(x, "moveToTheQueueTop", bool_str(props.move_to_the_queue_top))
            add_lines_param(x, "branchFilter", props.branch_filter or DEFAULT_BRANCH_FILTER)

        return self._base_to_xml(build)


Build.attach_extension("vcs_trigger", VcsBuildTrigger)
Build.attach_extension("cron_trigger", CronBuildTrigger)
Build.attach_extension("retry_trigger", RetryBuildTrigger)
