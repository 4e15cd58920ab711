"""Tests for build triggers."""

from typing import Any, Callable, Dict

import pytest

from teamcity_dsl import (
    Build,
    BuildProps,
    CronBuildTriggerProps,
    CronExpression,
    Project,
    ProjectProps,
    RetryBuildTriggerProps,
    VcsBuildTriggerProps,
    WatchBuild,
)
from teamcity_dsl.shared.errors import ConfigurationError, TriggerConfigurationError
from teamcity_dsl.xmltree import XmlElement

NIGHTLY = CronExpression(second="0", minute="0", hour="2", day_of_month="?", month="*", day_of_week="*")


def build_triggers(builder: Callable[[Build], Any]) -> XmlElement:
    project = Project(ProjectProps(id="P"), lambda p: p.build(BuildProps(id="B"), builder))
    root = project.documents[".teamcity/P/buildTypes/B.xml"].root
    return root.find_child("settings").find_child("build-triggers")


def params_of(trigger: XmlElement) -> Dict[str, str]:
    return {
        p.get_attribute("name"): p.get_attribute("value", p.children[0].content if p.children else None)
        for p in trigger.find_child("parameters").children
    }


class TestVcsBuildTrigger:
    """Test the vcsTrigger type."""

    def test_default_trigger(self) -> None:
        """Test the rendered trigger with default options."""
        triggers = build_triggers(lambda b: b.vcs_trigger(VcsBuildTriggerProps(id="T1")))

        assert triggers.to_string() == (
            "<build-triggers>"
            '<build-trigger id="T1" type="vcsTrigger"><parameters>'
            '<param name="watchChangesInDependencies" value="false"/>'
            '<param name="quietPeriodMode" value="DO_NOT_USE"/>'
            '<param name="enableQueueOptimization" value="true"/>'
            '<param name="branchFilter"><![CDATA[+:*]]></param>'
            "</parameters></build-trigger>"
            "</build-triggers>"
        )

    def test_custom_quiet_period(self) -> None:
        """Test that a number of seconds selects USE_CUSTOM."""
        params = params_of(build_triggers(lambda b: b.vcs_trigger(
            VcsBuildTriggerProps(id="T1", quiet_period=60)
        )).children[0])

        assert params["quietPeriod"] == "60"
        assert params["quietPeriodMode"] == "USE_CUSTOM"

    def test_per_checkin_triggering(self) -> None:
        """Test per check-in options and trigger rules."""
        params = params_of(build_triggers(lambda b: b.vcs_trigger(VcsBuildTriggerProps(
            id="T1",
            per_checkin_triggering=True,
            group_checkins_by_committer=True,
            quiet_period="USE_DEFAULT",
            trigger_rules=["-:docs/**", "+:."],
            branch_filter=["+:main", "+:release/*"],
        ))).children[0])

        assert params["perCheckinTriggering"] == "true"
        assert params["groupCheckinsByCommitter"] == "true"
        assert params["quietPeriodMode"] == "USE_DEFAULT"
        assert params["triggerRules"] == "-:docs/**\n+:."
        assert params["branchFilter"] == "+:main\n+:release/*"

    def test_group_by_committer_needs_per_checkin(self) -> None:
        """Test that grouping is ignored without per check-in triggering."""
        params = params_of(build_triggers(lambda b: b.vcs_trigger(
            VcsBuildTriggerProps(id="T1", group_checkins_by_committer=True)
        )).children[0])

        assert "groupCheckinsByCommitter" not in params

    def test_invalid_quiet_period_mode_raises(self) -> None:
        """Test validation of the quiet period mode."""
        with pytest.raises(ConfigurationError, match="quiet_period must be one of"):
            build_triggers(lambda b: b.vcs_trigger(
                VcsBuildTriggerProps(id="T1", quiet_period="SOMETIMES")
            ))

    def test_negative_quiet_period_raises(self) -> None:
        """Test validation of custom quiet periods."""
        with pytest.raises(TriggerConfigurationError):
            VcsBuildTriggerProps(id="T1", quiet_period=-1)

    def test_boolean_quiet_period_raises(self) -> None:
        """Test that booleans are not taken as a number of seconds."""
        with pytest.raises(TriggerConfigurationError, match="quiet_period must be a mode"):
            VcsBuildTriggerProps(id="T1", quiet_period=True)

    def test_empty_id_raises(self) -> None:
        """Test that an id is required."""
        with pytest.raises(TriggerConfigurationError, match="Trigger id cannot be empty"):
            VcsBuildTriggerProps(id="")


class TestCronBuildTrigger:
    """Test the schedulingTrigger type."""

    def test_cron_fields(self) -> None:
        """Test the rendered cron expression."""
        trigger = build_triggers(lambda b: b.cron_trigger(
            CronBuildTriggerProps(id="Nightly", cron_expression=NIGHTLY)
        )).children[0]

        assert trigger.get_attribute("type") == "schedulingTrigger"
        assert params_of(trigger) == {
            "schedulingPolicy": "cron",
            "timezone": "Etc/UTC",
            "cronExpression_dm": "?",
            "cronExpression_dw": "*",
            "cronExpression_hour": "2",
            "cronExpression_min": "0",
            "cronExpression_month": "*",
            "cronExpression_sec": "0",
            "cronExpression_year": "*",
            "triggerBuildWithPendingChangesOnly": "false",
            "triggerBuildOnAllCompatibleAgents": "false",
            "enableQueueOptimization": "true",
        }

    def test_watch_build(self) -> None:
        """Test triggering on changes of another build."""
        params = params_of(build_triggers(lambda b: b.cron_trigger(CronBuildTriggerProps(
            id="Nightly",
            cron_expression=NIGHTLY,
            watch_build=WatchBuild(build_type_id="Release", for_="lastSuccessful"),
        ))).children[0])

        assert params["revisionRuleDependsOn"] == "Release"
        assert params["revisionRule"] == "lastSuccessful"
        assert params["promoteWatchedBuild"] == "true"
        assert "revisionRuleBuildTag" not in params

    def test_watch_build_tag(self) -> None:
        """Test watching a tagged build."""
        params = params_of(build_triggers(lambda b: b.cron_trigger(CronBuildTriggerProps(
            id="Nightly",
            cron_expression=NIGHTLY,
            watch_build=WatchBuild(build_type_id="Release", for_="buildTag", tag="stable"),
        ))).children[0])

        assert params["revisionRule"] == "buildTag"
        assert params["revisionRuleBuildTag"] == "stable"

    def test_build_tag_without_tag_raises(self) -> None:
        """Test that buildTag requires a tag."""
        with pytest.raises(TriggerConfigurationError, match="watch_build.tag"):
            WatchBuild(build_type_id="Release", for_="buildTag")

    def test_enforce_clean_checkout(self) -> None:
        """Test the clean checkout options."""
        params = params_of(build_triggers(lambda b: b.cron_trigger(CronBuildTriggerProps(
            id="Nightly",
            cron_expression=NIGHTLY,
            enforce_clean_checkout=True,
            enforce_clean_checkout_for_dependencies=True,
        ))).children[0])

        assert params["enforceCleanCheckout"] == "true"
        assert params["enforceCleanCheckoutForDependencies"] == "true"


class TestRetryBuildTrigger:
    """Test the retryBuildTrigger type."""

    def test_retry_trigger(self) -> None:
        """Test the rendered retry options."""
        trigger = build_triggers(lambda b: b.retry_trigger(
            RetryBuildTriggerProps(id="Retry", enqueue_timeout=60, retry_attempts=3)
        )).children[0]

        assert trigger.get_attribute("type") == "retryBuildTrigger"
        assert params_of(trigger) == {
            "enqueueTimeout": "60",
            "retryAttempts": "3",
            "reRunBuildWithTheSameRevisions": "true",
            "moveToTheQueueTop": "false",
            "branchFilter": "+:*",
        }

    def test_negative_timeout_raises(self) -> None:
        """Test timeout validation."""
        with pytest.raises(TriggerConfigurationError):
            RetryBuildTriggerProps(id="Retry", enqueue_timeout=-5)


class TestTriggerSection:
    """Test several triggers in one build."""

    def test_triggers_share_one_section(self) -> None:
        """Test that triggers of different types render in one block."""
        triggers = build_triggers(lambda b: (
            b.vcs_trigger(VcsBuildTriggerProps(id="T1")),
            b.cron_trigger(CronBuildTriggerProps(id="T2", cron_expression=NIGHTLY)),
            b.retry_trigger(RetryBuildTriggerProps(id="T3", enqueue_timeout=0)),
        ))

        assert [t.get_attribute("id") for t in triggers.children] == ["T1", "T2", "T3"]
