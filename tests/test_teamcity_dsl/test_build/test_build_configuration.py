"""Tests for build configurations and their settings."""

from typing import Any, Callable, Dict

import pytest

from teamcity_dsl import (
    AnonymousAuth,
    Build,
    BuildOptionsProps,
    BuildProps,
    BuildRequirementProps,
    BuildVcsSettingsProps,
    GitVcsRootProps,
    Project,
    ProjectProps,
    SerializationConfig,
)
from teamcity_dsl.shared.errors import ConfigurationError, SingletonError
from teamcity_dsl.xmltree import XmlElement

SCHEMA = (
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
    'xsi:noNamespaceSchemaLocation="https://www.jetbrains.com/teamcity/schemas/2020.1/project-config.xsd"'
)


def build_settings(builder: Callable[[Build], Any]) -> XmlElement:
    project = Project(ProjectProps(id="P", uuid="p"), lambda p: (
        p.build(BuildProps(id="B", uuid="b"), builder),
    ))
    return project.documents[".teamcity/P/buildTypes/B.xml"].root.find_child("settings")


def options_of(element: XmlElement) -> Dict[str, str]:
    return {
        o.get_attribute("name"): o.get_attribute("value", o.children[0].content if o.children else None)
        for o in element.find_children("option")
    }


class TestBuildProps:
    """Test BuildProps validation."""

    def test_empty_id_raises(self) -> None:
        """Test that an id is required."""
        with pytest.raises(ConfigurationError, match="Build id cannot be empty"):
            BuildProps(id="")


class TestBuildDocument:
    """Test the buildTypes/<id>.xml document."""

    def test_minimal_build(self) -> None:
        """Test a build without any settings."""
        project = Project(ProjectProps(id="P", uuid="p"), lambda p: (
            p.build(BuildProps(id="Compile", uuid="b", description="Compiles")),
        ))

        document = project.to_xml()[".teamcity/P/buildTypes/Compile.xml"]

        assert document.to_string() == (
            f'<build-type {SCHEMA} uuid="b">'
            "<name>Compile</name>"
            "<description>Compiles</description>"
            "<settings/>"
            "</build-type>"
        )

    def test_direct_construction_registers_document(self) -> None:
        """Test creating a build with its constructor."""
        project = Project(ProjectProps(id="P"))
        build = Build(project, BuildProps(id="B", name="My build"))

        assert list(project.builds) == [build]
        assert build.parent is project
        root = project.documents[".teamcity/P/buildTypes/B.xml"].root
        assert root.find_child("name").content == "My build"
        assert root.get_attribute("uuid") == build.uuid

    def test_document_path_follows_config(self) -> None:
        """Test document placement under a custom output directory."""
        project = Project(
            ProjectProps(id="P"),
            lambda p: p.build(BuildProps(id="B")),
            config=SerializationConfig(output_directory="ci"),
        )

        assert list(project.documents) == ["ci/P/buildTypes/B.xml"]

    def test_settings_sections_follow_declaration_order(self) -> None:
        """Test fragment order inside <settings>."""
        settings = build_settings(lambda b: (
            b.requirement(BuildRequirementProps(id="R1", name="os", condition="exists")),
            b.vcs_settings(BuildVcsSettingsProps(vcs_root="Repo")),
            b.options(),
            b.requirement(BuildRequirementProps(id="R2", name="env.CI", condition="exists")),
        ))

        assert [child.name for child in settings.children] == [
            "requirements",
            "vcs-settings",
            "options",
        ]
        assert len(settings.find_child("requirements").children) == 2


class TestBuildVcsSettings:
    """Test attaching VCS roots to a build."""

    def test_vcs_root_by_id_with_checkout_rules(self) -> None:
        """Test the rendered entry for a root referenced by id."""
        settings = build_settings(lambda b: (
            b.vcs_settings(BuildVcsSettingsProps(vcs_root="Repo", checkout_rules=["+:src=>."])),
        ))

        assert settings.to_string() == (
            "<settings><vcs-settings>"
            '<vcs-entry-ref root-id="Repo"><checkout-rule rule="+:src=>."/></vcs-entry-ref>'
            "</vcs-settings></settings>"
        )

    def test_vcs_root_construct_reference(self) -> None:
        """Test referencing a VCS root construct."""

        def builder(p: Project) -> None:
            repo = p.git_vcs_root(GitVcsRootProps(
                id="Repo", url="https://example.com/app.git", auth=AnonymousAuth()
            ))
            p.build(BuildProps(id="B"), lambda b: (
                b.vcs_settings(BuildVcsSettingsProps(vcs_root=repo)),
            ))

        project = Project(ProjectProps(id="P"), builder)
        root = project.documents[".teamcity/P/buildTypes/B.xml"].root

        assert root.find("vcs-entry-ref").get_attribute("root-id") == "Repo"
        assert root.find("checkout-rule") is None

    def test_empty_vcs_root_raises(self) -> None:
        """Test that a root is required."""
        with pytest.raises(ConfigurationError):
            BuildVcsSettingsProps(vcs_root="")


class TestBuildOptions:
    """Test the singleton <options> block."""

    def test_default_options(self) -> None:
        """Test the options rendered with default props."""
        options = build_settings(lambda b: b.options()).find_child("options")

        assert options_of(options) == {
            "buildNumberPattern": "%build.counter%",
            "enableHangingBuildsDetection": "false",
            "allowPersonalBuildTriggering": "false",
            "allowExternalStatus": "true",
            "maximumNumberOfBuilds": "0",
            "checkoutMode": "ON_AGENT",
            "cleanBuild": "true",
            "showDependenciesChanges": "false",
            "excludeDefaultBranchChanges": "false",
            "branchFilter": "+:*",
            "executionTimeoutMin": "0",
            "shouldFailBuildOnBadExitCode": "true",
            "shouldFailBuildIfTestsFailed": "true",
            "supportTestRetry": "false",
            "shouldFailBuildOnAnyErrorMessage": "false",
            "shouldFailBuildOnJavaCrash": "false",
        }

    def test_non_default_options(self) -> None:
        """Test options that are only rendered when changed."""
        options = build_settings(lambda b: b.options(BuildOptionsProps(
            build_configuration_type="DEPLOYMENT",
            publish_artifacts="SUCCESSFUL",
            artifact_paths=["dist/** => dist.zip", "logs/**"],
            checkout_mode="PREFER_ON_AGENT",
            checkout_directory="src",
            execution_timeout_min=30,
        ))).find_child("options")

        values = options_of(options)
        assert values["buildConfigurationType"] == "DEPLOYMENT"
        assert values["publishArtifactCondition"] == "SUCCESSFUL"
        assert values["artifactRules"] == "dist/** => dist.zip\nlogs/**"
        assert "checkoutMode" not in values
        assert values["checkoutDirectory"] == "src"
        assert values["executionTimeoutMin"] == "30"

    def test_artifact_rules_render_as_cdata(self) -> None:
        """Test multi-line options."""
        options = build_settings(lambda b: b.options(BuildOptionsProps(
            artifact_paths=["a", "b"],
        ))).find_child("options")

        assert '<option name="artifactRules"><![CDATA[a\nb]]></option>' in options.to_string()

    def test_second_options_block_raises(self) -> None:
        """Test the singleton rule."""
        with pytest.raises(SingletonError, match="BuildOptions is a singleton"):
            build_settings(lambda b: (b.options(), b.options()))

    def test_invalid_choice_raises(self) -> None:
        """Test validation of enumerated options."""
        with pytest.raises(ConfigurationError, match="checkout_mode must be one of"):
            build_settings(lambda b: b.options(BuildOptionsProps(checkout_mode="NOWHERE")))

    def test_negative_timeout_raises(self) -> None:
        """Test numeric validation."""
        with pytest.raises(ConfigurationError, match="execution_timeout_min"):
            BuildOptionsProps(execution_timeout_min=-1)


class TestBuildRequirements:
    """Test agent requirements."""

    def test_requirement_with_value(self) -> None:
        """Test a comparison requirement."""
        settings = build_settings(lambda b: b.requirement(BuildRequirementProps(
            id="R1", name="teamcity.agent.jvm.os.name", condition="starts-with", value="Linux"
        )))

        assert settings.find_child("requirements").to_string() == (
            "<requirements>"
            '<starts-with id="R1" name="teamcity.agent.jvm.os.name" value="Linux"/>'
            "</requirements>"
        )

    def test_exists_requirement(self) -> None:
        """Test a requirement without operand."""
        settings = build_settings(lambda b: b.requirement(BuildRequirementProps(
            id="R1", name="docker.version", condition="exists"
        )))

        assert settings.find_child("requirements").children[0].to_string() == (
            '<exists id="R1" name="docker.version"/>'
        )

    def test_exists_with_value_raises(self) -> None:
        """Test that exists does not accept a value."""
        with pytest.raises(ConfigurationError, match="does not take a value"):
            BuildRequirementProps(id="R1", name="os", condition="exists", value="Linux")

    def test_unknown_condition_raises(self) -> None:
        """Test validation of the condition name."""
        with pytest.raises(ConfigurationError, match="condition must be one of"):
            BuildRequirementProps(id="R1", name="os", condition="looks-like", value="Linux")
