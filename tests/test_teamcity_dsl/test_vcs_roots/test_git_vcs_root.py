"""Tests for git VCS roots."""

from typing import Dict

import pytest

from teamcity_dsl import (
    AnonymousAuth,
    GitVcsRoot,
    GitVcsRootProps,
    PasswordAuth,
    Project,
    ProjectProps,
)
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.xmltree import XmlElement

SCHEMA = (
    'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
    'xsi:noNamespaceSchemaLocation="https://www.jetbrains.com/teamcity/schemas/2020.1/project-config.xsd"'
)
URL = "https://example.com/acme/app.git"


def vcs_root_element(props: GitVcsRootProps) -> XmlElement:
    project = Project(ProjectProps(id="P"), lambda p: p.git_vcs_root(props))
    return project.documents[f".teamcity/P/vcsRoots/{props.id}.xml"].root


def params_of(root: XmlElement) -> Dict[str, str]:
    return {
        p.get_attribute("name"): p.get_attribute("value", p.children[0].content if p.children else None)
        for p in root.find_children("param")
    }


class TestGitVcsRoot:
    """Test the jetbrains.git VCS root."""

    def test_default_root(self) -> None:
        """Test the rendered document with default options."""
        project = Project(ProjectProps(id="P"), lambda p: p.git_vcs_root(
            GitVcsRootProps(id="Repo", url=URL, auth=AnonymousAuth(), uuid="v")
        ))

        assert project.to_xml()[".teamcity/P/vcsRoots/Repo.xml"].to_string() == (
            f'<vcs-root {SCHEMA} type="jetbrains.git" uuid="v">'
            "<name>Repo</name>"
            f'<param name="url" value="{URL}"/>'
            '<param name="branch" value="refs/heads/master"/>'
            '<param name="reportTagRevisions" value="false"/>'
            '<param name="usernameStyle" value="USERID"/>'
            '<param name="submoduleCheckout" value="false"/>'
            '<param name="serverSideAutoCrlf" value="false"/>'
            '<param name="agentCleanPolicy" value="ALWAYS"/>'
            '<param name="agentCleanFilesPolicy" value="ALL_UNTRACKED"/>'
            '<param name="useAlternates" value="true"/>'
            '<param name="ignoreKnownHosts" value="false"/>'
            '<param name="authMethod" value="ANONYMOUS"/>'
            "</vcs-root>"
        )

    def test_root_is_registered_with_project(self) -> None:
        """Test the project's collection and generated uuid."""
        project = Project(ProjectProps(id="P"))
        root = GitVcsRoot(project, GitVcsRootProps(id="Repo", url=URL, auth=AnonymousAuth()))

        assert list(project.vcs_roots) == [root]
        assert project.documents[".teamcity/P/vcsRoots/Repo.xml"].root.get_attribute("uuid") == root.uuid

    def test_optional_params(self) -> None:
        """Test every optional setting."""
        root = vcs_root_element(GitVcsRootProps(
            id="Repo",
            url=URL,
            auth=AnonymousAuth(),
            name="Application",
            push_url="git@example.com:acme/app.git",
            branch="refs/heads/main",
            branch_spec=["+:refs/heads/*", "-:refs/heads/tmp/*"],
            username_style="EMAIL",
            user_for_tags="CI <ci@example.com>",
            agent_git_path="/usr/bin/git",
            agent_clean_policy="ON_BRANCH_CHANGE",
            agent_clean_files_policy="IGNORED_ONLY",
            modification_check_interval=60,
        ))

        params = params_of(root)
        assert root.find_child("name").content == "Application"
        assert root.children[1].to_string() == "<modification-check-interval>60</modification-check-interval>"
        assert params["pushUrl"] == "git@example.com:acme/app.git"
        assert params["branch"] == "refs/heads/main"
        assert params["teamcity:branchSpec"] == "+:refs/heads/*\n-:refs/heads/tmp/*"
        assert params["usernameStyle"] == "EMAIL"
        assert params["userForTags"] == "CI <ci@example.com>"
        assert params["agentGitPath"] == "/usr/bin/git"
        assert params["agentCleanPolicy"] == "ON_BRANCH_CHANGE"
        assert params["agentCleanFilesPolicy"] == "IGNORED_ONLY"

    def test_auth_params_come_last(self) -> None:
        """Test the position of authentication params."""
        root = vcs_root_element(GitVcsRootProps(
            id="Repo",
            url=URL,
            auth=PasswordAuth(secret="credentialsJSON:1234", username="bot"),
        ))

        names = [p.get_attribute("name") for p in root.find_children("param")]
        assert names[-3:] == ["authMethod", "username", "secure:password"]
        assert params_of(root)["secure:password"] == "credentialsJSON:1234"

    def test_invalid_username_style_raises(self) -> None:
        """Test that roots validate their choices when created."""
        with pytest.raises(ConfigurationError, match="username_style must be one of"):
            vcs_root_element(GitVcsRootProps(
                id="Repo", url=URL, auth=AnonymousAuth(), username_style="NICKNAME"
            ))


class TestGitVcsRootProps:
    """Test GitVcsRootProps validation."""

    @pytest.mark.parametrize(
        "kwargs, message",
        [
            ({"id": "", "url": URL}, "VCS root id cannot be empty"),
            ({"id": "Repo", "url": ""}, "VCS root url cannot be empty"),
            ({"id": "Repo", "url": URL, "modification_check_interval": 0}, "must be positive"),
        ],
    )
    def test_invalid_props_raise(self, kwargs, message: str) -> None:
        """Test required values and ranges."""
        with pytest.raises(ConfigurationError, match=message):
            GitVcsRootProps(auth=AnonymousAuth(), **kwargs)
