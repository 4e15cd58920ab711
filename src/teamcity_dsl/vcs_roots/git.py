"""Git VCS roots."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from teamcity_dsl.construct.helpers import add_lines_param, add_param, bool_str, choice
from teamcity_dsl.project.project import Project
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.vcs_roots.auth import AuthMethod
from teamcity_dsl.vcs_roots.base import BaseVcsRoot
from teamcity_dsl.xmltree import XmlDocument, XmlElement


class UsernameStyle(str, Enum):
    """How the author of a change is reported."""

    FULL = "FULL"
    NAME = "NAME"
    USERID = "USERID"
    EMAIL = "EMAIL"


class AgentCleanPolicy(str, Enum):
    """When ``git clean`` runs on the agent."""

    ALWAYS = "ALWAYS"
    NEVER = "NEVER"
    ON_BRANCH_CHANGE = "ON_BRANCH_CHANGE"


class AgentCleanFilesPolicy(str, Enum):
    """Which files ``git clean`` removes on the agent."""

    ALL_UNTRACKED = "ALL_UNTRACKED"
    IGNORED_ONLY = "IGNORED_ONLY"
    NON_IGNORED_ONLY = "NON_IGNORED_ONLY"


@dataclass(frozen=True)
class GitVcsRootProps:
    """Configuration of a git VCS root.

    Attributes:
        id: File name of the generated document and the reference used by
            build VCS settings
        url: Fetch URL of the remote repository
        auth: Authentication method
        uuid: Internal identifier, generated when omitted
        name: Human friendly name, defaults to ``id``
        push_url: URL used to push tags, defaults to ``url`` on the server
        branch: Default branch
        branch_spec: Additional monitored branches (``+:refs/heads/*``)
        report_tag_revisions: Treat tags as branches
        username_style: How change authors are reported
        submodule_checkout: Check out submodules
        user_for_tags: Identity used for labeling (``Name <email>``)
        server_side_auto_crlf: Convert line endings on server side checkout
        agent_git_path: Git executable on the agent
        agent_clean_policy: When ``git clean`` runs on the agent
        agent_clean_files_policy: What ``git clean`` removes
        use_alternates: Use agent mirrors as alternates
        modification_check_interval: Polling interval in seconds
        ignore_known_hosts: Skip known hosts verification
    """

    id: str
    url: str
    auth: AuthMethod
    uuid: Optional[str] = None
    name: Optional[str] = None
    push_url: Optional[str] = None
    branch: str = "refs/heads/master"
    branch_spec: Optional[Sequence[str]] = None
    report_tag_revisions: bool = False
    username_style: Union[UsernameStyle, str] = UsernameStyle.USERID
    submodule_checkout: bool = False
    user_for_tags: Optional[str] = None
    server_side_auto_crlf: bool = False
    agent_git_path: Optional[str] = None
    agent_clean_policy: Union[AgentCleanPolicy, str] = AgentCleanPolicy.ALWAYS
    agent_clean_files_policy: Union[AgentCleanFilesPolicy, str] = (
        AgentCleanFilesPolicy.ALL_UNTRACKED
    )
    use_alternates: bool = True
    modification_check_interval: Optional[int] = None
    ignore_known_hosts: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("VCS root id cannot be empty")
        if not self.url:
            raise ConfigurationError("VCS root url cannot be empty")
        if self.modification_check_interval is not None and self.modification_check_interval <= 0:
            raise ConfigurationError("modification_check_interval must be positive")


class GitVcsRoot(BaseVcsRoot):
    """Uses git as the version control system.

    ```python
    p.git_vcs_root(GitVcsRootProps(
        id="MyRepo",
        url="git@github.com:acme/app.git",
        auth=UploadedSshKeyAuth(key_name="deploy-key"),
    ))
    ```
    """

    vcs_type = "jetbrains.git"
    props: GitVcsRootProps

    def to_xml(self) -> XmlDocument:
        props = self.props

        def build(x: XmlElement) -> None:
            if props.modification_check_interval is not None:
                x.node("modification-check-interval", str(props.modification_check_interval))

            add_param(x, "url", props.url)
            if props.push_url is not None:
                add_param(x, "pushUrl", props.push_url)
            add_param(x, "branch", props.branch)
            add_lines_param(x, "teamcity:branchSpec", props.branch_spec)
            add_param(x, "reportTagRevisions", bool_str(props.report_tag_revisions))
            add_param(
                x, "usernameStyle", choice(UsernameStyle, props.username_style, "username_style")
            )
            add_param(x, "submoduleCheckout", bool_str(props.submodule_checkout))
            if props.user_for_tags is not None:
                add_param(x, "userForTags", props.user_for_tags)
            add_param(x, "serverSideAutoCrlf", bool_str(props.server_side_auto_crlf))
            if props.agent_git_path is not None:
                add_param(x, "agentGitPath", props.agent_git_path)
            add_param(
                x,
                "agentCleanPolicy",
                choice(AgentCleanPolicy, props.agent_clean_policy, "agent_clean_policy"),
            )
            add_param(
                x,
                "agentCleanFilesPolicy",
                choice(
                    AgentCleanFilesPolicy,
                    props.agent_clean_files_policy,
                    "agent_clean_files_policy",
                ),
            )
            add_param(x, "useAlternates", bool_str(props.use_alternates))
            add_param(x, "ignoreKnownHosts", bool_str(props.ignore_known_hosts))

            add_param(x, "authMethod", props.auth.type)
            if props.auth.username is not None:
                add_param(x, "username", props.auth.username)
            for name, value in props.auth.params():
                add_param(x, name, value)

        return self._base_to_xml(build)


Project.attach_extension("git_vcs_root", GitVcsRoot)
