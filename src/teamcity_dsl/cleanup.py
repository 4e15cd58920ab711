"""Clean-up rules of a project or a build configuration.

```python
p.cleanup(lambda c: (
    c.artifacts(keep_days=7, patterns=["+:**/*"]),
    c.history(keep_builds=100),
))
```
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.construct import Construct
from teamcity_dsl.construct.helpers import add_lines_param, add_param, bool_str
from teamcity_dsl.project.project import Project
from teamcity_dsl.shared.errors import CleanupPolicyError
from teamcity_dsl.xmltree import XmlElement


class CleanupLevel(str, Enum):
    EVERYTHING = "EVERYTHING"
    HISTORY_ENTRY = "HISTORY_ENTRY"
    ARTIFACTS = "ARTIFACTS"


@dataclass(frozen=True)
class CleanupPolicy:
    """Keep the last ``keep_days`` days and/or ``keep_builds`` builds.

    ``patterns`` only applies to the ``ARTIFACTS`` level.
    """

    level: CleanupLevel
    keep_days: Optional[int] = None
    keep_builds: Optional[int] = None
    patterns: Optional[Sequence[str]] = None


@dataclass(frozen=True)
class CleanupProps:
    disable_cleanup_policies: bool = False
    prevent_dependencies_artifacts_from_cleanup: bool = False
    policies: Sequence[CleanupPolicy] = ()


class Cleanup(Construct[CleanupProps]):
    """Singleton ``<cleanup>`` block of a project or a build."""

    def __init__(
        self,
        parent: Union[Project, Build],
        props: Optional[CleanupProps] = None,
        builder: Optional[Callable[["Cleanup"], Any]] = None,
    ) -> None:
        props = props or CleanupProps()
        self.policies: List[CleanupPolicy] = list(props.policies)
        super().__init__(parent, props, builder)
        parent.claim_singleton("cleanup_rules", self)
        parent.register_fragment(Cleanup, lambda x: x.node(self.to_xml()))

    def everything(
        self, keep_days: Optional[int] = None, keep_builds: Optional[int] = None
    ) -> CleanupPolicy:
        return self._add_policy(CleanupPolicy(CleanupLevel.EVERYTHING, keep_days, keep_builds))

    def history(
        self, keep_days: Optional[int] = None, keep_builds: Optional[int] = None
    ) -> CleanupPolicy:
        return self._add_policy(
            CleanupPolicy(CleanupLevel.HISTORY_ENTRY, keep_days, keep_builds)
        )

    def artifacts(
        self,
        keep_days: Optional[int] = None,
        keep_builds: Optional[int] = None,
        patterns: Optional[Sequence[str]] = None,
    ) -> CleanupPolicy:
        return self._add_policy(
            CleanupPolicy(CleanupLevel.ARTIFACTS, keep_days, keep_builds, patterns)
        )

    def _add_policy(self, policy: CleanupPolicy) -> CleanupPolicy:
        self.policies.append(policy)
        return policy

    def to_xml(self) -> XmlElement:
        """Render the block.

        Raises:
            CleanupPolicyError: if a policy defines neither ``keep_days`` nor
                ``keep_builds``.
        """

        def build(x: XmlElement) -> None:
            options = x.node("options")
            add_param(
                options,
                "disableCleanupPolicies",
                bool_str(self.props.disable_cleanup_policies),
                tag="option",
            )
            add_param(
                options,
                "preventDependenciesArtifactsFromCleanup",
                bool_str(self.props.prevent_dependencies_artifacts_from_cleanup),
                tag="option",
            )

            for policy in self.policies:
                x.node(self._policy_to_xml(policy))

        return XmlElement("cleanup", build)

    @staticmethod
    def _policy_to_xml(policy: CleanupPolicy) -> XmlElement:
        if policy.keep_days is None and policy.keep_builds is None:
            raise CleanupPolicyError(
                "cleanup policy needs to define at least one of keep_days or keep_builds"
            )
        level = CleanupLevel(policy.level).value

        def build(x: XmlElement) -> None:
            parameters = x.node("parameters")
            if policy.keep_days is not None:
                add_param(parameters, "keepDays.count", str(policy.keep_days))
            if policy.keep_builds is not None:
                add_param(parameters, "keepBuilds.count", str(policy.keep_builds))
            if level == CleanupLevel.ARTIFACTS.value:
                add_lines_param(parameters, "artifactPatterns", policy.patterns)

        return XmlElement("policy", {"type": "daysAndBuilds", "cleanup-level": level}, build)


def _cleanup(
    parent: Union[Project, Build],
    props: Union[CleanupProps, Callable[[Cleanup], Any], None] = None,
    builder: Optional[Callable[[Cleanup], Any]] = None,
) -> Cleanup:
    # cleanup(builder) is accepted as a shorthand for cleanup(None, builder)
    if callable(props):
        return Cleanup(parent, None, props)
    return Cleanup(parent, props, builder)


Project.attach_extension("cleanup", _cleanup)
Build.attach_extension("cleanup", _cleanup)
