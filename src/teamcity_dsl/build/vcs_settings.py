"""VCS roots attached to a build configuration."""

from dataclasses import dataclass
from typing import Sequence, Union

from teamcity_dsl.build.build import Build
from teamcity_dsl.construct import Construct
from teamcity_dsl.shared.errors import ConfigurationError
from teamcity_dsl.vcs_roots.base import BaseVcsRoot
from teamcity_dsl.xmltree import XmlElement


@dataclass(frozen=True)
class BuildVcsSettingsProps:
    """Attach a VCS root to a build.

    Attributes:
        vcs_root: The root or its id
        checkout_rules: Checkout rules such as ``+:src=>.``
    """

    vcs_root: Union[BaseVcsRoot, str]
    checkout_rules: Sequence[str] = ()

    def __post_init__(self) -> None:
        if not self.vcs_root_id:
            raise ConfigurationError("vcs_root cannot be empty")

    @property
    def vcs_root_id(self) -> str:
        if isinstance(self.vcs_root, BaseVcsRoot):
            return self.vcs_root.props.id
        return self.vcs_root


class BuildVcsSettings(Construct[BuildVcsSettingsProps]):
    def __init__(self, parent: Build, props: BuildVcsSettingsProps) -> None:
        super().__init__(parent, props)
        Construct.push(parent, "vcs_entries", self)

        def render_vcs_settings(x: XmlElement) -> None:
            settings = x.node("vcs-settings")
            for entry in parent.vcs_entries:
                settings.node(entry.to_xml())

        parent.register_fragment(BuildVcsSettings, render_vcs_settings)

    def to_xml(self) -> XmlElement:
        def build(x: XmlElement) -> None:
            for rule in self.props.checkout_rules:
                x.node("checkout-rule", {"rule": rule})

        return XmlElement("vcs-entry-ref", {"root-id": self.props.vcs_root_id}, build)


Build.attach_extension("vcs_settings", BuildVcsSettings)
