"""Composition tree shared by all configuration kinds."""

from .base import Construct, FragmentCallback, XmlOutput
from .extensions import ExtensionRegistry, extension_registry

__all__ = [
    "Construct",
    "FragmentCallback",
    "XmlOutput",
    "ExtensionRegistry",
    "extension_registry",
]
