"""VCS roots and their authentication methods."""

from .auth import (
    AnonymousAuth,
    AuthMethod,
    CustomSshKeyAuth,
    DefaultSshKeyAuth,
    PasswordAuth,
    UploadedSshKeyAuth,
)
from .base import BaseVcsRoot
from .git import (
    AgentCleanFilesPolicy,
    AgentCleanPolicy,
    GitVcsRoot,
    GitVcsRootProps,
    UsernameStyle,
)

__all__ = [
    "AnonymousAuth",
    "AuthMethod",
    "CustomSshKeyAuth",
    "DefaultSshKeyAuth",
    "PasswordAuth",
    "UploadedSshKeyAuth",
    "BaseVcsRoot",
    "AgentCleanFilesPolicy",
    "AgentCleanPolicy",
    "GitVcsRoot",
    "GitVcsRootProps",
    "UsernameStyle",
]
