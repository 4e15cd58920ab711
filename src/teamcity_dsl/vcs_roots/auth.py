"""Authentication methods for VCS roots.

Each method carries a ``type`` discriminant matching the server's
``authMethod`` value and knows which extra params it contributes.
"""

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple, Union

from teamcity_dsl.shared.errors import ConfigurationError

SECURE_VALUE_PREFIX = "credentialsJSON:"


def _check_secure(value: str, field_name: str) -> None:
    if not value.startswith(SECURE_VALUE_PREFIX):
        raise ConfigurationError(
            f"{field_name} must be a secure token reference starting with "
            f"'{SECURE_VALUE_PREFIX}'"
        )


@dataclass(frozen=True)
class AnonymousAuth:
    """No credentials, for public repositories."""

    type: ClassVar[str] = "ANONYMOUS"

    @property
    def username(self) -> Optional[str]:
        return None

    def params(self) -> List[Tuple[str, str]]:
        return []


@dataclass(frozen=True)
class PasswordAuth:
    """Username with a password or access token stored as a secure value."""

    secret: str
    username: Optional[str] = None

    type: ClassVar[str] = "PASSWORD"

    def __post_init__(self) -> None:
        _check_secure(self.secret, "secret")

    def params(self) -> List[Tuple[str, str]]:
        return [("secure:password", self.secret)]


@dataclass(frozen=True)
class CustomSshKeyAuth:
    """Private key file stored on the agent at ``path``."""

    path: str
    username: Optional[str] = None
    passphrase: Optional[str] = None

    type: ClassVar[str] = "PRIVATE_KEY_FILE"

    def __post_init__(self) -> None:
        if self.passphrase is not None:
            _check_secure(self.passphrase, "passphrase")

    def params(self) -> List[Tuple[str, str]]:
        params = [("privateKeyPath", self.path)]
        if self.passphrase is not None:
            params.append(("secure:passphrase", self.passphrase))
        return params


@dataclass(frozen=True)
class DefaultSshKeyAuth:
    """The agent's default private key (``~/.ssh/id_rsa`` and friends)."""

    username: Optional[str] = None

    type: ClassVar[str] = "PRIVATE_KEY_DEFAULT"

    def params(self) -> List[Tuple[str, str]]:
        return []


@dataclass(frozen=True)
class UploadedSshKeyAuth:
    """A key uploaded to the project under ``key_name``."""

    key_name: str
    username: Optional[str] = None

    type: ClassVar[str] = "TEAMCITY_SSH_KEY"

    def params(self) -> List[Tuple[str, str]]:
        return [("teamcitySshKey", self.key_name)]


AuthMethod = Union[
    AnonymousAuth,
    PasswordAuth,
    CustomSshKeyAuth,
    DefaultSshKeyAuth,
    UploadedSshKeyAuth,
]
