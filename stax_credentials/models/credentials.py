"""
Credential value types and the on-disk credentials document.

Resolved credentials are plain frozen dataclasses: once the resolver hands
one back it cannot be amended. The credentials file is modelled with
Pydantic so that loading it validates structure in one step.

Example:
    A credentials file on disk::

        wpengine:
          api_user: "deploy-bot"
          api_password: "s3cret"
          ssh_gateway: "ssh.wpengine.net"
        github:
          token: "ghp_example"
        ssh:
          private_key_path: "~/.ssh/id_ed25519"
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from stax_credentials.config.settings import DEFAULT_SSH_GATEWAY
from stax_credentials.enums import AttemptOutcome, CredentialSource


@dataclass(frozen=True)
class ServiceAPICredentials:
    """WPEngine API credentials plus the SSH identity used for file transfer."""

    api_user: str
    api_password: str
    ssh_user: str = ""
    ssh_gateway: str = DEFAULT_SSH_GATEWAY

    def __post_init__(self) -> None:
        if not self.ssh_gateway:
            object.__setattr__(self, "ssh_gateway", DEFAULT_SSH_GATEWAY)

    @property
    def complete(self) -> bool:
        """Whether both the API user and password are populated."""
        return bool(self.api_user and self.api_password)

    def to_dict(self) -> dict[str, str]:
        return {
            "api_user": self.api_user,
            "api_password": self.api_password,
            "ssh_user": self.ssh_user,
            "ssh_gateway": self.ssh_gateway,
        }

    def to_json(self) -> str:
        """Serialize for storage as a single native-store secret."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: str) -> ServiceAPICredentials:
        """Parse the JSON form written by :meth:`to_json`.

        Raises:
            ValueError: If the payload is not a JSON object
        """
        payload = json.loads(data)
        if not isinstance(payload, dict):
            raise ValueError("API credentials payload must be a JSON object")
        return cls(
            api_user=str(payload.get("api_user") or ""),
            api_password=str(payload.get("api_password") or ""),
            ssh_user=str(payload.get("ssh_user") or ""),
            ssh_gateway=str(payload.get("ssh_gateway") or ""),
        )

    def __repr__(self) -> str:
        # Keep the password out of logs and tracebacks
        return (
            f"ServiceAPICredentials(api_user={self.api_user!r}, api_password='***', "
            f"ssh_user={self.ssh_user!r}, ssh_gateway={self.ssh_gateway!r})"
        )


@dataclass
class ResolutionAttempt:
    """One source consulted during a single resolve() call."""

    source: CredentialSource
    description: str
    outcome: AttemptOutcome
    error: BaseException | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "source": self.source.value,
            "description": self.description,
            "outcome": self.outcome.value,
        }
        if self.error is not None:
            result["error"] = str(self.error)
        return result


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        # YAML "key:" with no value loads as None
        if value is None:
            return ""
        if isinstance(value, (bool, int, float)):
            return str(value).lower() if isinstance(value, bool) else str(value)
        return value


class WPEngineSection(_Section):
    """``wpengine:`` section of the credentials file."""

    api_user: str = ""
    api_password: str = ""
    ssh_user: str = ""
    ssh_gateway: str = ""


class GitHubSection(_Section):
    """``github:`` section of the credentials file."""

    token: str = ""


class SSHSection(_Section):
    """``ssh:`` section of the credentials file."""

    private_key_path: str = ""


class ConfigDocument(BaseModel):
    """The per-user credentials file, one section per credential kind."""

    model_config = ConfigDict(extra="ignore")

    wpengine: WPEngineSection = Field(default_factory=WPEngineSection)
    github: GitHubSection = Field(default_factory=GitHubSection)
    ssh: SSHSection = Field(default_factory=SSHSection)

    @field_validator("wpengine", "github", "ssh", mode="before")
    @classmethod
    def _null_section(cls, value: Any) -> Any:
        return {} if value is None else value

