"""
Settings for credential resolution using Pydantic.

Every filesystem location the resolver and diagnostics touch is derived
from an injected home directory, so tests and embedding tools can point
the whole subsystem at an isolated root.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stax_credentials.exceptions import ConfigurationError

DEFAULT_SSH_GATEWAY = "ssh.wpengine.net"
CONFIG_DIR_NAME = ".stax"
CREDENTIALS_FILE_NAME = "credentials.yml"

# Scanned in this order: RSA, Ed25519, ECDSA
DEFAULT_SSH_KEY_NAMES = ("id_rsa", "id_ed25519", "id_ecdsa")


class CredentialSettings(BaseSettings):
    """Locations and switches for credential resolution.

    Reads ``STAX_HOME``, ``STAX_CREDENTIALS_FILE``, ``STAX_PROBE_NATIVE_STORE``
    and ``STAX_DEFAULT_SSH_GATEWAY`` from the environment when set.
    """

    model_config = SettingsConfigDict(
        env_prefix="STAX_",
        case_sensitive=False,
        extra="ignore",
    )

    home: Path = Field(default_factory=Path.home, description="Base directory standing in for the user's home")
    credentials_file: Path | None = Field(
        default=None, description="Override for the credentials file (default: <home>/.stax/credentials.yml)"
    )
    probe_native_store: bool = Field(
        default=True,
        description="Run the native-store round-trip probe. When false, native storage is treated as unavailable.",
    )
    default_ssh_gateway: str = Field(default=DEFAULT_SSH_GATEWAY, description="SSH gateway used when none is set")

    @field_validator("home", "credentials_file", mode="before")
    @classmethod
    def _expand_user(cls, value: Any) -> Any:
        if isinstance(value, str) and value.startswith("~"):
            return Path(value).expanduser()
        return value

    @field_validator("default_ssh_gateway")
    @classmethod
    def _gateway_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("default_ssh_gateway cannot be blank")
        return value.strip()

    @classmethod
    def load(cls, **overrides: Any) -> CredentialSettings:
        """Build settings from the environment plus explicit overrides.

        Raises:
            ConfigurationError: If a value fails validation
        """
        try:
            return cls(**overrides)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid credential settings: {e}") from e

    @property
    def config_dir(self) -> Path:
        return self.home / CONFIG_DIR_NAME

    @property
    def credentials_path(self) -> Path:
        """Path of the YAML credentials file."""
        if self.credentials_file is not None:
            return self.credentials_file
        return self.config_dir / CREDENTIALS_FILE_NAME

    @property
    def ssh_dir(self) -> Path:
        return self.home / ".ssh"

    @property
    def default_ssh_key_paths(self) -> list[Path]:
        """Conventional private key locations, in scan order."""
        return [self.ssh_dir / name for name in DEFAULT_SSH_KEY_NAMES]

    @property
    def primary_ssh_key_path(self) -> Path:
        """The RSA key path, which diagnostics inspect for permissions."""
        return self.default_ssh_key_paths[0]

    def expand_path(self, path: str | Path) -> Path:
        """Expand a leading ``~`` against the configured home directory.

        Example:
            >>> CredentialSettings(home=Path("/tmp/h")).expand_path("~/.ssh/id_rsa")
            PosixPath('/tmp/h/.ssh/id_rsa')
        """
        text = str(path)
        if text == "~":
            return self.home
        if text.startswith("~/"):
            return self.home / text[2:]
        return Path(text)
