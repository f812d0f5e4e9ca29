"""Per-kind credential storage on top of a SecureStore.

Each credential kind lives under its own service namespace; the account
is the install, organization or key name the credential belongs to.
API credentials are stored as one JSON secret so the four fields stay
together.
"""

from __future__ import annotations

import json

import structlog

from ..enums import CredentialKind
from ..exceptions import CredentialFormatError
from ..models.credentials import ServiceAPICredentials
from .backend import SecureStore

log = structlog.get_logger(__name__)


class NativeCredentialStore:
    """Typed get/set/delete for each credential kind.

    Example:
        >>> native = NativeCredentialStore(create_secure_store())
        >>> native.set_access_token("acme", "ghp_abc123")
        >>> native.get_access_token("acme")
        'ghp_abc123'
    """

    def __init__(self, store: SecureStore) -> None:
        self.store = store

    # API credentials

    def get_api_credentials(self, install: str) -> ServiceAPICredentials:
        """Load API credentials for an install.

        Raises:
            SecretNotFoundError: If nothing is stored for the install
            CredentialFormatError: If the stored payload cannot be parsed
        """
        namespace = CredentialKind.SERVICE_API.namespace
        payload = self.store.retrieve(namespace, install)
        try:
            return ServiceAPICredentials.from_json(payload)
        except (ValueError, json.JSONDecodeError) as e:
            raise CredentialFormatError(
                f"Failed to parse stored API credentials: {e}", reference=f"{namespace}/{install}"
            ) from e

    def set_api_credentials(self, install: str, credentials: ServiceAPICredentials) -> None:
        self.store.store(CredentialKind.SERVICE_API.namespace, install, credentials.to_json())
        log.info("native_credentials_stored", kind=str(CredentialKind.SERVICE_API), account=install)

    def delete_api_credentials(self, install: str) -> bool:
        return self.store.delete(CredentialKind.SERVICE_API.namespace, install)

    # Access tokens

    def get_access_token(self, organization: str) -> str:
        return self.store.retrieve(CredentialKind.ACCESS_TOKEN.namespace, organization)

    def set_access_token(self, organization: str, token: str) -> None:
        self.store.store(CredentialKind.ACCESS_TOKEN.namespace, organization, token)
        log.info("native_credentials_stored", kind=str(CredentialKind.ACCESS_TOKEN), account=organization)

    def delete_access_token(self, organization: str) -> bool:
        return self.store.delete(CredentialKind.ACCESS_TOKEN.namespace, organization)

    # SSH keys

    def get_ssh_key(self, account: str) -> bytes:
        return self.store.retrieve(CredentialKind.SSH_KEY.namespace, account).encode("utf-8")

    def set_ssh_key(self, account: str, private_key: bytes | str) -> None:
        if isinstance(private_key, bytes):
            private_key = private_key.decode("utf-8")
        self.store.store(CredentialKind.SSH_KEY.namespace, account, private_key)
        log.info("native_credentials_stored", kind=str(CredentialKind.SSH_KEY), account=account)

    def delete_ssh_key(self, account: str) -> bool:
        return self.store.delete(CredentialKind.SSH_KEY.namespace, account)

    def get(self, kind: CredentialKind, identifier: str) -> ServiceAPICredentials | str | bytes:
        """Load a credential of any kind."""
        if kind is CredentialKind.SERVICE_API:
            return self.get_api_credentials(identifier)
        if kind is CredentialKind.ACCESS_TOKEN:
            return self.get_access_token(identifier)
        return self.get_ssh_key(identifier)

    def delete(self, kind: CredentialKind, identifier: str) -> bool:
        return self.store.delete(kind.namespace, identifier)


def storage_instructions() -> str:
    """Help text for systems where native secure storage is unavailable."""
    return """
Native secure storage is not available on this system.

You have two options to store your credentials:

OPTION 1: Environment Variables (Recommended for CI/CD)
--------------------------------------------------------
Add these to your shell profile (~/.zshrc or ~/.bashrc):

    export WPENGINE_API_USER="your-api-username"
    export WPENGINE_API_PASSWORD="your-api-password"
    export WPENGINE_SSH_GATEWAY="ssh.wpengine.net"
    export GITHUB_TOKEN="ghp_your_token_here"
    export STAX_SSH_PRIVATE_KEY="~/.ssh/id_ed25519"

OPTION 2: Credentials File (Recommended for Development)
--------------------------------------------------------
Create ~/.stax/credentials.yml with:

    wpengine:
      api_user: "your-api-username"
      api_password: "your-api-password"
      ssh_gateway: "ssh.wpengine.net"

    github:
      token: "ghp_your_token_here"

    ssh:
      private_key_path: "~/.ssh/id_ed25519"

Secure the file:
    chmod 600 ~/.stax/credentials.yml

SECURITY NOTE:
--------------
- The credentials file is not encrypted; keep it out of version control
- Never commit credentials to a repository
"""
