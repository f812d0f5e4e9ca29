"""Credential storage backends and fallback resolution.

Sources, in the order the resolver consults them:
    - Native secure storage via the system keyring (when usable)
    - Environment variables
    - The per-user credentials file (~/.stax/credentials.yml)
    - Default SSH key locations (SSH keys only)

Example:
    >>> from stax_credentials.credentials import FallbackResolver
    >>> resolver = FallbackResolver()
    >>> token = resolver.resolve_access_token("acme")
"""

from ..exceptions import (
    AccessTokenNotFoundError,
    APICredentialsNotFoundError,
    BackendNotAvailableError,
    CredentialError,
    CredentialFormatError,
    CredentialIOError,
    CredentialNotFoundError,
    SecretNotFoundError,
    SSHKeyNotFoundError,
)
from .backend import SecureStore
from .config_file import ConfigFileStore
from .environment_backend import EnvironmentBackend
from .factory import create_secure_store
from .key_validator import looks_like_private_key
from .keychain import NativeCredentialStore, storage_instructions
from .keyring_backend import KeyringStore
from .probe import CapabilityProbe, FixedProbe
from .resolver import FallbackResolver
from .stub_backend import UnavailableStore

__all__ = [
    "APICredentialsNotFoundError",
    "AccessTokenNotFoundError",
    "BackendNotAvailableError",
    "CapabilityProbe",
    "ConfigFileStore",
    "CredentialError",
    "CredentialFormatError",
    "CredentialIOError",
    "CredentialNotFoundError",
    "EnvironmentBackend",
    "FallbackResolver",
    "FixedProbe",
    "KeyringStore",
    "NativeCredentialStore",
    "SSHKeyNotFoundError",
    "SecretNotFoundError",
    "SecureStore",
    "UnavailableStore",
    "create_secure_store",
    "looks_like_private_key",
    "storage_instructions",
]
