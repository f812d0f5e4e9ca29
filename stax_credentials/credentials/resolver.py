"""Resolve credentials by walking a fixed fallback chain of sources.

Every kind is looked up in the same order:

1. Native secure storage (when the capability probe says it works)
2. Environment variables
3. The credentials file (``~/.stax/credentials.yml``)
4. Default SSH key locations (SSH keys only)

The first source that yields a non-empty, valid value wins. Failures at
any single source are recorded and the walk continues; only when every
source is exhausted does the caller see an error, and that error lists
every source that was tried.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

import structlog

from ..config.settings import CredentialSettings
from ..enums import AttemptOutcome, CredentialKind, CredentialSource
from ..exceptions import (
    AccessTokenNotFoundError,
    APICredentialsNotFoundError,
    CredentialError,
    CredentialFormatError,
    CredentialIOError,
    SecretNotFoundError,
    SSHKeyNotFoundError,
)
from ..models.credentials import ConfigDocument, ResolutionAttempt, ServiceAPICredentials
from .backend import SecureStore
from .config_file import ConfigFileStore
from .environment_backend import (
    ACCESS_TOKEN_ENV_VAR,
    API_PASSWORD_ENV_VAR,
    API_USER_ENV_VAR,
    SSH_GATEWAY_ENV_VAR,
    SSH_KEY_ENV_VARS,
    SSH_USER_ENV_VAR,
    EnvironmentBackend,
)
from .factory import create_secure_store
from .key_validator import looks_like_key_material, looks_like_private_key
from .keychain import NativeCredentialStore
from .probe import CapabilityProbe, FixedProbe

log = structlog.get_logger(__name__)

T = TypeVar("T")

NATIVE_STORE_DESCRIPTION = "OS keyring"
DEFAULT_IDENTIFIER = "default"

Credential = bytes | ServiceAPICredentials | str


class _Trail:
    """Attempts recorded during one resolve() call."""

    def __init__(self, kind: CredentialKind) -> None:
        self.kind = kind
        self.attempts: list[ResolutionAttempt] = []
        self.last_error: BaseException | None = None

    def record(
        self,
        source: CredentialSource,
        description: str,
        outcome: AttemptOutcome,
        error: BaseException | None = None,
    ) -> None:
        self.attempts.append(ResolutionAttempt(source, description, outcome, error))
        # Most recent wins, regardless of severity
        if error is not None:
            self.last_error = error

        if outcome is AttemptOutcome.FOUND:
            log.info("credential_resolved", kind=str(self.kind), source=str(source), location=description)
        else:
            log.debug(
                "credential_source_skipped",
                kind=str(self.kind),
                source=str(source),
                location=description,
                outcome=str(outcome),
                error=str(error) if error else None,
            )


class FallbackResolver:
    """Locate SSH keys, API credentials and access tokens.

    All collaborators are injectable; by default the resolver selects the
    native or stub secure store once, reads ``os.environ`` and uses the
    credentials file named by ``settings``.

    Example:
        >>> resolver = FallbackResolver()
        >>> creds = resolver.resolve_api_credentials("mysite")
        >>> key = resolver.resolve_ssh_key()
        >>> token = resolver.resolve(CredentialKind.ACCESS_TOKEN, "acme")
    """

    def __init__(
        self,
        settings: CredentialSettings | None = None,
        store: SecureStore | None = None,
        probe: CapabilityProbe | FixedProbe | None = None,
        environ: Mapping[str, str] | None = None,
        config_store: ConfigFileStore | None = None,
        key_validator: Callable[[Path], bool] = looks_like_private_key,
    ) -> None:
        self.settings = settings or CredentialSettings.load()
        self.store = store if store is not None else create_secure_store()
        self.native = NativeCredentialStore(self.store)
        self.probe = probe or CapabilityProbe(self.store, enabled=self.settings.probe_native_store)
        self.environment = EnvironmentBackend(environ)
        self.config_store = config_store or ConfigFileStore(self.settings.credentials_path)
        self.key_validator = key_validator

    def with_probe(self, probe: CapabilityProbe | FixedProbe) -> FallbackResolver:
        """Copy of this resolver sharing every collaborator except the probe."""
        return FallbackResolver(
            settings=self.settings,
            store=self.store,
            probe=probe,
            environ=self.environment.environ,
            config_store=self.config_store,
            key_validator=self.key_validator,
        )

    @property
    def config_description(self) -> str:
        return f"Credentials file {self.config_store.path}"

    def resolve(self, kind: CredentialKind, identifier: str = DEFAULT_IDENTIFIER) -> Credential:
        """Resolve a credential of any kind.

        Returns:
            ``bytes`` for SSH keys, :class:`ServiceAPICredentials` for API
            credentials, ``str`` for access tokens

        Raises:
            CredentialNotFoundError: The kind-specific subclass, when every source is exhausted
        """
        if kind is CredentialKind.SSH_KEY:
            return self.resolve_ssh_key(identifier)
        if kind is CredentialKind.SERVICE_API:
            return self.resolve_api_credentials(identifier)
        return self.resolve_access_token(identifier)

    # -------------------------------------------------------------------------
    # SSH private key
    # -------------------------------------------------------------------------

    def resolve_ssh_key(self, account: str = DEFAULT_IDENTIFIER) -> bytes:
        """Resolve SSH private key material.

        Environment variables may hold a path to a key file or the key
        content itself. The credentials file holds a path.

        Raises:
            SSHKeyNotFoundError: If no source yields a valid key
        """
        trail = _Trail(CredentialKind.SSH_KEY)

        key = self._from_native(trail, account, self.native.get_ssh_key)
        if key:
            return key

        for var_name in SSH_KEY_ENV_VARS:
            description = f"Environment variable {var_name}"
            value = self.environment.get(var_name)
            if value is None:
                trail.record(CredentialSource.ENVIRONMENT_VARIABLE, description, AttemptOutcome.MISSING)
                continue
            if looks_like_key_material(value):
                trail.record(CredentialSource.ENVIRONMENT_VARIABLE, description, AttemptOutcome.FOUND)
                return value.encode("utf-8")
            key = self._read_key(trail, CredentialSource.ENVIRONMENT_VARIABLE, description, value)
            if key:
                return key

        document = self._load_document(trail)
        if document is not None:
            key_path = document.ssh.private_key_path
            if not key_path:
                trail.record(CredentialSource.CONFIG_FILE, self.config_description, AttemptOutcome.MISSING)
            else:
                key = self._read_key(trail, CredentialSource.CONFIG_FILE, self.config_description, key_path)
                if key:
                    return key

        for path in self.settings.default_ssh_key_paths:
            description = f"Default SSH key location {path}"
            key = self._read_key(trail, CredentialSource.DEFAULT_LOCATION, description, path, quiet=True)
            if key:
                return key

        raise SSHKeyNotFoundError(
            "SSH private key not found in any location",
            kind=CredentialKind.SSH_KEY,
            identifier=account,
            attempts=trail.attempts,
            last_error=trail.last_error,
            suggestion="Set STAX_SSH_PRIVATE_KEY to your key path or generate one with: ssh-keygen -t ed25519",
        )

    def _read_key(
        self,
        trail: _Trail,
        source: CredentialSource,
        description: str,
        raw_path: str | Path,
        quiet: bool = False,
    ) -> bytes | None:
        path = self.settings.expand_path(raw_path)

        if not self.key_validator(path):
            if quiet and not path.exists():
                trail.record(source, description, AttemptOutcome.MISSING)
            else:
                trail.record(
                    source,
                    description,
                    AttemptOutcome.INVALID,
                    CredentialFormatError(f"Not a readable private key: {path}", reference=str(path)),
                )
            return None

        try:
            key = path.read_bytes()
        except OSError as e:
            trail.record(
                source,
                description,
                AttemptOutcome.FAILED,
                CredentialIOError(f"Failed to read SSH key from {path}: {e}", reference=str(path)),
            )
            return None

        trail.record(source, description, AttemptOutcome.FOUND)
        return key

    # -------------------------------------------------------------------------
    # Service API credentials
    # -------------------------------------------------------------------------

    def resolve_api_credentials(self, install: str = DEFAULT_IDENTIFIER) -> ServiceAPICredentials:
        """Resolve WPEngine API credentials for an install.

        From the environment, the SSH user defaults to the install name and
        the gateway to the configured default.

        Raises:
            APICredentialsNotFoundError: If no source yields both API user and password
        """
        trail = _Trail(CredentialKind.SERVICE_API)

        credentials = self._from_native(trail, install, self.native.get_api_credentials)
        if credentials is not None:
            return credentials

        description = f"Environment variables ({API_USER_ENV_VAR}, {API_PASSWORD_ENV_VAR})"
        api_user = self.environment.get(API_USER_ENV_VAR)
        api_password = self.environment.get(API_PASSWORD_ENV_VAR)
        if api_user and api_password:
            trail.record(CredentialSource.ENVIRONMENT_VARIABLE, description, AttemptOutcome.FOUND)
            return ServiceAPICredentials(
                api_user=api_user,
                api_password=api_password,
                ssh_user=self.environment.get_or_default(SSH_USER_ENV_VAR, install),
                ssh_gateway=self.environment.get_or_default(SSH_GATEWAY_ENV_VAR, self.settings.default_ssh_gateway),
            )
        if api_user or api_password:
            missing = API_PASSWORD_ENV_VAR if api_user else API_USER_ENV_VAR
            trail.record(
                CredentialSource.ENVIRONMENT_VARIABLE,
                description,
                AttemptOutcome.INVALID,
                CredentialFormatError(f"{missing} is not set"),
            )
        else:
            trail.record(CredentialSource.ENVIRONMENT_VARIABLE, description, AttemptOutcome.MISSING)

        document = self._load_document(trail)
        if document is not None:
            section = document.wpengine
            if section.api_user and section.api_password:
                trail.record(CredentialSource.CONFIG_FILE, self.config_description, AttemptOutcome.FOUND)
                return ServiceAPICredentials(
                    api_user=section.api_user,
                    api_password=section.api_password,
                    ssh_user=section.ssh_user,
                    ssh_gateway=section.ssh_gateway or self.settings.default_ssh_gateway,
                )
            if section.api_user or section.api_password:
                trail.record(
                    CredentialSource.CONFIG_FILE,
                    self.config_description,
                    AttemptOutcome.INVALID,
                    CredentialFormatError(
                        "wpengine.api_user and wpengine.api_password must both be set",
                        reference=str(self.config_store.path),
                    ),
                )
            else:
                trail.record(CredentialSource.CONFIG_FILE, self.config_description, AttemptOutcome.MISSING)

        raise APICredentialsNotFoundError(
            f"WPEngine credentials not found for install '{install}'",
            kind=CredentialKind.SERVICE_API,
            identifier=install,
            attempts=trail.attempts,
            last_error=trail.last_error,
            suggestion=f"Export {API_USER_ENV_VAR} and {API_PASSWORD_ENV_VAR}, or add them to {self.config_store.path}",
        )

    # -------------------------------------------------------------------------
    # Access token
    # -------------------------------------------------------------------------

    def resolve_access_token(self, organization: str = DEFAULT_IDENTIFIER) -> str:
        """Resolve a GitHub access token for an organization.

        Raises:
            AccessTokenNotFoundError: If no source yields a token
        """
        trail = _Trail(CredentialKind.ACCESS_TOKEN)

        token = self._from_native(trail, organization, self.native.get_access_token)
        if token:
            return token

        description = f"Environment variable {ACCESS_TOKEN_ENV_VAR}"
        token = self.environment.get(ACCESS_TOKEN_ENV_VAR)
        if token:
            trail.record(CredentialSource.ENVIRONMENT_VARIABLE, description, AttemptOutcome.FOUND)
            return token
        trail.record(CredentialSource.ENVIRONMENT_VARIABLE, description, AttemptOutcome.MISSING)

        document = self._load_document(trail)
        if document is not None:
            if document.github.token:
                trail.record(CredentialSource.CONFIG_FILE, self.config_description, AttemptOutcome.FOUND)
                return document.github.token
            trail.record(CredentialSource.CONFIG_FILE, self.config_description, AttemptOutcome.MISSING)

        raise AccessTokenNotFoundError(
            f"GitHub token not found for organization '{organization}'",
            kind=CredentialKind.ACCESS_TOKEN,
            identifier=organization,
            attempts=trail.attempts,
            last_error=trail.last_error,
            suggestion=f"Export {ACCESS_TOKEN_ENV_VAR} or set github.token in {self.config_store.path}",
        )

    # -------------------------------------------------------------------------
    # Shared steps
    # -------------------------------------------------------------------------

    def _from_native(self, trail: _Trail, identifier: str, getter: Callable[[str], T]) -> T | None:
        """Native-store step; any failure moves on to the next source."""
        if not self.probe.is_secure_storage_available():
            trail.record(CredentialSource.NATIVE_STORE, NATIVE_STORE_DESCRIPTION, AttemptOutcome.UNAVAILABLE)
            return None

        try:
            value = getter(identifier)
        except SecretNotFoundError as e:
            trail.record(CredentialSource.NATIVE_STORE, NATIVE_STORE_DESCRIPTION, AttemptOutcome.MISSING, e)
            return None
        except CredentialError as e:
            # e.g. a locked keychain after a successful probe
            trail.record(CredentialSource.NATIVE_STORE, NATIVE_STORE_DESCRIPTION, AttemptOutcome.FAILED, e)
            return None

        if isinstance(value, ServiceAPICredentials) and not value.complete:
            trail.record(
                CredentialSource.NATIVE_STORE,
                NATIVE_STORE_DESCRIPTION,
                AttemptOutcome.INVALID,
                CredentialFormatError("Stored API credentials are missing the user or password"),
            )
            return None
        if not value:
            trail.record(CredentialSource.NATIVE_STORE, NATIVE_STORE_DESCRIPTION, AttemptOutcome.MISSING)
            return None

        trail.record(CredentialSource.NATIVE_STORE, NATIVE_STORE_DESCRIPTION, AttemptOutcome.FOUND)
        return value

    def _load_document(self, trail: _Trail) -> ConfigDocument | None:
        """Config-file step; returns None (after recording) if the file cannot be used."""
        try:
            return self.config_store.load()
        except CredentialError as e:
            outcome = AttemptOutcome.MISSING if not self.config_store.exists() else AttemptOutcome.FAILED
            trail.record(CredentialSource.CONFIG_FILE, self.config_description, outcome, e)
            return None
