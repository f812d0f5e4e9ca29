"""Custom exception hierarchy for stax-credentials.

This module defines a structured exception hierarchy that enables
precise error handling and user-friendly error messages for credential
resolution and diagnostics.

Exception Hierarchy:
    StaxCredentialsError (base)
    ├── ConfigurationError
    └── CredentialError
        ├── BackendNotAvailableError
        ├── SecretNotFoundError
        ├── CredentialNotFoundError
        │   ├── SSHKeyNotFoundError
        │   ├── APICredentialsNotFoundError
        │   └── AccessTokenNotFoundError
        ├── CredentialFormatError
        └── CredentialIOError

Example Usage:
    >>> from stax_credentials.exceptions import CredentialNotFoundError
    >>> try:
    ...     resolver.resolve_access_token("acme")
    ... except CredentialNotFoundError as e:
    ...     print("\\n".join(e.tried))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stax_credentials.enums import CredentialKind
    from stax_credentials.models.credentials import ResolutionAttempt


class StaxCredentialsError(Exception):
    """Base exception for all stax-credentials errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(StaxCredentialsError):
    """Settings could not be loaded or failed validation."""

    pass


class CredentialError(StaxCredentialsError):
    """Credential-related errors.

    Base class for everything raised while storing, loading or resolving
    a credential.

    Attributes:
        message: Human-readable error description
        reference: Where the failure happened (e.g., "com.firecrown.stax.github/acme")
        suggestion: Optional suggestion for resolution
    """

    def __init__(
        self,
        message: str,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            reference: The credential location that failed
            suggestion: Optional suggestion for resolution
        """
        self.reference = reference
        self.suggestion = suggestion

        full_message = message
        if reference:
            full_message = f"{message} (reference: {reference})"
        if suggestion:
            full_message = f"{full_message}\nSuggestion: {suggestion}"

        super().__init__(full_message)
        # Preserve original message (super sets self.message to full_message)
        self.message = message


class BackendNotAvailableError(CredentialError):
    """Native secure storage is not available on this system or build.

    Attributes:
        operation: Name of the operation that was refused (e.g., "store")
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        reference: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.operation = operation
        super().__init__(message, reference=reference, suggestion=suggestion)


class SecretNotFoundError(CredentialError):
    """No item matches the requested (namespace, account) pair."""

    pass


class CredentialFormatError(CredentialError):
    """Credential data is absent, unparseable or missing required fields."""

    pass


class CredentialIOError(CredentialError):
    """Filesystem error while reading or writing credential material."""

    pass


class CredentialNotFoundError(CredentialError):
    """Every source was exhausted without producing a credential.

    Attributes:
        kind: The credential kind that was being resolved
        identifier: Install, organization or account the lookup was for
        attempts: Ordered record of every source consulted
        last_error: Most recently observed underlying error, if any
    """

    def __init__(
        self,
        message: str,
        kind: CredentialKind,
        identifier: str,
        attempts: list[ResolutionAttempt],
        last_error: BaseException | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.kind = kind
        self.identifier = identifier
        self.attempts = list(attempts)
        self.last_error = last_error

        detail = message
        if self.attempts:
            detail += "\n\nTried:" + "".join(f"\n  - {a.description}" for a in self.attempts)
        if last_error is not None:
            detail += f"\n\nLast error: {last_error}"

        super().__init__(detail, suggestion=suggestion)
        self.message = message

    @property
    def tried(self) -> list[str]:
        """Descriptions of the attempted sources, in the order they were tried."""
        return [attempt.description for attempt in self.attempts]


class SSHKeyNotFoundError(CredentialNotFoundError):
    """No SSH private key could be located."""

    pass


class APICredentialsNotFoundError(CredentialNotFoundError):
    """No complete API user/password pair could be located."""

    pass


class AccessTokenNotFoundError(CredentialNotFoundError):
    """No access token could be located."""

    pass
