"""Abstract protocol for native secure-storage backends."""

from typing import Protocol


class SecureStore(Protocol):
    """Capability set over (service namespace, account) pairs.

    Callers always hold a SecureStore, whether or not the platform has
    native support; the unsupported case is a variant whose every
    operation raises BackendNotAvailableError.
    """

    @property
    def name(self) -> str:
        """Backend identifier (e.g., 'keyring', 'unavailable')."""
        ...

    @property
    def available(self) -> bool:
        """Cheap check that native support exists in this build/OS.

        This does not prove that a write will succeed; see CapabilityProbe.
        """
        ...

    def store(self, service: str, account: str, secret: str) -> None:
        """Store a secret, superseding any existing item for the same key.

        Raises:
            BackendNotAvailableError: If native storage is unavailable
            CredentialError: If the backend rejects the write
        """
        ...

    def retrieve(self, service: str, account: str) -> str:
        """Retrieve a secret.

        Raises:
            SecretNotFoundError: If no item matches
            BackendNotAvailableError: If native storage is unavailable
            CredentialError: If the backend fails
        """
        ...

    def delete(self, service: str, account: str) -> bool:
        """Delete a secret.

        Returns:
            True if an item was deleted, False if none existed

        Raises:
            BackendNotAvailableError: If native storage is unavailable
            CredentialError: If the backend fails
        """
        ...
