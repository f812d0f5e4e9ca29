"""OS-level secure storage using the system keyring.

Platform Support:
- macOS: Keychain
- Linux: Secret Service API (GNOME Keyring, KWallet)
- Windows: Windows Credential Locker
"""

import logging

try:
    import keyring
    from keyring.backends import fail
    from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError

    KEYRING_AVAILABLE = True
except ImportError:
    KEYRING_AVAILABLE = False

from ..exceptions import BackendNotAvailableError, CredentialError, SecretNotFoundError

logger = logging.getLogger(__name__)

_INSTALL_SUGGESTION = "Install keyring with a working backend, or use environment variables / ~/.stax/credentials.yml"


class KeyringStore:
    """Native secure storage backed by the ``keyring`` package.

    ``store`` always deletes any existing item before adding the new one,
    so the item is recreated with the backend's current access policy
    rather than amended in place.

    Example:
        >>> store = KeyringStore()
        >>> store.store("com.firecrown.stax.github", "acme", "ghp_abc123")
        >>> store.retrieve("com.firecrown.stax.github", "acme")
        'ghp_abc123'
    """

    @property
    def name(self) -> str:
        return "keyring"

    @property
    def available(self) -> bool:
        """Check if a usable keyring backend is configured.

        Returns False if:
        - keyring package not installed
        - Only the fail backend is configured (headless systems)
        - Backend fails to initialize
        """
        if not KEYRING_AVAILABLE:
            return False

        try:
            return not isinstance(keyring.get_keyring(), fail.Keyring)
        except Exception as e:
            logger.debug(f"Keyring not available: {e}")
            return False

    def _require_available(self, operation: str) -> None:
        if not self.available:
            raise BackendNotAvailableError(
                f"Keyring backend is not available for {operation} operation",
                operation=operation,
                suggestion=_INSTALL_SUGGESTION,
            )

    def store(self, service: str, account: str, secret: str) -> None:
        """Store a secret, replacing any existing item.

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If keyring operation fails
        """
        self._require_available("store")

        if not secret:
            raise ValueError("Secret value cannot be empty")

        self._delete_quietly(service, account)

        try:
            keyring.set_password(service, account, secret)
            logger.debug(f"Stored secret in keyring: {service}/{account}")
        except NoKeyringError as e:
            raise BackendNotAvailableError(
                f"Keyring refused store: {e}", operation="store", reference=f"{service}/{account}"
            ) from e
        except KeyringError as e:
            raise CredentialError(f"Failed to store secret: {e}", reference=f"{service}/{account}") from e
        except Exception as e:
            raise CredentialError(f"Keyring backend error: {e}", reference=f"{service}/{account}") from e

    def retrieve(self, service: str, account: str) -> str:
        """Retrieve a secret from the keyring.

        Raises:
            SecretNotFoundError: If no item matches
            BackendNotAvailableError: If keyring is not available
            CredentialError: If keyring operation fails
        """
        self._require_available("retrieve")

        try:
            secret = keyring.get_password(service, account)
        except NoKeyringError as e:
            raise BackendNotAvailableError(
                f"Keyring refused retrieve: {e}", operation="retrieve", reference=f"{service}/{account}"
            ) from e
        except KeyringError as e:
            raise CredentialError(f"Keyring operation failed: {e}", reference=f"{service}/{account}") from e
        except Exception as e:
            raise CredentialError(f"Keyring backend error: {e}", reference=f"{service}/{account}") from e

        if secret is None:
            raise SecretNotFoundError(f"No secret found for {service}/{account}", reference=f"{service}/{account}")

        logger.debug(f"Retrieved secret from keyring: {service}/{account}")
        return secret

    def delete(self, service: str, account: str) -> bool:
        """Delete a secret from the keyring.

        Returns:
            True if deleted, False if not found

        Raises:
            BackendNotAvailableError: If keyring is not available
            CredentialError: If keyring operation fails
        """
        self._require_available("delete")

        try:
            keyring.delete_password(service, account)
            logger.debug(f"Deleted secret from keyring: {service}/{account}")
            return True

        except PasswordDeleteError:
            # Item doesn't exist - not an error
            return False

        except NoKeyringError as e:
            raise BackendNotAvailableError(
                f"Keyring refused delete: {e}", operation="delete", reference=f"{service}/{account}"
            ) from e
        except KeyringError as e:
            raise CredentialError(f"Failed to delete secret: {e}", reference=f"{service}/{account}") from e
        except Exception as e:
            raise CredentialError(f"Keyring backend error: {e}", reference=f"{service}/{account}") from e

    def _delete_quietly(self, service: str, account: str) -> None:
        # Superseding a missing item is fine; a failed delete surfaces on the write
        try:
            keyring.delete_password(service, account)
        except Exception as e:
            logger.debug(f"No existing keyring item replaced for {service}/{account}: {e}")
