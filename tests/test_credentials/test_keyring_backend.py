"""Tests for the keyring-backed secure store."""

from unittest.mock import MagicMock, patch

import pytest
from keyring.backends import fail
from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError

from stax_credentials.credentials import (
    BackendNotAvailableError,
    CredentialError,
    KeyringStore,
    SecretNotFoundError,
)

SERVICE = "com.firecrown.stax.github"


class TestKeyringStore:
    """Test KeyringStore functionality."""

    @pytest.fixture
    def store(self):
        """Create KeyringStore instance."""
        return KeyringStore()

    def test_store_name(self, store):
        """Test store name property."""
        assert store.name == "keyring"

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_available_with_real_backend(self, mock_keyring, store):
        """Test store reports available when a working backend is configured."""
        mock_keyring.get_keyring.return_value = MagicMock()

        assert store.available is True

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_unavailable_with_fail_backend(self, mock_keyring, store):
        """Test store reports unavailable on headless systems."""
        mock_keyring.get_keyring.return_value = fail.Keyring()

        assert store.available is False

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", False)
    def test_unavailable_when_keyring_not_installed(self, store):
        """Test store reports unavailable when keyring is missing."""
        assert store.available is False

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_unavailable_when_keyring_fails(self, mock_keyring, store):
        """Test store reports unavailable when the backend fails to initialize."""
        mock_keyring.get_keyring.side_effect = Exception("Keyring failed")

        assert store.available is False

    @pytest.mark.parametrize("operation", ["store", "retrieve", "delete"])
    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", False)
    def test_operations_raise_when_unavailable(self, store, operation):
        """Test every operation refuses when keyring is unavailable."""
        args = (SERVICE, "acme", "token") if operation == "store" else (SERVICE, "acme")

        with pytest.raises(BackendNotAvailableError) as exc_info:
            getattr(store, operation)(*args)

        assert exc_info.value.operation == operation
        assert exc_info.value.suggestion is not None

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_store_replaces_existing_item(self, mock_keyring, store):
        """Test store deletes any existing item before writing."""
        mock_keyring.get_keyring.return_value = MagicMock()

        store.store(SERVICE, "acme", "ghp_abc123")

        names = [c[0] for c in mock_keyring.mock_calls]
        assert names.index("delete_password") < names.index("set_password")
        mock_keyring.delete_password.assert_called_once_with(SERVICE, "acme")
        mock_keyring.set_password.assert_called_once_with(SERVICE, "acme", "ghp_abc123")

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_store_when_nothing_to_replace(self, mock_keyring, store):
        """Test store proceeds when there is no existing item."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.delete_password.side_effect = PasswordDeleteError("not found")

        store.store(SERVICE, "acme", "ghp_abc123")

        mock_keyring.set_password.assert_called_once_with(SERVICE, "acme", "ghp_abc123")

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_store_empty_secret_rejected(self, mock_keyring, store):
        """Test store rejects an empty secret."""
        mock_keyring.get_keyring.return_value = MagicMock()

        with pytest.raises(ValueError, match="cannot be empty"):
            store.store(SERVICE, "acme", "")

        mock_keyring.set_password.assert_not_called()

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_store_keyring_error(self, mock_keyring, store):
        """Test store wraps keyring errors."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.set_password.side_effect = KeyringError("Access denied")

        with pytest.raises(CredentialError) as exc_info:
            store.store(SERVICE, "acme", "ghp_abc123")

        assert "Failed to store secret" in str(exc_info.value)
        assert exc_info.value.reference == f"{SERVICE}/acme"

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_retrieve_success(self, mock_keyring, store):
        """Test successful secret retrieval."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.get_password.return_value = "ghp_abc123"

        assert store.retrieve(SERVICE, "acme") == "ghp_abc123"
        mock_keyring.get_password.assert_called_once_with(SERVICE, "acme")

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_retrieve_not_found(self, mock_keyring, store):
        """Test a missing item raises SecretNotFoundError."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.get_password.return_value = None

        with pytest.raises(SecretNotFoundError):
            store.retrieve(SERVICE, "acme")

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_retrieve_keyring_error_is_not_not_found(self, mock_keyring, store):
        """Test a locked keychain is reported as a failure, not a miss."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.get_password.side_effect = KeyringError("Keychain locked")

        with pytest.raises(CredentialError) as exc_info:
            store.retrieve(SERVICE, "acme")

        assert not isinstance(exc_info.value, SecretNotFoundError)
        assert "Keychain locked" in str(exc_info.value)

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_retrieve_no_keyring_error(self, mock_keyring, store):
        """Test NoKeyringError maps to BackendNotAvailableError."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.get_password.side_effect = NoKeyringError("No backend")

        with pytest.raises(BackendNotAvailableError) as exc_info:
            store.retrieve(SERVICE, "acme")

        assert exc_info.value.operation == "retrieve"

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_retrieve_unexpected_error(self, mock_keyring, store):
        """Test unexpected backend errors are wrapped."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.get_password.side_effect = RuntimeError("D-Bus went away")

        with pytest.raises(CredentialError, match="Keyring backend error"):
            store.retrieve(SERVICE, "acme")

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_delete_success(self, mock_keyring, store):
        """Test successful deletion."""
        mock_keyring.get_keyring.return_value = MagicMock()

        assert store.delete(SERVICE, "acme") is True
        mock_keyring.delete_password.assert_called_once_with(SERVICE, "acme")

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_delete_not_found(self, mock_keyring, store):
        """Test deleting a missing item returns False."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.delete_password.side_effect = PasswordDeleteError("Not found")

        assert store.delete(SERVICE, "acme") is False

    @patch("stax_credentials.credentials.keyring_backend.KEYRING_AVAILABLE", True)
    @patch("stax_credentials.credentials.keyring_backend.keyring")
    def test_delete_keyring_error(self, mock_keyring, store):
        """Test delete wraps keyring errors."""
        mock_keyring.get_keyring.return_value = MagicMock()
        mock_keyring.delete_password.side_effect = KeyringError("Access denied")

        with pytest.raises(CredentialError, match="Failed to delete secret"):
            store.delete(SERVICE, "acme")
