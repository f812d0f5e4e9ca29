"""One-time selection of the secure-storage variant."""

import structlog

from . import keyring_backend
from .backend import SecureStore
from .keyring_backend import KeyringStore
from .stub_backend import UnavailableStore

log = structlog.get_logger(__name__)


def create_secure_store() -> SecureStore:
    """Return the native keyring store when usable, otherwise the stub.

    Called once when a resolver is built; nothing downstream checks the
    platform again.
    """
    if keyring_backend.KEYRING_AVAILABLE:
        store = KeyringStore()
        if store.available:
            log.debug("secure_store_selected", backend=store.name)
            return store

    log.debug("secure_store_selected", backend="unavailable")
    return UnavailableStore()
