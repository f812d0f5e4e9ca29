"""Native secure-storage capability detection."""

from __future__ import annotations

import secrets

import structlog

from ..enums import CredentialKind
from .backend import SecureStore

log = structlog.get_logger(__name__)

CANARY_ACCOUNT_PREFIX = "__stax_probe_"


class CapabilityProbe:
    """Decide whether native storage works by exercising it.

    Each probe writes a random canary secret under a random account name,
    reads it back and deletes it. Only a complete, matching round trip
    counts as available. The canary account never collides with a real
    install or organization name, nor with a concurrent probe.

    Args:
        store: The storage variant to exercise
        enabled: When False, skip the round trip and report unavailable
        namespace: Service namespace the canary is written under
    """

    def __init__(
        self,
        store: SecureStore,
        enabled: bool = True,
        namespace: str = CredentialKind.SERVICE_API.namespace,
    ) -> None:
        self.store = store
        self.enabled = enabled
        self.namespace = namespace

    def is_secure_storage_available(self) -> bool:
        if not self.enabled:
            return False

        account = f"{CANARY_ACCOUNT_PREFIX}{secrets.token_hex(8)}"
        canary = secrets.token_urlsafe(16)
        available = False

        try:
            self.store.store(self.namespace, account, canary)
            available = self.store.retrieve(self.namespace, account) == canary
        except Exception as e:
            # Any failure at any step means unavailable
            log.debug("native_store_probe_failed", backend=self.store.name, error=str(e))
        finally:
            self._cleanup(account)

        log.debug("native_store_probed", backend=self.store.name, available=available)
        return available

    def _cleanup(self, account: str) -> None:
        try:
            self.store.delete(self.namespace, account)
        except Exception as e:
            log.debug("native_store_probe_cleanup_failed", backend=self.store.name, error=str(e))


class FixedProbe:
    """Probe with a predetermined answer.

    Used to pin a capability answer that was already established, so a
    battery of lookups does not repeat the round trip.
    """

    def __init__(self, available: bool) -> None:
        self.available = available

    def is_secure_storage_available(self) -> bool:
        return self.available
