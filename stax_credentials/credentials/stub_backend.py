"""Secure-storage variant for builds and platforms without native support."""

from ..exceptions import BackendNotAvailableError
from .keychain import storage_instructions


class UnavailableStore:
    """SecureStore whose every operation fails with BackendNotAvailableError.

    Holding one of these lets the resolver treat "no native storage" exactly
    like any other failing source instead of branching on the platform.
    """

    @property
    def name(self) -> str:
        return "unavailable"

    @property
    def available(self) -> bool:
        return False

    def _refuse(self, operation: str, service: str, account: str) -> BackendNotAvailableError:
        return BackendNotAvailableError(
            f"Native secure storage not available for {operation} operation",
            operation=operation,
            reference=f"{service}/{account}",
            suggestion=storage_instructions(),
        )

    def store(self, service: str, account: str, secret: str) -> None:
        raise self._refuse("store", service, account)

    def retrieve(self, service: str, account: str) -> str:
        raise self._refuse("retrieve", service, account)

    def delete(self, service: str, account: str) -> bool:
        raise self._refuse("delete", service, account)
