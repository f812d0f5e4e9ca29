"""Enumerations for credential kinds, sources and diagnostic states."""

from enum import Enum


class CredentialKind(str, Enum):
    """Logical credential kinds the resolver knows how to locate."""

    SSH_KEY = "ssh-key"
    SERVICE_API = "service-api"
    ACCESS_TOKEN = "access-token"

    def __str__(self) -> str:
        return self.value

    @property
    def namespace(self) -> str:
        """Native secure-storage service namespace for this kind."""
        return _NAMESPACES[self]


class CredentialSource(str, Enum):
    """Sources consulted during resolution.

    Declaration order is precedence order: a source earlier in the
    enum is always consulted before a later one.
    """

    NATIVE_STORE = "native-store"
    ENVIRONMENT_VARIABLE = "environment-variable"
    CONFIG_FILE = "config-file"
    DEFAULT_LOCATION = "default-location"

    def __str__(self) -> str:
        return self.value

    @property
    def precedence(self) -> int:
        """Zero-based position in the fallback order."""
        return list(CredentialSource).index(self)


class AttemptOutcome(str, Enum):
    """What happened when a single source was consulted."""

    UNAVAILABLE = "unavailable"
    MISSING = "missing"
    INVALID = "invalid"
    FAILED = "failed"
    FOUND = "found"

    def __str__(self) -> str:
        return self.value


class DiagnosticStatus(str, Enum):
    """Severity of a diagnostic check, ordered from best to worst."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value

    @property
    def severity(self) -> int:
        return list(DiagnosticStatus).index(self)


_NAMESPACES = {
    CredentialKind.SERVICE_API: "com.firecrown.stax.wpengine",
    CredentialKind.ACCESS_TOKEN: "com.firecrown.stax.github",
    CredentialKind.SSH_KEY: "com.firecrown.stax.ssh",
}
