"""stax-credentials: credential resolution and health diagnostics.

Two entry points are meant for callers:

- :class:`FallbackResolver` locates an SSH key, API credentials or an
  access token, trying native storage, the environment, the credentials
  file and default key paths in that order.
- :class:`DiagnosticsAggregator` reports on credential health with one
  overall status and remediation advice.
"""

from stax_credentials.config.settings import CredentialSettings
from stax_credentials.credentials.resolver import FallbackResolver
from stax_credentials.diagnostics import DiagnosticsAggregator, run_diagnostics
from stax_credentials.enums import CredentialKind, CredentialSource, DiagnosticStatus
from stax_credentials.exceptions import CredentialError, CredentialNotFoundError, StaxCredentialsError
from stax_credentials.models.credentials import ServiceAPICredentials

__version__ = "0.1.0"

__all__ = [
    "CredentialError",
    "CredentialKind",
    "CredentialNotFoundError",
    "CredentialSettings",
    "CredentialSource",
    "DiagnosticStatus",
    "DiagnosticsAggregator",
    "FallbackResolver",
    "ServiceAPICredentials",
    "StaxCredentialsError",
    "run_diagnostics",
]
