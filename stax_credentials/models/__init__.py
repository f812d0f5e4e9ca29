"""Data models for credentials and credential diagnostics.

Key Models:
    - ServiceAPICredentials: resolved API user/password and SSH identity
    - ResolutionAttempt: one source consulted during resolution
    - ConfigDocument: the per-user credentials file
    - DiagnosticResult: outcome of a single health check
    - CredentialDiagnostics: the full diagnostic verdict
"""

from stax_credentials.models.credentials import (
    ConfigDocument,
    GitHubSection,
    ResolutionAttempt,
    ServiceAPICredentials,
    SSHSection,
    WPEngineSection,
)
from stax_credentials.models.diagnostics import CredentialDiagnostics, DiagnosticResult

__all__ = [
    "ConfigDocument",
    "CredentialDiagnostics",
    "DiagnosticResult",
    "GitHubSection",
    "ResolutionAttempt",
    "SSHSection",
    "ServiceAPICredentials",
    "WPEngineSection",
]
