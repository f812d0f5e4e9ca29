"""Credential health diagnostics.

Runs a fixed battery of independent checks over the same sources the
resolver uses and folds the results into one verdict plus remediation
advice. No check depends on an earlier resolve() call, and one check
failing internally never stops the rest of the battery.
"""

from __future__ import annotations

import stat
from collections.abc import Callable

import structlog

from stax_credentials.config.settings import CredentialSettings
from stax_credentials.credentials.config_file import SECURE_FILE_MODE
from stax_credentials.credentials.environment_backend import ALL_ENV_VARS
from stax_credentials.credentials.probe import FixedProbe
from stax_credentials.credentials.resolver import FallbackResolver
from stax_credentials.enums import AttemptOutcome, DiagnosticStatus
from stax_credentials.exceptions import CredentialNotFoundError
from stax_credentials.models.diagnostics import CredentialDiagnostics, DiagnosticResult

log = structlog.get_logger(__name__)

# Check names, in battery order
KEYCHAIN_CHECK = "Keychain Storage"
API_CHECK = "WPEngine API Credentials"
SSH_USER_CHECK = "WPEngine SSH Credentials"
TOKEN_CHECK = "GitHub Token"
SSH_PRIVATE_KEY_CHECK = "SSH Private Key"
CREDENTIALS_FILE_CHECK = "Credentials File"
ENVIRONMENT_CHECK = "Environment Variables"
SSH_KEY_FILE_CHECK = "SSH Key File"

SSH_KEY_MISSING = "Default SSH key not found"
SSH_KEY_INSECURE = "SSH key has insecure permissions"

ALL_GOOD = "All credentials are properly configured!"


class DiagnosticsAggregator:
    """Produce a :class:`CredentialDiagnostics` verdict for the current environment.

    Args:
        resolver: Resolver whose store, environment, credentials file and
            settings are inspected; a default one is built if omitted
    """

    def __init__(self, resolver: FallbackResolver | None = None) -> None:
        self.resolver = resolver or FallbackResolver()
        self._pinned = self.resolver

    @property
    def settings(self) -> CredentialSettings:
        return self.resolver.settings

    def run(self) -> CredentialDiagnostics:
        """Run every check in order and derive the recommendations."""
        # Replaced by a pinned copy once the keychain check has probed
        self._pinned = self.resolver

        checks: list[tuple[str, Callable[[], DiagnosticResult]]] = [
            (KEYCHAIN_CHECK, self.check_keychain),
            (API_CHECK, self.check_api_credentials),
            (SSH_USER_CHECK, self.check_ssh_user),
            (TOKEN_CHECK, self.check_access_token),
            (SSH_PRIVATE_KEY_CHECK, self.check_ssh_private_key),
            (CREDENTIALS_FILE_CHECK, self.check_credentials_file),
            (ENVIRONMENT_CHECK, self.check_environment),
            (SSH_KEY_FILE_CHECK, self.check_ssh_key_file),
        ]

        report = CredentialDiagnostics()
        for name, check in checks:
            report.results.append(self._run_check(name, check))

        report.recommended_actions = self.recommendations(report)
        log.info(
            "credential_diagnostics_completed",
            overall_status=str(report.overall_status),
            checks=len(report.results),
        )
        return report

    def _run_check(self, name: str, check: Callable[[], DiagnosticResult]) -> DiagnosticResult:
        try:
            return check()
        except Exception as e:
            log.warning("diagnostic_check_failed", check=name, error=str(e), exc_info=True)
            return DiagnosticResult(
                name=name,
                status=DiagnosticStatus.ERROR,
                message="Check could not be evaluated",
                details=[f"{type(e).__name__}: {e}"],
            )

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def check_keychain(self) -> DiagnosticResult:
        available = self.resolver.probe.is_secure_storage_available()
        self._pinned = self.resolver.with_probe(FixedProbe(available))

        if available:
            return DiagnosticResult(
                name=KEYCHAIN_CHECK,
                status=DiagnosticStatus.OK,
                message="Native secure storage is available",
                details=[
                    f"Backend: {self.resolver.store.name}",
                    "Credentials can be stored securely in the system keyring",
                ],
            )
        return DiagnosticResult(
            name=KEYCHAIN_CHECK,
            status=DiagnosticStatus.WARNING,
            message="Keychain storage not available",
            details=[
                "Falling back to file-based or environment variable storage",
                "Install a keyring backend to store credentials securely",
            ],
        )

    def check_api_credentials(self) -> DiagnosticResult:
        try:
            creds = self._pinned.resolve_api_credentials()
        except CredentialNotFoundError as e:
            if any(a.outcome is AttemptOutcome.INVALID for a in e.attempts):
                return DiagnosticResult(
                    name=API_CHECK,
                    status=DiagnosticStatus.ERROR,
                    message="WPEngine API credentials incomplete",
                    details=["API user or password is missing", *self._describe_failures(e)],
                )
            return DiagnosticResult(
                name=API_CHECK,
                status=DiagnosticStatus.ERROR,
                message="WPEngine API credentials not found",
                details=[
                    "Credentials are required for database and file operations",
                    *(f"Tried: {location}" for location in e.tried),
                ],
            )

        return DiagnosticResult(
            name=API_CHECK,
            status=DiagnosticStatus.OK,
            message="WPEngine API credentials configured",
            details=[f"API User: {creds.api_user}", "Credentials are ready for use"],
        )

    def check_ssh_user(self) -> DiagnosticResult:
        try:
            creds = self._pinned.resolve_api_credentials()
        except CredentialNotFoundError:
            return DiagnosticResult(
                name=SSH_USER_CHECK,
                status=DiagnosticStatus.ERROR,
                message="SSH credentials not found",
                details=["SSH credentials are required for file operations"],
            )

        if not creds.ssh_user:
            return DiagnosticResult(
                name=SSH_USER_CHECK,
                status=DiagnosticStatus.WARNING,
                message="SSH user not configured",
                details=[
                    "The resolved credentials carry no SSH user",
                    "Set wpengine.ssh_user in the credentials file or WPENGINE_SSH_USER",
                ],
            )
        return DiagnosticResult(
            name=SSH_USER_CHECK,
            status=DiagnosticStatus.OK,
            message="WPEngine SSH credentials configured",
            details=[f"SSH User: {creds.ssh_user}", f"SSH Gateway: {creds.ssh_gateway}"],
        )

    def check_access_token(self) -> DiagnosticResult:
        try:
            self._pinned.resolve_access_token()
        except CredentialNotFoundError:
            return DiagnosticResult(
                name=TOKEN_CHECK,
                status=DiagnosticStatus.WARNING,
                message="GitHub token not configured",
                details=[
                    "GitHub token is optional but recommended",
                    "Required for private repository access",
                    "Prevents API rate limiting",
                ],
            )
        return DiagnosticResult(
            name=TOKEN_CHECK,
            status=DiagnosticStatus.OK,
            message="GitHub token configured",
            details=["Token is available for repository operations"],
        )

    def check_ssh_private_key(self) -> DiagnosticResult:
        try:
            self._pinned.resolve_ssh_key()
        except CredentialNotFoundError as e:
            return DiagnosticResult(
                name=SSH_PRIVATE_KEY_CHECK,
                status=DiagnosticStatus.WARNING,
                message="No usable SSH private key found",
                details=[f"Tried: {location}" for location in e.tried],
            )
        return DiagnosticResult(
            name=SSH_PRIVATE_KEY_CHECK,
            status=DiagnosticStatus.OK,
            message="SSH private key available",
        )

    def check_credentials_file(self) -> DiagnosticResult:
        config_store = self.resolver.config_store
        path = config_store.path

        try:
            mode = config_store.permissions()
        except FileNotFoundError:
            return DiagnosticResult(
                name=CREDENTIALS_FILE_CHECK,
                status=DiagnosticStatus.OK,
                message="Credentials file not in use",
                details=["Using keychain or environment variables", f"File would be at: {path}"],
            )
        except OSError as e:
            return DiagnosticResult(
                name=CREDENTIALS_FILE_CHECK,
                status=DiagnosticStatus.ERROR,
                message="Cannot access credentials file",
                details=[str(e)],
            )

        if mode != SECURE_FILE_MODE:
            return DiagnosticResult(
                name=CREDENTIALS_FILE_CHECK,
                status=DiagnosticStatus.WARNING,
                message="Credentials file has insecure permissions",
                details=[
                    f"Current permissions: {mode:04o}",
                    f"Run: chmod 600 {path}",
                    "Recommended: 0600 (read/write for owner only)",
                ],
            )
        return DiagnosticResult(
            name=CREDENTIALS_FILE_CHECK,
            status=DiagnosticStatus.OK,
            message="Credentials file configured securely",
            details=[f"Location: {path}", "Permissions are secure (0600)"],
        )

    def check_environment(self) -> DiagnosticResult:
        found = self.resolver.environment.present(ALL_ENV_VARS)

        if not found:
            return DiagnosticResult(
                name=ENVIRONMENT_CHECK,
                status=DiagnosticStatus.OK,
                message="Environment variables not in use",
                details=["Using keychain or credentials file instead"],
            )
        return DiagnosticResult(
            name=ENVIRONMENT_CHECK,
            status=DiagnosticStatus.OK,
            message="Environment variables configured",
            details=[f"Found {len(found)} credential variables", *found],
        )

    def check_ssh_key_file(self) -> DiagnosticResult:
        key_path = self.settings.primary_ssh_key_path

        try:
            mode = stat.S_IMODE(key_path.stat().st_mode)
        except FileNotFoundError:
            return DiagnosticResult(
                name=SSH_KEY_FILE_CHECK,
                status=DiagnosticStatus.WARNING,
                message=SSH_KEY_MISSING,
                details=[
                    f"Checked: {key_path}",
                    "SSH key is required for WPEngine file operations",
                    "Generate with: ssh-keygen -t rsa -b 4096",
                    "Add public key to WPEngine User Portal",
                ],
            )
        except OSError as e:
            return DiagnosticResult(
                name=SSH_KEY_FILE_CHECK,
                status=DiagnosticStatus.ERROR,
                message="Cannot access SSH key file",
                details=[str(e)],
            )

        if mode & 0o077:
            return DiagnosticResult(
                name=SSH_KEY_FILE_CHECK,
                status=DiagnosticStatus.WARNING,
                message=SSH_KEY_INSECURE,
                details=[
                    f"Current permissions: {mode:04o}",
                    f"Run: chmod 600 {key_path}",
                    "SSH requires private keys to be secure (0600)",
                ],
            )
        return DiagnosticResult(
            name=SSH_KEY_FILE_CHECK,
            status=DiagnosticStatus.OK,
            message="SSH key found and secure",
            details=[f"Location: {key_path}", "Permissions are secure"],
        )

    # -------------------------------------------------------------------------
    # Recommendations
    # -------------------------------------------------------------------------

    def recommendations(self, report: CredentialDiagnostics) -> list[str]:
        """Remediation advice, most important first.

        Missing API credentials come first, then SSH key problems, then
        credentials file permissions. The token suggestion only appears
        when nothing else needs doing.
        """
        actions: list[str] = []

        api = report.get(API_CHECK)
        if api is not None and api.status is DiagnosticStatus.ERROR:
            actions.append("Configure WPEngine API credentials (WPENGINE_API_USER / WPENGINE_API_PASSWORD)")

        key_file = report.get(SSH_KEY_FILE_CHECK)
        private_key = report.get(SSH_PRIVATE_KEY_CHECK)
        key_path = self.settings.primary_ssh_key_path
        if key_file is not None and key_file.status is not DiagnosticStatus.OK:
            if key_file.message == SSH_KEY_MISSING:
                actions.append("Generate SSH key with: ssh-keygen -t rsa -b 4096")
                actions.append(f"Add public key ({key_path}.pub) to WPEngine User Portal")
            elif key_file.message == SSH_KEY_INSECURE:
                actions.append(f"Fix SSH key permissions: chmod 600 {key_path}")
            else:
                actions.append(f"Check access to SSH key: {key_path}")
        elif private_key is not None and private_key.status is not DiagnosticStatus.OK:
            actions.append("Point STAX_SSH_PRIVATE_KEY at a valid private key file")

        creds_file = report.get(CREDENTIALS_FILE_CHECK)
        if creds_file is not None and creds_file.status is DiagnosticStatus.WARNING:
            actions.append(f"Fix credentials file permissions: chmod 600 {self.resolver.config_store.path}")

        token = report.get(TOKEN_CHECK)
        if token is not None and token.status is DiagnosticStatus.WARNING and not actions:
            actions.append("Consider adding a GitHub token (GITHUB_TOKEN) for private repos")

        if not actions:
            actions.append(ALL_GOOD)
        return actions

    @staticmethod
    def _describe_failures(error: CredentialNotFoundError) -> list[str]:
        return [f"{a.description}: {a.error}" for a in error.attempts if a.error is not None]


def run_diagnostics(resolver: FallbackResolver | None = None) -> CredentialDiagnostics:
    """Convenience wrapper: run the full battery once."""
    return DiagnosticsAggregator(resolver).run()
