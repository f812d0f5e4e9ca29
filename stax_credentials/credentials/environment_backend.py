"""Environment variable lookup for credential resolution."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

SSH_KEY_ENV_VARS = ("STAX_SSH_PRIVATE_KEY", "WPENGINE_SSH_KEY")
API_USER_ENV_VAR = "WPENGINE_API_USER"
API_PASSWORD_ENV_VAR = "WPENGINE_API_PASSWORD"
SSH_USER_ENV_VAR = "WPENGINE_SSH_USER"
SSH_GATEWAY_ENV_VAR = "WPENGINE_SSH_GATEWAY"
ACCESS_TOKEN_ENV_VAR = "GITHUB_TOKEN"

API_ENV_VARS = (API_USER_ENV_VAR, API_PASSWORD_ENV_VAR, SSH_USER_ENV_VAR, SSH_GATEWAY_ENV_VAR)
ALL_ENV_VARS = (*API_ENV_VARS, ACCESS_TOKEN_ENV_VAR, *SSH_KEY_ENV_VARS)


class EnvironmentBackend:
    """Read-only view of credential environment variables.

    An empty value is treated the same as an unset variable.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``); tests
            pass a plain dict to stay isolated from the real environment
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self.environ = environ if environ is not None else os.environ

    @property
    def name(self) -> str:
        return "environment"

    def get(self, var_name: str) -> str | None:
        """Return the variable's value, or None if unset or empty."""
        value = self.environ.get(var_name)
        if not value:
            return None

        logger.debug(f"Read credential from environment: {var_name}")
        return value

    def get_or_default(self, var_name: str, default: str) -> str:
        return self.get(var_name) or default

    def present(self, var_names: Iterable[str] = ALL_ENV_VARS) -> list[str]:
        """Names from ``var_names`` that are set to a non-empty value, in order."""
        return [name for name in var_names if self.environ.get(name)]
