"""Configuration for credential resolution."""

from stax_credentials.config.settings import (
    CONFIG_DIR_NAME,
    CREDENTIALS_FILE_NAME,
    DEFAULT_SSH_GATEWAY,
    DEFAULT_SSH_KEY_NAMES,
    CredentialSettings,
)

__all__ = [
    "CONFIG_DIR_NAME",
    "CREDENTIALS_FILE_NAME",
    "DEFAULT_SSH_GATEWAY",
    "DEFAULT_SSH_KEY_NAMES",
    "CredentialSettings",
]
