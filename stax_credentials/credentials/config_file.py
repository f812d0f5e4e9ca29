"""Load and save the per-user YAML credentials file."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from ..exceptions import CredentialFormatError, CredentialIOError
from ..models.credentials import ConfigDocument

log = structlog.get_logger(__name__)

SECURE_FILE_MODE = 0o600
SECURE_DIR_MODE = 0o700


class _TextScalarLoader(yaml.SafeLoader):
    """SafeLoader that keeps numbers and booleans as their source text.

    Every credentials field is a string, so `api_password: 0123` must load as
    "0123" rather than the octal int 83, and `ssh_user: yes` as "yes".
    """


for _tag in ("tag:yaml.org,2002:bool", "tag:yaml.org,2002:int", "tag:yaml.org,2002:float"):
    _TextScalarLoader.add_constructor(_tag, _TextScalarLoader.construct_scalar)


class ConfigFileStore:
    """The credentials file at a fixed path.

    The file is plain YAML; confidentiality relies on its permission bits,
    which :meth:`save` always sets to owner read/write. Writes go straight
    to the target path, so concurrent writers race and the last one wins.

    Example:
        >>> store = ConfigFileStore(Path("~/.stax/credentials.yml").expanduser())
        >>> doc = store.load()
        >>> doc.github.token = "ghp_new"
        >>> store.save(doc)
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def permissions(self) -> int:
        """Permission bits of the file (e.g. ``0o600``).

        Raises:
            OSError: If the file cannot be stat'ed
        """
        return stat.S_IMODE(self.path.stat().st_mode)

    def load(self) -> ConfigDocument:
        """Read and validate the credentials file.

        Raises:
            CredentialFormatError: If the file is missing or is not a valid credentials document
            CredentialIOError: If the file exists but cannot be read
        """
        if not self.path.exists():
            raise CredentialFormatError(
                f"Credentials file not found: {self.path}",
                reference=str(self.path),
            )

        try:
            content = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CredentialFormatError(
                f"Credentials file is not valid UTF-8: {e}", reference=str(self.path)
            ) from e
        except OSError as e:
            raise CredentialIOError(f"Failed to read credentials file: {e}", reference=str(self.path)) from e

        try:
            data = yaml.load(content, Loader=_TextScalarLoader)
        except yaml.YAMLError as e:
            raise CredentialFormatError(
                f"Failed to parse credentials file: {e}", reference=str(self.path)
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise CredentialFormatError(
                "Credentials file must be a YAML mapping, not a list or scalar", reference=str(self.path)
            )

        try:
            document = ConfigDocument.model_validate(data)
        except ValidationError as e:
            raise CredentialFormatError(f"Invalid credentials file: {e}", reference=str(self.path)) from e

        log.debug("credentials_file_loaded", path=str(self.path))
        return document

    def save(self, document: ConfigDocument) -> None:
        """Write the full document with mode 0600, creating the directory if needed.

        Raises:
            CredentialIOError: If the directory or file cannot be written
        """
        content = yaml.safe_dump(document.model_dump(), default_flow_style=False, sort_keys=False)

        try:
            self.path.parent.mkdir(mode=SECURE_DIR_MODE, parents=True, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, SECURE_FILE_MODE)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            # O_CREAT's mode only applies to new files
            self.path.chmod(SECURE_FILE_MODE)
        except OSError as e:
            raise CredentialIOError(f"Failed to write credentials file: {e}", reference=str(self.path)) from e

        log.info("credentials_file_saved", path=str(self.path))
