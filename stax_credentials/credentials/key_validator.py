"""Heuristic private key detection."""

from __future__ import annotations

from pathlib import Path

HEADER_PREFIX_BYTES = 100

PRIVATE_KEY_MARKERS = (
    b"PRIVATE KEY",
    b"BEGIN RSA PRIVATE KEY",
    b"BEGIN OPENSSH PRIVATE KEY",
    b"BEGIN EC PRIVATE KEY",
    b"BEGIN DSA PRIVATE KEY",
)


def looks_like_private_key(path: str | Path) -> bool:
    """Check whether a file looks like a PEM/OpenSSH private key.

    Reads the first 100 bytes and looks for a private key header. This is
    a substring check, not a parse: anything containing "PRIVATE KEY" near
    the top passes, and formats with other headers are rejected.

    Any I/O problem (missing file, directory, permission denied) returns
    False rather than raising, as does an empty file.
    """
    try:
        path = Path(path)
        if not path.is_file():
            return False
        with path.open("rb") as f:
            header = f.read(HEADER_PREFIX_BYTES)
    except OSError:
        return False

    if not header:
        return False

    return any(marker in header for marker in PRIVATE_KEY_MARKERS)


def looks_like_key_material(value: str) -> bool:
    """Whether a string is literal key content rather than a path to a key."""
    return "PRIVATE KEY" in value[:HEADER_PREFIX_BYTES] and "\n" in value
