#!/usr/bin/env python3
"""
Output verification for the HTML to PDF converter.
Checks the trailing completion marker and hashes generated files.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import hashlib
from pathlib import Path
from typing import Union


COMPLETION_MARKER = b"EOF"
COMPLETION_PATTERN = rb"EOF"

# The marker sits just before the final byte of the output (normally the
# newline after "%%EOF").
MARKER_OFFSET = -4


def is_complete(result: Union[bytes, str]) -> bool:
    """Check whether generated output ends with the completion marker.

    Args:
        result: Output bytes (text is encoded as Latin-1)

    Returns:
        True if the three bytes before the final byte are ``EOF``
    """
    if isinstance(result, str):
        result = result.encode('latin-1', errors='replace')
    end = MARKER_OFFSET + len(COMPLETION_MARKER)
    return result[MARKER_OFFSET:end] == COMPLETION_MARKER


def calculate_file_hash(file_path: Path) -> str:
    """Calculate SHA-256 hash of a file.

    Args:
        file_path: Path to the file to hash

    Returns:
        SHA-256 hash as hexadecimal string

    Raises:
        RuntimeError: If file cannot be read or hashing fails
    """
    sha256_hash = hashlib.sha256()
    try:
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(4096), b""):
                sha256_hash.update(chunk)
        return sha256_hash.hexdigest()
    except OSError as e:
        raise RuntimeError(f"Failed to calculate hash for {file_path}: {e}")


def verify_file_complete(file_path: Path) -> bool:
    """Verify that a file exists and ends with the completion marker."""
    file_path = Path(file_path)
    if not file_path.exists():
        return False

    with open(file_path, "rb") as f:
        f.seek(0, 2)
        size = f.tell()
        f.seek(max(0, size + MARKER_OFFSET))
        return is_complete(f.read())
