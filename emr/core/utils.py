"""Utility functions for file and path operations."""

import os
import unicodedata
from typing import Optional


def normalize_filename(filename: str) -> str:
    """Normalize a filename to NFC form for consistent matching.

    macOS filesystems use NFD (decomposed) Unicode normalization, while
    Windows, Linux, and most cloud services use NFC (composed). The same
    name can therefore arrive with different byte representations.

    Args:
        filename: Original filename (may be NFC or NFD).

    Returns:
        NFC-normalized filename.
    """
    return unicodedata.normalize("NFC", filename)


def exists(path: Optional[str]) -> bool:
    """Check if a path exists.

    Args:
        path: Path to check, or None.

    Returns:
        True if path exists, False if path is None or doesn't exist.
    """
    if path:
        return os.path.exists(path)
    return False


def checkout_dir(path: str) -> str:
    """Ensure a directory exists, creating it (and its parents) if necessary.

    Args:
        path: Directory path.

    Returns:
        The same path.

    Raises:
        ValueError: If path exists as a file (not a directory).
    """
    if os.path.isfile(path):
        raise ValueError(f"Cannot create directory: {path} exists as a file")

    os.makedirs(path, exist_ok=True)
    return path


def ensure_parent_dir(filepath: str) -> str:
    """Create the parent directory of a file path if it is missing.

    Returns:
        The parent directory.
    """
    parent = os.path.dirname(filepath)
    if parent:
        checkout_dir(parent)
    return parent


def normalize_path(path: str) -> str:
    """Normalize a path for consistent handling.

    Handles:
    - Trailing slashes
    - Mixed forward/backward slashes
    - User home directory (~)
    - Leading/trailing whitespace

    Args:
        path: Path to normalize.

    Returns:
        Normalized path.
    """
    return os.path.normpath(os.path.expanduser(path.strip()))


def resolve_path(path: str) -> str:
    """Normalize a path and make it absolute.

    Example:
        >>> resolve_path("~/Documents/output/")
        '/home/me/Documents/output'
    """
    return os.path.abspath(normalize_path(path))


def relative_path(path: str, root: str) -> str:
    """Path of `path` relative to `root`, for log lines and tree mirroring."""
    return os.path.relpath(path, root)
