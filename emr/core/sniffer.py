"""Content-based file type detection and extension correction.

Export tools sometimes give files the wrong extension (a PNG saved as
.jpg, a HEIC saved as .jpeg). The extension detected from the file's magic
bytes is authoritative for every placement decision.
"""

import logging
import os
from typing import Optional

import filetype

from emr.core.models import CorrectedIdentity, MediaFile

logger = logging.getLogger(__name__)


def detect_extension(filepath: str) -> Optional[str]:
    """Detect a file's real format from its signature bytes.

    Args:
        filepath: Path to the file.

    Returns:
        Extension like '.png', or None if the content is not recognized.

    Raises:
        OSError: If the file cannot be read.
    """
    kind = filetype.guess(filepath)
    if kind is None or not kind.extension:
        return None
    return "." + kind.extension.lower()


def corrected_extension(media: MediaFile) -> str:
    """Get the extension a media file should carry.

    Returns the detected extension when the content is recognized,
    otherwise the file's nominal (on-disk) extension.
    """
    detected = detect_extension(media.filepath)
    if detected and detected != media.extension:
        logger.debug(f"Extension mismatch for {media.filepath}: content is {detected}")
    return detected or media.extension


def build_identity(media: MediaFile, source_root: str, extension: str) -> CorrectedIdentity:
    """Build the corrected identity of a file for a given extension.

    The extension replaces the original one; the directory structure
    relative to the source root is preserved.
    """
    filename = media.stem + extension
    relative_dir = os.path.relpath(media.directory, source_root)
    if relative_dir == os.curdir:
        relative = filename
    else:
        relative = os.path.join(relative_dir, filename)
    return CorrectedIdentity(extension=extension, filename=filename, relative_path=relative)


def resolve_identity(media: MediaFile, source_root: str) -> CorrectedIdentity:
    """Sniff a file and compute where it belongs in the output/error trees.

    Example:
        A PNG stored as <root>/2023/IMG_01.jpg resolves to
        relative_path '2023/IMG_01.png'.
    """
    return build_identity(media, source_root, corrected_extension(media))
