"""Media file classification by filename extension."""

import os
from typing import Optional

from emr.core.models import MediaKind


IMAGE_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".heic", ".webp", ".gif", ".tif", ".tiff",
})

VIDEO_EXTENSIONS = frozenset({
    ".mov", ".mp4", ".mkv", ".avi", ".webm",
})


def get_extension(filename: str) -> str:
    """Lower-cased extension of a filename, including the dot."""
    return os.path.splitext(filename)[1].lower()


def is_image_file(filename: str) -> bool:
    return get_extension(filename) in IMAGE_EXTENSIONS


def is_video_file(filename: str) -> bool:
    return get_extension(filename) in VIDEO_EXTENSIONS


def is_media_file(filename: str) -> bool:
    """Check if a file is an image or a video, by extension only."""
    return is_image_file(filename) or is_video_file(filename)


def classify(filename: str) -> Optional[MediaKind]:
    """Get the media kind of a filename, or None for non-media files.

    Example:
        >>> classify("IMG_0001.HEIC")
        <MediaKind.IMAGE: 'image'>
        >>> classify("IMG_0001.jpg.json") is None
        True
    """
    ext = get_extension(filename)
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.IMAGE
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    return None

