"""Live Photo pairing for Export Metadata Restorer.

A Live Photo is exported as a still image plus a short video sharing the
same base name (IMG_0001.HEIC + IMG_0001.MOV). The video is the motion
component: its metadata already lives on the paired image, so it is
dropped from the run entirely.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

from emr.core.media import is_image_file
from emr.core.models import MediaFile
from emr.core.utils import normalize_filename

logger = logging.getLogger(__name__)


@dataclass
class LivePhotoMatch:
    """Result of looking for the still image paired with a video."""
    found: bool
    video_path: str
    image_path: Optional[str] = None


class LivePhotoMatcher:
    """Pairs videos with their Live Photo still images.

    A video pairs with a sibling image in the same directory whose base
    name is equal after NFC normalization, for any recognized image
    extension in any letter case. Each directory is listed once and
    indexed by image base name.

    Usage:
        matcher = LivePhotoMatcher()
        result = matcher.find_pair(media_file)
        if result.found:
            skip(media_file)
    """

    def __init__(self):
        # directory -> {NFC image base name: image path}
        self._image_stems: Dict[str, Dict[str, str]] = {}

    def _index_directory(self, directory: str) -> Dict[str, str]:
        """Get (building if needed) the image index for a directory."""
        if directory in self._image_stems:
            return self._image_stems[directory]

        index: Dict[str, str] = {}
        with os.scandir(directory) as entries:
            for entry in entries:
                if not is_image_file(entry.name):
                    continue
                try:
                    if not entry.is_file():
                        continue
                except OSError as e:
                    logger.debug(f"Cannot access entry {entry.path}: {e}")
                    continue
                stem = normalize_filename(os.path.splitext(entry.name)[0])
                index.setdefault(stem, entry.path)

        self._image_stems[directory] = index
        return index

    def find_pair(self, media: MediaFile) -> LivePhotoMatch:
        """Find the still image paired with a video, if any.

        Args:
            media: The media file to check.

        Returns:
            LivePhotoMatch; found is always False for images.
        """
        if not media.is_video:
            return LivePhotoMatch(found=False, video_path=media.filepath)

        index = self._index_directory(media.directory)
        image_path = index.get(normalize_filename(media.stem))
        return LivePhotoMatch(
            found=image_path is not None,
            video_path=media.filepath,
            image_path=image_path,
        )

    def is_live_photo_video(self, media: MediaFile) -> bool:
        return self.find_pair(media).found

    def clear(self) -> None:
        """Forget all cached directory listings."""
        self._image_stems.clear()

