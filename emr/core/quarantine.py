"""Error-tree quarantine for files that failed processing."""

import logging
import shutil
from typing import Optional

from emr.core.models import CorrectedIdentity, MediaFile
from emr.core.sniffer import build_identity, resolve_identity
from emr.core.utils import ensure_parent_dir

logger = logging.getLogger(__name__)


class ErrorQuarantine:
    """Copies unmodified originals into the error tree for manual review.

    The copy lands at the same corrected relative path the file would have
    had in the output tree. The original is copied, never moved.
    """

    def __init__(self, error_dir: str, source_root: str):
        self.error_dir = error_dir
        self.source_root = source_root

    def identity_for(self, media: MediaFile) -> CorrectedIdentity:
        """Resolve a file's corrected identity for quarantine placement.

        Falls back to the nominal extension when the file cannot even be
        sniffed, so that an unreadable header still gets quarantined.
        """
        try:
            return resolve_identity(media, self.source_root)
        except OSError as e:
            logger.debug(f"Cannot sniff {media.filepath}, keeping nominal extension: {e}")
            return build_identity(media, self.source_root, media.extension)

    def quarantine(
        self,
        media: MediaFile,
        identity: Optional[CorrectedIdentity] = None
    ) -> Optional[str]:
        """Copy an original into the error tree.

        Args:
            media: The file that failed.
            identity: Its corrected identity, if already computed.

        Returns:
            Path of the quarantined copy, or None if the copy itself failed.
            A failed copy is logged, never raised.
        """
        if identity is None:
            identity = self.identity_for(media)
        error_path = identity.error_path(self.error_dir)

        try:
            ensure_parent_dir(error_path)
            shutil.copyfile(media.filepath, error_path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to quarantine {media.filepath} to {error_path}: {e}")
            return None

        return error_path
