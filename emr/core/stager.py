"""Staged metadata writing for Export Metadata Restorer.

The success path for one file: copy the original into a scratch area
under its corrected name, embed the tag set there, then atomically move
the finished copy into the output tree. The original is only ever read.
"""

import errno
import itertools
import logging
import os
import shutil
import time
from datetime import datetime
from typing import Optional, Set

import filedate

from emr.core.errors import EmbedFailureError
from emr.core.exiftool import ExifToolManager
from emr.core.models import CorrectedIdentity, MediaFile, TagSet
from emr.core.utils import checkout_dir

logger = logging.getLogger(__name__)

TEMP_PREFIX = "temp_"
PART_SUFFIX = ".part"


class FileStager:
    """Copies, embeds and commits media files into the output tree.

    Usage:
        stager = FileStager(output_dir, error_dir, tmp_dir, engine)
        output_path = stager.stage(media, tags, identity, date=capture_date)
    """

    def __init__(
        self,
        output_dir: str,
        error_dir: str,
        tmp_dir: str,
        engine: ExifToolManager,
        set_file_dates: bool = True
    ):
        """Initialize stager.

        Args:
            output_dir: Root of the output tree.
            error_dir: Root of the error tree. Parent directories are
                       prepared here too so a later quarantine cannot race.
            tmp_dir: Scratch directory for staged copies.
            engine: Running ExifTool manager.
            set_file_dates: Whether to stamp committed files with the
                            capture date as their filesystem timestamps.
        """
        self.output_dir = output_dir
        self.error_dir = error_dir
        self.tmp_dir = tmp_dir
        self.engine = engine
        self.set_file_dates = set_file_dates

        self._counter = itertools.count(1)
        # Cache for created directories (avoids redundant os.makedirs calls)
        self._created_dirs: Set[str] = set()

    def _ensure_dir(self, path: str) -> None:
        if path not in self._created_dirs:
            checkout_dir(path)
            self._created_dirs.add(path)

    def temp_path_for(self, identity: CorrectedIdentity) -> str:
        """Get a scratch path for a staged copy, unique within this run."""
        name = f"{TEMP_PREFIX}{time.time_ns()}_{next(self._counter)}_{identity.filename}"
        return os.path.join(self.tmp_dir, name)

    def stage(
        self,
        media: MediaFile,
        tags: TagSet,
        identity: CorrectedIdentity,
        date: Optional[datetime] = None
    ) -> str:
        """Embed a tag set into a copy of a media file and commit it.

        Args:
            media: Source file (read only).
            tags: Tags to embed.
            identity: Corrected name and relative path of the file.
            date: Capture date for the output's filesystem timestamps.

        Returns:
            Path of the committed output file.

        Raises:
            EmbedFailureError: If ExifTool fails; nothing is written to the
                output path in that case.
            OSError: If copying or moving fails.
        """
        output_path = identity.output_path(self.output_dir)
        error_path = identity.error_path(self.error_dir)
        self._ensure_dir(os.path.dirname(output_path))
        self._ensure_dir(os.path.dirname(error_path))
        self._ensure_dir(self.tmp_dir)

        tmp_path = self.temp_path_for(identity)
        shutil.copyfile(media.filepath, tmp_path)

        if tags:
            try:
                self.engine.write_tags(tmp_path, tags)
            except Exception as e:
                self._discard(tmp_path)
                raise EmbedFailureError(media.filepath, e) from e
        else:
            logger.debug(f"No tags to embed for {media.filepath}")

        self._commit(tmp_path, output_path)

        if date is not None and self.set_file_dates:
            self._set_dates(output_path, date)

        return output_path

    def _commit(self, tmp_path: str, output_path: str) -> None:
        """Move a finished staged copy into place, overwriting any old file.

        Atomic when scratch and output share a filesystem. Otherwise the
        copy first lands next to the output under a hidden part name and is
        then renamed into place, so a failed copy never leaves a partial
        file at the output path.
        """
        try:
            os.replace(tmp_path, output_path)
            return
        except OSError as e:
            if e.errno != errno.EXDEV:
                self._discard(tmp_path)
                raise

        directory, filename = os.path.split(output_path)
        part_name = f".{filename}.{next(self._counter)}{PART_SUFFIX}"
        part_path = os.path.join(directory, part_name)
        try:
            shutil.copyfile(tmp_path, part_path)
            os.replace(part_path, output_path)
        except OSError:
            self._discard(part_path)
            raise
        finally:
            self._discard(tmp_path)

    def _discard(self, tmp_path: str) -> None:
        """Remove an abandoned staged copy, if possible."""
        try:
            os.remove(tmp_path)
        except OSError as e:
            logger.debug(f"Could not remove staged copy {tmp_path}: {e}")

    def _set_dates(self, path: str, date: datetime) -> None:
        try:
            filedate.File(path).set(created=date, modified=date)
        except Exception as e:
            logger.warning(f"Could not set file dates on {path}: {e}")
