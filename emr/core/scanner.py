"""Source tree traversal for Export Metadata Restorer."""

import logging
import os
from dataclasses import dataclass
from typing import Iterator, List

from emr.core.errors import TraversalError
from emr.core.media import classify
from emr.core.models import MediaFile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Entry:
    """Directory entry with its type resolved at listing time."""
    name: str
    path: str
    is_dir: bool
    is_file: bool


def _list_dir(path: str) -> List[_Entry]:
    """List a directory with os.scandir, resolving entry types up front.

    Symlinks are neither followed into nor treated as files.

    Raises:
        TraversalError: If the directory cannot be listed.
    """
    entries = []
    try:
        with os.scandir(path) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = not is_dir and entry.is_file(follow_symlinks=False)
                except OSError as e:
                    # Log and skip entries we can't access
                    logger.debug(f"Cannot access entry {entry.path}: {e}")
                    continue
                entries.append(_Entry(entry.name, entry.path, is_dir, is_file))
    except OSError as e:
        raise TraversalError(path, e) from e
    return entries


class MediaScanner:
    """Walks a source tree depth-first and yields its media files.

    Traversal uses an explicit stack rather than recursion, so very deep
    trees cannot hit the interpreter's recursion limit. Order matches a
    recursive walk: entries are visited in listing order and a
    subdirectory is fully walked as soon as it is met.

    Usage:
        scanner = MediaScanner("/path/to/export")
        for media in scanner.iter_media():
            process(media)

        print(f"{scanner.media_count} media files in {scanner.dir_count} folders")
    """

    def __init__(self, path: str):
        """Initialize scanner.

        Args:
            path: Root directory to walk.
        """
        self.path = path
        self.dir_count = 0
        self.media_count = 0
        self.ignored_count = 0

    def iter_media(self) -> Iterator[MediaFile]:
        """Yield media files lazily, one at a time.

        Non-media files (sidecars included) are skipped. Listing failures
        raise TraversalError, for the root and for subdirectories alike.
        """
        self.dir_count = 1
        self.media_count = 0
        self.ignored_count = 0

        stack = [iter(_list_dir(self.path))]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            if entry.is_dir:
                self.dir_count += 1
                stack.append(iter(_list_dir(entry.path)))
                continue

            kind = classify(entry.name) if entry.is_file else None
            if kind is None:
                self.ignored_count += 1
                continue

            self.media_count += 1
            yield MediaFile(filepath=os.path.abspath(entry.path), kind=kind)

