"""ExifTool management for Export Metadata Restorer.

Handles finding ExifTool and running one long-lived instance for a whole
run.
"""

import logging
import os
import shutil
import sys
from typing import Optional

logger = logging.getLogger(__name__)

# ExifTool paths
EXIFTOOL_DIR = os.path.join("tools", "exiftool")
EXIFTOOL_EXE = "exiftool.exe" if sys.platform == "win32" else "exiftool"

# Rewrite the staged file in place instead of leaving a *_original backup
OVERWRITE_ORIGINAL = "-overwrite_original"


def _default_base_dir() -> str:
    # Go up from emr/core/ to project root
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def get_exiftool_path(base_dir: Optional[str] = None) -> Optional[str]:
    """Find ExifTool executable.

    Checks in order:
    1. System PATH
    2. Local tools directory

    Args:
        base_dir: Base directory for local tools folder.
                 Defaults to the project root.

    Returns:
        Path to exiftool executable, or None if not found.
    """
    if shutil.which("exiftool"):
        return "exiftool"

    if base_dir is None:
        base_dir = _default_base_dir()

    local_path = os.path.join(base_dir, EXIFTOOL_DIR, EXIFTOOL_EXE)
    if os.path.exists(local_path):
        return local_path

    logger.warning("ExifTool not found. Install from https://exiftool.org/")
    return None


def is_exiftool_available(base_dir: Optional[str] = None) -> bool:
    """Check if ExifTool is available without starting it."""
    if shutil.which("exiftool"):
        return True

    if base_dir is None:
        base_dir = _default_base_dir()
    return os.path.exists(os.path.join(base_dir, EXIFTOOL_DIR, EXIFTOOL_EXE))


def get_install_instructions() -> str:
    """Manual installation instructions, for display by the CLI."""
    return "\n".join([
        "ExifTool is required to embed metadata. Please install it:",
        "  - macOS:   brew install exiftool",
        "  - Linux:   apt install libimage-exiftool-perl (or your distro's package)",
        "  - Windows: download from https://exiftool.org/, rename",
        "             exiftool(-k).exe to exiftool.exe and place it in PATH",
        f"             or in ./{EXIFTOOL_DIR.replace(os.sep, '/')}/",
    ])


class ExifToolManager:
    """Manages ExifTool lifecycle for a processing run.

    One `exiftool -stay_open` process is started and reused for every file,
    which avoids paying the Perl startup cost per file.

    Usage:
        with ExifToolManager() as et:
            et.write_tags("/path/to/file.jpg", {"GPSLatitude": 40.7})

    Or manually:
        manager = ExifToolManager()
        if manager.start():
            try:
                for file, tags in work:
                    manager.write_tags(file, tags)
            finally:
                manager.stop()
    """

    def __init__(self, base_dir: Optional[str] = None):
        """Initialize manager.

        Args:
            base_dir: Base directory for local tools folder.
        """
        self._helper = None
        self._exiftool_path = None
        self._base_dir = base_dir

    def start(self) -> bool:
        """Start ExifTool process.

        Returns:
            True if started successfully (or already running), False otherwise.
        """
        if self._helper is not None:
            return True

        try:
            import exiftool
        except ImportError:
            logger.warning("pyexiftool not installed. Run: pip install pyexiftool")
            return False

        self._exiftool_path = get_exiftool_path(self._base_dir)
        if not self._exiftool_path:
            return False

        try:
            helper = exiftool.ExifToolHelper(executable=self._exiftool_path)
            helper.run()
        except Exception as e:
            logger.error(f"Failed to start ExifTool: {e}")
            return False

        self._helper = helper
        logger.debug(f"ExifTool started: {self._exiftool_path}")
        return True

    def stop(self) -> None:
        """Stop ExifTool process. Safe to call more than once."""
        if self._helper:
            try:
                self._helper.terminate()
            except Exception as e:
                logger.debug(f"Error stopping ExifTool: {e}")
            self._helper = None

    def write_tags(self, filepath: str, tags: dict) -> None:
        """Write tags to a file, overwriting it in place.

        Args:
            filepath: Path to file.
            tags: Dict of ExifTool tags.

        Raises:
            RuntimeError: If ExifTool is not running.
            Exception: Whatever pyexiftool raises when the write fails
                (typically exiftool.exceptions.ExifToolExecuteError).
        """
        if not self._helper:
            raise RuntimeError("ExifTool is not running")
        if not tags:
            return

        self._helper.set_tags(filepath, tags, params=[OVERWRITE_ORIGINAL])

    @property
    def is_running(self) -> bool:
        """Check if ExifTool is running."""
        return self._helper is not None

    @property
    def exiftool_path(self) -> Optional[str]:
        """Get the path to ExifTool executable."""
        return self._exiftool_path

    def __enter__(self) -> "ExifToolManager":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
