"""Logging utilities for Export Metadata Restorer."""

import logging
import os
import time
from typing import Optional, TextIO, Union

from emr.core.models import ProcessingOutcome, Skipped, Success

# Per-file result lines go to their own logger so they can be routed
# separately from diagnostic messages.
RUN_LOGGER_NAME = "emr.run"


class BufferedLogger:
    """Buffered file logger with context manager support.

    Usage:
        with BufferedLogger("/path/to/logs") as logger:
            logger.log("Processing started")
            logger.log("File processed: photo.jpg")
        # File is automatically closed
    """

    def __init__(self, output_dir: str, filename: str = "emr_log.txt"):
        """Initialize logger.

        Args:
            output_dir: Directory to write log file.
            filename: Name of log file (default: emr_log.txt).
        """
        self.output_dir = output_dir
        self.filename = filename
        self.filepath = os.path.join(output_dir, filename)
        self._handle: Optional[TextIO] = None

    @classmethod
    def for_path(cls, filepath: str) -> "BufferedLogger":
        """Create a logger writing to an explicit file path."""
        directory, filename = os.path.split(os.path.abspath(filepath))
        return cls(directory, filename)

    def _open(self) -> None:
        """Open the log file for writing (lazy initialization)."""
        if self._handle is None:
            os.makedirs(self.output_dir, exist_ok=True)
            self._handle = open(self.filepath, "a", encoding="utf-8")

    def log(self, message: str) -> None:
        """Write a timestamped message to the log.

        Args:
            message: Message to log.
        """
        self._open()  # Lazy open on first log
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S")
        self._handle.write(f"{timestamp} - {message}\n")

    def flush(self) -> None:
        """Flush the log buffer to disk."""
        if self._handle:
            self._handle.flush()

    def close(self) -> None:
        """Close the log file."""
        if self._handle:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "BufferedLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - ensures file is closed."""
        self.close()

    @property
    def is_open(self) -> bool:
        """Check if logger is open."""
        return self._handle is not None


class NullLogger:
    """A logger that does nothing - used when no log file is requested."""

    def log(self, message: str) -> None:
        pass

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "NullLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    @property
    def is_open(self) -> bool:
        return True


def create_logger(log_file: Optional[str] = None) -> Union[BufferedLogger, NullLogger]:
    """Create a file logger, or a NullLogger when no path is given."""
    if log_file:
        return BufferedLogger.for_path(log_file)
    return NullLogger()


def format_outcome(outcome: ProcessingOutcome) -> str:
    """Format the categorical result line for one file.

    Example:
        >>> format_outcome(Success(media, "2023/IMG_01.jpg", "/out/2023/IMG_01.png"))
        '[OK] 2023/IMG_01.jpg -> /out/2023/IMG_01.png'
    """
    prefix = outcome.category.prefix
    if isinstance(outcome, Success):
        return f"{prefix} {outcome.relative_path} -> {outcome.output_path}"
    if isinstance(outcome, Skipped):
        return f"{prefix} {outcome.relative_path}"
    line = f"{prefix} {outcome.relative_path}: {outcome.message}"
    if outcome.error_path is None:
        line += " (quarantine copy failed)"
    return line


class RunLogger:
    """Reports per-file outcomes of a run.

    Every outcome is logged to the `emr.run` logger (INFO for successes and
    skips, WARNING for failures) and mirrored into an optional log file.
    """

    def __init__(self, file_logger: Union[BufferedLogger, NullLogger, None] = None):
        self._logger = logging.getLogger(RUN_LOGGER_NAME)
        self._file = file_logger or NullLogger()

    def log(self, message: str) -> None:
        """Log a free-form run message."""
        self._logger.info(message)
        self._file.log(message)

    def outcome(self, outcome: ProcessingOutcome) -> None:
        """Log the categorical result line for one file."""
        line = format_outcome(outcome)
        if outcome.category.is_failure:
            self._logger.warning(line)
        else:
            self._logger.info(line)
        self._file.log(line)

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

