"""Exception types for Export Metadata Restorer.

Per-file errors (ProcessingError subclasses) are caught at the single-file
boundary and lead to a quarantine copy. Everything else here is fatal for
the run.
"""


class EMRError(Exception):
    """Base exception for the application."""


class ProcessingError(EMRError):
    """A failure confined to one media file."""

    def __init__(self, media_path: str, message: str):
        super().__init__(message)
        self.media_path = media_path


class MissingSidecarError(ProcessingError):
    """No JSON sidecar exists at the expected path."""

    def __init__(self, media_path: str, expected_sidecar_path: str):
        super().__init__(media_path, f"No matching JSON found at {expected_sidecar_path}")
        self.expected_sidecar_path = expected_sidecar_path


class EmbedFailureError(ProcessingError):
    """ExifTool failed to write the tag set into the staged copy."""

    def __init__(self, media_path: str, cause: BaseException):
        super().__init__(media_path, f"Failed to embed metadata into {media_path}: {cause}")
        self.cause = cause


class SidecarParseError(ProcessingError):
    """The sidecar exists but is not a readable JSON object."""

    def __init__(self, sidecar_path: str, cause: object):
        super().__init__(sidecar_path, f"Cannot parse sidecar {sidecar_path}: {cause}")
        self.sidecar_path = sidecar_path
        self.cause = cause


class SourceNotFoundError(EMRError):
    """The source directory does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Source folder does not exist: {path}")
        self.path = path


class TraversalError(EMRError):
    """A directory in the source tree could not be listed."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Cannot list directory {path}: {cause}")
        self.path = path
        self.cause = cause


class EngineUnavailableError(EMRError):
    """ExifTool could not be found or started."""
