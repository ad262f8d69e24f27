"""Core processing logic for Export Metadata Restorer."""

from emr.core.models import (
    TagSet,
    MediaKind,
    MediaFile,
    GeoData,
    CorrectedIdentity,
    OutcomeCategory,
    Success,
    Skipped,
    Failed,
    ProcessingOutcome,
    ProcessingStats,
    DryRunResult,
    RunResult,
    ProgressCallback,
)

from emr.core.errors import (
    EMRError,
    ProcessingError,
    MissingSidecarError,
    EmbedFailureError,
    SidecarParseError,
    SourceNotFoundError,
    TraversalError,
    EngineUnavailableError,
)

from emr.core.utils import (
    exists,
    checkout_dir,
    normalize_path,
    resolve_path,
)

from emr.core.config import RunConfig

from emr.core.logger import (
    BufferedLogger,
    NullLogger,
    RunLogger,
    create_logger,
)

from emr.core.media import (
    IMAGE_EXTENSIONS,
    VIDEO_EXTENSIONS,
    classify,
    is_image_file,
    is_video_file,
    is_media_file,
)

from emr.core.scanner import (
    MediaScanner,
)

from emr.core.matcher import (
    LivePhotoMatcher,
    LivePhotoMatch,
)

from emr.core.metadata import (
    sidecar_path_for,
    load_sidecar,
    format_exif_datetime,
    build_tags,
)

from emr.core.sniffer import (
    detect_extension,
    corrected_extension,
    resolve_identity,
)

from emr.core.exiftool import (
    get_exiftool_path,
    is_exiftool_available,
    ExifToolManager,
)

from emr.core.stager import FileStager

from emr.core.quarantine import ErrorQuarantine

from emr.core.orchestrator import EMROrchestrator

__all__ = [
    # Models
    "TagSet",
    "MediaKind",
    "MediaFile",
    "GeoData",
    "CorrectedIdentity",
    "OutcomeCategory",
    "Success",
    "Skipped",
    "Failed",
    "ProcessingOutcome",
    "ProcessingStats",
    "DryRunResult",
    "RunResult",
    "ProgressCallback",
    # Errors
    "EMRError",
    "ProcessingError",
    "MissingSidecarError",
    "EmbedFailureError",
    "SidecarParseError",
    "SourceNotFoundError",
    "TraversalError",
    "EngineUnavailableError",
    # Utils
    "exists",
    "checkout_dir",
    "normalize_path",
    "resolve_path",
    # Config
    "RunConfig",
    # Logger
    "BufferedLogger",
    "NullLogger",
    "RunLogger",
    "create_logger",
    # Media
    "IMAGE_EXTENSIONS",
    "VIDEO_EXTENSIONS",
    "classify",
    "is_image_file",
    "is_video_file",
    "is_media_file",
    # Scanner
    "MediaScanner",
    # Matcher
    "LivePhotoMatcher",
    "LivePhotoMatch",
    # Metadata
    "sidecar_path_for",
    "load_sidecar",
    "format_exif_datetime",
    "build_tags",
    # Sniffer
    "detect_extension",
    "corrected_extension",
    "resolve_identity",
    # ExifTool
    "get_exiftool_path",
    "is_exiftool_available",
    "ExifToolManager",
    # Stager / quarantine
    "FileStager",
    "ErrorQuarantine",
    # Orchestrator
    "EMROrchestrator",
]
