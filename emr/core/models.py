"""Data models for Export Metadata Restorer."""

import math
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union


# ExifTool tag name -> value, built fresh for every file
TagSet = Dict[str, Any]


class MediaKind(Enum):
    """Kind of media file, decided from its filename extension."""
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True, slots=True)
class MediaFile:
    """A media file discovered in the source tree.

    Immutable: the pipeline never changes it, and never writes to the
    file it points at.
    """
    filepath: str
    kind: MediaKind

    @property
    def directory(self) -> str:
        """Directory containing the file."""
        return os.path.dirname(self.filepath)

    @property
    def filename(self) -> str:
        """File name including the nominal extension."""
        return os.path.basename(self.filepath)

    @property
    def stem(self) -> str:
        """File name without its extension."""
        return os.path.splitext(self.filename)[0]

    @property
    def extension(self) -> str:
        """Nominal extension from the filename, lower-cased with leading dot."""
        return os.path.splitext(self.filename)[1].lower()

    @property
    def is_video(self) -> bool:
        return self.kind is MediaKind.VIDEO


@dataclass(slots=True)
class GeoData:
    """GPS coordinates from a sidecar's geoData block."""
    latitude: float
    longitude: float

    @classmethod
    def from_dict(cls, data: Any) -> Optional["GeoData"]:
        """Create from a geoData dict, or None if unusable.

        Both coordinates must be present, numeric and non-zero. Export tools
        write 0.0/0.0 when a photo has no location, so zero means "unknown".
        """
        if not isinstance(data, dict):
            return None
        latitude = data.get("latitude")
        longitude = data.get("longitude")
        if not _is_coordinate(latitude) or not _is_coordinate(longitude):
            return None
        return cls(latitude=latitude, longitude=longitude)

    def get_coordinates_string(self) -> str:
        """Get coordinates as a space separated 'lat lon' string."""
        return f"{self.latitude} {self.longitude}"


def _is_coordinate(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return bool(value) and math.isfinite(value)


@dataclass(frozen=True, slots=True)
class CorrectedIdentity:
    """Where a media file lands once its extension has been corrected.

    Computed from the file content, so the success path and the
    quarantine path always agree on the name.
    """
    extension: str
    filename: str
    relative_path: str

    def output_path(self, output_dir: str) -> str:
        return os.path.join(output_dir, self.relative_path)

    def error_path(self, error_dir: str) -> str:
        return os.path.join(error_dir, self.relative_path)


class OutcomeCategory(Enum):
    """Categorical result of processing one file.

    The value is the fixed prefix used for its log line.
    """
    SUCCESS = "[OK]"
    SKIPPED_LIVE_PHOTO = "[SKIP LIVE PHOTO VIDEO]"
    MISSING_SIDECAR = "[MISS JSON]"
    EMBED_FAILURE = "[EXIF FAIL]"
    OTHER_ERROR = "[OTHER ERR]"

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def is_failure(self) -> bool:
        return self in (
            OutcomeCategory.MISSING_SIDECAR,
            OutcomeCategory.EMBED_FAILURE,
            OutcomeCategory.OTHER_ERROR,
        )


@dataclass
class Success:
    """File was embedded and committed to the output tree."""
    media: MediaFile
    relative_path: str
    output_path: str

    category: OutcomeCategory = field(default=OutcomeCategory.SUCCESS, init=False)


@dataclass
class Skipped:
    """File was left out of the run entirely."""
    media: MediaFile
    relative_path: str
    reason: str = "Live Photo motion component"

    category: OutcomeCategory = field(default=OutcomeCategory.SKIPPED_LIVE_PHOTO, init=False)


@dataclass
class Failed:
    """File could not be processed; an unmodified copy was quarantined."""
    media: MediaFile
    relative_path: str
    category: OutcomeCategory
    message: str
    error_path: Optional[str] = None  # None if the quarantine copy failed too


ProcessingOutcome = Union[Success, Skipped, Failed]


@dataclass
class ProcessingStats:
    """Statistics from a processing run."""
    processed: int = 0
    skipped_live_photos: int = 0
    missing_sidecars: int = 0
    embed_failures: int = 0
    other_errors: int = 0
    quarantine_failures: int = 0
    extensions_corrected: int = 0

    @property
    def failed(self) -> int:
        return self.missing_sidecars + self.embed_failures + self.other_errors

    def total_files(self) -> int:
        return self.processed + self.skipped_live_photos + self.failed

    def record(self, outcome: ProcessingOutcome) -> None:
        """Count an outcome in the matching bucket."""
        category = outcome.category
        if category is OutcomeCategory.SUCCESS:
            self.processed += 1
        elif category is OutcomeCategory.SKIPPED_LIVE_PHOTO:
            self.skipped_live_photos += 1
        elif category is OutcomeCategory.MISSING_SIDECAR:
            self.missing_sidecars += 1
        elif category is OutcomeCategory.EMBED_FAILURE:
            self.embed_failures += 1
        else:
            self.other_errors += 1

        if isinstance(outcome, Failed) and outcome.error_path is None:
            self.quarantine_failures += 1


@dataclass
class DryRunResult:
    """Results from a dry-run analysis."""
    media_count: int = 0
    image_count: int = 0
    video_count: int = 0
    live_photo_videos: int = 0
    with_sidecar: int = 0
    missing_sidecar: int = 0
    extension_corrections: int = 0
    exiftool_available: bool = False
    exiftool_path: Optional[str] = None
    errors: List[str] = field(default_factory=list)


@dataclass
class RunResult:
    """Results from a full processing run.

    Returned by EMROrchestrator.process().
    """
    stats: ProcessingStats
    source_dir: str
    output_dir: str
    error_dir: str
    elapsed_time: float
    start_time: str
    end_time: str
    failures: List[Failed] = field(default_factory=list)


# (current_item, total_items, message) -> None
# total_items is 0 while the total is still unknown.
ProgressCallback = Callable[[int, int, str], None]
