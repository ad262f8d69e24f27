"""EXIF metadata tag builders for Export Metadata Restorer.

Converts export sidecar JSON documents into ExifTool-compatible tag
dictionaries. Every builder returns an empty dict when its source field is
missing or unusable, so partial metadata never produces placeholder tags.
"""

import math
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Use orjson for faster JSON parsing (3-10x faster than stdlib json)
try:
    import orjson
    _USE_ORJSON = True
except ImportError:
    import json
    _USE_ORJSON = False

from emr.core.errors import SidecarParseError
from emr.core.models import GeoData, TagSet

# Sidecars live in a "metadata" folder next to the media they describe
SIDECAR_DIR_NAME = "metadata"
SIDECAR_SUFFIX = ".json"


def sidecar_path_for(media_path: str) -> str:
    """Get the expected sidecar path for a media file.

    The sidecar keeps the full original filename, extension included.

    Example:
        >>> sidecar_path_for("/export/2023/IMG_01.jpg")
        '/export/2023/metadata/IMG_01.jpg.json'
    """
    directory, filename = os.path.split(media_path)
    return os.path.join(directory, SIDECAR_DIR_NAME, filename + SIDECAR_SUFFIX)


def load_sidecar(path: str) -> Dict[str, Any]:
    """Read and parse a sidecar JSON file.

    Callers are expected to check that the file exists first; a missing
    file surfaces here as a plain OSError.

    Args:
        path: Path to the sidecar.

    Returns:
        The parsed JSON object.

    Raises:
        SidecarParseError: If the content is not valid JSON or not an object.
    """
    # Read file in binary mode for orjson compatibility
    with open(path, "rb") as f:
        raw = f.read()

    try:
        if _USE_ORJSON:
            content = orjson.loads(raw)
        else:
            content = json.loads(raw.decode("utf-8"))
    except ValueError as e:
        # orjson.JSONDecodeError, json.JSONDecodeError and UnicodeDecodeError
        # are all ValueError subclasses
        raise SidecarParseError(path, e) from e

    if not isinstance(content, dict):
        raise SidecarParseError(path, f"expected a JSON object, got {type(content).__name__}")
    return content


def _utc_moment(timestamp: Any) -> Optional[datetime]:
    """Convert Unix seconds to an aware UTC datetime, or None if unusable."""
    if isinstance(timestamp, bool):
        return None
    if isinstance(timestamp, str):
        timestamp = timestamp.strip()
    try:
        seconds = float(timestamp)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(seconds):
        return None

    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return moment.replace(microsecond=0)


def format_exif_datetime(timestamp: Any) -> Optional[str]:
    """Format Unix seconds as a UTC EXIF date-time string.

    Args:
        timestamp: Seconds since epoch, as a number or numeric string.

    Returns:
        'YYYY:MM:DD HH:MM:SS', or None if the value is not a finite number
        or falls outside the representable date range. The year is always
        four digits.

    Example:
        >>> format_exif_datetime(1700000000)
        '2023:11:14 22:13:20'
        >>> format_exif_datetime("1700000000")
        '2023:11:14 22:13:20'
    """
    moment = _utc_moment(timestamp)
    if moment is None:
        return None
    # strftime's %Y is not zero-padded below year 1000 on every platform
    return f"{moment.year:04d}:{moment:%m:%d %H:%M:%S}"


def capture_datetime(data: Dict[str, Any]) -> Optional[datetime]:
    """Get the capture time of a sidecar as an aware UTC datetime, or None."""
    return _utc_moment(_get_timestamp(data))


def _get_timestamp(data: Dict[str, Any]) -> Any:
    creation_time = data.get("creationTime")
    if not isinstance(creation_time, dict):
        return None
    return creation_time.get("timestamp")


def build_description_tags(description: Any, is_video: bool) -> TagSet:
    """Convert a sidecar description to ExifTool tags.

    Example:
        >>> build_description_tags("Beach", is_video=False)
        {'ImageDescription': 'Beach'}
        >>> build_description_tags("Beach", is_video=True)
        {'QuickTime:Title': 'Beach'}
    """
    if not isinstance(description, str) or not description:
        return {}
    if is_video:
        return {"QuickTime:Title": description}
    return {"ImageDescription": description}


def build_date_tags(timestamp: Any, is_video: bool) -> TagSet:
    """Convert a sidecar creation timestamp to ExifTool date tags.

    Videos get both CreateDate and DateTimeOriginal with the same value.
    """
    formatted = format_exif_datetime(timestamp)
    if formatted is None:
        return {}
    if is_video:
        return {"CreateDate": formatted, "DateTimeOriginal": formatted}
    return {"DateTimeOriginal": formatted}


def build_gps_tags(geo_data: Optional[GeoData], is_video: bool) -> TagSet:
    """Convert GPS coordinates to ExifTool tag dictionary.

    Coordinates are written as signed decimal degrees. Images also get the
    hemisphere reference tags, since EXIF stores unsigned rationals; videos
    get the combined QuickTime coordinate string instead.

    Example:
        >>> build_gps_tags(GeoData(-33.8688, 151.2093), is_video=False)
        {
            'GPSLatitude': -33.8688,
            'GPSLongitude': 151.2093,
            'GPSLatitudeRef': 'S',
            'GPSLongitudeRef': 'E',
        }
    """
    if geo_data is None:
        return {}

    tags: TagSet = {
        "GPSLatitude": geo_data.latitude,
        "GPSLongitude": geo_data.longitude,
    }
    if is_video:
        tags["QuickTime:GPSCoordinates"] = geo_data.get_coordinates_string()
    else:
        tags["GPSLatitudeRef"] = "N" if geo_data.latitude >= 0 else "S"
        tags["GPSLongitudeRef"] = "E" if geo_data.longitude >= 0 else "W"
    return tags


def build_tags(data: Dict[str, Any], is_video: bool) -> TagSet:
    """Build the complete ExifTool tag dictionary for one sidecar.

    A pure function of the sidecar content and the media kind.

    Args:
        data: Parsed sidecar JSON object.
        is_video: Whether the target media file is a video.

    Returns:
        Combined dict of all tags, empty if nothing usable was found.
    """
    tags: TagSet = {}
    tags.update(build_description_tags(data.get("description"), is_video))
    tags.update(build_date_tags(_get_timestamp(data), is_video))
    tags.update(build_gps_tags(GeoData.from_dict(data.get("geoData")), is_video))
    return tags

