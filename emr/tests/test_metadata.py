"""Tests for emr.core.metadata module."""

import os
import sys
from datetime import datetime, timezone

import pytest

from emr.core.errors import SidecarParseError
from emr.core.metadata import (
    build_date_tags,
    build_description_tags,
    build_gps_tags,
    build_tags,
    capture_datetime,
    format_exif_datetime,
    load_sidecar,
    sidecar_path_for,
)
from emr.core.models import GeoData

from conftest import write_file, write_sidecar


class TestSidecarPathFor:
    """Tests for sidecar_path_for() function."""

    def test_keeps_full_filename(self):
        path = sidecar_path_for(os.path.join("/export", "2023", "IMG_01.jpg"))

        assert path == os.path.join("/export", "2023", "metadata", "IMG_01.jpg.json")

    def test_uses_nominal_extension(self):
        path = sidecar_path_for(os.path.join("/export", "IMG_01.JPEG"))

        assert os.path.basename(path) == "IMG_01.JPEG.json"


class TestLoadSidecar:
    """Tests for load_sidecar() function."""

    def test_reads_object(self, temp_dir):
        media = os.path.join(temp_dir, "a.jpg")
        sidecar = write_sidecar(media, {"description": "Beach"})

        assert load_sidecar(sidecar) == {"description": "Beach"}

    def test_invalid_json_raises(self, temp_dir):
        path = write_file(os.path.join(temp_dir, "metadata", "a.jpg.json"), b"{not json")

        with pytest.raises(SidecarParseError):
            load_sidecar(path)

    def test_non_object_raises(self, temp_dir):
        path = write_file(os.path.join(temp_dir, "metadata", "a.jpg.json"), b"[1, 2]")

        with pytest.raises(SidecarParseError) as exc_info:
            load_sidecar(path)

        assert exc_info.value.sidecar_path == path

    def test_missing_file_raises_oserror(self, temp_dir):
        with pytest.raises(OSError):
            load_sidecar(os.path.join(temp_dir, "missing.json"))

    def test_unicode_content(self, temp_dir):
        media = os.path.join(temp_dir, "café.jpg")
        sidecar = write_sidecar(media, {"description": "Café au lait ☕"})

        assert load_sidecar(sidecar)["description"] == "Café au lait ☕"


class TestFormatExifDatetime:
    """Tests for format_exif_datetime() function."""

    def test_formats_in_utc(self):
        assert format_exif_datetime(1700000000) == "2023:11:14 22:13:20"

    def test_numeric_string(self):
        assert format_exif_datetime("1700000000") == "2023:11:14 22:13:20"

    def test_epoch_zero_accepted(self):
        assert format_exif_datetime(0) == "1970:01:01 00:00:00"

    def test_fractional_seconds_truncated(self):
        assert format_exif_datetime(1700000000.75) == "2023:11:14 22:13:20"

    @pytest.mark.parametrize("value", [None, "soon", True, float("nan"), float("inf"), {}])
    def test_unusable_values(self, value):
        assert format_exif_datetime(value) is None

    def test_out_of_range(self):
        assert format_exif_datetime(10 ** 20) is None

    @pytest.mark.skipif(sys.platform == "win32", reason="negative timestamps are rejected on Windows")
    def test_year_is_zero_padded(self):
        assert format_exif_datetime(-61000000000) == "0036:12:26 11:33:20"



class TestCaptureDatetime:
    """Tests for capture_datetime() function."""

    def test_returns_aware_utc(self):
        result = capture_datetime({"creationTime": {"timestamp": 1700000000}})

        assert result == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_missing_returns_none(self):
        assert capture_datetime({}) is None
        assert capture_datetime({"creationTime": 1700000000}) is None


class TestBuildDescriptionTags:
    """Tests for build_description_tags() function."""

    def test_image(self):
        assert build_description_tags("Beach", is_video=False) == {"ImageDescription": "Beach"}

    def test_video(self):
        assert build_description_tags("Beach", is_video=True) == {"QuickTime:Title": "Beach"}

    @pytest.mark.parametrize("value", ["", None, 42])
    def test_empty_or_wrong_type(self, value):
        assert build_description_tags(value, is_video=False) == {}


class TestBuildDateTags:
    """Tests for build_date_tags() function."""

    def test_image(self):
        assert build_date_tags(1700000000, is_video=False) == {
            "DateTimeOriginal": "2023:11:14 22:13:20",
        }

    def test_video_gets_both_tags(self):
        assert build_date_tags(1700000000, is_video=True) == {
            "CreateDate": "2023:11:14 22:13:20",
            "DateTimeOriginal": "2023:11:14 22:13:20",
        }

    def test_unusable(self):
        assert build_date_tags(None, is_video=True) == {}


class TestBuildGpsTags:
    """Tests for build_gps_tags() function."""

    def test_none_returns_empty(self):
        assert build_gps_tags(None, is_video=False) == {}

    def test_image_has_refs(self):
        tags = build_gps_tags(GeoData(-33.8688, 151.2093), is_video=False)

        assert tags == {
            "GPSLatitude": -33.8688,
            "GPSLongitude": 151.2093,
            "GPSLatitudeRef": "S",
            "GPSLongitudeRef": "E",
        }

    def test_western_hemisphere(self):
        tags = build_gps_tags(GeoData(40.7128, -74.006), is_video=False)

        assert tags["GPSLatitudeRef"] == "N"
        assert tags["GPSLongitudeRef"] == "W"

    def test_video_has_coordinates_string(self):
        tags = build_gps_tags(GeoData(40.7128, -74.006), is_video=True)

        assert tags == {
            "GPSLatitude": 40.7128,
            "GPSLongitude": -74.006,
            "QuickTime:GPSCoordinates": "40.7128 -74.006",
        }


class TestBuildTags:
    """Tests for build_tags() function."""

    def test_full_image_sidecar(self):
        tags = build_tags({
            "description": "Beach",
            "creationTime": {"timestamp": 1700000000},
            "geoData": {"latitude": 40.7128, "longitude": -74.006},
        }, is_video=False)

        assert tags == {
            "ImageDescription": "Beach",
            "DateTimeOriginal": "2023:11:14 22:13:20",
            "GPSLatitude": 40.7128,
            "GPSLongitude": -74.006,
            "GPSLatitudeRef": "N",
            "GPSLongitudeRef": "W",
        }

    def test_full_video_sidecar(self):
        tags = build_tags({
            "description": "Clip",
            "creationTime": {"timestamp": 1700000000},
            "geoData": {"latitude": 40.7128, "longitude": -74.006},
        }, is_video=True)

        assert tags["QuickTime:Title"] == "Clip"
        assert tags["CreateDate"] == "2023:11:14 22:13:20"
        assert tags["QuickTime:GPSCoordinates"] == "40.7128 -74.006"
        assert "ImageDescription" not in tags

    def test_empty_sidecar(self):
        assert build_tags({}, is_video=False) == {}

    def test_ignores_unknown_fields(self):
        tags = build_tags({"title": "IMG_01.jpg", "people": ["Alice"]}, is_video=False)

        assert tags == {}

    def test_zero_location_omitted(self):
        tags = build_tags({
            "creationTime": {"timestamp": 1700000000},
            "geoData": {"latitude": 0.0, "longitude": 0.0},
        }, is_video=False)

        assert tags == {"DateTimeOriginal": "2023:11:14 22:13:20"}

