"""Pytest configuration and fixtures."""

import os
import json
import tempfile
import shutil
from typing import Generator
from unittest.mock import MagicMock

import pytest

from emr.core.config import RunConfig
from emr.core.exiftool import ExifToolManager


# Minimal signature bytes, enough for content sniffing
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 24
VIDEO_BYTES = b"fake video data"


def write_file(path: str, content: bytes) -> str:
    """Write bytes to path, creating parent folders."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(content)
    return path


def write_sidecar(media_path: str, data) -> str:
    """Write the JSON sidecar for a media file into its metadata folder."""
    directory, filename = os.path.split(media_path)
    sidecar = os.path.join(directory, "metadata", filename + ".json")
    os.makedirs(os.path.dirname(sidecar), exist_ok=True)
    with open(sidecar, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return sidecar


def read_bytes(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir)


@pytest.fixture
def sample_export(temp_dir: str) -> str:
    """Create a sample export tree for testing.

    Structure:
        temp_dir/export/
        ├── notes.txt
        └── 2023/
            ├── IMG_01.jpg          (PNG content)
            ├── IMG_02.jpg
            ├── CLIP.mov            (no sidecar)
            ├── LIVE.jpg
            ├── LIVE.mov            (Live Photo video)
            └── metadata/
                ├── IMG_01.jpg.json
                ├── IMG_02.jpg.json
                └── LIVE.jpg.json
    """
    root = os.path.join(temp_dir, "export")
    album = os.path.join(root, "2023")

    write_file(os.path.join(root, "notes.txt"), b"not media")

    # Wrong extension: PNG data behind a .jpg name
    img1 = write_file(os.path.join(album, "IMG_01.jpg"), PNG_BYTES)
    write_sidecar(img1, {
        "description": "Beach",
        "creationTime": {"timestamp": 1700000000},
        "geoData": {"latitude": 40.7128, "longitude": -74.006},
    })

    img2 = write_file(os.path.join(album, "IMG_02.jpg"), JPEG_BYTES)
    write_sidecar(img2, {
        "creationTime": {"timestamp": 1700000000},
        "geoData": {"latitude": 0.0, "longitude": 0.0},
    })

    write_file(os.path.join(album, "CLIP.mov"), VIDEO_BYTES)

    live = write_file(os.path.join(album, "LIVE.jpg"), JPEG_BYTES)
    write_sidecar(live, {"description": "Live"})
    write_file(os.path.join(album, "LIVE.mov"), VIDEO_BYTES)

    return root


@pytest.fixture
def run_config(temp_dir: str, sample_export: str) -> RunConfig:
    """Config pointing at the sample export with sibling output folders."""
    return RunConfig(
        source_dir=sample_export,
        output_dir=os.path.join(temp_dir, "output"),
        error_dir=os.path.join(temp_dir, "error"),
        tmp_dir=os.path.join(temp_dir, "tmp"),
    ).resolved()


@pytest.fixture
def mock_engine() -> MagicMock:
    """An ExifTool manager that starts and accepts every write."""
    engine = MagicMock(spec=ExifToolManager)
    engine.start.return_value = True
    return engine
