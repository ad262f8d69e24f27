"""Tests for emr.core.scanner module."""

import os
from unittest.mock import patch

import pytest

from emr.core.errors import TraversalError
from emr.core.models import MediaKind
from emr.core.scanner import MediaScanner

from conftest import JPEG_BYTES, VIDEO_BYTES, write_file


def _scan(directory):
    return list(MediaScanner(directory).iter_media())


class TestMediaScanner:
    """Tests for MediaScanner class."""

    def test_finds_media_only(self, sample_export):
        scanner = MediaScanner(sample_export)
        names = sorted(os.path.basename(m.filepath) for m in scanner.iter_media())

        assert names == ["CLIP.mov", "IMG_01.jpg", "IMG_02.jpg", "LIVE.jpg", "LIVE.mov"]

    def test_counts(self, sample_export):
        scanner = MediaScanner(sample_export)
        list(scanner.iter_media())

        assert scanner.media_count == 5
        # root, 2023, 2023/metadata
        assert scanner.dir_count == 3
        # notes.txt and three sidecars
        assert scanner.ignored_count == 4

    def test_kinds(self, sample_export):
        kinds = {os.path.basename(m.filepath): m.kind for m in _scan(sample_export)}

        assert kinds["CLIP.mov"] is MediaKind.VIDEO
        assert kinds["IMG_01.jpg"] is MediaKind.IMAGE

    def test_paths_are_absolute(self, sample_export):
        for media in _scan(sample_export):
            assert os.path.isabs(media.filepath)

    def test_depth_first_order(self, temp_dir):
        """A subdirectory is fully walked before its later siblings."""
        write_file(os.path.join(temp_dir, "a", "x", "deep.jpg"), JPEG_BYTES)
        write_file(os.path.join(temp_dir, "a", "y.jpg"), JPEG_BYTES)
        write_file(os.path.join(temp_dir, "b", "z.jpg"), JPEG_BYTES)

        paths = [os.path.relpath(m.filepath, temp_dir) for m in _scan(temp_dir)]
        first_b = next(i for i, p in enumerate(paths) if p.startswith("b"))

        assert all(p.startswith("a") for p in paths[:first_b])
        assert len(paths) == 3

    def test_deep_tree(self, temp_dir):
        path = temp_dir
        for i in range(200):
            path = os.path.join(path, "d")
        os.makedirs(path)
        write_file(os.path.join(path, "clip.mp4"), VIDEO_BYTES)

        assert len(_scan(temp_dir)) == 1

    def test_empty_directory(self, temp_dir):
        assert _scan(temp_dir) == []

    def test_is_lazy(self, sample_export):
        iterator = MediaScanner(sample_export).iter_media()

        assert next(iterator) is not None

    def test_missing_root_raises(self, temp_dir):
        with pytest.raises(TraversalError) as exc_info:
            _scan(os.path.join(temp_dir, "missing"))

        assert exc_info.value.path.endswith("missing")

    def test_unlistable_subdirectory_raises(self, sample_export):
        real_scandir = os.scandir
        blocked = os.path.join(sample_export, "2023")

        def fake_scandir(path):
            if path == blocked:
                raise PermissionError(13, "Permission denied")
            return real_scandir(path)

        with patch("emr.core.scanner.os.scandir", side_effect=fake_scandir):
            with pytest.raises(TraversalError) as exc_info:
                _scan(sample_export)

        assert exc_info.value.path == blocked

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_not_followed(self, temp_dir):
        target = os.path.join(temp_dir, "target")
        write_file(os.path.join(target, "a.jpg"), JPEG_BYTES)
        root = os.path.join(temp_dir, "root")
        os.makedirs(root)
        try:
            os.symlink(target, os.path.join(root, "link"))
        except OSError:
            pytest.skip("cannot create symlinks")

        assert _scan(root) == []
