"""Tests for emr.core.config module."""

import os

from emr.core.config import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SOURCE_DIR,
    ENV_ERROR_DIR,
    ENV_OUTPUT_DIR,
    ENV_SOURCE_DIR,
    ENV_TMP_DIR,
    RunConfig,
)
from emr.core.utils import resolve_path


class TestRunConfig:
    """Tests for RunConfig.from_env() and resolved()."""

    def test_defaults(self):
        config = RunConfig.from_env(environ={})

        assert config.source_dir == resolve_path(DEFAULT_SOURCE_DIR)
        assert config.output_dir == resolve_path(DEFAULT_OUTPUT_DIR)
        assert config.set_file_dates is True

    def test_defaults_expand_home(self):
        config = RunConfig.from_env(environ={})

        assert config.source_dir.startswith(os.path.expanduser("~"))
        assert config.source_dir.endswith("Ente Photos")

    def test_environment_overrides_defaults(self, temp_dir):
        env = {
            ENV_SOURCE_DIR: os.path.join(temp_dir, "src"),
            ENV_OUTPUT_DIR: os.path.join(temp_dir, "out"),
            ENV_ERROR_DIR: os.path.join(temp_dir, "err"),
            ENV_TMP_DIR: os.path.join(temp_dir, "tmp"),
        }

        config = RunConfig.from_env(environ=env)

        assert config.source_dir == os.path.join(temp_dir, "src")
        assert config.output_dir == os.path.join(temp_dir, "out")
        assert config.error_dir == os.path.join(temp_dir, "err")
        assert config.tmp_dir == os.path.join(temp_dir, "tmp")

    def test_explicit_overrides_environment(self, temp_dir):
        env = {ENV_SOURCE_DIR: os.path.join(temp_dir, "env")}

        config = RunConfig.from_env(environ=env, source_dir=os.path.join(temp_dir, "flag"))

        assert config.source_dir == os.path.join(temp_dir, "flag")

    def test_empty_environment_value_ignored(self):
        config = RunConfig.from_env(environ={ENV_OUTPUT_DIR: ""})

        assert config.output_dir == resolve_path(DEFAULT_OUTPUT_DIR)

    def test_relative_paths_made_absolute(self):
        config = RunConfig.from_env(environ={}, output_dir="out/")

        assert config.output_dir == os.path.join(os.getcwd(), "out")

    def test_set_file_dates_passed_through(self):
        assert RunConfig.from_env(environ={}, set_file_dates=False).set_file_dates is False

    def test_resolved_returns_copy(self):
        config = RunConfig(source_dir="a/../b")

        resolved = config.resolved()

        assert resolved.source_dir == os.path.join(os.getcwd(), "b")
        assert config.source_dir == "a/../b"
