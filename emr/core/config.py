"""Run configuration for Export Metadata Restorer.

Each directory resolves from, in order: an explicit value (CLI flag), an
environment variable, then the built-in default. Paths are normalized and
made absolute before the run starts.
"""

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from emr.core.utils import resolve_path

DEFAULT_SOURCE_DIR = "~/path/to/Ente Photos"
DEFAULT_OUTPUT_DIR = "~/Documents/output"
DEFAULT_ERROR_DIR = "~/Documents/error"
DEFAULT_TMP_DIR = "~/Documents/tmp"

ENV_SOURCE_DIR = "EMR_SOURCE_DIR"
ENV_OUTPUT_DIR = "EMR_OUTPUT_DIR"
ENV_ERROR_DIR = "EMR_ERROR_DIR"
ENV_TMP_DIR = "EMR_TMP_DIR"


@dataclass(frozen=True)
class RunConfig:
    """Directories used by a run.

    Attributes:
        source_dir: Export tree to read from. Never written to.
        output_dir: Tree receiving successfully processed files.
        error_dir: Tree receiving unmodified copies of failed files.
        tmp_dir: Scratch area for staged copies.
        set_file_dates: Stamp output files with their capture date.
    """
    source_dir: str = DEFAULT_SOURCE_DIR
    output_dir: str = DEFAULT_OUTPUT_DIR
    error_dir: str = DEFAULT_ERROR_DIR
    tmp_dir: str = DEFAULT_TMP_DIR
    set_file_dates: bool = True

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        source_dir: Optional[str] = None,
        output_dir: Optional[str] = None,
        error_dir: Optional[str] = None,
        tmp_dir: Optional[str] = None,
        set_file_dates: bool = True
    ) -> "RunConfig":
        """Build a resolved config from explicit values, environment and defaults.

        Args:
            environ: Environment mapping (default: os.environ).
            source_dir, output_dir, error_dir, tmp_dir: Explicit overrides;
                None means "not given".
            set_file_dates: Stamp output files with their capture date.

        Returns:
            RunConfig with absolute paths.
        """
        env = os.environ if environ is None else environ

        def pick(explicit: Optional[str], var: str, default: str) -> str:
            if explicit:
                return explicit
            return env.get(var) or default

        config = cls(
            source_dir=pick(source_dir, ENV_SOURCE_DIR, DEFAULT_SOURCE_DIR),
            output_dir=pick(output_dir, ENV_OUTPUT_DIR, DEFAULT_OUTPUT_DIR),
            error_dir=pick(error_dir, ENV_ERROR_DIR, DEFAULT_ERROR_DIR),
            tmp_dir=pick(tmp_dir, ENV_TMP_DIR, DEFAULT_TMP_DIR),
            set_file_dates=set_file_dates,
        )
        return config.resolved()

    def resolved(self) -> "RunConfig":
        """Get a copy with every directory normalized and absolute."""
        return replace(
            self,
            source_dir=resolve_path(self.source_dir),
            output_dir=resolve_path(self.output_dir),
            error_dir=resolve_path(self.error_dir),
            tmp_dir=resolve_path(self.tmp_dir),
        )
