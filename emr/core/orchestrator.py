"""High-level orchestrator for Export Metadata Restorer.

Walks the source tree and drives every media file through the pipeline:
Live Photo check, sidecar lookup, tag mapping, type sniffing, staged
embedding, and quarantine on failure. Used by the CLI.
"""

import logging
import os
import time
from typing import Optional

from emr.core.config import RunConfig
from emr.core.errors import (
    EmbedFailureError,
    EngineUnavailableError,
    MissingSidecarError,
    SourceNotFoundError,
    TraversalError,
)
from emr.core.exiftool import ExifToolManager, get_exiftool_path, is_exiftool_available
from emr.core.logger import RunLogger
from emr.core.matcher import LivePhotoMatcher
from emr.core.metadata import build_tags, capture_datetime, load_sidecar, sidecar_path_for
from emr.core.models import (
    CorrectedIdentity,
    DryRunResult,
    Failed,
    MediaFile,
    OutcomeCategory,
    ProcessingOutcome,
    ProcessingStats,
    ProgressCallback,
    RunResult,
    Skipped,
    Success,
)
from emr.core.quarantine import ErrorQuarantine
from emr.core.scanner import MediaScanner
from emr.core.sniffer import resolve_identity
from emr.core.stager import FileStager
from emr.core.utils import checkout_dir, exists, relative_path

logger = logging.getLogger(__name__)


class EMROrchestrator:
    """Coordinates a metadata restoration run.

    Files are processed strictly one at a time; each reaches a terminal
    state (committed, quarantined or skipped) before the next starts. The
    ExifTool engine is started once per run and always stopped, including
    when the run aborts.

    Usage:
        config = RunConfig.from_env(source_dir="/path/to/export")
        orchestrator = EMROrchestrator(config)

        # Preview
        preview = orchestrator.dry_run()
        print(f"{preview.missing_sidecar} files have no sidecar")

        # Actual processing
        result = orchestrator.process(on_progress=my_callback)
        print(f"Processed: {result.stats.processed} files")
    """

    def __init__(
        self,
        config: RunConfig,
        engine: Optional[ExifToolManager] = None,
        run_logger: Optional[RunLogger] = None
    ):
        """Initialize orchestrator.

        Args:
            config: Run directories; resolved to absolute paths here.
            engine: ExifTool manager to use (default: a new ExifToolManager).
            run_logger: Reporter for per-file outcome lines.
        """
        self.config = config.resolved()
        self.engine = engine if engine is not None else ExifToolManager()
        self.run_logger = run_logger if run_logger is not None else RunLogger()
        self.stats = ProcessingStats()

        self._matcher = LivePhotoMatcher()
        self._quarantine = ErrorQuarantine(self.config.error_dir, self.config.source_dir)
        self._stager = FileStager(
            self.config.output_dir,
            self.config.error_dir,
            self.config.tmp_dir,
            self.engine,
            set_file_dates=self.config.set_file_dates,
        )

    @property
    def source_dir(self) -> str:
        return self.config.source_dir

    def _prepare_directories(self) -> None:
        """Create the base output, error and scratch directories."""
        for path in (self.config.output_dir, self.config.error_dir, self.config.tmp_dir):
            checkout_dir(path)

    def process(self, on_progress: Optional[ProgressCallback] = None) -> RunResult:
        """Run full processing over the source tree.

        Args:
            on_progress: Optional callback for progress updates. The total
                         is reported as 0 since files are discovered lazily.

        Returns:
            RunResult with statistics and failures.

        Raises:
            SourceNotFoundError: If the source directory does not exist.
            EngineUnavailableError: If ExifTool cannot be started.
            TraversalError: If a directory cannot be listed.
            OSError, ValueError: If a base directory cannot be created.
        """
        start_time = time.time()
        start_date = time.strftime("%Y-%m-%d %H:%M:%S")

        if not os.path.isdir(self.source_dir):
            raise SourceNotFoundError(self.source_dir)

        self.stats = ProcessingStats()
        self._matcher.clear()
        result = RunResult(
            stats=self.stats,
            source_dir=self.source_dir,
            output_dir=self.config.output_dir,
            error_dir=self.config.error_dir,
            elapsed_time=0,
            start_time=start_date,
            end_time="",
        )

        if not self.engine.start():
            raise EngineUnavailableError("ExifTool could not be started")

        try:
            self._prepare_directories()
            self.run_logger.log(f"Started processing: {self.source_dir}")

            scanner = MediaScanner(self.source_dir)
            for i, media in enumerate(scanner.iter_media(), start=1):
                if on_progress:
                    on_progress(i, 0, f"Processing: {media.filename}")

                outcome = self.process_file(media)
                if isinstance(outcome, Failed):
                    result.failures.append(outcome)

            self.run_logger.log("All done. Closing ExifTool...")
        finally:
            self.engine.stop()

        result.elapsed_time = round(time.time() - start_time, 3)
        result.end_time = time.strftime("%Y-%m-%d %H:%M:%S")

        if on_progress:
            total = self.stats.total_files()
            on_progress(total, total, "Processing complete")

        return result

    def process_file(self, media: MediaFile) -> ProcessingOutcome:
        """Drive one media file to a terminal state.

        Never raises for per-file problems: failures are quarantined,
        logged and returned as Failed outcomes.

        Args:
            media: File to process.

        Returns:
            Success, Skipped or Failed.
        """
        rel = relative_path(media.filepath, self.source_dir)
        identity: Optional[CorrectedIdentity] = None

        try:
            if self._matcher.is_live_photo_video(media):
                outcome: ProcessingOutcome = Skipped(media, rel)
            else:
                sidecar_path = sidecar_path_for(media.filepath)
                if not os.path.isfile(sidecar_path):
                    raise MissingSidecarError(media.filepath, sidecar_path)

                data = load_sidecar(sidecar_path)
                tags = build_tags(data, media.is_video)

                identity = resolve_identity(media, self.source_dir)
                output_path = self._stager.stage(
                    media, tags, identity, date=capture_datetime(data)
                )
                if identity.extension != media.extension:
                    self.stats.extensions_corrected += 1
                outcome = Success(media, rel, output_path)
        except MissingSidecarError as e:
            outcome = self._fail(media, rel, OutcomeCategory.MISSING_SIDECAR, e, identity)
        except EmbedFailureError as e:
            outcome = self._fail(media, rel, OutcomeCategory.EMBED_FAILURE, e, identity)
        except Exception as e:
            outcome = self._fail(media, rel, OutcomeCategory.OTHER_ERROR, e, identity)

        self.stats.record(outcome)
        self.run_logger.outcome(outcome)
        return outcome

    def _fail(
        self,
        media: MediaFile,
        rel: str,
        category: OutcomeCategory,
        error: Exception,
        identity: Optional[CorrectedIdentity]
    ) -> Failed:
        """Quarantine a failed file and build its outcome."""
        logger.debug(f"{category.name} for {media.filepath}", exc_info=error)
        error_path = self._quarantine.quarantine(media, identity)
        return Failed(media, rel, category, str(error), error_path=error_path)

    def dry_run(self, on_progress: Optional[ProgressCallback] = None) -> DryRunResult:
        """Preview what would be processed without writing anything.

        Args:
            on_progress: Optional callback for progress updates.

        Returns:
            DryRunResult with counts; problems are listed in errors.
        """
        result = DryRunResult()

        if not exists(self.source_dir):
            result.errors.append(f"Source path does not exist: {self.source_dir}")
            return result

        result.exiftool_available = is_exiftool_available()
        if result.exiftool_available:
            result.exiftool_path = get_exiftool_path()

        matcher = LivePhotoMatcher()
        scanner = MediaScanner(self.source_dir)
        try:
            for i, media in enumerate(scanner.iter_media(), start=1):
                if on_progress:
                    on_progress(i, 0, f"Analyzing: {media.filename}")
                self._preview_file(media, matcher, result)
        except TraversalError as e:
            result.errors.append(str(e))

        if on_progress:
            on_progress(result.media_count, result.media_count, "Analysis complete")

        return result

    def _preview_file(self, media: MediaFile, matcher: LivePhotoMatcher, result: DryRunResult) -> None:
        result.media_count += 1
        if media.is_video:
            result.video_count += 1
        else:
            result.image_count += 1

        try:
            if matcher.is_live_photo_video(media):
                result.live_photo_videos += 1
                return

            if os.path.isfile(sidecar_path_for(media.filepath)):
                result.with_sidecar += 1
            else:
                result.missing_sidecar += 1

            identity = resolve_identity(media, self.source_dir)
            if identity.extension != media.extension:
                result.extension_corrections += 1
        except OSError as e:
            result.errors.append(f"Cannot inspect {media.filepath}: {e}")
