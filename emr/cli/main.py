"""Command-line interface for Export Metadata Restorer."""

import argparse
import logging
import shutil
import sys
from typing import List, Optional

from tqdm import tqdm

from emr import __version__
from emr.core.config import (
    DEFAULT_ERROR_DIR,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SOURCE_DIR,
    DEFAULT_TMP_DIR,
    ENV_ERROR_DIR,
    ENV_OUTPUT_DIR,
    ENV_SOURCE_DIR,
    ENV_TMP_DIR,
    RunConfig,
)
from emr.core.errors import EMRError, EngineUnavailableError
from emr.core.exiftool import get_install_instructions
from emr.core.logger import RunLogger, create_logger
from emr.core.orchestrator import EMROrchestrator
from emr.core.utils import exists

logger = logging.getLogger(__name__)


# Program description
DESCRIPTION = """Export Metadata Restorer

Re-embeds metadata from exported JSON sidecars back into photos and videos.
For every media file at <source>/<dir>/<name>.<ext> the sidecar is read from
<source>/<dir>/metadata/<name>.<ext>.json and its description, capture date
and GPS location are written into a copy of the file.

File extensions are corrected from the file content. Processed copies go to
the output directory; files that cannot be processed are copied unmodified
to the error directory. The source directory is never modified. Live Photo
videos (a video next to an image with the same name) are skipped.
"""


def create_progress_callback(desc: str = "Processing"):
    """Create a tqdm-based progress callback.

    Args:
        desc: Description for progress bar.

    Returns:
        Tuple of (callback function, tqdm instance).
    """
    pbar = tqdm(total=None, desc=desc, unit="file")

    # Calculate safe message width based on terminal size
    terminal_width = shutil.get_terminal_size().columns
    # Leave room for progress bar elements (counts, rate)
    max_desc_width = max(20, min(80, terminal_width - 40))

    def callback(current: int, total: int, message: str):
        # total is 0 while files are still being discovered
        pbar.total = total or None
        pbar.n = current
        if len(message) > max_desc_width:
            message = message[:max_desc_width - 3] + "..."
        pbar.set_description(message)
        pbar.refresh()

    return callback, pbar


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr, above the progress bar."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def run_dry_run(config: RunConfig) -> int:
    """Run dry-run mode.

    Args:
        config: Resolved run configuration.

    Returns:
        Exit code (0 for success).
    """
    print("\n=== DRY RUN MODE ===")
    print("No files will be copied or modified.\n")

    if not exists(config.source_dir):
        print(f"Error: Source folder does not exist: {config.source_dir}")
        return 1

    print(f"Source: {config.source_dir}")
    print(f"Output: {config.output_dir}")
    print(f"Errors: {config.error_dir}")

    orchestrator = EMROrchestrator(config)

    print("\nScanning files...")
    callback, pbar = create_progress_callback("Analyzing")
    try:
        result = orchestrator.dry_run(on_progress=callback)
    finally:
        pbar.close()

    print("\nFound:")
    print(f"  {result.media_count} media files ({result.image_count} images, {result.video_count} videos)")
    print(f"  {result.live_photo_videos} Live Photo videos (would be skipped)")

    print("\nWould process:")
    print(f"  {result.with_sidecar} files with a JSON sidecar")
    print(f"  {result.missing_sidecar} files without a sidecar (would go to the error folder)")
    print(f"  {result.extension_corrections} files with a wrong extension")

    if result.exiftool_available:
        print(f"\nExifTool: Found at {result.exiftool_path}")
    else:
        print("\nExifTool: NOT FOUND")
        print(get_install_instructions())

    if result.errors:
        print("\nProblems:")
        for error in result.errors:
            print(f"  {error}")

    print("\n=== END DRY RUN ===")
    return 0


def run_process(config: RunConfig, log_file: Optional[str] = None) -> int:
    """Run main processing.

    Args:
        config: Resolved run configuration.
        log_file: Optional path of a log file receiving every result line.

    Returns:
        Exit code: 0 when the run completed (even with per-file failures),
        1 on a fatal error, 130 when interrupted.
    """
    if not exists(config.source_dir):
        print(f"Error: Source folder does not exist: {config.source_dir}")
        return 1

    print("\nProcess started...")
    print(f"Working in directory: {config.source_dir}")

    with RunLogger(create_logger(log_file)) as run_logger:
        orchestrator = EMROrchestrator(config, run_logger=run_logger)
        callback, pbar = create_progress_callback("Processing")

        try:
            result = orchestrator.process(on_progress=callback)
        except KeyboardInterrupt:
            print("\n\nInterrupted! ExifTool has been closed.")
            return 130  # Standard exit code for SIGINT
        except EngineUnavailableError as e:
            print(f"\nFatal error: {e}")
            print(get_install_instructions())
            return 1
        except (EMRError, OSError, ValueError) as e:
            logger.debug("Fatal error", exc_info=True)
            print(f"\nFatal error: {e}")
            return 1
        finally:
            pbar.close()

    stats = result.stats
    print("\nFinished!")
    print(f"Processed: {stats.processed} files")
    print(f"  Extensions corrected: {stats.extensions_corrected}")
    print(f"Skipped Live Photo videos: {stats.skipped_live_photos}")
    print(f"Failed: {stats.failed} files")
    if stats.failed:
        print(f"  Missing sidecar: {stats.missing_sidecars}")
        print(f"  Metadata write failed: {stats.embed_failures}")
        print(f"  Other errors: {stats.other_errors}")
    if stats.quarantine_failures:
        print(f"  Could not be copied to the error folder: {stats.quarantine_failures}")
    print(f"Time used: {result.elapsed_time} seconds")
    print(f"\nOutput directory:\n  {result.output_dir}")
    if stats.failed:
        print(f"Error directory:\n  {result.error_dir}")

    return 0


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: Arguments to parse (default: sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="emr",
        description=DESCRIPTION,
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "-s", "--source",
        help=f"Source directory (env {ENV_SOURCE_DIR}, default: {DEFAULT_SOURCE_DIR})",
        type=str,
        default=None
    )

    parser.add_argument(
        "-o", "--output",
        help=f"Output directory (env {ENV_OUTPUT_DIR}, default: {DEFAULT_OUTPUT_DIR})",
        type=str,
        default=None
    )

    parser.add_argument(
        "-e", "--error",
        help=f"Error directory (env {ENV_ERROR_DIR}, default: {DEFAULT_ERROR_DIR})",
        type=str,
        default=None
    )

    parser.add_argument(
        "-t", "--tmp",
        help=f"Temporary directory (env {ENV_TMP_DIR}, default: {DEFAULT_TMP_DIR})",
        type=str,
        default=None
    )

    parser.add_argument(
        "--dry-run",
        help="Show what would be done without making changes",
        action="store_true"
    )

    parser.add_argument(
        "--no-file-dates",
        help="Do not set output file timestamps to the capture date",
        action="store_true"
    )

    parser.add_argument(
        "--log-file",
        help="Also append every result line to this file",
        type=str,
        default=None
    )

    parser.add_argument(
        "-v", "--verbose",
        help="Show debug output",
        action="store_true"
    )

    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (default: sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parsed = parse_args(args)
    configure_logging(parsed.verbose)

    config = RunConfig.from_env(
        source_dir=parsed.source,
        output_dir=parsed.output,
        error_dir=parsed.error,
        tmp_dir=parsed.tmp,
        set_file_dates=not parsed.no_file_dates,
    )

    if parsed.dry_run:
        return run_dry_run(config)
    return run_process(config, log_file=parsed.log_file)


if __name__ == "__main__":
    sys.exit(main())
