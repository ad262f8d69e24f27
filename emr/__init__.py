"""Export Metadata Restorer - Re-embed sidecar metadata into exported photos.

Photo exports often strip captured date, description and GPS location
out of the media files into JSON sidecars, and sometimes give files the
wrong extension. EMR writes the metadata back into copies of the files,
fixes their extensions from their content, and quarantines anything it
cannot process. The source tree is never modified.

High-level API:
    from emr import EMROrchestrator, RunConfig

    config = RunConfig.from_env(source_dir="/path/to/export")
    orchestrator = EMROrchestrator(config)

    # Preview what will be processed
    preview = orchestrator.dry_run()
    print(f"Found {preview.media_count} media files")

    # Process files
    result = orchestrator.process()
    print(f"Processed {result.stats.processed} files")
"""

__version__ = "1.0.0"

# Public API exports
from emr.core.orchestrator import EMROrchestrator
from emr.core.config import RunConfig
from emr.core.models import (
    RunResult,
    DryRunResult,
    ProcessingStats,
    MediaFile,
    MediaKind,
    CorrectedIdentity,
    OutcomeCategory,
)

__all__ = [
    "EMROrchestrator",
    "RunConfig",
    "RunResult",
    "DryRunResult",
    "ProcessingStats",
    "MediaFile",
    "MediaKind",
    "CorrectedIdentity",
    "OutcomeCategory",
    "__version__",
]
