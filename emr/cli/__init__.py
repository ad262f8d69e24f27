"""Command-line interface for Export Metadata Restorer."""
