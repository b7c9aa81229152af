"""Command-line interface for release-gate."""
