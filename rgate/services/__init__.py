"""Services behind the release-gate CLI."""
