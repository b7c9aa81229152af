"""release-gate: qualify a repository and publish its version tag."""

__version__ = "0.1.0"
