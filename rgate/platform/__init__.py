"""Platform abstractions (subprocess execution)."""

from .process import ProcessError, run, run_streaming

__all__ = ["ProcessError", "run", "run_streaming"]
