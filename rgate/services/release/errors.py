from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

GateErrorKind = Literal[
    "not_a_repository",
    "dirty_worktree",
    "manifest_missing",
    "version_missing",
    "tag_exists_local",
    "tag_exists_remote",
    "fetch_failed",
    "branch_diverged",
    "check_failed",
    "git_failed",
    "tag_failed",
    "push_failed",
]


@dataclass(frozen=True, slots=True)
class GateError:
    """A release precondition, quality gate or transport step that failed.

    Attributes:
        kind: Which gate failed
        message: One-line description
        hint: Remediation shown to the operator
        details: Supporting lines (dirty paths, existing tags, ...)
        details_title: Heading printed above details
    """

    kind: GateErrorKind
    message: str
    hint: str | None = None
    details: tuple[str, ...] = ()
    details_title: str | None = None
