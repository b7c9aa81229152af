from __future__ import annotations

from dataclasses import dataclass

from rgate.core.result import Ok
from rgate.git.repository import GitBackend

FALLBACK_COMMIT_COUNT = 10
INITIAL_RELEASE_LINE = "- Initial release"


@dataclass(frozen=True, slots=True)
class ReleaseTag:
    name: str
    message: str


def changelog_range(repo: GitBackend) -> str:
    """Commits since the previous tag, else the last few commits."""
    previous = repo.last_tag()
    if previous is not None:
        return f"{previous}..HEAD"
    return f"HEAD~{FALLBACK_COMMIT_COUNT}..HEAD"


def render_tag_message(tag: str, subjects: list[str]) -> str:
    lines = [f"Release {tag}", ""]
    if subjects:
        lines.extend(f"- {s}" for s in subjects)
    else:
        lines.append(INITIAL_RELEASE_LINE)
    return "\n".join(lines)


def build_release_tag(repo: GitBackend, tag: str) -> ReleaseTag:
    """Build the annotated tag, its message listing commits newest first.

    A log that cannot be read (e.g. fewer than ten commits and no previous
    tag) falls back to the initial-release line.
    """
    subjects: list[str] = []
    log = repo.commit_subjects(changelog_range(repo))
    if isinstance(log, Ok):
        subjects = log.value
    return ReleaseTag(name=tag, message=render_tag_message(tag, subjects))
