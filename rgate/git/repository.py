"""Git repository abstraction.

Repository wraps the git CLI for the handful of queries and mutations the
release flow needs. GitBackend is the protocol the gatekeeper depends on,
so tests can substitute an in-memory fake for a real checkout.

Usage:
    repo = Repository(Path("."))

    if not repo.is_clean():
        match repo.status():
            case Ok(status):
                for entry in status.entries:
                    print(entry.xy, entry.path)
            case Err(e):
                print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from rgate.core.result import Err, Ok, Result
from rgate.platform.process import ProcessError
from rgate.platform.process import run as run_process

__all__ = [
    "GitBackend",
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
    "parse_remote_tags",
]

_TAG_REF_PREFIX = "refs/tags/"
_PEELED_SUFFIX = "^{}"


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message (stderr of git when available)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed `git status --porcelain=v1`.

    Attributes:
        entries: All status entries (staged, unstaged, untracked)
    """

    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)


class GitBackend(Protocol):
    """Version-control operations used by the release gatekeeper."""

    def is_work_tree(self) -> bool: ...

    def is_clean(self) -> bool: ...

    def status(self) -> Result[GitStatus, GitError]: ...

    def current_branch(self) -> str | None: ...

    def list_tags(self) -> Result[list[str], GitError]: ...

    def remote_tags(self, remote: str) -> Result[list[str], GitError]: ...

    def has_remote(self, remote: str) -> bool: ...

    def fetch(self, remote: str) -> Result[str, GitError]: ...

    def rev_parse(self, ref: str) -> str | None: ...

    def short_head(self) -> str | None: ...

    def last_subject(self) -> str | None: ...

    def last_tag(self) -> str | None: ...

    def commit_subjects(self, rev_range: str) -> Result[list[str], GitError]: ...

    def create_annotated_tag(self, name: str, message: str) -> Result[None, GitError]: ...

    def push_tag(self, remote: str, name: str) -> Result[str, GitError]: ...


class Repository:
    """Git repository backed by the git CLI.

    Query methods that only answer yes/no (or "unknown") return plain
    values; anything the caller must report on failure returns a Result.

    Attributes:
        path: Directory git commands run in
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_work_tree(self) -> bool:
        """True if path is inside a git repository."""
        return isinstance(self._run(["rev-parse", "--git-dir"]), Ok)

    def is_clean(self) -> bool:
        """True if tracked files have no changes relative to HEAD.

        Untracked files are ignored. Returns False when git cannot
        compare against HEAD (e.g. no commits yet).
        """
        return isinstance(self._run(["diff-index", "--quiet", "HEAD", "--"]), Ok)

    def status(self) -> Result[GitStatus, GitError]:
        """Changed and untracked files, as reported by porcelain status."""
        result = self._run(["status", "--porcelain=v1"])
        match result:
            case Err(e):
                return Err(_git_error("status", e))
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def list_tags(self) -> Result[list[str], GitError]:
        """List local tag names."""
        result = self._run(["tag", "-l"])
        match result:
            case Err(e):
                return Err(_git_error("tag -l", e))
            case Ok(stdout):
                return Ok(_lines(stdout))

    def remote_tags(self, remote: str) -> Result[list[str], GitError]:
        """List tag names published on a remote."""
        result = self._run(["ls-remote", "--tags", remote])
        match result:
            case Err(e):
                return Err(_git_error("ls-remote --tags", e))
            case Ok(stdout):
                return Ok(parse_remote_tags(stdout))

    def has_remote(self, remote: str) -> bool:
        """True if a remote with this name is configured."""
        return isinstance(self._run(["remote", "get-url", remote]), Ok)

    def fetch(self, remote: str) -> Result[str, GitError]:
        result = self._run(["fetch", remote])
        match result:
            case Err(e):
                return Err(_git_error("fetch", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def rev_parse(self, ref: str) -> str | None:
        """Resolve a ref to a full commit id, None if it does not exist."""
        result = self._run(["rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def short_head(self) -> str | None:
        result = self._run(["rev-parse", "--short", "HEAD"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def last_subject(self) -> str | None:
        """Subject line of the HEAD commit."""
        result = self._run(["log", "-1", "--pretty=format:%s"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def last_tag(self) -> str | None:
        """Most recent tag reachable from HEAD, None if there is none."""
        result = self._run(["describe", "--tags", "--abbrev=0"])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def commit_subjects(self, rev_range: str) -> Result[list[str], GitError]:
        """Commit subjects in rev_range, newest first."""
        result = self._run(["log", rev_range, "--pretty=format:%s"])
        match result:
            case Err(e):
                return Err(_git_error("log", e))
            case Ok(stdout):
                return Ok(_lines(stdout))

    def create_annotated_tag(self, name: str, message: str) -> Result[None, GitError]:
        result = self._run(["tag", "-a", name, "-m", message])
        match result:
            case Err(e):
                return Err(_git_error("tag -a", e))
            case Ok(_):
                return Ok(None)

    def push_tag(self, remote: str, name: str) -> Result[str, GitError]:
        result = self._run(["push", remote, name])
        match result:
            case Err(e):
                return Err(_git_error("push", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path)

    def _parse_status(self, output: str) -> GitStatus:
        entries = [self._parse_entry(ln) for ln in output.splitlines() if ln.strip()]
        return GitStatus(entries=tuple(e for e in entries if e is not None))

    def _parse_entry(self, line: str) -> StatusEntry | None:
        if len(line) < 4:
            return None
        return StatusEntry(xy=line[:2], path=line[3:])


def parse_remote_tags(output: str) -> list[str]:
    """Extract tag names from `git ls-remote --tags` output.

    Annotated tags appear twice (the tag object and the peeled `^{}`
    commit); both collapse into one name. Order of first appearance is kept.
    """
    names: list[str] = []
    seen: set[str] = set()
    for line in output.splitlines():
        parts = line.split()
        if len(parts) != 2 or not parts[1].startswith(_TAG_REF_PREFIX):
            continue
        name = parts[1][len(_TAG_REF_PREFIX) :]
        if name.endswith(_PEELED_SUFFIX):
            name = name[: -len(_PEELED_SUFFIX)]
        if name and name not in seen:
            seen.add(name)
            names.append(name)
    return names


def _lines(output: str) -> list[str]:
    return [ln.strip() for ln in output.splitlines() if ln.strip()]


def _git_error(command: str, e: ProcessError) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or f"git {command} failed",
        returncode=e.returncode,
    )
