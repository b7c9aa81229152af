"""Release qualification flow.

ReleaseGatekeeper walks a fixed, fail-fast sequence of gates and only then
creates and pushes the `v<version>` tag:

 1. inside a git work tree
 2. tracked files clean
 3. version read from the manifest
 4. tag absent locally
 5. tag absent on the remote (skipped with a warning if the remote
    cannot be queried)
 6. on the release branch, or the operator agrees to continue
 7. HEAD matches the remote release branch (skipped when that branch
    cannot be resolved)
 8. quality checks, in order
 9. operator confirms the summary
10. annotated tag created
11. tag pushed

Steps 1-9 only read shared state (plus a fetch). A failure at any step
returns Err(GateError) and nothing after it runs. Declining a prompt is
not a failure: run() returns Ok(ReleaseOutcome.DECLINED).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum, auto

from rgate.core.config import ReleaseConfig
from rgate.core.result import Err, Ok, Result
from rgate.git.repository import GitBackend
from rgate.output.console import ConsoleProtocol, Style
from rgate.services.checks import QualityCheck, checks_from_config
from rgate.services.release.errors import GateError
from rgate.services.release.notes import build_release_tag
from rgate.services.release.version import (
    VersionDescriptor,
    read_version,
    recent_version_tags,
)

__all__ = ["Confirm", "ReleaseGatekeeper", "ReleaseOutcome"]

Confirm = Callable[[str], bool]

RECENT_TAG_LIMIT = 5


class ReleaseOutcome(Enum):
    RELEASED = auto()
    DECLINED = auto()


class ReleaseGatekeeper:
    """Qualify the repository for a release, then tag and push.

    Args:
        config: Repository path, manifest, branches, remote and checks
        repo: Version-control backend
        console: Where progress and summaries are printed
        confirm: Asks the operator a yes/no question
        checks: Quality gates; defaults to the ones in config
    """

    def __init__(
        self,
        *,
        config: ReleaseConfig,
        repo: GitBackend,
        console: ConsoleProtocol,
        confirm: Confirm,
        checks: Sequence[QualityCheck] | None = None,
    ) -> None:
        self._config = config
        self._repo = repo
        self._console = console
        self._confirm = confirm
        self._checks: Sequence[QualityCheck] = (
            checks if checks is not None else checks_from_config(config.checks)
        )

    def run(self) -> Result[ReleaseOutcome, GateError]:
        ready = self._check_repository()
        if isinstance(ready, Err):
            return ready

        version = read_version(manifest=self._config.manifest_path)
        if isinstance(version, Err):
            return version
        descriptor = version.value
        self._console.info(f"Current version in {self._config.manifest}: {descriptor.version}")
        self._console.info(f"Git tag to create: {descriptor.tag}")

        local = self._check_local_tag(descriptor.tag)
        if isinstance(local, Err):
            return local

        remote = self._check_remote_tag(descriptor.tag)
        if isinstance(remote, Err):
            return remote

        branch = self._repo.current_branch()
        if not self._confirm_branch(branch):
            self._console.info("Aborted")
            return Ok(ReleaseOutcome.DECLINED)

        synced = self._check_remote_sync()
        if isinstance(synced, Err):
            return synced

        quality = self._run_checks()
        if isinstance(quality, Err):
            return quality

        if not self._confirm_release(descriptor, branch):
            self._console.info("Aborted")
            return Ok(ReleaseOutcome.DECLINED)

        published = self._tag_and_push(descriptor.tag)
        if isinstance(published, Err):
            return published

        self._console.success(f"Release {descriptor.tag} created and pushed!")
        self._console.info("CI will now build and publish the release automatically.")
        return Ok(ReleaseOutcome.RELEASED)

    def _check_repository(self) -> Result[None, GateError]:
        if not self._repo.is_work_tree():
            return Err(GateError(kind="not_a_repository", message="Not in a git repository"))

        if self._repo.is_clean():
            return Ok(None)

        details: tuple[str, ...] = ()
        status = self._repo.status()
        if isinstance(status, Ok):
            details = tuple(f"{e.xy} {e.path}" for e in status.value.entries)
        return Err(
            GateError(
                kind="dirty_worktree",
                message="Working directory is not clean",
                hint="Please commit or stash your changes first.",
                details=details,
                details_title="Changes:",
            )
        )

    def _check_local_tag(self, tag: str) -> Result[None, GateError]:
        tags = self._repo.list_tags()
        if isinstance(tags, Err):
            return Err(GateError(kind="git_failed", message=tags.error.message))

        if tag not in tags.value:
            return Ok(None)

        return Err(
            GateError(
                kind="tag_exists_local",
                message=f"Tag {tag} already exists locally",
                hint="Bump the version in the manifest before releasing.",
                details=tuple(recent_version_tags(tags.value, limit=RECENT_TAG_LIMIT)),
                details_title="Existing tags:",
            )
        )

    def _check_remote_tag(self, tag: str) -> Result[None, GateError]:
        remote = self._config.remote
        tags = self._repo.remote_tags(remote)
        if isinstance(tags, Err):
            self._console.warning(
                f"Could not list tags on remote '{remote}', skipping remote tag check"
            )
            return Ok(None)

        if tag not in tags.value:
            return Ok(None)

        return Err(
            GateError(
                kind="tag_exists_remote",
                message=f"Tag {tag} already exists on remote",
                hint="Bump the version in the manifest before releasing.",
                details=tuple(recent_version_tags(tags.value, limit=RECENT_TAG_LIMIT)),
                details_title="Remote tags:",
            )
        )

    def _confirm_branch(self, branch: str | None) -> bool:
        expected = self._config.release_branch
        if branch == expected:
            return True

        shown = branch if branch is not None else "detached HEAD"
        self._console.warning(f"Not on {expected} branch (currently on: {shown})")
        return self._confirm("Continue anyway?")

    def _check_remote_sync(self) -> Result[None, GateError]:
        remote = self._config.remote
        if not self._repo.has_remote(remote):
            return Ok(None)

        self._console.info("Fetching latest changes from remote...")
        fetched = self._repo.fetch(remote)
        if isinstance(fetched, Err):
            return Err(
                GateError(
                    kind="fetch_failed",
                    message=f"git fetch {remote} failed: {fetched.error.message}",
                )
            )

        local = self._repo.rev_parse("HEAD")
        if local is None:
            return Err(GateError(kind="git_failed", message="Could not resolve HEAD"))

        upstream = self._repo.rev_parse(f"{remote}/{self._config.release_branch}")
        if upstream is None:
            upstream = self._repo.rev_parse(f"{remote}/{self._config.fallback_branch}")
        if upstream is None or upstream == local:
            return Ok(None)

        return Err(
            GateError(
                kind="branch_diverged",
                message="Local branch is not up to date with remote",
                hint=(
                    "Please pull latest changes first: "
                    f"git pull {remote} {self._config.release_branch}"
                ),
            )
        )

    def _run_checks(self) -> Result[None, GateError]:
        self._console.info("Running quality checks (same as CI)...")
        for check in self._checks:
            self._console.info(check.description)
            result = check.execute(self._config.repo_root)
            if not result.passed:
                return Err(
                    GateError(
                        kind="check_failed",
                        message=f"Quality check '{result.name}' failed",
                        hint=result.hint,
                    )
                )
        self._console.success("All quality checks passed!")
        return Ok(None)

    def _confirm_release(self, descriptor: VersionDescriptor, branch: str | None) -> bool:
        commit = self._repo.short_head() or "unknown"
        subject = self._repo.last_subject() or ""

        self._console.newline()
        self._console.info("Ready to create release:")
        self._console.print(f"  Version: {descriptor.version}")
        self._console.print(f"  Tag: {descriptor.tag}")
        self._console.print(f"  Branch: {branch if branch is not None else 'HEAD'}")
        self._console.print(f"  Commit: {commit} - {subject}")
        self._console.newline()

        return self._confirm("Create and push release tag?")

    def _tag_and_push(self, tag: str) -> Result[None, GateError]:
        release_tag = build_release_tag(self._repo, tag)

        self._console.info(f"Creating tag {tag}...")
        created = self._repo.create_annotated_tag(release_tag.name, release_tag.message)
        if isinstance(created, Err):
            return Err(
                GateError(
                    kind="tag_failed",
                    message=f"Failed to create tag {tag}: {created.error.message}",
                )
            )

        self._console.info("Pushing tag to remote...")
        pushed = self._repo.push_tag(self._config.remote, tag)
        if isinstance(pushed, Err):
            return Err(
                GateError(
                    kind="push_failed",
                    message=f"git push {self._config.remote} {tag} failed: {pushed.error.message}",
                    hint=f"The tag exists locally; retry with: git push {self._config.remote} {tag}",
                )
            )
        self._console.print(f"pushed {tag} to {self._config.remote}", Style.DIM)
        return Ok(None)
