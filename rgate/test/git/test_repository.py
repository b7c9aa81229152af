"""Tests for git/repository.py."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from rgate.core.result import Err, Ok
from rgate.git.repository import Repository, StatusEntry, parse_remote_tags


def make_completed_process(
    stdout: str = "",
    stderr: str = "",
    returncode: int = 0,
) -> subprocess.CompletedProcess[str]:
    """Create a mock CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["git"],
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )


def git_args(mock_run: MagicMock) -> list[str]:
    """Arguments passed to git on the last call, without `git -C <path>`."""
    cmd = mock_run.call_args.args[0]
    return cmd[3:]


# =============================================================================
# Repository - mocked subprocess
# =============================================================================


class TestRepositoryQueries:
    @patch("subprocess.run")
    def test_is_work_tree(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout=".git\n")

        assert Repository(tmp_path).is_work_tree() is True
        assert git_args(mock_run) == ["rev-parse", "--git-dir"]

    @patch("subprocess.run")
    def test_is_work_tree_outside_repo(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: not a git repository"
        )

        assert Repository(tmp_path).is_work_tree() is False

    @patch("subprocess.run")
    def test_is_clean_uses_diff_index(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        assert Repository(tmp_path).is_clean() is True
        assert git_args(mock_run) == ["diff-index", "--quiet", "HEAD", "--"]

    @patch("subprocess.run")
    def test_is_clean_false_on_changes(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=1)

        assert Repository(tmp_path).is_clean() is False

    @patch("subprocess.run")
    def test_status_with_changes(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout="M  src/lib.rs\n M Cargo.toml\n?? notes.txt\n"
        )

        result = Repository(tmp_path).status()

        assert isinstance(result, Ok)
        assert result.value.entries == (
            StatusEntry(xy="M ", path="src/lib.rs"),
            StatusEntry(xy=" M", path="Cargo.toml"),
            StatusEntry(xy="??", path="notes.txt"),
        )
        assert git_args(mock_run) == ["status", "--porcelain=v1"]

    @patch("subprocess.run")
    def test_status_error(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: not a git repository"
        )

        result = Repository(tmp_path).status()

        assert isinstance(result, Err)
        assert result.error.command == "status"
        assert "not a git repository" in result.error.message

    @patch("subprocess.run")
    def test_current_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="release/1.x\n")
        assert Repository(tmp_path).current_branch() == "release/1.x"

    @patch("subprocess.run")
    def test_current_branch_detached(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="HEAD\n")
        assert Repository(tmp_path).current_branch() is None

    @patch("subprocess.run")
    def test_list_tags(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="v0.1.0\nv0.1.1\nnightly\n")

        result = Repository(tmp_path).list_tags()

        assert result == Ok(["v0.1.0", "v0.1.1", "nightly"])
        assert git_args(mock_run) == ["tag", "-l"]

    @patch("subprocess.run")
    def test_remote_tags(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            stdout=(
                "1111111111111111111111111111111111111111\trefs/tags/v0.1.0\n"
                "2222222222222222222222222222222222222222\trefs/tags/v0.1.0^{}\n"
                "3333333333333333333333333333333333333333\trefs/tags/v0.1.1\n"
            )
        )

        result = Repository(tmp_path).remote_tags("origin")

        assert result == Ok(["v0.1.0", "v0.1.1"])
        assert git_args(mock_run) == ["ls-remote", "--tags", "origin"]

    @patch("subprocess.run")
    def test_remote_tags_unreachable(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: 'origin' does not appear to be a git repository"
        )

        result = Repository(tmp_path).remote_tags("origin")

        assert isinstance(result, Err)
        assert result.error.command == "ls-remote --tags"

    @patch("subprocess.run")
    def test_has_remote(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="git@example.com:org/repo.git\n")

        assert Repository(tmp_path).has_remote("origin") is True
        assert git_args(mock_run) == ["remote", "get-url", "origin"]

    @patch("subprocess.run")
    def test_has_remote_missing(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=2, stderr="error: No such remote")

        assert Repository(tmp_path).has_remote("origin") is False

    @patch("subprocess.run")
    def test_rev_parse(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="abc123\n")

        assert Repository(tmp_path).rev_parse("origin/main") == "abc123"
        assert git_args(mock_run) == ["rev-parse", "--verify", "--quiet", "origin/main^{commit}"]

    @patch("subprocess.run")
    def test_rev_parse_unknown_ref(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(returncode=1)

        assert Repository(tmp_path).rev_parse("origin/main") is None

    @patch("subprocess.run")
    def test_last_tag_none(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: No names found, cannot describe anything."
        )

        assert Repository(tmp_path).last_tag() is None

    @patch("subprocess.run")
    def test_commit_subjects(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="Fix cache\nAdd metrics\n")

        result = Repository(tmp_path).commit_subjects("v0.1.0..HEAD")

        assert result == Ok(["Fix cache", "Add metrics"])
        assert git_args(mock_run) == ["log", "v0.1.0..HEAD", "--pretty=format:%s"]

    @patch("subprocess.run")
    def test_last_subject(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(stdout="Bump version to 0.1.2")

        assert Repository(tmp_path).last_subject() == "Bump version to 0.1.2"


class TestRepositoryMutations:
    @patch("subprocess.run")
    def test_fetch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        assert isinstance(Repository(tmp_path).fetch("origin"), Ok)
        assert git_args(mock_run) == ["fetch", "origin"]

    @patch("subprocess.run")
    def test_fetch_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=128, stderr="fatal: could not read from remote repository"
        )

        result = Repository(tmp_path).fetch("origin")

        assert isinstance(result, Err)
        assert "could not read" in result.error.message

    @patch("subprocess.run")
    def test_create_annotated_tag(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process()

        result = Repository(tmp_path).create_annotated_tag("v1.2.3", "Release v1.2.3\n\n- Fix")

        assert result == Ok(None)
        assert git_args(mock_run) == ["tag", "-a", "v1.2.3", "-m", "Release v1.2.3\n\n- Fix"]

    @patch("subprocess.run")
    def test_push_tag_failure(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = make_completed_process(
            returncode=1, stderr="! [rejected] v1.2.3 -> v1.2.3 (already exists)"
        )

        result = Repository(tmp_path).push_tag("origin", "v1.2.3")

        assert isinstance(result, Err)
        assert result.error.command == "push"
        assert "already exists" in result.error.message
        assert git_args(mock_run) == ["push", "origin", "v1.2.3"]


class TestParseRemoteTags:
    def test_ignores_non_tag_refs(self) -> None:
        output = "abc\trefs/heads/main\ndef\trefs/tags/v1.0.0\n"
        assert parse_remote_tags(output) == ["v1.0.0"]

    def test_empty(self) -> None:
        assert parse_remote_tags("") == []

    def test_peeled_only(self) -> None:
        assert parse_remote_tags("abc\trefs/tags/v2.0.0^{}\n") == ["v2.0.0"]
