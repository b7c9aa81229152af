"""Git operations module.

Usage:
    from rgate.git import Repository

    repo = Repository(Path("."))
    if repo.is_work_tree() and repo.is_clean():
        print(repo.current_branch())
"""

from rgate.git.repository import (
    GitBackend,
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
    parse_remote_tags,
)

__all__ = [
    "GitBackend",
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
    "parse_remote_tags",
]
