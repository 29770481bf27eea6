"""Git operations used by the release engine.

Usage:
    from autorel.git import Repository

    repo = Repository(Path("/path/to/package"))
    if repo.is_clean():
        print(repo.current_branch())
"""

from autorel.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]
