"""Git operations used by a release.

Usage:
    from shipit.git import Repository

    repo = Repository(Path("."))
    tags = repo.list_tags("v*")
"""

from shipit.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
]
