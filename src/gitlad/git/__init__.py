"""Git collaborator exports."""

from .cli import DEFAULT_REMOTE, GitCli
from .exceptions import GitError, RepositoryNotFoundError

__all__ = ["DEFAULT_REMOTE", "GitCli", "GitError", "RepositoryNotFoundError"]
