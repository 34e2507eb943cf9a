"""Git collaborator exceptions."""

from __future__ import annotations

from gitlad.exceptions import GitladError


class GitError(GitladError):
    """Base class for git invocation failures."""


class RepositoryNotFoundError(GitError):
    """Raised when a path is not inside a git work tree."""


__all__ = ["GitError", "RepositoryNotFoundError"]
