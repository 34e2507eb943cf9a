"""Enumerations used across the forge domain layer."""

from __future__ import annotations

from enum import StrEnum


class ForgeKind(StrEnum):
    """Hosted git platforms a remote can point at."""

    GITHUB = "github"
    GITLAB = "gitlab"
    GITEA = "gitea"


class PullRequestStateFilter(StrEnum):
    """State filter accepted when listing pull requests."""

    OPEN = "open"
    CLOSED = "closed"
    MERGED = "merged"
    ALL = "all"

    def graphql_states(self) -> list[str]:
        if self is PullRequestStateFilter.ALL:
            return ["OPEN", "CLOSED", "MERGED"]
        return [self.value.upper()]


class ReviewEvent(StrEnum):
    """Verdicts accepted by the review submission mutation."""

    APPROVE = "APPROVE"
    REQUEST_CHANGES = "REQUEST_CHANGES"
    COMMENT = "COMMENT"


class DiffSide(StrEnum):
    """Side of a diff a review comment is anchored to."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


class ChecksState(StrEnum):
    """Rolled-up CI state for a commit."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


class CheckTone(StrEnum):
    """Display tone for a check or a checks summary."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    NEUTRAL = "neutral"
    NONE = "none"
