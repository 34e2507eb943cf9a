"""Value objects exchanged with forge providers."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field

from gitlad.domain import ChecksState, DiffSide, DomainModel, ForgeKind, PullRequestStateFilter


class ForgeRemoteInfo(DomainModel):
    """Forge coordinates parsed from a git remote URL."""

    provider: ForgeKind
    owner: str
    repo: str
    host: str


class ForgeUser(DomainModel):
    login: str
    avatar_url: str | None = None


class ForgeCheck(DomainModel):
    """A single CI check run or commit status context."""

    name: str
    status: str
    conclusion: str | None = None
    details_url: str | None = None
    app_name: str | None = None
    started_at: str | None = None
    completed_at: str | None = None


class ForgeChecksSummary(DomainModel):
    """Aggregated CI state for the head commit of a pull request."""

    state: ChecksState
    total: int = 0
    success: int = 0
    failure: int = 0
    pending: int = 0
    checks: tuple[ForgeCheck, ...] = Field(default_factory=tuple)


class ForgeComment(DomainModel):
    id: str
    database_id: int | None = None
    author: ForgeUser
    body: str = ""
    created_at: str = ""
    updated_at: str = ""


class ForgeReviewComment(DomainModel):
    id: str
    database_id: int | None = None
    author: ForgeUser
    body: str = ""
    path: str = ""
    line: int | None = None
    created_at: str = ""
    updated_at: str = ""


class ForgeReview(DomainModel):
    id: str
    database_id: int | None = None
    author: ForgeUser
    state: str
    body: str | None = None
    submitted_at: str = ""
    comments: tuple[ForgeReviewComment, ...] = Field(default_factory=tuple)


class ForgeTimelineItem(DomainModel):
    """Comment or review placed on the pull request conversation timeline."""

    kind: Literal["comment", "review"]
    timestamp: str
    comment: ForgeComment | None = None
    review: ForgeReview | None = None


class ForgePullRequest(DomainModel):
    number: int
    title: str
    state: str
    draft: bool = False
    author: ForgeUser
    head_ref: str = ""
    base_ref: str = ""
    review_decision: str | None = None
    labels: tuple[str, ...] = Field(default_factory=tuple)
    additions: int = 0
    deletions: int = 0
    created_at: str = ""
    updated_at: str = ""
    url: str = ""
    body: str | None = None
    id: str | None = None
    checks_summary: ForgeChecksSummary | None = None
    comments: tuple[ForgeComment, ...] = Field(default_factory=tuple)
    reviews: tuple[ForgeReview, ...] = Field(default_factory=tuple)
    timeline: tuple[ForgeTimelineItem, ...] = Field(default_factory=tuple)


class ForgeReviewThread(DomainModel):
    """A line-anchored review conversation on a pull request diff."""

    id: str
    is_resolved: bool = False
    is_outdated: bool = False
    path: str = ""
    line: int | None = None
    original_line: int | None = None
    start_line: int | None = None
    diff_side: DiffSide = DiffSide.RIGHT
    comments: tuple[ForgeReviewComment, ...] = Field(default_factory=tuple)


class ReviewThreads(DomainModel):
    """Review threads of a pull request along with its GraphQL node id."""

    pr_node_id: str | None = None
    threads: tuple[ForgeReviewThread, ...] = Field(default_factory=tuple)


class ListPullRequestsOptions(DomainModel):
    state: PullRequestStateFilter = PullRequestStateFilter.OPEN
    limit: int = Field(default=30, ge=1, le=100)
    author: str | None = None


class ReviewCommentDraft(DomainModel):
    """Payload for a single line comment created outside a review."""

    body: str
    path: str
    line: int
    commit_id: str
    side: DiffSide = DiffSide.RIGHT


class PendingComment(DomainModel):
    """Comment queued locally and submitted as a thread of a review."""

    path: str
    line: int
    body: str
    side: DiffSide = DiffSide.RIGHT

    def as_draft_thread(self) -> dict[str, Any]:
        return {"path": self.path, "line": self.line, "side": self.side.value, "body": self.body}


__all__ = [
    "ForgeCheck",
    "ForgeChecksSummary",
    "ForgeComment",
    "ForgePullRequest",
    "ForgeRemoteInfo",
    "ForgeReview",
    "ForgeReviewComment",
    "ForgeReviewThread",
    "ForgeTimelineItem",
    "ForgeUser",
    "ListPullRequestsOptions",
    "PendingComment",
    "ReviewCommentDraft",
    "ReviewThreads",
]
