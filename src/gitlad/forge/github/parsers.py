"""Translate GitHub GraphQL payloads into forge domain models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from gitlad.domain import ChecksState, DiffSide

from ..exceptions import ForgeApiError
from ..models import (
    ForgeCheck,
    ForgeChecksSummary,
    ForgeComment,
    ForgePullRequest,
    ForgeReview,
    ForgeReviewComment,
    ForgeReviewThread,
    ForgeTimelineItem,
    ForgeUser,
    ReviewThreads,
)

GHOST_LOGIN = "ghost"

_SUCCESS_STATES = frozenset({"SUCCESS", "NEUTRAL", "SKIPPED", "COMPLETED", "STALE"})
_FAILURE_STATES = frozenset({"FAILURE", "ERROR", "TIMED_OUT", "CANCELLED", "STARTUP_FAILURE"})
_STATUS_CONCLUSIONS = {"SUCCESS": "success", "FAILURE": "failure", "ERROR": "failure"}


def raise_for_graphql_errors(payload: Mapping[str, Any]) -> None:
    errors = payload.get("errors")
    if not errors:
        return
    messages = [
        str(error.get("message") or "Unknown error") if isinstance(error, Mapping) else str(error)
        for error in errors
    ]
    raise ForgeApiError("GraphQL error: " + "; ".join(messages))


def _data(payload: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not payload:
        raise ForgeApiError("No data in response")
    raise_for_graphql_errors(payload)
    return payload.get("data") or {}


def _nodes(connection: Mapping[str, Any] | None) -> list[Mapping[str, Any]]:
    if not connection:
        return []
    return [node for node in connection.get("nodes") or [] if node]


def _user(node: Mapping[str, Any]) -> ForgeUser:
    author = node.get("author") or {}
    return ForgeUser(login=author.get("login") or GHOST_LOGIN, avatar_url=author.get("avatarUrl"))


def _bucket(state: str) -> str:
    state = state.upper()
    if state in _SUCCESS_STATES:
        return "success"
    if state in _FAILURE_STATES:
        return "failure"
    return "pending"


def _check_state_key(check: ForgeCheck) -> str:
    if check.status != "completed":
        return "PENDING"
    return (check.conclusion or "completed").upper()


def summarize_checks(
    checks: Iterable[ForgeCheck], *, rollup_state: str | None = None
) -> ForgeChecksSummary:
    """Count ``checks`` per outcome and derive the overall state.

    With no checks at all the rollup state reported by GitHub is used.
    """

    checks = tuple(checks)
    counts = {"success": 0, "failure": 0, "pending": 0}
    for check in checks:
        counts[_bucket(_check_state_key(check))] += 1
    return _summary(counts, checks=checks, rollup_state=rollup_state)


def _summary(
    counts: Mapping[str, int],
    *,
    checks: tuple[ForgeCheck, ...] = (),
    rollup_state: str | None = None,
) -> ForgeChecksSummary:
    total = sum(counts.values())
    if counts["failure"]:
        state = ChecksState.FAILURE
    elif counts["pending"]:
        state = ChecksState.PENDING
    elif total or not rollup_state:
        state = ChecksState.SUCCESS
    else:
        state = ChecksState(_bucket(rollup_state))
    return ForgeChecksSummary(
        state=state,
        total=total,
        success=counts["success"],
        failure=counts["failure"],
        pending=counts["pending"],
        checks=checks,
    )


def merge_checks(summary: ForgeChecksSummary, checks: Iterable[ForgeCheck]) -> ForgeChecksSummary:
    """Return ``summary`` extended with another page of checks."""

    return summarize_checks((*summary.checks, *checks), rollup_state=summary.state.value.upper())


def _parse_check(node: Mapping[str, Any]) -> ForgeCheck:
    if node.get("__typename") == "StatusContext" or "context" in node:
        state = (node.get("state") or "").upper()
        conclusion = _STATUS_CONCLUSIONS.get(state)
        return ForgeCheck(
            name=node.get("context") or "",
            status="completed" if conclusion else "pending",
            conclusion=conclusion,
            details_url=node.get("targetUrl"),
            started_at=node.get("createdAt"),
        )

    suite = node.get("checkSuite") or {}
    app = suite.get("app") or {}
    conclusion = node.get("conclusion")
    return ForgeCheck(
        name=node.get("name") or "",
        status=(node.get("status") or "").lower(),
        conclusion=conclusion.lower() if conclusion else None,
        details_url=node.get("detailsUrl"),
        app_name=app.get("name"),
        started_at=node.get("startedAt"),
        completed_at=node.get("completedAt"),
    )


def _rollup(node: Mapping[str, Any]) -> Mapping[str, Any] | None:
    commits = _nodes(node.get("commits"))
    if not commits:
        return None
    commit = commits[0].get("commit") or {}
    return commit.get("statusCheckRollup")


def _list_checks_summary(node: Mapping[str, Any]) -> ForgeChecksSummary | None:
    rollup = _rollup(node)
    if rollup is None:
        return None
    contexts = rollup.get("contexts") or {}
    counts = {"success": 0, "failure": 0, "pending": 0}
    for key in ("checkRunCountsByState", "statusContextCountsByState"):
        for entry in contexts.get(key) or []:
            counts[_bucket(entry.get("state") or "")] += int(entry.get("count") or 0)
    return _summary(counts, rollup_state=rollup.get("state"))


def _detail_checks_summary(node: Mapping[str, Any]) -> ForgeChecksSummary | None:
    rollup = _rollup(node)
    if rollup is None:
        return None
    checks = [_parse_check(item) for item in _nodes(rollup.get("contexts"))]
    return summarize_checks(checks, rollup_state=rollup.get("state"))


def _next_cursor(connection: Mapping[str, Any] | None) -> str | None:
    page_info = (connection or {}).get("pageInfo") or {}
    if page_info.get("hasNextPage") and page_info.get("endCursor"):
        return page_info["endCursor"]
    return None


def _pr_fields(node: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "number": node.get("number") or 0,
        "title": node.get("title") or "",
        "state": (node.get("state") or "").lower(),
        "draft": bool(node.get("isDraft")),
        "author": _user(node),
        "head_ref": node.get("headRefName") or "",
        "base_ref": node.get("baseRefName") or "",
        "review_decision": node.get("reviewDecision"),
        "labels": tuple(label.get("name") or "" for label in _nodes(node.get("labels"))),
        "additions": node.get("additions") or 0,
        "deletions": node.get("deletions") or 0,
        "created_at": node.get("createdAt") or "",
        "updated_at": node.get("updatedAt") or "",
        "url": node.get("url") or "",
        "body": node.get("body"),
    }


def _parse_list_node(node: Mapping[str, Any]) -> ForgePullRequest:
    return ForgePullRequest(**_pr_fields(node), checks_summary=_list_checks_summary(node))


def _parse_review_comment(node: Mapping[str, Any]) -> ForgeReviewComment:
    return ForgeReviewComment(
        id=node.get("id") or "",
        database_id=node.get("databaseId"),
        author=_user(node),
        body=node.get("body") or "",
        path=node.get("path") or "",
        line=node.get("line"),
        created_at=node.get("createdAt") or "",
        updated_at=node.get("updatedAt") or "",
    )


def _parse_comment(node: Mapping[str, Any]) -> ForgeComment:
    return ForgeComment(
        id=node.get("id") or "",
        database_id=node.get("databaseId"),
        author=_user(node),
        body=node.get("body") or "",
        created_at=node.get("createdAt") or "",
        updated_at=node.get("updatedAt") or "",
    )


def _parse_review(node: Mapping[str, Any]) -> ForgeReview:
    return ForgeReview(
        id=node.get("id") or "",
        database_id=node.get("databaseId"),
        author=_user(node),
        state=node.get("state") or "",
        body=node.get("body"),
        submitted_at=node.get("submittedAt") or "",
        comments=tuple(_parse_review_comment(item) for item in _nodes(node.get("comments"))),
    )


def build_timeline(
    comments: Iterable[ForgeComment], reviews: Iterable[ForgeReview]
) -> tuple[ForgeTimelineItem, ...]:
    """Merge comments and submitted reviews in chronological order."""

    items = [
        ForgeTimelineItem(kind="comment", timestamp=comment.created_at, comment=comment)
        for comment in comments
    ]
    items.extend(
        ForgeTimelineItem(kind="review", timestamp=review.submitted_at, review=review)
        for review in reviews
        if review.submitted_at
    )
    items.sort(key=lambda item: item.timestamp)
    return tuple(items)


def _repository(payload: Mapping[str, Any] | None) -> Mapping[str, Any]:
    repository = _data(payload).get("repository")
    if not repository:
        raise ForgeApiError("Repository not found")
    return repository


def _pull_request(payload: Mapping[str, Any] | None) -> Mapping[str, Any]:
    node = _repository(payload).get("pullRequest")
    if not node:
        raise ForgeApiError("Pull request not found")
    return node


def parse_pr_list(payload: Mapping[str, Any] | None) -> list[ForgePullRequest]:
    connection = _repository(payload).get("pullRequests")
    if not connection or connection.get("nodes") is None:
        raise ForgeApiError("No pull request data")
    return [_parse_list_node(node) for node in _nodes(connection)]


def parse_pr_search(payload: Mapping[str, Any] | None) -> list[ForgePullRequest]:
    search = _data(payload).get("search")
    if not search or search.get("nodes") is None:
        raise ForgeApiError("No search data")
    # Non-PR hits come back as empty objects from the ``... on PullRequest`` fragment.
    return [_parse_list_node(node) for node in _nodes(search) if node.get("number")]


def parse_pr_detail(payload: Mapping[str, Any] | None) -> ForgePullRequest:
    """Parse a single pull request with checks, comments, reviews and timeline."""

    node = _pull_request(payload)
    comments = tuple(_parse_comment(item) for item in _nodes(node.get("comments")))
    reviews = tuple(_parse_review(item) for item in _nodes(node.get("reviews")))
    return ForgePullRequest(
        **_pr_fields(node),
        id=node.get("id"),
        checks_summary=_detail_checks_summary(node),
        comments=comments,
        reviews=reviews,
        timeline=build_timeline(comments, reviews),
    )


def next_checks_cursor(payload: Mapping[str, Any] | None) -> str | None:
    """Cursor of the next page of checks for a detail or checks-page payload."""

    try:
        rollup = _rollup(_pull_request(payload))
    except ForgeApiError:
        return None
    return _next_cursor((rollup or {}).get("contexts"))


def parse_checks_page(payload: Mapping[str, Any] | None) -> list[ForgeCheck]:
    rollup = _rollup(_pull_request(payload))
    if rollup is None:
        return []
    return [_parse_check(item) for item in _nodes(rollup.get("contexts"))]


def parse_viewer(payload: Mapping[str, Any] | None) -> str:
    viewer = _data(payload).get("viewer") or {}
    login = viewer.get("login")
    if not login:
        raise ForgeApiError("Viewer not found")
    return login


def _diff_side(value: str | None) -> DiffSide:
    try:
        return DiffSide(value or DiffSide.RIGHT)
    except ValueError:
        return DiffSide.RIGHT


def parse_review_threads(payload: Mapping[str, Any] | None) -> ReviewThreads:
    node = _pull_request(payload)
    threads = tuple(
        ForgeReviewThread(
            id=thread.get("id") or "",
            is_resolved=bool(thread.get("isResolved")),
            is_outdated=bool(thread.get("isOutdated")),
            path=thread.get("path") or "",
            line=thread.get("line"),
            original_line=thread.get("originalLine"),
            start_line=thread.get("startLine"),
            diff_side=_diff_side(thread.get("diffSide")),
            comments=tuple(_parse_review_comment(item) for item in _nodes(thread.get("comments"))),
        )
        for thread in _nodes(node.get("reviewThreads"))
    )
    return ReviewThreads(pr_node_id=node.get("id"), threads=threads)


def parse_review_submission(payload: Mapping[str, Any] | None) -> dict[str, Any] | None:
    result = _data(payload).get("addPullRequestReview") or {}
    return result.get("pullRequestReview")


__all__ = [
    "GHOST_LOGIN",
    "build_timeline",
    "merge_checks",
    "next_checks_cursor",
    "parse_checks_page",
    "parse_pr_detail",
    "parse_pr_list",
    "parse_pr_search",
    "parse_review_submission",
    "parse_review_threads",
    "parse_viewer",
    "raise_for_graphql_errors",
    "summarize_checks",
]
