"""GitHub implementation of :class:`gitlad.forge.base.ForgeProvider`."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from gitlad.domain import ForgeKind, ReviewEvent
from gitlad.http import HttpClient

from ..base import ForgeProvider
from ..exceptions import ForgeApiError
from ..models import (
    ForgePullRequest,
    ListPullRequestsOptions,
    PendingComment,
    ReviewCommentDraft,
    ReviewThreads,
)
from . import parsers, queries
from .graphql import GitHubGraphQL, graphql_endpoint
from .rest import GitHubRest

logger = logging.getLogger(__name__)


class GitHubProvider(ForgeProvider):
    """GitHub (or GitHub Enterprise) pull requests for one repository."""

    provider_type = ForgeKind.GITHUB

    def __init__(
        self,
        owner: str,
        repo: str,
        api_url: str,
        token: str,
        *,
        http: HttpClient | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.api_base_url = api_url.rstrip("/")
        self.auth_token = token
        self.host = httpx.URL(self.api_base_url).host
        client = http or HttpClient()
        self._graphql = GitHubGraphQL(
            endpoint=graphql_endpoint(self.api_base_url), token=token, http=client
        )
        self._rest = GitHubRest(api_url=self.api_base_url, token=token, http=client)

    def __repr__(self) -> str:
        return f"GitHubProvider({self.owner}/{self.repo} @ {self.api_base_url})"

    async def list_prs(
        self, options: ListPullRequestsOptions | None = None
    ) -> list[ForgePullRequest]:
        options = options or ListPullRequestsOptions()
        payload = await self._graphql.execute(
            queries.PR_LIST,
            {
                "owner": self.owner,
                "repo": self.repo,
                "states": options.state.graphql_states(),
                "first": options.limit,
            },
        )
        prs = parsers.parse_pr_list(payload)
        if options.author:
            prs = [pr for pr in prs if pr.author.login == options.author]
        return prs

    async def get_pr(self, number: int) -> ForgePullRequest:
        """Fetch one pull request, following pagination of its checks.

        Failures while fetching further check pages keep the checks gathered so far.
        """

        variables = {"owner": self.owner, "repo": self.repo, "number": number}
        payload = await self._graphql.execute(queries.PR_DETAIL, variables)
        pr = parsers.parse_pr_detail(payload)

        cursor = parsers.next_checks_cursor(payload)
        summary = pr.checks_summary
        while cursor and summary is not None:
            try:
                page = await self._graphql.execute(
                    queries.PR_CHECKS_PAGE, {**variables, "after": cursor}
                )
                checks = parsers.parse_checks_page(page)
            except ForgeApiError as exc:
                logger.warning("Stopped loading checks for #%s: %s", number, exc)
                break
            summary = parsers.merge_checks(summary, checks)
            cursor = parsers.next_checks_cursor(page)

        if summary is not pr.checks_summary:
            pr = pr.model_copy(update={"checks_summary": summary})
        return pr

    async def search_prs(self, query: str, limit: int = 30) -> list[ForgePullRequest]:
        payload = await self._graphql.execute(
            queries.PR_SEARCH, {"searchQuery": query, "first": limit}
        )
        return parsers.parse_pr_search(payload)

    async def get_viewer(self) -> str:
        payload = await self._graphql.execute(queries.VIEWER, {})
        return parsers.parse_viewer(payload)

    async def get_review_threads(self, pr_number: int) -> ReviewThreads:
        payload = await self._graphql.execute(
            queries.PR_REVIEW_THREADS,
            {"owner": self.owner, "repo": self.repo, "number": pr_number},
        )
        return parsers.parse_review_threads(payload)

    async def add_comment(self, pr_number: int, body: str) -> dict[str, Any]:
        return await self._rest.send(
            "POST",
            f"/repos/{self.owner}/{self.repo}/issues/{pr_number}/comments",
            {"body": body},
            expected=201,
            messages={404: "PR not found."},
        )

    async def edit_comment(self, comment_id: int, body: str) -> dict[str, Any]:
        return await self._rest.send(
            "PATCH",
            f"/repos/{self.owner}/{self.repo}/issues/comments/{comment_id}",
            {"body": body},
            expected=200,
            messages={
                403: "Forbidden. You can only edit your own comments.",
                404: "Comment not found.",
            },
        )

    async def create_review_comment(
        self, pr_number: int, draft: ReviewCommentDraft
    ) -> dict[str, Any]:
        return await self._rest.send(
            "POST",
            f"/repos/{self.owner}/{self.repo}/pulls/{pr_number}/comments",
            {
                "body": draft.body,
                "path": draft.path,
                "line": draft.line,
                "side": draft.side.value,
                "commit_id": draft.commit_id,
            },
            expected=201,
            messages={404: "PR not found."},
        )

    async def reply_to_review_comment(
        self, pr_number: int, comment_id: int, body: str
    ) -> dict[str, Any]:
        return await self._rest.send(
            "POST",
            f"/repos/{self.owner}/{self.repo}/pulls/{pr_number}/comments/{comment_id}/replies",
            {"body": body},
            expected=201,
            messages={404: "Comment not found."},
        )

    async def submit_review(
        self, pr_node_id: str, event: ReviewEvent, body: str | None = None
    ) -> dict[str, Any] | None:
        payload = await self._graphql.execute(
            queries.ADD_PULL_REQUEST_REVIEW,
            {"pullRequestId": pr_node_id, "event": ReviewEvent(event).value, "body": body},
        )
        return parsers.parse_review_submission(payload)

    async def submit_review_with_comments(
        self,
        pr_node_id: str,
        event: ReviewEvent,
        body: str | None,
        comments: Sequence[PendingComment],
    ) -> dict[str, Any] | None:
        payload = await self._graphql.execute(
            queries.ADD_PULL_REQUEST_REVIEW_WITH_THREADS,
            {
                "pullRequestId": pr_node_id,
                "event": ReviewEvent(event).value,
                "body": body,
                "threads": [comment.as_draft_thread() for comment in comments],
            },
        )
        return parsers.parse_review_submission(payload)


__all__ = ["GitHubProvider"]
