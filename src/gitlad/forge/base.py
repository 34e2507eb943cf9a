"""Forge provider contracts."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from gitlad.domain import ForgeKind, ReviewEvent
from gitlad.http import HttpClient

from .models import (
    ForgePullRequest,
    ListPullRequestsOptions,
    PendingComment,
    ReviewCommentDraft,
    ReviewThreads,
)


@runtime_checkable
class ForgeProvider(Protocol):
    """Capability surface of a provider bound to one repository."""

    owner: str
    repo: str
    host: str
    provider_type: ForgeKind
    api_base_url: str

    async def list_prs(
        self, options: ListPullRequestsOptions | None = None
    ) -> list[ForgePullRequest]: ...

    async def get_pr(self, number: int) -> ForgePullRequest: ...

    async def search_prs(self, query: str, limit: int = 30) -> list[ForgePullRequest]: ...

    async def get_viewer(self) -> str: ...

    async def get_review_threads(self, pr_number: int) -> ReviewThreads: ...

    async def add_comment(self, pr_number: int, body: str) -> dict[str, Any]: ...

    async def edit_comment(self, comment_id: int, body: str) -> dict[str, Any]: ...

    async def create_review_comment(
        self, pr_number: int, draft: ReviewCommentDraft
    ) -> dict[str, Any]: ...

    async def reply_to_review_comment(
        self, pr_number: int, comment_id: int, body: str
    ) -> dict[str, Any]: ...

    async def submit_review(
        self, pr_node_id: str, event: ReviewEvent, body: str | None = None
    ) -> dict[str, Any] | None: ...

    async def submit_review_with_comments(
        self,
        pr_node_id: str,
        event: ReviewEvent,
        body: str | None,
        comments: Sequence[PendingComment],
    ) -> dict[str, Any] | None: ...


ProviderFactory = Callable[[str, str, str, str, HttpClient], ForgeProvider]


@dataclass(slots=True, frozen=True)
class ForgeProviderPlugin:
    """Declarative description of a forge integration."""

    kind: ForgeKind
    display_name: str
    api_base_url: Callable[[str], str]
    factory: ProviderFactory

    def create(
        self, owner: str, repo: str, host: str, token: str, http: HttpClient
    ) -> ForgeProvider:
        """Build a provider for ``owner/repo`` on ``host`` authenticated with ``token``."""

        return self.factory(owner, repo, self.api_base_url(host), token, http)


__all__ = ["ForgeProvider", "ForgeProviderPlugin", "ProviderFactory"]
