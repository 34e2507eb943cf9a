"""Forge detection, authentication and provider contracts."""

from .auth import AUTH_HINT, AuthTokenSource, GhCliTokenSource, StaticTokenSource
from .base import ForgeProvider, ForgeProviderPlugin, ProviderFactory
from .exceptions import (
    AuthenticationError,
    ForgeApiError,
    ForgeError,
    RemoteNotFoundError,
    RemoteParseError,
    UnsupportedProviderError,
)
from .models import (
    ForgeCheck,
    ForgeChecksSummary,
    ForgeComment,
    ForgePullRequest,
    ForgeRemoteInfo,
    ForgeReview,
    ForgeReviewComment,
    ForgeReviewThread,
    ForgeTimelineItem,
    ForgeUser,
    ListPullRequestsOptions,
    PendingComment,
    ReviewCommentDraft,
    ReviewThreads,
)
from .registry import ForgeProviderRegistry
from .remote import classify_host, parse_remote_url
from .session import ForgeSession

__all__ = [
    "AUTH_HINT",
    "AuthTokenSource",
    "AuthenticationError",
    "ForgeApiError",
    "ForgeCheck",
    "ForgeChecksSummary",
    "ForgeComment",
    "ForgeError",
    "ForgeProvider",
    "ForgeProviderPlugin",
    "ForgeProviderRegistry",
    "ForgePullRequest",
    "ForgeRemoteInfo",
    "ForgeReview",
    "ForgeReviewComment",
    "ForgeReviewThread",
    "ForgeSession",
    "ForgeTimelineItem",
    "ForgeUser",
    "GhCliTokenSource",
    "ListPullRequestsOptions",
    "PendingComment",
    "ProviderFactory",
    "RemoteNotFoundError",
    "RemoteParseError",
    "ReviewCommentDraft",
    "ReviewThreads",
    "StaticTokenSource",
    "UnsupportedProviderError",
    "classify_host",
    "parse_remote_url",
]
