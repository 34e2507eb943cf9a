"""Domain layer exports."""

from .base import DomainModel
from .enums import ChecksState, CheckTone, DiffSide, ForgeKind, PullRequestStateFilter, ReviewEvent

__all__ = [
    "CheckTone",
    "ChecksState",
    "DiffSide",
    "DomainModel",
    "ForgeKind",
    "PullRequestStateFilter",
    "ReviewEvent",
]
