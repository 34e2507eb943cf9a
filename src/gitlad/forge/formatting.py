"""Pure helpers turning forge data into short display strings."""

from __future__ import annotations

from datetime import datetime

from gitlad.domain import CheckTone
from gitlad.utils import parse_iso8601, utc_now

from .models import ForgeCheck, ForgeChecksSummary

_REVIEW_DECISIONS = {
    "APPROVED": "APPROVED",
    "CHANGES_REQUESTED": "CHANGES REQUESTED",
    "REVIEW_REQUIRED": "REVIEW REQUIRED",
}

_PR_STATES = {"open": "OPEN", "closed": "CLOSED", "merged": "MERGED"}

_MINUTE = 60
_HOUR = 3600
_DAY = 86400
_MONTH = 30 * _DAY
_YEAR = 365 * _DAY

_FAILURE_CONCLUSIONS = frozenset({"failure", "timed_out", "startup_failure"})
_NEUTRAL_CONCLUSIONS = frozenset({"cancelled", "skipped", "neutral", "stale"})


def format_review_decision(decision: str | None) -> str:
    if not decision:
        return ""
    return _REVIEW_DECISIONS.get(decision, decision)


def format_pr_state(state: str, draft: bool) -> str:
    if draft:
        return "DRAFT"
    return _PR_STATES.get(state, state.upper())


def format_diff_stat(additions: int, deletions: int) -> str:
    return f"+{additions} -{deletions}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit} ago" if count == 1 else f"{count} {unit}s ago"


def relative_time(iso_string: str | None, *, now: datetime | None = None) -> str:
    """Describe an ISO 8601 timestamp relative to ``now`` (e.g. ``"2 days ago"``).

    Unparseable input is returned unchanged.
    """

    if not iso_string:
        return ""
    timestamp = parse_iso8601(iso_string)
    if timestamp is None:
        return iso_string

    diff = int(((now or utc_now()) - timestamp).total_seconds())
    if diff < 0:
        return "in the future"
    if diff < _MINUTE:
        return "just now"
    if diff < _HOUR:
        return _plural(diff // _MINUTE, "minute")
    if diff < _DAY:
        return _plural(diff // _HOUR, "hour")
    if diff < _MONTH:
        return _plural(diff // _DAY, "day")
    if diff < _YEAR:
        return _plural(diff // _MONTH, "month")
    return _plural(diff // _YEAR, "year")


def check_tone(check: ForgeCheck) -> CheckTone:
    """Classify a single check for display."""

    if check.status != "completed":
        return CheckTone.PENDING
    conclusion = (check.conclusion or "").lower()
    if conclusion == "success":
        return CheckTone.SUCCESS
    if conclusion in _FAILURE_CONCLUSIONS:
        return CheckTone.FAILURE
    if conclusion == "action_required":
        return CheckTone.PENDING
    return CheckTone.NEUTRAL


def format_checks_compact(summary: ForgeChecksSummary) -> tuple[str, CheckTone]:
    """Render a summary as ``"3/3"``, ``"1/3"`` or ``"~1/3"`` with its tone.

    Pending checks take priority over failures; the numerator is the count of
    passing checks, or of completed checks while some are still pending.
    """

    if summary.total == 0:
        return "", CheckTone.NONE
    if summary.pending > 0:
        return f"~{summary.total - summary.pending}/{summary.total}", CheckTone.PENDING
    if summary.failure > 0:
        return f"{summary.success}/{summary.total}", CheckTone.FAILURE
    return f"{summary.success}/{summary.total}", CheckTone.SUCCESS


def format_check_duration(started_at: str | None, completed_at: str | None) -> str:
    """Format the runtime of a check as ``30s``, ``2m 30s`` or ``1h 30m``."""

    started = parse_iso8601(started_at)
    completed = parse_iso8601(completed_at)
    if started is None or completed is None:
        return ""
    seconds = int((completed - started).total_seconds())
    if seconds < 0:
        return ""
    if seconds < _MINUTE:
        return f"{seconds}s"
    if seconds < _HOUR:
        minutes, rest = divmod(seconds, _MINUTE)
        return f"{minutes}m {rest}s" if rest else f"{minutes}m"
    hours, rest = divmod(seconds, _HOUR)
    minutes = rest // _MINUTE
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"


__all__ = [
    "check_tone",
    "format_check_duration",
    "format_checks_compact",
    "format_diff_stat",
    "format_pr_state",
    "format_review_decision",
    "relative_time",
]
