"""Shared helpers."""

from .time import parse_iso8601, utc_now

__all__ = ["parse_iso8601", "utc_now"]
