"""Request and response value objects for the HTTP layer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

DEFAULT_TIMEOUT_SECONDS = 30


@dataclass(frozen=True, slots=True)
class HttpRequestSpec:
    """One HTTP request; maps to exactly one process invocation."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | None = None
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        try:
            parsed = httpx.URL(self.url)
        except httpx.InvalidURL as exc:
            msg = f"Invalid request URL: {self.url}"
            raise ValueError(msg) from exc
        if not parsed.is_absolute_url:
            msg = f"Request URL must be absolute: {self.url}"
            raise ValueError(msg)
        if self.timeout_seconds <= 0:
            msg = "timeout_seconds must be positive"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """Completed response parsed from process output."""

    status: int
    body: str
    json: Any | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


__all__ = ["DEFAULT_TIMEOUT_SECONDS", "HttpRequestSpec", "HttpResponse"]
