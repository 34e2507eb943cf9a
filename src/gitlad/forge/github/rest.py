"""GitHub REST calls used for comment mutations."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from gitlad.http import HttpClient, HttpRequestSpec

from ..exceptions import ForgeApiError

AUTH_FAILED = "Authentication failed. Run `gh auth login` to re-authenticate."
FORBIDDEN = "Access forbidden. Check your token permissions."


def _api_message(payload: Any) -> str | None:
    if isinstance(payload, Mapping) and payload.get("message"):
        return str(payload["message"])
    return None


def status_error(status: int, payload: Any, messages: Mapping[int, str]) -> ForgeApiError:
    """Build the error for an unexpected REST status.

    ``messages`` overrides the text for specific statuses. A 422 without an
    override reports GitHub's validation message.
    """

    if status in messages:
        return ForgeApiError(messages[status])
    detail = _api_message(payload)
    if status == 401:
        return ForgeApiError(AUTH_FAILED)
    if status == 403:
        return ForgeApiError(FORBIDDEN)
    if status == 422:
        return ForgeApiError(f"Validation failed: {detail}" if detail else "Validation failed")
    msg = f"GitHub API returned HTTP {status}"
    return ForgeApiError(f"{msg}: {detail}" if detail else msg)


class GitHubRest:
    def __init__(
        self,
        *,
        api_url: str,
        token: str,
        http: HttpClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._token = token
        self._http = http
        self._logger = logger or logging.getLogger(__name__)

    async def send(
        self,
        method: str,
        path: str,
        payload: Mapping[str, Any],
        *,
        expected: int,
        messages: Mapping[int, str] | None = None,
    ) -> dict[str, Any]:
        """Send ``payload`` as JSON and return the decoded body on ``expected`` status."""

        request = HttpRequestSpec(
            url=f"{self._api_url}{path}",
            method=method,
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
                "Accept": "application/vnd.github+json",
            },
            body=json.dumps(dict(payload)),
            timeout_seconds=self._http.default_timeout,
        )
        response = await self._http.fetch(request)
        self._logger.debug("%s %s -> %s", method, path, response.status)
        if response.status != expected:
            raise status_error(response.status, response.json, messages or {})
        return response.json if isinstance(response.json, dict) else {}


__all__ = ["AUTH_FAILED", "FORBIDDEN", "GitHubRest", "status_error"]
