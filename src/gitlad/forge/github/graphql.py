"""Minimal GitHub GraphQL transport on top of :class:`gitlad.http.HttpClient`."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from gitlad.http import HttpClient, HttpRequestSpec

from ..exceptions import ForgeApiError
from .parsers import raise_for_graphql_errors
from .rest import AUTH_FAILED, FORBIDDEN

_GHE_REST_SUFFIX = "/api/v3"


def graphql_endpoint(api_url: str) -> str:
    """Return the GraphQL endpoint paired with a REST API base URL.

    GitHub Enterprise serves GraphQL from ``/api/graphql`` next to ``/api/v3``.
    """

    base = api_url.rstrip("/")
    if base.endswith(_GHE_REST_SUFFIX):
        return base[: -len(_GHE_REST_SUFFIX)] + "/api/graphql"
    return base + "/graphql"


class GitHubGraphQL:
    def __init__(
        self,
        *,
        endpoint: str,
        token: str,
        http: HttpClient,
        logger: logging.Logger | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._token = token
        self._http = http
        self._logger = logger or logging.getLogger(__name__)

    async def execute(
        self, query: str, variables: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """POST ``query`` and return the decoded payload.

        Raises ``ForgeApiError`` for non-200 statuses, undecodable bodies and
        payloads carrying a GraphQL ``errors`` array.
        """

        request = HttpRequestSpec(
            url=self._endpoint,
            method="POST",
            headers={
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            body=json.dumps({"query": query, "variables": dict(variables or {})}),
            timeout_seconds=self._http.default_timeout,
        )
        response = await self._http.fetch(request)
        self._logger.debug("GraphQL POST %s -> %s", self._endpoint, response.status)

        if response.status == 401:
            raise ForgeApiError(AUTH_FAILED)
        if response.status == 403:
            raise ForgeApiError(FORBIDDEN)
        if response.status != 200:
            msg = f"GitHub API returned HTTP {response.status}"
            raise ForgeApiError(msg)
        if not isinstance(response.json, dict):
            raise ForgeApiError("Failed to parse JSON response")

        raise_for_graphql_errors(response.json)
        return response.json


__all__ = ["GitHubGraphQL", "graphql_endpoint"]
