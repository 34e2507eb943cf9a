"""Auth token sources for forge API access."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from gitlad.process import AsyncioProcessRunner, ProcessRunner, run_command

from .exceptions import AuthenticationError

AUTH_HINT = "Is gh CLI installed and authenticated?"


@runtime_checkable
class AuthTokenSource(Protocol):
    """Produces a bearer token for the forge API."""

    async def fetch_token(self) -> str: ...


class GhCliTokenSource(AuthTokenSource):
    """Read the token cached by the GitHub CLI via ``gh auth token``.

    Success is decided by the exit status: output printed by a process that
    later exits non-zero is discarded.
    """

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        binary: str = "gh",
        timeout: float | None = 30.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._runner = runner or AsyncioProcessRunner()
        self._binary = binary
        self._timeout = timeout
        self._logger = logger or logging.getLogger(__name__)

    async def fetch_token(self) -> str:
        result = await run_command(
            self._runner, [self._binary, "auth", "token"], timeout=self._timeout
        )
        if result.exit_code != 0:
            self._logger.info("%s auth token exited with %s", self._binary, result.exit_code)
            msg = f"gh auth token failed (exit {result.exit_code}). {AUTH_HINT}"
            raise AuthenticationError(msg)
        for line in result.stdout:
            token = line.rstrip()
            if token:
                return token
        msg = f"gh auth token printed no token. {AUTH_HINT}"
        raise AuthenticationError(msg)


class StaticTokenSource(AuthTokenSource):
    """Serve a token supplied through configuration."""

    def __init__(self, token: str) -> None:
        if not token.strip():
            msg = "Static auth token must not be blank"
            raise ValueError(msg)
        self._token = token.strip()

    async def fetch_token(self) -> str:
        return self._token


__all__ = ["AUTH_HINT", "AuthTokenSource", "GhCliTokenSource", "StaticTokenSource"]
