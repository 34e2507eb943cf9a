"""Lightweight application configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from exc
    if value <= 0:
        msg = f"{name} must be positive, got {value}"
        raise ValueError(msg)
    return value


@dataclass(frozen=True)
class AppSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    git_binary: str = "git"
    gh_binary: str = "gh"
    curl_binary: str = "curl"
    http_timeout: int = 30
    history_size: int = 100
    github_token: str | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            environment=os.getenv("GITLAD_ENV", cls.environment),
            git_binary=os.getenv("GITLAD_GIT_BINARY", cls.git_binary),
            gh_binary=os.getenv("GITLAD_GH_BINARY", cls.gh_binary),
            curl_binary=os.getenv("GITLAD_CURL_BINARY", cls.curl_binary),
            http_timeout=_env_int("GITLAD_HTTP_TIMEOUT", cls.http_timeout),
            history_size=_env_int("GITLAD_HISTORY_SIZE", cls.history_size),
            github_token=(os.getenv("GITLAD_GITHUB_TOKEN") or "").strip() or None,
            log_level=os.getenv("GITLAD_LOG_LEVEL", cls.log_level).upper(),
        )


__all__ = ["AppSettings"]
