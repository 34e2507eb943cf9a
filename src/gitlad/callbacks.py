"""Adapter from coroutines to ``callback(result, error)`` delivery."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .exceptions import GitladError

T = TypeVar("T")

ResultCallback = Callable[[T | None, str | None], None]

logger = logging.getLogger(__name__)

_pending: set[asyncio.Task[None]] = set()


def deliver(awaitable: Awaitable[T], callback: ResultCallback[T]) -> asyncio.Task[None]:
    """Run ``awaitable`` as a task and report its outcome through ``callback``.

    The callback receives ``(result, None)`` on success or ``(None, message)`` when
    any exception is raised. It fires exactly once and never before the caller
    yields to the event loop.
    """

    async def _run() -> None:
        try:
            result = await awaitable
        except GitladError as exc:
            callback(None, str(exc))
            return
        except Exception as exc:
            logger.exception("Unexpected error in delivered operation")
            callback(None, str(exc) or type(exc).__name__)
            return
        callback(result, None)

    task = asyncio.ensure_future(_run())
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


__all__ = ["ResultCallback", "deliver"]
