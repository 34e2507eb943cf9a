"""Bounded history of executed commands."""

from __future__ import annotations

from collections import deque

from .models import CommandRecord


class CommandHistory:
    """Ring buffer keeping the most recent ``max_size`` command records."""

    def __init__(self, max_size: int = 100) -> None:
        if max_size < 1:
            msg = "max_size must be at least 1"
            raise ValueError(msg)
        self._entries: deque[CommandRecord] = deque(maxlen=max_size)

    @property
    def max_size(self) -> int:
        return self._entries.maxlen or 0

    def add(self, record: CommandRecord) -> None:
        self._entries.append(record)

    def entries(self) -> list[CommandRecord]:
        """Return records newest first."""

        return list(reversed(self._entries))

    def latest(self) -> CommandRecord | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CommandHistory"]
