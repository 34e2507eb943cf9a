"""Forge provider plugin registry."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from gitlad.domain import ForgeKind

from .base import ForgeProviderPlugin
from .exceptions import UnsupportedProviderError


@dataclass(slots=True)
class ForgeProviderRegistry:
    """Runtime registry mapping forge kinds to provider plugins."""

    _plugins: dict[ForgeKind, ForgeProviderPlugin] = field(default_factory=dict)

    def register(self, plugin: ForgeProviderPlugin, *, override: bool = False) -> None:
        if not override and plugin.kind in self._plugins:
            existing = self._plugins[plugin.kind]
            msg = f"Forge provider {plugin.kind} already registered ({existing.display_name})"
            raise ValueError(msg)
        self._plugins[plugin.kind] = plugin

    def get(self, kind: ForgeKind) -> ForgeProviderPlugin | None:
        return self._plugins.get(kind)

    def require(self, kind: ForgeKind) -> ForgeProviderPlugin:
        plugin = self.get(kind)
        if plugin is None:
            msg = f"Unsupported forge provider: {kind}"
            raise UnsupportedProviderError(msg)
        return plugin

    def supports(self, kind: ForgeKind) -> bool:
        return kind in self._plugins

    def list_plugins(self) -> Iterable[ForgeProviderPlugin]:
        return tuple(self._plugins.values())


__all__ = ["ForgeProviderRegistry"]
