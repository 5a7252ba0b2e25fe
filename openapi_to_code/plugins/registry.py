"""
Plugin registry: the closed table of output backends, indexed by id and alias.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import PluginError
from .types import GeneratorPlugin


def normalize_plugin_id(plugin_id: str) -> str:
    """Normalize a plugin id or alias for lookup."""
    return plugin_id.strip().lower()


def normalize_plugin_ids(plugin_ids: Iterable[str]) -> list[str]:
    """Normalize requested ids, dropping blanks and repeats but keeping order."""
    normalized: list[str] = []
    for plugin_id in plugin_ids:
        key = normalize_plugin_id(plugin_id)
        if key and key not in normalized:
            normalized.append(key)
    return normalized


class PluginRegistry:
    """Looks plugins up by id or alias."""

    def __init__(self, plugins: Iterable[GeneratorPlugin]):
        self._plugins: list[GeneratorPlugin] = []
        self._index: dict[str, GeneratorPlugin] = {}
        for plugin in plugins:
            self._register(plugin)

    def _register(self, plugin: GeneratorPlugin) -> None:
        for name in (plugin.id, *plugin.aliases):
            key = normalize_plugin_id(name)
            owner = self._index.get(key)
            if owner is not None and owner is not plugin:
                raise PluginError(f'Plugin name "{key}" is registered by both "{owner.id}" and "{plugin.id}".')
            self._index[key] = plugin
        self._plugins.append(plugin)

    def resolve(self, id_or_alias: str) -> GeneratorPlugin | None:
        """Return the plugin registered under an id or alias, None when unknown."""
        return self._index.get(normalize_plugin_id(id_or_alias))

    def get_all(self) -> list[GeneratorPlugin]:
        """Return every plugin, in registration order."""
        return list(self._plugins)


def create_default_registry() -> PluginRegistry:
    """Create the registry of built-in plugins."""
    from .builtin import FastApiPlugin, HttpxPlugin, McpPlugin, RequestsPlugin

    return PluginRegistry([HttpxPlugin(), RequestsPlugin(), FastApiPlugin(), McpPlugin()])
