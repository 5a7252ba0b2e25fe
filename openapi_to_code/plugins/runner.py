"""
Plugin runner: selects, probes and executes the requested plugins.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import CircularPluginFallbackError, PluginCannotRunError, UnknownPluginError
from ..log import get_logger
from .registry import PluginRegistry
from .types import (
    ArtifactKind,
    CanRunFailure,
    GeneratorPlugin,
    OutputArtifact,
    PluginContext,
    PluginExecutionResult,
)

logger = get_logger(__name__)


class PluginRunner:
    """Runs plugins strictly in the requested order."""

    def __init__(self, registry: PluginRegistry):
        self.registry = registry

    def select(self, requested_id: str, context: PluginContext) -> GeneratorPlugin:
        """
        Resolve a requested id to the plugin that will actually run.

        Plugins that cannot run are replaced by their fallback, repeatedly,
        until one can run. The chain never visits a plugin twice.

        Args:
            requested_id: Plugin id or alias as requested
            context: The run context, passed to every probe

        Returns:
            The plugin to execute

        Raises:
            UnknownPluginError: If an id or fallback id is not registered
            PluginCannotRunError: If a plugin cannot run and names no fallback
            CircularPluginFallbackError: If the fallback chain loops
        """
        plugin = self.registry.resolve(requested_id)
        if plugin is None:
            raise UnknownPluginError(requested_id)

        visited: frozenset[str] = frozenset()
        chain: tuple[str, ...] = ()
        while True:
            if plugin.id in visited:
                raise CircularPluginFallbackError(requested_id, chain + (plugin.id,))
            visited = visited | {plugin.id}
            chain = chain + (plugin.id,)

            result = plugin.can_run(context)
            if not isinstance(result, CanRunFailure):
                return plugin

            logger.warning(result.reason)
            if not result.fallback_plugin_id:
                raise PluginCannotRunError(plugin.id, result.reason)

            fallback = self.registry.resolve(result.fallback_plugin_id)
            if fallback is None:
                raise UnknownPluginError(result.fallback_plugin_id)
            plugin = fallback

    def run(self, requested_ids: Iterable[str], context: PluginContext) -> list[PluginExecutionResult]:
        """
        Run every requested plugin and write its files.

        A failure aborts the remaining plugins; files already written by
        earlier plugins are kept.

        Args:
            requested_ids: Plugin ids or aliases, in execution order
            context: The run context

        Returns:
            One result per requested id, in order
        """
        results: list[PluginExecutionResult] = []
        for requested_id in requested_ids:
            plugin = self.select(requested_id, context)
            outputs = plugin.resolve_outputs(context)
            generated = plugin.generate(context)

            for plugin_file in generated.files:
                context.write_file(plugin_file.path, plugin_file.content)

            artifacts = list(outputs.artifacts) or [OutputArtifact(ArtifactKind.OTHER, f.path) for f in generated.files]
            results.append(
                PluginExecutionResult(
                    requested_id=requested_id,
                    executed_id=plugin.id,
                    kind=plugin.kind,
                    method_count=generated.method_count,
                    artifacts=artifacts,
                    service_path=outputs.service_path,
                    report_path=outputs.report_path,
                    type_coverage_report_path=outputs.type_coverage_report_path,
                )
            )
            logger.info("Plugin %s generated %d files (%d methods)", plugin.id, len(generated.files), generated.method_count)
        return results
