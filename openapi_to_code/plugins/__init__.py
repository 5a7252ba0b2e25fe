"""
Plugins: the output backends and the machinery that selects and runs them.
"""

from __future__ import annotations

from .registry import PluginRegistry, create_default_registry, normalize_plugin_id, normalize_plugin_ids
from .runner import PluginRunner
from .types import (
    ArtifactKind,
    CanRunFailure,
    CanRunResult,
    CanRunSuccess,
    GenerateResult,
    GeneratorPlugin,
    OutputArtifact,
    PluginContext,
    PluginExecutionResult,
    PluginFile,
    PluginKind,
    PluginOutputPaths,
)

__all__ = [
    "ArtifactKind",
    "CanRunFailure",
    "CanRunResult",
    "CanRunSuccess",
    "GenerateResult",
    "GeneratorPlugin",
    "OutputArtifact",
    "PluginContext",
    "PluginExecutionResult",
    "PluginFile",
    "PluginKind",
    "PluginOutputPaths",
    "PluginRegistry",
    "PluginRunner",
    "create_default_registry",
    "normalize_plugin_id",
    "normalize_plugin_ids",
]
