"""
Exceptions raised by the openapi_to_code generator.
"""

from __future__ import annotations


class OpenApiToCodeError(Exception):
    """Base class for all generator errors."""


class DocumentError(OpenApiToCodeError):
    """Raised when an API document cannot be read or is not structurally valid."""


class OutputValidationError(OpenApiToCodeError):
    """Raised when generated code fails validation before being written."""


class PluginError(OpenApiToCodeError):
    """Base class for plugin selection errors."""


class UnknownPluginError(PluginError):
    """Raised when a requested plugin id or alias is not registered."""

    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(f'Unknown plugin "{plugin_id}".')


class PluginCannotRunError(PluginError):
    """Raised when a plugin refuses to run and names no fallback."""

    def __init__(self, plugin_id: str, reason: str):
        self.plugin_id = plugin_id
        self.reason = reason
        super().__init__(f'Plugin "{plugin_id}" cannot run: {reason}')


class CircularPluginFallbackError(PluginError):
    """Raised when a fallback chain returns to a plugin it already visited."""

    def __init__(self, requested_id: str, chain: tuple[str, ...]):
        self.requested_id = requested_id
        self.chain = chain
        super().__init__(f'Circular fallback detected while resolving plugin "{requested_id}": {" -> ".join(chain)}.')
