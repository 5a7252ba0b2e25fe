"""
FastAPI backend: an async upstream service injectable with ``Depends``.
"""

from __future__ import annotations

from typing import Any

from ..types import CanRunFailure, CanRunResult, CanRunSuccess, PluginContext
from .base import HttpClientPlugin

DEFAULT_BASE_URL = "http://localhost:8000"


class FastApiPlugin(HttpClientPlugin):
    """Generates ``fastapi_service/api_service.py``; falls back to httpx outside FastAPI projects."""

    id = "fastapi"
    aliases = ("fa",)
    directory = "fastapi_service"
    service_file = "api_service.py"
    template_name = "fastapi_service.py.jinja2"
    label = "FastAPI service"
    base_typing_names = ("Annotated", "Any")

    def can_run(self, context: PluginContext) -> CanRunResult:
        if context.is_fastapi_project:
            return CanRunSuccess()
        return CanRunFailure(
            reason="FastAPI plugin requested but FastAPI project not detected. Falling back to httpx plugin.",
            fallback_plugin_id="httpx",
        )

    def template_context(self, context: PluginContext) -> dict[str, Any]:
        return {"default_base_url": context.document.server_url or DEFAULT_BASE_URL}
