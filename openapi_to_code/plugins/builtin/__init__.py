"""
Built-in output backends.
"""

from __future__ import annotations

from .base import HttpClientPlugin
from .fastapi_plugin import FastApiPlugin
from .httpx_plugin import HttpxPlugin
from .mcp_plugin import McpPlugin
from .requests_plugin import RequestsPlugin

__all__ = ["FastApiPlugin", "HttpClientPlugin", "HttpxPlugin", "McpPlugin", "RequestsPlugin"]
