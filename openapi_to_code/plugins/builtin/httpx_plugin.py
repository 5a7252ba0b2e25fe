"""
httpx backend: a synchronous typed client class.
"""

from __future__ import annotations

from .base import HttpClientPlugin


class HttpxPlugin(HttpClientPlugin):
    """Generates ``http_client/api_client.py``, the default backend."""

    id = "httpx"
    aliases = ("http", "http-client", "fetch")
    directory = "http_client"
    service_file = "api_client.py"
    template_name = "httpx_client.py.jinja2"
    label = "httpx HTTP client"
