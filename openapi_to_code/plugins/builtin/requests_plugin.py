"""
requests backend: the same client surface as the httpx backend, on requests.
"""

from __future__ import annotations

from .base import HttpClientPlugin


class RequestsPlugin(HttpClientPlugin):
    id = "requests"
    aliases = ("rq",)
    directory = "http_client"
    service_file = "api_client_requests.py"
    template_name = "requests_client.py.jinja2"
    label = "requests HTTP client"
    report_suffix = ".requests"

    # The runner lists every generated file instead
    declare_artifacts = False
