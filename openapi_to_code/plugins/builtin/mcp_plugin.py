"""
MCP backend: a FastMCP tool server exposing the API as resource tools.

Operations are grouped by resource (first tag, else first literal path
segment). Each group becomes one ``manage_<resource>`` tool whose ``action``
argument picks the operation, e.g. ``manage_users(action="get", id="42")``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...pipeline.document import ApiDocument
from ...pipeline.emitters import create_environment, path_placeholders
from ...pipeline.reports import render_report
from ...utils import ensure_plural, to_snake_case
from ..types import (
    ArtifactKind,
    CanRunResult,
    CanRunSuccess,
    GenerateResult,
    GeneratorPlugin,
    OutputArtifact,
    PluginContext,
    PluginFile,
    PluginKind,
    PluginOutputPaths,
)
from .base import package_file

# Scan order of the methods of a path item; it decides which duplicate keeps the plain action name
MCP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")

DEFAULT_SERVER_NAME = "generated-api-mcp"
DEFAULT_SERVER_VERSION = "1.0.0"
DEFAULT_BASE_URL = "https://api.example.com"


@dataclass
class ResourceAction:
    """One operation reachable through a resource tool."""

    action_name: str
    http_method: str
    path: str
    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    path_params: list[str] = field(default_factory=list)

    @property
    def info(self) -> str:
        """Human description of the action."""
        parts = [part for part in (self.summary, self.description) if part]
        return " - ".join(parts) or f"{self.http_method.upper()} {self.path}"


@dataclass
class ResourceGroup:
    """The operations of one resource, exposed as a single tool."""

    resource_name: str
    tool_name: str
    actions: list[ResourceAction] = field(default_factory=list)

    @property
    def routes_name(self) -> str:
        return f"_{self.tool_name.upper()}_ROUTES"

    @property
    def action_names(self) -> list[str]:
        return [action.action_name for action in self.actions]


def text_or_none(value: Any) -> str | None:
    """Return stripped text, None for non-strings and blank strings."""
    if not isinstance(value, str):
        return None
    return value.strip() or None


def resolve_resource_name(operation: dict[str, Any], path: str) -> str:
    """Resource of an operation: its first tag, else its first literal path segment."""
    tags = [tag for tag in operation.get("tags") or [] if isinstance(tag, str)]
    if tags:
        return ensure_plural(to_snake_case(tags[0]))
    segments = [segment for segment in path.split("/") if segment and not segment.startswith("{")]
    if segments:
        return ensure_plural(to_snake_case(segments[0]))
    return "default"


def resolve_action_name(method: str, path: str, operation: dict[str, Any]) -> str:
    """CRUD verb of an operation, else its snake_cased operationId, else ``<method>_<path>``."""
    if method == "get":
        return "get" if "{" in path else "list"
    if method == "post":
        return "create"
    if method in ("put", "patch"):
        return "update"
    if method == "delete":
        return "delete"
    operation_id = text_or_none(operation.get("operationId"))
    if operation_id:
        return to_snake_case(operation_id)
    return to_snake_case(f"{method}_{path}")


def resolve_resource_actions(actions: list[ResourceAction]) -> list[ResourceAction]:
    """
    Make action names unique within a group.

    A repeated name is replaced by the snake_cased operationId when that is
    free, otherwise by the first free ``<name>_2``, ``<name>_3``, ...
    """
    used: set[str] = set()
    for action in actions:
        base = to_snake_case(action.action_name) or "action"
        if base not in used:
            action.action_name = base
        elif action.operation_id and to_snake_case(action.operation_id) not in used:
            action.action_name = to_snake_case(action.operation_id)
        else:
            index = 2
            while f"{base}_{index}" in used:
                index += 1
            action.action_name = f"{base}_{index}"
        used.add(action.action_name)
    return actions


def collect_resource_groups(document: ApiDocument) -> tuple[list[ResourceGroup], int]:
    """
    Group every operation of a document by resource.

    Returns:
        The groups sorted by resource name, and the total number of actions
    """
    grouped: dict[str, list[ResourceAction]] = {}
    action_count = 0
    for path, path_item in document.paths.items():
        if not isinstance(path_item, dict):
            continue
        for method in MCP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            action_count += 1
            grouped.setdefault(resolve_resource_name(operation, path), []).append(
                ResourceAction(
                    action_name=resolve_action_name(method, path, operation),
                    http_method=method,
                    path=path,
                    summary=text_or_none(operation.get("summary")),
                    description=text_or_none(operation.get("description")),
                    operation_id=text_or_none(operation.get("operationId")),
                    path_params=path_placeholders(path),
                )
            )

    groups = []
    for resource_name in sorted(grouped):
        safe_resource = ensure_plural(to_snake_case(resource_name) or "default")
        groups.append(
            ResourceGroup(
                resource_name=safe_resource,
                tool_name=f"manage_{safe_resource}",
                actions=resolve_resource_actions(grouped[resource_name]),
            )
        )
    return groups, action_count


def normalize_server_name(title: Any) -> str:
    """Kebab-case server name from the document title."""
    text = text_or_none(title)
    if not text:
        return DEFAULT_SERVER_NAME
    return to_snake_case(text).replace("_", "-") or DEFAULT_SERVER_NAME


def build_tools_report(groups: list[ResourceGroup], document: ApiDocument, action_count: int) -> dict[str, Any]:
    """Inventory of the generated tools and the operations behind their actions."""
    return {
        "generator": "openapi_to_code-mcp-plugin",
        "plugin": "mcp",
        "apiTitle": document.info.get("title"),
        "apiVersion": document.info.get("version"),
        "toolCount": len(groups),
        "actionCount": action_count,
        "tools": [
            {
                "resource": group.resource_name,
                "toolName": group.tool_name,
                "actions": [
                    {
                        "action": action.action_name,
                        "method": action.http_method.upper(),
                        "path": action.path,
                        "summary": action.summary,
                        "description": action.description,
                        "operationId": action.operation_id,
                    }
                    for action in group.actions
                ],
            }
            for group in groups
        ],
    }


class McpPlugin(GeneratorPlugin):
    """Generates a FastMCP server, its API client, a README and a tools inventory."""

    id = "mcp"
    aliases = ("modelcontext", "model-context-protocol")
    kind = PluginKind.PROTOCOL_TOOL_SERVER

    directory = "mcp_server"

    def can_run(self, context: PluginContext) -> CanRunResult:
        return CanRunSuccess()

    def resolve_outputs(self, context: PluginContext) -> PluginOutputPaths:
        directory = context.base_output_path / self.directory
        service_path = directory / "server.py"
        report_path = directory / "mcp-tools-report.json"
        return PluginOutputPaths(
            artifacts=[
                OutputArtifact(ArtifactKind.SERVICE, service_path, "MCP server"),
                OutputArtifact(ArtifactKind.SERVICE, directory / "client.py", "MCP API client"),
                OutputArtifact(ArtifactKind.MANIFEST, report_path, "MCP tools inventory report"),
                OutputArtifact(ArtifactKind.OTHER, directory / "README.md", "Generated MCP README"),
            ],
            service_path=service_path,
            report_path=report_path,
        )

    def generate(self, context: PluginContext) -> GenerateResult:
        outputs = self.resolve_outputs(context)
        directory = context.base_output_path / self.directory
        groups, action_count = collect_resource_groups(context.document)
        env = create_environment("python")
        variables = {
            "header": context.file_header,
            "title": context.document.title,
            "groups": groups,
            "server_name": normalize_server_name(context.document.info.get("title")),
            "server_version": text_or_none(context.document.info.get("version")) or DEFAULT_SERVER_VERSION,
            "default_base_url": context.document.server_url or DEFAULT_BASE_URL,
        }
        files = [
            package_file(directory),
            PluginFile(outputs.service_path, env.get_template("mcp_server.py.jinja2").render(**variables)),
            PluginFile(directory / "client.py", env.get_template("mcp_client.py.jinja2").render(**variables)),
            PluginFile(directory / "README.md", env.get_template("mcp_readme.md.jinja2").render(**variables)),
            PluginFile(outputs.report_path, render_report(build_tools_report(groups, context.document, action_count))),
        ]
        return GenerateResult(files=files, method_count=len(groups))
