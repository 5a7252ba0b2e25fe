"""
Loading and navigating OpenAPI 3.x and Swagger 2.0 documents.

Only structural checks are performed here. The document is treated as
already validated: missing pieces are reported as None rather than errors.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from ..errors import DocumentError
from ..log import get_logger

logger = get_logger(__name__)

# Operation keys of a path item, in extraction order
HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")

# Methods whose response falls back to the request type when untyped
MUTATING_METHODS = frozenset({"post", "put", "patch"})

YAML_SUFFIXES = {".yaml", ".yml"}


def load_document(path: Path) -> dict[str, Any]:
    """
    Load an API document from a JSON or YAML file.

    Args:
        path: Path to the document

    Returns:
        The raw document

    Raises:
        DocumentError: If the file cannot be read or parsed, or is not an API document
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"Cannot read API document {path}: {e}") from e

    try:
        if Path(path).suffix.lower() in YAML_SUFFIXES:
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentError(f"Cannot parse API document {path}: {e}") from e

    validate_document(document)
    return document


def validate_document(document: Any) -> None:
    """
    Check that a value looks like an OpenAPI or Swagger document.

    Raises:
        DocumentError: If the structure is not usable
    """
    if not isinstance(document, dict):
        raise DocumentError("API document must be an object")
    if not isinstance(document.get("info"), dict):
        raise DocumentError('API document is missing the "info" object')
    paths = document.get("paths")
    if paths is not None and not isinstance(paths, dict):
        raise DocumentError('"paths" must be an object')
    if paths is None and not ApiDocument(document).component_schemas:
        raise DocumentError('API document declares neither "paths" nor schemas')


def preferred_content_schema(content: Any) -> Any:
    """
    Pick the schema of the preferred media type of a content map.

    ``application/json`` wins, then any other JSON media type, then the
    first declared entry.

    Args:
        content: A ``content`` object of a request body or response

    Returns:
        The raw schema, or None
    """
    if not isinstance(content, dict) or not content:
        return None
    media = content.get("application/json")
    if media is None:
        json_types = [key for key in content if isinstance(key, str) and "json" in key.lower()]
        media = content[json_types[0]] if json_types else next(iter(content.values()))
    if not isinstance(media, dict):
        return None
    return media.get("schema")


class ApiDocument:
    """Read-only view over a raw OpenAPI 3.x or Swagger 2.0 document."""

    def __init__(self, raw: dict[str, Any]):
        self.raw = raw

    @property
    def info(self) -> dict[str, Any]:
        info = self.raw.get("info")
        return info if isinstance(info, dict) else {}

    @property
    def title(self) -> str:
        return str(self.info.get("title") or "API")

    @property
    def version(self) -> str:
        return str(self.info.get("version") or "")

    @property
    def is_swagger2(self) -> bool:
        return "swagger" in self.raw

    @property
    def server_url(self) -> str:
        """First server URL: ``servers[0].url``, or ``scheme://host/basePath`` for Swagger 2. Empty if undeclared."""
        servers = self.raw.get("servers")
        if isinstance(servers, list) and servers and isinstance(servers[0], dict):
            return str(servers[0].get("url") or "")
        host = self.raw.get("host")
        if not isinstance(host, str) or not host:
            return ""
        schemes = self.raw.get("schemes")
        scheme = schemes[0] if isinstance(schemes, list) and schemes else "https"
        return f"{scheme}://{host}{self.raw.get('basePath') or ''}"

    @property
    def paths(self) -> dict[str, Any]:
        paths = self.raw.get("paths")
        return paths if isinstance(paths, dict) else {}

    @property
    def component_schemas(self) -> dict[str, Any]:
        """Return ``components.schemas`` (OpenAPI 3) or ``definitions`` (Swagger 2), in document order."""
        components = self.raw.get("components")
        if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
            return components["schemas"]
        definitions = self.raw.get("definitions")
        if isinstance(definitions, dict):
            return definitions
        return {}

    def iter_operations(self) -> Iterator[tuple[str, str, dict[str, Any]]]:
        """
        Iterate over every operation of the document.

        Yields:
            (path, method, operation) tuples, paths in document order and
            methods in HTTP_METHODS order
        """
        for path, path_item in self.paths.items():
            if not isinstance(path_item, dict):
                continue
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if isinstance(operation, dict):
                    yield str(path), method, operation

    def deref(self, value: Any) -> Any:
        """
        Follow local $ref pointers of parameters, request bodies and responses.

        Schema references are not followed here; they are resolved by name.
        """
        seen: set[str] = set()
        while isinstance(value, dict) and isinstance(value.get("$ref"), str):
            ref = value["$ref"]
            if not ref.startswith("#/") or ref in seen:
                return value
            seen.add(ref)
            target: Any = self.raw
            for segment in ref[2:].split("/"):
                segment = segment.replace("~1", "/").replace("~0", "~")
                if not isinstance(target, dict) or segment not in target:
                    logger.warning("Unresolved reference %s", ref)
                    return None
                target = target[segment]
            value = target
        return value

    def parameters(self, path: str, operation: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Return the effective parameters of an operation.

        Path-item parameters are included; an operation parameter with the
        same name and location overrides the path-item one.
        """
        merged: dict[tuple[str, str], dict[str, Any]] = {}
        path_item = self.paths.get(path)
        sources = [path_item.get("parameters") if isinstance(path_item, dict) else None, operation.get("parameters")]
        for source in sources:
            if not isinstance(source, list):
                continue
            for parameter in source:
                parameter = self.deref(parameter)
                if isinstance(parameter, dict) and isinstance(parameter.get("name"), str):
                    merged[(parameter["name"], str(parameter.get("in", "")))] = parameter
        return list(merged.values())

    def parameter_schema(self, parameter: dict[str, Any]) -> Any:
        """Return the schema of a parameter. Swagger 2.0 declares it on the parameter itself."""
        if "schema" in parameter:
            return parameter["schema"]
        if "type" in parameter:
            return {key: value for key, value in parameter.items() if key not in ("name", "in", "required", "description")}
        return None

    def request_body(self, path: str, operation: dict[str, Any]) -> dict[str, Any] | None:
        """
        Return the request body object, normalized to the OpenAPI 3 shape.

        A Swagger 2.0 ``in: body`` parameter is returned as
        ``{"required": ..., "content": {"application/json": {"schema": ...}}}``.
        """
        body = self.deref(operation.get("requestBody"))
        if isinstance(body, dict):
            return body
        for parameter in self.parameters(path, operation):
            if parameter.get("in") == "body":
                return {
                    "required": bool(parameter.get("required")),
                    "content": {"application/json": {"schema": parameter.get("schema")}},
                }
        return None

    def request_schema(self, path: str, operation: dict[str, Any]) -> Any:
        """Return the preferred request body schema, or None."""
        body = self.request_body(path, operation)
        return preferred_content_schema(body.get("content")) if body else None

    def success_response(self, operation: dict[str, Any]) -> dict[str, Any] | None:
        """
        Return the best success response of an operation.

        ``200`` wins, then ``201``, then the lowest other 2xx code, then a
        ``2XX`` wildcard.
        """
        responses = operation.get("responses")
        if not isinstance(responses, dict):
            return None
        by_code = {str(code): response for code, response in responses.items()}
        candidates = ["200", "201"]
        candidates.extend(sorted(code for code in by_code if len(code) == 3 and code.startswith("2") and code.isdigit()))
        candidates.extend(["2XX", "2xx"])
        for code in candidates:
            response = self.deref(by_code.get(code))
            if isinstance(response, dict):
                return response
        return None

    def response_schema(self, operation: dict[str, Any]) -> Any:
        """Return the preferred success response schema, or None."""
        response = self.success_response(operation)
        if response is None:
            return None
        if "content" in response:
            return preferred_content_schema(response.get("content"))
        return response.get("schema")
