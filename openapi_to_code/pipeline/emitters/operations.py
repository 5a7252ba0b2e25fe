"""
Client operation bindings.

Turns each document operation into a ClientOperation: a method name unique
within the generated client, typed path/query/body parameters and a return
annotation. Backends render these with their own templates.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from ...log import get_logger
from ...utils import make_unique, to_identifier, to_pascal_case, to_snake_case
from ..analyzer.analyzer import AnalysisResult
from ..analyzer.resolver import SchemaTypeResolver
from ..document import MUTATING_METHODS, ApiDocument
from .python_emitter import AnnotationImports, PythonTypeEmitter

logger = get_logger(__name__)

_PATH_PARAMETER_PATTERN = re.compile(r"\{([^}]+)\}")


def path_placeholders(path: str) -> list[str]:
    """Return the parameter names of a path template, in order."""
    return _PATH_PARAMETER_PATTERN.findall(path)


def build_method_name(path: str, method: str, operation: dict[str, Any]) -> str:
    """
    Build the snake_case client method name of an operation.

    The operationId is used when present. Otherwise the name is the method
    followed by the path segments, ignoring ``api``, with path parameters
    written as ``by_<param>``, e.g. ``GET /api/users/{id}`` -> ``get_users_by_id``.

    Raises:
        ValueError: If no usable name can be derived
    """
    operation_id = operation.get("operationId")
    if isinstance(operation_id, str) and to_snake_case(operation_id):
        return to_identifier(operation_id)

    parts = [method]
    for segment in path.split("/"):
        if not segment or segment == "api":
            continue
        if segment.startswith("{") and segment.endswith("}"):
            parts.append(f"by_{segment[1:-1]}")
        else:
            parts.append(segment)
    name = to_snake_case("_".join(parts))
    if not name:
        raise ValueError(f"Cannot derive a method name for {method.upper()} {path}")
    return to_identifier(name)


@dataclass
class ParameterBinding:
    """A path or query parameter of a client method."""

    name: str  # wire name
    identifier: str  # Python argument name
    annotation: str
    required: bool = True


@dataclass
class BodyBinding:
    """The request body argument of a client method."""

    identifier: str
    annotation: str
    required: bool = True


@dataclass
class ClientOperation:
    """Everything a backend needs to render one client method."""

    method_name: str
    http_method: str
    path: str
    path_params: list[ParameterBinding] = field(default_factory=list)
    query_params: list[ParameterBinding] = field(default_factory=list)
    body: BodyBinding | None = None
    return_annotation: str = "Any"
    summary: str = ""
    operation_id: str | None = None
    tags: list[str] = field(default_factory=list)
    imports: AnnotationImports = field(default_factory=AnnotationImports)

    @property
    def signature(self) -> list[str]:
        """Argument declarations following ``self``."""
        args = [f"{param.identifier}: {param.annotation}" for param in self.path_params]
        if self.body is not None and self.body.required:
            args.append(f"{self.body.identifier}: {self.body.annotation}")
        optional_body = self.body is not None and not self.body.required
        if self.query_params or optional_body:
            args.append("*")
        if optional_body:
            args.append(f"{self.body.identifier}: {self.body.annotation} | None = None")
        for param in self.query_params:
            if param.required:
                args.append(f"{param.identifier}: {param.annotation}")
            else:
                args.append(f"{param.identifier}: {param.annotation} | None = None")
        return args

    @property
    def path_expression(self) -> str:
        """The request path as a Python f-string expression with quoted parameters."""
        identifiers = {param.name: param.identifier for param in self.path_params}
        escaped = self.path.replace("\\", "\\\\").replace('"', '\\"')
        if not identifiers:
            return f'"{escaped}"'
        return 'f"' + _PATH_PARAMETER_PATTERN.sub(lambda m: "{_quote(" + identifiers[m.group(1)] + ")}", escaped) + '"'


class ClientOperationBuilder:
    """Builds ClientOperation bindings for every operation of a document."""

    def __init__(self, document: ApiDocument, analysis: AnalysisResult, emitter: PythonTypeEmitter):
        self.document = document
        self.analysis = analysis
        self.emitter = emitter
        self.resolver = SchemaTypeResolver()

    def build(self) -> list[ClientOperation]:
        """
        Build the client operations, in document order.

        An operation whose binding cannot be built is logged and left out.
        """
        operations: list[ClientOperation] = []
        used_names: set[str] = set()
        for path, method, operation in self.document.iter_operations():
            try:
                operations.append(self._build_operation(path, method, operation, used_names))
            except Exception:
                logger.warning("Skipping client method for %s %s", method.upper(), path, exc_info=True)
        return operations

    def _build_operation(self, path: str, method: str, operation: dict[str, Any], used_names: set[str]) -> ClientOperation:
        """Build a single operation binding."""
        method_name = make_unique(build_method_name(path, method, operation), used_names, separator="_")
        owner = to_pascal_case(method_name)
        imports = AnnotationImports()
        used_args: set[str] = {"self"}

        parameters = self.document.parameters(path, operation)
        path_params = []
        for placeholder in path_placeholders(path):
            declared = next((p for p in parameters if p.get("in") == "path" and p.get("name") == placeholder), None)
            schema = self.document.parameter_schema(declared) if declared else None
            descriptor = self.resolver.resolve_schema(schema, self.analysis.registry, f"#/paths/{path}/{method}/{placeholder}")
            path_params.append(
                ParameterBinding(
                    name=placeholder,
                    identifier=make_unique(to_identifier(placeholder), used_args, separator="_"),
                    annotation=self.emitter.annotation(descriptor, imports, owner, placeholder),
                )
            )

        query_params = []
        for parameter in parameters:
            if parameter.get("in") != "query":
                continue
            descriptor = self.resolver.resolve_schema(
                self.document.parameter_schema(parameter),
                self.analysis.registry,
                f"#/paths/{path}/{method}/{parameter['name']}",
            )
            query_params.append(
                ParameterBinding(
                    name=parameter["name"],
                    identifier=make_unique(to_identifier(parameter["name"]), used_args, separator="_"),
                    annotation=self.emitter.annotation(descriptor, imports, owner, parameter["name"]),
                    required=bool(parameter.get("required")),
                )
            )

        types = self.analysis.operation_types.get(path, {}).get(method)
        request_type = types.request_type if types else None
        response_type = types.response_type if types else None

        body = None
        request_body = self.document.request_body(path, operation)
        if request_body is not None:
            body = BodyBinding(
                identifier=make_unique("body", used_args, separator="_"),
                annotation=self._named_annotation(request_type, imports),
                required=bool(request_body.get("required", True)),
            )

        if response_type is None and method in MUTATING_METHODS:
            response_type = request_type
        if response_type is None and method == "head":
            return_annotation = "None"
        else:
            return_annotation = self._named_annotation(response_type, imports)

        summary = operation.get("summary") or operation.get("description") or f"{method.upper()} {path}"
        tags = [tag for tag in operation.get("tags") or [] if isinstance(tag, str)]
        operation_id = operation.get("operationId") if isinstance(operation.get("operationId"), str) else None

        return ClientOperation(
            method_name=method_name,
            http_method=method,
            path=path,
            path_params=path_params,
            query_params=query_params,
            body=body,
            return_annotation=return_annotation,
            summary=str(summary),
            operation_id=operation_id,
            tags=tags,
            imports=imports,
        )

    def _named_annotation(self, type_name: str | None, imports: AnnotationImports) -> str:
        """Annotation of a named body type, ``Any`` when there is none."""
        if type_name is None:
            imports.typing.add("Any")
            return "Any"
        imports.models.add(type_name)
        return type_name


def build_client_operations(document: ApiDocument, analysis: AnalysisResult, emitter: PythonTypeEmitter) -> list[ClientOperation]:
    """Build the client operations of a document."""
    return ClientOperationBuilder(document, analysis, emitter).build()
