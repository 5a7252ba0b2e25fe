"""
Operation type extractor.

Derives the request and response type of every operation. A body schema
that is a plain $ref reuses the referenced name; any other body schema gets
a synthesized declaration named after the operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...log import get_logger
from ...utils import to_pascal_case
from ..document import ApiDocument
from ..schema_ast.parser import SchemaParser
from .descriptors import NamedReference, NamedType, OperationTypeMap, OperationTypes, TypeOrigin
from .name_registry import NameRegistry
from .resolver import SchemaTypeResolver

logger = get_logger(__name__)


def build_inline_base_name(path: str, method: str, operation: dict[str, Any]) -> str:
    """
    Build the base name used for an operation's synthesized types.

    The operationId is used when it yields a name. Otherwise the method is
    followed by the path segments (ignoring ``api``), with path parameters
    folded into ``By<Param>``, e.g. ``GET /api/users/{id}`` -> ``GetUsersById``.

    Args:
        path: The path template
        method: The lower-case HTTP method
        operation: The operation object

    Returns:
        PascalCase base name
    """
    operation_id = operation.get("operationId")
    if isinstance(operation_id, str):
        name = to_pascal_case(operation_id)
        if name:
            return name

    parts = []
    for segment in path.split("/"):
        if not segment or segment == "api":
            continue
        if segment.startswith("{") and segment.endswith("}"):
            parts.append(f"By{to_pascal_case(segment[1:-1])}")
        else:
            parts.append(to_pascal_case(segment))
    return f"{to_pascal_case(method)}{''.join(parts) or 'Api'}"


@dataclass
class ExtractionResult:
    """Output of the operation type extractor."""

    operation_types: OperationTypeMap = field(default_factory=dict)
    named_types: list[NamedType] = field(default_factory=list)


class OperationTypeExtractor:
    """Extracts per-operation request/response types."""

    def __init__(self, resolver: SchemaTypeResolver | None = None):
        self.resolver = resolver or SchemaTypeResolver()
        self.parser = SchemaParser()

    def extract(self, document: ApiDocument, registry: NameRegistry) -> ExtractionResult:
        """
        Extract the operation type map of a document.

        Args:
            document: The API document
            registry: The run's name registry

        Returns:
            The operation type map and the synthesized declarations, in extraction order
        """
        result = ExtractionResult()
        for path, method, operation in document.iter_operations():
            try:
                self._extract_operation(document, path, method, operation, registry, result)
            except Exception:
                logger.warning("Skipping types of %s %s", method.upper(), path, exc_info=True)
        return result

    def _extract_operation(
        self,
        document: ApiDocument,
        path: str,
        method: str,
        operation: dict[str, Any],
        registry: NameRegistry,
        result: ExtractionResult,
    ) -> None:
        """Extract the types of a single operation into ``result``."""
        base_name = build_inline_base_name(path, method, operation)
        source = f"#/paths/{path}/{method}"

        request_type = self._resolve_body_type(
            document.request_schema(path, operation),
            raw_key=f"#inline:{method} {path}:request",
            name=f"{base_name}Request",
            source_path=f"{source}/requestBody",
            registry=registry,
            result=result,
        )
        response_type = self._resolve_body_type(
            document.response_schema(operation),
            raw_key=f"#inline:{method} {path}:response",
            name=f"{base_name}Response",
            source_path=f"{source}/responses",
            registry=registry,
            result=result,
        )

        if request_type is None and response_type is None:
            return
        result.operation_types.setdefault(path, {})[method] = OperationTypes(
            request_type=request_type,
            response_type=response_type,
        )

    def _resolve_body_type(
        self,
        schema: Any,
        raw_key: str,
        name: str,
        source_path: str,
        registry: NameRegistry,
        result: ExtractionResult,
    ) -> str | None:
        """Return the type name of a body schema, synthesizing a declaration when needed."""
        if schema is None:
            return None

        descriptor = self.resolver.resolve(self.parser.parse(schema, source_path), registry)
        if isinstance(descriptor, NamedReference):
            return descriptor.name

        type_name = registry.allocate(raw_key, base=name)
        result.named_types.append(NamedType(type_name, descriptor, TypeOrigin.INLINE_OPERATION_BODY))
        logger.debug("Synthesized %s for %s", type_name, source_path)
        return type_name
