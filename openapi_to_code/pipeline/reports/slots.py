"""
Type slots: every place of an operation that should carry a type.

A slot is a path parameter, a query parameter, the request body or the
success response body. Both reports are built from the same slot list.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..analyzer.analyzer import AnalysisResult
from ..analyzer.descriptors import TypeOrigin, contains_unknown
from ..analyzer.resolver import SchemaTypeResolver
from ..document import MUTATING_METHODS, ApiDocument
from ..emitters.operations import path_placeholders

PATH_PARAMETER = "path.parameter"
QUERY_PARAMETER = "query.parameter"
REQUEST_BODY = "request.body"
RESPONSE_BODY = "response.body"

PATH_PARAMETER_MISSING = "Path parameter is missing from operation.parameters."
PATH_PARAMETER_UNRESOLVED = "Path parameter schema is missing or unresolved."
QUERY_PARAMETER_UNRESOLVED = "Query parameter schema is missing or unresolved."
REQUEST_BODY_NO_SCHEMA = "Request body exists but no schema was documented in content."
REQUEST_BODY_UNRESOLVED = "Request body schema could not be resolved to a concrete model type."
RESPONSE_MISSING = "No 2xx success response is documented for this operation."
RESPONSE_NO_SCHEMA = "Success response exists but no response schema was documented in content."
RESPONSE_UNRESOLVED = "Response schema could not be resolved to a concrete model type."


@dataclass(frozen=True)
class TypeSlot:
    """One typed-or-not location of an operation."""

    path: str
    method: str  # upper-case
    location: str
    is_typed: bool
    field: str | None = None
    reason: str | None = None


def utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision, e.g. 2024-01-01T00:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def coverage_percentage(typed: int, total: int) -> float:
    """Typed share in percent, rounded to two decimals; 100 for an empty set."""
    if total == 0:
        return 100
    return round(typed / total * 100, 2)


class TypeSlotCollector:
    """Collects the type slots of every operation of a document."""

    def __init__(self, document: ApiDocument, analysis: AnalysisResult):
        self.document = document
        self.analysis = analysis
        self.resolver = SchemaTypeResolver()

    def collect(self) -> list[TypeSlot]:
        """Return the slots of all operations, in document order."""
        slots: list[TypeSlot] = []
        for path, method, operation in self.document.iter_operations():
            slots.extend(self._parameter_slots(path, method, operation))
            request_slot = self._request_slot(path, method, operation)
            if request_slot is not None:
                slots.append(request_slot)
            slots.append(self._response_slot(path, method, operation))
        return slots

    def _schema_is_typed(self, schema: Any, path: str) -> bool:
        return not contains_unknown(self.resolver.resolve_schema(schema, self.analysis.registry, path))

    def _name_is_typed(self, type_name: str | None) -> bool:
        """A named type is typed unless it is declared as an unknown shape."""
        if type_name is None:
            return False
        named = self.analysis.named_type(type_name)
        # A reference names its type even when the document lacks the schema
        if named is None or named.origin is TypeOrigin.UNRESOLVED_REFERENCE:
            return True
        return not contains_unknown(named.descriptor)

    def _parameter_slots(self, path: str, method: str, operation: dict[str, Any]) -> list[TypeSlot]:
        slots: list[TypeSlot] = []
        upper = method.upper()
        parameters = self.document.parameters(path, operation)

        for placeholder in path_placeholders(path):
            declared = next((p for p in parameters if p.get("in") == "path" and p.get("name") == placeholder), None)
            if declared is None:
                slots.append(TypeSlot(path, upper, PATH_PARAMETER, False, placeholder, PATH_PARAMETER_MISSING))
                continue
            is_typed = self._schema_is_typed(self.document.parameter_schema(declared), f"#/paths/{path}/{method}/{placeholder}")
            slots.append(
                TypeSlot(path, upper, PATH_PARAMETER, is_typed, placeholder, None if is_typed else PATH_PARAMETER_UNRESOLVED)
            )

        for parameter in parameters:
            if parameter.get("in") != "query":
                continue
            name = parameter["name"]
            is_typed = self._schema_is_typed(self.document.parameter_schema(parameter), f"#/paths/{path}/{method}/{name}")
            slots.append(TypeSlot(path, upper, QUERY_PARAMETER, is_typed, name, None if is_typed else QUERY_PARAMETER_UNRESOLVED))

        return slots

    def _types(self, path: str, method: str):
        return self.analysis.operation_types.get(path, {}).get(method)

    def _request_slot(self, path: str, method: str, operation: dict[str, Any]) -> TypeSlot | None:
        if self.document.request_body(path, operation) is None:
            return None
        types = self._types(path, method)
        is_typed = self._name_is_typed(types.request_type if types else None)
        reason = None
        if not is_typed:
            has_schema = self.document.request_schema(path, operation) is not None
            reason = REQUEST_BODY_UNRESOLVED if has_schema else REQUEST_BODY_NO_SCHEMA
        return TypeSlot(path, method.upper(), REQUEST_BODY, is_typed, reason=reason)

    def _response_slot(self, path: str, method: str, operation: dict[str, Any]) -> TypeSlot:
        types = self._types(path, method)
        is_typed = self._name_is_typed(types.response_type if types else None)
        if not is_typed and method in MUTATING_METHODS:
            # An untyped mutation response is taken to echo the request type
            is_typed = self._name_is_typed(types.request_type if types else None)

        reason = None
        if not is_typed:
            if self.document.success_response(operation) is None:
                reason = RESPONSE_MISSING
            elif self.document.response_schema(operation) is None:
                reason = RESPONSE_NO_SCHEMA
            else:
                reason = RESPONSE_UNRESOLVED
        return TypeSlot(path, method.upper(), RESPONSE_BODY, is_typed, reason=reason)


def collect_type_slots(document: ApiDocument, analysis: AnalysisResult) -> list[TypeSlot]:
    """Collect the type slots of a document."""
    return TypeSlotCollector(document, analysis).collect()
