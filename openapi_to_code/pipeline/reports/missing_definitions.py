"""
Missing-definitions report.

Lists every location of the document whose type could not be determined,
with a recommendation on what to add to the document.
"""

from __future__ import annotations

import json
from typing import Any

from ..analyzer.analyzer import AnalysisResult
from ..document import ApiDocument
from .slots import (
    PATH_PARAMETER,
    PATH_PARAMETER_MISSING,
    PATH_PARAMETER_UNRESOLVED,
    QUERY_PARAMETER,
    QUERY_PARAMETER_UNRESOLVED,
    REQUEST_BODY,
    REQUEST_BODY_NO_SCHEMA,
    REQUEST_BODY_UNRESOLVED,
    RESPONSE_MISSING,
    RESPONSE_NO_SCHEMA,
    RESPONSE_UNRESOLVED,
    collect_type_slots,
    utc_timestamp,
)

RECOMMENDATIONS = {
    PATH_PARAMETER_MISSING: "Add a path parameter definition with schema.type or schema.$ref.",
    PATH_PARAMETER_UNRESOLVED: "Define parameter.schema with a primitive type, enum, object, array, or valid $ref.",
    QUERY_PARAMETER_UNRESOLVED: (
        "Define query parameter schema.type, schema.enum, schema.items, anyOf/oneOf/allOf, or schema.$ref."
    ),
    REQUEST_BODY_NO_SCHEMA: "Add requestBody.content['application/json'].schema with type/object/array or $ref.",
    REQUEST_BODY_UNRESOLVED: (
        "Reference a schema with $ref or define a complete inline schema in requestBody.content."
    ),
    RESPONSE_MISSING: "Add a 200/201 (or any 2xx) response with content schema for the HTTP client return type.",
    RESPONSE_NO_SCHEMA: (
        "Add response.content['application/json'].schema using $ref or a fully defined inline schema."
    ),
    RESPONSE_UNRESOLVED: (
        "Use $ref to a schema in components.schemas/definitions or define response schema details explicitly."
    ),
}

SUMMARY_KEYS = {
    PATH_PARAMETER: "pathParameters",
    QUERY_PARAMETER: "queryParameters",
    REQUEST_BODY: "requestBodies",
}


def create_missing_definitions_report(
    document: ApiDocument,
    analysis: AnalysisResult,
    generated_at: str | None = None,
) -> dict[str, Any]:
    """
    Build the missing-definitions report of a document.

    Args:
        document: The API document
        analysis: Its analysis result
        generated_at: Timestamp to record (now, by default)

    Returns:
        The report as a JSON-ready dictionary
    """
    issues: list[dict[str, Any]] = []
    summary = {"pathParameters": 0, "queryParameters": 0, "requestBodies": 0, "responseBodies": 0}

    for slot in collect_type_slots(document, analysis):
        if slot.is_typed:
            continue
        issue: dict[str, Any] = {"path": slot.path, "method": slot.method, "location": slot.location}
        if slot.field is not None:
            issue["field"] = slot.field
        issue["reason"] = slot.reason
        issue["recommendedDefinition"] = RECOMMENDATIONS[slot.reason]
        issues.append(issue)
        summary[SUMMARY_KEYS.get(slot.location, "responseBodies")] += 1

    return {
        "generatedAt": generated_at or utc_timestamp(),
        "totalIssues": len(issues),
        "summary": summary,
        "issues": issues,
    }


def render_report(report: dict[str, Any]) -> str:
    """Serialize a report as indented JSON with a trailing newline."""
    return json.dumps(report, indent=2, ensure_ascii=False) + "\n"
