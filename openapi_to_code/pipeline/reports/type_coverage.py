"""
Type-coverage report.

Measures how many type slots of the document resolved to a concrete type,
in total, per location and per operation.
"""

from __future__ import annotations

from typing import Any

from ..analyzer.analyzer import AnalysisResult
from ..document import ApiDocument
from .slots import (
    PATH_PARAMETER,
    QUERY_PARAMETER,
    REQUEST_BODY,
    RESPONSE_BODY,
    TypeSlot,
    collect_type_slots,
    coverage_percentage,
    utc_timestamp,
)


def _metrics(slots: list[TypeSlot]) -> dict[str, Any]:
    total = len(slots)
    typed = sum(1 for slot in slots if slot.is_typed)
    return {
        "total": total,
        "typed": typed,
        "untyped": total - typed,
        "coveragePercentage": coverage_percentage(typed, total),
    }


def _operation_summaries(slots: list[TypeSlot]) -> list[dict[str, Any]]:
    by_operation: dict[tuple[str, str], list[TypeSlot]] = {}
    for slot in slots:
        by_operation.setdefault((slot.method, slot.path), []).append(slot)

    operations = []
    for (method, path), operation_slots in by_operation.items():
        operations.append(
            {
                "path": path,
                "method": method,
                **_metrics(operation_slots),
                "untypedLocations": [slot.location for slot in operation_slots if not slot.is_typed],
            }
        )
    return operations


def create_type_coverage_report(
    document: ApiDocument,
    analysis: AnalysisResult,
    generated_at: str | None = None,
) -> dict[str, Any]:
    """
    Build the type-coverage report of a document.

    Args:
        document: The API document
        analysis: Its analysis result
        generated_at: Timestamp to record (now, by default)

    Returns:
        The report as a JSON-ready dictionary
    """
    slots = collect_type_slots(document, analysis)
    operations = _operation_summaries(slots)
    issues = []
    for slot in slots:
        if slot.is_typed:
            continue
        issue: dict[str, Any] = {"path": slot.path, "method": slot.method, "location": slot.location}
        if slot.field is not None:
            issue["field"] = slot.field
        issue["reason"] = slot.reason or "Type could not be resolved."
        issues.append(issue)

    return {
        "generatedAt": generated_at or utc_timestamp(),
        "totalOperations": len(operations),
        "totals": _metrics(slots),
        "summary": {
            "pathParameters": _metrics([s for s in slots if s.location == PATH_PARAMETER]),
            "queryParameters": _metrics([s for s in slots if s.location == QUERY_PARAMETER]),
            "requestBodies": _metrics([s for s in slots if s.location == REQUEST_BODY]),
            "responseBodies": _metrics([s for s in slots if s.location == RESPONSE_BODY]),
        },
        "operations": operations,
        "issues": issues,
    }
