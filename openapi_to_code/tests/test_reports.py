"""
Tests for the missing-definitions and type-coverage reports.
"""

from __future__ import annotations

import json

from conftest import json_body, make_document

from openapi_to_code.pipeline.analyzer import DocumentAnalyzer
from openapi_to_code.pipeline.reports import (
    collect_type_slots,
    coverage_percentage,
    create_missing_definitions_report,
    create_type_coverage_report,
    render_report,
)
from openapi_to_code.pipeline.reports.slots import (
    PATH_PARAMETER_MISSING,
    REQUEST_BODY_NO_SCHEMA,
    RESPONSE_MISSING,
    RESPONSE_NO_SCHEMA,
    utc_timestamp,
)

TIMESTAMP = "2024-01-01T00:00:00.000Z"


class TestTypeSlots:
    """Tests for slot collection"""

    def test_petstore_slots(self, petstore, petstore_analysis):
        slots = collect_type_slots(petstore, petstore_analysis)
        assert len(slots) == 11
        assert [(s.method, s.location, s.field) for s in slots if not s.is_typed] == [
            ("DELETE", "response.body", None),
            ("GET", "path.parameter", "storeId"),
        ]

    def test_coverage_percentage(self):
        assert coverage_percentage(9, 11) == 81.82
        assert coverage_percentage(0, 0) == 100
        assert coverage_percentage(1, 3) == 33.33

    def test_timestamp_format(self):
        stamp = utc_timestamp()
        assert stamp.endswith("Z")
        assert len(stamp) == len(TIMESTAMP)


class TestMissingDefinitionsReport:
    """Tests for create_missing_definitions_report"""

    def test_petstore(self, petstore, petstore_analysis):
        report = create_missing_definitions_report(petstore, petstore_analysis, TIMESTAMP)
        assert report["generatedAt"] == TIMESTAMP
        assert report["totalIssues"] == 2
        assert report["summary"] == {"pathParameters": 1, "queryParameters": 0, "requestBodies": 0, "responseBodies": 1}
        assert report["issues"][0] == {
            "path": "/pets/{petId}",
            "method": "DELETE",
            "location": "response.body",
            "reason": RESPONSE_NO_SCHEMA,
            "recommendedDefinition": (
                "Add response.content['application/json'].schema using $ref or a fully defined inline schema."
            ),
        }
        assert report["issues"][1]["field"] == "storeId"
        assert report["issues"][1]["reason"] == PATH_PARAMETER_MISSING

    def test_missing_response_and_body_schema(self):
        document = make_document(
            paths={"/upload": {"put": {"requestBody": {"content": {"application/octet-stream": {}}}, "responses": {"400": {}}}}}
        )
        analysis = DocumentAnalyzer().analyze(document)
        report = create_missing_definitions_report(document, analysis, TIMESTAMP)
        assert [issue["reason"] for issue in report["issues"]] == [REQUEST_BODY_NO_SCHEMA, RESPONSE_MISSING]

    def test_mutation_response_falls_back_to_request(self):
        document = make_document(
            paths={"/widgets": {"post": {"requestBody": json_body({"$ref": "#/components/schemas/W"}), "responses": {"204": {}}}}},
            schemas={"W": {"properties": {"id": {"type": "string"}}}},
        )
        analysis = DocumentAnalyzer().analyze(document)
        assert create_missing_definitions_report(document, analysis, TIMESTAMP)["totalIssues"] == 0

    def test_render_report(self):
        text = render_report({"a": "é"})
        assert text == '{\n  "a": "é"\n}\n'
        assert json.loads(text) == {"a": "é"}


class TestTypeCoverageReport:
    """Tests for create_type_coverage_report"""

    def test_petstore_totals(self, petstore, petstore_analysis):
        report = create_type_coverage_report(petstore, petstore_analysis, TIMESTAMP)
        assert report["totalOperations"] == 5
        assert report["totals"] == {"total": 11, "typed": 9, "untyped": 2, "coveragePercentage": 81.82}
        assert report["summary"]["queryParameters"]["coveragePercentage"] == 100
        assert report["summary"]["requestBodies"] == {"total": 1, "typed": 1, "untyped": 0, "coveragePercentage": 100}
        assert report["summary"]["responseBodies"]["untyped"] == 1

    def test_petstore_operations(self, petstore, petstore_analysis):
        operations = create_type_coverage_report(petstore, petstore_analysis, TIMESTAMP)["operations"]
        delete = next(op for op in operations if op["method"] == "DELETE")
        assert delete == {
            "path": "/pets/{petId}",
            "method": "DELETE",
            "total": 2,
            "typed": 1,
            "untyped": 1,
            "coveragePercentage": 50.0,
            "untypedLocations": ["response.body"],
        }

    def test_swagger2(self, swagger2, swagger2_analysis):
        report = create_type_coverage_report(swagger2, swagger2_analysis, TIMESTAMP)
        assert report["totals"]["total"] == 8
        assert report["totals"]["typed"] == 6
        assert report["totals"]["coveragePercentage"] == 75.0
        assert {(issue["method"], issue["location"]) for issue in report["issues"]} == {
            ("GET", "query.parameter"),
            ("HEAD", "response.body"),
        }

    def test_empty_document(self):
        document = make_document(schemas={"A": {"type": "string"}})
        report = create_type_coverage_report(document, DocumentAnalyzer().analyze(document), TIMESTAMP)
        assert report["totalOperations"] == 0
        assert report["totals"]["coveragePercentage"] == 100
