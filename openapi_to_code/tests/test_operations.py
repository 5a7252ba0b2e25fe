"""
Tests for client operation bindings.
"""

from __future__ import annotations

import pytest

from conftest import json_body, json_response, make_document

from openapi_to_code.pipeline.analyzer import DocumentAnalyzer
from openapi_to_code.pipeline.emitters import (
    PythonTypeEmitter,
    build_client_operations,
    build_method_name,
    path_placeholders,
)


def build(document):
    analysis = DocumentAnalyzer().analyze(document)
    return build_client_operations(document, analysis, PythonTypeEmitter(analysis.registry, analysis.named_types))


@pytest.fixture
def petstore_operations(petstore, petstore_analysis):
    emitter = PythonTypeEmitter(petstore_analysis.registry, petstore_analysis.named_types)
    return {op.method_name: op for op in build_client_operations(petstore, petstore_analysis, emitter)}


class TestMethodNames:
    """Tests for build_method_name and path_placeholders"""

    def test_operation_id(self):
        assert build_method_name("/pets", "get", {"operationId": "listPets"}) == "list_pets"
        assert build_method_name("/x", "get", {"operationId": "import"}) == "import_"

    def test_derived_from_path(self):
        assert build_method_name("/api/users/{userId}", "delete", {}) == "delete_users_by_user_id"

    def test_path_placeholders(self):
        assert path_placeholders("/a/{x}/b/{y_z}") == ["x", "y_z"]
        assert path_placeholders("/a") == []


class TestPetstoreOperations:
    """Tests for the petstore bindings"""

    def test_method_names(self, petstore_operations):
        assert list(petstore_operations) == [
            "list_pets",
            "create_pet",
            "show_pet_by_id",
            "delete_pet",
            "get_stores_by_store_id_inventory",
        ]

    def test_query_parameters(self, petstore_operations):
        op = petstore_operations["list_pets"]
        assert op.signature == [
            "*",
            "limit: float | None = None",
            'status: Literal["available", "sold"] | None = None',
        ]
        assert op.return_annotation == "ListPetsResponse"
        assert op.imports.typing == {"Literal"}
        assert op.imports.models == {"ListPetsResponse"}

    def test_body_and_response(self, petstore_operations):
        op = petstore_operations["create_pet"]
        assert op.signature == ["body: NewPet"]
        assert op.return_annotation == "Pet"
        assert op.summary == "Create a pet"
        assert op.tags == ["pets"]

    def test_path_parameter(self, petstore_operations):
        op = petstore_operations["show_pet_by_id"]
        assert op.signature == ["pet_id: str"]
        assert op.path_expression == 'f"/pets/{_quote(pet_id)}"'

    def test_untyped_response(self, petstore_operations):
        op = petstore_operations["delete_pet"]
        assert op.return_annotation == "Any"
        assert op.summary == "DELETE /pets/{petId}"

    def test_undeclared_path_parameter(self, petstore_operations):
        op = petstore_operations["get_stores_by_store_id_inventory"]
        assert op.signature == ["store_id: Any"]
        assert op.operation_id is None

    def test_static_path_expression(self, petstore_operations):
        assert petstore_operations["list_pets"].path_expression == '"/pets"'


class TestBindings:
    """Tests for edge cases of the bindings"""

    def test_duplicate_method_names(self):
        document = make_document(
            paths={
                "/a": {"get": {"operationId": "fetch", "responses": {}}},
                "/b": {"get": {"operationId": "fetch", "responses": {}}},
            }
        )
        assert [op.method_name for op in build(document)] == ["fetch", "fetch_2"]

    def test_optional_body_and_required_query(self):
        document = make_document(
            paths={
                "/search": {
                    "post": {
                        "parameters": [{"name": "q", "in": "query", "required": True, "schema": {"type": "string"}}],
                        "requestBody": json_body({"type": "object", "properties": {"x": {"type": "string"}}}, required=False),
                        "responses": {"204": {"description": "done"}},
                    }
                }
            }
        )
        (op,) = build(document)
        assert op.signature == ["*", "body: PostSearchRequest | None = None", "q: str"]
        # untyped response of a mutating method falls back to the request type
        assert op.return_annotation == "PostSearchRequest"

    def test_argument_names_do_not_collide(self):
        document = make_document(
            paths={
                "/things/{body}": {
                    "put": {
                        "parameters": [
                            {"name": "body", "in": "path", "required": True, "schema": {"type": "string"}},
                            {"name": "self", "in": "query", "schema": {"type": "boolean"}},
                        ],
                        "requestBody": json_body({"$ref": "#/components/schemas/Thing"}),
                        "responses": json_response({"$ref": "#/components/schemas/Thing"}),
                    }
                }
            },
            schemas={"Thing": {"properties": {"id": {"type": "string"}}}},
        )
        (op,) = build(document)
        assert op.signature == ["body: str", "body_2: Thing", "*", "self_2: bool | None = None"]
        assert op.path_expression == 'f"/things/{_quote(body)}"'

    def test_head_without_response_returns_none(self, swagger2, swagger2_analysis):
        emitter = PythonTypeEmitter(swagger2_analysis.registry, swagger2_analysis.named_types)
        operations = {op.method_name: op for op in build_client_operations(swagger2, swagger2_analysis, emitter)}
        assert operations["check_health"].return_annotation == "None"
        assert operations["post_users"].signature == ["body: User"]
        assert operations["post_users"].return_annotation == "User"
        assert operations["get_users"].signature == ["*", "page: float | None = None", "filter: Any | None = None"]

    def test_inline_parameter_object_is_hoisted(self):
        document = make_document(
            paths={
                "/q": {
                    "get": {
                        "operationId": "query",
                        "parameters": [
                            {"name": "range", "in": "query", "schema": {"properties": {"from": {"type": "integer"}}}}
                        ],
                        "responses": {},
                    }
                }
            }
        )
        analysis = DocumentAnalyzer().analyze(document)
        emitter = PythonTypeEmitter(analysis.registry, analysis.named_types)
        (op,) = build_client_operations(document, analysis, emitter)
        assert op.signature == ["*", "range: QueryRange | None = None"]
        assert emitter.pop_pending()[0][0] == "QueryRange"
