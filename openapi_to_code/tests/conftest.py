"""Shared fixtures for the openapi_to_code tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from openapi_to_code.pipeline.analyzer import DocumentAnalyzer, NameRegistry
from openapi_to_code.pipeline.document import ApiDocument, load_document

TEST_DATA = Path(__file__).parent / "test_data"
PETSTORE_PATH = TEST_DATA / "petstore.yaml"
SWAGGER2_PATH = TEST_DATA / "swagger2.json"


@pytest.fixture
def petstore_raw():
    """The raw petstore document."""
    return load_document(PETSTORE_PATH)


@pytest.fixture
def petstore(petstore_raw):
    return ApiDocument(petstore_raw)


@pytest.fixture
def petstore_analysis(petstore):
    return DocumentAnalyzer().analyze(petstore, NameRegistry())


@pytest.fixture
def swagger2():
    return ApiDocument(load_document(SWAGGER2_PATH))


@pytest.fixture
def swagger2_analysis(swagger2):
    return DocumentAnalyzer().analyze(swagger2, NameRegistry())


def make_document(paths=None, schemas=None, title="Test API", version="1.0.0"):
    """Build a minimal OpenAPI 3 document."""
    document = {"openapi": "3.0.0", "info": {"title": title, "version": version}, "paths": paths or {}}
    if schemas is not None:
        document["components"] = {"schemas": schemas}
    return ApiDocument(document)


def json_response(schema):
    """A 200 response object with a JSON schema."""
    return {"200": {"description": "OK", "content": {"application/json": {"schema": schema}}}}


def json_body(schema, required=True):
    """A request body object with a JSON schema."""
    return {"required": required, "content": {"application/json": {"schema": schema}}}
