"""OpenAPI to Code Generator

A Python package for generating typed Python code from OpenAPI 3.x and
Swagger 2.0 documents: TypedDict models, HTTP clients, a FastAPI service,
an MCP tool server, and typing-quality reports.
"""

__version__ = "0.3.0"

from .pipeline import (
    ApiDocument,
    AtomicWriter,
    CodeGeneratorConfig,
    FormatterConfig,
    GenerationResult,
    OutputConfig,
    OutputWriter,
    PipelineGenerator,
    load_document,
)

__all__ = [
    "PipelineGenerator",
    "GenerationResult",
    "CodeGeneratorConfig",
    "FormatterConfig",
    "OutputConfig",
    "ApiDocument",
    "load_document",
    "AtomicWriter",
    "OutputWriter",
]
