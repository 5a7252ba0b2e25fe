"""
Pipeline - OpenAPI document to typed Python code generator.

This module provides a multi-phase architecture for generating code from
OpenAPI 3.x and Swagger 2.0 documents:

1. Phase 1 (Parser): Parse each schema fragment into a Schema AST
2. Phase 2 (Analyzer): Resolve the AST into type descriptors and named types
3. Phase 3 (Emitters): Render descriptors as Python models and client signatures
4. Phase 4 (Plugins): Render clients, services and reports per backend
5. Phase 5 (Formatter): Optional post-processing (ruff or black)
6. Phase 6 (Writer): Validate and write every file atomically
"""

from __future__ import annotations

from .config import CodeGeneratorConfig, FormatterConfig, OutputConfig
from .document import ApiDocument, load_document
from .generator import GenerationResult, PipelineGenerator
from .writer import AtomicWriter, OutputWriter

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
