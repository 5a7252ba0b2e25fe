"""
Emitters: render analysis results as Python source.
"""

from __future__ import annotations

from .base import create_environment
from .operations import (
    BodyBinding,
    ClientOperation,
    ClientOperationBuilder,
    ParameterBinding,
    build_client_operations,
    build_method_name,
    path_placeholders,
)
from .python_emitter import (
    AnnotationImports,
    Declaration,
    FieldDecl,
    ModelsEmitter,
    PythonTypeEmitter,
    order_declarations,
)

__all__ = [
    "AnnotationImports",
    "BodyBinding",
    "ClientOperation",
    "ClientOperationBuilder",
    "Declaration",
    "FieldDecl",
    "ModelsEmitter",
    "ParameterBinding",
    "PythonTypeEmitter",
    "build_client_operations",
    "build_method_name",
    "create_environment",
    "order_declarations",
    "path_placeholders",
]
