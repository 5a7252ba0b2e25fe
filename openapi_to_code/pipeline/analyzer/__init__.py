"""
Analysis phase: schema resolution, naming and operation type extraction.
"""

from __future__ import annotations

from .analyzer import AnalysisResult, DocumentAnalyzer
from .descriptors import (
    UNKNOWN,
    ArrayType,
    EnumLiteral,
    FieldType,
    IntersectionType,
    NamedReference,
    NamedType,
    ObjectLiteral,
    OperationTypeMap,
    OperationTypes,
    Scalar,
    ScalarKind,
    TypeDescriptor,
    TypeOrigin,
    UnionType,
    contains_unknown,
)
from .extractor import OperationTypeExtractor, build_inline_base_name
from .name_registry import NameRegistry, ref_target
from .resolver import SchemaTypeResolver

__all__ = [
    "UNKNOWN",
    "AnalysisResult",
    "ArrayType",
    "DocumentAnalyzer",
    "EnumLiteral",
    "FieldType",
    "IntersectionType",
    "NameRegistry",
    "NamedReference",
    "NamedType",
    "ObjectLiteral",
    "OperationTypeExtractor",
    "OperationTypeMap",
    "OperationTypes",
    "Scalar",
    "ScalarKind",
    "SchemaTypeResolver",
    "TypeDescriptor",
    "TypeOrigin",
    "UnionType",
    "build_inline_base_name",
    "contains_unknown",
    "ref_target",
]
