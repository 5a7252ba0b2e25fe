"""
Schema AST: frozen node variants and the parser that builds them.
"""

from __future__ import annotations

from .nodes import (
    AllOfNode,
    ArrayNode,
    EnumNode,
    ObjectNode,
    PrimitiveNode,
    PropertyDef,
    RefNode,
    SchemaNode,
    UnionNode,
)
from .parser import SchemaParser

__all__ = [
    "AllOfNode",
    "ArrayNode",
    "EnumNode",
    "ObjectNode",
    "PrimitiveNode",
    "PropertyDef",
    "RefNode",
    "SchemaNode",
    "SchemaParser",
    "UnionNode",
]
