"""
AST (Abstract Syntax Tree) node definitions for OpenAPI schema objects.

These nodes represent the parsed structure of a schema fragment before any
reference resolution or language-specific processing. Every node is frozen:
the resolver only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SchemaNode:
    """Base class for all AST nodes."""

    # Original source location in the document (for log messages)
    source_path: str = ""

    # nullable: true, x-nullable: true, or "null" in an OpenAPI 3.1 type list
    nullable: bool = False


@dataclass(frozen=True)
class RefNode(SchemaNode):
    """Represents a $ref (unresolved reference)."""

    ref_path: str = ""  # e.g., "#/components/schemas/Pet"


@dataclass(frozen=True)
class EnumNode(SchemaNode):
    """Represents an enum of literal values."""

    values: tuple[Any, ...] = ()


@dataclass(frozen=True)
class UnionNode(SchemaNode):
    """Represents a oneOf or anyOf union type."""

    variants: tuple[SchemaNode | None, ...] = ()
    union_type: str = "oneOf"  # "oneOf" or "anyOf"


@dataclass(frozen=True)
class AllOfNode(SchemaNode):
    """Represents an allOf composition."""

    variants: tuple[SchemaNode | None, ...] = ()


@dataclass(frozen=True)
class ArrayNode(SchemaNode):
    """Represents an array type. ``items`` is None when the schema declares none."""

    items: SchemaNode | None = None


@dataclass(frozen=True)
class PropertyDef:
    """Represents a property in an object."""

    name: str
    type_node: SchemaNode | None = None


@dataclass(frozen=True)
class ObjectNode(SchemaNode):
    """Represents an object type with properties."""

    properties: tuple[PropertyDef, ...] = ()

    # None when the schema has no "required" key
    required: tuple[str, ...] | None = None


@dataclass(frozen=True)
class PrimitiveNode(SchemaNode):
    """Represents a primitive type, or an untyped fragment when type_name is empty."""

    type_name: str = ""  # "string", "integer", "number", "boolean", "null", "object", "array"
    format: str | None = None
