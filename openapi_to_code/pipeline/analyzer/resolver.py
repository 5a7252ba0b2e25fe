"""
Schema type resolver.

Phase 2 of the pipeline: turn a schema AST node into a type descriptor.
Resolution never raises. Missing or malformed fragments resolve to UNKNOWN,
which the emitters render as ``Any`` and the reports count as untyped.
"""

from __future__ import annotations

import json
from typing import Any

from ...log import get_logger
from ..schema_ast.nodes import (
    AllOfNode,
    ArrayNode,
    EnumNode,
    ObjectNode,
    PrimitiveNode,
    RefNode,
    SchemaNode,
    UnionNode,
)
from ..schema_ast.parser import SchemaParser
from .descriptors import (
    BOOLEAN,
    NULL,
    NUMBER,
    STRING,
    UNKNOWN,
    ArrayType,
    EnumLiteral,
    FieldType,
    IntersectionType,
    NamedReference,
    ObjectLiteral,
    TypeDescriptor,
    UnionType,
)
from .name_registry import NameRegistry, ref_target

logger = get_logger(__name__)

# Primitive type names and the scalar they map to
PRIMITIVE_TYPES: dict[str, TypeDescriptor] = {
    "string": STRING,
    "number": NUMBER,
    "integer": NUMBER,
    "boolean": BOOLEAN,
    "null": NULL,
}

# String formats that carry a non-string value
NUMERIC_STRING_FORMATS = {"numeric"}


def render_literal(value: Any) -> str | None:
    """
    Render an enum value as a Python literal token.

    Args:
        value: A JSON enum value

    Returns:
        The literal token, or None for values a Literal cannot hold
    """
    if value is None:
        return "None"
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, str):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return repr(value)
    return None


class SchemaTypeResolver:
    """Resolves schema nodes into type descriptors."""

    def resolve(self, node: SchemaNode | None, registry: NameRegistry) -> TypeDescriptor:
        """
        Resolve a schema node.

        Args:
            node: The parsed node, or None for an absent schema
            registry: The run's name registry, used for $ref targets

        Returns:
            The type descriptor, UNKNOWN when the node cannot be resolved
        """
        if node is None:
            return UNKNOWN
        try:
            descriptor = self._resolve_node(node, registry)
        except Exception:
            logger.warning("Failed to resolve schema at %s", node.source_path or "#", exc_info=True)
            return UNKNOWN

        if node.nullable and descriptor is not UNKNOWN and not isinstance(node, RefNode):
            return self._make_union([descriptor, NULL])
        return descriptor

    def resolve_schema(self, schema: Any, registry: NameRegistry, path: str = "#") -> TypeDescriptor:
        """Parse and resolve a raw schema fragment."""
        return self.resolve(SchemaParser().parse(schema, path), registry)

    def _resolve_node(self, node: SchemaNode, registry: NameRegistry) -> TypeDescriptor:
        """Dispatch on the node variant."""
        match node:
            case RefNode():
                return NamedReference(registry.resolve(ref_target(node.ref_path)))
            case EnumNode():
                return self._resolve_enum(node)
            case UnionNode():
                return self._make_union([self.resolve(variant, registry) for variant in node.variants])
            case AllOfNode():
                return self._resolve_all_of(node, registry)
            case ArrayNode():
                if node.items is None:
                    return UNKNOWN
                return ArrayType(self.resolve(node.items, registry))
            case ObjectNode():
                return self._resolve_object(node, registry)
            case PrimitiveNode():
                return self._resolve_primitive(node)
            case _:
                logger.warning("Unsupported schema node %s at %s", type(node).__name__, node.source_path)
                return UNKNOWN

    def _resolve_enum(self, node: EnumNode) -> TypeDescriptor:
        """Resolve an enum to a literal set."""
        tokens: list[str] = []
        for value in node.values:
            token = render_literal(value)
            if token is None:
                logger.warning("Skipping non-scalar enum value %r at %s", value, node.source_path)
                continue
            if token not in tokens:
                tokens.append(token)
        if not tokens:
            return UNKNOWN
        return EnumLiteral(tuple(tokens))

    def _resolve_all_of(self, node: AllOfNode, registry: NameRegistry) -> TypeDescriptor:
        """Resolve allOf, merging object literals into one shape when possible."""
        variants: list[TypeDescriptor] = []
        for variant in node.variants:
            descriptor = self.resolve(variant, registry)
            parts = descriptor.variants if isinstance(descriptor, IntersectionType) else (descriptor,)
            for part in parts:
                if part not in variants:
                    variants.append(part)

        if not variants:
            return UNKNOWN
        if len(variants) == 1:
            return variants[0]
        if all(isinstance(variant, ObjectLiteral) for variant in variants):
            return self._merge_objects(variants)
        return IntersectionType(tuple(variants))

    def _merge_objects(self, objects: list[ObjectLiteral]) -> ObjectLiteral:
        """Merge object literals: later fields win, a field is required if any part requires it."""
        merged: dict[str, FieldType] = {}
        for obj in objects:
            for field in obj.fields:
                previous = merged.get(field.name)
                required = field.required or (previous is not None and previous.required)
                merged[field.name] = FieldType(field.name, field.descriptor, required)
        return ObjectLiteral(tuple(merged.values()))

    def _resolve_object(self, node: ObjectNode, registry: NameRegistry) -> ObjectLiteral:
        """
        Resolve an object with properties.

        A present, non-empty required list marks only the listed properties
        as required. An absent or empty list marks every property required.
        """
        explicit_required = set(node.required) if node.required else None
        fields = tuple(
            FieldType(
                name=prop.name,
                descriptor=self.resolve(prop.type_node, registry),
                required=explicit_required is None or prop.name in explicit_required,
            )
            for prop in node.properties
        )
        return ObjectLiteral(fields)

    def _resolve_primitive(self, node: PrimitiveNode) -> TypeDescriptor:
        """Resolve a primitive type name."""
        if node.type_name == "string" and node.format in NUMERIC_STRING_FORMATS:
            return NUMBER
        return PRIMITIVE_TYPES.get(node.type_name, UNKNOWN)

    def _make_union(self, descriptors: list[TypeDescriptor]) -> TypeDescriptor:
        """
        Build a flat, duplicate-free union.

        Unknown variants are kept, so a union with an untyped member stays open.
        Only a union of nothing but unknowns collapses to UNKNOWN.
        """
        variants: list[TypeDescriptor] = []
        for descriptor in descriptors:
            parts = descriptor.variants if isinstance(descriptor, UnionType) else (descriptor,)
            for part in parts:
                if part not in variants:
                    variants.append(part)

        if not variants:
            return UNKNOWN
        if len(variants) == 1:
            return variants[0]
        return UnionType(tuple(variants))
