"""
OpenAPI schema parser that builds an AST.

Phase 1 of the pipeline: parse raw schema dictionaries into frozen nodes
without resolving references. Malformed fragments never raise: they parse
to None or to an untyped PrimitiveNode and a warning is logged.
"""

from __future__ import annotations

from typing import Any

from ...log import get_logger
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

logger = get_logger(__name__)


class SchemaParser:
    """Parses OpenAPI / Swagger schema objects into an AST."""

    def parse(self, schema: Any, path: str = "#") -> SchemaNode | None:
        """
        Parse a schema fragment.

        Args:
            schema: The raw schema (normally a dictionary)
            path: Location of the fragment in the document (for log messages)

        Returns:
            The parsed node, or None when there is no schema at all
        """
        if schema is None:
            return None
        if not isinstance(schema, dict):
            logger.warning("Ignoring malformed schema at %s: expected an object, got %s", path, type(schema).__name__)
            return None
        return self._parse_schema_node(schema, path)

    def _parse_schema_node(self, schema: dict[str, Any], path: str) -> SchemaNode:
        """
        Parse a schema node recursively.

        The order of checks matches the resolution order: $ref, enum,
        anyOf/oneOf, allOf, then type-based parsing.
        """
        nullable = schema.get("nullable") is True or schema.get("x-nullable") is True

        # Handle OpenAPI 3.1 type lists, e.g. ["string", "null"]
        type_value = schema.get("type")
        if isinstance(type_value, list):
            if "null" in type_value:
                nullable = True
            remaining = [t for t in type_value if t != "null"]
            if len(remaining) > 1 and not self._has_composition(schema):
                variants = tuple(self._parse_schema_node({**schema, "type": t}, f"{path}/type/{t}") for t in remaining)
                return UnionNode(variants=variants, union_type="anyOf", source_path=path, nullable=nullable)
            schema = {**schema, "type": remaining[0] if remaining else "null"}

        # Handle $ref
        ref = schema.get("$ref")
        if isinstance(ref, str):
            return RefNode(ref_path=ref, source_path=path, nullable=nullable)

        # Handle enum
        if "enum" in schema:
            if isinstance(schema["enum"], list):
                return EnumNode(values=tuple(schema["enum"]), source_path=path, nullable=nullable)
            logger.warning("Ignoring malformed enum at %s: expected a list", path)

        # Handle oneOf/anyOf
        for union_type in ("anyOf", "oneOf"):
            if union_type in schema:
                variants = self._parse_variants(schema[union_type], f"{path}/{union_type}")
                if variants is not None:
                    return UnionNode(variants=variants, union_type=union_type, source_path=path, nullable=nullable)

        # Handle allOf
        if "allOf" in schema:
            variants = self._parse_variants(schema["allOf"], f"{path}/allOf")
            if variants is not None:
                return AllOfNode(variants=variants, source_path=path, nullable=nullable)

        type_name = schema.get("type")

        if type_name == "array":
            items = self.parse(schema.get("items"), f"{path}/items")
            return ArrayNode(items=items, source_path=path, nullable=nullable)

        # Handle object with properties, with or without an explicit type
        if type_name in (None, "object") and "properties" in schema:
            return self._parse_object_node(schema, path, nullable)

        if type_name is not None and not isinstance(type_name, str):
            logger.warning("Ignoring malformed type at %s: %r", path, type_name)
            type_name = None

        fmt = schema.get("format")
        return PrimitiveNode(
            type_name=type_name or "",
            format=fmt if isinstance(fmt, str) else None,
            source_path=path,
            nullable=nullable,
        )

    def _has_composition(self, schema: dict[str, Any]) -> bool:
        """Check if the schema carries keys that take precedence over its type."""
        return any(key in schema for key in ("$ref", "enum", "anyOf", "oneOf", "allOf"))

    def _parse_variants(self, raw_variants: Any, path: str) -> tuple[SchemaNode | None, ...] | None:
        """Parse the variant list of a composition keyword, None when it is not a list."""
        if not isinstance(raw_variants, list):
            logger.warning("Ignoring malformed composition at %s: expected a list", path)
            return None
        return tuple(self.parse(variant, f"{path}/{index}") for index, variant in enumerate(raw_variants))

    def _parse_object_node(self, schema: dict[str, Any], path: str, nullable: bool) -> ObjectNode:
        """Parse an object node."""
        raw_properties = schema.get("properties")
        properties: list[PropertyDef] = []
        if isinstance(raw_properties, dict):
            for name, prop_schema in raw_properties.items():
                properties.append(PropertyDef(name=str(name), type_node=self.parse(prop_schema, f"{path}/properties/{name}")))
        else:
            logger.warning("Ignoring malformed properties at %s: expected an object", path)

        raw_required = schema.get("required")
        required: tuple[str, ...] | None = None
        if isinstance(raw_required, list):
            required = tuple(name for name in raw_required if isinstance(name, str))
        elif raw_required is not None:
            logger.warning("Ignoring malformed required list at %s", path)

        return ObjectNode(
            properties=tuple(properties),
            required=required,
            source_path=path,
            nullable=nullable,
        )
