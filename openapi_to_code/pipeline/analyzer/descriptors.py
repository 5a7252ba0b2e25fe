"""
Type descriptors: the language-neutral result of schema resolution.

Descriptors are frozen and compare structurally, so two resolutions of the
same schema are equal and can be used as dictionary keys. Rendering them
into a concrete language is the job of the emitters.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ScalarKind(str, Enum):
    """Primitive value kinds."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"


@dataclass(frozen=True)
class Scalar:
    """A primitive type."""

    kind: ScalarKind


@dataclass(frozen=True)
class ArrayType:
    """A homogeneous array."""

    element: TypeDescriptor


@dataclass(frozen=True)
class UnionType:
    """Any one of several types (anyOf / oneOf / nullable)."""

    variants: tuple[TypeDescriptor, ...]


@dataclass(frozen=True)
class IntersectionType:
    """All of several types at once (allOf that could not be merged)."""

    variants: tuple[TypeDescriptor, ...]


@dataclass(frozen=True)
class FieldType:
    """A field of an object literal."""

    name: str
    descriptor: TypeDescriptor
    required: bool = True


@dataclass(frozen=True)
class ObjectLiteral:
    """An anonymous object shape."""

    fields: tuple[FieldType, ...] = ()


@dataclass(frozen=True)
class EnumLiteral:
    """A closed set of literal values, stored as rendered literal tokens."""

    values: tuple[str, ...]


@dataclass(frozen=True)
class NamedReference:
    """A reference to a named type declared elsewhere in the output."""

    name: str


class UnknownType:
    """The sentinel for a schema that could not be resolved."""

    _instance: UnknownType | None = None

    def __new__(cls) -> UnknownType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = UnknownType()

STRING = Scalar(ScalarKind.STRING)
NUMBER = Scalar(ScalarKind.NUMBER)
BOOLEAN = Scalar(ScalarKind.BOOLEAN)
NULL = Scalar(ScalarKind.NULL)

TypeDescriptor = Scalar | ArrayType | UnionType | IntersectionType | ObjectLiteral | EnumLiteral | NamedReference | UnknownType


def contains_unknown(descriptor: TypeDescriptor | None) -> bool:
    """
    Check if a descriptor is, or is built directly around, the unknown type.

    Arrays, unions and intersections are searched; object fields and named
    references are not, since those are typed shapes in their own right.

    Args:
        descriptor: The descriptor to check (None counts as unknown)

    Returns:
        True if the descriptor would render as an untyped value
    """
    if descriptor is None or descriptor is UNKNOWN:
        return True
    if isinstance(descriptor, ArrayType):
        return contains_unknown(descriptor.element)
    if isinstance(descriptor, (UnionType, IntersectionType)):
        return any(contains_unknown(variant) for variant in descriptor.variants)
    return False


class TypeOrigin(str, Enum):
    """Where a named type came from."""

    COMPONENT_SCHEMA = "component-schema"
    INLINE_OPERATION_BODY = "inline-operation-body"
    UNRESOLVED_REFERENCE = "unresolved-reference"


@dataclass(frozen=True)
class NamedType:
    """A declaration to emit: a unique name bound to a descriptor."""

    name: str
    descriptor: TypeDescriptor
    origin: TypeOrigin = TypeOrigin.COMPONENT_SCHEMA


@dataclass(frozen=True)
class OperationTypes:
    """The named request and response types of one operation."""

    request_type: str | None = None
    response_type: str | None = None


# path -> method -> types
OperationTypeMap = dict[str, dict[str, OperationTypes]]
