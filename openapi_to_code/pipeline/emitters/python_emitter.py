"""
Python emitter: renders type descriptors as Python annotations and declarations.

Object shapes become ``TypedDict`` classes, enums become ``Literal`` types
and everything else becomes a ``type`` alias. Anonymous object shapes found
inside other types are hoisted into helper classes named after their owner
and field, e.g. the ``address`` field of ``User`` becomes ``UserAddress``.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass, field

from ...log import get_logger
from ...utils import to_pascal_case
from ..analyzer.descriptors import (
    UNKNOWN,
    ArrayType,
    EnumLiteral,
    IntersectionType,
    NamedReference,
    NamedType,
    ObjectLiteral,
    Scalar,
    ScalarKind,
    TypeDescriptor,
    UnionType,
)
from ..analyzer.name_registry import NameRegistry
from .base import create_environment

logger = get_logger(__name__)

SCALAR_ANNOTATIONS = {
    ScalarKind.STRING: "str",
    ScalarKind.NUMBER: "float",
    ScalarKind.BOOLEAN: "bool",
    ScalarKind.NULL: "None",
}

# Order of names in the generated "from typing import ..." line
TYPING_NAMES = ("Any", "Literal", "NotRequired", "TypedDict")


@dataclass
class AnnotationImports:
    """Names an annotation needs: typing helpers and generated model types."""

    typing: set[str] = field(default_factory=set)
    models: set[str] = field(default_factory=set)

    def update(self, other: AnnotationImports) -> None:
        self.typing |= other.typing
        self.models |= other.models

    def typing_names(self) -> list[str]:
        return [name for name in TYPING_NAMES if name in self.typing]


@dataclass
class FieldDecl:
    """A field of a generated TypedDict."""

    key: str
    annotation: str
    required: bool = True

    @property
    def full_annotation(self) -> str:
        if self.required:
            return self.annotation
        return f"NotRequired[{self.annotation}]"


@dataclass
class Declaration:
    """A top-level declaration of the models module."""

    name: str

    # "class" (TypedDict class syntax), "functional" (TypedDict call) or "alias"
    kind: str

    bases: tuple[str, ...] = ()
    fields: list[FieldDecl] = field(default_factory=list)
    annotation: str = ""


def is_valid_field_name(name: str) -> bool:
    """Check if a key can be declared with TypedDict class syntax."""
    return name.isidentifier() and not keyword.iskeyword(name)


class PythonTypeEmitter:
    """Renders descriptors as Python annotations, hoisting inline object shapes."""

    def __init__(self, registry: NameRegistry, named_types: list[NamedType] | None = None):
        self.registry = registry
        self._descriptors: dict[str, TypeDescriptor] = {named.name: named.descriptor for named in named_types or []}
        self._pending: list[tuple[str, TypeDescriptor]] = []
        self._hoisted: set[str] = set()

    def annotation(
        self,
        descriptor: TypeDescriptor,
        imports: AnnotationImports | None = None,
        owner: str = "Inline",
        field_name: str = "",
    ) -> str:
        """
        Render a descriptor as a Python annotation.

        Args:
            descriptor: The descriptor to render
            imports: Collector for the names the annotation uses
            owner: Name of the enclosing declaration, for hoisted helper names
            field_name: Field holding the descriptor, for hoisted helper names

        Returns:
            Annotation source text
        """
        imports = imports if imports is not None else AnnotationImports()
        return self._annotation(descriptor, imports, owner, field_name, key=f"{owner}.{field_name}")

    def _annotation(
        self,
        descriptor: TypeDescriptor,
        imports: AnnotationImports,
        owner: str,
        field_name: str,
        key: str,
    ) -> str:
        match descriptor:
            case Scalar():
                return SCALAR_ANNOTATIONS[descriptor.kind]
            case NamedReference():
                imports.models.add(descriptor.name)
                return descriptor.name
            case EnumLiteral():
                imports.typing.add("Literal")
                return f"Literal[{', '.join(descriptor.values)}]"
            case ArrayType():
                element = self._annotation(descriptor.element, imports, owner, f"{field_name}Item", f"{key}[]")
                return f"list[{element}]"
            case UnionType():
                return " | ".join(
                    self._annotation(variant, imports, owner, field_name, f"{key}|{index}")
                    for index, variant in enumerate(descriptor.variants)
                )
            case ObjectLiteral() if not descriptor.fields:
                imports.typing.add("Any")
                return "dict[str, Any]"
            case ObjectLiteral():
                return self._hoist(descriptor, imports, owner, field_name, key)
            case IntersectionType() if self.is_object_like(descriptor):
                return self._hoist(descriptor, imports, owner, field_name, key)
            case _:
                if descriptor is not UNKNOWN:
                    logger.debug("No Python annotation for %r, using Any", descriptor)
                imports.typing.add("Any")
                return "Any"

    def _hoist(
        self,
        descriptor: TypeDescriptor,
        imports: AnnotationImports,
        owner: str,
        field_name: str,
        key: str,
    ) -> str:
        """Declare an anonymous shape as a helper type and return its name."""
        name = self.registry.allocate(f"#inline:{key}", base=f"{owner}{to_pascal_case(field_name) or 'Object'}")
        if name not in self._hoisted:
            self._hoisted.add(name)
            self._descriptors[name] = descriptor
            self._pending.append((name, descriptor))
        imports.models.add(name)
        return name

    def is_object_like(self, descriptor: TypeDescriptor, _seen: frozenset[str] = frozenset()) -> bool:
        """Check if a descriptor can be declared as (or inherited by) a TypedDict."""
        match descriptor:
            case ObjectLiteral():
                return bool(descriptor.fields)
            case IntersectionType():
                return all(self.is_object_like(variant, _seen) for variant in descriptor.variants)
            case NamedReference() if descriptor.name not in _seen:
                target = self._descriptors.get(descriptor.name)
                return target is not None and self.is_object_like(target, _seen | {descriptor.name})
            case _:
                return False

    def declare(self, name: str, descriptor: TypeDescriptor, imports: AnnotationImports) -> Declaration:
        """
        Build the declaration of a named type.

        Args:
            name: The declared identifier
            descriptor: Its descriptor
            imports: Collector for the names the declaration uses

        Returns:
            The declaration
        """
        self._descriptors.setdefault(name, descriptor)

        if isinstance(descriptor, ObjectLiteral) and descriptor.fields:
            imports.typing.add("TypedDict")
            fields = [
                FieldDecl(
                    key=obj_field.name,
                    annotation=self.annotation(obj_field.descriptor, imports, owner=name, field_name=obj_field.name),
                    required=obj_field.required,
                )
                for obj_field in descriptor.fields
            ]
            if any(not obj_field.required for obj_field in descriptor.fields):
                imports.typing.add("NotRequired")
            kind = "class" if all(is_valid_field_name(f.key) for f in fields) else "functional"
            return Declaration(name=name, kind=kind, bases=("TypedDict",), fields=fields)

        if isinstance(descriptor, IntersectionType) and self.is_object_like(descriptor):
            return self._declare_intersection(name, descriptor, imports)

        return Declaration(name=name, kind="alias", annotation=self.annotation(descriptor, imports, owner=name))

    def _declare_intersection(self, name: str, descriptor: IntersectionType, imports: AnnotationImports) -> Declaration:
        """Declare an object-like intersection as a TypedDict inheriting its named parts."""
        bases: list[str] = []
        fields: list[FieldDecl] = []
        for index, variant in enumerate(descriptor.variants):
            if isinstance(variant, ObjectLiteral) and all(is_valid_field_name(f.name) for f in variant.fields):
                for obj_field in variant.fields:
                    fields.append(
                        FieldDecl(
                            key=obj_field.name,
                            annotation=self.annotation(obj_field.descriptor, imports, owner=name, field_name=obj_field.name),
                            required=obj_field.required,
                        )
                    )
                    if not obj_field.required:
                        imports.typing.add("NotRequired")
                continue
            base = self._annotation(variant, imports, name, "Part", f"{name}.&{index}")
            base = self._class_name(base)
            imports.models.add(base)
            if base not in bases:
                bases.append(base)

        if not bases:
            imports.typing.add("TypedDict")
            bases.append("TypedDict")
        return Declaration(name=name, kind="class", bases=tuple(bases), fields=fields)

    def _class_name(self, name: str) -> str:
        """Follow alias-to-alias references down to the declared class."""
        seen: set[str] = set()
        while name not in seen:
            seen.add(name)
            target = self._descriptors.get(name)
            if not isinstance(target, NamedReference):
                break
            name = target.name
        return name

    def pending_count(self) -> int:
        return len(self._pending)

    def pop_pending(self, start: int = 0) -> list[tuple[str, TypeDescriptor]]:
        """Remove and return the helper types hoisted since ``start``."""
        helpers = self._pending[start:]
        del self._pending[start:]
        return helpers


def order_declarations(declarations: list[Declaration]) -> list[Declaration]:
    """
    Order declarations so every class follows the classes it inherits from.

    Annotations are evaluated lazily in the generated module, so base
    classes are the only ordering constraint. The order is otherwise kept.
    """
    by_name = {decl.name: decl for decl in declarations}
    ordered: list[Declaration] = []
    placed: set[str] = set()
    visiting: set[str] = set()

    def place(decl: Declaration) -> None:
        if decl.name in placed or decl.name in visiting:
            return
        visiting.add(decl.name)
        for base in decl.bases:
            if base in by_name:
                place(by_name[base])
        visiting.discard(decl.name)
        placed.add(decl.name)
        ordered.append(decl)

    for decl in declarations:
        place(decl)
    return ordered


class ModelsEmitter:
    """Renders the models module of a generation run."""

    def __init__(self, emitter: PythonTypeEmitter):
        self.emitter = emitter
        self.env = create_environment("python")
        self.template = self.env.get_template("models.py.jinja2")

    def build_declarations(self, named_types: list[NamedType], imports: AnnotationImports) -> list[Declaration]:
        """
        Build the ordered declarations of every named type and hoisted helper.

        Helpers hoisted before this call (e.g. while rendering client method
        signatures) are declared after the named types.
        """
        earlier_helpers = self.emitter.pop_pending()
        declarations: list[Declaration] = []
        for named in named_types:
            declarations.extend(self._declare_with_helpers(named.name, named.descriptor, imports))
        for helper_name, helper_descriptor in earlier_helpers:
            declarations.extend(self._declare_with_helpers(helper_name, helper_descriptor, imports))
        return order_declarations(declarations)

    def _declare_with_helpers(self, name: str, descriptor: TypeDescriptor, imports: AnnotationImports) -> list[Declaration]:
        """Declare a type, preceded by the helpers hoisted while declaring it."""
        mark = self.emitter.pending_count()
        main = self.emitter.declare(name, descriptor, imports)
        declarations: list[Declaration] = []
        for helper_name, helper_descriptor in self.emitter.pop_pending(mark):
            declarations.extend(self._declare_with_helpers(helper_name, helper_descriptor, imports))
        declarations.append(main)
        return declarations

    def render(self, named_types: list[NamedType], header: str = "") -> str:
        """
        Render the models module.

        Args:
            named_types: Declarations in output order
            header: Generation comment placed at the top of the file

        Returns:
            Python source of the models module
        """
        imports = AnnotationImports()
        declarations = self.build_declarations(named_types, imports)
        return self.template.render(
            header=header,
            typing_imports=imports.typing_names(),
            declarations=declarations,
            names=[decl.name for decl in declarations],
        )
