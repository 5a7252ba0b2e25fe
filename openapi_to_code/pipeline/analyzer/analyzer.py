"""
Document analyzer: the entry point of the analysis phase.

Resolves every component schema and every operation body of a document
into named types sharing a single name registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...log import get_logger
from ..document import ApiDocument
from ..schema_ast.parser import SchemaParser
from .descriptors import UNKNOWN, NamedType, OperationTypeMap, TypeDescriptor, TypeOrigin
from .extractor import OperationTypeExtractor
from .name_registry import NameRegistry
from .resolver import SchemaTypeResolver

logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    """Named types and operation types of one document."""

    named_types: list[NamedType] = field(default_factory=list)
    operation_types: OperationTypeMap = field(default_factory=dict)
    registry: NameRegistry = field(default_factory=NameRegistry)

    def named_type(self, name: str) -> NamedType | None:
        """Return the declaration of ``name``, None when nothing declares it."""
        for named in self.named_types:
            if named.name == name:
                return named
        return None

    def descriptor_for(self, name: str) -> TypeDescriptor | None:
        """Return the descriptor declared under ``name``, None when nothing declares it."""
        named = self.named_type(name)
        return named.descriptor if named is not None else None

    def declare_unresolved_references(self) -> list[NamedType]:
        """
        Declare every referenced name that nothing declares as an untyped alias.

        A $ref to a schema missing from the document still gets a name in
        the models module, so code importing that name keeps working.
        Safe to call again after more schemas were resolved.

        Returns:
            The placeholders added by this call
        """
        declared = {named.name for named in self.named_types}
        added = [
            NamedType(name, UNKNOWN, TypeOrigin.UNRESOLVED_REFERENCE)
            for name in self.registry.referenced_names()
            if name not in declared
        ]
        for named in added:
            logger.warning("Schema %s is referenced but not defined, declaring it as Any", named.name)
        self.named_types.extend(added)
        return added

    @property
    def type_name_map(self) -> dict[str, str]:
        """Raw key -> emitted identifier."""
        return self.registry.mapping()


class DocumentAnalyzer:
    """Builds the AnalysisResult of a document."""

    def __init__(self, resolver: SchemaTypeResolver | None = None):
        self.resolver = resolver or SchemaTypeResolver()
        self.parser = SchemaParser()
        self.extractor = OperationTypeExtractor(self.resolver)

    def analyze(self, document: ApiDocument, registry: NameRegistry | None = None) -> AnalysisResult:
        """
        Analyze a document.

        Component names are allocated before anything is resolved, so a
        declared schema always keeps its own name and references or inline
        bodies that sanitize alike are the ones that get suffixed.

        Args:
            document: The API document
            registry: Name registry to use (a fresh one by default)

        Returns:
            AnalysisResult with component types first, then synthesized ones
        """
        registry = registry or NameRegistry()
        result = AnalysisResult(registry=registry)

        schemas = document.component_schemas
        if not schemas:
            logger.warning("No schema definitions found in the document components")

        names = {raw: registry.allocate(raw) for raw in schemas}
        schema_root = "#/definitions" if document.is_swagger2 else "#/components/schemas"
        for raw, schema in schemas.items():
            node = self.parser.parse(schema, f"{schema_root}/{raw}")
            descriptor = self.resolver.resolve(node, registry)
            result.named_types.append(NamedType(names[raw], descriptor, TypeOrigin.COMPONENT_SCHEMA))

        extraction = self.extractor.extract(document, registry)
        result.named_types.extend(extraction.named_types)
        result.operation_types = extraction.operation_types
        result.declare_unresolved_references()

        logger.debug(
            "Analyzed %d component schemas and %d operation types",
            len(schemas),
            sum(len(methods) for methods in extraction.operation_types.values()),
        )
        return result
