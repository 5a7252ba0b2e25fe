"""
Name registry for sanitizing and deduplicating generated type names.

A single registry lives for one generation run. Component schemas, inline
operation bodies and hoisted helper classes all draw their names from it,
so no two declarations in one run can share an identifier.
"""

from __future__ import annotations

import keyword
from urllib.parse import unquote

from ...log import get_logger
from ...utils import make_unique, to_pascal_case

logger = get_logger(__name__)


def ref_target(ref_path: str) -> str:
    """
    Return the raw schema key a $ref points at.

    The key is the last segment of the JSON pointer, with percent-escapes
    and the pointer escapes ``~1`` and ``~0`` decoded.

    Args:
        ref_path: The $ref value, e.g. "#/components/schemas/Pet"

    Returns:
        The raw key, e.g. "Pet"
    """
    segment = ref_path.rsplit("/", 1)[-1]
    return unquote(segment).replace("~1", "/").replace("~0", "~")


class NameRegistry:
    """Allocates unique, sanitized identifiers keyed by raw names."""

    # Identifiers imported by the generated models module
    RESERVED_NAMES = frozenset({"Any", "Literal", "NotRequired", "TypedDict"})

    # Name returned for raw keys with no usable characters
    FALLBACK_NAME = "Type"

    def __init__(self):
        self._names: dict[str, str] = {}
        self._issued: set[str] = set()
        # Identifiers handed out for $ref targets, in first-reference order
        self._referenced: dict[str, None] = {}

    def sanitize(self, raw: str) -> str:
        """
        Convert a raw key into a valid PascalCase identifier.

        Args:
            raw: The raw key (schema name, operation-derived name, ...)

        Returns:
            The sanitized identifier, without deduplication
        """
        name = to_pascal_case(raw) or self.FALLBACK_NAME
        if keyword.iskeyword(name) or name in self.RESERVED_NAMES:
            name = f"{name}Type"
        return name

    def allocate(self, raw: str, base: str | None = None) -> str:
        """
        Return the unique identifier for a raw key, allocating it on first use.

        Repeated calls with the same raw key return the same identifier.
        Distinct raw keys that sanitize alike get numbered suffixes:
        ``User``, ``User2``, ``User3``, ...

        Args:
            raw: The raw key identifying the declaration
            base: Name to sanitize instead of the raw key, for namespaced keys

        Returns:
            The unique identifier
        """
        existing = self._names.get(raw)
        if existing is not None:
            return existing

        name = make_unique(self.sanitize(raw if base is None else base), self._issued)
        self._names[raw] = name
        logger.debug("Allocated type name %s for %r", name, raw)
        return name

    def resolve(self, raw: str) -> str:
        """
        Return the identifier a reference to ``raw`` should use.

        References to keys that were never declared are allocated on first
        sight, so they still get a stable and unique name.
        """
        name = self.allocate(raw)
        self._referenced.setdefault(name)
        return name

    def mapping(self) -> dict[str, str]:
        """Return a copy of the raw key -> identifier table."""
        return dict(self._names)

    def issued_names(self) -> frozenset[str]:
        """Return every identifier issued so far."""
        return frozenset(self._issued)

    def referenced_names(self) -> list[str]:
        """Return the identifiers used by references, in first-reference order."""
        return list(self._referenced)

    def __contains__(self, raw: str) -> bool:
        return raw in self._names
