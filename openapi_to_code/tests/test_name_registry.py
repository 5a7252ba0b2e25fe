"""
Tests for NameRegistry.
"""

from __future__ import annotations

from openapi_to_code.pipeline.analyzer import NameRegistry, ref_target


class TestNameRegistry:
    """Tests for name allocation."""

    def test_same_raw_key_same_name(self):
        """Test repeated allocation of one key is stable."""
        registry = NameRegistry()
        assert registry.allocate("User") == "User"
        assert registry.allocate("User") == "User"

    def test_colliding_keys_get_suffixes(self):
        """Test keys that sanitize alike get distinct identifiers."""
        registry = NameRegistry()
        first = registry.allocate("User")
        second = registry.allocate("user")
        third = registry.allocate("user_")
        assert (first, second, third) == ("User", "User2", "User3")

    def test_sanitize(self):
        registry = NameRegistry()
        assert registry.sanitize("pet store") == "PetStore"
        assert registry.sanitize("Any") == "AnyType"
        assert registry.sanitize("None") == "NoneType"
        assert registry.sanitize("***") == "Type"
        assert registry.sanitize("1st") == "Type1st"

    def test_base_name(self):
        """Test namespaced keys are named after their base."""
        registry = NameRegistry()
        assert registry.allocate("#inline:get /pets:response", base="ListPetsResponse") == "ListPetsResponse"
        assert registry.allocate("#inline:get /pets:response", base="Other") == "ListPetsResponse"

    def test_resolve_allocates_unknown_keys(self):
        registry = NameRegistry()
        assert "Missing" not in registry
        assert registry.resolve("Missing") == "Missing"
        assert "Missing" in registry

    def test_referenced_names(self):
        """Test only reference targets are listed, once each, in first-reference order."""
        registry = NameRegistry()
        registry.allocate("Pet")
        registry.resolve("Owner")
        registry.resolve("Pet")
        registry.resolve("Owner")
        assert registry.referenced_names() == ["Owner", "Pet"]

    def test_mapping_and_issued_names(self):
        registry = NameRegistry()
        registry.allocate("a")
        registry.allocate("A")
        assert registry.mapping() == {"a": "A", "A": "A2"}
        assert registry.issued_names() == frozenset({"A", "A2"})

    def test_registries_are_independent(self):
        """Test each run starts from a clean registry."""
        NameRegistry().allocate("User")
        assert NameRegistry().allocate("user") == "User"


class TestRefTarget:
    """Tests for ref_target."""

    def test_last_segment(self):
        assert ref_target("#/components/schemas/Pet") == "Pet"
        assert ref_target("#/definitions/Pet") == "Pet"

    def test_escapes(self):
        assert ref_target("#/components/schemas/a~1b~0c") == "a/b~c"
        assert ref_target("#/components/schemas/Pet%20Owner") == "Pet Owner"
