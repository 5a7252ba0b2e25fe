"""
Utility functions for the OpenAPI to code generator.
"""

import keyword
import re

# Any run of characters that cannot appear in an identifier word
_SEPARATOR_PATTERN = re.compile(r"[^A-Za-z0-9]+")

# Lower/digit followed by upper marks a camelCase word boundary
_CAMEL_BOUNDARY_PATTERN = re.compile(r"([a-z0-9])([A-Z])")


def _split_into_words(text: str) -> list[str]:
    """Split text on separator runs, dropping empty parts."""
    return [part for part in _SEPARATOR_PATTERN.split(text) if part]


def to_pascal_case(text: str) -> str:
    """Convert arbitrary text to PascalCase.

    Only the first character of each word is upper-cased, the rest of the
    word is kept as written. A result starting with a digit is prefixed with
    ``Type`` so that it stays a valid identifier.

    Examples:
        "user profile" -> "UserProfile"
        "listPets" -> "ListPets"
        "pet-store_v2" -> "PetStoreV2"
        "2fa" -> "Type2fa"

    Args:
        text: The text to convert

    Returns:
        PascalCase string, empty when the text holds no word characters
    """
    if not text:
        return ""
    result = "".join(word[0].upper() + word[1:] for word in _split_into_words(text))
    if result and result[0].isdigit():
        return f"Type{result}"
    return result


def to_snake_case(text: str) -> str:
    """Convert camelCase, PascalCase or separated text to snake_case.

    Examples:
        "listPets" -> "list_pets"
        "Pet Store" -> "pet_store"
        "/users/{id}" -> "users_id"

    Args:
        text: The text to convert

    Returns:
        snake_case string
    """
    spaced = _CAMEL_BOUNDARY_PATTERN.sub(r"\1_\2", text.strip())
    return _SEPARATOR_PATTERN.sub("_", spaced).strip("_").lower()


def to_identifier(text: str, fallback: str = "value") -> str:
    """Convert text to a snake_case Python identifier that is not a keyword."""
    name = to_snake_case(text) or fallback
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def ensure_plural(word: str) -> str:
    """Return a plural resource name, ``default`` for an empty word."""
    if not word:
        return "default"
    if word.endswith("s"):
        return word
    return f"{word}s"


def make_unique(base: str, used: set[str], separator: str = "") -> str:
    """Return ``base`` or the first free ``base{sep}2``, ``base{sep}3``, ... and mark it used."""
    candidate = base
    counter = 2
    while candidate in used:
        candidate = f"{base}{separator}{counter}"
        counter += 1
    used.add(candidate)
    return candidate
