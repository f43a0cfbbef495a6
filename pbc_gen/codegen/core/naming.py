"""
Naming utilities for safe code generation.

Turns arbitrary collection, field and select-value names from a schema
export into identifiers that can be emitted as Go source. Every function
here is a pure function of its input.
"""

import re
from enum import Enum
from types import MappingProxyType

# Tokens that are emitted fully upper-cased instead of capitalized.
ACRONYMS = MappingProxyType(
    {
        "id": "ID",
        "url": "URL",
        "html": "HTML",
        "json": "JSON",
    }
)

_SEPARATORS = re.compile(r"[_\- ]+")
_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9]")

_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

# Escaped inside string literals, blanked inside comments.
_CONTROL_CHARS = re.compile("[\x00-\x1f\x7f-\x9f\u2028\u2029\ufeff]+")
_STRING_SPECIAL = re.compile('[\\\\"\x00-\x1f\x7f-\x9f\u2028\u2029\ufeff]')


class IdentifierCategory(Enum):
    """Kinds of generated identifiers and their fallback words."""

    ENUM = ("Enum", "EnumValue")
    RELATION = ("Relation", "RelationType")
    FILE = ("File", "FileType")
    COLLECTION = ("Collection", "Collection")
    FIELD = ("Field", "Field")

    @property
    def prefix(self) -> str:
        """Word prepended when the identifier would start with a digit."""
        return self.value[0]

    @property
    def fallback(self) -> str:
        """Identifier used when nothing usable is left after cleaning."""
        return self.value[1]


def split_words(name: str) -> list[str]:
    """Split a name on underscores, hyphens and spaces, dropping empty parts."""
    return [part for part in _SEPARATORS.split(name) if part]


def _canonical_token(token: str) -> str:
    acronym = ACRONYMS.get(token.lower())
    if acronym is not None:
        return acronym
    return token[:1].upper() + token[1:]


def to_pascal_case(name: str) -> str:
    """
    Convert a schema name to PascalCase.

    Each token has its first letter upper-cased and the rest kept as
    written, so already-canonical names come back unchanged. Tokens that
    match an entry in ``ACRONYMS`` (case-insensitively) are replaced by it.

    Examples:
        >>> to_pascal_case("some_id_field")
        'SomeIDField'
        >>> to_pascal_case("HelloWorld")
        'HelloWorld'

    Args:
        name: Arbitrary name from the schema

    Returns:
        Concatenated PascalCase identifier (empty for empty input)
    """
    return "".join(_canonical_token(token) for token in split_words(name))


def to_constant_name(collection_name: str, field_name: str, value: str) -> str:
    """Build an enum constant name: collection + field + value, each canonicalized."""
    return to_pascal_case(collection_name) + to_pascal_case(field_name) + to_pascal_case(value)


def sanitize_identifier(name: str, category: IdentifierCategory) -> str:
    """
    Reduce a generated name to ASCII letters and digits.

    Args:
        name: Candidate identifier, usually already PascalCase
        category: Decides the prefix for digit-led names and the fallback
            for names that are empty after cleaning

    Returns:
        Non-empty identifier starting with a letter
    """
    cleaned = _NON_IDENTIFIER.sub("", name)
    if not cleaned:
        return category.fallback
    if cleaned[0].isdigit():
        return category.prefix + cleaned
    return cleaned


def _escape_char(match: "re.Match[str]") -> str:
    char = match.group()
    escaped = _STRING_ESCAPES.get(char)
    if escaped is not None:
        return escaped
    code = ord(char)
    if code < 0x80:
        return f"\\x{code:02x}"
    return f"\\u{code:04x}"


def quote_string(value: str) -> str:
    """
    Render a value as a double-quoted Go string literal.

    Control characters without a short escape are written as ``\\xNN``
    (ASCII) or ``\\uNNNN``.
    """
    return '"' + _STRING_SPECIAL.sub(_escape_char, value) + '"'


def comment_text(value: str) -> str:
    """Flatten a name for use inside a ``//`` comment; control runs become one space."""
    return _CONTROL_CHARS.sub(" ", str(value)).strip()
