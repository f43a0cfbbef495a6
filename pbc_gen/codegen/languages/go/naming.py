"""
Go naming rules.

Reserved words and package-name checks used when validating generator
settings.
"""

import re

GO_RESERVED_WORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)

_GO_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def is_valid_go_package_name(name: str) -> bool:
    """ASCII identifier usable in a package clause: not a keyword, not blank."""
    return bool(_GO_IDENTIFIER.match(name or "")) and name != "_" and name not in GO_RESERVED_WORDS


def validate_go_package_name(name: str) -> list[str]:
    """
    Validate a Go package name.

    Returns:
        List of problems (empty if valid). Upper-case letters and
        underscores are legal but unidiomatic and reported as well.
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    if not _GO_IDENTIFIER.match(name):
        errors.append(f"'{name}' is not a valid Go identifier")
        return errors

    if name in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    if name != name.lower():
        errors.append("Package names should be lowercase")

    if "_" in name:
        errors.append("Package names should not contain underscores")

    return errors
