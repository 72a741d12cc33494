"""
TypeScript-specific naming utilities.

Handles TypeScript reserved words, builtin type names and property keys.
"""

import json
import re
from typing import List



# Words that cannot name an interface
TS_RESERVED_WORDS = {
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "import",
    "in",
    "instanceof",
    "new",
    "null",
    "return",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "var",
    "void",
    "while",
    "with",
    "implements",
    "interface",
    "let",
    "package",
    "private",
    "protected",
    "public",
    "static",
    "yield",
}

# Type names already in scope of a generated declaration file
TS_BUILTIN_TYPES = {
    "any",
    "unknown",
    "never",
    "object",
    "string",
    "number",
    "boolean",
    "bigint",
    "symbol",
    "undefined",
    "date",
    "array",
    "record",
    "map",
    "objectid",
    "decimal128",
}

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


def is_identifier(name: str) -> bool:
    """Whether a name can be written as a bare property key."""
    return bool(_IDENTIFIER_RE.match(name))


def format_property_name(name: str) -> str:
    """Property key as written in an interface; quoted when not an identifier."""
    if is_identifier(name):
        return name
    return json.dumps(name, ensure_ascii=False)


def validate_interface_name(name: str) -> List[str]:
    """
    Validate a generated interface name.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Interface name cannot be empty")
        return errors

    if not is_identifier(name):
        errors.append(f"'{name}' is not a valid TypeScript identifier")

    if name in TS_RESERVED_WORDS:
        errors.append(f"'{name}' is a TypeScript reserved word")

    if name.lower() in TS_BUILTIN_TYPES:
        errors.append(f"'{name}' shadows a builtin type")

    return errors
