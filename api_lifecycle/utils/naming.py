"""
Name casing helpers shared by configuration parsing, schema assembly and the JSON provider.
"""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def lower_first(name: str) -> str:
    """
    Lower-case only the first character.

    This is the convention used for JSON member names: "UnitPrice" -> "unitPrice",
    "URL" -> "uRL", "name" -> "name".
    """
    if not name or name[0].islower():
        return name
    return name[0].lower() + name[1:]


def to_camel_case(name: str) -> str:
    """
    Convert a snake_case, PascalCase or UPPER_CASE identifier to camelCase.

    Examples:
        "unit_price" -> "unitPrice"
        "UnitPrice" -> "unitPrice"
        "SUPER_ADMIN" -> "superAdmin"
        "ADMIN" -> "admin"
    """
    if not name:
        return name
    if "_" in name or name.isupper():
        parts = [p for p in name.split("_") if p]
        if not parts:
            return name
        head, tail = parts[0].lower(), parts[1:]
        return head + "".join(p[:1].upper() + p[1:].lower() for p in tail)
    return lower_first(name)


def to_snake_case(name: str) -> str:
    """
    Convert a camelCase or PascalCase identifier to snake_case.

    Examples:
        "semanticVersion" -> "semantic_version"
        "SunsetDate" -> "sunset_date"
        "already_snake" -> "already_snake"
    """
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()
