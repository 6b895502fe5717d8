"""
Type coercion transformers.

Two small, independent, idempotent passes over generated schemas. They touch only
type flags, enum values and format, so their order relative to the rule mapper
does not matter.

- Numeric disambiguation: pydantic describes Decimal as "number or string". With two
  non-null types the OpenAPI 3.0 encoder drops `type` and the field shows up untyped
  in consuming tools. A numeric format plus {numeric, string} collapses to the
  numeric type, keeping `null`.
- Enum-as-string: enums are serialized on the wire as camelCase member names, but
  the generator describes IntEnums as integers. Enum nodes are rewritten to
  type=string with camelCase names, keeping `null`.
"""

from enum import Enum
from typing import Dict, Optional

from ..utils.naming import to_camel_case
from .schema_node import SchemaNode


NUMERIC_FORMATS: Dict[str, str] = {
    "int32": "integer",
    "int64": "integer",
    "float": "number",
    "double": "number",
    "decimal": "number",
}


def fix_numeric_type(schema: SchemaNode) -> bool:
    """
    Collapse {numeric, string} to the numeric type for numeric formats.

    Returns:
        True if the node was changed
    """
    if not schema.types or schema.format is None:
        return False

    numeric_type = NUMERIC_FORMATS.get(schema.format)
    if numeric_type is None:
        return False

    if "string" not in schema.types or numeric_type not in schema.types:
        return False

    schema.types = {numeric_type, "null"} if schema.nullable else {numeric_type}
    return True


def fix_numeric_types(schema: SchemaNode) -> int:
    """
    Apply numeric disambiguation to a schema, its properties and its array items.

    Covers standalone parameter schemas, object properties and array item schemas.

    Returns:
        Number of nodes changed
    """
    changed = 0
    for node in schema.walk():
        if fix_numeric_type(node):
            changed += 1
    return changed


def _enum_class(schema: SchemaNode) -> Optional[type]:
    python_type = schema.python_type
    if isinstance(python_type, type) and issubclass(python_type, Enum):
        return python_type
    return None


def project_enum_as_string(schema: SchemaNode, enum_type: Optional[type] = None) -> bool:
    """
    Rewrite an enum node to type=string with camelCase member names.

    Args:
        schema: The node to rewrite
        enum_type: The enum class; defaults to the node's python_type

    Returns:
        True if the node describes an enum (and was rewritten)
    """
    enum_type = enum_type or _enum_class(schema)
    if enum_type is None:
        return False

    schema.types = {"string", "null"} if schema.nullable else {"string"}
    schema.format = None
    schema.enum = [to_camel_case(member.name) for member in enum_type]
    if schema.has_default and schema.default is not None:
        member = _member_for(enum_type, schema.default)
        if member is not None:
            schema.default = to_camel_case(member.name)
    return True


def _member_for(enum_type: type, value) -> Optional[Enum]:
    if isinstance(value, enum_type):
        return value
    for member in enum_type:
        if member.value == value or to_camel_case(member.name) == value:
            return member
    return None


def project_enums_as_strings(schema: SchemaNode) -> int:
    """Apply enum-as-string projection to every enum node in the tree."""
    changed = 0
    for node in schema.walk():
        if project_enum_as_string(node):
            changed += 1
    return changed


def apply_type_fixers(schema: SchemaNode) -> None:
    """Run both coercion passes over a tree."""
    fix_numeric_types(schema)
    project_enums_as_strings(schema)
