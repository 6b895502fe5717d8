"""
Contract synthesis: schema nodes, base schema generation and type fixers.

The per-version document builder lives in api_lifecycle.openapi.document.
"""

from .schema_node import SchemaNode, SCHEMA_TYPES, REF_PREFIX
from .generator import ContractJsonSchema, base_schema, collect_types
from .transformers import (
    apply_type_fixers,
    fix_numeric_type,
    fix_numeric_types,
    project_enum_as_string,
    project_enums_as_strings,
)

__all__ = [
    'SchemaNode',
    'SCHEMA_TYPES',
    'REF_PREFIX',
    'ContractJsonSchema',
    'base_schema',
    'collect_types',
    'apply_type_fixers',
    'fix_numeric_type',
    'fix_numeric_types',
    'project_enum_as_string',
    'project_enums_as_strings',
]
