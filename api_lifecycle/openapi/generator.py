"""
Base schema generation from pydantic models.

pydantic's JSON Schema output is the reflection-derived base; this module adds
numeric format annotations and converts the result into SchemaNode trees tagged
with the Python classes they describe.
"""

from enum import Enum
from typing import Annotated, Dict, List, Type, get_args, get_origin

from pydantic import BaseModel
from pydantic.json_schema import GenerateJsonSchema, JsonSchemaValue
from pydantic_core import core_schema

from .schema_node import SchemaNode


class ContractJsonSchema(GenerateJsonSchema):
    """
    JSON Schema generator that annotates numeric formats.

    int -> int64, float -> double, Decimal -> decimal. pydantic describes Decimal
    as anyOf(number, string); the format lets the numeric fixer recognise it.
    """

    def int_schema(self, schema: core_schema.IntSchema) -> JsonSchemaValue:
        json_schema = super().int_schema(schema)
        json_schema.setdefault('format', 'int64')
        return json_schema

    def float_schema(self, schema: core_schema.FloatSchema) -> JsonSchemaValue:
        json_schema = super().float_schema(schema)
        json_schema.setdefault('format', 'double')
        return json_schema

    def decimal_schema(self, schema: core_schema.DecimalSchema) -> JsonSchemaValue:
        # Bounds go on the number branch; the string branch stays bare
        number: JsonSchemaValue = {'type': 'number'}
        for key, keyword in _DECIMAL_BOUNDS:
            if schema.get(key) is not None:
                number[keyword] = schema[key]
        return {'anyOf': [number, {'type': 'string'}], 'format': 'decimal'}


_DECIMAL_BOUNDS = (
    ('ge', 'minimum'),
    ('le', 'maximum'),
    ('gt', 'exclusiveMinimum'),
    ('lt', 'exclusiveMaximum'),
)


def collect_types(model: type) -> Dict[str, type]:
    """
    Definition name -> class for a model and every model/enum reachable from its
    fields. Names follow pydantic's $defs naming (the class __name__).
    """
    found: Dict[str, type] = {}

    def visit(tp) -> None:
        origin = get_origin(tp)
        if origin is Annotated:
            visit(get_args(tp)[0])
            return
        if origin is not None:
            for arg in get_args(tp):
                visit(arg)
            return
        if not isinstance(tp, type):
            return
        if issubclass(tp, Enum):
            found.setdefault(tp.__name__, tp)
        elif issubclass(tp, BaseModel) and tp.__name__ not in found:
            found[tp.__name__] = tp
            for field_info in tp.model_fields.values():
                visit(field_info.annotation)

    visit(model)
    return found


def base_schema(model: Type[BaseModel]) -> SchemaNode:
    """
    Generate the base schema for a data shape, with nested definitions inlined.

    Returns:
        A fresh SchemaNode tree (never shared between calls)
    """
    json_schema = model.model_json_schema(
        mode='validation',
        schema_generator=ContractJsonSchema,
    )
    node = SchemaNode.from_json_schema(
        json_schema,
        defs=json_schema.get('$defs', {}),
        type_lookup=collect_types(model),
    )
    node.python_type = model
    return node


def parameter_members(model: Type[BaseModel]) -> List[tuple]:
    """
    (wire name, field name) pairs for a parameter container model, in field order.
    """
    members = []
    for field_name, field_info in model.model_fields.items():
        members.append((field_info.alias or field_name, field_name))
    return members
