"""
JSON provider for API responses.

Enum members are serialized as camelCase member names (Role.SUPER_ADMIN ->
"superAdmin"). The documents describe enums the same way, see
openapi.transformers.project_enum_as_string.
"""

from decimal import Decimal
from enum import Enum

from flask.json.provider import DefaultJSONProvider
from pydantic import BaseModel

from ...utils.naming import to_camel_case


def enum_wire_value(member: Enum) -> str:
    """Wire representation of an enum member."""
    return to_camel_case(member.name)


def _convert(value):
    if isinstance(value, Enum):
        return enum_wire_value(value)
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


class ContractJSONProvider(DefaultJSONProvider):
    """Flask JSON provider aware of enums and pydantic models."""

    # Documents keep their authored key order (openapi, info, paths, components)
    sort_keys = False

    @staticmethod
    def default(o):
        if isinstance(o, Enum):
            return enum_wire_value(o)
        if isinstance(o, BaseModel):
            return _convert(o.model_dump(by_alias=True))
        if isinstance(o, Decimal):
            return float(o)
        return DefaultJSONProvider.default(o)

    def dumps(self, obj, **kwargs):
        # IntEnum/StrEnum members are int/str subclasses and never reach default()
        return super().dumps(_convert(obj), **kwargs)
