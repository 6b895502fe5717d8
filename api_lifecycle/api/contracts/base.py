"""
Base Pydantic model for all request/response data shapes.

Key features:
- camelCase aliases: JSON member names follow the wire convention ("unitPrice")
- populate_by_name=True: Accept both alias and field name
- extra='ignore': Ignore undeclared fields (safe)
- str_strip_whitespace=True: Strip whitespace from strings

Rule descriptors name members in PascalCase ("UnitPrice"); the rule mapper matches
them to these camelCase schema properties.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ContractModel(BaseModel):
    """Base model for documented data shapes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra='ignore',
    )
