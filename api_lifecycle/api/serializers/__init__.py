"""
Response serializers.
"""

from .json_provider import ContractJSONProvider, enum_wire_value

__all__ = ['ContractJSONProvider', 'enum_wire_value']
