"""
Contract registration package.

Provides the ContractModel base for data shapes and the registry that tells the
document builder which shapes each versioned endpoint binds.
"""

from .base import ContractModel
from .registry import (
    CONTRACTS,
    ContractRegistry,
    EndpointContract,
    contract_route,
    get_contracts,
    register_contract,
)

__all__ = [
    'ContractModel',
    'CONTRACTS',
    'ContractRegistry',
    'EndpointContract',
    'contract_route',
    'get_contracts',
    'register_contract',
]
