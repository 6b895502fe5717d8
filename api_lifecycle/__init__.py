"""
API version lifecycle manager and contract-synthesis engine.

- versioning: VersionRegistry and lifecycle statuses
- api.middleware: negotiation, lifecycle headers, 410 for sunset versions
- rules: declarative validation rules and their schema projection
- openapi: per-version document assembly
"""

from .versioning import (
    ConfigurationError,
    VersionInfo,
    VersionRegistry,
    VersionStatus,
    VersioningSettings,
)
from .api.contracts import ContractModel, EndpointContract, contract_route, register_contract
from .rules import register_rules
from .openapi.document import DocumentCatalog, build_documents
from .app import create_app

__version__ = "1.0.0"

__all__ = [
    'ConfigurationError',
    'VersionInfo',
    'VersionRegistry',
    'VersionStatus',
    'VersioningSettings',
    'ContractModel',
    'EndpointContract',
    'contract_route',
    'register_contract',
    'register_rules',
    'DocumentCatalog',
    'build_documents',
    'create_app',
]
