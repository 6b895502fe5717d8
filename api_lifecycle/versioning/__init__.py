"""
Version registry package.

Provides the lifecycle status model, configuration models and the immutable
VersionRegistry consulted by the middleware and the document builder.
"""

from .status import VersionStatus, DEFAULT_STATUSES, SUNSET_STATUSES, INACTIVE_STATUSES
from .models import VersionInfo, ServerInfo, DocsSettings, VersioningSettings
from .registry import ConfigurationError, VersionRegistry, build_registry
from .negotiation import RequestedVersion, parse_requested_version, version_key

__all__ = [
    'VersionStatus',
    'DEFAULT_STATUSES',
    'SUNSET_STATUSES',
    'INACTIVE_STATUSES',
    'VersionInfo',
    'ServerInfo',
    'DocsSettings',
    'VersioningSettings',
    'ConfigurationError',
    'VersionRegistry',
    'build_registry',
    'RequestedVersion',
    'parse_requested_version',
    'version_key',
]
