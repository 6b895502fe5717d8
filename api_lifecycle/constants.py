"""
Header names and other wire-level constants.
"""

# Request header carrying the requested API version (overridable via API_VERSION_HEADER)
DEFAULT_VERSION_HEADER = 'X-API-Version'

# =============================================================================
# LIFECYCLE RESPONSE HEADERS
# =============================================================================

VERSION_STATUS_HEADER = 'X-API-Version-Status'
DEPRECATION_HEADER = 'Deprecation'
SUNSET_HEADER = 'Sunset'
API_INFO_HEADER = 'X-API-Info'

# Version reporting (every response)
SUPPORTED_VERSIONS_HEADER = 'api-supported-versions'
DEPRECATED_VERSIONS_HEADER = 'api-deprecated-versions'

LIFECYCLE_HEADERS = [
    VERSION_STATUS_HEADER,
    DEPRECATION_HEADER,
    SUNSET_HEADER,
    API_INFO_HEADER,
    SUPPORTED_VERSIONS_HEADER,
    DEPRECATED_VERSIONS_HEADER,
]

# =============================================================================
# PROBLEM DETAILS
# =============================================================================

PROBLEM_CONTENT_TYPE = 'application/problem+json'
GONE_TYPE_URI = 'https://httpstatuses.io/410'
PROBLEM_TYPE_BASE = 'https://httpstatuses.io/'

# =============================================================================
# DOCUMENTS
# =============================================================================

OPENAPI_VERSION = '3.0.3'
DEFAULT_DOCS_PREFIX = '/openapi'
