"""
Global middleware for versioned API requests.

Provides:
- Version negotiation (400 for unsupported versions, api-supported-versions)
- Version lifecycle handling (X-API-Version-Status, Deprecation, Sunset, 410 Gone)
- Problem-details error responses
- Deprecated-version usage logging
"""

from .error_envelope import make_problem_response, problem_body, setup_error_handlers
from .version_negotiation import setup_version_negotiation_middleware
from .version_lifecycle import setup_version_lifecycle_middleware
from .request_logging import setup_request_logging_middleware

__all__ = [
    'make_problem_response',
    'problem_body',
    'setup_error_handlers',
    'setup_version_negotiation_middleware',
    'setup_version_lifecycle_middleware',
    'setup_request_logging_middleware',
]
