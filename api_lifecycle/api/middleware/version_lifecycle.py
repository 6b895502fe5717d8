"""
Version lifecycle middleware - block, annotate, or pass through per version status.

Per request, before the route handler:
1. Resolve the requested version from the version header (default version if absent)
   and derive the registry key "v{major}"
2. Unknown key -> pass through untouched
3. Known key -> X-API-Version-Status: <status>
4. Sunset family -> 410 problem details, handler is never invoked
5. Deprecated -> Deprecation: true, X-API-Info hint, Sunset: <http-date> if configured
6. Otherwise, a scheduled deprecation date -> Deprecation: <http-date>

The registry is read-only, so no locking is needed. The 410 is a normal response,
never an exception.
"""

import logging
from typing import Dict, Iterable, Optional

from flask import Flask, g, request
from werkzeug.http import http_date

from ...constants import (
    API_INFO_HEADER,
    DEFAULT_VERSION_HEADER,
    DEPRECATION_HEADER,
    GONE_TYPE_URI,
    SUNSET_HEADER,
    VERSION_STATUS_HEADER,
)
from ...versioning.models import VersionInfo
from ...versioning.negotiation import parse_requested_version, version_key
from ...versioning.registry import VersionRegistry
from .error_envelope import make_problem_response
from .version_negotiation import is_exempt


logger = logging.getLogger('api.middleware.lifecycle')


def resolve_version_name(registry: VersionRegistry, raw: Optional[str]) -> Optional[str]:
    """
    Registry key for a version header value.

    Returns:
        "v{major}" of the requested version, of the default version when no header
        was sent, or None when the header cannot be parsed
    """
    if raw is None or not raw.strip():
        return version_key(registry.default_version().major)
    requested = parse_requested_version(raw)
    if requested is None:
        return None
    return requested.registry_key


def lifecycle_headers(registry: VersionRegistry, info: VersionInfo) -> Dict[str, str]:
    """
    Headers announcing a non-sunset version's lifecycle state.

    Deprecation carries "true" for a deprecated version and an HTTP-date for an
    otherwise active version with a scheduled deprecation; never both.
    """
    headers = {VERSION_STATUS_HEADER: info.status.header_value}

    if info.is_deprecated:
        default = registry.default_version()
        headers[DEPRECATION_HEADER] = "true"
        headers[API_INFO_HEADER] = (
            f"This API version is deprecated. Please migrate to v{default.semantic_version}"
        )
        if info.sunset_date is not None:
            headers[SUNSET_HEADER] = http_date(info.sunset_date)
    elif info.deprecation_date is not None:
        headers[DEPRECATION_HEADER] = http_date(info.deprecation_date)

    return headers


def sunset_response(registry: VersionRegistry, version_name: str):
    """410 Gone problem details pointing at the default version."""
    return make_problem_response(
        status=410,
        title="Gone",
        detail=(
            f"API version {version_name} has reached end-of-life "
            "and no longer accepts requests."
        ),
        type_uri=GONE_TYPE_URI,
        migrateToVersion=registry.default_version().semantic_version,
    )


def setup_version_lifecycle_middleware(
    app: Flask,
    registry: VersionRegistry,
    header_name: str = DEFAULT_VERSION_HEADER,
    exempt_prefixes: Iterable[str] = (),
) -> None:
    """
    Set up version lifecycle handling on Flask app.

    Injects into:
    - Flask's g object (g.api_version_info, g.lifecycle_headers)
    - Response headers (X-API-Version-Status, Deprecation, Sunset, X-API-Info)

    Args:
        app: Flask application instance
        registry: The immutable version registry
        header_name: Request header carrying the requested version
        exempt_prefixes: Path prefixes that are not versioned
    """
    exempt = tuple(exempt_prefixes)

    @app.before_request
    def apply_version_lifecycle():
        """Annotate or short-circuit the request based on the version status."""
        g.api_version_info = None
        g.lifecycle_headers = {}
        if is_exempt(request.path, exempt):
            return None

        version_name = resolve_version_name(registry, request.headers.get(header_name))
        info = registry.lookup(version_name)
        if info is None:
            return None

        g.api_version_info = info

        if info.is_sunset:
            g.lifecycle_headers = {VERSION_STATUS_HEADER: info.status.header_value}
            logger.info(
                "sunset_version_rejected path=%s version=%s status=%s",
                request.path,
                version_name,
                info.status.value,
            )
            return sunset_response(registry, version_name)

        g.lifecycle_headers = lifecycle_headers(registry, info)
        if info.is_deprecated:
            logger.debug("deprecated_version_request path=%s version=%s", request.path, version_name)
        return None

    @app.after_request
    def add_lifecycle_headers(response):
        """Add the lifecycle headers computed before the handler ran."""
        for name, value in getattr(g, 'lifecycle_headers', {}).items():
            response.headers.add(name, value)
        return response
