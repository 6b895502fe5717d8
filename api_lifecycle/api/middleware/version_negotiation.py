"""
Version negotiation middleware - reject unsupported versions, report supported ones.

Runs before the lifecycle middleware and is the layer that turns a malformed or
unknown version header into a 400. The lifecycle middleware can then assume any
version it sees is either known or deliberately passed through.

Provides:
- Parsing of the version header into g.api_version (None means "use the default")
- 400 problem details for unparsable or unknown versions
- api-supported-versions / api-deprecated-versions headers on every response
"""

import logging
from typing import Iterable

from flask import Flask, g, request

from ...constants import (
    DEFAULT_VERSION_HEADER,
    DEPRECATED_VERSIONS_HEADER,
    SUPPORTED_VERSIONS_HEADER,
)
from ...versioning.negotiation import parse_requested_version
from ...versioning.registry import VersionRegistry
from .error_envelope import make_problem_response


logger = logging.getLogger('api.middleware.negotiation')


def is_exempt(path: str, exempt_prefixes: Iterable[str]) -> bool:
    """Paths under these prefixes (documentation, static files) skip version handling."""
    return any(path.startswith(prefix) for prefix in exempt_prefixes if prefix)


def setup_version_negotiation_middleware(
    app: Flask,
    registry: VersionRegistry,
    header_name: str = DEFAULT_VERSION_HEADER,
    exempt_prefixes: Iterable[str] = (),
) -> None:
    """
    Set up version negotiation on Flask app.

    Args:
        app: Flask application instance
        registry: The immutable version registry
        header_name: Request header carrying the requested version
        exempt_prefixes: Path prefixes that are not versioned
    """
    exempt = tuple(exempt_prefixes)
    supported = ", ".join(v.semantic_version for v in registry.active_versions())
    deprecated = ", ".join(v.semantic_version for v in registry.inactive_versions())
    all_versions = [v.semantic_version for v in registry.versions]

    @app.before_request
    def negotiate_api_version():
        """Parse the version header; reject values no configured version can serve."""
        g.api_version = None
        if is_exempt(request.path, exempt):
            return None

        raw = request.headers.get(header_name)
        if raw is None or not raw.strip():
            return None

        requested = parse_requested_version(raw)
        if requested is None or registry.lookup(requested.registry_key) is None:
            logger.info(
                "unsupported_api_version path=%s value=%r",
                request.path,
                raw,
            )
            return make_problem_response(
                status=400,
                title="Unsupported API Version",
                detail=(
                    f"The HTTP resource that matches the request URI '{request.path}' "
                    f"does not support the API version '{raw.strip()}'."
                ),
                supportedVersions=all_versions,
            )

        g.api_version = requested
        return None

    @app.after_request
    def report_api_versions(response):
        """Report configured versions on every response."""
        if supported:
            response.headers[SUPPORTED_VERSIONS_HEADER] = supported
        if deprecated:
            response.headers[DEPRECATED_VERSIONS_HEADER] = deprecated
        return response
