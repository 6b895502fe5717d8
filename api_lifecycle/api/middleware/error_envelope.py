"""
Error envelope middleware - Standardize all error responses as problem details.

Provides a consistent error response format (application/problem+json):
{
    "type": "https://httpstatuses.io/404",
    "title": "Not Found",
    "status": 404,
    "detail": "The requested URL was not found on the server.",
    "instance": "/openapi/v9.json"
}

Extension members (e.g. migrateToVersion, supportedVersions) are added at the top level.
"""

import json
import logging
from typing import Any, Optional

from flask import Flask, Response, current_app, has_request_context, request
from werkzeug.exceptions import HTTPException

from ...constants import PROBLEM_CONTENT_TYPE, PROBLEM_TYPE_BASE


logger = logging.getLogger('api.middleware.error')


def problem_body(
    status: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: Optional[str] = None,
    instance: Optional[str] = None,
    **extensions: Any,
) -> dict:
    """
    Build a problem details body.

    Args:
        status: HTTP status code
        title: Short, stable summary ("Gone")
        detail: Human-readable explanation for this occurrence
        type_uri: Reference URI for the problem type (defaults to httpstatuses.io/{status})
        instance: Request path; defaults to the current request's path
        **extensions: Additional top-level members

    Returns:
        Problem details dict
    """
    if instance is None and has_request_context():
        instance = request.path

    body = {
        "type": type_uri or f"{PROBLEM_TYPE_BASE}{status}",
        "title": title,
        "status": status,
    }
    if detail is not None:
        body["detail"] = detail
    if instance is not None:
        body["instance"] = instance
    body.update(extensions)
    return body


def make_problem_response(
    status: int,
    title: str,
    detail: Optional[str] = None,
    type_uri: Optional[str] = None,
    **extensions: Any,
) -> Response:
    """
    Create a problem details response. Never raises for well-formed input.

    Returns:
        Flask Response with status code and application/problem+json content type
    """
    body = problem_body(status, title, detail, type_uri, **extensions)
    return current_app.response_class(
        json.dumps(body, default=str),
        status=status,
        mimetype=PROBLEM_CONTENT_TYPE,
    )


def setup_error_handlers(app: Flask) -> None:
    """
    Set up problem-details error handlers on Flask app.

    Handles:
    - HTTP exceptions (400, 404, 405, etc.)
    - Unhandled Python exceptions (500)

    ConfigurationError is deliberately not handled here: it is raised at startup,
    before any request is served.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        """Render Flask/Werkzeug HTTP exceptions as problem details."""
        return make_problem_response(
            status=error.code or 500,
            title=error.name,
            detail=error.description,
        )

    @app.errorhandler(Exception)
    def handle_generic_error(error: Exception):
        """Handle unhandled Python exceptions."""
        if isinstance(error, HTTPException):
            return handle_http_error(error)

        logger.exception(
            f"Unhandled error: {error}",
            extra={
                "event": "unhandled_error",
                "path": request.path,
                "error_type": type(error).__name__,
            }
        )
        return make_problem_response(
            status=500,
            title="Internal Server Error",
            detail="An unexpected error occurred",
        )
