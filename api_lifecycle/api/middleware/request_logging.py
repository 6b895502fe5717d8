"""
Request logging middleware - deprecation monitoring.

Always logs requests served by legacy, deprecated or sunset-family versions so
operators can see who still calls them before a version is retired. Traffic on
active versions is sampled.
"""

import logging
import random
import time

from flask import Flask, g, request

from ...versioning.status import INACTIVE_STATUSES


logger = logging.getLogger("api.request")


def _should_log(info, sample_rate: float) -> bool:
    if info is not None and info.status in INACTIVE_STATUSES:
        return True
    if sample_rate <= 0:
        return False
    if sample_rate >= 1:
        return True
    return random.random() <= sample_rate


def setup_request_logging_middleware(
    app: Flask,
    enabled: bool = True,
    sample_rate: float = 0.0,
) -> None:
    """
    Set up request logging middleware on Flask app.

    Must be registered after the lifecycle middleware so g.api_version_info is set.

    Args:
        app: Flask application instance
        enabled: REQUEST_LOG_ENABLED
        sample_rate: REQUEST_LOG_SAMPLE_RATE for active-version traffic
    """
    if not enabled:
        return

    @app.before_request
    def _start_timer():
        g.request_start = time.perf_counter()

    @app.after_request
    def _log_request(response):
        info = getattr(g, "api_version_info", None)
        if not _should_log(info, sample_rate):
            return response

        duration_ms = None
        if hasattr(g, "request_start"):
            duration_ms = round((time.perf_counter() - g.request_start) * 1000, 2)

        logger.info(
            "api_request path=%s method=%s status=%s duration_ms=%s api_version=%s version_status=%s",
            request.path,
            request.method,
            response.status_code,
            duration_ms,
            info.name if info else None,
            info.status.value if info else None,
        )
        return response
