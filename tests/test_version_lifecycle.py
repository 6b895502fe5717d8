"""
Version lifecycle middleware tests.

Covers both the standalone middleware (bare Flask app, no negotiation layer in
front) and the full application stack.
"""

from datetime import datetime, timezone

from flask import Flask, jsonify
from werkzeug.http import http_date

from api_lifecycle.api.middleware import setup_error_handlers, setup_version_lifecycle_middleware
from api_lifecycle.api.middleware.version_lifecycle import lifecycle_headers, resolve_version_name


SUNSET_V2 = http_date(datetime(2026, 12, 31, tzinfo=timezone.utc))
DEPRECATION_V3 = http_date(datetime(2027, 6, 30, tzinfo=timezone.utc))


def _build_test_app(registry, calls):
    app = Flask(__name__)

    @app.route("/api/ping", methods=["GET"])
    def ping():
        calls.append("ping")
        return jsonify({"status": "ok"})

    setup_version_lifecycle_middleware(app, registry, exempt_prefixes=["/openapi"])
    setup_error_handlers(app)
    app.config["TESTING"] = True
    return app


class TestResolveVersionName:
    def test_missing_header_uses_default_major(self, registry):
        assert resolve_version_name(registry, None) == "v3"
        assert resolve_version_name(registry, "  ") == "v3"

    def test_header_forms(self, registry):
        assert resolve_version_name(registry, "2") == "v2"
        assert resolve_version_name(registry, "2.7") == "v2"
        assert resolve_version_name(registry, "v1.0.0") == "v1"

    def test_unparsable_header(self, registry):
        assert resolve_version_name(registry, "latest") is None


class TestSunsetVersions:
    def test_sunset_returns_410_without_calling_handler(self, registry):
        calls = []
        client = _build_test_app(registry, calls).test_client()

        response = client.get("/api/ping", headers={"X-API-Version": "1"})

        assert response.status_code == 410
        assert response.mimetype == "application/problem+json"
        assert calls == []

        body = response.get_json()
        assert body["type"] == "https://httpstatuses.io/410"
        assert body["title"] == "Gone"
        assert body["status"] == 410
        assert body["detail"] == (
            "API version v1 has reached end-of-life and no longer accepts requests."
        )
        assert body["instance"] == "/api/ping"
        assert body["migrateToVersion"] == "3.1.0"
        assert response.headers["X-API-Version-Status"] == "sunset"

    def test_retired_and_obsolete_are_sunset(self, settings):
        from api_lifecycle.versioning import VersionRegistry

        settings["versions"][1]["status"] = "Retired"
        settings["versions"][3]["status"] = "obsolete"
        registry = VersionRegistry.from_mapping(settings)
        calls = []
        client = _build_test_app(registry, calls).test_client()

        assert client.get("/api/ping", headers={"X-API-Version": "2"}).status_code == 410
        assert client.get("/api/ping", headers={"X-API-Version": "4.0"}).status_code == 410
        assert calls == []

    def test_sunset_through_full_stack(self, client, handler_calls):
        response = client.get("/api/products", headers={"X-API-Version": "v1"})
        assert response.status_code == 410
        assert response.get_json()["migrateToVersion"] == "3.1.0"
        assert handler_calls == []


class TestDeprecatedVersions:
    def test_deprecated_headers_and_handler_runs(self, registry):
        calls = []
        client = _build_test_app(registry, calls).test_client()

        response = client.get("/api/ping", headers={"X-API-Version": "2"})

        assert response.status_code == 200
        assert calls == ["ping"]
        assert response.headers["X-API-Version-Status"] == "deprecated"
        assert response.headers["Deprecation"] == "true"
        assert response.headers["Sunset"] == SUNSET_V2
        assert response.headers["X-API-Info"] == (
            "This API version is deprecated. Please migrate to v3.1.0"
        )

    def test_deprecated_without_sunset_date(self, settings):
        from api_lifecycle.versioning import VersionRegistry

        del settings["versions"][1]["sunsetDate"]
        headers = lifecycle_headers(
            VersionRegistry.from_mapping(settings),
            VersionRegistry.from_mapping(settings).lookup("v2"),
        )
        assert headers["Deprecation"] == "true"
        assert "Sunset" not in headers


class TestActiveVersions:
    def test_scheduled_deprecation_sends_date(self, registry):
        calls = []
        client = _build_test_app(registry, calls).test_client()

        response = client.get("/api/ping", headers={"X-API-Version": "3"})

        assert response.status_code == 200
        assert response.headers["X-API-Version-Status"] == "active"
        assert response.headers["Deprecation"] == DEPRECATION_V3
        assert "Sunset" not in response.headers
        assert "X-API-Info" not in response.headers

    def test_no_header_uses_default_version(self, registry):
        client = _build_test_app(registry, []).test_client()
        response = client.get("/api/ping")
        assert response.headers["X-API-Version-Status"] == "active"

    def test_beta_without_dates_only_reports_status(self, registry):
        client = _build_test_app(registry, []).test_client()
        response = client.get("/api/ping", headers={"X-API-Version": "4"})
        assert response.headers["X-API-Version-Status"] == "beta"
        assert "Deprecation" not in response.headers


class TestPassThrough:
    def test_unknown_version_is_not_annotated(self, registry):
        calls = []
        client = _build_test_app(registry, calls).test_client()

        response = client.get("/api/ping", headers={"X-API-Version": "9"})

        assert response.status_code == 200
        assert calls == ["ping"]
        assert "X-API-Version-Status" not in response.headers

    def test_exempt_paths_skip_lifecycle(self, registry):
        app = _build_test_app(registry, [])

        @app.route("/openapi/ping")
        def docs_ping():
            return jsonify({"status": "ok"})

        response = app.test_client().get("/openapi/ping", headers={"X-API-Version": "1"})
        assert response.status_code == 200
        assert "X-API-Version-Status" not in response.headers
