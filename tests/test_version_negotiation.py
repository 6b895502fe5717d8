"""
Version negotiation tests - header parsing, 400 for unsupported versions,
supported/deprecated version reporting.
"""

import pytest

from api_lifecycle.versioning import parse_requested_version, version_key


class TestParseRequestedVersion:
    @pytest.mark.parametrize("raw,major,minor,patch", [
        ("2", 2, None, None),
        ("2.1", 2, 1, None),
        ("v2.1.3", 2, 1, 3),
        ("V10", 10, None, None),
        (" 3 ", 3, None, None),
    ])
    def test_valid_forms(self, raw, major, minor, patch):
        requested = parse_requested_version(raw)
        assert (requested.major, requested.minor, requested.patch) == (major, minor, patch)
        assert requested.registry_key == f"v{major}"

    @pytest.mark.parametrize("raw", [None, "", "latest", "2.x", "1.2.3.4", "v"])
    def test_invalid_forms(self, raw):
        assert parse_requested_version(raw) is None

    def test_version_key(self):
        assert version_key(7) == "v7"

    def test_str_keeps_given_components(self):
        assert str(parse_requested_version("v2.1")) == "2.1"


class TestNegotiationMiddleware:
    def test_unknown_major_is_rejected(self, client, handler_calls):
        response = client.get("/api/products", headers={"X-API-Version": "9"})

        assert response.status_code == 400
        assert response.mimetype == "application/problem+json"
        body = response.get_json()
        assert body["title"] == "Unsupported API Version"
        assert body["supportedVersions"] == ["1.0.0", "2.0.0", "3.1.0", "4.0.0"]
        assert "'9'" in body["detail"]
        assert handler_calls == []

    def test_malformed_version_is_rejected(self, client):
        response = client.get("/api/products", headers={"X-API-Version": "latest"})
        assert response.status_code == 400

    def test_minor_version_resolves_to_major_entry(self, client, handler_calls):
        response = client.get("/api/products", headers={"X-API-Version": "3.0"})
        assert response.status_code == 200
        assert handler_calls == ["list_products"]

    def test_version_report_headers(self, client):
        response = client.get("/api/products")
        assert response.headers["api-supported-versions"] == "3.1.0, 4.0.0"
        assert response.headers["api-deprecated-versions"] == "1.0.0, 2.0.0"

    def test_rejected_response_still_reports_versions(self, client):
        response = client.get("/api/products", headers={"X-API-Version": "9"})
        assert response.headers["api-supported-versions"] == "3.1.0, 4.0.0"

    def test_docs_are_exempt(self, client):
        response = client.get("/openapi", headers={"X-API-Version": "9"})
        assert response.status_code == 200

    def test_custom_header_name(self, settings, contracts, rules, handler_calls):
        from api_lifecycle.app import create_app
        from sample_contracts import SampleConfig, create_products_blueprint

        class HeaderConfig(SampleConfig):
            API_VERSION_HEADER = "Api-Version"

        app = create_app(
            settings=settings,
            contracts=contracts,
            rules=rules,
            blueprints=[create_products_blueprint(contracts, handler_calls)],
            config=HeaderConfig,
        )
        client = app.test_client()

        assert client.get("/api/products", headers={"Api-Version": "1"}).status_code == 410
        assert client.get("/api/products", headers={"X-API-Version": "1"}).status_code == 200
