"""
Contract registration tests.
"""

import pytest
from flask import Blueprint, Flask

from api_lifecycle.api.contracts import ContractRegistry, EndpointContract, contract_route
from api_lifecycle.api.contracts.registry import _openapi_path
from api_lifecycle.app import get_state
from api_lifecycle.rules import NotEmpty, RuleRegistry

from sample_contracts import ProductIn, ProductOut


class TestEndpointContract:
    def test_normalizes_method_and_path(self):
        contract = EndpointContract("v1", "post", "items", body=ProductIn, response=ProductOut)
        assert contract.method == "POST"
        assert contract.path == "/items"
        assert contract.key == "v1 POST /items"
        assert contract.shapes() == [ProductIn, ProductOut]

    def test_rejects_unknown_method(self):
        with pytest.raises(ValueError, match="Unsupported HTTP method"):
            EndpointContract("v1", "TRACE", "/items")


class TestContractRegistry:
    def test_same_key_replaces(self):
        registry = ContractRegistry()
        registry.register(EndpointContract("v1", "GET", "/a", summary="first"))
        registry.register(EndpointContract("v1", "GET", "/a", summary="second"))
        assert len(registry) == 1
        assert registry.for_version("v1")[0].summary == "second"

    def test_grouped_by_version(self):
        registry = ContractRegistry()
        registry.register(EndpointContract("v2", "GET", "/a"))
        registry.register(EndpointContract("v1", "GET", "/a"))
        registry.register(EndpointContract("v2", "POST", "/a"))

        assert registry.versions() == ["v2", "v1"]
        assert [c.method for c in registry.for_version("V2")] == ["GET", "POST"]

        registry.clear()
        assert list(registry) == []


class TestContractRoute:
    def test_registers_route_and_contracts(self):
        registry = ContractRegistry()
        items = Blueprint("items", __name__, url_prefix="/api/items")

        @contract_route(items, "/<int:item_id>", "v1", methods=["GET", "PUT"],
                        body=ProductIn, registry=registry)
        def item(item_id):
            """Read or replace one item.

            Longer description.
            """
            return {"id": item_id}

        contracts = registry.for_version("v1")
        assert [c.path for c in contracts] == ["/api/items/{item_id}"] * 2
        assert [c.operation_id for c in contracts] == ["item_get", "item_put"]
        assert contracts[0].summary == "Read or replace one item."

        app = Flask(__name__)
        app.register_blueprint(items)
        assert app.test_client().get("/api/items/3").get_json() == {"id": 3}

    @pytest.mark.parametrize("rule,expected", [
        ("/items", "/items"),
        ("/items/<item_id>", "/items/{item_id}"),
        ("/a/<int:a_id>/b/<path:rest>", "/a/{a_id}/b/{rest}"),
    ])
    def test_openapi_path(self, rule, expected):
        assert _openapi_path(rule) == expected


class TestRuleRegistryShapes:
    def test_shapes_in_registration_order(self):
        registry = RuleRegistry()
        registry.register(ProductOut, {"Id": [NotEmpty()]})
        registry.register(ProductIn, {"Name": [NotEmpty()]})
        assert registry.shapes() == [ProductOut, ProductIn]


def test_app_state_holds_startup_artifacts(app):
    state = get_state(app)
    assert state.registry.default_version().name == "v3"
    assert state.version_header == "X-API-Version"
    assert set(state.documents) == {"v1", "v2", "v3", "v4"}


def test_invalid_configuration_prevents_startup(settings):
    from api_lifecycle.app import create_app
    from api_lifecycle.versioning import ConfigurationError
    from sample_contracts import SampleConfig

    settings["versions"][3]["status"] = "Current"
    with pytest.raises(ConfigurationError, match="Only one version"):
        create_app(settings=settings, contracts=ContractRegistry(), rules=RuleRegistry(),
                   config=SampleConfig)
