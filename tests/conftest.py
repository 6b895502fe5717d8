"""
Shared pytest fixtures.

Provides:
- Sample versioning settings (sunset v1, deprecated v2, active v3, beta v4)
- Isolated contract/rule registries (the global ones are never touched)
- app / client fixtures built through create_app
"""

import copy

import pytest

from api_lifecycle.api.contracts import ContractRegistry
from api_lifecycle.app import create_app
from api_lifecycle.rules import RuleRegistry
from api_lifecycle.versioning import VersionRegistry

from sample_contracts import SampleConfig, create_products_blueprint, register_shop_rules


SAMPLE_SETTINGS = {
    "versions": [
        {"name": "v1", "semanticVersion": "1.0.0", "status": "Sunset"},
        {
            "name": "v2",
            "semanticVersion": "2.0.0",
            "status": "Deprecated",
            "sunsetDate": "2026-12-31T00:00:00Z",
        },
        {
            "name": "v3",
            "semanticVersion": "3.1.0",
            "status": "Active",
            "deprecationDate": "2027-06-30T00:00:00Z",
            "title": "Shop API",
            "description": "Products and orders",
        },
        {"name": "v4", "semanticVersion": "4.0.0", "status": "Beta"},
    ],
    "docs": {
        "title": "Shop API Reference",
        "theme": "purple",
        "servers": [{"url": "https://api.example.com", "description": "Production"}],
    },
}


@pytest.fixture
def settings():
    """Fresh copy of the sample versioning section."""
    return copy.deepcopy(SAMPLE_SETTINGS)


@pytest.fixture
def registry(settings):
    return VersionRegistry.from_mapping(settings)


@pytest.fixture
def contracts():
    return ContractRegistry()


@pytest.fixture
def rules():
    return register_shop_rules(RuleRegistry())


@pytest.fixture
def handler_calls():
    """Spy: names of the product handlers that actually ran."""
    return []


@pytest.fixture
def app(settings, contracts, rules, handler_calls):
    """Create test Flask application."""
    products = create_products_blueprint(contracts, handler_calls)
    app = create_app(
        settings=settings,
        contracts=contracts,
        rules=rules,
        blueprints=[products],
        config=SampleConfig,
    )
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
