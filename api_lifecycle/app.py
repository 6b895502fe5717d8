"""
Flask Application Factory - versioned API host.

Startup order matters:
1. Version registry (invariants checked, ConfigurationError aborts startup)
2. Versioned blueprints (their contract_route decorators have already registered
   contracts at import time)
3. Documents built once into an immutable catalog
4. Middleware: negotiation -> lifecycle -> request logging
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from flask import Blueprint, Flask
from flask_cors import CORS

from .api.contracts.registry import ContractRegistry
from .api.middleware import (
    setup_error_handlers,
    setup_request_logging_middleware,
    setup_version_lifecycle_middleware,
    setup_version_negotiation_middleware,
)
from .api.serializers import ContractJSONProvider
from .config import Config, configure_logging, load_versioning_config
from .constants import LIFECYCLE_HEADERS
from .openapi.document import DocumentCatalog, build_documents
from .routes import create_docs_blueprint
from .rules.registry import RuleRegistry
from .versioning.registry import RegistrySource, VersionRegistry, build_registry


logger = logging.getLogger('api.app')

EXTENSION_KEY = 'api_lifecycle'


@dataclass(frozen=True)
class LifecycleState:
    """Everything built at startup, stored in app.extensions['api_lifecycle']."""
    registry: VersionRegistry
    documents: DocumentCatalog
    version_header: str


def get_state(app: Flask) -> LifecycleState:
    return app.extensions[EXTENSION_KEY]


def create_app(
    settings: RegistrySource = None,
    contracts: Optional[ContractRegistry] = None,
    rules: Optional[RuleRegistry] = None,
    blueprints: Iterable[Blueprint] = (),
    config: type = Config,
) -> Flask:
    """
    Create the Flask application.

    Args:
        settings: VersionRegistry, VersioningSettings or raw mapping. Defaults to
            the file named by API_VERSIONING_CONFIG.
        contracts: Contract registry (defaults to the global one)
        rules: Rule registry (defaults to the global one)
        blueprints: Versioned API blueprints to register
        config: Settings class

    Raises:
        ConfigurationError: Invalid versioning configuration. Not caught: the
            process must not start.
    """
    configure_logging(config.LOG_LEVEL)

    if settings is None:
        settings = load_versioning_config(config.API_VERSIONING_CONFIG)
    registry = build_registry(settings)

    app = Flask(__name__)
    app.config.from_object(config)
    app.json = ContractJSONProvider(app)

    CORS(app,
         resources={r"/*": {"origins": "*"}},
         methods=["GET", "POST", "OPTIONS", "PUT", "PATCH", "DELETE"],
         allow_headers=["Content-Type", "Authorization", config.API_VERSION_HEADER],
         expose_headers=LIFECYCLE_HEADERS,
         supports_credentials=False,
         send_wildcard=True)

    for blueprint in blueprints:
        app.register_blueprint(blueprint)

    documents = build_documents(registry, contracts, rules)
    app.extensions[EXTENSION_KEY] = LifecycleState(
        registry=registry,
        documents=documents,
        version_header=config.API_VERSION_HEADER,
    )

    exempt = [config.API_DOCS_PREFIX, app.static_url_path or '/static']

    # Negotiation must run first: lifecycle assumes unknown versions were rejected
    setup_version_negotiation_middleware(
        app, registry, header_name=config.API_VERSION_HEADER, exempt_prefixes=exempt,
    )
    setup_version_lifecycle_middleware(
        app, registry, header_name=config.API_VERSION_HEADER, exempt_prefixes=exempt,
    )
    setup_request_logging_middleware(
        app,
        enabled=config.REQUEST_LOG_ENABLED,
        sample_rate=config.REQUEST_LOG_SAMPLE_RATE,
    )
    setup_error_handlers(app)

    if config.API_DOCS_ENABLED:
        app.register_blueprint(create_docs_blueprint(documents, registry, config.API_DOCS_PREFIX))

    logger.info(
        f"API ready: {len(registry)} version(s), default {registry.default_version().name}, "
        f"{len(documents)} document(s)"
    )
    return app
