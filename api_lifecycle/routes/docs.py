"""
Documentation endpoints.

Endpoints:
- GET {prefix}              - UI listing: display options + documents, newest first
- GET {prefix}/<name>.json  - one version's OpenAPI document

These paths are exempt from version negotiation and lifecycle handling.
"""

import logging

from flask import Blueprint, jsonify, url_for

from ..api.middleware.error_envelope import make_problem_response
from ..openapi.document import DocumentCatalog
from ..versioning.registry import VersionRegistry


logger = logging.getLogger('api.openapi')


def create_docs_blueprint(
    catalog: DocumentCatalog,
    registry: VersionRegistry,
    url_prefix: str,
) -> Blueprint:
    """
    Blueprint serving the pre-built documents.

    Args:
        catalog: Documents built at startup
        registry: Version registry (display options, listing order)
        url_prefix: Mount point, e.g. "/openapi"
    """
    docs_bp = Blueprint('api_docs', __name__, url_prefix=url_prefix)

    @docs_bp.route("", methods=["GET"])
    def list_documents():
        """Documents for the UI's version picker, newest first."""
        docs = registry.docs
        return jsonify({
            "title": docs.title,
            "theme": docs.theme,
            "layout": docs.layout,
            "servers": [s.model_dump(exclude_none=True) for s in docs.servers],
            "documents": [
                {
                    "name": v.name,
                    "title": v.title or "API",
                    "version": v.semantic_version,
                    "status": v.status.value,
                    "url": url_for("api_docs.get_document", name=v.name),
                }
                for v in catalog.listing()
            ],
        })

    @docs_bp.route("/<name>.json", methods=["GET"])
    def get_document(name: str):
        """One version's OpenAPI document."""
        document = catalog.get(name)
        if document is None:
            logger.debug(f"No document for requested version '{name}'")
            return make_problem_response(
                status=404,
                title="Not Found",
                detail=f"No API document for version '{name}'.",
            )
        return jsonify(document)

    return docs_bp
