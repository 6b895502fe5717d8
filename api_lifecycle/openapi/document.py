"""
Schema Assembly - one finished OpenAPI document per configured version.

For each version:
1. Base schemas for every body/response shape and every parameter container
   (pydantic JSON Schema, nested definitions inlined)
2. Type fixers (numeric disambiguation, enum-as-string)
3. Rule mapping: body shapes through apply_to_object, bound parameters through
   apply_to_parameters
4. Render info/servers/paths/components; recursive models left as refs get their
   own component

All documents are built once, at startup, into an immutable DocumentCatalog.
There is no lazy fill and no invalidation; configuration changes need a restart.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, Type

from pydantic import BaseModel

from ..api.contracts.registry import CONTRACTS, ContractRegistry, EndpointContract
from ..constants import OPENAPI_VERSION
from ..rules.mapper import BoundParameter, apply_to_object, apply_to_parameters
from ..rules.registry import RULES, RuleRegistry
from ..versioning.models import VersionInfo
from ..versioning.registry import VersionRegistry
from ..versioning.status import INACTIVE_STATUSES
from .generator import base_schema, parameter_members
from .schema_node import REF_PREFIX, SchemaNode
from .transformers import apply_type_fixers


logger = logging.getLogger('api.openapi')

JSON_CONTENT_TYPE = 'application/json'


def document_version_string(version: VersionInfo) -> str:
    """Info version, e.g. "v1.0.0 (Active)"."""
    return f"v{version.semantic_version} ({version.status.display_name})"


def build_shape_schema(model: Type[BaseModel], rules: RuleRegistry) -> SchemaNode:
    """
    Finished schema for a body/response shape.

    Every object node tagged with a model that has a rule descriptor gets the body
    case of the rule mapper, so nested shapes are annotated too.
    """
    node = base_schema(model)
    apply_type_fixers(node)
    for each in list(node.walk()):
        if each.properties and each.python_type is not None:
            apply_to_object(rules.rules_for(each.python_type), each)
    return node


def build_parameters(
    model: Type[BaseModel],
    location: str,
    rules: RuleRegistry,
) -> List[BoundParameter]:
    """
    Bound parameters for a query/path container model.

    Each field becomes one parameter with its own schema; the container model's
    rule descriptor is applied in the parameter case. Path parameters keep the
    field name, which is the variable name in the route template.
    """
    container = base_schema(model)
    field_names = dict(parameter_members(model))

    parameters = []
    for name, schema in container.properties.items():
        apply_type_fixers(schema)
        parameters.append(BoundParameter(
            name=field_names.get(name, name) if location == "path" else name,
            location=location,
            schema=schema,
            required=name in container.required,
            member=field_names.get(name, name),
        ))

    apply_to_parameters(rules.rules_for(model), parameters)
    return parameters


def _schema_ref(model: Type[BaseModel]) -> Dict[str, str]:
    return {"$ref": f"{REF_PREFIX}{model.__name__}"}


def _collect_refs(node: SchemaNode, refs: Dict[str, type]) -> None:
    """Record the classes behind refs left in a tree (recursive models)."""
    for each in node.walk():
        if each.ref is not None and each.python_type is not None:
            refs.setdefault(each.ref, each.python_type)


class DocumentBuilder:
    """
    Builds OpenAPI documents from the version registry, the contract registry and
    the rule registry.

    Building is a pure function of those three inputs.
    """

    def __init__(
        self,
        registry: VersionRegistry,
        contracts: Optional[ContractRegistry] = None,
        rules: Optional[RuleRegistry] = None,
    ):
        self.registry = registry
        self.contracts = contracts if contracts is not None else CONTRACTS
        self.rules = rules if rules is not None else RULES

    def build(self, version: VersionInfo) -> Dict[str, Any]:
        contracts = self.contracts.for_version(version.name)
        version_deprecated = version.status in INACTIVE_STATUSES

        shapes: Dict[str, Type[BaseModel]] = {}
        for contract in contracts:
            for model in contract.shapes():
                existing = shapes.setdefault(model.__name__, model)
                if existing is not model:
                    logger.warning(
                        f"Shape name collision in {version.name}: "
                        f"{existing.__module__}.{existing.__name__} vs {model.__module__}.{model.__name__}"
                    )

        refs: Dict[str, type] = {}
        paths: Dict[str, Dict[str, Any]] = {}
        for contract in contracts:
            operation = self._operation(contract, version_deprecated, refs)
            paths.setdefault(contract.path, {})[contract.method.lower()] = operation

        # Registered shapes first, then every model still referenced by name
        schemas: Dict[str, Dict[str, Any]] = {}
        pending = list(shapes.items()) + list(refs.items())
        while pending:
            name, model = pending.pop(0)
            if name in schemas:
                continue
            node = build_shape_schema(model, self.rules)
            schemas[name] = node.to_dict()
            _collect_refs(node, refs)
            pending.extend((ref, tp) for ref, tp in refs.items() if ref not in schemas)

        document = {
            "openapi": OPENAPI_VERSION,
            "info": {
                "title": version.title or "API",
                "description": version.description or "",
                "version": document_version_string(version),
            },
            "paths": paths,
            "components": {"schemas": schemas},
        }

        servers = [
            {k: v for k, v in (("url", s.url), ("description", s.description)) if v}
            for s in self.registry.docs.servers
        ]
        if servers:
            document["servers"] = servers

        logger.info(
            f"Built API document {version.name}: {len(schemas)} schema(s), "
            f"{len(contracts)} operation(s)"
        )
        return document

    def _operation(
        self,
        contract: EndpointContract,
        version_deprecated: bool,
        refs: Dict[str, type],
    ) -> Dict[str, Any]:
        operation: Dict[str, Any] = {}
        if contract.operation_id:
            operation["operationId"] = contract.operation_id
        if contract.summary:
            operation["summary"] = contract.summary
        if contract.tags:
            operation["tags"] = list(contract.tags)

        parameters: List[BoundParameter] = []
        if contract.path_params is not None:
            parameters.extend(build_parameters(contract.path_params, "path", self.rules))
        if contract.query is not None:
            parameters.extend(build_parameters(contract.query, "query", self.rules))
        for parameter in parameters:
            _collect_refs(parameter.schema, refs)
        if parameters:
            operation["parameters"] = [p.to_dict() for p in parameters]

        if contract.body is not None:
            operation["requestBody"] = {
                "required": True,
                "content": {JSON_CONTENT_TYPE: {"schema": _schema_ref(contract.body)}},
            }

        success: Dict[str, Any] = {"description": "Success"}
        if contract.response is not None:
            success["content"] = {JSON_CONTENT_TYPE: {"schema": _schema_ref(contract.response)}}
        operation["responses"] = {"200": success}

        if contract.deprecated or version_deprecated:
            operation["deprecated"] = True
        return operation

    def build_all(self) -> "DocumentCatalog":
        """Build every configured version's document, once."""
        documents = {v.name: self.build(v) for v in self.registry.versions}
        return DocumentCatalog(self.registry, documents)


class DocumentCatalog(Mapping):
    """
    Immutable map of version name -> built document.

    Lookup by name is case-insensitive; listing() orders versions newest first.
    """

    def __init__(self, registry: VersionRegistry, documents: Mapping[str, Dict[str, Any]]):
        self._registry = registry
        self._documents = MappingProxyType(dict(documents))

    def __getitem__(self, name: str) -> Dict[str, Any]:
        document = self.get(name)
        if document is None:
            raise KeyError(name)
        return document

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, name, default=None):
        version = self._registry.lookup(name)
        if version is None:
            return default
        return self._documents.get(version.name, default)

    def listing(self) -> List[VersionInfo]:
        """Versions with a document, newest first."""
        return [v for v in self._registry.documents_listing() if v.name in self._documents]


def build_documents(
    registry: VersionRegistry,
    contracts: Optional[ContractRegistry] = None,
    rules: Optional[RuleRegistry] = None,
) -> DocumentCatalog:
    """Build the document catalog for all configured versions."""
    return DocumentBuilder(registry, contracts, rules).build_all()
