"""
Contract Registry - which data shapes each versioned endpoint binds.

Each endpoint has:
- version: registry key of the API version it belongs to ("v1")
- query / path_params: models whose fields are bound as query or route parameters
- body: request body model
- response: success response model

The document builder reads these registrations instead of reflecting over routes.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Type

from flask import Blueprint
from pydantic import BaseModel


logger = logging.getLogger('api.contracts')

HTTP_METHODS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE')


@dataclass
class EndpointContract:
    """Complete contract for one operation of one API version."""
    version: str                                   # e.g., "v1"
    method: str                                    # GET / POST / PUT / PATCH / DELETE
    path: str                                      # e.g., "/api/products/{id}"
    query: Optional[Type[BaseModel]] = None
    path_params: Optional[Type[BaseModel]] = None
    body: Optional[Type[BaseModel]] = None
    response: Optional[Type[BaseModel]] = None
    summary: str = ""
    tags: List[str] = field(default_factory=list)
    operation_id: Optional[str] = None
    deprecated: bool = False

    def __post_init__(self):
        self.method = self.method.upper()
        if self.method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method for contract: {self.method}")
        if not self.path.startswith('/'):
            self.path = '/' + self.path

    @property
    def key(self) -> str:
        return f"{self.version.lower()} {self.method} {self.path}"

    def shapes(self) -> List[Type[BaseModel]]:
        """Body and response models (the documented component schemas)."""
        return [m for m in (self.body, self.response) if m is not None]


class ContractRegistry:
    """Ordered registry of endpoint contracts, grouped by version name."""

    def __init__(self):
        self._contracts: Dict[str, EndpointContract] = {}

    def register(self, contract: EndpointContract) -> EndpointContract:
        """
        Register an endpoint contract.

        Re-registering the same version/method/path replaces the previous entry
        (hot reload, tests).
        """
        if contract.key in self._contracts:
            logger.debug(f"Replacing contract '{contract.key}'")
        self._contracts[contract.key] = contract
        return contract

    def for_version(self, name: str) -> List[EndpointContract]:
        key = name.casefold()
        return [c for c in self._contracts.values() if c.version.casefold() == key]

    def versions(self) -> List[str]:
        seen: List[str] = []
        for contract in self._contracts.values():
            if contract.version not in seen:
                seen.append(contract.version)
        return seen

    def clear(self) -> None:
        self._contracts.clear()

    def __iter__(self) -> Iterator[EndpointContract]:
        return iter(list(self._contracts.values()))

    def __len__(self) -> int:
        return len(self._contracts)


# Global registry instance
CONTRACTS = ContractRegistry()


def register_contract(contract: EndpointContract) -> EndpointContract:
    """Register an endpoint contract in the global registry."""
    return CONTRACTS.register(contract)


def get_contracts(version: str) -> List[EndpointContract]:
    """Contracts registered for a version name in the global registry."""
    return CONTRACTS.for_version(version)


def _openapi_path(rule: str) -> str:
    """Flask rule to OpenAPI path: /items/<int:item_id> -> /items/{item_id}."""
    out = []
    i = 0
    while i < len(rule):
        if rule[i] == '<':
            end = rule.index('>', i)
            name = rule[i + 1:end].split(':')[-1]
            out.append('{' + name + '}')
            i = end + 1
        else:
            out.append(rule[i])
            i += 1
    return ''.join(out)


def contract_route(
    blueprint: Blueprint,
    rule: str,
    version: str,
    methods: Optional[List[str]] = None,
    query: Optional[Type[BaseModel]] = None,
    path_params: Optional[Type[BaseModel]] = None,
    body: Optional[Type[BaseModel]] = None,
    response: Optional[Type[BaseModel]] = None,
    summary: str = "",
    tags: Optional[List[str]] = None,
    registry: Optional[ContractRegistry] = None,
) -> Callable:
    """
    Decorator that registers a Flask route and its contract together.

    Usage:
        @contract_route(products_v1, "/products", "v1", methods=["POST"],
                        body=CreateProduct, response=ProductOut)
        def create_product():
            ...
    """
    methods = [m.upper() for m in (methods or ['GET'])]
    target = registry if registry is not None else CONTRACTS
    prefix = blueprint.url_prefix or ''

    def decorator(fn: Callable) -> Callable:
        for method in methods:
            target.register(EndpointContract(
                version=version,
                method=method,
                path=_openapi_path(prefix + rule),
                query=query,
                path_params=path_params,
                body=body,
                response=response,
                summary=summary or (fn.__doc__ or '').strip().split('\n')[0],
                tags=list(tags or []),
                operation_id=fn.__name__ if len(methods) == 1 else f"{fn.__name__}_{method.lower()}",
            ))
        return blueprint.route(rule, methods=methods)(fn)

    return decorator
