"""
Contracts registered in the global registries on import (CLI --contracts target).
"""

from api_lifecycle.api.contracts import ContractModel, EndpointContract, register_contract
from api_lifecycle.rules import MaxLength, NotEmpty, register_rules


class OrderIn(ContractModel):
    reference: str
    quantity: int = 1


register_contract(EndpointContract(version="v2", method="POST", path="/api/orders", body=OrderIn))
register_rules(OrderIn, {"Reference": [NotEmpty(), MaxLength(32)]})
