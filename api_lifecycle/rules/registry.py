"""
Rule Registry - explicit mapping from data shape to its rule descriptor.

A rule descriptor maps member names (as declared by the validation layer, usually
PascalCase) to an ordered list of rules:

    register_rules(CreateProduct, {
        "Name": [NotEmpty(), MaxLength(200)],
        "Price": [greater_than(0)],
    })

Populated at startup alongside contract registration; the document builder only
reads it.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Type

from .rules import Rule


logger = logging.getLogger('api.rules')

RuleDescriptor = Dict[str, List[Rule]]


class RuleRegistry:
    """Data shape -> RuleDescriptor."""

    def __init__(self):
        self._descriptors: Dict[type, RuleDescriptor] = {}

    def register(self, shape: type, descriptor: Mapping[str, Iterable[Rule]]) -> RuleDescriptor:
        """
        Register rules for a shape. Registering the same shape again appends to each
        member's list, keeping declaration order.
        """
        merged = self._descriptors.setdefault(shape, {})
        for member, rules in descriptor.items():
            rule_list = list(rules)
            for rule in rule_list:
                if not isinstance(rule, Rule):
                    raise TypeError(
                        f"Rule for {shape.__name__}.{member} must be a Rule, got {type(rule).__name__}"
                    )
            merged.setdefault(member, []).extend(rule_list)
        logger.debug(f"Registered rules for {shape.__name__}: {sorted(merged)}")
        return merged

    def rules_for(self, shape: Optional[type]) -> Optional[RuleDescriptor]:
        if shape is None:
            return None
        return self._descriptors.get(shape)

    def __contains__(self, shape) -> bool:
        return shape in self._descriptors

    def shapes(self) -> List[type]:
        return list(self._descriptors)

    def clear(self) -> None:
        self._descriptors.clear()


# Global registry instance
RULES = RuleRegistry()


def register_rules(shape: Type, descriptor: Mapping[str, Iterable[Rule]]) -> RuleDescriptor:
    """Register a rule descriptor in the global registry."""
    return RULES.register(shape, descriptor)


def get_rules(shape: Type) -> Optional[RuleDescriptor]:
    """Rule descriptor for a shape from the global registry."""
    return RULES.rules_for(shape)
