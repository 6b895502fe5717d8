"""
Rule Mapping Engine - project declarative validation rules onto schema nodes.

One rule table, two call sites:
- Body shapes: rules apply to object.properties[member]; required-ness goes into
  the object's `required` list (apply_to_object)
- Bound parameters: rules apply to the parameter's own schema; required-ness sets
  the parameter's required flag (apply_to_parameter)

Rules apply in declaration order. When several rules target the same facet, the
last one wins (two MaxLength rules -> the second bound is documented).
Descriptions accumulate instead of overwriting.
"""

import logging
from typing import Callable, Dict, Iterable, Optional

from ..openapi.schema_node import SchemaNode
from .registry import RuleDescriptor
from .rules import (
    AllowedContentTypes,
    AllowedExtensions,
    Between,
    Comparison,
    ComparisonOperator,
    CreditCard,
    Email,
    Equality,
    EqualityOperator,
    IsEnum,
    Length,
    Matches,
    MaxFileSize,
    MaxLength,
    MinLength,
    NotEmpty,
    NotNull,
    Rule,
    ScalePrecision,
)


logger = logging.getLogger('api.rules')


# Exact regex source -> human-readable description, used instead of `pattern`
WELL_KNOWN_PATTERNS: Dict[str, str] = {
    r"[A-Z]": "Must contain at least one uppercase letter",
    r"[a-z]": "Must contain at least one lowercase letter",
    r"[0-9]": "Must contain at least one digit",
    r"\d": "Must contain at least one digit",
    r"[^a-zA-Z0-9]": "Must contain at least one special character",
    r"[\W]": "Must contain at least one special character",
    r"^\S+$": "Must not contain whitespace",
    r"^\S*$": "Must not contain whitespace",
    r"^[^\s]+$": "Must not contain whitespace",
    r"^\d+$": "Must contain only digits",
    r"^[a-zA-Z]+$": "Must contain only letters",
    r"^[a-zA-Z0-9]+$": "Must contain only letters and digits",
}

CREDIT_CARD_DESCRIPTION = "Must be a valid credit card number"


def format_file_size(size_in_bytes: int) -> str:
    """
    Binary-unit size with one decimal.

    Examples:
        512 -> "512 bytes"
        2048 -> "2.0 KB"
        5 * 1024 * 1024 -> "5.0 MB"
    """
    if size_in_bytes >= 1_073_741_824:
        return f"{size_in_bytes / 1_073_741_824:.1f} GB"
    if size_in_bytes >= 1_048_576:
        return f"{size_in_bytes / 1_048_576:.1f} MB"
    if size_in_bytes >= 1_024:
        return f"{size_in_bytes / 1_024:.1f} KB"
    return f"{size_in_bytes} bytes"


def _format_value(value) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


# =============================================================================
# RULE TABLE
# =============================================================================

def apply_rule(
    schema: SchemaNode,
    rule: Rule,
    mark_required: Optional[Callable[[], None]] = None,
) -> None:
    """
    Apply one rule to one schema node.

    Args:
        schema: Node for the member (property schema or parameter schema)
        rule: The rule to project
        mark_required: Called for NotNull/NotEmpty; where required-ness lives
            depends on the call site

    Raises:
        TypeError: For an object that is not a known rule kind
    """
    if isinstance(rule, (NotNull, NotEmpty)):
        if mark_required is not None:
            mark_required()

    elif isinstance(rule, MaxLength):
        schema.max_length = rule.max

    elif isinstance(rule, MinLength):
        schema.min_length = rule.min

    elif isinstance(rule, Length):
        schema.min_length = rule.min
        schema.max_length = rule.max

    elif isinstance(rule, Comparison):
        _apply_comparison(schema, rule)

    elif isinstance(rule, Between):
        schema.minimum = rule.low
        schema.maximum = rule.high

    elif isinstance(rule, Email):
        schema.format = "email"

    elif isinstance(rule, CreditCard):
        schema.append_description(CREDIT_CARD_DESCRIPTION)

    elif isinstance(rule, Matches):
        _apply_regex(schema, rule.pattern)

    elif isinstance(rule, IsEnum):
        names = ", ".join(member.name for member in rule.enum_type)
        schema.append_description(f"Allowed values: {names}")

    elif isinstance(rule, Equality):
        if rule.operator == EqualityOperator.NOT_EQUAL:
            schema.append_description(f"Must not equal: {_format_value(rule.value)}")
        else:
            schema.append_description(f"Must equal: {_format_value(rule.value)}")

    elif isinstance(rule, ScalePrecision):
        schema.append_description(
            f"Max {rule.scale} decimal places, {rule.precision} digits total"
        )

    elif isinstance(rule, MaxFileSize):
        schema.append_description(f"Max file size: {format_file_size(rule.max_size_in_bytes)}")

    elif isinstance(rule, AllowedContentTypes):
        schema.append_description(f"Allowed types: {', '.join(rule.content_types)}")

    elif isinstance(rule, AllowedExtensions):
        schema.append_description(f"Allowed extensions: {', '.join(rule.extensions)}")

    else:
        raise TypeError(f"Unknown rule kind: {type(rule).__name__}")


def _apply_comparison(schema: SchemaNode, rule: Comparison) -> None:
    if rule.operator == ComparisonOperator.GREATER_THAN:
        schema.minimum = rule.value
        schema.exclusive_minimum = True
    elif rule.operator == ComparisonOperator.GREATER_THAN_OR_EQUAL:
        schema.minimum = rule.value
    elif rule.operator == ComparisonOperator.LESS_THAN:
        schema.maximum = rule.value
        schema.exclusive_maximum = True
    elif rule.operator == ComparisonOperator.LESS_THAN_OR_EQUAL:
        schema.maximum = rule.value


def _apply_regex(schema: SchemaNode, expression: str) -> None:
    description = WELL_KNOWN_PATTERNS.get(expression)
    if description is not None:
        schema.append_description(description)
    else:
        schema.pattern = expression


def apply_rules(
    schema: SchemaNode,
    rules: Iterable[Rule],
    mark_required: Optional[Callable[[], None]] = None,
) -> None:
    for rule in rules:
        apply_rule(schema, rule, mark_required)


# =============================================================================
# CALL SITES
# =============================================================================

def apply_to_object(descriptor: Optional[RuleDescriptor], schema: SchemaNode) -> int:
    """
    Body case: apply a descriptor to an object schema's properties.

    Members with no matching property are skipped. NotNull/NotEmpty add the
    matched property name to the object's required list.

    Returns:
        Number of members that matched a property
    """
    if not descriptor or not schema.properties:
        return 0

    matched = 0
    for member, rules in descriptor.items():
        property_name = schema.find_property(member)
        if property_name is None:
            logger.debug(f"No schema property for rule member '{member}'")
            continue
        matched += 1
        apply_rules(
            schema.properties[property_name],
            rules,
            mark_required=lambda name=property_name: schema.add_required(name),
        )
    return matched


class BoundParameter:
    """
    Parameter case target: one externally bound parameter's schema plus the
    required flag that lives on the parameter, not in any object.
    """

    def __init__(self, name: str, location: str, schema: SchemaNode,
                 required: bool = False, member: Optional[str] = None):
        self.name = name
        self.location = location
        self.schema = schema
        self.required = required
        # Member name on the container model (matched against rule descriptors)
        self.member = member or name

    def mark_required(self) -> None:
        self.required = True

    def to_dict(self) -> dict:
        out = {
            "name": self.name,
            "in": self.location,
            "required": True if self.location == "path" else self.required,
            "schema": self.schema.to_dict(),
        }
        if self.schema.description:
            out["description"] = self.schema.description
        return out


def _find_member_rules(descriptor: RuleDescriptor, parameter: BoundParameter):
    for candidate in (parameter.member, parameter.name):
        folded = candidate.casefold()
        for member, rules in descriptor.items():
            if member.casefold() == folded:
                return rules
    return None


def apply_to_parameters(
    descriptor: Optional[RuleDescriptor],
    parameters: Iterable[BoundParameter],
) -> int:
    """
    Parameter case: apply a container model's descriptor to its bound parameters.

    Returns:
        Number of parameters that had rules
    """
    if not descriptor:
        return 0

    matched = 0
    for parameter in parameters:
        rules = _find_member_rules(descriptor, parameter)
        if rules is None:
            continue
        matched += 1
        apply_rules(parameter.schema, rules, mark_required=parameter.mark_required)
    return matched
