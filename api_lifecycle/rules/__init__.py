"""
Declarative validation rules and their projection onto documentation schemas.
"""

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
    equal,
    exclusive_between,
    greater_than,
    greater_than_or_equal,
    inclusive_between,
    less_than,
    less_than_or_equal,
    not_equal,
)
from .registry import RULES, RuleDescriptor, RuleRegistry, get_rules, register_rules
from .mapper import (
    BoundParameter,
    WELL_KNOWN_PATTERNS,
    apply_rule,
    apply_rules,
    apply_to_object,
    apply_to_parameters,
    format_file_size,
)

__all__ = [
    'AllowedContentTypes',
    'AllowedExtensions',
    'Between',
    'Comparison',
    'ComparisonOperator',
    'CreditCard',
    'Email',
    'Equality',
    'EqualityOperator',
    'IsEnum',
    'Length',
    'Matches',
    'MaxFileSize',
    'MaxLength',
    'MinLength',
    'NotEmpty',
    'NotNull',
    'Rule',
    'ScalePrecision',
    'equal',
    'exclusive_between',
    'greater_than',
    'greater_than_or_equal',
    'inclusive_between',
    'less_than',
    'less_than_or_equal',
    'not_equal',
    'RULES',
    'RuleDescriptor',
    'RuleRegistry',
    'get_rules',
    'register_rules',
    'BoundParameter',
    'WELL_KNOWN_PATTERNS',
    'apply_rule',
    'apply_rules',
    'apply_to_object',
    'apply_to_parameters',
    'format_file_size',
]
