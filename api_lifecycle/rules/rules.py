"""
Declarative validation rule kinds.

Each rule is a frozen dataclass (a tagged variant). Rules only describe constraints
for documentation; enforcement happens in the request handlers and may drift from
what is documented.

The custom upload constraints (MaxFileSize, AllowedContentTypes, AllowedExtensions)
are a small closed set with explicit fields.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Tuple, Type, Union

Number = Union[int, float, Decimal]


class ComparisonOperator(str, Enum):
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="


class EqualityOperator(str, Enum):
    EQUAL = "=="
    NOT_EQUAL = "!="


class Rule:
    """Marker base class for all rule kinds."""
    __slots__ = ()


@dataclass(frozen=True)
class NotNull(Rule):
    pass


@dataclass(frozen=True)
class NotEmpty(Rule):
    pass


@dataclass(frozen=True)
class MaxLength(Rule):
    max: int


@dataclass(frozen=True)
class MinLength(Rule):
    min: int


@dataclass(frozen=True)
class Length(Rule):
    min: int
    max: int


@dataclass(frozen=True)
class Comparison(Rule):
    operator: ComparisonOperator
    value: Number

    def __post_init__(self):
        object.__setattr__(self, 'operator', ComparisonOperator(self.operator))


@dataclass(frozen=True)
class Between(Rule):
    """Range rule. Documented as minimum/maximum whether inclusive or not."""
    low: Number
    high: Number
    inclusive: bool = True


@dataclass(frozen=True)
class Email(Rule):
    pass


@dataclass(frozen=True)
class CreditCard(Rule):
    pass


@dataclass(frozen=True)
class Matches(Rule):
    pattern: str


@dataclass(frozen=True)
class IsEnum(Rule):
    enum_type: Type[Enum]


@dataclass(frozen=True)
class Equality(Rule):
    operator: EqualityOperator
    value: object

    def __post_init__(self):
        object.__setattr__(self, 'operator', EqualityOperator(self.operator))


@dataclass(frozen=True)
class ScalePrecision(Rule):
    scale: int
    precision: int


@dataclass(frozen=True)
class MaxFileSize(Rule):
    max_size_in_bytes: int


@dataclass(frozen=True)
class AllowedContentTypes(Rule):
    content_types: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'content_types', tuple(self.content_types))


@dataclass(frozen=True)
class AllowedExtensions(Rule):
    extensions: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # ".pdf" and "pdf" are the same extension
        normalized = tuple(e if e.startswith('.') else f'.{e}' for e in self.extensions)
        object.__setattr__(self, 'extensions', normalized)


# =============================================================================
# CONVENIENCE CONSTRUCTORS
# =============================================================================

def greater_than(value: Number) -> Comparison:
    return Comparison(ComparisonOperator.GREATER_THAN, value)


def greater_than_or_equal(value: Number) -> Comparison:
    return Comparison(ComparisonOperator.GREATER_THAN_OR_EQUAL, value)


def less_than(value: Number) -> Comparison:
    return Comparison(ComparisonOperator.LESS_THAN, value)


def less_than_or_equal(value: Number) -> Comparison:
    return Comparison(ComparisonOperator.LESS_THAN_OR_EQUAL, value)


def inclusive_between(low: Number, high: Number) -> Between:
    return Between(low, high, inclusive=True)


def exclusive_between(low: Number, high: Number) -> Between:
    return Between(low, high, inclusive=False)


def equal(value) -> Equality:
    return Equality(EqualityOperator.EQUAL, value)


def not_equal(value) -> Equality:
    return Equality(EqualityOperator.NOT_EQUAL, value)
