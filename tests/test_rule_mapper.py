"""
Rule Mapping Engine tests - the rule -> constraint table and both call sites.
"""

from enum import Enum

import pytest

from api_lifecycle.openapi.schema_node import SchemaNode
from api_lifecycle.rules import (
    AllowedContentTypes,
    AllowedExtensions,
    BoundParameter,
    CreditCard,
    Email,
    IsEnum,
    Length,
    Matches,
    MaxFileSize,
    MaxLength,
    MinLength,
    NotEmpty,
    NotNull,
    Rule,
    RuleRegistry,
    ScalePrecision,
    apply_rule,
    apply_rules,
    apply_to_object,
    apply_to_parameters,
    equal,
    exclusive_between,
    format_file_size,
    greater_than,
    greater_than_or_equal,
    inclusive_between,
    less_than,
    less_than_or_equal,
    not_equal,
)


class Role(Enum):
    USER = 1
    ADMIN = 2


def _string():
    return SchemaNode(types={"string"})


def _object(*names):
    return SchemaNode(types={"object"}, properties={n: _string() for n in names})


class TestRuleTable:
    def test_length_rules(self):
        schema = _string()
        apply_rules(schema, [MinLength(2), MaxLength(10)])
        assert (schema.min_length, schema.max_length) == (2, 10)

        apply_rule(schema, Length(3, 5))
        assert (schema.min_length, schema.max_length) == (3, 5)

    @pytest.mark.parametrize("rule,minimum,maximum,excl_min,excl_max", [
        (greater_than(0), 0, None, True, False),
        (greater_than_or_equal(1), 1, None, False, False),
        (less_than(100), None, 100, False, True),
        (less_than_or_equal(99), None, 99, False, False),
    ])
    def test_comparisons(self, rule, minimum, maximum, excl_min, excl_max):
        schema = SchemaNode(types={"integer"})
        apply_rule(schema, rule)
        assert schema.minimum == minimum
        assert schema.maximum == maximum
        assert schema.exclusive_minimum is excl_min
        assert schema.exclusive_maximum is excl_max

    def test_between_sets_bounds_for_both_kinds(self):
        inclusive = SchemaNode(types={"integer"})
        apply_rule(inclusive, inclusive_between(1, 5))
        exclusive = SchemaNode(types={"integer"})
        apply_rule(exclusive, exclusive_between(1, 5))

        for schema in (inclusive, exclusive):
            assert (schema.minimum, schema.maximum) == (1, 5)
            assert not schema.exclusive_minimum

    def test_email_sets_format(self):
        schema = _string()
        apply_rule(schema, Email())
        assert schema.format == "email"

    def test_credit_card_description(self):
        schema = _string()
        apply_rule(schema, CreditCard())
        assert schema.description == "Must be a valid credit card number"

    def test_well_known_regex_becomes_description(self):
        schema = _string()
        apply_rule(schema, Matches(r"^\d+$"))
        assert schema.description == "Must contain only digits"
        assert schema.pattern is None
        assert "pattern" not in schema.to_dict()

    def test_unknown_regex_is_kept_verbatim(self):
        schema = _string()
        apply_rule(schema, Matches(r"^[A-Z]{3}-\d{4}$"))
        assert schema.pattern == r"^[A-Z]{3}-\d{4}$"
        assert schema.description is None

    def test_is_enum_lists_member_names(self):
        schema = _string()
        apply_rule(schema, IsEnum(Role))
        assert schema.description == "Allowed values: USER, ADMIN"

    def test_equality_descriptions(self):
        schema = _string()
        apply_rules(schema, [equal("yes"), not_equal(True)])
        assert schema.description == "Must equal: yes. Must not equal: true"

    def test_scale_precision(self):
        schema = SchemaNode(types={"number"})
        apply_rule(schema, ScalePrecision(2, 10))
        assert schema.description == "Max 2 decimal places, 10 digits total"

    def test_upload_rules(self):
        schema = _string()
        apply_rules(schema, [
            MaxFileSize(5 * 1024 * 1024),
            AllowedContentTypes(["image/png", "image/jpeg"]),
            AllowedExtensions(["png", ".jpg"]),
        ])
        assert schema.description == (
            "Max file size: 5.0 MB. "
            "Allowed types: image/png, image/jpeg. "
            "Allowed extensions: .png, .jpg"
        )

    def test_descriptions_accumulate(self):
        schema = SchemaNode(types={"string"}, description="Card number")
        apply_rules(schema, [CreditCard(), Matches("[A-Z]")])
        assert schema.description == (
            "Card number. Must be a valid credit card number. "
            "Must contain at least one uppercase letter"
        )

    def test_last_write_wins(self):
        schema = _string()
        apply_rules(schema, [MaxLength(100), MaxLength(200), MinLength(5), Length(1, 50)])
        assert schema.max_length == 50
        assert schema.min_length == 1

    def test_required_rules_without_call_site_are_ignored(self):
        schema = _string()
        apply_rules(schema, [NotNull(), NotEmpty()])
        assert schema.to_dict() == {"type": "string"}

    def test_unknown_rule_kind(self):
        class Custom(Rule):
            pass

        with pytest.raises(TypeError, match="Custom"):
            apply_rule(_string(), Custom())


class TestFormatFileSize:
    @pytest.mark.parametrize("size,expected", [
        (512, "512 bytes"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (10 * 1024 * 1024, "10.0 MB"),
        (3 * 1024 ** 3, "3.0 GB"),
    ])
    def test_units(self, size, expected):
        assert format_file_size(size) == expected


class TestObjectCallSite:
    def test_not_empty_and_max_length_on_same_member(self):
        schema = _object("name", "email")
        matched = apply_to_object({"Name": [NotEmpty(), MaxLength(200)]}, schema)

        assert matched == 1
        assert schema.required == ["name"]
        assert schema.properties["name"].max_length == 200
        assert schema.to_dict()["properties"]["name"]["maxLength"] == 200

    def test_required_is_not_duplicated(self):
        schema = _object("name")
        schema.required = ["name"]
        apply_to_object({"Name": [NotNull(), NotEmpty()]}, schema)
        assert schema.required == ["name"]

    def test_case_insensitive_member_match(self):
        schema = _object("unitPrice", "sku")
        apply_to_object({"UNITPRICE": [greater_than(0)], "Sku": [MaxLength(8)]}, schema)
        assert schema.properties["unitPrice"].minimum == 0
        assert schema.properties["sku"].max_length == 8

    def test_unmatched_members_are_skipped(self):
        schema = _object("name")
        assert apply_to_object({"Missing": [NotEmpty()]}, schema) == 0
        assert schema.required == []

    def test_no_descriptor(self):
        assert apply_to_object(None, _object("name")) == 0


class TestParameterCallSite:
    def test_required_lives_on_parameter(self):
        page = BoundParameter("page", "query", SchemaNode(types={"integer"}))
        search = BoundParameter("search", "query", _string())

        matched = apply_to_parameters(
            {"Page": [greater_than_or_equal(1)], "Search": [NotEmpty(), MaxLength(50)]},
            [page, search],
        )

        assert matched == 2
        assert page.required is False
        assert search.required is True
        assert search.schema.required == []
        assert search.to_dict() == {
            "name": "search",
            "in": "query",
            "required": True,
            "schema": {"type": "string", "maxLength": 50},
        }

    def test_matches_by_field_name_or_wire_name(self):
        by_member = BoundParameter("pageSize", "query", SchemaNode(types={"integer"}),
                                   member="page_size")
        apply_to_parameters({"PAGE_SIZE": [less_than_or_equal(100)]}, [by_member])
        assert by_member.schema.maximum == 100

        by_name = BoundParameter("pageSize", "query", SchemaNode(types={"integer"}),
                                 member="page_size")
        apply_to_parameters({"PageSize": [less_than_or_equal(50)]}, [by_name])
        assert by_name.schema.maximum == 50

    def test_path_parameters_are_always_required(self):
        parameter = BoundParameter("id", "path", SchemaNode(types={"integer"}))
        assert parameter.to_dict()["required"] is True

    def test_description_is_copied_to_parameter(self):
        parameter = BoundParameter("code", "query", _string())
        apply_to_parameters({"Code": [Matches("^[a-zA-Z]+$")]}, [parameter])
        assert parameter.to_dict()["description"] == "Must contain only letters"


class TestRuleRegistry:
    def test_register_appends_in_order(self):
        registry = RuleRegistry()
        registry.register(dict, {"Name": [MaxLength(10)]})
        registry.register(dict, {"Name": [MaxLength(20)], "Email": [Email()]})

        descriptor = registry.rules_for(dict)
        assert descriptor["Name"] == [MaxLength(10), MaxLength(20)]
        assert dict in registry
        assert registry.rules_for(list) is None

    def test_rejects_non_rules(self):
        with pytest.raises(TypeError, match="must be a Rule"):
            RuleRegistry().register(dict, {"Name": ["max:10"]})
