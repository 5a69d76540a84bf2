"""
Tests for the validation orchestrator and ExpressionRule.

Validates that:
1. Blank expressions always succeed
2. True/False results become success/failure outcomes
3. Failure messages name the member, or the type for whole-object rules
4. Evaluation errors propagate instead of becoming failures
5. Outcomes reflect current member values (no caching across calls)
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

import pytest

from expression_validation import (
    SUCCESS,
    EvaluationError,
    ExpressionRule,
    MemberDescriptor,
    ReasonCode,
    Templates,
    UnknownIdentifierError,
    validate,
)
from expression_validation.validator import format_message

if TYPE_CHECKING:
    from decimal import Decimal


# =============================================================================
# Candidate types
# =============================================================================

@dataclass
class Person:
    Name: Optional[str] = None
    Age: int = 0
    Tags: list = field(default_factory=list)

    @property
    def Adult(self) -> bool:
        return self.Age >= 18


@dataclass
class Pair:
    PropertyA: int = 0
    PropertyB: int = 0


class Settings:
    def __init__(self):
        self.nullable = 5


@dataclass
class Reading:
    count: int = 0
    level: int = 0


@dataclass
class Order:
    quantity: "int" = 0
    discount: "Optional[Decimal]" = None


# =============================================================================
# Tests
# =============================================================================

class TestBlankExpression:
    """Blank expressions mean no constraint."""

    @pytest.mark.parametrize("expression", [None, "", "   ", "\t\n"])
    def test_blank_succeeds(self, expression):
        assert validate(expression, object()) is SUCCESS

    def test_blank_rule_is_default(self):
        rule = ExpressionRule(None)
        assert rule.is_default
        assert rule.validate(Person()).success


class TestTemplates:
    """Test named templates against a member."""

    def test_odd_age_succeeds(self):
        outcome = validate(Templates.IsOdd, Person(Age=5), member_name="Age")
        assert outcome.success
        assert outcome.message is None
        assert outcome.member_names == ()

    def test_even_age_fails(self):
        outcome = validate(Templates.IsOdd, Person(Age=4), member_name="Age")
        assert not outcome
        assert outcome.member_names == ("Age",)
        assert outcome.message == "The field Age is invalid."

    def test_is_not_null(self):
        assert not validate(Templates.IsNotNull, Person(), "Name")
        assert validate(Templates.IsNotNull, Person(Name="Ada"), "Name")

    def test_is_null(self):
        assert validate(Templates.IsNull, Person(), "Name")

    @pytest.mark.parametrize("template,value,expected", [
        (Templates.IsPositive, 1, True),
        (Templates.IsPositive, 0, False),
        (Templates.IsNegative, -1, True),
        (Templates.IsZero, 0, True),
        (Templates.IsPositiveOrZero, 0, True),
        (Templates.IsNegativeOrZero, 1, False),
        (Templates.IsEven, 4, True),
        (Templates.IsOdd, -3, True),
    ])
    def test_numeric_templates(self, template, value, expected):
        assert validate(template, Person(Age=value), "Age").success is expected


class TestWholeObjectRules:
    """Test expressions over several members."""

    def test_property_comparison(self):
        pair = Pair(PropertyA=3, PropertyB=5)
        outcome = validate("PropertyA > PropertyB", pair)
        assert not outcome.success
        assert outcome.member_names == ()
        assert outcome.message == "The field Pair is invalid."

        pair.PropertyA = 7
        assert validate("PropertyA > PropertyB", pair).success

    def test_language_style_operators(self):
        person = Person(Name="Ada", Age=36)
        assert validate("Name != null && !(Age == 0)", person)
        assert validate("Name == null || Age > 18", person)

    def test_comparison_with_null_member_fails(self):
        assert not validate("Name = 'Ada'", Person())

    def test_identifier_with_null_fragment(self):
        assert validate("nullable > 1", Settings())

    def test_mapping_candidate(self):
        assert validate("{0} > 0", {"Quantity": 3}, member_name="Quantity")


class TestMessages:
    """Test failure message formatting."""

    def test_custom_message(self):
        outcome = validate(Templates.IsOdd, Person(Age=4), "Age", error_message="{0} must be odd")
        assert outcome.message == "Age must be odd"

    def test_default_message_from_config(self, monkeypatch):
        monkeypatch.setenv("EVAL_DEFAULT_MESSAGE", "Check {0}.")
        outcome = validate("Age > 1", Person(Age=0))
        assert outcome.message == "Check Person."

    def test_format_message(self):
        assert format_message(Pair(), None, "{0}!") == "Pair!"
        assert format_message(Pair(), "PropertyA", "{0}!") == "PropertyA!"

    def test_empty_member_name_is_still_a_member(self):
        assert format_message(Pair(), "", "[{0}]") == "[]"
        outcome = validate("PropertyA > 0", Pair(), member_name="")
        assert outcome.message == "The field  is invalid."
        assert outcome.member_names == ("",)

    def test_outcome_to_dict(self):
        outcome = validate(Templates.IsOdd, Person(Age=4), "Age")
        assert outcome.to_dict() == {
            "success": False,
            "message": "The field Age is invalid.",
            "member_names": ["Age"],
        }


class TestEvaluationErrors:
    """Configuration defects raise instead of failing validation."""

    def test_read_only_member_is_unknown(self):
        with pytest.raises(UnknownIdentifierError) as exc_info:
            validate("Adult = TRUE", Person(Age=30))
        assert exc_info.value.reason == ReasonCode.UNKNOWN_IDENTIFIER

    def test_non_primitive_member_is_unknown(self):
        with pytest.raises(UnknownIdentifierError, match="Unknown identifier 'Tags'"):
            validate("Tags IS NULL", Person())

    def test_syntax_error(self):
        with pytest.raises(EvaluationError) as exc_info:
            validate("Age >", Person())
        assert exc_info.value.reason == ReasonCode.UNEXPECTED_END

    def test_placeholder_without_member(self):
        with pytest.raises(EvaluationError) as exc_info:
            validate(Templates.IsOdd, Person(Age=3))
        assert exc_info.value.reason == ReasonCode.UNBOUND_PLACEHOLDER

    def test_explicit_members_expose_property(self):
        members = [MemberDescriptor("Adult", bool), MemberDescriptor("Age", int)]
        assert validate("Adult AND Age > 20", Person(Age=30), members=members)

    def test_explicit_members_hide_others(self):
        with pytest.raises(UnknownIdentifierError):
            validate("Name IS NULL", Person(), members=[MemberDescriptor("Age", int)])


class TestDeclaredTypes:
    """Annotations that do not match the running values."""

    def test_type_checking_only_import_keeps_other_members(self):
        assert validate("{0} > 0", Order(quantity=2), member_name="quantity")
        assert not validate("{0} > 0", Order(quantity=0), member_name="quantity")

    def test_mistyped_member_outside_expression(self):
        assert validate("count > 0", Reading(count=1, level=2.5))

    def test_mistyped_member_in_expression_raises(self):
        with pytest.raises(EvaluationError) as exc_info:
            validate("level > 0", Reading(count=1, level=2.5))
        assert exc_info.value.reason == ReasonCode.TYPE_MISMATCH


class TestNoCaching:
    def test_outcome_follows_current_values(self):
        person = Person(Age=3)
        assert validate(Templates.IsOdd, person, "Age")
        person.Age = 8
        assert not validate(Templates.IsOdd, person, "Age")
        person.Age = 9
        assert validate(Templates.IsOdd, person, "Age")


class TestExpressionRule:
    """Test the declaration value type."""

    def test_equality_ignores_message(self):
        assert ExpressionRule("A > B", "first") == ExpressionRule("A > B", "second")
        assert ExpressionRule("A > B") != ExpressionRule("A >= B")

    def test_hash_follows_expression(self):
        rules = {ExpressionRule("A > B", "first"), ExpressionRule("A > B", "second")}
        assert len(rules) == 1

    def test_is_default(self):
        assert not ExpressionRule(Templates.IsOdd).is_default

    def test_validate_uses_message(self):
        rule = ExpressionRule(Templates.IsOdd, "{0} must be odd")
        outcome = rule.validate(Person(Age=4), member_name="Age")
        assert outcome.message == "Age must be odd"
        assert outcome.member_names == ("Age",)

    def test_is_immutable(self):
        rule = ExpressionRule("A > B")
        with pytest.raises(AttributeError):
            rule.expression = "A < B"
