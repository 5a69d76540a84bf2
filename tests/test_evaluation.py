"""
Tests for the evaluation engine.

Validates that:
1. Bindings become a one-row typed context (NULL as pd.NA)
2. Comparisons, arithmetic and NULL logic follow predicate semantics
3. Identifiers resolve exactly, then case-insensitively
4. Every evaluation problem raises EvaluationError with a ReasonCode
"""

import numpy as np
import pandas as pd
import pytest

from expression_validation.rules.constants import RESULT_COLUMN
from expression_validation.rules.errors import (
    EvaluationError,
    OperandTypeError,
    UnknownIdentifierError,
)
from expression_validation.rules.evaluation import EvaluationContext, evaluate
from expression_validation.rules.evaluation.operators import (
    NULL,
    arithmetic,
    compare,
    logical_and,
    logical_or,
)
from expression_validation.types import MemberBinding, ReasonCode


# =============================================================================
# Helper Functions
# =============================================================================

def bind(**values) -> tuple[MemberBinding, ...]:
    """Bindings typed by their values."""
    return tuple(MemberBinding(name, type(value), value) for name, value in values.items())


def null(name: str, declared_type: type) -> MemberBinding:
    return MemberBinding(name, declared_type, None)


# =============================================================================
# Context
# =============================================================================

class TestEvaluationContext:
    """Test the one-row relation."""

    def test_nullable_column_dtypes(self):
        ctx = EvaluationContext.from_bindings(bind(B=True, I=5, F=1.5, S="x"))
        dtypes = {name: str(dtype) for name, dtype in ctx.frame.dtypes.items()}
        assert dtypes == {"B": "boolean", "I": "Int64", "F": "Float64", "S": "string"}

    def test_single_row(self):
        ctx = EvaluationContext.from_bindings(bind(A=1))
        assert len(ctx.frame) == 1

    def test_values_read_back_as_python_scalars(self):
        ctx = EvaluationContext.from_bindings(bind(I=5, B=False))
        assert ctx.get("I") == 5
        assert type(ctx.get("I")) is int
        assert ctx.get("B") is False

    def test_none_is_stored_as_na(self):
        ctx = EvaluationContext.from_bindings([null("Age", int)])
        assert ctx.get("Age") is pd.NA
        assert str(ctx.frame["Age"].dtype) == "Int64"

    def test_numpy_values(self):
        ctx = EvaluationContext.from_bindings([MemberBinding("N", np.int64, np.int64(7))])
        assert ctx.get("N") == 7

    def test_value_not_fitting_type_raises(self):
        with pytest.raises(OperandTypeError, match="does not fit declared type int"):
            EvaluationContext.from_bindings([MemberBinding("Age", int, "abc")])

    def test_unreferenced_member_typed_by_runtime_value(self):
        bindings = [MemberBinding("count", int, 1), MemberBinding("level", int, 2.5)]
        ctx = EvaluationContext.from_bindings(bindings, referenced=["count"])
        assert str(ctx.frame["level"].dtype) == "Float64"
        assert ctx.get("level") == 2.5

    def test_unreferenced_member_without_column_type_left_out(self):
        bindings = [MemberBinding("count", int, 1), MemberBinding("tags", int, [1, 2])]
        ctx = EvaluationContext.from_bindings(bindings, referenced=["count"])
        assert ctx.columns == ["count"]

    def test_referenced_member_keeps_declared_type(self):
        bindings = [MemberBinding("count", int, 1), MemberBinding("level", int, 2.5)]
        with pytest.raises(OperandTypeError, match="does not fit declared type int"):
            EvaluationContext.from_bindings(bindings, referenced=["LEVEL"])

    def test_result_column_is_reserved(self):
        ctx = EvaluationContext.from_bindings(bind(A=1, _is_valid=True))
        assert ctx.columns == ["A"]

    def test_store_and_read_result(self):
        ctx = EvaluationContext.from_bindings(bind(A=1))
        ctx.store_result(True)
        assert str(ctx.frame[RESULT_COLUMN].dtype) == "boolean"
        assert ctx.result is True

    def test_null_result_reads_false(self):
        ctx = EvaluationContext.from_bindings(bind(A=1))
        ctx.store_result(NULL)
        assert ctx.result is False

    def test_requires_exactly_one_row(self):
        with pytest.raises(ValueError, match="exactly one row"):
            EvaluationContext(pd.DataFrame({"A": [1, 2]}))

    def test_to_dict(self):
        ctx = EvaluationContext.from_bindings([null("Name", str), *bind(Age=3)])
        assert ctx.to_dict() == {"Name": None, "Age": 3}


class TestIdentifierResolution:
    """Test exact and case-insensitive lookup."""

    def test_exact_match(self):
        ctx = EvaluationContext.from_bindings(bind(age=1, AGE=2))
        assert ctx.resolve("age") == "age"

    def test_case_insensitive_match(self):
        ctx = EvaluationContext.from_bindings(bind(Age=1))
        assert ctx.resolve("AGE") == "Age"

    def test_ambiguous_match(self):
        ctx = EvaluationContext.from_bindings(bind(age=1, AGE=2))
        with pytest.raises(UnknownIdentifierError, match="Ambiguous identifier 'Age'") as exc_info:
            ctx.resolve("Age")
        assert exc_info.value.reason == ReasonCode.AMBIGUOUS_IDENTIFIER

    def test_unknown_lists_allowed(self):
        ctx = EvaluationContext.from_bindings(bind(B=1, A=2))
        with pytest.raises(UnknownIdentifierError, match="Allowed: A, B") as exc_info:
            ctx.resolve("C")
        assert exc_info.value.reason == ReasonCode.UNKNOWN_IDENTIFIER
        assert exc_info.value.allowed == ["A", "B"]

    def test_unknown_without_members(self):
        ctx = EvaluationContext.from_bindings([])
        with pytest.raises(UnknownIdentifierError, match="No eligible members"):
            ctx.resolve("C")


# =============================================================================
# Operators
# =============================================================================

class TestOperators:
    """Test operator functions directly."""

    def test_kleene_and(self):
        assert logical_and(False, NULL) is False
        assert logical_and(True, NULL) is NULL
        assert logical_and(True, True) is True

    def test_kleene_or(self):
        assert logical_or(True, NULL) is True
        assert logical_or(False, NULL) is NULL
        assert logical_or(False, False) is False

    def test_compare_with_null_is_null(self):
        assert compare("=", NULL, 1) is NULL
        assert compare("<>", "a", None) is NULL

    def test_int_float_promotion(self):
        assert compare("=", 2, 2.0) is True
        assert compare("<", 1, 1.5) is True

    def test_truncated_remainder(self):
        assert arithmetic("%", -7, 2) == -1
        assert arithmetic("%", 7, -2) == 1
        assert arithmetic("%", 7.5, 2) == 1.5

    def test_division_is_float(self):
        assert arithmetic("/", 7, 2) == 3.5

    def test_string_concatenation(self):
        assert arithmetic("+", "foo", "bar") == "foobar"

    def test_arithmetic_with_null(self):
        assert arithmetic("+", 1, NULL) is NULL
        assert arithmetic("/", NULL, 0) is NULL


# =============================================================================
# evaluate()
# =============================================================================

class TestEvaluateComparisons:
    """Test comparison semantics end to end."""

    def test_greater_than(self):
        assert evaluate("PropertyA > PropertyB", bind(PropertyA=7, PropertyB=5)) is True
        assert evaluate("PropertyA > PropertyB", bind(PropertyA=3, PropertyB=5)) is False

    def test_odd_template(self):
        assert evaluate("(Age % 2) <> 0", bind(Age=5)) is True
        assert evaluate("(Age % 2) <> 0", bind(Age=4)) is False

    def test_mod_keyword(self):
        assert evaluate("Age MOD 2 = 1", bind(Age=5)) is True

    def test_modulo_after_multiplication(self):
        assert evaluate("2 % 3 * 4 = 2", ()) is True
        assert evaluate("(2 % 3) * 4 = 8", ()) is True

    def test_arithmetic_precedence(self):
        assert evaluate("1 + 2 * 3 = 7", ()) is True
        assert evaluate("(1 + 2) * 3 = 9", ()) is True

    def test_float_division(self):
        assert evaluate("Height / 2 > 0.8", bind(Height=1.7)) is True

    def test_string_equality_ignores_case(self):
        assert evaluate("Name = 'ADA'", bind(Name="ada")) is True

    def test_string_equality_case_sensitive(self):
        assert evaluate("Name = 'ADA'", bind(Name="ada"), case_sensitive=True) is False

    def test_case_sensitivity_from_config(self, monkeypatch):
        monkeypatch.setenv("EVAL_CASE_SENSITIVE", "true")
        assert evaluate("Name = 'ADA'", bind(Name="ada")) is False

    def test_string_ordering(self):
        assert evaluate("Name < 'b'", bind(Name="Alpha")) is True

    def test_numeric_string_coerced(self):
        assert evaluate("Code = 42", bind(Code="42")) is True
        assert evaluate("Code > 4.5", bind(Code="5")) is True

    def test_bool_member(self):
        assert evaluate("Active", bind(Active=True)) is True
        assert evaluate("Active = FALSE", bind(Active=True)) is False
        assert evaluate("Active = 'true'", bind(Active=True)) is True

    def test_identifier_case_insensitive(self):
        assert evaluate("age > 3", bind(Age=5)) is True

    def test_bracketed_identifier(self):
        bindings = (MemberBinding("Unit Price", float, 2.5),)
        assert evaluate("[Unit Price] > 2", bindings) is True

    def test_numpy_binding(self):
        bindings = (MemberBinding("N", np.float32, np.float32(0.5)),)
        assert evaluate("N * 2 = 1", bindings) is True


class TestEvaluateNullLogic:
    """Test three-valued logic."""

    def test_comparison_against_null_member_is_false(self):
        assert evaluate("Age > 1", [null("Age", int)]) is False
        assert evaluate("Age <= 1", [null("Age", int)]) is False

    def test_is_null(self):
        assert evaluate("Name IS NULL", [null("Name", str)]) is True
        assert evaluate("Name IS NOT NULL", [null("Name", str)]) is False
        assert evaluate("Name IS NOT NULL", bind(Name="x")) is True

    def test_true_or_null(self):
        assert evaluate("TRUE OR NULL", ()) is True
        assert evaluate("A = 1 OR B = 1", [*bind(A=1), null("B", int)]) is True

    def test_false_and_null(self):
        assert evaluate("FALSE AND NULL", ()) is False

    def test_true_and_null_is_false(self):
        assert evaluate("A = 1 AND B = 1", [*bind(A=1), null("B", int)]) is False

    def test_not_null_stays_unknown(self):
        assert evaluate("NOT (B = 1)", [null("B", int)]) is False

    def test_null_equals_null(self):
        assert evaluate("NULL = NULL", ()) is False

    def test_nullable_bool_member(self):
        assert evaluate("Flag OR TRUE", [null("Flag", bool)]) is True
        assert evaluate("Flag", [null("Flag", bool)]) is False

    def test_nan_member_is_null(self):
        assert evaluate("Level IS NULL", bind(Level=float("nan"))) is True
        assert evaluate("Level = Level", bind(Level=float("nan"))) is False


class TestEvaluateErrors:
    """Test failures raise EvaluationError with a ReasonCode."""

    def test_unknown_identifier(self):
        with pytest.raises(UnknownIdentifierError, match="Unknown identifier 'Missing'") as exc_info:
            evaluate("Missing > 1", bind(Age=1))
        assert exc_info.value.reason == ReasonCode.UNKNOWN_IDENTIFIER
        assert exc_info.value.expression == "Missing > 1"

    def test_unknown_identifier_in_short_circuited_branch(self):
        with pytest.raises(UnknownIdentifierError):
            evaluate("TRUE OR Missing = 1", ())

    def test_syntax_error(self):
        with pytest.raises(EvaluationError) as exc_info:
            evaluate("Age > > 1", bind(Age=1))
        assert exc_info.value.reason == ReasonCode.INVALID_SYNTAX

    def test_non_numeric_string(self):
        with pytest.raises(OperandTypeError, match="cannot convert string 'abc'") as exc_info:
            evaluate("Code > 5", bind(Code="abc"))
        assert exc_info.value.reason == ReasonCode.TYPE_MISMATCH

    def test_mistyped_member_outside_expression_is_ignored(self):
        bindings = [MemberBinding("count", int, 1), MemberBinding("level", int, 2.5)]
        assert evaluate("count > 0", bindings) is True
        with pytest.raises(OperandTypeError):
            evaluate("level > 0", bindings)

    def test_bool_against_number(self):
        with pytest.raises(OperandTypeError, match="cannot compare BOOL with INT"):
            evaluate("Active = 1", bind(Active=True))

    def test_logical_operator_on_number(self):
        with pytest.raises(OperandTypeError, match="requires a boolean operand"):
            evaluate("Age AND TRUE", bind(Age=1))

    def test_division_by_zero(self):
        with pytest.raises(OperandTypeError) as exc_info:
            evaluate("Age / 0 > 1", bind(Age=1))
        assert exc_info.value.reason == ReasonCode.DIVISION_BY_ZERO

    def test_modulo_by_zero(self):
        with pytest.raises(EvaluationError) as exc_info:
            evaluate("Age % Zero = 0", bind(Age=1, Zero=0))
        assert exc_info.value.reason == ReasonCode.DIVISION_BY_ZERO

    def test_non_boolean_result(self):
        with pytest.raises(EvaluationError, match="must evaluate to a boolean") as exc_info:
            evaluate("Age + 1", bind(Age=1))
        assert exc_info.value.reason == ReasonCode.NON_BOOLEAN_RESULT

    def test_error_to_dict(self):
        with pytest.raises(EvaluationError) as exc_info:
            evaluate("Missing > 1", ())
        assert exc_info.value.to_dict() == {
            "reason": "UNKNOWN_IDENTIFIER",
            "message": "Unknown identifier 'Missing'. No eligible members",
            "expression": "Missing > 1",
        }
