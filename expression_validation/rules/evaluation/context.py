"""
Evaluation context: one-row typed relation built from member bindings.

Each eligible binding becomes a column with a nullable pandas dtype, so a
None value is stored as pd.NA rather than silently widening the column to
object or float. The expression result is written back into the synthetic
boolean column RESULT_COLUMN and read from there.

A context lives for one evaluation and is never shared.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Optional

import numpy as np
import pandas as pd

from ...types import MemberBinding, ReasonCode, ValueType
from ..constants import RESULT_COLUMN
from ..errors import OperandTypeError, UnknownIdentifierError

# Column dtype per binding type
COLUMN_DTYPES = {
    ValueType.BOOL: "boolean",
    ValueType.INT: "Int64",
    ValueType.FLOAT: "Float64",
    ValueType.STRING: "string",
}


def _column(binding: MemberBinding) -> pd.api.extensions.ExtensionArray:
    dtype = COLUMN_DTYPES.get(binding.value_type)
    if dtype is None:
        raise OperandTypeError(
            f"Member '{binding.name}' has unsupported type {binding.declared_type!r}"
        )
    value = None if binding.is_missing else binding.value
    try:
        return pd.array([value], dtype=dtype)
    except (TypeError, ValueError, OverflowError) as e:
        raise OperandTypeError(
            f"Member '{binding.name}' value {binding.value!r} does not fit "
            f"declared type {getattr(binding.declared_type, '__name__', binding.declared_type)}: {e}"
        ) from e


def _loose_column(binding: MemberBinding) -> Optional[pd.api.extensions.ExtensionArray]:
    """Column for an unreferenced member; retyped by its value, or None when nothing fits."""
    for candidate in (binding, replace(binding, declared_type=type(binding.value))):
        if candidate.value_type == ValueType.UNKNOWN:
            continue
        try:
            return _column(candidate)
        except OperandTypeError:
            continue
    return None


def _to_python(value: Any) -> Any:
    if value is pd.NA:
        return value
    if isinstance(value, np.generic):
        return value.item()
    return value


class EvaluationContext:
    """
    A single-row relation of bound member values.

    Attributes:
        frame: One-row DataFrame, one column per binding
        case_sensitive: Whether string comparisons respect case

    Example:
        ctx = EvaluationContext.from_bindings(bindings)
        ctx.get("Age")          # 5
        ctx.store_result(True)
        ctx.result              # True
    """

    def __init__(self, frame: pd.DataFrame, case_sensitive: bool = False):
        if len(frame.index) != 1:
            raise ValueError(f"EvaluationContext requires exactly one row, got {len(frame.index)}")
        self.frame = frame
        self.case_sensitive = case_sensitive
        self._lookup = {name.casefold(): [] for name in frame.columns}
        for name in frame.columns:
            self._lookup[name.casefold()].append(name)

    @classmethod
    def from_bindings(
        cls,
        bindings: Iterable[MemberBinding],
        case_sensitive: bool = False,
        referenced: Optional[Iterable[str]] = None,
    ) -> "EvaluationContext":
        """
        Build the one-row relation from eligible bindings.

        Args:
            bindings: Eligible member bindings
            case_sensitive: String comparison mode
            referenced: Identifiers the expression uses. A member outside
                this set whose value does not fit its declared type is
                typed by its runtime value instead, or left out. None
                holds every member to its declared type.

        Raises:
            OperandTypeError: If a referenced value does not fit its declared type
        """
        used = None if referenced is None else {name.casefold() for name in referenced}
        columns: dict[str, Any] = {}
        for binding in bindings:
            if binding.name == RESULT_COLUMN:
                continue
            if used is None or binding.name.casefold() in used:
                columns[binding.name] = _column(binding)
                continue
            column = _loose_column(binding)
            if column is not None:
                columns[binding.name] = column
        frame = pd.DataFrame(columns, index=pd.RangeIndex(1))
        return cls(frame, case_sensitive=case_sensitive)

    @property
    def columns(self) -> list[str]:
        return [c for c in self.frame.columns if c != RESULT_COLUMN]

    def resolve(self, name: str) -> str:
        """
        Resolve an identifier to a column name.

        Exact match first, then a unique case-insensitive match.

        Raises:
            UnknownIdentifierError: No column or more than one candidate
        """
        if name in self.frame.columns and name != RESULT_COLUMN:
            return name
        candidates = self._lookup.get(name.casefold(), [])
        if len(candidates) == 1:
            return candidates[0]
        if len(candidates) > 1:
            raise UnknownIdentifierError(
                name, candidates, reason=ReasonCode.AMBIGUOUS_IDENTIFIER
            )
        raise UnknownIdentifierError(name, self.columns)

    def get(self, name: str) -> Any:
        """Return the current value of a column as a Python scalar or pd.NA."""
        column = self.resolve(name)
        return _to_python(self.frame.at[0, column])

    def store_result(self, value: Any) -> None:
        """Write the expression result into the computed boolean column."""
        self.frame[RESULT_COLUMN] = pd.array([value], dtype="boolean")

    @property
    def result(self) -> bool:
        """Computed result; an unknown (NULL) result reads as False."""
        value = self.frame.at[0, RESULT_COLUMN]
        if value is pd.NA:
            return False
        return bool(value)

    def to_dict(self) -> dict[str, Any]:
        """Row as a plain dict (NULL as None), for logging."""
        return {
            name: (None if value is pd.NA else value)
            for name, value in ((c, _to_python(self.frame.at[0, c])) for c in self.frame.columns)
        }

    def __repr__(self) -> str:
        return f"EvaluationContext({self.to_dict()!r})"


__all__ = ["COLUMN_DTYPES", "EvaluationContext"]
