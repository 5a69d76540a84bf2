"""
Expression validation type definitions.

Enums and dataclasses shared by the normalizer, the member binder,
the evaluator and the validator.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import Any

import numpy as np
import pandas as pd


class ReasonCode(IntEnum):
    """
    Reason codes for evaluation errors.

    Every EvaluationError carries a ReasonCode so callers can tell an
    authoring mistake apart from an internal fault without parsing messages.
    """

    OK = 0

    # Grammar errors
    INVALID_SYNTAX = auto()  # Normalized expression does not parse
    UNEXPECTED_END = auto()  # Expression ended before a complete term

    # Binding errors
    UNKNOWN_IDENTIFIER = auto()  # Identifier is not an eligible member
    AMBIGUOUS_IDENTIFIER = auto()  # Case-insensitive lookup matched twice
    UNBOUND_PLACEHOLDER = auto()  # {0} used without a member name

    # Operand errors
    TYPE_MISMATCH = auto()  # Operands cannot be coerced for the operator
    DIVISION_BY_ZERO = auto()  # Divisor or modulus is zero
    NON_BOOLEAN_RESULT = auto()  # Expression evaluated to a non-boolean

    # Internal
    INTERNAL_ERROR = auto()


class ValueType(IntEnum):
    """
    Value types for operand coercion.

    Mirrors the column types of the evaluation context. MISSING is the
    NULL marker (None, NaN, pd.NA).
    """

    UNKNOWN = 0
    BOOL = auto()
    INT = auto()
    FLOAT = auto()
    STRING = auto()
    MISSING = auto()

    @property
    def is_numeric(self) -> bool:
        return self in (ValueType.INT, ValueType.FLOAT)

    @classmethod
    def from_value(cls, value: Any) -> "ValueType":
        """
        Determine ValueType from a Python or numpy value.

        Args:
            value: Any Python value

        Returns:
            Appropriate ValueType enum
        """
        if value is None or value is pd.NA:
            return cls.MISSING
        if isinstance(value, (bool, np.bool_)):
            return cls.BOOL
        if isinstance(value, (int, np.integer)):
            return cls.INT
        if isinstance(value, (float, np.floating)):
            if math.isnan(value):
                return cls.MISSING
            return cls.FLOAT
        if isinstance(value, str):
            return cls.STRING
        return cls.UNKNOWN

    @classmethod
    def from_type(cls, declared_type: Any) -> "ValueType":
        """
        Determine ValueType from a declared member type.

        bool is checked before int because bool subclasses int.
        """
        if not isinstance(declared_type, type):
            return cls.UNKNOWN
        if issubclass(declared_type, (bool, np.bool_)):
            return cls.BOOL
        if issubclass(declared_type, (int, np.integer)):
            return cls.INT
        if issubclass(declared_type, (float, np.floating)):
            return cls.FLOAT
        if issubclass(declared_type, str):
            return cls.STRING
        return cls.UNKNOWN


@dataclass(frozen=True)
class MemberDescriptor:
    """
    Static description of one public member of a type.

    Attributes:
        name: Member name as referenced in expressions
        declared_type: Declared type with Optional[...] stripped
        read_only: True when the member cannot be assigned
        nullable: True when the declaration allows None
    """

    name: str
    declared_type: Any
    read_only: bool = False
    nullable: bool = False

    @property
    def value_type(self) -> ValueType:
        return ValueType.from_type(self.declared_type)


@dataclass(frozen=True)
class MemberBinding:
    """
    An eligible member with its current value.

    Built fresh on every validation call; never cached.
    """

    name: str
    declared_type: Any
    value: Any

    @property
    def value_type(self) -> ValueType:
        return ValueType.from_type(self.declared_type)

    @property
    def is_missing(self) -> bool:
        return ValueType.from_value(self.value) == ValueType.MISSING


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Result of validating one candidate instance against one expression.

    Contains:
    - success: Whether the invariant holds
    - message: Formatted failure message (None on success)
    - member_names: Members implicated by a failure
    """

    success: bool
    message: str | None = None
    member_names: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def passed(cls) -> "ValidationOutcome":
        """Create a successful outcome."""
        return cls(success=True)

    @classmethod
    def failed(cls, message: str, member_names: tuple[str, ...] = ()) -> "ValidationOutcome":
        """Create a failure outcome."""
        return cls(success=False, message=message, member_names=tuple(member_names))

    def __bool__(self) -> bool:
        return self.success

    def to_dict(self) -> dict:
        """Convert to dict for logging/serialization."""
        return {
            "success": self.success,
            "message": self.message,
            "member_names": list(self.member_names),
        }


SUCCESS = ValidationOutcome.passed()
