"""
Member binding for candidate instances.
"""

from .members import (
    describe_instance,
    describe_members,
    eligible_bindings,
    is_eligible,
    unwrap_optional,
)

__all__ = [
    "describe_instance",
    "describe_members",
    "eligible_bindings",
    "is_eligible",
    "unwrap_optional",
]
