"""
Expression Evaluation Package.

- core.py: ExprEvaluator class and the evaluate() entry point
- context.py: One-row typed relation of member bindings
- operators.py: Comparison, arithmetic and three-valued logic

Usage:
    from expression_validation.rules.evaluation import evaluate

    ok = evaluate("PropertyA > PropertyB", bindings)
"""

from .context import EvaluationContext
from .core import ExprEvaluator, evaluate

__all__ = [
    "EvaluationContext",
    "ExprEvaluator",
    "evaluate",
]
