"""
reckon - arithmetic expression evaluator.

Evaluates expressions such as ``2ans^3 + sin(pi/4)`` in a single pass,
without building a syntax tree.

Usage:
    from reckon import BasicEnvironment, evaluate

    env = BasicEnvironment()
    result = evaluate(env, "2 + 3")
    # result == 5.0
"""

from __future__ import annotations

from ._version import get_version
from .core.environment import BasicEnvironment, Environment
from .core.errors import (
    BadArgumentError,
    ErrorKind,
    EvaluationError,
    NameNotFoundError,
    ReckonError,
)
from .core.expression_lang import ExpressionEngine, evaluate, evaluate_tokens, tokenize

__version__ = get_version()

__all__ = [
    "__version__",
    "BasicEnvironment",
    "Environment",
    "ErrorKind",
    "EvaluationError",
    "BadArgumentError",
    "NameNotFoundError",
    "ReckonError",
    "ExpressionEngine",
    "evaluate",
    "evaluate_tokens",
    "tokenize",
]
