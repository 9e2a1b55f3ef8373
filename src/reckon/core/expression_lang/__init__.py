"""
reckon expression language.

Tokenizer, operator table, and the single-pass evaluation engine.

Usage:
    from reckon.core.expression_lang import evaluate
    from reckon.core.environment import BasicEnvironment

    result = evaluate(BasicEnvironment(), "mul(2, add(3, 4))")
    # result == 14.0
"""

from reckon.core.expression_lang.engine import ExpressionEngine, evaluate, evaluate_tokens
from reckon.core.expression_lang.operators import OPERATORS, Operator, Precedence, describe
from reckon.core.expression_lang.tokenizer import Token, TokenKind, tokenize

__all__ = [
    "ExpressionEngine",
    "OPERATORS",
    "Operator",
    "Precedence",
    "Token",
    "TokenKind",
    "describe",
    "evaluate",
    "evaluate_tokens",
    "tokenize",
]
