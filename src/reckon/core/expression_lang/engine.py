"""
Evaluation engine for the reckon expression language.

A single-pass operator-precedence parser that evaluates while it parses; no
syntax tree is ever built. The engine keeps two stacks: pending calls
(operators and functions still waiting for their operands) and values. Each
token either pushes onto one of them or applies pending calls whose
precedence says they are complete.

At any point the engine either expects a value-like token (literal, name,
function opener, unary prefix) or an operator-like token (binary operator,
comma, closing paren). A value-like token arriving where an operator is
expected inserts an implicit multiplication, so ``2x`` and ``3(4+5)`` work.

Usage:
    from reckon.core.environment import BasicEnvironment
    from reckon.core.expression_lang.engine import evaluate

    evaluate(BasicEnvironment(), "2 * (3 + 4)")
    # 14.0
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import TYPE_CHECKING

from reckon.core.errors import ErrorKind, EvaluationError, ReckonError
from reckon.core.expression_lang.operators import Operator, Precedence, describe
from reckon.core.expression_lang.tokenizer import Token, TokenKind, tokenize

if TYPE_CHECKING:
    from reckon.core.builtins import BuiltinFunction
    from reckon.core.environment import Environment

logger = logging.getLogger(__name__)

# Unwinding down to this rank applies every pending call above the nearest
# function barrier.
_ABOVE_BARRIER = Precedence.ADDITIVE


class Expect(StrEnum):
    VALUE = auto()
    OPERATOR = auto()


@dataclass
class PendingCall:
    """A function or operator application waiting for its operands."""

    function: BuiltinFunction
    precedence: int
    arity: int


class ExpressionEngine:
    """
    Parser/evaluator state for one expression.

    Bound to one environment for its whole life. Feed it tokens with
    ``parse`` or text with ``feed``, then call ``result`` once. The first
    error ends the evaluation; a finished engine cannot be reused.
    """

    def __init__(self, env: Environment) -> None:
        self.env = env
        self.calls: list[PendingCall] = []
        self.values: list[float] = []
        self.expect = Expect.VALUE
        # Length of all text fed so far; the position of end-of-input errors.
        self.end = 0
        self._finished = False

    # -- Public API --

    def parse(self, tok: Token) -> None:
        """Process a single token."""
        self._check_open()
        self.end = max(self.end, tok.end)
        try:
            self._dispatch(tok)
        except EvaluationError:
            self._finished = True
            raise

    def feed(self, text: str) -> None:
        """Tokenize and process a chunk of input.

        Precondition: ``text`` holds whole tokens only. Splitting a literal
        or a name across two chunks is undefined. Positions are absolute
        over the concatenation of all fed chunks.
        """
        self._check_open()
        offset = self.end
        for tok in tokenize(text, offset=offset):
            self.parse(tok)
        self.end = offset + len(text)

    def result(self) -> float:
        """Finish the expression and return its value."""
        self._check_open()
        self._finished = True

        if self.expect == Expect.VALUE:
            raise EvaluationError(ErrorKind.UNFINISHED_EXPRESSION, self.end)

        self._unwind(_ABOVE_BARRIER, self.end)
        if len(self.values) != 1 or self.calls:
            raise EvaluationError(ErrorKind.UNBALANCED_PARENS, self.end)
        return self.values[0]

    def eval(self, text: str) -> float:
        """Convenience: ``feed`` then ``result``."""
        self.feed(text)
        return self.result()

    # -- State machine --

    def _check_open(self) -> None:
        if self._finished:
            raise RuntimeError("expression engine already finished")

    def _dispatch(self, tok: Token) -> None:
        if self.expect == Expect.VALUE:
            self._parse_value(tok)
        else:
            self._parse_operator(tok)

    def _parse_value(self, tok: Token) -> None:
        kind = tok.kind

        if kind == TokenKind.LITERAL:
            self.values.append(tok.value)  # type: ignore[arg-type]
            self.expect = Expect.OPERATOR
            return

        if kind == TokenKind.OPERATOR:
            desc = describe(tok.value)  # type: ignore[arg-type]
            if not desc.unary:
                raise EvaluationError(ErrorKind.DISALLOWED_UNARY, tok.pos)
            self.calls.append(PendingCall(desc.function, Precedence.UNARY, 1))
            return

        if kind == TokenKind.VARIABLE:
            self.values.append(self._lookup(tok))
            self.expect = Expect.OPERATOR
            return

        if kind == TokenKind.FUNCTION_OPEN:
            function = self._resolve(tok)
            self.calls.append(PendingCall(function, Precedence.FUNCTION_BARRIER, 1))
            return

        if kind == TokenKind.CLOSE:
            # Catches empty argument lists: ``add()`` or ``pi()``.
            # Constants are referenced without parens.
            top = self.calls[-1] if self.calls else None
            if top is not None and top.precedence == Precedence.FUNCTION_BARRIER and top.arity == 1:
                raise EvaluationError(ErrorKind.BAD_ARGUMENT, tok.pos, "empty argument list")
            raise EvaluationError(ErrorKind.NA_EXPRESSION, tok.pos)

        if kind == TokenKind.COMMA:
            raise EvaluationError(ErrorKind.NA_EXPRESSION, tok.pos)

        raise EvaluationError(ErrorKind.INVALID_TOKEN, tok.pos, f"invalid token: {tok.text!r}")

    def _parse_operator(self, tok: Token) -> None:
        kind = tok.kind

        if kind == TokenKind.OPERATOR:
            self._push_operator(tok.value, tok.pos)  # type: ignore[arg-type]
            return

        if kind in (TokenKind.VARIABLE, TokenKind.FUNCTION_OPEN):
            self._push_operator(Operator.IMPLICIT_MUL, tok.pos)
            self._parse_value(tok)
            return

        if kind == TokenKind.COMMA:
            self._unwind(_ABOVE_BARRIER, tok.pos)
            if not self.calls:
                raise EvaluationError(ErrorKind.MISPLACED_COMMA, tok.pos)
            self.calls[-1].arity += 1
            self.expect = Expect.VALUE
            return

        if kind == TokenKind.CLOSE:
            self._unwind(_ABOVE_BARRIER, tok.pos)
            if not self.calls:
                raise EvaluationError(ErrorKind.UNBALANCED_PARENS, tok.pos)
            self._apply(tok.pos)
            return

        if kind == TokenKind.LITERAL:
            raise EvaluationError(ErrorKind.EXPECT_OPERATOR, tok.pos)

        raise EvaluationError(ErrorKind.INVALID_TOKEN, tok.pos, f"invalid token: {tok.text!r}")

    def _push_operator(self, op: Operator, pos: int) -> None:
        desc = describe(op)
        self._unwind(desc.unwind_floor, pos)
        self.calls.append(PendingCall(desc.function, desc.precedence, 2))
        self.expect = Expect.VALUE

    # -- Environment access --

    def _lookup(self, tok: Token) -> float:
        try:
            return float(self.env.get_value(tok.value))  # type: ignore[arg-type]
        except ReckonError as e:
            raise EvaluationError(e.kind, tok.pos, e.message) from e
        except (ArithmeticError, ValueError) as e:
            raise EvaluationError(ErrorKind.BAD_ARGUMENT, tok.pos, str(e)) from e

    def _resolve(self, tok: Token) -> BuiltinFunction:
        try:
            return self.env.resolve_function(tok.value)  # type: ignore[arg-type]
        except ReckonError as e:
            raise EvaluationError(e.kind, tok.pos, e.message) from e

    # -- Application --

    def _unwind(self, floor: int, pos: int) -> None:
        """Apply pending calls while the top one ranks at or above ``floor``."""
        while self.calls and self.calls[-1].precedence >= floor:
            self._apply(pos)

    def _apply(self, pos: int) -> None:
        """Pop the top pending call and replace its operands with the result."""
        call = self.calls.pop()
        if call.arity > len(self.values):
            logger.error(
                "Pending call %r needs %d values, stack holds %d",
                call.function,
                call.arity,
                len(self.values),
            )
            raise EvaluationError(ErrorKind.INTERNAL_ERROR, pos)

        split = len(self.values) - call.arity
        args = self.values[split:]
        try:
            result = call.function(self.env, args)
        except ReckonError as e:
            raise EvaluationError(e.kind, pos, e.message) from e
        except (ArithmeticError, ValueError) as e:
            # Builtins return IEEE values; host functions may still raise.
            raise EvaluationError(ErrorKind.BAD_ARGUMENT, pos, str(e)) from e

        del self.values[split:]
        self.values.append(float(result))


def evaluate(env: Environment, text: str) -> float:
    """Evaluate an expression string against an environment.

    Args:
        env: Environment resolving functions and names.
        text: Expression string (e.g., "2 * (3 + 4)").

    Returns:
        The computed value.

    Raises:
        EvaluationError: If the expression is malformed or a function fails.
    """
    try:
        return ExpressionEngine(env).eval(text)
    except EvaluationError as e:
        logger.debug("Evaluation of %r failed: %s", text, e)
        raise


def evaluate_tokens(env: Environment, tokens: Iterable[Token]) -> float:
    """Evaluate an already tokenized expression."""
    engine = ExpressionEngine(env)
    for tok in tokens:
        engine.parse(tok)
    return engine.result()
