"""
Operator table for the reckon expression language.

Maps every operator to the builtin that evaluates it, its precedence rank,
its associativity and whether it may be used as a unary prefix.

Precedence (low to high):
    function barrier  <  + -  <  * / %  <  implicit *  <  unary + -  <  ^

Unary prefixes bind looser than ``^``, so ``-2^2`` is ``-(2^2) == -4``.
Implicit multiplication binds tighter than ``/`` but looser than ``^``, so
``1/2x`` is ``1/(2*x)`` and ``2x^3`` is ``2*(x^3)``.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum, StrEnum, auto
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field

from reckon.core.builtins import add, div, mul, pow_, rem, sub


class Precedence(IntEnum):
    """Binding power of a pending call. Higher binds tighter."""

    # Floor for parenthesised calls; only an explicit ")" unwinds past it.
    FUNCTION_BARRIER = 1
    ADDITIVE = 2
    MULTIPLICATIVE = 3
    IMPLICIT_MULTIPLICATION = 4
    UNARY = 5
    POWER = 6


class Associativity(StrEnum):
    LEFT = auto()
    RIGHT = auto()


class Operator(StrEnum):
    """Operators of the expression language."""

    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    REM = auto()
    # Never lexed; inserted by the engine between adjacent values (``2x``).
    IMPLICIT_MUL = auto()
    POW = auto()


class OperatorDescriptor(BaseModel):
    """Evaluation function, precedence and associativity of one operator."""

    function: Callable[..., float] = Field(description="Builtin applied to the operands")
    precedence: Precedence
    associativity: Associativity = Associativity.LEFT
    unary: bool = Field(default=False, description="May appear as a prefix operator")

    model_config = ConfigDict(frozen=True)

    @property
    def unwind_floor(self) -> int:
        """Lowest precedence of pending calls to apply before pushing this operator.

        Left-associative operators apply pending calls of equal rank first,
        right-associative ones leave them pending.
        """
        if self.associativity == Associativity.RIGHT:
            return self.precedence + 1
        return self.precedence


OPERATORS: MappingProxyType[Operator, OperatorDescriptor] = MappingProxyType(
    {
        Operator.ADD: OperatorDescriptor(function=add, precedence=Precedence.ADDITIVE, unary=True),
        Operator.SUB: OperatorDescriptor(function=sub, precedence=Precedence.ADDITIVE, unary=True),
        Operator.MUL: OperatorDescriptor(function=mul, precedence=Precedence.MULTIPLICATIVE),
        Operator.DIV: OperatorDescriptor(function=div, precedence=Precedence.MULTIPLICATIVE),
        Operator.REM: OperatorDescriptor(function=rem, precedence=Precedence.MULTIPLICATIVE),
        Operator.IMPLICIT_MUL: OperatorDescriptor(
            function=mul, precedence=Precedence.IMPLICIT_MULTIPLICATION
        ),
        Operator.POW: OperatorDescriptor(
            function=pow_,
            precedence=Precedence.POWER,
            associativity=Associativity.RIGHT,
        ),
    }
)

# Characters the tokenizer maps to operators.
OPERATOR_SYMBOLS: MappingProxyType[str, Operator] = MappingProxyType(
    {
        "+": Operator.ADD,
        "-": Operator.SUB,
        "*": Operator.MUL,
        "/": Operator.DIV,
        "%": Operator.REM,
        "^": Operator.POW,
    }
)


def describe(op: Operator) -> OperatorDescriptor:
    """Return the descriptor of ``op``. Total over ``Operator``."""
    return OPERATORS[op]
