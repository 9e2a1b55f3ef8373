"""Tests for the operator table."""

import pytest
from pydantic import ValidationError

from reckon.core.builtins import mul, sub
from reckon.core.expression_lang.operators import (
    OPERATOR_SYMBOLS,
    OPERATORS,
    Associativity,
    Operator,
    OperatorDescriptor,
    Precedence,
    describe,
)


class TestOperatorTable:
    """Every operator has exactly one descriptor."""

    def test_table_is_total(self) -> None:
        for op in Operator:
            assert describe(op) is OPERATORS[op]

    def test_symbols(self) -> None:
        assert set(OPERATOR_SYMBOLS) == set("+-*/%^")
        assert Operator.IMPLICIT_MUL not in OPERATOR_SYMBOLS.values()

    def test_precedence_order(self) -> None:
        assert (
            Precedence.FUNCTION_BARRIER
            < Precedence.ADDITIVE
            < Precedence.MULTIPLICATIVE
            < Precedence.IMPLICIT_MULTIPLICATION
            < Precedence.UNARY
            < Precedence.POWER
        )

    @pytest.mark.parametrize(
        ("op", "precedence"),
        [
            (Operator.ADD, Precedence.ADDITIVE),
            (Operator.SUB, Precedence.ADDITIVE),
            (Operator.MUL, Precedence.MULTIPLICATIVE),
            (Operator.DIV, Precedence.MULTIPLICATIVE),
            (Operator.REM, Precedence.MULTIPLICATIVE),
            (Operator.IMPLICIT_MUL, Precedence.IMPLICIT_MULTIPLICATION),
            (Operator.POW, Precedence.POWER),
        ],
    )
    def test_precedence(self, op: Operator, precedence: Precedence) -> None:
        assert describe(op).precedence == precedence

    def test_only_plus_and_minus_are_unary(self) -> None:
        unary = {op for op in Operator if describe(op).unary}
        assert unary == {Operator.ADD, Operator.SUB}

    def test_only_power_is_right_associative(self) -> None:
        right = {op for op in Operator if describe(op).associativity == Associativity.RIGHT}
        assert right == {Operator.POW}

    def test_functions(self) -> None:
        assert describe(Operator.SUB).function is sub
        assert describe(Operator.IMPLICIT_MUL).function is mul


class TestOperatorDescriptor:
    def test_unwind_floor(self) -> None:
        assert describe(Operator.ADD).unwind_floor == Precedence.ADDITIVE
        assert describe(Operator.POW).unwind_floor == Precedence.POWER + 1

    def test_frozen(self) -> None:
        desc = describe(Operator.MUL)
        with pytest.raises(ValidationError):
            desc.precedence = Precedence.POWER  # type: ignore[misc]

    def test_defaults(self) -> None:
        desc = OperatorDescriptor(function=mul, precedence=Precedence.MULTIPLICATIVE)
        assert desc.associativity == Associativity.LEFT
        assert desc.unary is False
