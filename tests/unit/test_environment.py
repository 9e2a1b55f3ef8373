"""Tests for BasicEnvironment."""

import math

import pytest

from reckon.core.builtins import BUILTINS
from reckon.core.environment import ANS, BasicEnvironment
from reckon.core.errors import BadArgumentError, NameNotFoundError


class TestBasicEnvironment:
    def test_ans_defaults_to_zero(self, env: BasicEnvironment) -> None:
        assert env.get_value(ANS) == 0.0

    def test_set_and_get_ans(self, env: BasicEnvironment) -> None:
        env.set_value(ANS, 42.0)
        assert env.get_value(ANS) == 42.0
        assert env.ans == 42.0

    def test_only_ans_is_settable(self, env: BasicEnvironment) -> None:
        with pytest.raises(NameNotFoundError) as exc_info:
            env.set_value("x", 1.0)
        assert exc_info.value.name == "x"
        assert env.ans == 0.0

    def test_constants(self, env: BasicEnvironment) -> None:
        assert env.get_value("pi") == math.pi
        assert env.get_value("tau") == math.tau
        assert env.get_value("e") == math.e
        assert env.get_value("inf") == math.inf
        assert math.isnan(env.get_value("nan"))

    def test_unknown_name(self, env: BasicEnvironment) -> None:
        with pytest.raises(NameNotFoundError):
            env.get_value("hi")
        with pytest.raises(NameNotFoundError):
            env.resolve_function("hello")

    def test_function_name_as_value(self, env: BasicEnvironment) -> None:
        with pytest.raises(BadArgumentError):
            env.get_value("sin")

    def test_ans_as_function(self, env: BasicEnvironment) -> None:
        answer = env.resolve_function(ANS)
        env.set_value(ANS, 3.0)
        assert answer(env, []) == 3.0
        with pytest.raises(BadArgumentError):
            answer(env, [1.0])

    def test_resolve_builtin(self, env: BasicEnvironment) -> None:
        assert env.resolve_function("sqrt") is BUILTINS["sqrt"]
        assert env.resolve_function("")(env, [7.0]) == 7.0

    def test_custom_function_table(self) -> None:
        env = BasicEnvironment({"answer": lambda env, args: 42.0})
        assert env.get_value("answer") == 42.0
        with pytest.raises(NameNotFoundError):
            env.resolve_function("pi")

    def test_functions_are_copied(self) -> None:
        env = BasicEnvironment()
        env.functions["half"] = lambda env, args: args[0] / 2
        assert "half" not in BUILTINS
        assert "half" not in BasicEnvironment().functions

    def test_repr(self, env: BasicEnvironment) -> None:
        assert repr(env) == f"BasicEnvironment(functions={len(BUILTINS)}, ans=0.0)"
