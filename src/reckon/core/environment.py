"""
Environments resolve names for the evaluation engine.

An environment answers two questions while an expression is evaluated: which
function a call like ``sin(`` refers to, and what value a bare name like
``pi`` or ``ans`` stands for. Hosts needing richer storage subclass
``Environment``; ``BasicEnvironment`` covers the builtin library plus the
"last answer" slot.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

from reckon.core.builtins import BUILTINS, BuiltinFunction
from reckon.core.errors import BadArgumentError, NameNotFoundError

logger = logging.getLogger(__name__)

ANS = "ans"


class Environment(ABC):
    """Capability set the evaluation engine consumes."""

    @abstractmethod
    def resolve_function(self, name: str) -> BuiltinFunction:
        """Return the function bound to ``name``.

        Raises:
            NameNotFoundError: If no function has that name.
        """

    @abstractmethod
    def get_value(self, name: str) -> float:
        """Return the value of a constant or variable.

        Raises:
            NameNotFoundError: If the name is unknown.
        """

    @abstractmethod
    def set_value(self, name: str, value: float) -> None:
        """Store ``value`` under ``name``.

        Raises:
            NameNotFoundError: If the name is not a settable slot.
        """


class BasicEnvironment(Environment):
    """
    Builtin functions plus a single settable ``ans`` slot.

    Values are zero-argument function calls: reading ``pi`` calls the ``pi``
    builtin with no arguments. ``ans`` is exposed the same way, so ``ans(1)``
    is rejected like ``pi(1)``.
    """

    def __init__(self, functions: Mapping[str, BuiltinFunction] | None = None) -> None:
        self.functions: dict[str, BuiltinFunction] = dict(BUILTINS if functions is None else functions)
        self.ans = 0.0

    def __repr__(self) -> str:
        return f"BasicEnvironment(functions={len(self.functions)}, ans={self.ans!r})"

    def resolve_function(self, name: str) -> BuiltinFunction:
        if name == ANS:
            return self._answer
        try:
            return self.functions[name]
        except KeyError:
            raise NameNotFoundError(name) from None

    def get_value(self, name: str) -> float:
        return self.resolve_function(name)(self, [])

    def set_value(self, name: str, value: float) -> None:
        if name != ANS:
            raise NameNotFoundError(name, f"{name!r} is not a settable name")
        logger.debug("ans = %r", value)
        self.ans = value

    def _answer(self, env: Environment, args: list[float]) -> float:
        if args:
            raise BadArgumentError(f"ans takes no arguments ({len(args)} given)")
        return self.ans
