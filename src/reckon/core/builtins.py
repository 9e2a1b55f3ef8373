"""
Builtin numeric functions.

Every builtin takes the calling environment and a list of argument values and
returns a single float. Builtins validate their own argument count and raise
``BadArgumentError`` on mismatch. The list is a private copy, so a builtin may
reorder it (``median`` sorts in place).

Zero-argument builtins (``pi``, ``e``...) double as named constants: the
environment reads them by calling them with an empty list.

Results follow IEEE 754 rather than Python's exceptions: ``1/0`` is ``inf``,
``sqrt(-1)`` is ``nan``, ``ln(0)`` is ``-inf`` and overflow gives ``inf``.
Only a wrong argument count (or an unusable index) is an error.

Functions whose expression name clashes with a Python builtin carry a
trailing underscore (``min_``, ``pow_``...); ``BUILTINS`` maps the
expression names.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from functools import reduce
from types import MappingProxyType
from typing import TYPE_CHECKING

from reckon.core.errors import BadArgumentError

if TYPE_CHECKING:
    from reckon.core.environment import Environment

BuiltinFunction = Callable[["Environment", list[float]], float]


def _expect(name: str, args: list[float], count: int) -> None:
    if len(args) != count:
        plural = "argument" if count == 1 else "arguments"
        raise BadArgumentError(f"{name}() takes exactly {count} {plural} ({len(args)} given)")


def _expect_some(name: str, args: list[float]) -> None:
    if not args:
        raise BadArgumentError(f"{name}() takes at least 1 argument")


def _truth(cond: bool) -> float:
    return 1.0 if cond else 0.0


def _unary(name: str, func: Callable[[float], float]) -> BuiltinFunction:
    """Wrap a single-argument float function as a builtin."""

    def builtin(env: Environment, args: list[float]) -> float:
        _expect(name, args, 1)
        return func(args[0])

    builtin.__name__ = name or "identity"
    builtin.__qualname__ = builtin.__name__
    return builtin


def _constant(name: str, value: float) -> BuiltinFunction:
    def builtin(env: Environment, args: list[float]) -> float:
        _expect(name, args, 0)
        return value

    builtin.__name__ = name
    builtin.__qualname__ = name
    return builtin


def _integral(func: Callable[[float], int]) -> Callable[[float], float]:
    # math.floor and friends return int and reject inf/nan
    def wrapped(x: float) -> float:
        if not math.isfinite(x):
            return x
        return float(func(x))

    return wrapped


def _ieee(
    func: Callable[[float], float],
    *,
    poles: dict[float, float] | None = None,
    overflow: Callable[[float], float] = lambda x: math.inf,
) -> Callable[[float], float]:
    """Make a ``math`` function return IEEE values instead of raising.

    ``poles`` maps the arguments where ``func`` diverges to the infinity it
    reaches there; any other domain error gives nan.
    """

    def wrapped(x: float) -> float:
        try:
            return func(x)
        except OverflowError:
            return overflow(x)
        except ValueError:
            if poles and x in poles:
                return poles[x]
            return math.nan

    return wrapped


_ln = _ieee(math.log, poles={0.0: -math.inf})
_sqrt = _ieee(math.sqrt)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x.is_integer() and math.fmod(x, 2.0) != 0.0


def _divide(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        return -math.inf if base < 0.0 and _is_odd_integer(exponent) else math.inf
    except ValueError:
        if base == 0.0:
            # negative exponent; -0.0 keeps its sign only for odd powers
            return math.copysign(math.inf, base) if _is_odd_integer(exponent) else math.inf
        return math.nan


def _gamma(x: float) -> float:
    try:
        return math.gamma(x)
    except OverflowError:
        return math.inf
    except ValueError:
        if x == 0.0:
            return math.copysign(math.inf, x)
        return math.nan


def _fmin(a: float, b: float) -> float:
    """Smaller of two values; a nan operand loses to a number."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return b if b < a else a


def _fmax(a: float, b: float) -> float:
    """Larger of two values; a nan operand loses to a number."""
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return b if b > a else a


def _round_half_away(x: float) -> float:
    if not math.isfinite(x):
        return x
    whole = float(math.trunc(x))
    if abs(x - whole) >= 0.5:
        return whole + math.copysign(1.0, x)
    return math.copysign(whole, x)


def _fract(x: float) -> float:
    if math.isinf(x):
        return math.nan
    return x - _integral(math.trunc)(x)


def _sign(x: float) -> float:
    if math.isnan(x):
        return x
    return math.copysign(1.0, x)


def _is_inf(x: float) -> float:
    return _truth(math.isinf(x))


def _is_nan(x: float) -> float:
    return _truth(math.isnan(x))


def _not(x: float) -> float:
    return _truth(x == 0.0)


def _factorial(x: float) -> float:
    return _gamma(x + 1.0)


def _smoothstep(x: float) -> float:
    if x <= 0.0:
        return 0.0
    if x >= 1.0:
        return 1.0
    return x * x * (3.0 - 2.0 * x)


def _smootherstep(x: float) -> float:
    if x <= 0.0:
        return 0.0
    if x >= 1.0:
        return 1.0
    return x * x * x * (x * (x * 6.0 - 15.0) + 10.0)


# -- Arithmetic ---------------------------------------------------------------


def add(env: Environment, args: list[float]) -> float:
    """Sum of one or more values. Also backs unary and binary ``+``."""
    _expect_some("add", args)
    total = 0.0
    for value in args:
        total += value
    return total


def sub(env: Environment, args: list[float]) -> float:
    """Negation of one value or difference of two. Also backs ``-``."""
    if len(args) == 1:
        return -args[0]
    if len(args) == 2:
        return args[0] - args[1]
    raise BadArgumentError(f"sub() takes 1 or 2 arguments ({len(args)} given)")


def mul(env: Environment, args: list[float]) -> float:
    """Product of one or more values. Backs ``*`` and implicit multiplication."""
    _expect_some("mul", args)
    product = 1.0
    for value in args:
        product *= value
    return product


def div(env: Environment, args: list[float]) -> float:
    _expect("div", args, 2)
    return _divide(args[0], args[1])


def rem(env: Environment, args: list[float]) -> float:
    """Remainder with the sign of the dividend, like C ``fmod``."""
    _expect("rem", args, 2)
    dividend, divisor = args
    if divisor == 0.0 or math.isinf(dividend):
        return math.nan
    return math.fmod(dividend, divisor)


def pow_(env: Environment, args: list[float]) -> float:
    _expect("pow", args, 2)
    return _power(args[0], args[1])


# -- Comparison and logic -----------------------------------------------------


def min_(env: Environment, args: list[float]) -> float:
    """Smallest value, ignoring nan unless every value is nan."""
    _expect_some("min", args)
    return reduce(_fmin, args)


def max_(env: Environment, args: list[float]) -> float:
    """Largest value, ignoring nan unless every value is nan."""
    _expect_some("max", args)
    return reduce(_fmax, args)


def clamp(env: Environment, args: list[float]) -> float:
    _expect("clamp", args, 3)
    value, low, high = args
    return _fmin(_fmax(value, low), high)


def eq(env: Environment, args: list[float]) -> float:
    """``eq(a, b)`` or ``eq(a, b, tolerance)``."""
    if len(args) == 2:
        return _truth(args[0] == args[1])
    if len(args) == 3:
        return _truth(abs(args[0] - args[1]) <= abs(args[2]))
    raise BadArgumentError(f"eq() takes 2 or 3 arguments ({len(args)} given)")


def ne(env: Environment, args: list[float]) -> float:
    """``ne(a, b)`` or ``ne(a, b, tolerance)``."""
    if len(args) == 2:
        return _truth(args[0] != args[1])
    if len(args) == 3:
        return _truth(abs(args[0] - args[1]) > abs(args[2]))
    raise BadArgumentError(f"ne() takes 2 or 3 arguments ({len(args)} given)")


def lt(env: Environment, args: list[float]) -> float:
    _expect("lt", args, 2)
    return _truth(args[0] < args[1])


def le(env: Environment, args: list[float]) -> float:
    _expect("le", args, 2)
    return _truth(args[0] <= args[1])


def gt(env: Environment, args: list[float]) -> float:
    _expect("gt", args, 2)
    return _truth(args[0] > args[1])


def ge(env: Environment, args: list[float]) -> float:
    _expect("ge", args, 2)
    return _truth(args[0] >= args[1])


def all_(env: Environment, args: list[float]) -> float:
    return _truth(all(value != 0.0 for value in args))


def any_(env: Environment, args: list[float]) -> float:
    return _truth(any(value != 0.0 for value in args))


def select(env: Environment, args: list[float]) -> float:
    """``select(index, a, b, ...)`` picks the choice at ``floor(index)``."""
    if len(args) < 2:
        raise BadArgumentError("select() takes an index and at least 1 choice")
    index, choices = args[0], args[1:]
    if not math.isfinite(index) or not 0 <= math.floor(index) < len(choices):
        raise BadArgumentError(f"select() index {index} out of range")
    return choices[math.floor(index)]


def step(env: Environment, args: list[float]) -> float:
    """``step(edge, x)`` is 0 below the edge, 1 otherwise."""
    _expect("step", args, 2)
    edge, value = args
    return 0.0 if value < edge else 1.0


# -- Statistics ---------------------------------------------------------------


def mean(env: Environment, args: list[float]) -> float:
    _expect_some("mean", args)
    return add(env, args) / len(args)


def median(env: Environment, args: list[float]) -> float:
    _expect_some("median", args)
    args.sort()
    half = len(args) // 2
    if len(args) % 2 == 0:
        return (args[half - 1] + args[half]) * 0.5
    return args[half]


def range_(env: Environment, args: list[float]) -> float:
    _expect_some("range", args)
    return reduce(_fmax, args) - reduce(_fmin, args)


def var(env: Environment, args: list[float]) -> float:
    """Population variance."""
    center = mean(env, args)
    return sum((value - center) * (value - center) for value in args) / len(args)


def stdev(env: Environment, args: list[float]) -> float:
    """Population standard deviation."""
    return _sqrt(var(env, args))


# -- Exponential --------------------------------------------------------------


def log(env: Environment, args: list[float]) -> float:
    """``log(value, base)``."""
    _expect("log", args, 2)
    return _divide(_ln(args[0]), _ln(args[1]))


def atan2(env: Environment, args: list[float]) -> float:
    _expect("atan2", args, 2)
    return math.atan2(args[0], args[1])


# -- Registry -----------------------------------------------------------------

_BUILTINS: dict[str, BuiltinFunction] = {
    # Grouping parentheses lex as a call to the empty name
    "": _unary("", lambda x: x),
    "add": add,
    "sub": sub,
    "mul": mul,
    "div": div,
    "rem": rem,
    "pow": pow_,
    "fract": _unary("fract", _fract),
    "floor": _unary("floor", _integral(math.floor)),
    "ceil": _unary("ceil", _integral(math.ceil)),
    "trunc": _unary("trunc", _integral(math.trunc)),
    "round": _unary("round", _round_half_away),
    "abs": _unary("abs", abs),
    "sign": _unary("sign", _sign),
    "sqr": _unary("sqr", lambda x: x * x),
    "cube": _unary("cube", lambda x: x * x * x),
    "sqrt": _unary("sqrt", _sqrt),
    "cbrt": _unary("cbrt", math.cbrt),
    "isinf": _unary("isinf", _is_inf),
    "isnan": _unary("isnan", _is_nan),
    "gamma": _unary("gamma", _gamma),
    "fac": _unary("fac", _factorial),
    "min": min_,
    "max": max_,
    "clamp": clamp,
    "eq": eq,
    "ne": ne,
    "lt": lt,
    "le": le,
    "gt": gt,
    "ge": ge,
    "all": all_,
    "any": any_,
    "not": _unary("not", _not),
    "select": select,
    "step": step,
    "smoothstep": _unary("smoothstep", _smoothstep),
    "smootherstep": _unary("smootherstep", _smootherstep),
    "exp": _unary("exp", _ieee(math.exp)),
    "exp2": _unary("exp2", _ieee(math.exp2)),
    "expm1": _unary("expm1", _ieee(math.expm1)),
    "ln": _unary("ln", _ln),
    "log": log,
    "log2": _unary("log2", _ieee(math.log2, poles={0.0: -math.inf})),
    "log10": _unary("log10", _ieee(math.log10, poles={0.0: -math.inf})),
    "ln1p": _unary("ln1p", _ieee(math.log1p, poles={-1.0: -math.inf})),
    "mean": mean,
    "median": median,
    "range": range_,
    "var": var,
    "stdev": stdev,
    "deg": _unary("deg", math.degrees),
    "rad": _unary("rad", math.radians),
    "sin": _unary("sin", _ieee(math.sin)),
    "cos": _unary("cos", _ieee(math.cos)),
    "tan": _unary("tan", _ieee(math.tan)),
    "asin": _unary("asin", _ieee(math.asin)),
    "acos": _unary("acos", _ieee(math.acos)),
    "atan": _unary("atan", math.atan),
    "atan2": atan2,
    "sinh": _unary("sinh", _ieee(math.sinh, overflow=lambda x: math.copysign(math.inf, x))),
    "cosh": _unary("cosh", _ieee(math.cosh)),
    "tanh": _unary("tanh", math.tanh),
    "asinh": _unary("asinh", math.asinh),
    "acosh": _unary("acosh", _ieee(math.acosh)),
    "atanh": _unary("atanh", _ieee(math.atanh, poles={1.0: math.inf, -1.0: -math.inf})),
    "pi": _constant("pi", math.pi),
    "tau": _constant("tau", math.tau),
    "e": _constant("e", math.e),
    "inf": _constant("inf", math.inf),
    "nan": _constant("nan", math.nan),
}

BUILTINS: MappingProxyType[str, BuiltinFunction] = MappingProxyType(_BUILTINS)
