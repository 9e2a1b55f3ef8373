"""Core reckon functionality: errors, builtins, environments, and the expression language."""

from .environment import BasicEnvironment, Environment
from .errors import (
    BadArgumentError,
    ErrorKind,
    EvaluationError,
    NameNotFoundError,
    ReckonError,
)

__all__ = [
    "BasicEnvironment",
    "Environment",
    "ErrorKind",
    "EvaluationError",
    "BadArgumentError",
    "NameNotFoundError",
    "ReckonError",
]
