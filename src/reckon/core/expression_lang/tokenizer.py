"""
Tokenizer for the reckon expression language.

Lazily converts an expression string into positioned tokens. Each call to
``next()`` skips whitespace and lexes exactly one token, trying in order:

1. a one-character operator or punctuation: ``+ - * / % ^ , )``
2. an unsigned decimal literal: ``12``, ``1.``, ``.5``, ``6.02e23``
3. an identifier, as a function opener when directly followed by ``(``
4. otherwise the whole remainder, as a single ``UNKNOWN`` token

There is no lookahead beyond the current token and no backtracking. Since
``-`` always lexes as an operator, negative literals do not exist.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import StrEnum, auto

from reckon.core.expression_lang.operators import OPERATOR_SYMBOLS


class TokenKind(StrEnum):
    """Token types for the expression language."""

    UNKNOWN = auto()
    LITERAL = auto()
    OPERATOR = auto()
    VARIABLE = auto()
    FUNCTION_OPEN = auto()  # name(
    COMMA = auto()
    CLOSE = auto()


class Token:
    """A single token from the expression tokenizer. ``pos`` is a character offset."""

    __slots__ = ("kind", "value", "pos", "text")

    def __init__(self, kind: TokenKind, value: object, pos: int, text: str) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos
        self.text = text

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.value, self.pos, self.text) == (
            other.kind,
            other.value,
            other.pos,
            other.text,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.pos, self.text))

    @property
    def end(self) -> int:
        return self.pos + len(self.text)


# Unsigned decimal float: digits with optional fraction, or a bare fraction,
# then an optional exponent that must carry digits.
_NUMBER_RE = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_IDENT_EXTRAS = frozenset("_.:?!$@#")


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c in _IDENT_EXTRAS


class TokenStream:
    """
    Iterator over the tokens of ``source``, starting at ``start``.

    ``pos`` is the cursor into ``source``; a fresh stream created at any
    token boundary resumes tokenization from there. ``offset`` is added to
    every token position, so chunks of a larger input report absolute
    positions.
    """

    def __init__(self, source: str, start: int = 0, *, offset: int = 0) -> None:
        self.source = source
        self.pos = start
        self.offset = offset

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        if not self._skip_whitespace():
            raise StopIteration
        return self._lex_operator() or self._lex_literal() or self._lex_identifier() or self._lex_unknown()

    def _skip_whitespace(self) -> bool:
        """Advance past whitespace. Returns False at end of input."""
        source = self.source
        n = len(source)
        while self.pos < n and source[self.pos].isspace():
            self.pos += 1
        return self.pos < n

    def _token(self, kind: TokenKind, value: object, end: int) -> Token:
        start = self.pos
        self.pos = end
        return Token(kind, value, self.offset + start, self.source[start:end])

    def _lex_operator(self) -> Token | None:
        c = self.source[self.pos]
        op = OPERATOR_SYMBOLS.get(c)
        if op is not None:
            return self._token(TokenKind.OPERATOR, op, self.pos + 1)
        if c == ",":
            return self._token(TokenKind.COMMA, c, self.pos + 1)
        if c == ")":
            return self._token(TokenKind.CLOSE, c, self.pos + 1)
        return None

    def _lex_literal(self) -> Token | None:
        m = _NUMBER_RE.match(self.source, self.pos)
        if m is None:
            return None
        return self._token(TokenKind.LITERAL, float(m.group(0)), m.end())

    def _lex_identifier(self) -> Token | None:
        source = self.source
        n = len(source)
        end = self.pos
        while end < n and _is_ident_char(source[end]):
            end += 1
        name = source[self.pos : end]

        if end < n and source[end] == "(":
            # An empty name is a plain grouping parenthesis.
            return self._token(TokenKind.FUNCTION_OPEN, name, end + 1)
        if not name:
            return None
        return self._token(TokenKind.VARIABLE, name, end)

    def _lex_unknown(self) -> Token:
        # Swallow the rest so the stream always terminates.
        remainder = self.source[self.pos :]
        return self._token(TokenKind.UNKNOWN, remainder, len(self.source))


def tokenize(source: str, start: int = 0, *, offset: int = 0) -> TokenStream:
    """Return a lazy token stream over ``source``."""
    return TokenStream(source, start, offset=offset)


__all__ = ["Token", "TokenKind", "TokenStream", "tokenize"]
