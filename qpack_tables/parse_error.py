"""Errors raised while parsing QPACK instructions and field lines."""

from __future__ import annotations

from .prefix_int import PrefixIntError


class ParseError(Exception):
    """Base class for QPACK parse failures."""


class IntegerParseError(ParseError):
    """A prefixed integer could not be decoded."""

    def __init__(self, error: PrefixIntError) -> None:
        super().__init__(f"could not parse integer: {error}")
        self.error = error


class InvalidPrefix(ParseError):
    """An instruction started with a byte that matches no known prefix."""

    def __init__(self, prefix: int) -> None:
        super().__init__(f"invalid instruction prefix: {prefix:#04x}")
        self.prefix = prefix


class InvalidBase(ParseError):
    """A field section prefix produced a negative base."""

    def __init__(self, base: int) -> None:
        super().__init__(f"invalid base: {base}")
        self.base = base