"""Prefixed integer coding used by QPACK instructions and field lines."""

from __future__ import annotations

from typing import Tuple, Union

U64_MAX = (1 << 64) - 1
MAX_POWER = 10 * 7

BytesLike = Union[bytes, bytearray, memoryview]


class PrefixIntError(Exception):
    """Base class for prefixed integer decoding errors."""


class IntegerOverflow(PrefixIntError):
    """The encoded integer does not fit in 64 bits."""

    def __init__(self, message: str = "value overflow") -> None:
        super().__init__(message)


class UnexpectedEnd(PrefixIntError):
    """The buffer ended before the integer was complete."""

    def __init__(self, message: str = "unexpected end") -> None:
        super().__init__(message)


def _check_size(size: int) -> None:
    if not 0 <= size <= 8:
        raise ValueError(f"prefix size must be between 0 and 8, got {size}")


def decode(size: int, buf: BytesLike) -> Tuple[int, int, int]:
    """Decode an integer with a ``size``-bit prefix from the start of ``buf``.

    Returns ``(flags, value, consumed)`` where ``flags`` are the bits above the
    prefix in the first byte and ``consumed`` is the number of bytes read.
    """
    _check_size(size)
    stream = iter(bytes(buf))

    first = next(stream, None)
    if first is None:
        raise UnexpectedEnd()

    flags = first >> size
    mask = 0xFF >> (8 - size)
    first &= mask
    if first < mask:
        return flags, first, 1

    value = mask
    power = 0
    consumed = 1
    while True:
        byte = next(stream, None)
        if byte is None:
            raise UnexpectedEnd()
        consumed += 1
        value += (byte & 0x7F) << power
        power += 7
        if not byte & 0x80:
            break
        if power >= MAX_POWER:
            raise IntegerOverflow()

    if value > U64_MAX:
        raise IntegerOverflow()
    return flags, value, consumed


def encode(size: int, flags: int, value: int) -> bytes:
    """Encode ``value`` with a ``size``-bit prefix, ``flags`` in the high bits."""
    _check_size(size)
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"value out of the unsigned 64-bit range: {value}")

    mask = (1 << size) - 1
    flag_bits = (flags << size) & 0xFF

    if value < mask:
        return bytes([flag_bits | value])

    out = bytearray([mask | flag_bits])
    remaining = value - mask
    while remaining >= 128:
        out.append(remaining % 128 + 128)
        remaining //= 128
    out.append(remaining)
    return bytes(out)