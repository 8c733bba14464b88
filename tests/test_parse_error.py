import pytest

from qpack_tables.parse_error import (
    IntegerParseError,
    InvalidBase,
    InvalidPrefix,
    ParseError,
)
from qpack_tables.prefix_int import IntegerOverflow, UnexpectedEnd, decode


def _parse(size, data):
    try:
        return decode(size, data)
    except (IntegerOverflow, UnexpectedEnd) as exc:
        raise IntegerParseError(exc) from exc


def test_integer_error_wraps_decode_failure():
    with pytest.raises(IntegerParseError) as info:
        _parse(5, b"")
    assert isinstance(info.value.error, UnexpectedEnd)
    assert info.value.__cause__ is info.value.error


def test_integer_error_is_parse_error():
    with pytest.raises(ParseError):
        _parse(8, bytes([255, 128, 254] + [255] * 8 + [1]))


def test_integer_error_message_includes_cause():
    err = IntegerParseError(IntegerOverflow())
    assert "value overflow" in str(err)


def test_successful_parse_passes_through():
    assert _parse(5, bytes([0b1010_1010])) == (0b101, 10, 1)


def test_invalid_prefix_keeps_byte():
    err = InvalidPrefix(0x42)
    assert err.prefix == 0x42
    assert isinstance(err, ParseError)


def test_invalid_base_keeps_value():
    err = InvalidBase(-3)
    assert err.base == -3
    with pytest.raises(ParseError):
        raise err


def test_subclasses_are_distinct():
    err = InvalidBase(-1)
    assert isinstance(err, ParseError)
    assert not isinstance(err, InvalidPrefix)
    assert not isinstance(InvalidPrefix(1), InvalidBase)
    assert err.base == -1