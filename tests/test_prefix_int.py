import pytest

from qpack_tables.prefix_int import (
    IntegerOverflow,
    PrefixIntError,
    UnexpectedEnd,
    decode,
    encode,
)

U64_MAX = 2**64 - 1


def check_codec(size, flags, value, data):
    encoded = encode(size, flags, value)
    assert encoded == bytes(data)
    assert decode(size, encoded) == (flags, value, len(data))


@pytest.mark.parametrize(
    "flags, value, data",
    [
        (0b101, 10, [0b1010_1010]),
        (0b101, 0, [0b1010_0000]),
        (0b010, 1337, [0b0101_1111, 154, 10]),
        (0b010, 31, [0b0101_1111, 0]),
        (0b010, U64_MAX, [95, 224, 255, 255, 255, 255, 255, 255, 255, 255, 1]),
    ],
)
def test_codec_5_bits(flags, value, data):
    check_codec(5, flags, value, data)


@pytest.mark.parametrize(
    "value, data",
    [
        (42, [0b0010_1010]),
        (424_242, [255, 179, 240, 25]),
        (U64_MAX, [255, 128, 254, 255, 255, 255, 255, 255, 255, 255, 1]),
    ],
)
def test_codec_8_bits(value, data):
    check_codec(8, 0, value, data)


def test_size_too_big_value():
    with pytest.raises(ValueError):
        encode(9, 1, 1)


def test_size_too_big_of_size():
    with pytest.raises(ValueError):
        decode(9, b"")


def test_overflow():
    buf = bytes([255, 128, 254, 255, 255, 255, 255, 255, 255, 255, 255, 1])
    with pytest.raises(IntegerOverflow):
        decode(8, buf)


def test_number_never_ends_with_0x80():
    check_codec(4, 0b0001, 143, [31, 128, 1])


def test_empty_buffer_is_unexpected_end():
    with pytest.raises(UnexpectedEnd):
        decode(5, b"")


def test_truncated_continuation_is_unexpected_end():
    with pytest.raises(UnexpectedEnd):
        decode(5, bytes([0b0101_1111, 154]))


def test_errors_share_base_class():
    with pytest.raises(PrefixIntError):
        decode(8, b"")


def test_error_messages():
    assert str(IntegerOverflow()) == "value overflow"
    assert str(UnexpectedEnd()) == "unexpected end"


def test_decode_reports_consumed_with_trailing_bytes():
    data = encode(5, 0b010, 1337) + b"\xaa\xbb"
    assert decode(5, data) == (0b010, 1337, 3)


@pytest.mark.parametrize("size", range(1, 9))
@pytest.mark.parametrize("value", [0, 1, 126, 127, 128, 255, 16383, 2**32, U64_MAX])
def test_round_trip(size, value):
    flags = 1 if size < 8 else 0
    encoded = encode(size, flags, value)
    assert decode(size, encoded) == (flags, value, len(encoded))


def test_encode_rejects_negative_value():
    with pytest.raises(ValueError):
        encode(5, 0, -1)


def test_encode_rejects_value_above_u64():
    with pytest.raises(ValueError):
        encode(5, 0, U64_MAX + 1)