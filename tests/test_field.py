import pytest

from qpack_tables.field import ESTIMATED_OVERHEAD_BYTES, HeaderField


def test_field_size_is_offset_by_32():
    field = HeaderField(b"Name", b"Value")
    assert field.mem_size() == 4 + 5 + 32


def test_mem_size_uses_overhead_constant():
    field = HeaderField("Another-Name", "")
    assert field.mem_size() == len("Another-Name") + ESTIMATED_OVERHEAD_BYTES


def test_with_value():
    field = HeaderField(b"Name", b"Value")
    assert field.with_value("New value") == HeaderField(b"Name", b"New value")


def test_with_value_leaves_original_untouched():
    field = HeaderField(b"Name", b"Value")
    field.with_value(b"Other")
    assert field.value == b"Value"


def test_str_and_bytes_inputs_are_equal():
    assert HeaderField("Name", "Value") == HeaderField(b"Name", bytearray(b"Value"))


def test_fields_are_hashable_and_usable_as_keys():
    table = {HeaderField("a", "b"): 1}
    assert table[HeaderField(b"a", b"b")] == 1


def test_into_inner():
    assert HeaderField("Name", "Value").into_inner() == (b"Name", b"Value")


def test_from_pair():
    assert HeaderField.from_pair(("Name", b"Value")) == HeaderField(b"Name", b"Value")


def test_display():
    assert str(HeaderField("Name", "Value")) == '"Name": "Value"'


def test_to_tab_separated():
    assert HeaderField("Name", "Value").to_tab_separated() == "Name\tValue"


def test_lossy_rendering_of_invalid_utf8():
    rendered = HeaderField(b"\xff", b"v").to_tab_separated()
    assert rendered == "\ufffd\tv"


def test_rejects_non_bytes():
    with pytest.raises(TypeError):
        HeaderField(5, b"v")


def test_is_immutable():
    field = HeaderField("a", "b")
    with pytest.raises(AttributeError):
        field.name = b"c"
    assert field.name == b"a"
    assert field.into_inner() == (b"a", b"b")