# qpack-tables

Building blocks for QPACK, the header compression used by HTTP/3.

## Modules

- `qpack_tables.field`: `HeaderField` is a frozen dataclass that holds a
  header name and value as bytes. You can pass `str` or any bytes-like object.
  `mem_size()` returns the table size of the entry, which is the name length
  plus the value length plus 32 octets. `with_value()` returns a copy with a
  new value. `into_inner()` returns the `(name, value)` pair.
  `HeaderField.from_pair()` builds a field from such a pair, and
  `to_tab_separated()` renders the field as `name<TAB>value`.
- `qpack_tables.prefix_int`: prefixed integer coding.
  - `encode(size, flags, value)` returns the encoded bytes.
  - `decode(size, buf)` returns `(flags, value, consumed)`.
  - Decoding failures raise `UnexpectedEnd` or `IntegerOverflow`. Both derive
    from `PrefixIntError`.
  - A prefix size outside 0..8 raises `ValueError`.
- `qpack_tables.parse_error`: the exception types `ParseError`,
  `IntegerParseError`, `InvalidPrefix` and `InvalidBase`.
- `qpack_tables.dynamic_table`: `DynamicTable` handles the following:
  - FIFO eviction and the capacity limit (`set_max_size`, up to 2^30 - 1).
  - Per-stream reference tracking (`untrack_block`, `track_cancel`).
  - Blocked-stream accounting (`set_max_blocked`, below 65535, and
    `update_largest_received`).
  - Peer insertions (`put`) and relative lookups (`get_relative`).

  Its errors derive from `DynamicTableError`, for example
  `MaxTableSizeReached`, `UnknownStreamId` and `InvalidTrackingCount`.
- `qpack_tables.dynamic_views`: the views of a table.
  - `DynamicTableEncoder` is returned by `DynamicTable.encoder(stream_id)`.
    It provides `find`, `find_name`, `insert`, `commit` and `close`, and
    works as a context manager.
  - `DynamicTableDecoder` is returned by `DynamicTable.decoder(base)`. It
    provides `get_relative` and `get_postbase`.
  - Lookups return one of `LookupStatic`, `LookupRelative`, `LookupPostBase`
    or `NotFound`.
  - Insertions return one of `Inserted`, `Duplicated`, `InsertedWithNameRef`,
    `InsertedWithStaticNameRef` or `NotInserted`.

## Installation

```
pip install qpack-tables
```

To also install the test dependencies:

```
pip install "qpack-tables[test]"
```

## Example

```python
from qpack_tables.field import HeaderField
from qpack_tables import prefix_int

field = HeaderField(b"Name", b"Value")
assert field.mem_size() == 4 + 5 + 32

data = prefix_int.encode(5, 0b010, 1337)
assert data == bytes([0b0101_1111, 154, 10])
assert prefix_int.decode(5, data) == (0b010, 1337, 3)
```

The dynamic table takes an optional function that looks a name up in the
static table and returns its index or `None`. With that function, insertions
use static name references where they can. Without it, no name is treated as
static.

```python
from qpack_tables.dynamic_table import DynamicTable
from qpack_tables.dynamic_views import Inserted
from qpack_tables.field import HeaderField

table = DynamicTable(static_find_name=lambda name: None)
table.set_max_size(4096)
table.set_max_blocked(100)

with table.encoder(stream_id=4) as encoder:
    result = encoder.insert(HeaderField(b"foo", b"bar"))
    assert result == Inserted(postbase=0, absolute=1)
    encoder.commit(1)

table.untrack_block(4)  # the peer acknowledged the section
```

An encoder view can be closed without a commit, by calling `close()` or by
leaving the `with` block. In that case it releases every reference it took.

The encoder does not insert while the number of blocked sections has reached
the blocked-stream limit. That limit is 0 until `set_max_blocked` is called.

## What this package does not do

This package provides the tables and the integer coding only. It has no
QPACK static table; you supply the name lookup yourself. It does not encode or
decode string literals or Huffman coding. It has no field-line representations
or encoder and decoder stream instructions. It includes no HTTP/3 connection
handling.