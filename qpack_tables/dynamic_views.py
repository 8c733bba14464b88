"""Encoder and decoder views over a dynamic table, and their lookup results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from .dynamic_table import DynamicTable, DynamicTableError, MaxTableSizeReached
from .field import HeaderField


@dataclass(frozen=True)
class LookupStatic:
    """The name was found in the static table."""

    index: int


@dataclass(frozen=True)
class LookupRelative:
    """The entry was found at or below the base."""

    index: int
    absolute: int


@dataclass(frozen=True)
class LookupPostBase:
    """The entry was found above the base."""

    index: int
    absolute: int


@dataclass(frozen=True)
class NotFound:
    """No matching entry exists."""


LookupResult = Union[LookupStatic, LookupRelative, LookupPostBase, NotFound]


@dataclass(frozen=True)
class Inserted:
    """The field was inserted with a literal name."""

    postbase: int
    absolute: int


@dataclass(frozen=True)
class Duplicated:
    """The field was inserted as a duplicate of an existing entry."""

    relative: int
    postbase: int
    absolute: int


@dataclass(frozen=True)
class InsertedWithNameRef:
    """The field was inserted referencing a dynamic entry's name."""

    postbase: int
    relative: int
    absolute: int


@dataclass(frozen=True)
class InsertedWithStaticNameRef:
    """The field was inserted referencing a static entry's name."""

    postbase: int
    index: int
    absolute: int


@dataclass(frozen=True)
class NotInserted:
    """The field could not be inserted; ``lookup`` is the best name match."""

    lookup: LookupResult


InsertionResult = Union[
    Inserted, Duplicated, InsertedWithNameRef, InsertedWithStaticNameRef, NotInserted
]


class DynamicTableDecoder:
    """Read-only view resolving indices relative to a field section base."""

    def __init__(self, table: DynamicTable, base: int) -> None:
        self.table = table
        self.base = base

    def _field_at(self, position: int) -> HeaderField:
        if not 0 <= position < len(self.table.fields):
            raise BadIndexError(position)
        return self.table.fields[position]

    def get_relative(self, index: int) -> HeaderField:
        """Return the entry ``index`` positions below the base."""
        return self._field_at(self.table.vas.relative_base(self.base, index))

    def get_postbase(self, index: int) -> HeaderField:
        """Return the entry ``index`` positions after the base."""
        return self._field_at(self.table.vas.post_base(self.base, index))


def BadIndexError(position: int) -> DynamicTableError:
    from .dynamic_table import BadIndex

    return BadIndex(position)


class DynamicTableEncoder:
    """Encoding session for one field section of a stream.

    References taken during the session are released on :meth:`close`
    unless the section was committed first.
    """

    def __init__(self, table: DynamicTable, base: int, stream_id: int) -> None:
        self.table = table
        self.base = base
        self.stream_id = stream_id
        self.committed = False
        self.closed = False
        self.block_refs: Dict[int, int] = {}

    @property
    def max_size(self) -> int:
        """Capacity of the underlying table."""
        return self.table.max_size

    @property
    def total_inserted(self) -> int:
        """Number of entries ever inserted in the underlying table."""
        return self.table.total_inserted

    def __enter__(self) -> "DynamicTableEncoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release uncommitted references; safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        if not self.committed:
            try:
                self.table.track_cancel(self.block_refs.items())
            except DynamicTableError:
                pass

    def commit(self, largest_ref: int) -> None:
        """Record the section's references and its required insert count."""
        self.table.track_block(self.stream_id, dict(self.block_refs))
        self.table.register_blocked(largest_ref)
        self.committed = True

    def find(self, field: HeaderField) -> LookupResult:
        """Look up an exact entry for ``field``."""
        return self._lookup_result(self.table.field_map.get(field))

    def find_name(self, name: bytes) -> LookupResult:
        """Look up an entry with ``name``, preferring the static table."""
        static_index = self.table.static_find_name(bytes(name))
        if static_index is not None:
            return LookupStatic(static_index)
        return self._lookup_result(self.table.name_map.get(bytes(name)))

    def insert(self, field: HeaderField) -> InsertionResult:
        """Insert ``field`` and describe how it can be referenced."""
        table = self.table
        if table.blocked_count >= table.blocked_max:
            return NotInserted(self.find_name(field.name))

        try:
            index = table.insert(field)
        except MaxTableSizeReached:
            index = None
        if index is None:
            return NotInserted(self.find_name(field.name))
        self.track_ref(index)

        ref_index = table.field_map.get(field)
        table.field_map[field] = index
        if ref_index is not None:
            if field.name in table.name_map:
                table.name_map[field.name] = index
            self.track_ref(ref_index)
            return Duplicated(
                relative=index - ref_index - 1,
                postbase=index - self.base - 1,
                absolute=index,
            )

        static_index = table.static_find_name(field.name)
        if static_index is not None:
            return InsertedWithStaticNameRef(
                postbase=index - self.base - 1, index=static_index, absolute=index
            )

        name_ref = table.name_map.get(field.name)
        table.name_map[field.name] = index
        if name_ref is not None:
            self.track_ref(name_ref)
            return InsertedWithNameRef(
                postbase=index - self.base - 1,
                relative=index - name_ref - 1,
                absolute=index,
            )
        return Inserted(postbase=index - self.base - 1, absolute=index)

    def track_ref(self, reference: int) -> None:
        """Count a reference both in this section and in the table."""
        self.block_refs[reference] = self.block_refs.get(reference, 0) + 1
        self.table.track_ref(reference)

    def _lookup_result(self, absolute: Optional[int]) -> LookupResult:
        if absolute is None:
            return NotFound()
        self.track_ref(absolute)
        if absolute <= self.base:
            return LookupRelative(index=self.base - absolute, absolute=absolute)
        return LookupPostBase(index=absolute - self.base - 1, absolute=absolute)