"""The QPACK dynamic table: entries, eviction, reference tracking and blocked streams."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Deque, Dict, Iterable, Mapping, Optional, Tuple

from .field import HeaderField

SETTINGS_MAX_TABLE_CAPACITY_MAX = 1_073_741_823  # 2^30 - 1
SETTINGS_MAX_BLOCKED_STREAMS_MAX = 65_535  # 2^16 - 1

StaticNameLookup = Callable[[bytes], Optional[int]]

_NO_STATIC_NAMES: Mapping[bytes, int] = MappingProxyType({})


class DynamicTableError(Exception):
    """Base class for dynamic table errors."""


class BadRelativeIndex(DynamicTableError):
    """A relative index does not point to a live entry."""

    def __init__(self, index: int) -> None:
        super().__init__(f"bad relative index: {index}")
        self.index = index


class BadPostbaseIndex(DynamicTableError):
    """A post-base index does not point to a live entry."""

    def __init__(self, index: int) -> None:
        super().__init__(f"bad post-base index: {index}")
        self.index = index


class BadIndex(DynamicTableError):
    """A position in the table does not hold an entry."""

    def __init__(self, index: int) -> None:
        super().__init__(f"bad index: {index}")
        self.index = index


class MaxTableSizeReached(DynamicTableError):
    """The entry cannot fit in the table capacity."""

    def __init__(self) -> None:
        super().__init__("maximum table size reached")


class MaximumTableSizeTooLarge(DynamicTableError):
    """The requested capacity exceeds the protocol limit."""

    def __init__(self) -> None:
        super().__init__("maximum table size too large")


class MaxBlockedStreamsTooLarge(DynamicTableError):
    """The requested blocked stream limit exceeds the protocol limit."""

    def __init__(self) -> None:
        super().__init__("maximum blocked streams too large")


class UnknownStreamId(DynamicTableError):
    """No tracked field section belongs to the stream."""

    def __init__(self, stream_id: int) -> None:
        super().__init__(f"unknown stream id: {stream_id}")
        self.stream_id = stream_id


class NoTrackingData(DynamicTableError):
    """No tracking data is available."""

    def __init__(self) -> None:
        super().__init__("no tracking data")


class InvalidTrackingCount(DynamicTableError):
    """A reference count would drop below zero or is missing."""

    def __init__(self) -> None:
        super().__init__("invalid tracking count")


@dataclass
class _AddressSpace:
    """Maps 1-based absolute indices onto positions of the live entries."""

    inserted: int = 0
    dropped: int = 0

    @property
    def live(self) -> int:
        return self.inserted - self.dropped

    def add(self) -> int:
        self.inserted += 1
        return self.inserted

    def drop(self) -> None:
        self.dropped += 1

    def evicted(self, absolute: int) -> bool:
        return 0 < absolute <= self.dropped

    def index(self, position: int) -> int:
        if not 0 <= position < self.live:
            raise BadIndex(position)
        return position + self.dropped + 1

    def relative(self, index: int) -> int:
        return self.relative_base(self.inserted, index)

    def relative_base(self, base: int, index: int) -> int:
        absolute = base - index
        if index < 0 or absolute <= self.dropped or absolute > self.inserted:
            raise BadRelativeIndex(index)
        return absolute - self.dropped - 1

    def post_base(self, base: int, index: int) -> int:
        absolute = base + index + 1
        if index < 0 or absolute <= self.dropped or absolute > self.inserted:
            raise BadPostbaseIndex(index)
        return absolute - self.dropped - 1


class DynamicTable:
    """Dynamic table shared by an encoder's field sections."""

    def __init__(self, static_find_name: Optional[StaticNameLookup] = None) -> None:
        self.static_find_name: StaticNameLookup = (
            static_find_name if static_find_name is not None else _NO_STATIC_NAMES.get
        )
        self.fields: Deque[HeaderField] = deque()
        self.curr_size = 0
        self.max_size = 0
        self.vas = _AddressSpace()
        self.field_map: Dict[HeaderField, int] = {}
        self.name_map: Dict[bytes, int] = {}
        self.track_map: Dict[int, int] = {}
        self.track_blocks: Dict[int, Deque[Dict[int, int]]] = {}
        self.largest_known_received = 0
        self.blocked_max = 0
        self.blocked_count = 0
        self.blocked_streams: Dict[int, int] = {}

    @property
    def total_inserted(self) -> int:
        """Number of entries inserted since the table was created."""
        return self.vas.inserted

    def decoder(self, base: int):
        """Return a read-only view resolving indices against ``base``."""
        from .dynamic_views import DynamicTableDecoder

        return DynamicTableDecoder(self, base)

    def encoder(self, stream_id: int):
        """Return an encoding session for one field section of ``stream_id``."""
        from .dynamic_views import DynamicTableEncoder

        for position, field in enumerate(self.fields):
            absolute = self.vas.index(position)
            self.name_map[field.name] = absolute
            self.field_map[field] = absolute
        return DynamicTableEncoder(self, self.vas.inserted, stream_id)

    def set_max_blocked(self, max_blocked: int) -> None:
        """Set how many streams may be blocked on unacknowledged inserts."""
        if max_blocked >= SETTINGS_MAX_BLOCKED_STREAMS_MAX:
            raise MaxBlockedStreamsTooLarge()
        self.blocked_max = max_blocked

    def set_max_size(self, size: int) -> None:
        """Change the table capacity, evicting entries when it shrinks."""
        if size > SETTINGS_MAX_TABLE_CAPACITY_MAX:
            raise MaximumTableSizeTooLarge()
        if size >= self.max_size:
            self.max_size = size
            return
        to_evict = self._can_free(self.max_size - size)
        if to_evict is not None:
            self._evict(to_evict)
        self.max_size = size

    def put(self, field: HeaderField) -> None:
        """Insert a field received from the peer and index it for lookups."""
        index = self.insert(field)
        if index is None:
            return
        self.field_map[field] = index
        if self.static_find_name(field.name) is not None:
            return
        self.name_map[field.name] = index

    def get_relative(self, index: int) -> HeaderField:
        """Return the entry at a relative index counted from the newest entry."""
        position = self.vas.relative(index)
        try:
            return self.fields[position]
        except IndexError:
            raise BadIndex(position) from None

    def insert(self, field: HeaderField) -> Optional[int]:
        """Append ``field``, evicting as needed; return its absolute index.

        Returns ``None`` when the table has no capacity or referenced entries
        prevent making room.
        """
        if self.max_size == 0:
            return None
        to_evict = self._can_free(field.mem_size())
        if to_evict is None:
            return None
        self._evict(to_evict)
        self.curr_size += field.mem_size()
        self.fields.append(field)
        return self.vas.add()

    def untrack_block(self, stream_id: int) -> None:
        """Release the references of the oldest tracked section of a stream."""
        blocks = self.track_blocks.get(stream_id)
        if blocks is None:
            raise UnknownStreamId(stream_id)
        if len(blocks) <= 1:
            del self.track_blocks[stream_id]
        block = blocks.popleft() if blocks else None
        if block is not None:
            self.track_cancel(block.items())

    def track_ref(self, reference: int) -> None:
        """Count one more outstanding reference to an absolute index."""
        self.track_map[reference] = self.track_map.get(reference, 0) + 1

    def is_tracked(self, reference: int) -> bool:
        """Whether an absolute index has outstanding references."""
        return self.track_map.get(reference, 0) > 0

    def track_block(self, stream_id: int, refs: Mapping[int, int]) -> None:
        """Record the references of a committed field section."""
        self.track_blocks.setdefault(stream_id, deque()).append(dict(refs))

    def track_cancel(self, refs: Iterable[Tuple[int, int]]) -> None:
        """Release ``(reference, count)`` pairs from the reference counts."""
        for reference, count in refs:
            current = self.track_map.get(reference)
            if current is None or current < count:
                raise InvalidTrackingCount()
            if current == count:
                del self.track_map[reference]
            else:
                self.track_map[reference] = current - count

    def register_blocked(self, largest: int) -> None:
        """Count a section that needs entries up to ``largest`` acknowledged."""
        if largest <= self.largest_known_received:
            return
        self.blocked_count += 1
        self.blocked_streams[largest] = self.blocked_streams.get(largest, 0) + 1

    def update_largest_received(self, increment: int) -> None:
        """Advance the known received count and unblock satisfied sections."""
        self.largest_known_received += increment
        if self.blocked_count == 0:
            return
        acked = [k for k in self.blocked_streams if k <= self.largest_known_received]
        for key in acked:
            self.blocked_count -= self.blocked_streams.pop(key)

    def _evict(self, to_evict: int) -> None:
        for _ in range(to_evict):
            if not self.fields:
                raise MaxTableSizeReached()
            field = self.fields.popleft()
            self.curr_size -= field.mem_size()
            self.vas.drop()

            name_index = self.name_map.get(field.name)
            if name_index is not None and self.vas.evicted(name_index):
                del self.name_map[field.name]

            field_index = self.field_map.get(field)
            if field_index is not None and self.vas.evicted(field_index):
                del self.field_map[field]

    def _can_free(self, required: int) -> Optional[int]:
        if required > self.max_size:
            raise MaxTableSizeReached()
        if self.max_size - self.curr_size >= required:
            return 0
        lower_bound = self.max_size - required

        hypothetic_size = self.curr_size
        evictable = 0
        for position, field in enumerate(self.fields):
            if hypothetic_size <= lower_bound:
                break
            if self.is_tracked(self.vas.index(position)):
                break
            evictable += 1
            hypothetic_size -= field.mem_size()

        if required <= self.max_size - hypothetic_size:
            return evictable
        return None