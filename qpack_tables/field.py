"""Header fields as stored in QPACK tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

ESTIMATED_OVERHEAD_BYTES = 32
"""Per-entry overhead added to name and value lengths when sizing a table entry."""

BytesLike = Union[str, bytes, bytearray, memoryview]


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected str or bytes-like object, got {type(data).__name__}")


@dataclass(frozen=True)
class HeaderField:
    """An immutable header name/value pair, both held as bytes."""

    name: bytes
    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _to_bytes(self.name))
        object.__setattr__(self, "value", _to_bytes(self.value))

    @classmethod
    def from_pair(cls, header: Tuple[BytesLike, BytesLike]) -> "HeaderField":
        """Build a field from a ``(name, value)`` pair."""
        name, value = header
        return cls(name, value)

    def mem_size(self) -> int:
        """Size of the entry as counted against the table capacity."""
        return len(self.name) + len(self.value) + ESTIMATED_OVERHEAD_BYTES

    def with_value(self, value: BytesLike) -> "HeaderField":
        """Return a field with the same name and a new value."""
        return HeaderField(self.name, value)

    def into_inner(self) -> Tuple[bytes, bytes]:
        """Return the ``(name, value)`` pair."""
        return self.name, self.value

    def to_tab_separated(self) -> str:
        """Render the field as ``name<TAB>value``."""
        return f"{_lossy(self.name)}\t{_lossy(self.value)}"

    def __str__(self) -> str:
        return f'"{_lossy(self.name)}": "{_lossy(self.value)}"'


def _lossy(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")