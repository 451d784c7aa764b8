"""Bounded readers and writers over byte sequences."""

from __future__ import annotations

from .errors import BufferOverflowError, DataUnderflowError, InvalidFormatError


class BytesIn:
    """Reads consecutive fields out of a byte sequence."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._offset = 0

    def is_empty(self) -> bool:
        return self._offset == len(self._data)

    def offset(self) -> int:
        return self._offset

    def _left(self) -> int:
        return len(self._data) - self._offset

    def byte(self) -> int:
        return self.arr(1)[0]

    def slice(self, length: int) -> bytes:
        """Read exactly ``length`` bytes."""
        if length > self._left():
            raise DataUnderflowError()
        data = self._data[self._offset : self._offset + length]
        self._offset += length
        return data

    def arr(self, n: int) -> bytes:
        return self.slice(n)

    def remaining(self) -> bytes:
        """Read everything that is left."""
        return self.slice(self._left())

    def remaining_byte(self) -> int:
        return self.remaining_arr(1)[0]

    def remaining_arr(self, n: int) -> bytes:
        """Read ``n`` bytes which must be the last bytes of the input."""
        if self._left() > n:
            raise InvalidFormatError()
        return self.arr(n)


class BytesOut:
    """Appends fields to a byte buffer of bounded capacity."""

    def __init__(self, capacity: int | None = None) -> None:
        self._capacity = capacity
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def is_empty(self) -> bool:
        return len(self._buf) == 0

    def byte(self, value: int) -> BytesOut:
        return self.push(bytes([value]))

    def push(self, data: bytes | bytearray | memoryview) -> BytesOut:
        """Append ``data``; raise if it does not fit into the capacity."""
        if self._capacity is not None and len(data) > self._capacity - len(self._buf):
            raise BufferOverflowError()
        self._buf.extend(data)
        return self

    def getvalue(self) -> bytes:
        return bytes(self._buf)