"""WebSocket frame headers: types, parsing, serialization and masking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class WsError(Exception):
    """Base class for WebSocket framing errors."""

    default_message = "WebSocket error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class IncompleteError(WsError):
    """More bytes are needed to decode a frame header."""

    def __init__(self, missing: int) -> None:
        self.missing = missing
        super().__init__(f"Incomplete: {missing} bytes missing")


class InvalidFrameError(WsError):
    """The frame is malformed or the stream ended in the middle of it."""

    default_message = "Invalid"


class WsBufferOverflowError(WsError):
    """The payload is larger than the space allowed for it."""

    default_message = "Buffer overflow"


class InvalidLenError(WsError):
    """A length does not match the one the header announces."""

    default_message = "Invalid length"


class FrameKind(Enum):
    """Frame kinds, valued by their opcode."""

    CONTINUE = 0
    TEXT = 1
    BINARY = 2
    CLOSE = 8
    PING = 9
    PONG = 10


@dataclass(frozen=True)
class FrameType:
    """A frame kind with its fragmentation flag.

    For text and binary frames ``flag`` tells whether the frame is
    fragmented; for continuation frames it tells whether it is the final one.
    Other kinds ignore it.
    """

    kind: FrameKind
    flag: bool = False

    @classmethod
    def text(cls, fragmented: bool = False) -> FrameType:
        return cls(FrameKind.TEXT, fragmented)

    @classmethod
    def binary(cls, fragmented: bool = False) -> FrameType:
        return cls(FrameKind.BINARY, fragmented)

    @classmethod
    def ping(cls) -> FrameType:
        return cls(FrameKind.PING)

    @classmethod
    def pong(cls) -> FrameType:
        return cls(FrameKind.PONG)

    @classmethod
    def close(cls) -> FrameType:
        return cls(FrameKind.CLOSE)

    @classmethod
    def continuation(cls, final: bool) -> FrameType:
        return cls(FrameKind.CONTINUE, final)

    def is_fragmented(self) -> bool:
        if self.kind in (FrameKind.TEXT, FrameKind.BINARY):
            return self.flag
        return self.kind is FrameKind.CONTINUE

    def is_final(self) -> bool:
        if self.kind in (FrameKind.TEXT, FrameKind.BINARY):
            return not self.flag
        if self.kind is FrameKind.CONTINUE:
            return self.flag
        return True

    def __str__(self) -> str:
        if self.kind is FrameKind.TEXT:
            return "Text (fragmented)" if self.flag else "Text"
        if self.kind is FrameKind.BINARY:
            return "Binary (fragmented)" if self.flag else "Binary"
        if self.kind is FrameKind.CONTINUE:
            return "Continue (final)" if self.flag else "Continue"
        return self.kind.name.capitalize()


@dataclass
class FrameHeader:
    """A WebSocket frame header."""

    frame_type: FrameType
    payload_len: int
    mask_key: int | None = None

    MIN_LEN: ClassVar[int] = 2
    MAX_LEN: ClassVar[int]

    @classmethod
    def deserialize(cls, buf) -> tuple[FrameHeader, int]:
        """Parse a header from the start of ``buf``.

        Returns the header and the offset at which the payload starts.
        Raises :class:`IncompleteError` when ``buf`` is too short.
        """
        buf = bytes(buf)
        expected = 2
        if len(buf) < expected:
            raise IncompleteError(expected - len(buf))

        final_frame = bool(buf[0] & 0x80)
        if buf[0] & 0x70:
            raise InvalidFrameError()

        opcode = buf[0] & 0x0F
        if 3 <= opcode <= 7 or opcode >= 11:
            raise InvalidFrameError()

        payload_len = buf[1] & 0x7F
        offset = 2

        if payload_len in (126, 127):
            size = 2 if payload_len == 126 else 8
            expected += size
            if len(buf) < expected:
                raise IncompleteError(expected - len(buf))
            payload_len = int.from_bytes(buf[offset : offset + size], "big")
            offset += size

        mask_key = None
        if buf[1] & 0x80:
            expected += 4
            if len(buf) < expected:
                raise IncompleteError(expected - len(buf))
            mask_key = int.from_bytes(buf[offset : offset + 4], "big")
            offset += 4

        kind = FrameKind(opcode)
        if kind is FrameKind.CONTINUE:
            frame_type = FrameType.continuation(final_frame)
        elif kind in (FrameKind.TEXT, FrameKind.BINARY):
            frame_type = FrameType(kind, not final_frame)
        else:
            frame_type = FrameType(kind)

        return cls(frame_type, payload_len, mask_key), offset

    def serialized_len(self) -> int:
        if self.payload_len >= 65536:
            len_len = 8
        elif self.payload_len >= 126:
            len_len = 2
        else:
            len_len = 0
        return 2 + (4 if self.mask_key is not None else 0) + len_len

    def serialize(self) -> bytes:
        """Encode the header into its wire form."""
        if not 0 <= self.payload_len < 1 << 64:
            raise InvalidLenError()

        first = (0x80 if self.frame_type.is_final() else 0) | self.frame_type.kind.value
        out = bytearray([first, 0])

        if self.payload_len < 126:
            out[1] |= self.payload_len
        elif self.payload_len < 65536:
            out[1] |= 126
            out += self.payload_len.to_bytes(2, "big")
        else:
            out[1] |= 127
            out += self.payload_len.to_bytes(8, "big")

        if self.mask_key is not None:
            out[1] |= 0x80
            out += self.mask_key.to_bytes(4, "big")

        return bytes(out)

    def mask(self, data, payload_offset: int = 0) -> bytes:
        """Mask (or unmask) ``data`` that starts at ``payload_offset`` in the payload."""
        return self.mask_with(data, self.mask_key, payload_offset)

    @staticmethod
    def mask_with(data, mask_key: int | None, payload_offset: int = 0) -> bytes:
        """Apply ``mask_key`` to ``data``; without a key the data is returned unchanged."""
        data = bytes(data)
        if mask_key is None:
            return data
        key = mask_key.to_bytes(4, "big")
        return bytes(byte ^ key[(payload_offset + i) % 4] for i, byte in enumerate(data))

    def __str__(self) -> str:
        return (
            f"Frame {{ {self.frame_type}, payload len {self.payload_len}, "
            f"mask {self.mask_key} }}"
        )


FrameHeader.MAX_LEN = FrameHeader(FrameType.binary(False), 65536, 0).serialized_len()