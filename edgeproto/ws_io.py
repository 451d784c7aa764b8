"""Sending and receiving WebSocket frames over asyncio streams.

Readers provide ``await readexactly(n)`` (as :class:`asyncio.StreamReader`
does); writers provide ``write(data)`` and ``await drain()`` (as
:class:`asyncio.StreamWriter` does). A stream that ends inside a frame is
reported as :class:`~edgeproto.ws.InvalidFrameError`; other stream errors
propagate unchanged.
"""

from __future__ import annotations

import asyncio

from .ws import (
    FrameHeader,
    FrameType,
    IncompleteError,
    InvalidFrameError,
    InvalidLenError,
    WsBufferOverflowError,
)


async def _read_exact(reader, n: int) -> bytes:
    try:
        return await reader.readexactly(n)
    except asyncio.IncompleteReadError as err:
        raise InvalidFrameError() from err


async def recv_header(reader) -> FrameHeader:
    """Read a frame header, fetching only as many bytes as it needs."""
    buf = b""
    needed = FrameHeader.MIN_LEN
    while True:
        buf += await _read_exact(reader, needed)
        try:
            header, _ = FrameHeader.deserialize(buf)
        except IncompleteError as err:
            needed = err.missing
        else:
            return header


async def send_header(header: FrameHeader, writer) -> None:
    writer.write(header.serialize())
    await writer.drain()


async def recv_payload(header: FrameHeader, reader, max_len: int | None = None) -> bytes:
    """Read and unmask the payload announced by ``header``."""
    if max_len is not None and max_len < header.payload_len:
        raise WsBufferOverflowError()
    if header.payload_len == 0:
        return b""
    payload = await _read_exact(reader, header.payload_len)
    return header.mask(payload, 0)


async def send_payload(header: FrameHeader, writer, payload) -> None:
    """Mask (if the header has a key) and write ``payload``."""
    payload = bytes(payload)
    if len(payload) != header.payload_len:
        raise InvalidLenError()
    if not payload:
        return
    writer.write(header.mask(payload, 0))
    await writer.drain()


async def recv(reader, max_len: int | None = None) -> tuple[FrameType, bytes]:
    """Read a whole frame and return its type and unmasked payload."""
    header = await recv_header(reader)
    payload = await recv_payload(header, reader, max_len)
    return header.frame_type, payload


async def send(writer, frame_type: FrameType, mask_key: int | None, data) -> None:
    """Write a whole frame carrying ``data``."""
    data = bytes(data)
    header = FrameHeader(frame_type, len(data), mask_key)
    await send_header(header, writer)
    await send_payload(header, writer, data)