import asyncio

import pytest

from edgeproto.ws import (
    FrameHeader,
    FrameType,
    InvalidFrameError,
    InvalidLenError,
    WsBufferOverflowError,
)
from edgeproto.ws_io import recv, recv_header, recv_payload, send, send_header, send_payload

RFC_MASKED_HELLO = bytes([0x81, 0x85, 0x37, 0xFA, 0x21, 0x3D, 0x7F, 0x9F, 0x4D, 0x51, 0x58])


class _Writer:
    def __init__(self):
        self.data = bytearray()
        self.drains = 0

    def write(self, data):
        self.data += data

    async def drain(self):
        self.drains += 1


def _reader(data: bytes) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader


@pytest.mark.asyncio
async def test_send_matches_rfc_masked_example():
    writer = _Writer()
    await send(writer, FrameType.text(False), 0x37FA213D, b"Hello")
    assert bytes(writer.data) == RFC_MASKED_HELLO


@pytest.mark.asyncio
async def test_recv_rfc_masked_example():
    frame_type, payload = await recv(_reader(RFC_MASKED_HELLO))
    assert frame_type == FrameType.text(False)
    assert payload == b"Hello"


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [0, 1, 125, 126, 300, 65535, 70000])
@pytest.mark.parametrize("mask_key", [None, 0x12345678])
async def test_round_trip(size, mask_key):
    data = bytes(i % 251 for i in range(size))
    writer = _Writer()
    await send(writer, FrameType.binary(True), mask_key, data)
    frame_type, payload = await recv(_reader(bytes(writer.data)))
    assert frame_type == FrameType.binary(True)
    assert payload == data


@pytest.mark.asyncio
async def test_recv_header_leaves_payload_unread():
    header = FrameHeader(FrameType.ping(), 3, None)
    writer = _Writer()
    await send_header(header, writer)
    await send_payload(header, writer, b"abc")
    reader = _reader(bytes(writer.data))
    assert await recv_header(reader) == header
    assert await reader.read() == b"abc"


@pytest.mark.asyncio
async def test_eof_in_header_is_invalid():
    wire = FrameHeader(FrameType.text(), 1000, 1).serialize()
    with pytest.raises(InvalidFrameError):
        await recv_header(_reader(wire[:-1]))


@pytest.mark.asyncio
async def test_eof_in_payload_is_invalid():
    header = FrameHeader(FrameType.text(), 10)
    with pytest.raises(InvalidFrameError):
        await recv_payload(header, _reader(b"short"))


@pytest.mark.asyncio
async def test_payload_larger_than_max_len():
    writer = _Writer()
    await send(writer, FrameType.binary(), None, b"0123456789")
    with pytest.raises(WsBufferOverflowError):
        await recv(_reader(bytes(writer.data)), max_len=9)


@pytest.mark.asyncio
async def test_send_payload_length_mismatch():
    header = FrameHeader(FrameType.text(), 4)
    with pytest.raises(InvalidLenError):
        await send_payload(header, _Writer(), b"abc")


@pytest.mark.asyncio
async def test_empty_payload_writes_only_header():
    writer = _Writer()
    await send(writer, FrameType.close(), 0xAABBCCDD, b"")
    header = FrameHeader(FrameType.close(), 0, 0xAABBCCDD)
    assert bytes(writer.data) == header.serialize()
    assert await recv_payload(header, _reader(b"")) == b""


@pytest.mark.asyncio
async def test_masked_payload_on_wire_differs_from_plain():
    writer = _Writer()
    header = FrameHeader(FrameType.binary(), 40, 0x0F0F0F0F)
    data = bytes(range(40))
    await send_payload(header, writer, data)
    assert bytes(writer.data) == header.mask(data)
    assert bytes(writer.data) != data