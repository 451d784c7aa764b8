import pytest

from edgeproto.ws import (
    FrameHeader,
    FrameKind,
    FrameType,
    IncompleteError,
    InvalidFrameError,
    InvalidLenError,
    WsError,
)

RFC_UNMASKED_HELLO = bytes([0x81, 0x05]) + b"Hello"
RFC_MASKED_HELLO = bytes([0x81, 0x85, 0x37, 0xFA, 0x21, 0x3D, 0x7F, 0x9F, 0x4D, 0x51, 0x58])


@pytest.mark.parametrize(
    "frame_type, fragmented, final",
    [
        (FrameType.text(False), False, True),
        (FrameType.text(True), True, False),
        (FrameType.binary(False), False, True),
        (FrameType.binary(True), True, False),
        (FrameType.continuation(True), True, True),
        (FrameType.continuation(False), True, False),
        (FrameType.ping(), False, True),
        (FrameType.pong(), False, True),
        (FrameType.close(), False, True),
    ],
)
def test_fragmentation_flags(frame_type, fragmented, final):
    assert frame_type.is_fragmented() is fragmented
    assert frame_type.is_final() is final


@pytest.mark.parametrize(
    "frame_type, text",
    [
        (FrameType.text(False), "Text"),
        (FrameType.text(True), "Text (fragmented)"),
        (FrameType.binary(True), "Binary (fragmented)"),
        (FrameType.continuation(True), "Continue (final)"),
        (FrameType.continuation(False), "Continue"),
        (FrameType.ping(), "Ping"),
        (FrameType.pong(), "Pong"),
        (FrameType.close(), "Close"),
    ],
)
def test_frame_type_str(frame_type, text):
    assert str(frame_type) == text


def test_unmasked_rfc_header():
    header, offset = FrameHeader.deserialize(RFC_UNMASKED_HELLO)
    assert header.frame_type == FrameType.text(False)
    assert header.payload_len == 5
    assert header.mask_key is None
    assert RFC_UNMASKED_HELLO[offset:] == b"Hello"


def test_masked_rfc_header_and_unmask():
    header, offset = FrameHeader.deserialize(RFC_MASKED_HELLO)
    assert header.mask_key == 0x37FA213D
    assert header.mask(RFC_MASKED_HELLO[offset:]) == b"Hello"
    assert header.serialize() == RFC_MASKED_HELLO[:offset]


@pytest.mark.parametrize("payload_len", [0, 125, 126, 65535, 65536, 1 << 40])
@pytest.mark.parametrize("mask_key", [None, 0, 0xDEADBEEF])
@pytest.mark.parametrize(
    "frame_type",
    [FrameType.text(True), FrameType.binary(False), FrameType.continuation(False), FrameType.close()],
)
def test_serialize_round_trip(payload_len, mask_key, frame_type):
    header = FrameHeader(frame_type, payload_len, mask_key)
    wire = header.serialize()
    assert len(wire) == header.serialized_len()
    decoded, offset = FrameHeader.deserialize(wire + b"extra")
    assert decoded == header
    assert offset == len(wire)


def test_max_len_is_largest_serialized_len():
    header = FrameHeader(FrameType.binary(False), (1 << 64) - 1, 0xFFFFFFFF)
    assert len(header.serialize()) == FrameHeader.MAX_LEN


def test_incomplete_reports_missing_bytes():
    with pytest.raises(IncompleteError) as info:
        FrameHeader.deserialize(b"")
    assert info.value.missing == FrameHeader.MIN_LEN

    with pytest.raises(IncompleteError) as info:
        FrameHeader.deserialize(bytes([0x81, 0x7E]))
    assert info.value.missing == 2


def test_incomplete_progressive_reads_reach_header():
    wire = FrameHeader(FrameType.binary(False), 70000, 0x01020304).serialize()
    buf = b""
    needed = FrameHeader.MIN_LEN
    while True:
        buf += wire[len(buf) : len(buf) + needed]
        try:
            header, offset = FrameHeader.deserialize(buf)
            break
        except IncompleteError as err:
            needed = err.missing
    assert offset == len(wire)
    assert header.payload_len == 70000


@pytest.mark.parametrize("first", [0x91, 0xA1, 0xC1, 0x83, 0x87, 0x8B, 0x8F])
def test_invalid_headers(first):
    with pytest.raises(InvalidFrameError):
        FrameHeader.deserialize(bytes([first, 0x00]))


def test_invalid_len_on_negative_payload():
    with pytest.raises(InvalidLenError):
        FrameHeader(FrameType.text(), -1).serialize()


def test_error_hierarchy_and_message():
    err = IncompleteError(3)
    assert isinstance(err, WsError)
    assert str(err) == "Incomplete: 3 bytes missing"


def test_mask_is_involution_with_offsets():
    data = bytes(range(50))
    header = FrameHeader(FrameType.binary(), len(data), 0xA1B2C3D4)
    masked = header.mask(data)
    assert masked != data
    assert header.mask(masked) == data
    assert header.mask(data[:7]) + header.mask(data[7:], 7) == masked


def test_mask_without_key_is_identity():
    assert FrameHeader.mask_with(b"abc", None, 3) == b"abc"


def test_header_str_mentions_fields():
    text = str(FrameHeader(FrameType.ping(), 4, None))
    assert text.startswith("Frame { Ping, payload len 4")


def test_frame_kind_opcodes():
    assert FrameKind(1) is FrameKind.TEXT
    assert FrameKind.CONTINUE.value == 0