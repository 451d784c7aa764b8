import pytest

from edgeproto.cursor import BytesIn, BytesOut
from edgeproto.errors import (
    BufferOverflowError,
    DataUnderflowError,
    InvalidChecksumError,
    InvalidFormatError,
    RawError,
)


@pytest.mark.parametrize(
    "cls, message",
    [
        (DataUnderflowError, "Data underflow"),
        (BufferOverflowError, "Buffer overflow"),
        (InvalidFormatError, "Invalid format"),
        (InvalidChecksumError, "Invalid checksum"),
    ],
)
def test_default_messages(cls, message):
    assert str(cls()) == message


def test_custom_message_is_kept():
    assert str(BufferOverflowError("no room left")) == "no room left"


def test_underflow_caught_as_base_error():
    with pytest.raises(RawError) as info:
        BytesIn(b"").byte()
    assert isinstance(info.value, DataUnderflowError)


def test_overflow_caught_as_base_error():
    with pytest.raises(RawError) as info:
        BytesOut(0).byte(1)
    assert isinstance(info.value, BufferOverflowError)