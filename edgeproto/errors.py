"""Errors raised while encoding and decoding IP and UDP packets."""


class RawError(Exception):
    """Base class for packet encoding and decoding errors."""

    default_message = "Raw packet error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class DataUnderflowError(RawError):
    """The input ended before the expected amount of data was read."""

    default_message = "Data underflow"


class BufferOverflowError(RawError):
    """The output does not fit into the available space."""

    default_message = "Buffer overflow"


class InvalidFormatError(RawError):
    """The input is not in the expected format."""

    default_message = "Invalid format"


class InvalidChecksumError(RawError):
    """The checksum carried by a packet does not match its contents."""

    default_message = "Invalid checksum"