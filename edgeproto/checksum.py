"""The ones' complement checksum used by IPv4 and UDP headers."""

from __future__ import annotations


def checksum_accumulate(data: bytes | bytearray | memoryview, checksum_word: int | None = None) -> int:
    """Sum the big-endian 16-bit words of ``data``.

    The word at index ``checksum_word`` (the checksum field itself) is
    skipped; ``None`` skips nothing. A trailing odd byte is zero padded.
    """
    data = bytes(data)
    total = 0
    for index, start in enumerate(range(0, len(data), 2)):
        if index == checksum_word:
            continue
        total += int.from_bytes(data[start : start + 2].ljust(2, b"\x00"), "big")
    return total


def checksum_finish(total: int) -> int:
    """Fold the carries of an accumulated sum and return its complement."""
    while total >> 16:
        total = (total >> 16) + (total & 0xFFFF)
    return ~total & 0xFFFF