"""UDP datagram header encoding and decoding."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import ClassVar

from .checksum import checksum_accumulate, checksum_finish
from .cursor import BytesIn, BytesOut
from .errors import BufferOverflowError, DataUnderflowError, InvalidChecksumError


def _ipv4(value) -> IPv4Address:
    return value if isinstance(value, IPv4Address) else IPv4Address(value)


def _u16(reader: BytesIn) -> int:
    return int.from_bytes(reader.arr(2), "big")


@dataclass
class UdpPacketHeader:
    """A parsed UDP header."""

    src: int
    dst: int
    length: int
    csum: int

    PROTO: ClassVar[int] = 17
    SIZE: ClassVar[int] = 8
    CHECKSUM_WORD: ClassVar[int] = 3

    @classmethod
    def new(cls, src: int, dst: int) -> UdpPacketHeader:
        return cls(src=src, dst=dst, length=0, csum=0)

    @classmethod
    def decode(cls, data) -> UdpPacketHeader:
        reader = BytesIn(data)
        return cls(src=_u16(reader), dst=_u16(reader), length=_u16(reader), csum=_u16(reader))

    def encode(self) -> bytes:
        out = BytesOut(self.SIZE)
        for value in (self.src, self.dst, self.length, self.csum):
            out.push((value & 0xFFFF).to_bytes(2, "big"))
        return out.getvalue()

    def encode_with_payload(self, payload, src, dst, capacity: int | None = None) -> bytes:
        """Encode header and payload, updating the length and checksum fields.

        ``src`` and ``dst`` are the IP addresses used in the pseudo header.
        """
        if capacity is not None and capacity < self.SIZE:
            raise BufferOverflowError()
        payload = bytes(payload)
        if capacity is not None and len(payload) > capacity - self.SIZE:
            raise BufferOverflowError()

        self.length = (self.SIZE + len(payload)) & 0xFFFF

        packet = bytearray(self.encode())
        packet.extend(payload)

        self.csum = self.checksum(packet, src, dst)
        self.inject_checksum(packet, self.csum)

        return bytes(packet)

    @classmethod
    def decode_with_payload(
        cls, packet, src, dst, filter_src: int | None = None, filter_dst: int | None = None
    ) -> tuple[UdpPacketHeader, bytes] | None:
        """Decode a datagram into its header and payload, or ``None`` if the ports are filtered out."""
        packet = bytes(packet)
        hdr = cls.decode(packet)

        if filter_src is not None and filter_src != hdr.src:
            return None
        if filter_dst is not None and filter_dst != hdr.dst:
            return None

        if len(packet) < hdr.length:
            raise DataUnderflowError()
        packet = packet[: hdr.length]

        if cls.checksum(packet, src, dst) != hdr.csum:
            raise InvalidChecksumError()

        if len(packet) < cls.SIZE:
            raise DataUnderflowError()

        return hdr, packet[cls.SIZE :]

    @staticmethod
    def inject_checksum(packet: bytearray, checksum: int) -> None:
        """Write ``checksum`` into the checksum field of an encoded datagram."""
        offset = UdpPacketHeader.CHECKSUM_WORD << 1
        packet[offset : offset + 2] = checksum.to_bytes(2, "big")

    @staticmethod
    def checksum(packet, src, dst) -> int:
        """Compute the checksum of an encoded datagram, pseudo header included."""
        pseudo = (
            BytesOut(12)
            .push(_ipv4(src).packed)
            .push(_ipv4(dst).packed)
            .byte(0)
            .byte(UdpPacketHeader.PROTO)
            .push((len(packet) & 0xFFFF).to_bytes(2, "big"))
            .getvalue()
        )
        total = checksum_accumulate(pseudo, None) + checksum_accumulate(
            packet, UdpPacketHeader.CHECKSUM_WORD
        )
        return checksum_finish(total)


def decode(
    src, dst, packet, filter_src: int | None = None, filter_dst: int | None = None
) -> tuple[tuple[IPv4Address, int], tuple[IPv4Address, int], bytes] | None:
    """Decode a datagram sent from IP ``src`` to IP ``dst``.

    Returns ``((src_ip, src_port), (dst_ip, dst_port), payload)`` or ``None``.
    """
    src, dst = _ipv4(src), _ipv4(dst)
    decoded = UdpPacketHeader.decode_with_payload(packet, src, dst, filter_src, filter_dst)
    if decoded is None:
        return None
    hdr, payload = decoded
    return (src, hdr.src), (dst, hdr.dst), payload


def encode(src, dst, payload, capacity: int | None = None) -> bytes:
    """Encode a datagram between ``(ip, port)`` endpoints ``src`` and ``dst``."""
    src_ip, src_port = src
    dst_ip, dst_port = dst
    return UdpPacketHeader.new(src_port, dst_port).encode_with_payload(
        payload, src_ip, dst_ip, capacity
    )