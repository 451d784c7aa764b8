"""IPv4 packet header encoding and decoding."""

from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address
from typing import ClassVar

from .checksum import checksum_accumulate, checksum_finish
from .cursor import BytesIn, BytesOut
from .errors import BufferOverflowError, DataUnderflowError, InvalidChecksumError, InvalidFormatError

_UNSPECIFIED = IPv4Address(0)
_BROADCAST = IPv4Address("255.255.255.255")


def _ipv4(value) -> IPv4Address:
    if value is None:
        return _UNSPECIFIED
    return value if isinstance(value, IPv4Address) else IPv4Address(value)


def _u16(reader: BytesIn) -> int:
    return int.from_bytes(reader.arr(2), "big")


@dataclass
class Ipv4PacketHeader:
    """A parsed IPv4 header."""

    version: int
    hlen: int
    tos: int
    length: int
    ident: int
    frag_off: int
    ttl: int
    proto: int
    csum: int
    src: IPv4Address
    dst: IPv4Address

    MIN_SIZE: ClassVar[int] = 20
    CHECKSUM_WORD: ClassVar[int] = 5
    IP_DF: ClassVar[int] = 0x4000
    IP_MF: ClassVar[int] = 0x2000

    @classmethod
    def new(cls, src, dst, proto: int) -> Ipv4PacketHeader:
        """Create a header with default fields for the given endpoints."""
        return cls(
            version=4,
            hlen=cls.MIN_SIZE,
            tos=0,
            length=cls.MIN_SIZE,
            ident=0,
            frag_off=0,
            ttl=64,
            proto=proto,
            csum=0,
            src=_ipv4(src),
            dst=_ipv4(dst),
        )

    @classmethod
    def decode(cls, data) -> Ipv4PacketHeader:
        """Decode the fixed part of a header."""
        reader = BytesIn(data)
        vhl = reader.byte()
        return cls(
            version=vhl >> 4,
            hlen=(vhl & 0x0F) * 4,
            tos=reader.byte(),
            length=_u16(reader),
            ident=_u16(reader),
            frag_off=_u16(reader),
            ttl=reader.byte(),
            proto=reader.byte(),
            csum=_u16(reader),
            src=IPv4Address(reader.arr(4)),
            dst=IPv4Address(reader.arr(4)),
        )

    def encode(self) -> bytes:
        """Encode the fixed part of the header."""
        words = (self.hlen + 3) // 4
        out = BytesOut(self.MIN_SIZE)
        (
            out.byte(((self.version << 4) | words) & 0xFF)
            .byte(self.tos)
            .push((self.length & 0xFFFF).to_bytes(2, "big"))
            .push((self.ident & 0xFFFF).to_bytes(2, "big"))
            .push((self.frag_off & 0xFFFF).to_bytes(2, "big"))
            .byte(self.ttl)
            .byte(self.proto)
            .push((self.csum & 0xFFFF).to_bytes(2, "big"))
            .push(self.src.packed)
            .push(self.dst.packed)
        )
        return out.getvalue()

    def encode_with_payload(self, payload, capacity: int | None = None) -> bytes:
        """Encode header and payload, updating the length and checksum fields."""
        hdr_len = self.hlen
        if hdr_len < self.MIN_SIZE or (capacity is not None and capacity < hdr_len):
            raise BufferOverflowError()
        payload = bytes(payload)
        if capacity is not None and len(payload) > capacity - hdr_len:
            raise BufferOverflowError()

        self.length = (hdr_len + len(payload)) & 0xFFFF

        header = bytearray(self.encode())
        header.extend(bytes(hdr_len - self.MIN_SIZE))

        self.csum = self.checksum(header)
        self.inject_checksum(header, self.csum)

        return bytes(header) + payload

    @classmethod
    def decode_with_payload(
        cls, packet, filter_src=None, filter_dst=None, filter_proto: int | None = None
    ) -> tuple[Ipv4PacketHeader, bytes] | None:
        """Decode a packet into its header and payload.

        Returns ``None`` when the packet does not pass the filters. An
        unspecified (or ``None``) address filter matches any address, and a
        broadcast address in the packet passes any address filter.
        """
        packet = bytes(packet)
        hdr = cls.decode(packet)
        if hdr.version != 4:
            raise InvalidFormatError()

        filter_src = _ipv4(filter_src)
        filter_dst = _ipv4(filter_dst)

        if not filter_src.is_unspecified and hdr.src != _BROADCAST and filter_src != hdr.src:
            return None
        if not filter_dst.is_unspecified and hdr.dst != _BROADCAST and filter_dst != hdr.dst:
            return None
        if filter_proto is not None and filter_proto != hdr.proto:
            return None

        if len(packet) < hdr.length:
            raise DataUnderflowError()
        packet = packet[: hdr.length]

        if cls.checksum(packet) != hdr.csum:
            raise InvalidChecksumError()

        if len(packet) < hdr.hlen:
            raise DataUnderflowError()

        return hdr, packet[hdr.hlen :]

    @staticmethod
    def inject_checksum(packet: bytearray, checksum: int) -> None:
        """Write ``checksum`` into the checksum field of an encoded header."""
        offset = Ipv4PacketHeader.CHECKSUM_WORD << 1
        packet[offset : offset + 2] = checksum.to_bytes(2, "big")

    @staticmethod
    def checksum(packet) -> int:
        """Compute the header checksum of an encoded packet."""
        if not packet:
            raise DataUnderflowError()
        hlen = (packet[0] & 0x0F) * 4
        if len(packet) < hlen:
            raise DataUnderflowError()
        return checksum_finish(checksum_accumulate(packet[:hlen], Ipv4PacketHeader.CHECKSUM_WORD))


def decode(
    packet, filter_src=None, filter_dst=None, filter_proto: int | None = None
) -> tuple[IPv4Address, IPv4Address, int, bytes] | None:
    """Decode an IPv4 packet into ``(src, dst, proto, payload)``, or ``None`` if filtered out."""
    decoded = Ipv4PacketHeader.decode_with_payload(packet, filter_src, filter_dst, filter_proto)
    if decoded is None:
        return None
    hdr, payload = decoded
    return hdr.src, hdr.dst, hdr.proto, payload


def encode(src, dst, proto: int, payload, capacity: int | None = None) -> bytes:
    """Encode an IPv4 packet carrying ``payload``."""
    return Ipv4PacketHeader.new(src, dst, proto).encode_with_payload(payload, capacity)