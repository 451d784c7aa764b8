"""Combined IPv4 + UDP packet encoding and decoding."""

from __future__ import annotations

from ipaddress import IPv4Address

from . import ip, udp
from .errors import BufferOverflowError
from .ip import Ipv4PacketHeader
from .udp import UdpPacketHeader


def ip_udp_decode(
    packet, filter_src=None, filter_dst=None
) -> tuple[tuple[IPv4Address, int], tuple[IPv4Address, int], bytes] | None:
    """Decode an IPv4 packet carrying a UDP datagram.

    ``filter_src`` and ``filter_dst`` are optional ``(ip, port)`` endpoints.
    Returns ``((src_ip, src_port), (dst_ip, dst_port), payload)``, or ``None``
    when the packet is not UDP or does not pass the filters.
    """
    decoded = ip.decode(
        packet,
        filter_src[0] if filter_src is not None else None,
        filter_dst[0] if filter_dst is not None else None,
        UdpPacketHeader.PROTO,
    )
    if decoded is None:
        return None
    src, dst, _proto, udp_packet = decoded
    return udp.decode(
        src,
        dst,
        udp_packet,
        filter_src[1] if filter_src is not None else None,
        filter_dst[1] if filter_dst is not None else None,
    )


def ip_udp_encode(src, dst, payload, capacity: int | None = None) -> bytes:
    """Encode ``payload`` as a UDP datagram inside an IPv4 packet."""
    if capacity is not None and capacity < Ipv4PacketHeader.MIN_SIZE:
        raise BufferOverflowError()
    udp_capacity = None if capacity is None else capacity - Ipv4PacketHeader.MIN_SIZE
    datagram = udp.encode(src, dst, payload, udp_capacity)
    return ip.encode(src[0], dst[0], UdpPacketHeader.PROTO, datagram, capacity)