"""UDP over a raw (link layer) socket, addressed by the peer's MAC address.

Unlike a regular UDP socket, :class:`RawSocket2Udp` sends every datagram to a
fixed remote MAC address. This lets a DHCP client work before it has an IP
address, and lets a DHCP server reach clients that have none yet.

The wrapped raw socket is any object with these coroutine methods:

* ``receive(max_len) -> (frame, mac)``: the next IP packet and its sender's MAC
* ``send(mac, frame)``: transmit an IP packet to ``mac``
* ``readable()``: wait until a packet can be received

and, for :meth:`RawSocket2Udp.split`, a plain ``split() -> (receiver, sender)``.
"""

from __future__ import annotations

from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any, Protocol

from .errors import BufferOverflowError, InvalidChecksumError, InvalidFormatError, RawError
from .packet import ip_udp_decode, ip_udp_encode

DEFAULT_BUFFER_SIZE = 1500
BROADCAST_MAC = b"\xff" * 6

Endpoint = tuple[IPv4Address, int]


class RawSocket(Protocol):
    async def receive(self, max_len: int) -> tuple[bytes, bytes]: ...

    async def send(self, mac: bytes, data: bytes) -> None: ...


class UnsupportedProtocolError(RawError):
    """An address is not an IPv4 socket address."""

    default_message = "Unsupported protocol"


def _v4_endpoint(addr) -> Endpoint:
    host, port = addr
    if not isinstance(host, (IPv4Address, IPv6Address)):
        host = ip_address(host)
    if not isinstance(host, IPv4Address):
        raise UnsupportedProtocolError()
    return host, int(port)


def _optional_endpoint(addr) -> Endpoint | None:
    return None if addr is None else _v4_endpoint(addr)


async def udp_send(
    socket: RawSocket,
    local,
    remote,
    remote_mac: bytes,
    data,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> None:
    """Send ``data`` from ``local`` to ``remote`` as a UDP/IPv4 packet to ``remote_mac``."""
    local = _v4_endpoint(local)
    remote = _v4_endpoint(remote)
    packet = ip_udp_encode(local, remote, bytes(data), buffer_size)
    await socket.send(bytes(remote_mac), packet)


async def udp_receive(
    socket: RawSocket,
    filter_local=None,
    filter_remote=None,
    max_len: int | None = None,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> tuple[bytes, Endpoint, Endpoint, bytes]:
    """Receive the next UDP datagram that passes the filters.

    Packets that are not UDP, do not match the filters, are malformed or
    carry a bad checksum are skipped. Returns
    ``(payload, local, remote, remote_mac)``.
    """
    filter_local = _optional_endpoint(filter_local)
    filter_remote = _optional_endpoint(filter_remote)

    while True:
        frame, remote_mac = await socket.receive(buffer_size)
        try:
            decoded = ip_udp_decode(frame, filter_remote, filter_local)
        except (InvalidFormatError, InvalidChecksumError):
            continue
        if decoded is None:
            continue

        remote, local, payload = decoded
        if max_len is not None and len(payload) > max_len:
            raise BufferOverflowError()
        return payload, local, remote, bytes(remote_mac)


class RawSocket2Udp:
    """Sends and receives UDP datagrams over a raw socket."""

    def __init__(
        self,
        socket: Any,
        filter_local=None,
        filter_remote=None,
        remote_mac: bytes = BROADCAST_MAC,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self.socket = socket
        self.filter_local = _optional_endpoint(filter_local)
        self.filter_remote = _optional_endpoint(filter_remote)
        self.remote_mac = bytes(remote_mac)
        self.buffer_size = buffer_size

    async def receive(self, max_len: int | None = None) -> tuple[bytes, Endpoint]:
        """Receive the next matching datagram as ``(payload, remote)``."""
        payload, _local, remote, _mac = await udp_receive(
            self.socket, self.filter_local, self.filter_remote, max_len, self.buffer_size
        )
        return payload, remote

    async def readable(self) -> None:
        """Wait until the underlying socket has a packet to read."""
        await self.socket.readable()

    async def send(self, remote, data) -> None:
        """Send ``data`` to the IPv4 endpoint ``remote`` via the configured MAC."""
        remote = _v4_endpoint(remote)
        local = self.filter_local if self.filter_local is not None else (IPv4Address(0), 0)
        await udp_send(self.socket, local, remote, self.remote_mac, data, self.buffer_size)

    def split(self) -> tuple[RawSocket2Udp, RawSocket2Udp]:
        """Split into a receiving and a sending half with the same settings."""
        receiver, sender = self.socket.split()
        return (
            RawSocket2Udp(
                receiver, self.filter_local, self.filter_remote, self.remote_mac, self.buffer_size
            ),
            RawSocket2Udp(
                sender, self.filter_local, self.filter_remote, self.remote_mac, self.buffer_size
            ),
        )