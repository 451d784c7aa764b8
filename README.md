# edgeproto

Small, dependency-free building blocks for low-level network protocols:

- **IPv4 and UDP packets**: build and parse packets, with checksums and
  source/destination filtering (`edgeproto.ip`, `edgeproto.udp`,
  `edgeproto.packet`, `edgeproto.checksum`).
- **UDP over raw sockets**: send and receive UDP datagrams through a raw
  (link-layer) socket, addressing the peer by its MAC address. This is useful
  where the local host has no IP address yet, as with DHCP
  (`edgeproto.rawudp`).
- **WebSocket frames**: frame headers, masking, and async send/receive of
  whole frames over asyncio stream readers and writers (`edgeproto.ws`,
  `edgeproto.ws_io`).

## Installation

```
pip install edgeproto
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install "edgeproto[test]"
pytest
```

## IPv4 / UDP packets

```python
from ipaddress import IPv4Address

from edgeproto.packet import ip_udp_decode, ip_udp_encode

src = (IPv4Address("192.168.0.1"), 67)
dst = (IPv4Address("255.255.255.255"), 68)

packet = ip_udp_encode(src, dst, b"hello", 1500)

result = ip_udp_decode(packet, None, dst)
if result is not None:
    remote, local, payload = result
```

Endpoints are `(ip, port)` tuples. The optional `capacity` argument of the
encoders bounds the size of the encoded packet; exceeding it raises
`BufferOverflowError`.

`ip_udp_decode` returns `None` when the packet is not UDP or does not match
the given filters. A filter address of `None` or `0.0.0.0` matches any
address, and a packet sent to or from the broadcast address passes any
address filter. Malformed packets raise a subclass of
`edgeproto.errors.RawError`: `DataUnderflowError`, `BufferOverflowError`,
`InvalidFormatError` or `InvalidChecksumError`.

For more control, use `Ipv4PacketHeader` and `UdpPacketHeader` directly, or
the module-level `encode` / `decode` functions in `edgeproto.ip` and
`edgeproto.udp`. `edgeproto.checksum` provides the ones' complement sum
(`checksum_accumulate`, `checksum_finish`) that both headers use, and
`edgeproto.cursor` the bounded `BytesIn` reader and `BytesOut` writer.

## UDP over a raw socket

`RawSocket2Udp` wraps an object that sends and receives whole IP packets
together with the MAC address of the peer. That object provides the
coroutines `receive(max_len) -> (frame, mac)`, `send(mac, frame)` and
`readable()`, and, for `RawSocket2Udp.split()`, a plain
`split() -> (receiver, sender)`.

`RawSocket2Udp` provides UDP-style `send(remote, data)` and
`receive(max_len)` coroutines and encodes and decodes the IP and UDP headers
itself. Every datagram is sent to the configured `remote_mac` (broadcast by
default), from the local filter endpoint or `0.0.0.0:0`. Incoming packets
that are not UDP, do not match the local or remote filter, are not IPv4 or
carry a wrong checksum are skipped; a truncated packet raises
`DataUnderflowError`. IPv6 endpoints raise `UnsupportedProtocolError`.

The functions `udp_send` and `udp_receive` offer the same operations without
the wrapper.

## WebSocket frames

```python
from edgeproto.ws import FrameHeader, FrameType
from edgeproto import ws_io

header = FrameHeader(FrameType.text(False), 5, 0x12345678)
raw = header.serialize()
parsed, header_len = FrameHeader.deserialize(raw)
```

Over asyncio streams (`readexactly` on the reader, `write` and `drain` on the
writer):

```python
await ws_io.send(writer, FrameType.text(False), None, b"Hello")
frame_type, payload = await ws_io.recv(reader, 8192)
```

`ws_io` also exposes the parts separately: `recv_header`, `recv_payload`,
`send_header` and `send_payload`. Payloads are masked and unmasked with the
header's `mask_key`; `FrameHeader.mask` and `FrameHeader.mask_with` do the
same on their own.

Errors all derive from `WsError`:

- `FrameHeader.deserialize` raises `IncompleteError` (with `missing`, the
  number of bytes still needed) when the buffer is too short, and
  `InvalidFrameError` for reserved bits or opcodes.
- `FrameHeader.serialize` and `send_payload` raise `InvalidLenError` when a
  length is out of range or does not match the header.
- `recv_payload` raises `WsBufferOverflowError` when the payload is longer
  than `max_len`, and a stream that ends inside a frame raises
  `InvalidFrameError`.

## What this package does not do

It does not open raw or network sockets itself; the raw socket object for
`RawSocket2Udp` and the streams for `ws_io` come from the caller. It has no
DHCP, DNS or HTTP logic, and does not perform the HTTP upgrade handshake that
precedes a WebSocket connection.