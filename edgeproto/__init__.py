"""IPv4/UDP packet encoding, UDP over raw sockets, and WebSocket framing."""

__version__ = "0.6.0"

__all__ = ["__version__"]