"""gpsd client: handshake, line reading and a TCP reader."""

from gpsd_proto.client.handshake import (
    ENABLE_WATCH_CMD,
    PROTO_MAJOR_MIN,
    Handshake,
    HandshakeResult,
    HandshakeState,
    handshake,
    watch_accepted,
)
from gpsd_proto.client.reader import GpsdReader, GpsdStream
from gpsd_proto.client.stream import LineHook, get_data, read_line

__all__ = [
    "ENABLE_WATCH_CMD",
    "PROTO_MAJOR_MIN",
    "GpsdReader",
    "GpsdStream",
    "Handshake",
    "HandshakeResult",
    "HandshakeState",
    "LineHook",
    "get_data",
    "handshake",
    "read_line",
    "watch_accepted",
]
