"""Client for the gpsd JSON protocol.

Decodes gpsd's newline-delimited JSON reports into frozen dataclasses and
drives the VERSION / WATCH / DEVICES / WATCH handshake that precedes them.
"""

from gpsd_proto.client import (
    ENABLE_WATCH_CMD,
    PROTO_MAJOR_MIN,
    GpsdReader,
    GpsdStream,
    Handshake,
    HandshakeResult,
    HandshakeState,
    get_data,
    handshake,
    read_line,
)
from gpsd_proto.protocol import (
    Att,
    DecodeError,
    Device,
    DeviceInfo,
    Devices,
    GpsdError,
    GpsdIOError,
    Gst,
    Imu,
    Mode,
    Osc,
    Poll,
    Pps,
    ResponseData,
    ResponseHandshake,
    Satellite,
    Sky,
    Toff,
    Tpv,
    UnexpectedReply,
    UnifiedResponse,
    Unknown,
    UnsupportedProtocolVersion,
    Version,
    Watch,
    WatchNegotiationFailed,
    decode,
    decode_data,
    decode_handshake,
    encode,
    message_to_dict,
)

__all__ = [
    "ENABLE_WATCH_CMD",
    "PROTO_MAJOR_MIN",
    "Att",
    "DecodeError",
    "Device",
    "DeviceInfo",
    "Devices",
    "GpsdError",
    "GpsdIOError",
    "GpsdReader",
    "GpsdStream",
    "Gst",
    "Handshake",
    "HandshakeResult",
    "HandshakeState",
    "Imu",
    "Mode",
    "Osc",
    "Poll",
    "Pps",
    "ResponseData",
    "ResponseHandshake",
    "Satellite",
    "Sky",
    "Toff",
    "Tpv",
    "UnexpectedReply",
    "UnifiedResponse",
    "Unknown",
    "UnsupportedProtocolVersion",
    "Version",
    "Watch",
    "WatchNegotiationFailed",
    "decode",
    "decode_data",
    "decode_handshake",
    "encode",
    "get_data",
    "handshake",
    "message_to_dict",
    "read_line",
]
