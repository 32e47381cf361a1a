"""gpsd JSON protocol: message types, field coercion and line decoding."""

from gpsd_proto.protocol.decoder import (
    decode,
    decode_data,
    decode_handshake,
    encode,
    message_to_dict,
)
from gpsd_proto.protocol.errors import (
    DecodeError,
    GpsdError,
    GpsdIOError,
    UnexpectedReply,
    UnsupportedProtocolVersion,
    WatchNegotiationFailed,
)
from gpsd_proto.protocol.fields import parse_activated, parse_mode
from gpsd_proto.protocol.types import (
    Att,
    Device,
    DeviceInfo,
    Devices,
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
    UnifiedResponse,
    Unknown,
    Version,
    Watch,
)

__all__ = [
    "Att",
    "DecodeError",
    "Device",
    "DeviceInfo",
    "Devices",
    "GpsdError",
    "GpsdIOError",
    "Gst",
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
    "message_to_dict",
    "parse_activated",
    "parse_mode",
]
