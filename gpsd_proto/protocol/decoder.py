"""Decoder and encoder for gpsd JSON lines.

Every line gpsd sends is one JSON object whose ``class`` attribute names the
message type. Decoding is a three-stage pipeline:

    1. Parse the line as JSON and check that it is an object.
    2. Read the ``class`` discriminator and look it up in the dispatch table
       of the active union (handshake, data or unified).
    3. Build the matching dataclass, routing each field through its parser.

Each stage fails with ``DecodeError``; the error carries the raw line, and
for stage 3 the name of the offending field, so callers can log it.

The unified decoder never rejects an unknown class: it returns the parsed
object as ``Unknown`` so that new daemon message types do not break
consumers that handle every phase with one decoder.
"""

import dataclasses
import json
import logging
from typing import Any

from gpsd_proto.protocol.errors import DecodeError
from gpsd_proto.protocol.fields import build, wire_name
from gpsd_proto.protocol.mode import Mode
from gpsd_proto.protocol.types import (
    Att,
    Device,
    Devices,
    Gst,
    Imu,
    Osc,
    Poll,
    Pps,
    ResponseData,
    ResponseHandshake,
    Sky,
    Toff,
    Tpv,
    UnifiedResponse,
    Unknown,
    Version,
    Watch,
)

__all__ = [
    "DATA_CLASSES",
    "HANDSHAKE_CLASSES",
    "decode",
    "decode_data",
    "decode_handshake",
    "encode",
    "message_to_dict",
]

LOGGER = logging.getLogger(__name__)

# --- dispatch tables ----------------------------------------------------------

HANDSHAKE_CLASSES: dict[str, type] = {
    cls.CLASS: cls for cls in (Version, Devices, Watch)
}

DATA_CLASSES: dict[str, type] = {
    cls.CLASS: cls for cls in (Device, Tpv, Sky, Pps, Gst, Att, Imu, Toff, Osc, Poll)
}

_UNIFIED_CLASSES: dict[str, type] = {**HANDSHAKE_CLASSES, **DATA_CLASSES}


# --- decoding -----------------------------------------------------------------


def _parse_object(line: bytes | str) -> dict[str, Any]:
    """Parse *line* as a single JSON object."""
    try:
        text = line.decode("utf-8") if isinstance(line, bytes) else line
    except UnicodeDecodeError as exc:
        raise DecodeError(f"invalid UTF-8: {exc}", raw=line) from exc
    # ValueError also covers oversized integer literals; deep nesting
    # exhausts the recursion limit.
    try:
        obj = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"invalid JSON: {exc}", raw=line) from exc
    if not isinstance(obj, dict):
        kind = "array" if isinstance(obj, list) else type(obj).__name__
        raise DecodeError(f"expected a JSON object, got {kind}", raw=line)
    return obj


def _class_name(obj: dict[str, Any], line: bytes | str) -> str:
    """Return the ``class`` discriminator of a parsed message."""
    name = obj.get("class")
    if name is None:
        raise DecodeError("missing message class", raw=line, field="class")
    if not isinstance(name, str):
        raise DecodeError("message class is not a string", raw=line, field="class")
    return name


def _build_message(cls: type, obj: dict[str, Any], line: bytes | str) -> Any:
    try:
        return build(cls, obj)
    except DecodeError as exc:
        raise exc.with_raw(line) from None


def _decode_closed(line: bytes | str, classes: dict[str, type], phase: str) -> Any:
    obj = _parse_object(line)
    name = _class_name(obj, line)
    cls = classes.get(name)
    if cls is None:
        raise DecodeError(f"unexpected {phase} message class {name!r}", raw=line, field="class")
    return _build_message(cls, obj, line)


def decode_handshake(line: bytes | str) -> ResponseHandshake:
    """Decode a line received during the handshake.

    Args:
        line: One raw line, with or without its trailing ``\\r\\n``.

    Returns:
        ``Version``, ``Devices`` or ``Watch``.

    Raises:
        DecodeError: If the line is not a JSON object, its class is not a
            handshake class, or a field has an invalid encoding.
    """
    return _decode_closed(line, HANDSHAKE_CLASSES, "handshake")


def decode_data(line: bytes | str) -> ResponseData:
    """Decode a line received after the handshake.

    Raises:
        DecodeError: If the line is not a JSON object, its class is not a
            payload class, or a field has an invalid encoding.

    Example:
        >>> decode_data(b'{"class":"TPV","mode":3,"lat":66.123}\\r\\n').lat
        66.123
    """
    return _decode_closed(line, DATA_CLASSES, "data")


def decode(line: bytes | str) -> UnifiedResponse:
    """Decode any gpsd line, handshake and payload alike.

    Unlike the phase-specific decoders, an unrecognized class is not an
    error: the parsed object is returned as ``Unknown``.

    Raises:
        DecodeError: If the line is not a JSON object with a string
            ``class``, or a known class has an invalid field.
    """
    obj = _parse_object(line)
    name = _class_name(obj, line)
    cls = _UNIFIED_CLASSES.get(name)
    if cls is None:
        LOGGER.debug("Keeping unknown message class %r verbatim", name)
        payload = {key: value for key, value in obj.items() if key != "class"}
        return Unknown(class_name=name, payload=payload)
    return _build_message(cls, obj, line)


# --- encoding -----------------------------------------------------------------


def _to_wire(value: Any) -> Any:
    if isinstance(value, Mode):
        return value.value
    if isinstance(value, tuple):
        return [_to_wire(item) for item in value]
    if dataclasses.is_dataclass(value):
        return _fields_to_dict(value)
    return value


def _fields_to_dict(message: Any) -> dict[str, Any]:
    obj: dict[str, Any] = {}
    for field in dataclasses.fields(message):
        value = getattr(message, field.name)
        if value is None:
            continue
        obj[wire_name(field)] = _to_wire(value)
    return obj


def message_to_dict(message: UnifiedResponse) -> dict[str, Any]:
    """Convert a message back to its gpsd JSON object form.

    ``None`` fields are omitted, as gpsd does. ``Unknown`` messages return a
    copy of their original payload with ``class`` set to their class name.

    Example:
        >>> message_to_dict(Tpv(mode=Mode.FIX_2D, lat=48.1))
        {'class': 'TPV', 'mode': 2, 'lat': 48.1}
    """
    if isinstance(message, Unknown):
        return {**message.payload, "class": message.class_name}
    return {"class": message.CLASS, **_fields_to_dict(message)}


def encode(message: UnifiedResponse) -> bytes:
    """Serialize a message as one newline-terminated gpsd JSON line.

    ``decode(encode(message)) == message`` holds for every message type.
    """
    text = json.dumps(message_to_dict(message), separators=(",", ":"))
    return text.encode("utf-8") + b"\n"
