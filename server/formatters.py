"""JSON formatting of decoded gpsd messages for WebSocket transmission."""

import json

from gpsd_proto import ResponseData, message_to_dict

__all__ = ["format_message", "message_class"]


def message_class(message: ResponseData) -> str:
    """Return the gpsd class name of *message*, e.g. ``"TPV"``."""
    return message.CLASS


def format_message(message: ResponseData) -> str:
    """Serialize a decoded message back to its gpsd JSON form.

    The output keeps gpsd's wire names and ``class`` attribute, so browser
    clients can consume it exactly like the daemon's own stream. Absent
    fields are omitted and the fix mode is its NMEA number.
    """
    return json.dumps(message_to_dict(message))
