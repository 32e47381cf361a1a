"""Line framing and steady-state reading over a gpsd byte stream.

The stream is any pair of binary file objects: a reader with ``readline()``
(``socket.makefile("rb")``, ``io.BytesIO``, ...) and, for the handshake, a
writer with ``write()`` and ``flush()``. Obtaining and closing them is the
caller's job.
"""

import logging
from collections.abc import Callable
from typing import IO, Any

from gpsd_proto.protocol.decoder import decode_data
from gpsd_proto.protocol.errors import DecodeError, GpsdIOError
from gpsd_proto.protocol.types import ResponseData

__all__ = ["LineHook", "decode_traced", "get_data", "read_line"]

LOGGER = logging.getLogger(__name__)

# Called with every raw line and its decoding outcome: the decoded message,
# or the DecodeError that rejected it.
LineHook = Callable[[bytes, Any], None]


def read_line(reader: IO[bytes]) -> bytes:
    """Read one ``\\n``-terminated line from *reader*.

    Raises:
        GpsdIOError: If the read fails or the stream has ended.
    """
    try:
        raw = reader.readline()
    except OSError as exc:
        raise GpsdIOError(f"gpsd read failed: {exc}") from exc
    if not raw:
        raise GpsdIOError("gpsd stream ended.")
    LOGGER.debug("gpsd <- %r", raw)
    return raw


def decode_traced(
    raw: bytes,
    decoder: Callable[[bytes], Any],
    on_line: LineHook | None,
) -> Any:
    """Decode *raw* with *decoder*, reporting the outcome to *on_line*."""
    try:
        message = decoder(raw)
    except DecodeError as exc:
        if on_line is not None:
            on_line(raw, exc)
        raise
    if on_line is not None:
        on_line(raw, message)
    return message


def get_data(reader: IO[bytes], on_line: LineHook | None = None) -> ResponseData:
    """Read and decode one payload message.

    A ``DecodeError`` concerns only the line just read; the stream stays
    usable and the caller may simply call ``get_data`` again. A
    ``GpsdIOError`` means the connection is broken.

    Args:
        reader: Binary reader positioned after a completed handshake.
        on_line: Optional hook called with the raw line and its outcome.

    Raises:
        GpsdIOError: If the read fails or the stream has ended.
        DecodeError: If the line is not a valid payload message.
    """
    return decode_traced(read_line(reader), decode_data, on_line)
