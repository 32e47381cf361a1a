"""Exception hierarchy for the gpsd JSON protocol client.

Every failure raised by this package derives from ``GpsdError`` so callers
can catch the whole family at once. The subclasses separate the cases that
call for different recovery:

    * ``GpsdIOError`` - the byte stream is broken; the connection is done.
    * ``DecodeError`` - one line could not be decoded; the stream is fine.
    * ``UnsupportedProtocolVersion``, ``UnexpectedReply`` and
      ``WatchNegotiationFailed`` - the handshake was refused.
"""

from typing import Any

__all__ = [
    "DecodeError",
    "GpsdError",
    "GpsdIOError",
    "UnexpectedReply",
    "UnsupportedProtocolVersion",
    "WatchNegotiationFailed",
]


def _text(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


class GpsdError(Exception):
    """Base class for all gpsd protocol errors."""


class GpsdIOError(GpsdError, EOFError):
    """Reading from or writing to the gpsd stream failed.

    Always terminal for the current connection. The originating ``OSError``
    (if any) is chained as ``__cause__``. Subclassing ``EOFError`` keeps the
    reader contract of "the stream is gone" for loops that only catch
    ``EOFError``.
    """


class DecodeError(GpsdError, ValueError):
    """A line could not be decoded into a protocol message.

    Attributes:
        raw: The offending line as text (undecodable bytes are replaced).
        field: Name of the wire field that was rejected, or ``None`` when the
            failure concerns the whole line (bad JSON, unknown class, ...).
        reason: Short human-readable diagnostic.
    """

    def __init__(
        self,
        reason: str,
        *,
        raw: bytes | str = "",
        field: str | None = None,
    ) -> None:
        self.reason = reason
        self.raw = _text(raw).rstrip("\r\n")
        self.field = field
        super().__init__(str(self))

    def __str__(self) -> str:
        where = f"field {self.field!r}: " if self.field else ""
        if self.raw:
            return f"{where}{self.reason} (line: {self.raw!r})"
        return f"{where}{self.reason}"

    def with_raw(self, raw: bytes | str) -> "DecodeError":
        """Return a copy of this error carrying *raw* as the offending line."""
        return DecodeError(self.reason, raw=raw, field=self.field)


class UnsupportedProtocolVersion(GpsdError):
    """gpsd reported a protocol major version below the supported minimum."""

    def __init__(self, version: Any, minimum: int) -> None:
        self.version = version
        self.minimum = minimum
        super().__init__(
            f"gpsd protocol {version.proto_major}.{version.proto_minor} is not "
            f"supported (need major >= {minimum})"
        )


class UnexpectedReply(GpsdError):
    """A handshake step received a valid message of the wrong class."""

    def __init__(self, raw: bytes | str, expected: str) -> None:
        self.raw = _text(raw).rstrip("\r\n")
        self.expected = expected
        super().__init__(f"expected {expected}, got: {self.raw}")


class WatchNegotiationFailed(GpsdError):
    """gpsd acknowledged the watch in pure NMEA mode instead of JSON."""

    def __init__(self, raw: bytes | str) -> None:
        self.raw = _text(raw).rstrip("\r\n")
        super().__init__(f"watch not enabled: {self.raw}")
