"""gpsd handshake state machine.

A client must negotiate before gpsd streams reports. The exchange is fixed::

    START -> AWAIT_VERSION -> SEND_WATCH -> AWAIT_DEVICES -> AWAIT_WATCH_ACK -> COMPLETE

    AWAIT_VERSION    read VERSION, reject proto_major < PROTO_MAJOR_MIN
    SEND_WATCH       write ENABLE_WATCH_CMD and flush it
    AWAIT_DEVICES    read DEVICES
    AWAIT_WATCH_ACK  read WATCH, reject a pure NMEA watch

Any failure moves the machine to FAILED and propagates. Nothing is retried
and a failed handshake cannot be resumed; open a new connection instead.
The command is only written once the version has been accepted, so a
refused daemon never receives anything.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import IO, Any

from gpsd_proto.client.stream import LineHook, decode_traced, read_line
from gpsd_proto.protocol.decoder import decode_handshake
from gpsd_proto.protocol.errors import (
    GpsdIOError,
    UnexpectedReply,
    UnsupportedProtocolVersion,
    WatchNegotiationFailed,
)
from gpsd_proto.protocol.types import Devices, Version, Watch

__all__ = [
    "ENABLE_WATCH_CMD",
    "PROTO_MAJOR_MIN",
    "Handshake",
    "HandshakeResult",
    "HandshakeState",
    "handshake",
    "watch_accepted",
]

LOGGER = logging.getLogger(__name__)

PROTO_MAJOR_MIN = 3

ENABLE_WATCH_CMD = b'?WATCH={"enable":true,"json":true};\r\n'


class HandshakeState(Enum):
    START = "start"
    AWAIT_VERSION = "await_version"
    SEND_WATCH = "send_watch"
    AWAIT_DEVICES = "await_devices"
    AWAIT_WATCH_ACK = "await_watch_ack"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class HandshakeResult:
    """The three messages gpsd sent during a successful handshake."""

    version: Version
    devices: Devices
    watch: Watch


def watch_accepted(watch: Watch) -> bool:
    """Return whether a WATCH acknowledgment enables JSON streaming.

    Missing flags count as ``False``. The only rejected combination is
    ``enable=False, json=False, nmea=True``: gpsd fell back to dumping
    pseudo-NMEA. Every other combination, all-false included, is accepted.

    Example:
        >>> watch_accepted(Watch(enable=True, json=True))
        True
        >>> watch_accepted(Watch(nmea=True))
        False
    """
    flags = (bool(watch.enable), bool(watch.json), bool(watch.nmea))
    return flags != (False, False, True)


class Handshake:
    """One handshake over a reader/writer pair.

    Args:
        reader: Binary reader with ``readline()``.
        writer: Binary writer with ``write()`` and ``flush()``.
        on_line: Optional hook called with every raw line and its outcome.

    Example::

        result = Handshake(sock.makefile("rb"), sock.makefile("wb")).run()
        print(result.version.release)
    """

    def __init__(
        self,
        reader: IO[bytes],
        writer: IO[bytes],
        on_line: LineHook | None = None,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._on_line = on_line
        self._state = HandshakeState.START

    @property
    def state(self) -> HandshakeState:
        return self._state

    def run(self) -> HandshakeResult:
        """Drive the exchange to completion.

        Raises:
            RuntimeError: If this handshake has already been run.
            GpsdIOError: If a read, write or flush fails.
            DecodeError: If a reply is not a valid handshake message.
            UnsupportedProtocolVersion: If gpsd is too old.
            UnexpectedReply: If a reply arrives out of order.
            WatchNegotiationFailed: If gpsd acknowledges a pure NMEA watch.
        """
        if self._state is not HandshakeState.START:
            raise RuntimeError(f"Handshake cannot be run in state {self._state.value}.")
        try:
            self._state = HandshakeState.AWAIT_VERSION
            version = self._await_version()
            self._state = HandshakeState.SEND_WATCH
            self._send_watch()
            self._state = HandshakeState.AWAIT_DEVICES
            devices, _ = self._receive(Devices)
            self._state = HandshakeState.AWAIT_WATCH_ACK
            watch = self._await_watch_ack()
            self._state = HandshakeState.COMPLETE
        finally:
            if self._state is not HandshakeState.COMPLETE:
                LOGGER.debug("gpsd handshake failed in state %s", self._state.value)
                self._state = HandshakeState.FAILED
        LOGGER.info(
            "gpsd %s (protocol %d.%d) watching %d device(s)",
            version.release,
            version.proto_major,
            version.proto_minor,
            len(devices.devices),
        )
        return HandshakeResult(version=version, devices=devices, watch=watch)

    def _receive(self, expected: type) -> tuple[Any, bytes]:
        raw = read_line(self._reader)
        message = decode_traced(raw, decode_handshake, self._on_line)
        if not isinstance(message, expected):
            raise UnexpectedReply(raw, expected.CLASS)
        return message, raw

    def _await_version(self) -> Version:
        version, _ = self._receive(Version)
        if version.proto_major < PROTO_MAJOR_MIN:
            raise UnsupportedProtocolVersion(version, PROTO_MAJOR_MIN)
        return version

    def _send_watch(self) -> None:
        try:
            self._writer.write(ENABLE_WATCH_CMD)
            self._writer.flush()
        except OSError as exc:
            raise GpsdIOError(f"gpsd write failed: {exc}") from exc
        LOGGER.debug("gpsd -> %r", ENABLE_WATCH_CMD)

    def _await_watch_ack(self) -> Watch:
        watch, raw = self._receive(Watch)
        if not watch_accepted(watch):
            raise WatchNegotiationFailed(raw)
        return watch


def handshake(
    reader: IO[bytes],
    writer: IO[bytes],
    on_line: LineHook | None = None,
) -> HandshakeResult:
    """Perform the gpsd handshake; see ``Handshake.run`` for the errors."""
    return Handshake(reader, writer, on_line).run()
