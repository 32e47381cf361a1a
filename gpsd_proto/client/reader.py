"""gpsd JSON clients: one over any byte stream, one over TCP.

``GpsdStream`` runs the handshake over a caller-supplied reader/writer pair
and then yields payload messages. ``GpsdReader`` adds the transport: it
connects to gpsd (``localhost:2947`` by default) in ``__enter__`` and closes
the socket in ``__exit__``.

Reading strategy:
    ``read()`` returns the next message and raises ``DecodeError`` for a
    line it cannot decode; the stream stays usable. Iteration applies the
    ``skip_invalid`` policy: undecodable lines are logged and skipped (the
    default) or raised. I/O failures always end the stream with
    ``GpsdIOError``, an ``EOFError``.
"""

import contextlib
import logging
import socket
from collections.abc import Callable, Iterator
from types import TracebackType
from typing import IO

from gpsd_proto.client.handshake import HandshakeResult, handshake
from gpsd_proto.client.stream import LineHook, get_data
from gpsd_proto.protocol.errors import DecodeError, GpsdIOError
from gpsd_proto.protocol.types import ResponseData

__all__ = ["GpsdReader", "GpsdStream"]

LOGGER = logging.getLogger(__name__)

# --- gpsd connection defaults -------------------------------------------------

_HOST = "localhost"
_PORT = 2947


def _iter_messages(
    read: Callable[[], ResponseData], skip_invalid: bool
) -> Iterator[ResponseData]:
    """Call *read* forever, skipping or raising ``DecodeError`` per *skip_invalid*."""
    while True:
        try:
            yield read()
        except DecodeError as exc:
            if not skip_invalid:
                raise
            LOGGER.warning("Skipping undecodable gpsd line: %s", exc)


class GpsdStream:
    """Handshake plus steady-state reading over an existing byte stream.

    Continuous iteration::

        stream = GpsdStream(reader, writer)
        stream.open()
        for message in stream:
            process(message)

    Args:
        reader: Binary reader with ``readline()``.
        writer: Binary writer with ``write()`` and ``flush()``.
        on_line: Optional hook called with every raw line and its outcome.
        skip_invalid: Whether iteration skips undecodable lines instead of
            raising ``DecodeError``.
    """

    def __init__(
        self,
        reader: IO[bytes],
        writer: IO[bytes],
        on_line: LineHook | None = None,
        skip_invalid: bool = True,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._on_line = on_line
        self._skip_invalid = skip_invalid
        self._session: HandshakeResult | None = None

    @property
    def session(self) -> HandshakeResult | None:
        """Messages of the completed handshake, ``None`` before ``open()``."""
        return self._session

    def open(self) -> HandshakeResult:
        """Run the handshake. Errors are those of ``Handshake.run``."""
        if self._session is not None:
            raise RuntimeError("GpsdStream is already open.")
        self._session = handshake(self._reader, self._writer, self._on_line)
        return self._session

    def read(self) -> ResponseData:
        """Block until the next line and return it decoded.

        Raises:
            RuntimeError: If the handshake has not completed.
            GpsdIOError: If the stream failed or ended.
            DecodeError: If the line is not a valid payload message.
        """
        if self._session is None:
            raise RuntimeError("GpsdStream must be opened before reading.")
        return get_data(self._reader, self._on_line)

    def __iter__(self) -> Iterator[ResponseData]:
        """Yield messages until the stream fails.

        ``StopIteration`` is never raised; iteration ends with the
        ``GpsdIOError`` of the broken stream or when the caller stops.
        """
        return _iter_messages(self.read, self._skip_invalid)


class GpsdReader:
    """Context manager for reading decoded reports from a gpsd daemon.

    Connects to gpsd over TCP, performs the handshake, and then yields one
    payload message (``Tpv``, ``Sky``, ...) per line.

    Continuous iteration::

        with GpsdReader() as gpsd:
            for message in gpsd:
                if isinstance(message, Tpv):
                    process(message)

    Single read::

        with GpsdReader() as gpsd:
            message = gpsd.read()

    Args:
        host: gpsd host (default: ``"localhost"``).
        port: gpsd TCP port (default: ``2947``).
        timeout: Socket timeout in seconds; ``None`` blocks indefinitely.
            A timed out read breaks the connection like any other I/O error.
        on_line: Optional hook called with every raw line and its outcome.
        skip_invalid: Whether iteration skips undecodable lines.
    """

    def __init__(
        self,
        host: str = _HOST,
        port: int = _PORT,
        timeout: float | None = None,
        on_line: LineHook | None = None,
        skip_invalid: bool = True,
    ) -> None:
        """Store connection parameters; the socket is opened in ``__enter__``."""
        self._host = host
        self._port = port
        self._timeout = timeout
        self._on_line = on_line
        self._skip_invalid = skip_invalid
        self._sock: socket.socket | None = None
        self._files: list[IO[bytes]] = []
        self._stream: GpsdStream | None = None
        self._cancelled: bool = False

    @property
    def session(self) -> HandshakeResult | None:
        """Messages of the completed handshake, ``None`` outside ``with``."""
        return self._stream.session if self._stream is not None else None

    def __enter__(self) -> "GpsdReader":
        """Connect to gpsd and run the handshake.

        Raises:
            OSError: If the connection cannot be established.
            GpsdIOError: If ``cancel()`` was called before entering.
            GpsdError: If the handshake fails; the socket is closed first.
        """
        if self._cancelled:
            raise GpsdIOError("gpsd read cancelled.")
        self._sock = socket.create_connection((self._host, self._port))
        try:
            if self._timeout is not None:
                self._sock.settimeout(self._timeout)
            reader = self._sock.makefile("rb")
            writer = self._sock.makefile("wb")
            self._files = [reader, writer]
            self._stream = GpsdStream(reader, writer, self._on_line, self._skip_invalid)
            self._stream.open()
        except BaseException:
            self._close()
            raise
        LOGGER.debug("Connected to gpsd at %s:%d", self._host, self._port)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the gpsd connection."""
        self._close()

    def _close(self) -> None:
        for stream in self._files:
            with contextlib.suppress(OSError):
                stream.close()
        self._files = []
        self._stream = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def cancel(self) -> None:
        """Unblock a pending read from another thread.

        Shuts the socket down so that an in-progress ``read()`` returns
        immediately with ``EOFError``.
        """
        self._cancelled = True
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.shutdown(socket.SHUT_RDWR)

    def _require_stream(self) -> GpsdStream:
        if self._stream is None:
            raise RuntimeError("GpsdReader must be used as a context manager.")
        return self._stream

    def read(self) -> ResponseData:
        """Block until the next gpsd line and return it decoded.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            GpsdIOError: If the read is cancelled or the stream ends.
            DecodeError: If the line is not a valid payload message.
        """
        stream = self._require_stream()
        try:
            return stream.read()
        except GpsdIOError as exc:
            if self._cancelled:
                raise GpsdIOError("gpsd read cancelled.") from exc
            raise

    def __iter__(self) -> Iterator[ResponseData]:
        """Yield decoded messages until cancelled or the stream ends.

        Undecodable lines are skipped or raised according to
        ``skip_invalid``. ``StopIteration`` is never raised.
        """
        self._require_stream()
        yield from _iter_messages(self.read, self._skip_invalid)
