"""Background gpsd reading loop."""

import asyncio
import logging

from gpsd_proto import GpsdReader
from server.broadcaster import broadcast_message
from server.formatters import format_message, message_class

__all__ = ["run_gpsd_loop"]

LOGGER = logging.getLogger(__name__)


def run_gpsd_loop(loop: asyncio.AbstractEventLoop, gpsd: GpsdReader) -> None:
    """Read gpsd messages continuously and broadcast them on *loop*.

    The caller owns *gpsd* and must use it as an open context manager. The
    loop exits when ``gpsd.cancel()`` is called or the daemon goes away,
    both of which end the underlying read with ``EOFError``.

    Args:
        loop: Running asyncio event loop to broadcast messages on.
        gpsd: An open ``GpsdReader`` instance managed by the caller.
    """
    try:
        for message in gpsd:
            broadcast_message(message_class(message), format_message(message), loop)
    except EOFError as exc:
        LOGGER.info("gpsd stream closed: %s", exc)
