"""FastAPI relay of decoded gpsd reports over WebSocket.

Start with::

    uvicorn server.main:app --host 0.0.0.0 --port 8000

WebSocket clients connect to ``ws://<host>:8000/ws`` and receive one JSON
message per gpsd report, in gpsd's own wire form (``{"class": "TPV", ...}``).
``ws://<host>:8000/ws?classes=TPV,SKY`` restricts the stream to the listed
classes. The gpsd endpoint and queue limits come from ``RelayConfig``.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from gpsd_proto import GpsdError, GpsdReader
from server.broadcaster import Subscriber, add_subscriber, remove_subscriber
from server.config import RelayConfig
from server.logging_utils import setup_logging
from server.relay import run_gpsd_loop

LOGGER = logging.getLogger(__name__)


def _parse_classes(classes: str | None) -> frozenset[str] | None:
    if not classes:
        return None
    names = {name.strip().upper() for name in classes.split(",")}
    return frozenset(name for name in names if name) or None


def _run_gpsd_thread(gpsd: GpsdReader, loop: asyncio.AbstractEventLoop) -> None:
    try:
        with gpsd:
            run_gpsd_loop(loop, gpsd)
    except (OSError, GpsdError) as exc:
        LOGGER.error("gpsd relay stopped: %s", exc)


async def _send_messages_until_disconnect(
    queue: asyncio.Queue[str],
    websocket: WebSocket,
    timeout: float,
) -> None:
    try:
        while True:
            message = await asyncio.wait_for(queue.get(), timeout=timeout)
            await websocket.send_text(message)
    except TimeoutError:
        await websocket.close(code=1001)
    except WebSocketDisconnect:
        pass


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    config = RelayConfig.from_env()
    setup_logging(config.log_level)
    application.state.config = config
    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=1)
    gpsd = GpsdReader(
        host=config.gpsd_host,
        port=config.gpsd_port,
        timeout=config.gpsd_timeout,
    )
    loop.run_in_executor(executor, _run_gpsd_thread, gpsd, loop)
    yield
    gpsd.cancel()
    executor.shutdown(wait=False)


app = FastAPI(lifespan=_lifespan)


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, classes: str | None = None) -> None:
    """Stream decoded gpsd messages to a connected WebSocket client.

    Each client gets its own bounded queue (``RelayConfig.queue_size``
    messages). The oldest message is dropped when the queue is full so slow
    clients do not stall the gpsd thread. The connection closes with code
    1001 - and the client should reconnect - if nothing arrives within
    ``RelayConfig.idle_timeout`` seconds.

    Args:
        websocket: The incoming WebSocket connection.
        classes: Optional comma-separated gpsd classes to subscribe to.
    """
    config: RelayConfig = websocket.app.state.config
    subscriber = Subscriber(
        queue=asyncio.Queue(maxsize=config.queue_size),
        classes=_parse_classes(classes),
    )
    add_subscriber(subscriber)
    try:
        await websocket.accept()
        await _send_messages_until_disconnect(
            subscriber.queue, websocket, config.idle_timeout
        )
    finally:
        remove_subscriber(subscriber)
