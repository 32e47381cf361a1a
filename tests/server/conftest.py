"""Pytest fixtures for server module testing."""

import queue
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from gpsd_proto import ResponseData


class ControlledGpsdReader:
    """Stands in for ``GpsdReader``; tests push messages into ``message_queue``."""

    def __init__(self) -> None:
        self.message_queue: queue.Queue[ResponseData | None] = queue.Queue()
        self.cancelled = False

    def __enter__(self) -> "ControlledGpsdReader":
        return self

    def __exit__(self, *_: object) -> None:
        pass

    def __iter__(self) -> Iterator[ResponseData]:
        while True:
            item = self.message_queue.get()
            if item is None:
                break
            yield item

    def cancel(self) -> None:
        self.cancelled = True
        self.message_queue.put(None)


@pytest.fixture(autouse=True)
def gpsd_controller() -> Iterator[ControlledGpsdReader]:
    controller = ControlledGpsdReader()
    with patch("server.main.GpsdReader", return_value=controller):
        yield controller
    controller.message_queue.put(None)
