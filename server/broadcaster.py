"""Manages WebSocket subscribers and message broadcasting."""

import asyncio
from dataclasses import dataclass

__all__ = ["Subscriber", "add_subscriber", "broadcast_message", "remove_subscriber"]


@dataclass(eq=False)
class Subscriber:
    """One WebSocket client: its bounded queue and optional class filter.

    Attributes:
        queue: Serialized messages waiting to be sent.
        classes: gpsd message classes the client asked for (``"TPV"``,
            ``"SKY"``, ...), or ``None`` for every class.
    """

    queue: asyncio.Queue[str]
    classes: frozenset[str] | None = None

    def wants(self, message_class: str) -> bool:
        return self.classes is None or message_class in self.classes


_subscribers: list[Subscriber] = []


def add_subscriber(subscriber: Subscriber) -> None:
    """Add a subscriber to the broadcast list."""
    _subscribers.append(subscriber)


def remove_subscriber(subscriber: Subscriber) -> None:
    """Remove a subscriber from the broadcast list."""
    _subscribers.remove(subscriber)


def _enqueue_message(queue: asyncio.Queue[str], message: str) -> None:
    if queue.full():
        queue.get_nowait()
    queue.put_nowait(message)


def broadcast_message(
    message_class: str,
    message: str,
    loop: asyncio.AbstractEventLoop,
) -> None:
    """Queue *message* for every subscriber of *message_class*.

    Safe to call from a worker thread; the queues are only touched on *loop*.
    A full queue drops its oldest message so slow clients never stall gpsd.
    """
    for subscriber in list(_subscribers):
        if subscriber.wants(message_class):
            loop.call_soon_threadsafe(_enqueue_message, subscriber.queue, message)
