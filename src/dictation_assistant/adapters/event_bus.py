import asyncio
import logging
from collections.abc import AsyncIterator, Callable

from dictation_assistant.ports.events import Subscriber

logger = logging.getLogger(__name__)


class EventBus:
    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def publish(self, topic: str, payload: dict) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(topic, payload)
            except Exception:
                logger.debug("Subscriber failed for %s", topic, exc_info=True)


class QueueSubscriber:
    """Buffers bus events for one async consumer, dropping new events when full."""

    def __init__(self, bus: EventBus, maxsize: int = 100) -> None:
        self._queue: asyncio.Queue[tuple[str, dict]] = asyncio.Queue(maxsize=maxsize)
        self._dropped = 0
        self._unsubscribe = bus.subscribe(self._on_event)

    @property
    def dropped(self) -> int:
        return self._dropped

    def _on_event(self, topic: str, payload: dict) -> None:
        try:
            self._queue.put_nowait((topic, payload))
        except asyncio.QueueFull:
            self._dropped += 1
            logger.warning("Event queue full, dropped %s (%d dropped so far)", topic, self._dropped)

    async def events(self) -> AsyncIterator[tuple[str, dict]]:
        while True:
            yield await self._queue.get()

    def close(self) -> None:
        self._unsubscribe()
