from collections.abc import Callable
from typing import Protocol

Subscriber = Callable[[str, dict], None]


class EventSinkPort(Protocol):
    def publish(self, topic: str, payload: dict) -> None: ...
