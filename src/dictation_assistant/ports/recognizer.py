from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, AsyncIterator


@dataclass(frozen=True)
class TranscriptFragment:
    text: str
    is_final: bool


Liveness = Callable[[], bool]


class RecognizerPort(Protocol):
    def produce(self, language: str, is_alive: Liveness) -> AsyncIterator[TranscriptFragment]: ...
