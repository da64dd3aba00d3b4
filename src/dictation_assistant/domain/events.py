from dataclasses import dataclass, field
from time import time

TRANSCRIPTION_RESULT = "transcription-result"
TRANSCRIPTION_ERROR = "transcription-error"


@dataclass(frozen=True)
class DomainEvent:
    timestamp: float = field(default_factory=time, compare=False)

    topic = ""

    def to_payload(self) -> dict:
        raise NotImplementedError


@dataclass(frozen=True)
class TranscriptionResult(DomainEvent):
    text: str = ""
    is_final: bool = False

    topic = TRANSCRIPTION_RESULT

    def to_payload(self) -> dict:
        return {"text": self.text, "is_final": self.is_final}


@dataclass(frozen=True)
class TranscriptionError(DomainEvent):
    message: str = ""

    topic = TRANSCRIPTION_ERROR

    def to_payload(self) -> dict:
        return {"message": self.message}
