from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class TranslationRequest:
    text: str
    target_lang: str
    source_lang: str | None = None


@dataclass(frozen=True)
class TranslationResult:
    translated_text: str


class TranslatorPort(Protocol):
    async def translate(
        self, text: str, target_lang: str, source_lang: str | None = None
    ) -> TranslationResult: ...
