from typing import Protocol


class SpeechOutputPort(Protocol):
    async def speak(self, text: str, voice_preset: str, language_code: str) -> None: ...
    async def stop_speech(self) -> None: ...
