from dictation_assistant.domain.errors import UnsupportedPlatformError


class UnsupportedSpeechOutput:
    def __init__(self, platform: str) -> None:
        self._platform = platform

    async def speak(self, text: str, voice_preset: str, language_code: str) -> None:
        raise UnsupportedPlatformError(f"Text-to-speech is not supported on {self._platform}")

    async def stop_speech(self) -> None:
        raise UnsupportedPlatformError(f"Speech control is not supported on {self._platform}")
