import logging

from dictation_assistant.adapters.speech_process import SpeechProcessRunner
from dictation_assistant.domain.voices import resolve_voice

logger = logging.getLogger(__name__)


class SaySpeechOutput:
    def __init__(self, command: str = "say") -> None:
        self._command = command
        self._runner = SpeechProcessRunner()

    async def speak(self, text: str, voice_preset: str, language_code: str) -> None:
        if not text.strip():
            return

        voice = resolve_voice(language_code, voice_preset)
        logger.info("Speaking with %s at %d wpm: %s", voice.voice_name, voice.rate, text[:50])
        await self._runner.run(
            self._command,
            "-v",
            voice.voice_name,
            "-r",
            str(voice.rate),
            text,
        )

    async def stop_speech(self) -> None:
        stopped = self._runner.terminate_all()
        logger.debug("Stopped %d speech process(es)", stopped)
