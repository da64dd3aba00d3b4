import logging
import os
import tempfile

from edge_tts import Communicate

from dictation_assistant.adapters.speech_process import SpeechProcessRunner
from dictation_assistant.domain.errors import SynthesisError
from dictation_assistant.domain.voices import relative_rate, resolve_neural_voice, resolve_voice

logger = logging.getLogger(__name__)

PLAYER_ARGS = ["-nodisp", "-autoexit", "-loglevel", "error"]


class EdgeTtsSpeechOutput:
    def __init__(self, player_command: str = "ffplay") -> None:
        self._player_command = player_command
        self._runner = SpeechProcessRunner()
        self._stop_count = 0

    async def speak(self, text: str, voice_preset: str, language_code: str) -> None:
        if not text.strip():
            return
        stops_at_start = self._stop_count

        neural_voice = resolve_neural_voice(language_code, voice_preset)
        rate = relative_rate(resolve_voice(language_code, voice_preset).rate)
        logger.info("Speaking with %s (%s): %s", neural_voice, rate, text[:50])

        with tempfile.TemporaryDirectory(prefix="dictation-tts-") as tmp_dir:
            audio_path = os.path.join(tmp_dir, "speech.mp3")
            try:
                await Communicate(text, voice=neural_voice, rate=rate).save(audio_path)
            except Exception as exc:
                raise SynthesisError("Edge TTS synthesis failed", str(exc)) from exc

            if self._stop_count != stops_at_start:
                logger.debug("Speech stopped before playback")
                return
            await self._runner.run(self._player_command, *PLAYER_ARGS, audio_path)

    async def stop_speech(self) -> None:
        self._stop_count += 1
        stopped = self._runner.terminate_all()
        logger.debug("Stopped %d playback process(es)", stopped)
