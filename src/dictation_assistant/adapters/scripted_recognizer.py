import asyncio
import logging
from collections.abc import AsyncIterator

from dictation_assistant.domain.errors import TranscriptionFailure
from dictation_assistant.ports.recognizer import Liveness, TranscriptFragment

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 0.5
FALLBACK_LANGUAGE = "en-US"

DEFAULT_SCRIPTS: dict[str, str] = {
    "en-US": "Hello world, this is a test of speech recognition",
    "es-ES": "Hola mundo, esta es una prueba de reconocimiento de voz",
    "fr-FR": "Bonjour le monde, ceci est un test de reconnaissance vocale",
}


class ScriptedRecognizer:
    """Stand-in speech engine that dictates a fixed sentence one word per tick.

    Every tick it first sleeps one polling interval, then checks ``is_alive``.
    Step k emits the first k words; the step after the last word emits the
    punctuated sentence as the final fragment and ends the stream.
    """

    def __init__(
        self,
        scripts: dict[str, str] | None = None,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self._scripts = scripts or DEFAULT_SCRIPTS
        self._poll_interval_seconds = poll_interval_seconds

    @property
    def poll_interval_seconds(self) -> float:
        return self._poll_interval_seconds

    async def produce(self, language: str, is_alive: Liveness) -> AsyncIterator[TranscriptFragment]:
        words = self._script_for(language).split()
        step = 0

        while True:
            await asyncio.sleep(self._poll_interval_seconds)
            if not is_alive():
                logger.debug("Recognition cancelled after %d steps", step)
                return

            step += 1
            try:
                fragment = self._compute_fragment(words, step)
            except Exception as exc:
                raise TranscriptionFailure(f"Speech recognition failed: {exc}") from exc

            yield fragment
            if fragment.is_final:
                return

    def _script_for(self, language: str) -> str:
        if language in self._scripts:
            return self._scripts[language]
        logger.debug("No script for %s, falling back to %s", language, FALLBACK_LANGUAGE)
        return self._scripts.get(FALLBACK_LANGUAGE) or next(iter(self._scripts.values()))

    def _compute_fragment(self, words: list[str], step: int) -> TranscriptFragment:
        if step <= len(words):
            return TranscriptFragment(text=" ".join(words[:step]), is_final=False)
        return TranscriptFragment(text=" ".join(words).rstrip(".") + ".", is_final=True)
