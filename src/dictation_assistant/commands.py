import logging

from dictation_assistant.domain.errors import DictationError
from dictation_assistant.domain.session import SessionController
from dictation_assistant.domain.voices import DEFAULT_LANGUAGE, DEFAULT_PRESET, VoiceRequest
from dictation_assistant.ports.control import ControlCommand
from dictation_assistant.ports.speech import SpeechOutputPort
from dictation_assistant.ports.translator import TranslatorPort

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Maps control-socket commands onto the session controller and gateways."""

    def __init__(
        self,
        controller: SessionController,
        translator: TranslatorPort,
        speech: SpeechOutputPort,
    ) -> None:
        self._controller = controller
        self._translator = translator
        self._speech = speech
        self._actions = {
            "start": self._start,
            "stop": self._stop,
            "status": self._status,
            "translate": self._translate,
            "speak": self._speak,
            "stop_speech": self._stop_speech,
        }

    async def handle(self, command: ControlCommand) -> dict:
        action = self._actions.get(command.action)
        if action is None:
            return _error_response(command.action, "unknown_action", f"Unknown action: {command.action}")

        try:
            result = await action(command.payload or {})
        except DictationError as exc:
            logger.warning("%s failed: %s", command.action, exc.message)
            return _error_response(command.action, exc.kind, exc.message)
        except Exception as exc:
            logger.exception("Unexpected error handling %s", command.action)
            return _error_response(command.action, "internal", str(exc))

        return {"status": "ok", "action": command.action, **result}

    async def _start(self, payload: dict) -> dict:
        await self._controller.start(payload.get("language"))
        return {}

    async def _stop(self, payload: dict) -> dict:
        await self._controller.stop()
        return {}

    async def _status(self, payload: dict) -> dict:
        return {"state": self._controller.state.name}

    async def _translate(self, payload: dict) -> dict:
        result = await self._translator.translate(
            payload.get("text", ""),
            payload.get("target_lang", ""),
            payload.get("source_lang"),
        )
        return {"translated_text": result.translated_text}

    async def _speak(self, payload: dict) -> dict:
        request = VoiceRequest(
            text=payload.get("text", ""),
            voice_preset=payload.get("voice_preset", DEFAULT_PRESET),
            language_code=payload.get("language_code", DEFAULT_LANGUAGE),
        )
        await self._speech.speak(request.text, request.voice_preset, request.language_code)
        return {}

    async def _stop_speech(self, payload: dict) -> dict:
        await self._speech.stop_speech()
        return {}


def _error_response(action: str, kind: str, message: str) -> dict:
    return {"status": "error", "action": action, "error": kind, "message": message}
