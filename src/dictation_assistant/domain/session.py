import asyncio
import logging

from dictation_assistant.domain.errors import (
    AlreadyActiveError,
    PermissionDeniedError,
    TranscriptionFailure,
)
from dictation_assistant.domain.events import DomainEvent, TranscriptionError, TranscriptionResult
from dictation_assistant.domain.state import SessionState, validate_transition
from dictation_assistant.ports.events import EventSinkPort
from dictation_assistant.ports.permission import MicrophonePermission
from dictation_assistant.ports.recognizer import RecognizerPort

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en-US"


class SessionController:
    """Owns the single dictation session and bridges recognizer output to the sink.

    The session state is only read or written while holding ``_lock``; the lock is
    never held across an await of the recognizer. Each started session gets a new
    generation number and its recognizer only stays alive while that generation is
    current, so a quick stop/start never revives the previous recognizer.
    """

    def __init__(
        self,
        recognizer: RecognizerPort,
        sink: EventSinkPort,
        permission: MicrophonePermission,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._recognizer = recognizer
        self._sink = sink
        self._permission = permission
        self._default_language = default_language

        self._lock = asyncio.Lock()
        self._state = SessionState.IDLE
        self._generation = 0
        self._session_task: asyncio.Task | None = None
        self._session_tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def session_task(self) -> asyncio.Task | None:
        return self._session_task

    async def start(self, language: str | None = None) -> None:
        try:
            self._permission.check()
        except PermissionDeniedError as exc:
            message = f"Microphone permission denied: {exc.message}"
            logger.warning(message)
            self._publish(TranscriptionError(message=message))
            raise PermissionDeniedError(message) from exc

        async with self._lock:
            if self._state is SessionState.ACTIVE:
                logger.info("Transcription already active")
                raise AlreadyActiveError()
            self._transition_to(SessionState.ACTIVE)
            self._generation += 1
            generation = self._generation

        language = language or self._default_language
        self._session_task = asyncio.create_task(
            self._run_session(language, generation),
            name=f"transcription-session-{generation}",
        )
        self._session_tasks.add(self._session_task)
        self._session_task.add_done_callback(self._session_tasks.discard)
        logger.info("Transcription session %d started (language=%s)", generation, language)

    async def stop(self) -> None:
        async with self._lock:
            if self._state is SessionState.IDLE:
                logger.debug("Stop requested with no active session")
                return
            self._transition_to(SessionState.IDLE)
        logger.info("Transcription session %d stop requested", self._generation)

    async def aclose(self) -> None:
        await self.stop()
        if self._session_tasks:
            await asyncio.gather(*self._session_tasks)

    def _is_alive(self, generation: int) -> bool:
        return self._state is SessionState.ACTIVE and self._generation == generation

    async def _run_session(self, language: str, generation: int) -> None:
        try:
            fragments = self._recognizer.produce(language, lambda: self._is_alive(generation))
            async for fragment in fragments:
                self._publish(TranscriptionResult(text=fragment.text, is_final=fragment.is_final))
                if fragment.is_final:
                    logger.info("Transcript: %s", fragment.text)
                    break
                logger.debug("Transcript (interim): %s", fragment.text)
        except TranscriptionFailure as exc:
            logger.error("Speech recognition failed: %s", exc.message)
            self._publish(TranscriptionError(message=exc.message))
        except Exception as exc:
            logger.exception("Recognizer crashed")
            self._publish(TranscriptionError(message=str(exc) or type(exc).__name__))
        finally:
            await self._end_session(generation)

    async def _end_session(self, generation: int) -> None:
        async with self._lock:
            if self._generation != generation or self._state is SessionState.IDLE:
                return
            self._transition_to(SessionState.IDLE)
        logger.info("Transcription session %d finished", generation)

    def _transition_to(self, target: SessionState) -> None:
        validate_transition(self._state, target)
        logger.info("Session: %s -> %s", self._state.name, target.name)
        self._state = target

    def _publish(self, event: DomainEvent) -> None:
        try:
            self._sink.publish(event.topic, event.to_payload())
        except Exception:
            logger.debug("Dropped %s event", event.topic, exc_info=True)
