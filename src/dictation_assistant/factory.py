import logging
import shutil
import sys

from dictation_assistant.adapters.deepl_translator import DeepLTranslator
from dictation_assistant.adapters.event_bus import EventBus
from dictation_assistant.adapters.microphone_permission import (
    SimulatedMicrophonePermission,
    UnsupportedMicrophonePermission,
)
from dictation_assistant.adapters.scripted_recognizer import ScriptedRecognizer
from dictation_assistant.adapters.unix_control import UnixSocketControlServer
from dictation_assistant.adapters.unsupported_speech import UnsupportedSpeechOutput
from dictation_assistant.commands import CommandDispatcher
from dictation_assistant.config import DictationConfig
from dictation_assistant.domain.session import SessionController
from dictation_assistant.ports.permission import MicrophonePermission
from dictation_assistant.ports.speech import SpeechOutputPort

logger = logging.getLogger(__name__)

MACOS_PLATFORM = "darwin"


def create_permission(config: DictationConfig, platform: str = sys.platform) -> MicrophonePermission:
    if config.permission_mode == "granted":
        return SimulatedMicrophonePermission()
    if config.permission_mode == "auto" and platform == MACOS_PLATFORM:
        return SimulatedMicrophonePermission()
    return UnsupportedMicrophonePermission(platform)


def resolve_speech_engine(config: DictationConfig, platform: str = sys.platform) -> str:
    if config.speech_engine != "auto":
        return config.speech_engine
    if platform == MACOS_PLATFORM:
        return "say"
    if shutil.which(config.player_command):
        return "edge-tts"
    return "none"


def create_speech_output(config: DictationConfig, platform: str = sys.platform) -> SpeechOutputPort:
    engine = resolve_speech_engine(config, platform)
    logger.debug("Speech engine: %s", engine)

    if engine == "say":
        from dictation_assistant.adapters.say_speech import SaySpeechOutput

        return SaySpeechOutput(command=config.say_command)
    if engine == "edge-tts":
        from dictation_assistant.adapters.edge_tts_speech import EdgeTtsSpeechOutput

        return EdgeTtsSpeechOutput(player_command=config.player_command)
    return UnsupportedSpeechOutput(platform)


def create_translator(config: DictationConfig) -> DeepLTranslator:
    return DeepLTranslator(
        api_key=config.resolve_deepl_api_key(),
        api_url=config.deepl_api_url,
        timeout_seconds=config.translation_timeout_seconds,
    )


def create_controller(
    config: DictationConfig, bus: EventBus, platform: str = sys.platform
) -> SessionController:
    recognizer = ScriptedRecognizer(poll_interval_seconds=config.poll_interval_ms / 1000)
    return SessionController(
        recognizer=recognizer,
        sink=bus,
        permission=create_permission(config, platform),
        default_language=config.default_language,
    )


def create_app(
    config: DictationConfig, platform: str = sys.platform
) -> tuple[SessionController, UnixSocketControlServer]:
    bus = EventBus()
    controller = create_controller(config, bus, platform)
    dispatcher = CommandDispatcher(
        controller=controller,
        translator=create_translator(config),
        speech=create_speech_output(config, platform),
    )
    control = UnixSocketControlServer(
        handler=dispatcher.handle,
        bus=bus,
        socket_path=config.socket_path,
        event_queue_size=config.event_queue_size,
    )
    return controller, control
