import logging

from dictation_assistant.domain.errors import PermissionDeniedError

logger = logging.getLogger(__name__)


class SimulatedMicrophonePermission:
    # The scripted recognizer never opens a real input device.
    def check(self) -> None:
        logger.debug("Checking microphone permission (simulated)")


class UnsupportedMicrophonePermission:
    def __init__(self, platform: str) -> None:
        self._platform = platform

    def check(self) -> None:
        raise PermissionDeniedError(
            f"Microphone permission check not supported on this platform ({self._platform})"
        )
