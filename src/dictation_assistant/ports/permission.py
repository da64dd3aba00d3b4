from typing import Protocol


class MicrophonePermission(Protocol):
    def check(self) -> None:
        """Raise PermissionDeniedError when audio capture is not allowed."""
        ...
