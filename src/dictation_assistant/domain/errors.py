class DictationError(Exception):
    """Base for every failure the assistant reports to its callers.

    ``kind`` is the stable identifier used in control-socket responses.
    """

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AlreadyActiveError(DictationError):
    kind = "already_active"

    def __init__(self, message: str = "Transcription already active") -> None:
        super().__init__(message)


class PermissionDeniedError(DictationError):
    kind = "permission_denied"


class UnsupportedPlatformError(DictationError):
    kind = "unsupported_platform"


class TranscriptionFailure(DictationError):
    kind = "transcription_failure"


class TranslationError(DictationError):
    kind = "translation"


class ConfigError(TranslationError):
    kind = "config"


class InvalidRequestError(TranslationError):
    kind = "invalid_request"


class TransportError(TranslationError):
    kind = "transport"


class UpstreamError(TranslationError):
    kind = "upstream"

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"DeepL API error (status {status}): {body}")
        self.status = status
        self.body = body


class DecodeError(TranslationError):
    kind = "decode"


class EmptyResultError(TranslationError):
    kind = "empty_result"

    def __init__(self, message: str = "No translation found in DeepL response") -> None:
        super().__init__(message)


class SynthesisError(DictationError):
    kind = "synthesis"

    def __init__(self, message: str, diagnostics: str = "") -> None:
        if diagnostics:
            message = f"{message}: {diagnostics}"
        super().__init__(message)
        self.diagnostics = diagnostics
