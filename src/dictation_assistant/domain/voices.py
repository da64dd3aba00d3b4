from dataclasses import dataclass

DEFAULT_LANGUAGE = "en-US"
DEFAULT_PRESET = "normal"
ALTERNATE_PRESET = "cinematic"


@dataclass(frozen=True)
class VoiceRequest:
    text: str
    voice_preset: str = DEFAULT_PRESET
    language_code: str = DEFAULT_LANGUAGE


@dataclass(frozen=True)
class VoiceProfile:
    voice_name: str
    rate: int


NORMAL_RATE = 200
CINEMATIC_RATE = 150

VOICE_TABLE: dict[tuple[str, str], VoiceProfile] = {
    ("en-US", DEFAULT_PRESET): VoiceProfile("Samantha", NORMAL_RATE),
    ("en-US", ALTERNATE_PRESET): VoiceProfile("Alex", CINEMATIC_RATE),
    ("es-ES", DEFAULT_PRESET): VoiceProfile("Mónica", NORMAL_RATE),
    ("es-ES", ALTERNATE_PRESET): VoiceProfile("Diego", CINEMATIC_RATE),
    ("fr-FR", DEFAULT_PRESET): VoiceProfile("Amélie", NORMAL_RATE),
    ("fr-FR", ALTERNATE_PRESET): VoiceProfile("Thomas", CINEMATIC_RATE),
}

# Neural voices for hosts without the macOS speech engine, same keys as VOICE_TABLE.
NEURAL_VOICE_TABLE: dict[tuple[str, str], str] = {
    ("en-US", DEFAULT_PRESET): "en-US-AriaNeural",
    ("en-US", ALTERNATE_PRESET): "en-US-GuyNeural",
    ("es-ES", DEFAULT_PRESET): "es-ES-ElviraNeural",
    ("es-ES", ALTERNATE_PRESET): "es-ES-AlvaroNeural",
    ("fr-FR", DEFAULT_PRESET): "fr-FR-DeniseNeural",
    ("fr-FR", ALTERNATE_PRESET): "fr-FR-HenriNeural",
}


def _resolve_key(language_code: str, voice_preset: str) -> tuple[str, str]:
    languages = {language for language, _ in VOICE_TABLE}
    language = language_code if language_code in languages else DEFAULT_LANGUAGE
    preset = voice_preset if (language, voice_preset) in VOICE_TABLE else DEFAULT_PRESET
    return language, preset


def resolve_voice(language_code: str, voice_preset: str) -> VoiceProfile:
    return VOICE_TABLE[_resolve_key(language_code, voice_preset)]


def resolve_neural_voice(language_code: str, voice_preset: str) -> str:
    return NEURAL_VOICE_TABLE[_resolve_key(language_code, voice_preset)]


def relative_rate(rate: int) -> str:
    """Express a words-per-minute rate as edge-tts' signed percentage string."""
    percent = round((rate - NORMAL_RATE) * 100 / NORMAL_RATE)
    return f"{percent:+d}%"
