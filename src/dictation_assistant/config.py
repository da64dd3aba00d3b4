from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DictationConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DICTATION_", populate_by_name=True)

    default_language: str = "en-US"
    poll_interval_ms: int = 500

    deepl_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DEEPL_API_KEY", "DICTATION_DEEPL_API_KEY"),
    )
    deepl_api_key_file: str = ""
    deepl_api_url: str = "https://api-free.deepl.com/v2/translate"
    translation_timeout_seconds: float = 10.0

    speech_engine: Literal["auto", "say", "edge-tts", "none"] = "auto"
    say_command: str = "say"
    player_command: str = "ffplay"

    permission_mode: Literal["auto", "granted", "unsupported"] = "auto"

    event_queue_size: int = 100
    socket_path: str = "/tmp/dictation-assistant.sock"
    log_file: str = ""

    def read_secret(self, path: str) -> str:
        if not path:
            return ""
        try:
            with open(path) as f:
                return f.read().strip()
        except FileNotFoundError:
            return ""

    def resolve_deepl_api_key(self) -> str | None:
        if self.deepl_api_key is not None:
            return self.deepl_api_key
        return self.read_secret(self.deepl_api_key_file) or None
