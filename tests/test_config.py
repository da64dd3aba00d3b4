import os

import pytest

from dictation_assistant.cli import _client_request, _build_parser, _load_env_file
from dictation_assistant.config import DictationConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for key in list(os.environ):
        if key.startswith("DICTATION_") or key == "DEEPL_API_KEY":
            monkeypatch.delenv(key)


class TestDictationConfig:
    def test_defaults(self):
        config = DictationConfig()

        assert config.default_language == "en-US"
        assert config.poll_interval_ms == 500
        assert config.resolve_deepl_api_key() is None

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("DICTATION_POLL_INTERVAL_MS", "250")
        monkeypatch.setenv("DICTATION_SPEECH_ENGINE", "say")

        config = DictationConfig()

        assert config.poll_interval_ms == 250
        assert config.speech_engine == "say"

    def test_deepl_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEEPL_API_KEY", "abc:fx")
        assert DictationConfig().resolve_deepl_api_key() == "abc:fx"

    def test_empty_environment_key_is_kept_for_placeholder_check(self, monkeypatch):
        monkeypatch.setenv("DEEPL_API_KEY", "")
        assert DictationConfig().resolve_deepl_api_key() == ""

    def test_deepl_key_from_secret_file(self, tmp_path):
        secret = tmp_path / "deepl"
        secret.write_text("file-key:fx\n")

        config = DictationConfig(deepl_api_key_file=str(secret))

        assert config.resolve_deepl_api_key() == "file-key:fx"

    def test_missing_secret_file(self, tmp_path):
        config = DictationConfig(deepl_api_key_file=str(tmp_path / "missing"))
        assert config.resolve_deepl_api_key() is None


class TestEnvFile:
    def test_loads_values_without_overriding(self, tmp_path, monkeypatch):
        env_file = tmp_path / "env"
        env_file.write_text(
            "# DeepL\nDEEPL_API_KEY='from-file'\nDICTATION_DEFAULT_LANGUAGE=fr-FR\nnot a pair\n"
        )
        monkeypatch.setenv("DICTATION_DEFAULT_LANGUAGE", "es-ES")
        monkeypatch.setenv("DEEPL_API_KEY", "unset")
        monkeypatch.delenv("DEEPL_API_KEY")

        _load_env_file(env_file)

        assert os.environ["DEEPL_API_KEY"] == "from-file"
        assert os.environ["DICTATION_DEFAULT_LANGUAGE"] == "es-ES"

    def test_missing_file_is_ignored(self, tmp_path):
        _load_env_file(tmp_path / "absent")


class TestClientRequests:
    def test_translate_request(self):
        args = _build_parser().parse_args(["translate", "Hello", "--target", "ES", "--source", "EN"])
        assert _client_request(args) == (
            "translate",
            {"text": "Hello", "target_lang": "ES", "source_lang": "EN"},
        )

    def test_start_without_language(self):
        args = _build_parser().parse_args(["start"])
        assert _client_request(args) == ("start", None)

    def test_speak_request(self):
        args = _build_parser().parse_args(["speak", "Hi", "--voice", "cinematic", "-l", "fr-FR"])
        assert _client_request(args) == (
            "speak",
            {"text": "Hi", "voice_preset": "cinematic", "language_code": "fr-FR"},
        )

    def test_stop_speech_maps_to_action(self):
        args = _build_parser().parse_args(["stop-speech"])
        assert _client_request(args) == ("stop_speech", None)
