import os

import pytest

from dictation_assistant.adapters.deepl_translator import require_api_key
from dictation_assistant.adapters.edge_tts_speech import EdgeTtsSpeechOutput
from dictation_assistant.adapters.microphone_permission import (
    SimulatedMicrophonePermission,
    UnsupportedMicrophonePermission,
)
from dictation_assistant.adapters.say_speech import SaySpeechOutput
from dictation_assistant.adapters.unix_control import UnixSocketControlServer
from dictation_assistant.adapters.unsupported_speech import UnsupportedSpeechOutput
from dictation_assistant.config import DictationConfig
from dictation_assistant.domain.errors import ConfigError, PermissionDeniedError
from dictation_assistant.domain.session import SessionController
from dictation_assistant.factory import (
    create_app,
    create_permission,
    create_speech_output,
    resolve_speech_engine,
)
from dictation_assistant.health import has_critical_failures, run_startup_checks


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for key in list(os.environ):
        if key.startswith("DICTATION_") or key == "DEEPL_API_KEY":
            monkeypatch.delenv(key)


class TestPermissionSelection:
    def test_macos_gets_simulated_permission(self):
        permission = create_permission(DictationConfig(), platform="darwin")
        assert isinstance(permission, SimulatedMicrophonePermission)
        permission.check()

    def test_other_platforms_are_unsupported(self):
        permission = create_permission(DictationConfig(), platform="linux")

        assert isinstance(permission, UnsupportedMicrophonePermission)
        with pytest.raises(PermissionDeniedError, match="linux"):
            permission.check()

    def test_override(self):
        config = DictationConfig(permission_mode="granted")
        assert isinstance(create_permission(config, platform="linux"), SimulatedMicrophonePermission)


class TestSpeechSelection:
    def test_macos_uses_say(self):
        assert isinstance(create_speech_output(DictationConfig(), platform="darwin"), SaySpeechOutput)

    def test_linux_with_player_uses_edge_tts(self, monkeypatch):
        monkeypatch.setattr("dictation_assistant.factory.shutil.which", lambda name: f"/usr/bin/{name}")
        assert resolve_speech_engine(DictationConfig(), platform="linux") == "edge-tts"
        assert isinstance(create_speech_output(DictationConfig(), platform="linux"), EdgeTtsSpeechOutput)

    def test_linux_without_player_is_unsupported(self, monkeypatch):
        monkeypatch.setattr("dictation_assistant.factory.shutil.which", lambda name: None)
        assert isinstance(create_speech_output(DictationConfig(), platform="linux"), UnsupportedSpeechOutput)

    def test_explicit_engine(self):
        config = DictationConfig(speech_engine="none")
        assert isinstance(create_speech_output(config, platform="darwin"), UnsupportedSpeechOutput)


class TestCreateApp:
    def test_wires_controller_and_control_server(self, tmp_path):
        config = DictationConfig(socket_path=str(tmp_path / "app.sock"), poll_interval_ms=100)

        controller, control = create_app(config, platform="darwin")

        assert isinstance(controller, SessionController)
        assert isinstance(control, UnixSocketControlServer)
        assert not controller.is_active


class TestHealthChecks:
    def test_missing_credential_is_not_critical(self, tmp_path):
        config = DictationConfig(socket_path=str(tmp_path / "app.sock"), speech_engine="none")

        results = run_startup_checks(config, platform="linux")

        by_name = {r.name: r for r in results}
        assert not by_name["deepl_credential"].passed
        assert not by_name["speech_engine"].passed
        assert by_name["control_socket"].passed
        assert not has_critical_failures(results)

    @pytest.mark.parametrize("api_key", ["your_deepl_api_key_here", "   "])
    def test_placeholder_credential_fails(self, tmp_path, monkeypatch, api_key):
        monkeypatch.setenv("DEEPL_API_KEY", api_key)
        config = DictationConfig(socket_path=str(tmp_path / "app.sock"))

        results = run_startup_checks(config, platform="linux")

        check = next(r for r in results if r.name == "deepl_credential")
        assert not check.passed
        with pytest.raises(ConfigError) as exc_info:
            require_api_key(api_key)
        assert check.detail.startswith(exc_info.value.message)

    def test_usable_credential_passes(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DEEPL_API_KEY", "abc:fx")
        config = DictationConfig(socket_path=str(tmp_path / "app.sock"))

        results = run_startup_checks(config, platform="linux")

        assert next(r for r in results if r.name == "deepl_credential").passed

    def test_missing_socket_directory_is_critical(self, tmp_path):
        config = DictationConfig(socket_path=str(tmp_path / "missing" / "app.sock"))

        results = run_startup_checks(config, platform="linux")

        assert has_critical_failures(results)
