import asyncio
import stat
from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from dictation_assistant.adapters.scripted_recognizer import ScriptedRecognizer
from dictation_assistant.domain.errors import PermissionDeniedError, TranscriptionFailure
from dictation_assistant.domain.session import SessionController
from dictation_assistant.ports.recognizer import Liveness, TranscriptFragment
from dictation_assistant.ports.translator import TranslationResult


FAST_INTERVAL_SECONDS = 0.01
ENGLISH_FINAL = "Hello world, this is a test of speech recognition."


class FakePermission:
    def __init__(self, granted: bool = True) -> None:
        self.granted = granted
        self.checks = 0

    def check(self) -> None:
        self.checks += 1
        if not self.granted:
            raise PermissionDeniedError("not granted in system settings")


class RecordingSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def publish(self, topic: str, payload: dict) -> None:
        self.events.append((topic, payload))

    def payloads(self, topic: str) -> list[dict]:
        return [payload for t, payload in self.events if t == topic]

    def finals(self) -> list[dict]:
        return [p for p in self.payloads("transcription-result") if p["is_final"]]


class BrokenSink:
    def publish(self, topic: str, payload: dict) -> None:
        raise RuntimeError("no listener")


class CountingRecognizer:
    def __init__(self, inner: ScriptedRecognizer) -> None:
        self._inner = inner
        self.produce_calls = 0
        self.languages: list[str] = []

    def produce(self, language: str, is_alive: Liveness) -> AsyncIterator[TranscriptFragment]:
        self.produce_calls += 1
        self.languages.append(language)
        return self._inner.produce(language, is_alive)


class FailingRecognizer:
    def __init__(self, fail_at_step: int = 2, error: Exception | None = None) -> None:
        self._fail_at_step = fail_at_step
        self._error = error or TranscriptionFailure("engine unavailable")
        self.produce_calls = 0

    async def produce(self, language: str, is_alive: Liveness) -> AsyncIterator[TranscriptFragment]:
        self.produce_calls += 1
        step = 0
        while True:
            await asyncio.sleep(FAST_INTERVAL_SECONDS)
            if not is_alive():
                return
            step += 1
            if step >= self._fail_at_step:
                raise self._error
            yield TranscriptFragment(text=f"word {step}", is_final=False)


class FakeTranslator:
    def __init__(self, result: str = "Hola", error: Exception | None = None) -> None:
        self._result = result
        self._error = error
        self.calls: list[tuple[str, str, str | None]] = []

    async def translate(
        self, text: str, target_lang: str, source_lang: str | None = None
    ) -> TranslationResult:
        self.calls.append((text, target_lang, source_lang))
        if self._error:
            raise self._error
        return TranslationResult(translated_text=self._result)


class FakeSpeechOutput:
    def __init__(self, error: Exception | None = None) -> None:
        self._error = error
        self.spoken: list[tuple[str, str, str]] = []
        self.stop_calls = 0

    async def speak(self, text: str, voice_preset: str, language_code: str) -> None:
        if self._error:
            raise self._error
        self.spoken.append((text, voice_preset, language_code))

    async def stop_speech(self) -> None:
        self.stop_calls += 1


async def wait_until(predicate, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


def write_script(directory: Path, name: str, body: str) -> str:
    path = directory / name
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def permission():
    return FakePermission()


@pytest.fixture
def recognizer():
    return CountingRecognizer(ScriptedRecognizer(poll_interval_seconds=FAST_INTERVAL_SECONDS))


@pytest.fixture
def controller(recognizer, sink, permission):
    return SessionController(recognizer=recognizer, sink=sink, permission=permission)


@pytest.fixture
def fake_translator():
    return FakeTranslator()


@pytest.fixture
def fake_speech():
    return FakeSpeechOutput()
