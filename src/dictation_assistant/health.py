import logging
import os
import shutil
import sys
from dataclasses import dataclass

from dictation_assistant.adapters.deepl_translator import require_api_key
from dictation_assistant.config import DictationConfig
from dictation_assistant.domain.errors import ConfigError
from dictation_assistant.factory import resolve_speech_engine

logger = logging.getLogger(__name__)


@dataclass
class HealthCheckResult:
    name: str
    passed: bool
    detail: str


def run_startup_checks(config: DictationConfig, platform: str = sys.platform) -> list[HealthCheckResult]:
    results = [
        _check_deepl_credential(config),
        _check_speech_engine(config, platform),
        _check_control_socket(config),
    ]

    passed = sum(1 for r in results if r.passed)

    logger.info("Health check: %d/%d passed", passed, len(results))
    for result in results:
        level = logging.INFO if result.passed else logging.WARNING
        symbol = "OK" if result.passed else "FAIL"
        logger.log(level, "  [%s] %s: %s", symbol, result.name, result.detail)

    return results


def has_critical_failures(results: list[HealthCheckResult]) -> bool:
    critical_checks = {"control_socket"}
    return any(not r.passed and r.name in critical_checks for r in results)


def _check_deepl_credential(config: DictationConfig) -> HealthCheckResult:
    name = "deepl_credential"
    try:
        require_api_key(config.resolve_deepl_api_key())
    except ConfigError as exc:
        return HealthCheckResult(name=name, passed=False, detail=f"{exc.message}, translation disabled")
    return HealthCheckResult(name=name, passed=True, detail="Credential loaded")


def _check_speech_engine(config: DictationConfig, platform: str) -> HealthCheckResult:
    name = "speech_engine"
    engine = resolve_speech_engine(config, platform)
    if engine == "none":
        return HealthCheckResult(name=name, passed=False, detail=f"No speech engine available on {platform}")

    binary = config.say_command if engine == "say" else config.player_command
    if shutil.which(binary) is None:
        return HealthCheckResult(name=name, passed=False, detail=f"{engine}: '{binary}' not found on PATH")
    return HealthCheckResult(name=name, passed=True, detail=f"{engine} via {binary}")


def _check_control_socket(config: DictationConfig) -> HealthCheckResult:
    name = "control_socket"
    directory = os.path.dirname(os.path.abspath(config.socket_path))
    if not os.path.isdir(directory):
        return HealthCheckResult(name=name, passed=False, detail=f"Directory {directory} does not exist")
    if not os.access(directory, os.W_OK):
        return HealthCheckResult(name=name, passed=False, detail=f"Directory {directory} is not writable")
    return HealthCheckResult(name=name, passed=True, detail=config.socket_path)
