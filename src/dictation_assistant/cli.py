import argparse
import asyncio
import json
import logging
import os
import signal
import sys
from pathlib import Path

from dictation_assistant.config import DictationConfig
from dictation_assistant.log_format import ColoredFormatter

ENV_FILE_PATH = Path.home() / ".config" / "dictation-assistant" / "env"
CLIENT_COMMANDS = ("start", "stop", "status", "translate", "speak", "stop-speech", "listen")


def _load_env_file(path: Path = ENV_FILE_PATH) -> None:
    if not path.exists():
        return
    with open(path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            key = key.strip()
            value = value.strip().strip("'\"")
            if key not in os.environ:
                os.environ[key] = value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dictation and translation assistant")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command")

    start_parser = subparsers.add_parser("start", help="Start a dictation session")
    start_parser.add_argument("--language", "-l", help="Language tag, e.g. es-ES")

    subparsers.add_parser("stop", help="Stop the dictation session")
    subparsers.add_parser("status", help="Query session state")

    translate_parser = subparsers.add_parser("translate", help="Translate text with DeepL")
    translate_parser.add_argument("text")
    translate_parser.add_argument("--target", "-t", required=True, help="Target language, e.g. ES")
    translate_parser.add_argument("--source", "-s", help="Source language, e.g. EN")

    speak_parser = subparsers.add_parser("speak", help="Speak text aloud")
    speak_parser.add_argument("text")
    speak_parser.add_argument("--voice", default="normal", help="Voice preset (normal, cinematic)")
    speak_parser.add_argument("--language", "-l", default="en-US", help="Language code")

    subparsers.add_parser("stop-speech", help="Stop any speech in progress")
    subparsers.add_parser("listen", help="Print transcription events as they arrive")

    return parser


def _configure_logging(verbose: bool, log_file: str) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter(datefmt="%H:%M:%S"))
    handlers: list[logging.Handler] = [handler]

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, handlers=handlers)

    logging.getLogger("httpcore").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


def main() -> None:
    _load_env_file()
    args = _build_parser().parse_args()

    config = DictationConfig()
    _configure_logging(args.verbose, config.log_file)

    if args.command in CLIENT_COMMANDS:
        asyncio.run(_run_client_command(args, config))
    else:
        asyncio.run(_run_daemon(config))


def _client_request(args: argparse.Namespace) -> tuple[str, dict | None]:
    if args.command == "start":
        return "start", {"language": args.language} if args.language else None
    if args.command == "translate":
        payload = {"text": args.text, "target_lang": args.target}
        if args.source:
            payload["source_lang"] = args.source
        return "translate", payload
    if args.command == "speak":
        return "speak", {"text": args.text, "voice_preset": args.voice, "language_code": args.language}
    if args.command == "stop-speech":
        return "stop_speech", None
    return args.command, None


async def _run_client_command(args: argparse.Namespace, config: DictationConfig) -> None:
    from dictation_assistant.adapters.unix_control import UnixSocketControlClient

    client = UnixSocketControlClient(socket_path=config.socket_path)

    try:
        if args.command == "listen":
            async for event in client.listen():
                print(json.dumps(event, ensure_ascii=False), flush=True)
            return

        action, payload = _client_request(args)
        result = await client.send_command(action, payload)
        print(json.dumps(result, ensure_ascii=False))
        if result.get("status") != "ok":
            sys.exit(1)
    except (ConnectionRefusedError, FileNotFoundError):
        print("Dictation assistant is not running", file=sys.stderr)
        sys.exit(1)


async def _run_daemon(config: DictationConfig) -> None:
    from dictation_assistant.factory import create_app
    from dictation_assistant.health import has_critical_failures, run_startup_checks

    results = run_startup_checks(config)
    if has_critical_failures(results):
        logging.error("Critical health check failures, aborting startup")
        sys.exit(1)

    controller, control = create_app(config)

    shutdown_event = asyncio.Event()
    shutdown_triggered = False

    def handle_signal() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            logging.warning("Forced exit")
            sys.exit(1)
        shutdown_triggered = True
        logging.info("Shutting down...")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal)

    await control.start()
    try:
        await shutdown_event.wait()
    finally:
        try:
            await asyncio.wait_for(controller.aclose(), timeout=3.0)
        except asyncio.TimeoutError:
            logging.warning("Transcription session did not wind down in time")
        await control.stop()
