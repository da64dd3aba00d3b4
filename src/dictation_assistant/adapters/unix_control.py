import asyncio
import json
import logging
import os
from collections.abc import AsyncIterator
from pathlib import Path

from dictation_assistant.adapters.event_bus import EventBus, QueueSubscriber
from dictation_assistant.ports.control import CommandHandler, ControlCommand

logger = logging.getLogger(__name__)

DEFAULT_SOCKET_PATH = "/tmp/dictation-assistant.sock"
SUBSCRIBE_ACTION = "subscribe"


class UnixSocketControlServer:
    def __init__(
        self,
        handler: CommandHandler,
        bus: EventBus,
        socket_path: str = DEFAULT_SOCKET_PATH,
        event_queue_size: int = 100,
    ) -> None:
        self._handler = handler
        self._bus = bus
        self._socket_path = socket_path
        self._event_queue_size = event_queue_size
        self._server: asyncio.Server | None = None
        self._stream_tasks: set[asyncio.Task] = set()

    async def start(self) -> None:
        socket_file = Path(self._socket_path)
        if socket_file.exists():
            socket_file.unlink()

        self._server = await asyncio.start_unix_server(
            self._handle_client,
            path=self._socket_path,
        )
        os.chmod(self._socket_path, 0o600)
        logger.info("Control socket listening at %s", self._socket_path)

    async def stop(self) -> None:
        for task in list(self._stream_tasks):
            task.cancel()
        if self._server:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
        socket_file = Path(self._socket_path)
        if socket_file.exists():
            socket_file.unlink()

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        try:
            raw = await asyncio.wait_for(reader.readline(), timeout=5.0)
            if not raw:
                return

            request = json.loads(raw.decode().strip())
            if not isinstance(request, dict):
                logger.warning("Ignoring non-object request from client")
                return

            command = ControlCommand(action=request.get("action", ""), payload=request.get("payload"))
            if command.action == SUBSCRIBE_ACTION:
                await self._stream_events(writer)
                return

            response = await self._handler(command)
            await _write_line(writer, response)
        except asyncio.TimeoutError:
            logger.warning("Client connection timed out")
        except json.JSONDecodeError:
            logger.warning("Invalid JSON from client")
        except (ConnectionResetError, BrokenPipeError):
            logger.debug("Client disconnected")
        except Exception:
            logger.exception("Error handling control client")
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (ConnectionResetError, BrokenPipeError):
                pass

    async def _stream_events(self, writer: asyncio.StreamWriter) -> None:
        task = asyncio.current_task()
        subscriber = QueueSubscriber(self._bus, maxsize=self._event_queue_size)
        if task:
            self._stream_tasks.add(task)
        logger.info("Event subscriber connected")
        try:
            await _write_line(writer, {"status": "ok", "action": SUBSCRIBE_ACTION})
            async for topic, payload in subscriber.events():
                await _write_line(writer, {"topic": topic, "payload": payload})
        finally:
            subscriber.close()
            if task:
                self._stream_tasks.discard(task)
            logger.info("Event subscriber disconnected")


class UnixSocketControlClient:
    def __init__(self, socket_path: str = DEFAULT_SOCKET_PATH, timeout: float = 30.0) -> None:
        self._socket_path = socket_path
        self._timeout = timeout

    async def send_command(self, action: str, payload: dict | None = None) -> dict:
        reader, writer = await asyncio.open_unix_connection(self._socket_path)
        try:
            await _write_line(writer, _build_request(action, payload))
            raw = await asyncio.wait_for(reader.readline(), timeout=self._timeout)
            return json.loads(raw.decode().strip())
        finally:
            writer.close()
            await writer.wait_closed()

    async def listen(self) -> AsyncIterator[dict]:
        reader, writer = await asyncio.open_unix_connection(self._socket_path)
        try:
            await _write_line(writer, _build_request(SUBSCRIBE_ACTION, None))
            ack = await asyncio.wait_for(reader.readline(), timeout=self._timeout)
            if not ack:
                return
            while True:
                raw = await reader.readline()
                if not raw:
                    break
                yield json.loads(raw.decode().strip())
        finally:
            writer.close()
            await writer.wait_closed()


def _build_request(action: str, payload: dict | None) -> dict:
    request: dict = {"action": action}
    if payload:
        request["payload"] = payload
    return request


async def _write_line(writer: asyncio.StreamWriter, data: dict) -> None:
    writer.write((json.dumps(data, ensure_ascii=False) + "\n").encode())
    await writer.drain()
