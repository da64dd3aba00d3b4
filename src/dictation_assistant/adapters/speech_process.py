import asyncio
import logging

from dictation_assistant.domain.errors import SynthesisError

logger = logging.getLogger(__name__)


class SpeechProcessRunner:
    """Runs speech/playback subprocesses and lets them be terminated from elsewhere.

    A process terminated through ``terminate_all`` is not reported as a failure.
    """

    def __init__(self) -> None:
        self._running: set[asyncio.subprocess.Process] = set()
        self._terminated: set[asyncio.subprocess.Process] = set()

    @property
    def running_count(self) -> int:
        return len(self._running)

    async def run(self, *argv: str) -> None:
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SynthesisError("Failed to execute speech command", str(exc)) from exc

        self._running.add(process)
        try:
            _, stderr_output = await process.communicate()
        finally:
            self._running.discard(process)
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()

        if process in self._terminated:
            self._terminated.discard(process)
            logger.debug("Speech process %s stopped", argv[0])
            return

        if process.returncode != 0:
            diagnostics = stderr_output.decode(errors="replace").strip()
            logger.error("%s exited with code %d: %s", argv[0], process.returncode, diagnostics)
            raise SynthesisError("Speech synthesis failed", diagnostics)

    def terminate_all(self) -> int:
        stopped = 0
        for process in list(self._running):
            if process.returncode is not None:
                continue
            self._terminated.add(process)
            try:
                process.terminate()
                stopped += 1
            except ProcessLookupError:
                pass
        return stopped
