"""Out-of-process verifier invocation."""

import asyncio
import logging
import os
import signal
import time
from asyncio.subprocess import Process
from dataclasses import dataclass

from video_kyc.errors import VerifierProcessError, VerifierTimeout
from video_kyc.services.verification import VerifierClient

logger = logging.getLogger(__name__)


@dataclass
class SubprocessVerifierClient(VerifierClient):
    """Runs ``<command> <document_ref> <video_ref>`` and captures its output."""

    command: list[str]

    async def invoke(self, document_ref: str, video_ref: str, timeout: float) -> str:
        """Run the verifier with a hard time limit and return combined output."""
        argv = [*self.command, document_ref, video_ref]
        started = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as exc:
            logger.error("Failed to start verifier %s: %s", self.command[0], exc)
            raise VerifierProcessError(exit_code=None) from exc

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except TimeoutError:
            await _terminate(process)
            logger.error("Verifier pid %s timed out after %.1fs", process.pid, timeout)
            raise VerifierTimeout(timeout) from None
        except asyncio.CancelledError:
            await _terminate(process)
            logger.warning("Verifier pid %s killed on cancellation", process.pid)
            raise

        output = stdout.decode("utf-8", errors="replace")
        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            "Verifier pid %s exited with %s in %.0f ms",
            process.pid,
            process.returncode,
            elapsed_ms,
        )
        logger.debug("Verifier output: %s", output)
        if process.returncode != 0:
            raise VerifierProcessError(exit_code=process.returncode)
        return output


async def _terminate(process: Process) -> None:
    """Kill the verifier's whole process group and reap the verifier.

    Children inherit the output pipe, so the pipe only closes once every
    process in the group is gone.
    """
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    await process.wait()
