"""Process Output Streaming for progress runs.

Provides asyncio-based subprocess execution with real-time delivery of
stdout and stderr chunks.

Features:
- Shell-interpreted commands with stdin closed
- Separate stdout/stderr streams read concurrently
- Incremental UTF-8 decoding (multi-byte characters never split)
- Chunks handed to a single callback in arrival order
- Only stderr retained unless stdout capture is requested
- Child killed if a callback raises or the run is cancelled
"""

from __future__ import annotations

import asyncio
import codecs
import os
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from cliprogress.utils.logging import get_logger

OutputCallback = Callable[[str, bool], None]

READ_CHUNK_SIZE = 4096

logger = get_logger(__name__)


class ProcessState(Enum):
    """State of a managed process."""

    PENDING = auto()
    RUNNING = auto()
    COMPLETED = auto()
    FAILED = auto()
    CANCELLED = auto()


@dataclass
class ProcessInfo:
    """Information about one command execution."""

    command: str
    working_dir: str
    state: ProcessState = ProcessState.PENDING
    pid: int | None = None
    return_code: int | None = None
    start_time: float | None = None
    end_time: float | None = None
    stdout_chunks: list[str] = field(default_factory=list)
    stderr_chunks: list[str] = field(default_factory=list)

    @property
    def duration_ms(self) -> float | None:
        """Get process duration in milliseconds."""
        if self.start_time is None:
            return None
        end = self.end_time or time.time()
        return (end - self.start_time) * 1000

    @property
    def stdout(self) -> str:
        return "".join(self.stdout_chunks)

    @property
    def stderr(self) -> str:
        return "".join(self.stderr_chunks)


class ProcessOutputStream:
    """Decodes one pipe's bytes into text chunks.

    Keeps an incremental decoder so a multi-byte character split across
    two reads comes out whole in the later chunk.
    """

    def __init__(self, is_stderr: bool = False) -> None:
        self.is_stderr = is_stderr
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._total_bytes = 0

    def feed(self, data: bytes) -> str:
        """Decode raw bytes, returning whatever text is complete so far."""
        self._total_bytes += len(data)
        return self._decoder.decode(data)

    def flush(self) -> str:
        """Decode any trailing partial character at end of stream."""
        return self._decoder.decode(b"", final=True)

    @property
    def total_bytes(self) -> int:
        return self._total_bytes


class ProcessExecutor:
    """Runs one shell command and streams its output.

    Example:
        >>> executor = ProcessExecutor()
        >>>
        >>> async def run():
        ...     info = await executor.execute("echo hello", capture_stdout=True)
        ...     print(info.return_code, info.stdout)
    """

    async def execute(
        self,
        command: str,
        working_dir: str | os.PathLike[str] | None = None,
        on_output: OutputCallback | None = None,
        capture_stdout: bool = False,
    ) -> ProcessInfo:
        """Execute a command, delivering output chunks as they arrive.

        Args:
            command: Shell command line
            working_dir: Working directory (defaults to the current one)
            on_output: Called as ``on_output(text, is_stderr)`` per chunk
            capture_stdout: Keep stdout text on the returned ProcessInfo.
                Stderr is always kept for failure diagnostics.

        Returns:
            ProcessInfo once both pipes are closed and the process exited

        Raises:
            OSError: If the shell cannot be started (e.g. missing cwd)
            Exception: Whatever ``on_output`` raises; the child is killed first
        """
        resolved_dir = str(Path(working_dir or os.getcwd()).resolve())
        info = ProcessInfo(command=command, working_dir=resolved_dir)

        info.start_time = time.time()
        process = await asyncio.create_subprocess_shell(
            command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=resolved_dir,
        )
        info.pid = process.pid
        info.state = ProcessState.RUNNING
        logger.debug("process_started", command=command, pid=process.pid, cwd=resolved_dir)

        stdout_stream = ProcessOutputStream(is_stderr=False)
        stderr_stream = ProcessOutputStream(is_stderr=True)

        def deliver(stream: ProcessOutputStream, text: str) -> None:
            if not text:
                return
            if stream.is_stderr:
                info.stderr_chunks.append(text)
            elif capture_stdout:
                info.stdout_chunks.append(text)
            if on_output is not None:
                on_output(text, stream.is_stderr)

        async def pump(reader: asyncio.StreamReader, stream: ProcessOutputStream) -> None:
            while True:
                chunk = await reader.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                deliver(stream, stream.feed(chunk))
            deliver(stream, stream.flush())

        assert process.stdout is not None and process.stderr is not None
        tasks = [
            asyncio.ensure_future(pump(process.stdout, stdout_stream)),
            asyncio.ensure_future(pump(process.stderr, stderr_stream)),
        ]

        try:
            await asyncio.gather(*tasks)
            return_code = await process.wait()
        except BaseException as exc:
            for task in tasks:
                task.cancel()
            if process.returncode is None:
                process.kill()
                await process.wait()
            info.state = (
                ProcessState.CANCELLED
                if isinstance(exc, asyncio.CancelledError)
                else ProcessState.FAILED
            )
            info.return_code = process.returncode
            info.end_time = time.time()
            logger.debug("process_aborted", command=command, reason=type(exc).__name__)
            raise

        info.return_code = return_code
        info.state = ProcessState.COMPLETED if return_code == 0 else ProcessState.FAILED
        info.end_time = time.time()
        logger.debug(
            "process_exited",
            command=command,
            return_code=return_code,
            duration_ms=round(info.duration_ms or 0.0, 2),
        )
        return info
