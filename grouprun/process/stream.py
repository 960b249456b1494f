"""Child process execution with live output and an idle timeout.

The command runs in its own process group. Output is forwarded in chunks as
soon as the child writes it, newline or not, and every chunk restarts the
idle timer. A process that stays silent too long is stopped together with
everything it spawned. There is no limit on total run time.
"""

import codecs
import logging
import os
import queue
import signal
import subprocess
import threading
from pathlib import Path
from typing import IO, Callable, Optional, Sequence, Union

from ..errors import RunnerLaunchFailure, RunnerTimeout
from .idle_timer import IdleTimer

logger = logging.getLogger(__name__)

OutputSink = Callable[[str], None]

READ_SIZE = 4096

# Marks the end of one output stream in the chunk queue
_EOF = object()


def stream_process(
    cmd: Sequence[str],
    working_dir: Union[str, Path],
    idle_timeout: float,
    on_output: OutputSink,
    on_start: Optional[Callable[[int], None]] = None,
    kill_grace: float = 5.0,
    label: str = "process",
) -> int:
    """Run a command to completion, forwarding its output as it arrives.

    One reader thread per output stream decodes raw reads and pushes the
    text onto a queue. The calling thread drains the queue, forwards each
    chunk and watches the idle deadline.

    Args:
        cmd: Executable and arguments.
        working_dir: Directory the process runs in.
        idle_timeout: Allowed silence in seconds.
        on_output: Receives each output chunk, stdout and stderr alike.
        on_start: Called with the PID once the process is running.
        kill_grace: Seconds to wait after SIGTERM before SIGKILL.
        label: Names the process in errors and log messages.

    Returns:
        The process exit status.

    Raises:
        RunnerLaunchFailure: If the process cannot be started.
        RunnerTimeout: If the process is silent for too long.
    """
    cmd = list(cmd)
    timer = IdleTimer(idle_timeout)
    logger.debug("%s command: %s (cwd=%s)", label.capitalize(), cmd, working_dir)

    try:
        process = subprocess.Popen(
            cmd,
            cwd=working_dir,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
            start_new_session=True,
        )
    except OSError as e:
        raise RunnerLaunchFailure(f"Failed to start {label} '{cmd[0]}': {e}") from e

    logger.info("%s started (PID %d)", label.capitalize(), process.pid)
    if on_start:
        on_start(process.pid)

    chunks: queue.Queue = queue.Queue()
    readers = [
        threading.Thread(target=_pump, args=(stream, chunks), daemon=True)
        for stream in (process.stdout, process.stderr)
    ]
    for reader in readers:
        reader.start()

    timer.start()
    try:
        open_streams = len(readers)
        while open_streams:
            try:
                chunk = chunks.get(timeout=timer.remaining)
            except queue.Empty:
                raise RunnerTimeout(idle_timeout, process.pid)

            if chunk is _EOF:
                open_streams -= 1
                continue

            timer.reset()
            on_output(chunk)

        try:
            returncode = process.wait(timeout=timer.remaining)
        except subprocess.TimeoutExpired:
            raise RunnerTimeout(idle_timeout, process.pid)

    except BaseException:
        stop_process_group(process, kill_grace, label)
        raise

    finally:
        for reader in readers:
            reader.join(timeout=1.0)

    logger.info("%s exited with status %d", label.capitalize(), returncode)
    return returncode


def stop_process_group(process: subprocess.Popen, kill_grace: float, label: str = "process") -> None:
    """Stop a process and everything in its group.

    SIGTERM goes to the whole group first. Whatever is left after the
    leader exits, or after kill_grace, gets SIGKILL.
    """
    logger.warning("Terminating %s (PID %d)", label, process.pid)
    _signal_group(process, kill=False)
    try:
        process.wait(timeout=kill_grace)
    except subprocess.TimeoutExpired:
        logger.warning("%s ignored terminate, killing (PID %d)", label.capitalize(), process.pid)
    # Helpers spawned by the leader may outlive it
    _signal_group(process, kill=True)
    process.wait()


def _signal_group(process: subprocess.Popen, kill: bool) -> None:
    if not hasattr(os, "killpg"):
        if process.poll() is not None:
            return
        if kill:
            process.kill()
        else:
            process.terminate()
        return

    try:
        os.killpg(process.pid, signal.SIGKILL if kill else signal.SIGTERM)
    except (ProcessLookupError, PermissionError):
        # Group already gone
        pass


def _pump(stream: IO[bytes], chunks: queue.Queue) -> None:
    """Copy decoded chunks from one stream onto the queue until EOF."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    try:
        while True:
            data = os.read(stream.fileno(), READ_SIZE)
            if not data:
                break
            text = decoder.decode(data)
            if text:
                chunks.put(text)
        tail = decoder.decode(b"", final=True)
        if tail:
            chunks.put(tail)
    except (OSError, ValueError):
        # Stream closed underneath us while the process was being stopped
        pass
    finally:
        chunks.put(_EOF)
