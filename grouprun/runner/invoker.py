"""External test runner invocation."""

import logging
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence, Union

from ..process.stream import OutputSink, stream_process

logger = logging.getLogger(__name__)


class RunnerInvoker(Protocol):
    """Runs the external test runner and reports its exit status."""

    def invoke(
        self,
        base_command: Sequence[str],
        working_dir: Union[str, Path],
        selectors: Sequence[str],
        idle_timeout: float,
        on_output: OutputSink,
        on_start: Optional[Callable[[int], None]] = None,
    ) -> int: ...


def build_runner_command(base_command: Sequence[str], selectors: Sequence[str]) -> list[str]:
    """Append one '-g <name>' selector per requested name."""
    cmd = list(base_command)
    for name in selectors:
        cmd.extend(["-g", name])
    return cmd


class ProcessRunnerInvoker:
    """Runs the runner as a child process in its own process group.

    Output is forwarded chunk by chunk as it arrives. A runner that stays
    silent past the idle timeout is stopped along with anything it spawned.
    """

    def __init__(self, kill_grace: float = 5.0):
        """Initialize invoker.

        Args:
            kill_grace: Seconds to wait after SIGTERM before SIGKILL.
        """
        self.kill_grace = kill_grace

    def invoke(
        self,
        base_command: Sequence[str],
        working_dir: Union[str, Path],
        selectors: Sequence[str],
        idle_timeout: float,
        on_output: OutputSink,
        on_start: Optional[Callable[[int], None]] = None,
    ) -> int:
        """Run the runner to completion.

        Args:
            base_command: Runner executable and fixed arguments.
            working_dir: Directory the runner runs in.
            selectors: Group or suite names, one '-g' each.
            idle_timeout: Allowed silence in seconds.
            on_output: Receives each output chunk, stdout and stderr alike.
            on_start: Called with the PID once the process is running.

        Returns:
            The runner's exit status.

        Raises:
            RunnerLaunchFailure: If the process cannot be started.
            RunnerTimeout: If the process is silent for too long.
        """
        cmd = build_runner_command(base_command, selectors)
        logger.debug("Running %d selectors with idle timeout %.1fs", len(selectors), idle_timeout)
        return stream_process(
            cmd,
            working_dir,
            idle_timeout,
            on_output,
            on_start=on_start,
            kill_grace=self.kill_grace,
            label="runner",
        )
