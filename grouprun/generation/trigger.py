"""Test generation trigger.

Hands the resolved plan to an external generator command before the runner
is launched. Cleaning up after a failed generation is the generator's job.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from ..config.options import ExecutionConfig
from ..config.settings import DEFAULT_IDLE_TIMEOUT
from ..errors import GenerationFailure, RunnerLaunchFailure, RunnerTimeout
from ..planning.plan import ExecutionPlan
from ..process.stream import OutputSink, stream_process

logger = logging.getLogger(__name__)


def _discard(chunk: str) -> None:
    pass


class GenerationTrigger(Protocol):
    """Produces runnable test artifacts for a plan."""

    def generate(self, plan: ExecutionPlan, config: ExecutionConfig) -> None: ...


class CommandGenerationTrigger:
    """Runs a generator command with the plan passed as JSON.

    The command receives:
        <command> --tests '{"tests": [...], "suites": {...}}'
                  [--force] [--remove] --debug <level> [--allow-skipped] [-v]
    """

    def __init__(
        self,
        command: list[str],
        working_dir: Union[str, Path],
        output: Optional[OutputSink] = None,
        idle_timeout: float = DEFAULT_IDLE_TIMEOUT,
        kill_grace: float = 5.0,
    ):
        """Initialize the trigger.

        Args:
            command: Generator command and its fixed arguments.
            working_dir: Directory the generator runs in.
            output: Receives the generator's output as it arrives. None = discard.
            idle_timeout: Allowed silence in seconds before the generator is stopped.
            kill_grace: Seconds to wait after SIGTERM before SIGKILL.
        """
        self.command = list(command)
        self.working_dir = Path(working_dir)
        self.output = output
        self.idle_timeout = idle_timeout
        self.kill_grace = kill_grace

    def build_command(self, plan: ExecutionPlan, config: ExecutionConfig) -> list[str]:
        """Full generator argument list for a plan."""
        options = config.generation_options()
        cmd = self.command + ["--tests", plan.to_json()]

        if options["force"]:
            cmd.append("--force")
        if options["remove"]:
            cmd.append("--remove")
        cmd.extend(["--debug", options["debug"]])
        if options["allow_skipped"]:
            cmd.append("--allow-skipped")
        if options["verbose"]:
            cmd.append("-v")

        return cmd

    def generate(self, plan: ExecutionPlan, config: ExecutionConfig) -> None:
        """Run the generator and wait for it.

        Raises:
            GenerationFailure: If the generator cannot start, stalls or exits
                non-zero.
        """
        cmd = self.build_command(plan, config)
        logger.info("Generating %d tests across %d suites", len(plan.standalone_tests), len(plan.suite_tests))

        try:
            returncode = stream_process(
                cmd,
                self.working_dir,
                self.idle_timeout,
                self.output or _discard,
                kill_grace=self.kill_grace,
                label="generator",
            )
        except RunnerLaunchFailure as e:
            raise GenerationFailure(str(e)) from e
        except RunnerTimeout as e:
            raise GenerationFailure(
                f"Generator produced no output for {e.idle_timeout:.1f}s and was terminated."
            ) from e

        if returncode != 0:
            raise GenerationFailure(f"Test generation failed with exit code {returncode}.")
