"""Group run orchestrator.

Coordinates a full group run:
1. Validate options
2. Resolve names into an execution plan
3. Generate tests (unless skipped)
4. Launch the runner with one selector per requested name
5. Stream its output and return its exit status
"""

import logging
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

from ..config.options import ExecutionConfig, validate_options
from ..config.settings import RunnerSettings
from ..errors import GenerationFailure, GroupRunError
from ..generation.trigger import GenerationTrigger
from ..planning.plan import ExecutionPlan
from ..planning.resolver import resolve
from ..registry.lookup import GroupLookup, SuiteLookup
from ..reporting.json_reporter import JsonReporter
from .invoker import OutputSink, RunnerInvoker

logger = logging.getLogger(__name__)

RegistrySource = Callable[[], tuple[SuiteLookup, GroupLookup]]


class RunState(str, Enum):
    """Lifecycle of one group run."""
    IDLE = "idle"
    VALIDATING = "validating"
    GENERATING = "generating"
    LAUNCHING = "launching"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATES = {RunState.COMPLETED, RunState.FAILED}


@dataclass
class ExecutionResult:
    """Outcome of a group run."""
    requested_names: list[str] = field(default_factory=list)
    plan: Optional[ExecutionPlan] = None
    state: RunState = RunState.IDLE
    exit_status: Optional[int] = None
    duration_ms: int = 0
    error: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.state == RunState.COMPLETED and self.exit_status == 0

    def to_report(self) -> dict[str, Any]:
        return JsonReporter().generate(
            requested_names=self.requested_names,
            plan=self.plan,
            state=self.state.value,
            exit_status=self.exit_status,
            duration_ms=self.duration_ms,
            error=self.error,
        )


def _write_stdout(chunk: str) -> None:
    sys.stdout.write(chunk)
    sys.stdout.flush()


class GroupRunOrchestrator:
    """Runs requested groups and suites through generation and the runner.

    Validation, resolution and generation failures stop the run before the
    runner is launched. A runner that exits non-zero is not a failure of the
    orchestrator; its status is returned as is.
    """

    def __init__(
        self,
        invoker: RunnerInvoker,
        settings: Optional[RunnerSettings] = None,
        generator: Optional[GenerationTrigger] = None,
        output: Optional[OutputSink] = None,
    ):
        """Initialize orchestrator.

        Args:
            invoker: Launches the external runner.
            settings: Runner command, directories and idle timeout.
            generator: Generation trigger (required unless generation is skipped).
            output: Receives runner output. Default: stdout.
        """
        self.invoker = invoker
        self.settings = settings or RunnerSettings()
        self.generator = generator
        self.output = output or _write_stdout
        self.state = RunState.IDLE
        self.result = ExecutionResult()

    def execute(
        self,
        names: Iterable[str],
        raw_options: Mapping[str, Any],
        registry_source: RegistrySource,
    ) -> int:
        """Validate, resolve and run.

        The registry is only loaded once options are known to be valid.

        Args:
            names: Requested group and suite names.
            raw_options: Command options keyed by ExecutionConfig field.
            registry_source: Returns (suite lookup, group lookup).

        Returns:
            The runner's exit status.

        Raises:
            GroupRunError: On any failure that prevents a completed run.
        """
        names = list(names)
        start_time = time.time()
        self.result = ExecutionResult(requested_names=names)

        try:
            self._transition(RunState.VALIDATING)
            config = validate_options(raw_options)
            suites, groups = registry_source()
            plan = resolve(names, suites, groups)
        except GroupRunError as e:
            self._fail(e)
            raise
        finally:
            self.result.duration_ms = int((time.time() - start_time) * 1000)

        try:
            return self.run(plan, config)
        finally:
            self.result.duration_ms = int((time.time() - start_time) * 1000)

    def run(self, plan: ExecutionPlan, config: ExecutionConfig) -> int:
        """Generate (unless skipped) and run a resolved plan.

        Args:
            plan: Resolved execution plan.
            config: Validated execution options.

        Returns:
            The runner's exit status.

        Raises:
            GenerationFailure: If generation fails; the runner is not launched.
            RunnerLaunchFailure: If the runner cannot be started.
            RunnerTimeout: If the runner stalls past the idle timeout.
        """
        self.result.plan = plan
        if not self.result.requested_names:
            self.result.requested_names = list(plan.requested_names)

        try:
            if not config.skip_generation:
                self._generate(plan, config)

            self._transition(RunState.LAUNCHING)
            status = self.invoker.invoke(
                self.settings.runner_argv,
                self.settings.tests_root,
                plan.selectors,
                self.settings.idle_timeout,
                self.output,
                on_start=self._on_start,
            )
        except GroupRunError as e:
            self._fail(e)
            raise

        self.result.exit_status = status
        self._transition(RunState.COMPLETED)
        return status

    def _generate(self, plan: ExecutionPlan, config: ExecutionConfig) -> None:
        if self.generator is None:
            raise GenerationFailure("No generation trigger configured; use skip-generate to run existing tests.")

        self._transition(RunState.GENERATING)
        self.generator.generate(plan, config)

    def _on_start(self, pid: int) -> None:
        self._transition(RunState.STREAMING)

    def _transition(self, state: RunState) -> None:
        logger.debug("Run state: %s -> %s", self.state.value, state.value)
        self.state = state
        self.result.state = state

    def _fail(self, error: GroupRunError) -> None:
        self.result.error = str(error)
        self._transition(RunState.FAILED)
