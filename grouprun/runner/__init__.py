"""Runner module - process orchestration."""

from .invoker import ProcessRunnerInvoker, RunnerInvoker, build_runner_command
from .orchestrator import ExecutionResult, GroupRunOrchestrator, RunState

__all__ = [
    "ProcessRunnerInvoker",
    "RunnerInvoker",
    "build_runner_command",
    "ExecutionResult",
    "GroupRunOrchestrator",
    "RunState",
]
