"""Error types raised by the group run pipeline.

Every error carries the exit code the CLI reports for it. A runner exiting
non-zero is not an error: its status is the command's result.
"""

from typing import Optional


class GroupRunError(Exception):
    """Base class for all failures that stop a group run."""
    exit_code = 1


class ConflictingOptionsError(GroupRunError):
    """Incompatible options were requested together."""
    exit_code = 2


class UnresolvableNameError(GroupRunError):
    """A requested name is neither a known suite nor a known group."""
    exit_code = 2

    def __init__(self, name: str):
        super().__init__(f"'{name}' is neither a known suite nor a known group.")
        self.name = name


class RegistryError(GroupRunError):
    """The registry manifest could not be loaded."""
    exit_code = 2


class GenerationFailure(GroupRunError):
    """Test generation failed; the runner was not launched."""


class RunnerLaunchFailure(GroupRunError, RuntimeError):
    """The runner process could not be started."""
    exit_code = 127


class RunnerTimeout(GroupRunError, TimeoutError):
    """The runner produced no output for longer than the idle timeout."""
    exit_code = 124

    def __init__(self, idle_timeout: float, pid: Optional[int] = None):
        message = f"Runner produced no output for {idle_timeout:.1f}s and was terminated"
        if pid is not None:
            message += f" (PID {pid})"
        super().__init__(message + ".")
        self.idle_timeout = idle_timeout
        self.pid = pid
