"""Environment settings for locating the project, runner and generator."""

import math
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_RUNNER_COMMAND = "vendor/bin/codecept run functional --verbose --steps"
DEFAULT_GENERATE_COMMAND = "vendor/bin/mftf generate:tests"
DEFAULT_REGISTRY_FILE = "tests/registry.yaml"

# A stalled runner is aborted after this many seconds without output.
DEFAULT_IDLE_TIMEOUT = 600.0

ENV_PREFIX = "GROUPRUN_"


@dataclass
class RunnerSettings:
    """Where things live and how the external tools are called."""
    project_root: Path = field(default_factory=Path.cwd)
    tests_root: Optional[Path] = None
    runner_command: str = DEFAULT_RUNNER_COMMAND
    generate_command: str = DEFAULT_GENERATE_COMMAND
    registry_path: Optional[Path] = None
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT

    def __post_init__(self):
        self.project_root = Path(self.project_root)
        if self.tests_root is None:
            self.tests_root = self.project_root
        else:
            self.tests_root = self.project_root / self.tests_root
        if self.registry_path is None:
            self.registry_path = self.project_root / DEFAULT_REGISTRY_FILE
        else:
            self.registry_path = self.project_root / self.registry_path
        if not math.isfinite(self.idle_timeout) or self.idle_timeout <= 0:
            raise ValueError(f"Idle timeout must be positive and finite, got {self.idle_timeout}.")

    @property
    def runner_argv(self) -> list[str]:
        """Runner command split into arguments, executable made absolute."""
        return self._resolve_argv(self.runner_command)

    @property
    def generate_argv(self) -> list[str]:
        """Generate command split into arguments, executable made absolute."""
        return self._resolve_argv(self.generate_command)

    def _resolve_argv(self, command: str) -> list[str]:
        argv = shlex.split(command)
        if not argv:
            raise ValueError("Command must not be empty.")

        executable = Path(argv[0])
        # Bare names are looked up on PATH; relative paths hang off the project
        if not executable.is_absolute() and len(executable.parts) > 1:
            argv[0] = str(self.project_root / executable)
        return argv

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "RunnerSettings":
        """Build settings from GROUPRUN_* environment variables.

        Keyword overrides that are not None win over the environment.

        Args:
            environ: Environment mapping. Defaults to os.environ.
            **overrides: Field values, usually taken from CLI flags.

        Returns:
            Resolved RunnerSettings.
        """
        environ = os.environ if environ is None else environ
        values: dict = {}

        env_fields = {
            "project_root": "PROJECT_ROOT",
            "tests_root": "TESTS_ROOT",
            "runner_command": "RUNNER_COMMAND",
            "generate_command": "GENERATE_COMMAND",
            "registry_path": "REGISTRY",
            "idle_timeout": "IDLE_TIMEOUT",
        }
        for name, suffix in env_fields.items():
            value = environ.get(ENV_PREFIX + suffix)
            if value:
                values[name] = value

        for name, value in overrides.items():
            if value is not None:
                values[name] = value

        if "idle_timeout" in values:
            try:
                values["idle_timeout"] = float(values["idle_timeout"])
            except ValueError as e:
                raise ValueError(
                    f"Invalid idle timeout '{values['idle_timeout']}': must be a number of seconds."
                ) from e

        for name in ("project_root", "tests_root", "registry_path"):
            if name in values:
                values[name] = Path(values[name])

        return cls(**values)
