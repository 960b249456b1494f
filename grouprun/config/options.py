"""Execution options for a group run.

Normalizes raw command options into an immutable ExecutionConfig that is
shared by test generation and test execution.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from ..errors import ConflictingOptionsError


class DebugLevel(str, Enum):
    """Known debug levels understood by the generator."""
    NONE = "none"
    DEFAULT = "default"
    DEVELOPER = "developer"


# Older callers never passed a debug level and expect developer checks.
DEFAULT_DEBUG_LEVEL = DebugLevel.DEVELOPER.value


@dataclass(frozen=True)
class ExecutionConfig:
    """Options shared by generation and execution of a group run."""
    force: bool = False
    verbose: bool = False
    debug_level: str = DEFAULT_DEBUG_LEVEL
    allow_skipped: bool = False
    skip_generation: bool = False
    remove: bool = False

    def __post_init__(self):
        if self.skip_generation and self.remove:
            raise ConflictingOptionsError(
                "\"skip-generate\" and \"remove\" options can not be used at the same time."
            )

    def generation_options(self) -> dict[str, Any]:
        """Subset of options forwarded to the generation trigger."""
        return {
            "force": self.force,
            "remove": self.remove,
            "debug": self.debug_level,
            "allow_skipped": self.allow_skipped,
            "verbose": self.verbose,
        }


def validate_options(raw: Mapping[str, Any]) -> ExecutionConfig:
    """Build an ExecutionConfig from raw command options.

    Only the skip-generate/remove conflict is checked. All other values pass
    through as given; a missing debug level falls back to developer.

    Args:
        raw: Option mapping, keyed by ExecutionConfig field names.

    Returns:
        Frozen ExecutionConfig.

    Raises:
        ConflictingOptionsError: If skip_generation and remove are both set.
    """
    debug_level: Optional[str] = raw.get("debug_level")
    if debug_level is None:
        debug_level = DEFAULT_DEBUG_LEVEL

    return ExecutionConfig(
        force=bool(raw.get("force", False)),
        verbose=bool(raw.get("verbose", False)),
        debug_level=str(debug_level),
        allow_skipped=bool(raw.get("allow_skipped", False)),
        skip_generation=bool(raw.get("skip_generation", False)),
        remove=bool(raw.get("remove", False)),
    )
