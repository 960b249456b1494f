"""Idle timeout tracking for child processes."""

import math
import time
from typing import Optional


class IdleTimer:
    """Tracks time since the last sign of life from a process.

    Unlike a wall-clock deadline, the timer restarts on every reset(), so a
    process that keeps producing output never expires.
    """

    def __init__(self, timeout: float):
        """Initialize idle timer.

        Args:
            timeout: Allowed silence in seconds.
        """
        if not math.isfinite(timeout) or timeout <= 0:
            raise ValueError(f"Idle timeout must be positive and finite, got {timeout}.")
        self.timeout = timeout
        self._last_activity: Optional[float] = None

    @property
    def idle(self) -> float:
        """Seconds since the last activity."""
        if self._last_activity is None:
            return 0.0
        return time.monotonic() - self._last_activity

    @property
    def remaining(self) -> float:
        """Seconds left before the timer expires."""
        return max(0.0, self.timeout - self.idle)

    @property
    def is_expired(self) -> bool:
        return self.idle >= self.timeout

    def start(self) -> None:
        self._last_activity = time.monotonic()

    def reset(self) -> None:
        """Record activity."""
        self._last_activity = time.monotonic()
