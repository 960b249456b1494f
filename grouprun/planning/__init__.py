"""Planning module - resolve groups and suites into an execution plan."""

from .plan import ExecutionPlan
from .resolver import resolve

__all__ = ["ExecutionPlan", "resolve"]
