"""Execution plan produced by resolving requested groups and suites."""

import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class ExecutionPlan:
    """Which tests run on their own and which run under a suite.

    Every test appears in exactly one bucket. A suite requested by name is
    present even when no test was placed in it.
    """
    standalone_tests: tuple[str, ...] = ()
    suite_tests: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    requested_names: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "standalone_tests", tuple(self.standalone_tests))
        object.__setattr__(self, "requested_names", tuple(self.requested_names))
        object.__setattr__(self, "suite_tests", MappingProxyType({
            suite: tuple(tests) for suite, tests in self.suite_tests.items()
        }))

    @property
    def all_tests(self) -> list[str]:
        """Every planned test, standalone first then suite by suite."""
        tests = list(self.standalone_tests)
        for suite_tests in self.suite_tests.values():
            tests.extend(suite_tests)
        return tests

    @property
    def total_tests(self) -> int:
        return len(self.all_tests)

    @property
    def selectors(self) -> list[str]:
        """Requested names with repeats dropped, in request order."""
        return list(dict.fromkeys(self.requested_names))

    def to_dict(self) -> dict[str, Any]:
        """Serializable form handed to the generation trigger."""
        return {
            "tests": list(self.standalone_tests),
            "suites": {suite: list(tests) for suite, tests in self.suite_tests.items()},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)
