"""Registry data models.

A registry manifest is a membership snapshot: which groups each test belongs
to, and which tests or groups each suite pulls in.
"""

from dataclasses import dataclass, field


@dataclass
class TestDefinition:
    """A test and the groups it is tagged with."""
    __test__ = False

    name: str
    groups: list[str] = field(default_factory=list)


@dataclass
class SuiteSelection:
    """Tests and groups named in a suite's include or exclude block."""
    tests: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tests and not self.groups


@dataclass
class SuiteDefinition:
    """A suite and the tests it references."""
    name: str
    include: SuiteSelection = field(default_factory=SuiteSelection)
    exclude: SuiteSelection = field(default_factory=SuiteSelection)


@dataclass
class RegistryManifest:
    """Everything loaded from one registry file."""
    tests: list[TestDefinition] = field(default_factory=list)
    suites: list[SuiteDefinition] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    source: str = "<inline>"

    @property
    def total_tests(self) -> int:
        return len(self.tests)

    @property
    def total_suites(self) -> int:
        return len(self.suites)
