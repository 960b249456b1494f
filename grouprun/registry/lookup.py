"""Read-only registry lookups used by the resolver.

TestRegistry answers group questions, SuiteRegistry answers suite questions.
Both are built once from a RegistryManifest and never change afterwards.
"""

import logging
from pathlib import Path
from typing import Protocol, Union

from .parser import parse_registry
from .schema import RegistryManifest, SuiteSelection

logger = logging.getLogger(__name__)


class GroupLookup(Protocol):
    """Group membership queries."""

    def has_group(self, name: str) -> bool: ...

    def tests_in_group(self, name: str) -> list[str]: ...


class SuiteLookup(Protocol):
    """Suite membership queries."""

    def is_suite(self, name: str) -> bool: ...

    def suites_containing_test(self, test_id: str) -> list[str]: ...


class TestRegistry:
    """Group to test membership, in test definition order."""
    __test__ = False

    def __init__(self, manifest: RegistryManifest):
        self._groups: dict[str, list[str]] = {name: [] for name in manifest.groups}
        for test in manifest.tests:
            for group in test.groups:
                members = self._groups.setdefault(group, [])
                if test.name not in members:
                    members.append(test.name)

    def has_group(self, name: str) -> bool:
        return name in self._groups

    def tests_in_group(self, name: str) -> list[str]:
        """Tests tagged with a group. Unknown groups have no tests."""
        return list(self._groups.get(name, []))

    @property
    def group_names(self) -> list[str]:
        return list(self._groups)


class SuiteRegistry:
    """Suite to test membership.

    Suite order follows the manifest, and suites_containing_test reports
    suites in that same order.
    """

    def __init__(self, manifest: RegistryManifest, tests: TestRegistry):
        self._suites: dict[str, list[str]] = {}
        self._references: dict[str, list[str]] = {}

        for suite in manifest.suites:
            members = _expand(suite.include, tests)
            excluded = set(_expand(suite.exclude, tests))
            members = [test_id for test_id in members if test_id not in excluded]
            if not members:
                logger.debug("Suite '%s' references no tests", suite.name)

            self._suites[suite.name] = members
            for test_id in members:
                self._references.setdefault(test_id, []).append(suite.name)

    def is_suite(self, name: str) -> bool:
        return name in self._suites

    def tests_in_suite(self, name: str) -> list[str]:
        return list(self._suites.get(name, []))

    def suites_containing_test(self, test_id: str) -> list[str]:
        return list(self._references.get(test_id, []))

    def all_test_references(self) -> dict[str, list[str]]:
        """Every referenced test mapped to its suites."""
        return {test_id: list(suites) for test_id, suites in self._references.items()}

    @property
    def suite_names(self) -> list[str]:
        return list(self._suites)


def _expand(selection: SuiteSelection, tests: TestRegistry) -> list[str]:
    """Tests named directly or through groups, first occurrence kept."""
    ordered: dict[str, None] = dict.fromkeys(selection.tests)
    for group in selection.groups:
        if not tests.has_group(group):
            logger.warning("Suite selection names unknown group '%s'", group)
        ordered.update(dict.fromkeys(tests.tests_in_group(group)))
    return list(ordered)


def load_registries(file_path: Union[str, Path]) -> tuple[SuiteRegistry, TestRegistry]:
    """Load a registry manifest and build both lookups.

    Args:
        file_path: Path to the registry YAML file.

    Returns:
        Tuple of (suite registry, test registry).

    Raises:
        RegistryError: If the manifest cannot be parsed.
    """
    manifest = parse_registry(file_path)
    tests = TestRegistry(manifest)
    suites = SuiteRegistry(manifest, tests)
    logger.info(
        "Loaded registry %s: %d tests, %d groups, %d suites",
        manifest.source, manifest.total_tests, len(tests.group_names), manifest.total_suites,
    )
    return suites, tests
