"""Group and suite resolution.

Turns the names a user asked for into an ExecutionPlan:

1. Classify each name as a suite or a group
2. Expand groups into their tests
3. Place each test standalone or under the first suite that references it
4. Keep every directly requested suite, even if it got no tests
"""

import logging
from typing import Iterable

from ..errors import UnresolvableNameError
from ..registry.lookup import GroupLookup, SuiteLookup
from .plan import ExecutionPlan

logger = logging.getLogger(__name__)


def resolve(
    names: Iterable[str],
    suites: SuiteLookup,
    groups: GroupLookup,
) -> ExecutionPlan:
    """Resolve requested group and suite names into an execution plan.

    A name that is a known suite is always treated as a suite. A test
    referenced by several suites goes to the first one in registry order.
    The registries are only read.

    Args:
        names: Requested names, in the order given by the user.
        suites: Suite lookup.
        groups: Group lookup.

    Returns:
        ExecutionPlan with no test in more than one bucket.

    Raises:
        UnresolvableNameError: If a name is neither a suite nor a group.
    """
    names = list(names)
    requested_suites: dict[str, None] = {}
    candidates: dict[str, None] = {}

    for name in names:
        if suites.is_suite(name):
            requested_suites[name] = None
        elif groups.has_group(name):
            group_tests = groups.tests_in_group(name)
            if not group_tests:
                logger.info("Group '%s' has no tests", name)
            candidates.update(dict.fromkeys(group_tests))
        else:
            raise UnresolvableNameError(name)

    standalone: list[str] = []
    suite_tests: dict[str, list[str]] = {suite: [] for suite in requested_suites}

    for test_id in candidates:
        owners = suites.suites_containing_test(test_id)
        if not owners:
            standalone.append(test_id)
            continue

        if len(owners) > 1:
            logger.debug(
                "Test '%s' is in suites %s, running it under '%s'",
                test_id, ", ".join(owners), owners[0],
            )
        suite_tests.setdefault(owners[0], []).append(test_id)

    plan = ExecutionPlan(
        standalone_tests=standalone,
        suite_tests=suite_tests,
        requested_names=names,
    )
    logger.info(
        "Resolved %d names into %d standalone tests and %d suites",
        len(names), len(plan.standalone_tests), len(plan.suite_tests),
    )
    return plan
