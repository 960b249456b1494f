"""Tests for group and suite resolution."""

import dataclasses

import pytest

from grouprun.errors import UnresolvableNameError
from grouprun.planning import ExecutionPlan, resolve
from grouprun.registry import load_registries


def _bucket_counts(plan: ExecutionPlan) -> dict[str, int]:
    counts: dict[str, int] = {}
    for test_id in plan.all_tests:
        counts[test_id] = counts.get(test_id, 0) + 1
    return counts


class TestResolveScenarios:
    def test_group_splits_into_standalone_and_suite(self, smoke_registries):
        suites, groups = smoke_registries
        plan = resolve(["smoke"], suites, groups)

        assert plan.standalone_tests == ("t2",)
        assert dict(plan.suite_tests) == {"S1": ("t1",)}

    def test_suite_and_group_do_not_duplicate(self, make_registries):
        suites, groups = make_registries({
            "tests": {"t1": {"groups": ["smoke"]}},
            "suites": {"S1": {"include": {"tests": ["t1"]}}},
        })
        plan = resolve(["S1", "smoke"], suites, groups)

        assert plan.standalone_tests == ()
        assert dict(plan.suite_tests) == {"S1": ("t1",)}

    def test_example_registry(self, example_registry_path):
        suites, groups = load_registries(example_registry_path)
        plan = resolve(["smoke"], suites, groups)

        assert plan.standalone_tests == ("AdminLoginSuccessfulTest", "StorefrontSearchTest")
        assert dict(plan.suite_tests) == {"CheckoutSuite": ("StorefrontGuestCheckoutTest",)}


class TestTieBreak:
    @pytest.fixture
    def overlapping(self, make_registries):
        return make_registries({
            "tests": {"t": {"groups": ["g"]}},
            "suites": {
                "A": {"include": {"groups": ["g"]}},
                "B": {"include": {"tests": ["t"]}},
            },
        })

    def test_first_suite_in_registry_order_wins(self, overlapping):
        suites, groups = overlapping
        assert suites.suites_containing_test("t") == ["A", "B"]

        plan = resolve(["g"], suites, groups)

        assert dict(plan.suite_tests) == {"A": ("t",)}

    def test_requesting_other_suite_does_not_move_test(self, overlapping):
        suites, groups = overlapping
        plan = resolve(["B", "g"], suites, groups)

        assert dict(plan.suite_tests) == {"B": (), "A": ("t",)}

    def test_repeated_resolution_is_stable(self, overlapping):
        suites, groups = overlapping
        plans = [resolve(["g"], suites, groups) for _ in range(5)]

        assert all(plan == plans[0] for plan in plans)


class TestEdgeCases:
    def test_requested_suite_without_tests_is_kept(self, make_registries):
        suites, groups = make_registries({
            "tests": {"t1": {"groups": ["smoke"]}},
            "suites": {"Empty": {}},
        })
        plan = resolve(["Empty"], suites, groups)

        assert dict(plan.suite_tests) == {"Empty": ()}
        assert plan.standalone_tests == ()

    def test_requested_suite_partially_filled_by_group(self, make_registries):
        suites, groups = make_registries({
            "tests": {
                "t1": {"groups": ["smoke"]},
                "t2": {"groups": ["other"]},
            },
            "suites": {"S": {"include": {"tests": ["t1", "t2"]}}},
        })
        plan = resolve(["S", "smoke"], suites, groups)

        assert dict(plan.suite_tests) == {"S": ("t1",)}

    def test_repeated_group_is_idempotent(self, smoke_registries):
        suites, groups = smoke_registries
        once = resolve(["smoke"], suites, groups)
        twice = resolve(["smoke", "smoke"], suites, groups)

        assert twice.standalone_tests == once.standalone_tests
        assert twice.suite_tests == once.suite_tests
        assert twice.selectors == ["smoke"]

    def test_empty_group_contributes_nothing(self, make_registries):
        suites, groups = make_registries({
            "groups": ["nightly"],
            "tests": {"t1": {"groups": ["smoke"]}},
        })
        plan = resolve(["nightly"], suites, groups)

        assert plan.standalone_tests == ()
        assert dict(plan.suite_tests) == {}

    def test_overlapping_groups_collapse(self, make_registries):
        suites, groups = make_registries({
            "tests": {
                "t1": {"groups": ["a", "b"]},
                "t2": {"groups": ["b"]},
            },
        })
        plan = resolve(["a", "b"], suites, groups)

        assert plan.standalone_tests == ("t1", "t2")

    def test_unknown_name_raises(self, smoke_registries):
        suites, groups = smoke_registries

        with pytest.raises(UnresolvableNameError) as exc_info:
            resolve(["smoke", "missing"], suites, groups)

        assert exc_info.value.name == "missing"
        assert exc_info.value.exit_code == 2

    def test_suite_name_wins_over_group_name(self, make_registries):
        suites, groups = make_registries({
            "tests": {"t1": {"groups": ["shared"]}},
            "suites": {"shared": {}},
        })
        plan = resolve(["shared"], suites, groups)

        assert dict(plan.suite_tests) == {"shared": ()}
        assert plan.standalone_tests == ()


class TestPlanInvariants:
    @pytest.fixture
    def wide_registries(self, make_registries):
        return make_registries({
            "tests": {
                "a1": {"groups": ["alpha"]},
                "a2": {"groups": ["alpha", "beta"]},
                "b1": {"groups": ["beta"]},
                "b2": {"groups": ["beta", "gamma"]},
                "c1": {"groups": ["gamma"]},
            },
            "suites": {
                "S1": {"include": {"groups": ["beta"]}, "exclude": {"tests": ["b2"]}},
                "S2": {"include": {"tests": ["a2", "b2", "c1"]}},
                "S3": {"include": {"groups": ["gamma"]}},
            },
        })

    @pytest.mark.parametrize("names", [
        ["alpha"],
        ["beta"],
        ["gamma"],
        ["alpha", "beta", "gamma"],
        ["S3", "alpha"],
        ["S1", "S2", "S3"],
    ])
    def test_union_matches_group_tests_without_duplicates(self, wide_registries, names):
        suites, groups = wide_registries
        plan = resolve(names, suites, groups)

        reachable = set()
        for name in names:
            if not suites.is_suite(name):
                reachable.update(groups.tests_in_group(name))

        assert set(plan.all_tests) == reachable
        assert all(count == 1 for count in _bucket_counts(plan).values())
        for name in names:
            if suites.is_suite(name):
                assert name in plan.suite_tests

    def test_registries_are_not_mutated(self, wide_registries):
        suites, groups = wide_registries
        before = (suites.all_test_references(), {g: groups.tests_in_group(g) for g in groups.group_names})

        resolve(["alpha", "beta", "gamma", "S1"], suites, groups)

        after = (suites.all_test_references(), {g: groups.tests_in_group(g) for g in groups.group_names})
        assert before == after

    def test_plan_is_immutable(self, smoke_registries):
        suites, groups = smoke_registries
        plan = resolve(["smoke"], suites, groups)

        with pytest.raises(dataclasses.FrozenInstanceError):
            plan.standalone_tests = ()
        with pytest.raises(TypeError):
            plan.suite_tests["S2"] = ()

    def test_to_dict_shape(self, smoke_registries):
        suites, groups = smoke_registries
        plan = resolve(["smoke"], suites, groups)

        assert plan.to_dict() == {"tests": ["t2"], "suites": {"S1": ["t1"]}}
        assert plan.to_json() == '{"tests": ["t2"], "suites": {"S1": ["t1"]}}'
