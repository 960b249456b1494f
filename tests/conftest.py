from pathlib import Path

import pytest

from grouprun.registry import SuiteRegistry, TestRegistry, parse_registry_data

EXAMPLE_REGISTRY = Path(__file__).resolve().parents[1] / "registries" / "example.yaml"


def build_registries(data: dict) -> tuple[SuiteRegistry, TestRegistry]:
    manifest = parse_registry_data(data)
    tests = TestRegistry(manifest)
    return SuiteRegistry(manifest, tests), tests


@pytest.fixture
def smoke_registries():
    """smoke -> t1, t2; t1 is in S1, t2 is in no suite."""
    return build_registries({
        "tests": {
            "t1": {"groups": ["smoke"]},
            "t2": {"groups": ["smoke"]},
        },
        "suites": {
            "S1": {"include": {"tests": ["t1"]}},
        },
    })


@pytest.fixture
def example_registry_path() -> Path:
    return EXAMPLE_REGISTRY


@pytest.fixture
def make_registries():
    return build_registries
