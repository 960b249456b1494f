"""YAML registry parser.

Parses a registry manifest into RegistryManifest dataclass objects.
"""

from pathlib import Path
from typing import Any, Union

import yaml

from ..errors import RegistryError
from .schema import RegistryManifest, SuiteDefinition, SuiteSelection, TestDefinition


def parse_registry(file_path: Union[str, Path]) -> RegistryManifest:
    """Parse a YAML registry file.

    Args:
        file_path: Path to the registry file.

    Returns:
        Parsed RegistryManifest.

    Raises:
        RegistryError: If the file is missing, not YAML, or malformed.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise RegistryError(f"Registry file not found: {file_path}")

    if file_path.suffix not in (".yaml", ".yml"):
        raise RegistryError(f"Expected .yaml or .yml file, got: {file_path.suffix}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RegistryError(f"Invalid YAML in {file_path}: {e}") from e

    if data is None:
        raise RegistryError(f"Empty registry file: {file_path}")

    return parse_registry_data(data, source=str(file_path))


def parse_registry_data(data: Any, source: str = "<inline>") -> RegistryManifest:
    """Parse a registry from already loaded YAML data.

    Args:
        data: Mapping with optional 'tests', 'suites' and 'groups' keys.
        source: Source identifier for error messages.

    Returns:
        Parsed RegistryManifest. Suites keep their order of definition.

    Raises:
        RegistryError: If a field is malformed.
    """
    if not isinstance(data, dict):
        raise RegistryError(f"Registry must be a YAML mapping, got {type(data).__name__}")

    tests_data = data.get("tests") or {}
    if not isinstance(tests_data, dict):
        raise RegistryError(f"'tests' must be a mapping in {source}")

    tests = []
    for name, test_data in tests_data.items():
        test_data = test_data or {}
        if not isinstance(test_data, dict):
            raise RegistryError(f"Test '{name}' must be a mapping in {source}")
        groups = _string_list(test_data.get("groups"), f"tests.{name}.groups", source)
        tests.append(TestDefinition(name=str(name), groups=groups))

    suites_data = data.get("suites") or {}
    if not isinstance(suites_data, dict):
        raise RegistryError(f"'suites' must be a mapping in {source}")

    suites = []
    for name, suite_data in suites_data.items():
        suite_data = suite_data or {}
        if not isinstance(suite_data, dict):
            raise RegistryError(f"Suite '{name}' must be a mapping in {source}")
        suites.append(SuiteDefinition(
            name=str(name),
            include=_parse_selection(suite_data.get("include"), f"suites.{name}.include", source),
            exclude=_parse_selection(suite_data.get("exclude"), f"suites.{name}.exclude", source),
        ))

    groups = _string_list(data.get("groups"), "groups", source)

    return RegistryManifest(tests=tests, suites=suites, groups=groups, source=source)


def _parse_selection(data: Any, context: str, source: str) -> SuiteSelection:
    """Parse an include/exclude block."""
    if data is None:
        return SuiteSelection()
    if not isinstance(data, dict):
        raise RegistryError(f"'{context}' must be a mapping in {source}")
    return SuiteSelection(
        tests=_string_list(data.get("tests"), f"{context}.tests", source),
        groups=_string_list(data.get("groups"), f"{context}.groups", source),
    )


def _string_list(value: Any, context: str, source: str) -> list[str]:
    """Coerce a YAML list of names into strings."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise RegistryError(f"'{context}' must be a list in {source}")
    return [str(item) for item in value]
