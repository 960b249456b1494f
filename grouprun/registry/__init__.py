"""Registry module - group and suite membership lookups."""

from .schema import RegistryManifest, SuiteDefinition, SuiteSelection, TestDefinition
from .parser import parse_registry, parse_registry_data
from .lookup import GroupLookup, SuiteLookup, SuiteRegistry, TestRegistry, load_registries

__all__ = [
    "RegistryManifest",
    "SuiteDefinition",
    "SuiteSelection",
    "TestDefinition",
    "parse_registry",
    "parse_registry_data",
    "GroupLookup",
    "SuiteLookup",
    "SuiteRegistry",
    "TestRegistry",
    "load_registries",
]
