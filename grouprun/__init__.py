"""Run tests by group or suite name through an external test runner."""

__version__ = "0.1.0"
