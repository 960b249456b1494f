"""Reporting module - JSON run reports."""

from .json_reporter import REPORT_FILE_NAME, JsonReporter

__all__ = ["REPORT_FILE_NAME", "JsonReporter"]
