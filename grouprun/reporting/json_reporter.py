"""JSON report generator for group runs.

Generates structured JSON reports from orchestrator results.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..planning.plan import ExecutionPlan

REPORT_FILE_NAME = "grouprun_report.json"


class JsonReporter:
    """Generates JSON reports from group run results."""

    def generate(
        self,
        requested_names: list[str],
        plan: Optional[ExecutionPlan],
        state: str,
        exit_status: Optional[int] = None,
        duration_ms: int = 0,
        error: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate a report dictionary.

        Args:
            requested_names: Names the user asked to run.
            plan: Resolved plan, None if resolution never happened.
            state: Final orchestrator state.
            exit_status: Runner exit status, None if it never ran.
            duration_ms: Total duration in milliseconds.
            error: Error message if the run failed before completing.

        Returns:
            Report dictionary ready for JSON serialization.
        """
        passed = exit_status == 0 and error is None

        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "requested": list(requested_names),
            "status": "passed" if passed else "failed",
            "state": state,
            "exit_status": exit_status,
            "summary": {
                "standalone_tests": len(plan.standalone_tests) if plan else 0,
                "suites": len(plan.suite_tests) if plan else 0,
                "total_tests": plan.total_tests if plan else 0,
                "duration_ms": duration_ms,
            },
            "plan": plan.to_dict() if plan else None,
            "error": error,
        }

    def save(self, report: dict[str, Any], path: Path) -> Path:
        """Save report to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        return path

    def generate_flow_output(
        self,
        report: dict[str, Any],
        report_path: Optional[str] = None,
    ) -> dict[str, Any]:
        """Generate a short machine-readable summary.

        {
            "success": bool,
            "command": "run:group",
            "data": { ... },
            "message": str
        }
        """
        summary = report["summary"]
        passed = report["status"] == "passed"

        data: dict[str, Any] = {
            "requested": report["requested"],
            "total_tests": summary["total_tests"],
            "exit_status": report["exit_status"],
            "duration_ms": summary["duration_ms"],
        }

        if report_path:
            data["report_path"] = report_path

        if report.get("error"):
            message = f"Run failed: {report['error']}"
        elif not passed:
            message = f"Runner exited with status {report['exit_status']}"
        else:
            message = "All tests passed"

        return {
            "success": passed,
            "command": "run:group",
            "data": data,
            "message": message,
        }
