"""Tests for JSON run reports."""

import json

from grouprun.planning import ExecutionPlan
from grouprun.reporting import JsonReporter

PLAN = ExecutionPlan(standalone_tests=["t2"], suite_tests={"S1": ["t1"], "S2": []}, requested_names=["smoke", "S2"])


def test_generate_passed_report():
    report = JsonReporter().generate(["smoke", "S2"], PLAN, "completed", exit_status=0, duration_ms=1500)

    assert report["status"] == "passed"
    assert report["requested"] == ["smoke", "S2"]
    assert report["summary"] == {
        "standalone_tests": 1,
        "suites": 2,
        "total_tests": 2,
        "duration_ms": 1500,
    }
    assert report["plan"] == {"tests": ["t2"], "suites": {"S1": ["t1"], "S2": []}}
    assert report["error"] is None


def test_generate_failed_before_plan():
    report = JsonReporter().generate(["nope"], None, "failed", error="'nope' is neither a known suite nor a known group.")

    assert report["status"] == "failed"
    assert report["plan"] is None
    assert report["exit_status"] is None
    assert report["summary"]["total_tests"] == 0


def test_flow_output_messages():
    reporter = JsonReporter()

    passed = reporter.generate_flow_output(reporter.generate(["smoke"], PLAN, "completed", exit_status=0))
    failed = reporter.generate_flow_output(reporter.generate(["smoke"], PLAN, "completed", exit_status=1))
    errored = reporter.generate_flow_output(reporter.generate(["smoke"], PLAN, "failed", error="stalled"))

    assert passed["success"] and passed["message"] == "All tests passed"
    assert not failed["success"] and failed["message"] == "Runner exited with status 1"
    assert not errored["success"] and errored["message"] == "Run failed: stalled"
    assert passed["command"] == "run:group"


def test_save(tmp_path):
    reporter = JsonReporter()
    report = reporter.generate(["smoke"], PLAN, "completed", exit_status=0)

    path = reporter.save(report, tmp_path / "reports" / "run.json")

    assert json.loads(path.read_text(encoding="utf-8")) == report
