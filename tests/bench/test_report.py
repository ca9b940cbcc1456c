"""
test_report.py — Tests for bench/report.py (ReportWriter, parse_report).

Covers:
    - exact header layout and NO_NAME / UNKNOWN fallbacks
    - per-group section layout, one row per run
    - write failure raised as ReportWriteError
    - parse_report reading a rendered report back
"""

from datetime import datetime

import pytest

from bench.aggregation import ResultAggregator
from bench.errors import ReportWriteError
from bench.models import (BenchmarkReport, PropertyValue, RunMetadata,
                          TrialRecord)
from bench.report import ReportWriter, parse_report


@pytest.fixture
def report():
    records = [
        TrialRecord("A", "x", 0, {"solved": PropertyValue.boolean(True),
                                  "total_time": PropertyValue.real(0.25)}),
        TrialRecord("A", "x", 1, {"solved": PropertyValue.boolean(False)}),
    ]
    meta = RunMetadata(
        experiment_name="demo",
        host="box01",
        start_time=datetime(2026, 10, 19, 12, 0, 0),
        total_duration=1.5,
        time_budget=2.0,
        planner_count=1,
        request_echo='{\n  "group_name": "arm"\n}',
    )
    groups = ResultAggregator({"A": "PlannerA"}).aggregate(records)
    return BenchmarkReport(metadata=meta, groups=groups)


class TestReportWriter:

    def test_exact_layout(self, report):
        text = ReportWriter.render(report)
        assert text.splitlines() == [
            "Experiment demo",
            "Running on box01",
            "Starting at 2026-10-19T12:00:00",
            "<<<|",
            "ROS",
            "{",
            '  "group_name": "arm"',
            "}",
            "|>>>",
            "2.0 seconds per run",
            "1.5 seconds spent to collect the data",
            "1 planners",
            "PlannerA_x",
            "0 common properties",
            "2 properties for each run",
            "solved BOOLEAN",
            "total_time REAL",
            "2 runs",
            "1; 0.25; ",
            "0; ; ",
            ".",
        ]
        assert text.endswith(".\n")

    def test_missing_name_and_host(self, report):
        report.metadata.experiment_name = ""
        report.metadata.host = ""
        lines = ReportWriter.render(report).splitlines()
        assert lines[0] == "Experiment NO_NAME"
        assert lines[1] == "Running on UNKNOWN"

    def test_write_creates_parent_dirs(self, report, tmp_path):
        path = ReportWriter.write(report, tmp_path / "nested" / "out.log")
        assert path.exists()
        assert path.read_text(encoding="utf-8") == ReportWriter.render(report)

    def test_write_failure(self, report, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(ReportWriteError):
            ReportWriter.write(report, blocker / "out.log")


class TestParseReport:

    def test_round_trip(self, report):
        meta, groups = parse_report(ReportWriter.render(report))
        assert meta["experiment"] == "demo"
        assert meta["host"] == "box01"
        assert meta["planner_count"] == 1
        assert meta["total_duration"] == pytest.approx(1.5)
        assert meta["request_echo"].startswith("{")
        assert groups == [{
            "title": "PlannerA_x",
            "properties": ["solved BOOLEAN", "total_time REAL"],
            "rows": [["1", "0.25"], ["0", ""]],
        }]

    def test_unterminated_group(self, report):
        text = ReportWriter.render(report).replace("\n.\n", "\n")
        with pytest.raises(ValueError):
            parse_report(text)
