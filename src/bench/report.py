"""
bench/report.py - 基准测试报告读写

报告为逐行文本 (UTF-8), 每次调用一个文件::

    Experiment <name|NO_NAME>
    Running on <host|UNKNOWN>
    Starting at <ISO8601>
    <<<|
    ROS
    <请求回显>
    |>>>
    <time_budget> seconds per run
    <total_duration> seconds spent to collect the data
    <planner_count> planners
    # 每个 (planner, algorithm) 组:
    <planner_description>_<algorithm_id>
    0 common properties
    <n> properties for each run
    <property> ...
    <n_runs> runs
    <v1>; <v2>; ... ;
    .

写入是一次性阻塞写, 无增量持久化.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .errors import ReportWriteError
from .models import BenchmarkReport, ReportGroup
from .timing import iso_timestamp

logger = logging.getLogger(__name__)

ECHO_BEGIN = "<<<|"
ECHO_END = "|>>>"
ECHO_TAG = "ROS"


class ReportWriter:
    """BenchmarkReport → 文本报告."""

    @staticmethod
    def render(report: BenchmarkReport) -> str:
        meta = report.metadata
        lines: List[str] = []
        _a = lines.append

        _a(f"Experiment {meta.experiment_name or 'NO_NAME'}")
        _a(f"Running on {meta.host or 'UNKNOWN'}")
        _a(f"Starting at {iso_timestamp(meta.start_time)}")
        _a(ECHO_BEGIN)
        _a(ECHO_TAG)
        _a(meta.request_echo)
        _a(ECHO_END)
        _a(f"{float(meta.time_budget)!r} seconds per run")
        _a(f"{float(meta.total_duration)!r} seconds spent to collect the data")
        _a(f"{meta.planner_count} planners")

        for group in report.groups:
            ReportWriter._render_group(lines, group)
        return "\n".join(lines) + "\n"

    @staticmethod
    def _render_group(lines: List[str], group: ReportGroup) -> None:
        _a = lines.append
        _a(group.title)
        # 规划器级公共属性暂不输出
        _a("0 common properties")
        labels = group.labels()
        _a(f"{len(labels)} properties for each run")
        lines.extend(labels)
        _a(f"{group.n_runs} runs")
        for row in group.rows():
            _a("".join(f"{cell}; " for cell in row))
        _a(".")

    @staticmethod
    def write(report: BenchmarkReport, path) -> Path:
        """渲染并写入文件; 任何 OSError 都视为本次调用失败."""
        path = Path(path)
        text = ReportWriter.render(report)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as exc:
            raise ReportWriteError(path, str(exc)) from exc
        logger.info("Results saved to '%s'", path)
        return path


# ═══════════════════════════════════════════════════════════════════════════
# 读取 (离线对比用)
# ═══════════════════════════════════════════════════════════════════════════

def _strip_suffix(line: str, suffix: str) -> str:
    if not line.endswith(suffix):
        raise ValueError(f"expected '...{suffix}', got {line!r}")
    return line[:-len(suffix)].strip()


def parse_report(text: str) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
    """解析 ReportWriter 输出的文本.

    Returns:
        (metadata, groups)
        metadata: experiment / host / start_time / request_echo /
                  time_budget / total_duration / planner_count
        groups: [{'title', 'properties': [...], 'rows': [[str, ...], ...]}]
    """
    lines = text.splitlines()
    pos = 0

    def take() -> str:
        nonlocal pos
        if pos >= len(lines):
            raise ValueError("unexpected end of report")
        line = lines[pos]
        pos += 1
        return line

    meta: Dict[str, Any] = {}
    meta["experiment"] = take()[len("Experiment "):]
    meta["host"] = take()[len("Running on "):]
    meta["start_time"] = take()[len("Starting at "):]
    if take() != ECHO_BEGIN:
        raise ValueError("missing request echo block")
    take()
    echo: List[str] = []
    while True:
        line = take()
        if line == ECHO_END:
            break
        echo.append(line)
    meta["request_echo"] = "\n".join(echo)
    meta["time_budget"] = float(_strip_suffix(take(), "seconds per run"))
    meta["total_duration"] = float(
        _strip_suffix(take(), "seconds spent to collect the data"))
    meta["planner_count"] = int(_strip_suffix(take(), "planners"))

    groups: List[Dict[str, Any]] = []
    while pos < len(lines) and lines[pos]:
        title = take()
        n_common = int(_strip_suffix(take(), "common properties"))
        for _ in range(n_common):
            take()
        n_props = int(_strip_suffix(take(), "properties for each run"))
        props = [take() for _ in range(n_props)]
        n_runs = int(_strip_suffix(take(), "runs"))
        rows = []
        for _ in range(n_runs):
            cells = take().split(";")
            rows.append([c.strip() for c in cells[:-1]])
        if take() != ".":
            raise ValueError(f"group '{title}' is not terminated by '.'")
        groups.append({"title": title, "properties": props, "rows": rows})
    return meta, groups
