"""
bench/orchestrator.py — 基准测试编排

BenchmarkOrchestrator:
  1. 候选规划器 = 请求限定 ∩ registry (未知名称记录日志后丢弃)
  2. 能力探测, 拒绝的规划器记录日志后丢弃
  3. 解析每个候选的算法 id 列表 (支持 ``"<group>[<id>]"`` 写法, 重复 id 只保留一次)
  4. 构建试验矩阵: 每个 (planner, algorithm) 重复 N 次
  5. 严格顺序执行 planner → algorithm → repetition, 复用同一场景对象

单次求解失败只记为 solved=False, 不中断其余试验;
候选集合为空或场景增量非法时整次调用失败, 且不写报告.

用法:
    orchestrator = BenchmarkOrchestrator(registry, scene)
    run = orchestrator.run(request, output_dir="output")
    run.filename, run.responses
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .aggregation import ResultAggregator
from .errors import NoCandidatePlannersError
from .metrics import MetricsCollector
from .models import (BenchmarkReport, BenchmarkRequest, RunMetadata, Trial,
                     TrialRecord, TrialState)
from .report import ReportWriter
from .timing import Stopwatch, hostname, iso_timestamp

if TYPE_CHECKING:
    from baselines.base import Trajectory
    from baselines.registry import PlannerHandle, PlannerRegistry
    from .scene import SceneModel

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# Data classes
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class Candidate:
    """通过过滤与能力探测的规划器 + 待测算法 + 重复次数."""
    handle: "PlannerHandle"
    algorithms: List[str]
    repetitions: int = 1

    @property
    def planner_id(self) -> str:
        return self.handle.id


@dataclass
class BenchmarkRun:
    """一次编排的产物."""
    report: BenchmarkReport
    filename: str
    responses: Dict[str, Optional["Trajectory"]] = field(default_factory=dict)
    records: List[TrialRecord] = field(default_factory=list)


def default_filename(host: str, start: datetime) -> str:
    return f"motion_bench_{host}_{iso_timestamp(start)}.log"


def match_algorithm(requested: str, known: List[str], group_name: str) -> bool:
    """requested 等于某个声明 id, 或等于 ``"<group>[<id>]"``."""
    for k in known:
        if requested == k or requested == f"{group_name}[{k}]":
            return True
    return False


# ═══════════════════════════════════════════════════════════════════════════
# BenchmarkOrchestrator
# ═══════════════════════════════════════════════════════════════════════════

class BenchmarkOrchestrator:
    """(planner × algorithm × repetition) 顺序执行器.

    场景对象是单一所有者资源, 在全部试验间复用且不加锁;
    同一实例不可并发调用 ``run``.
    """

    def __init__(self, registry: "PlannerRegistry", scene: "SceneModel",
                 collector: Optional[MetricsCollector] = None):
        self.registry = registry
        self.scene = scene
        self.collector = collector or MetricsCollector(scene)

    # ── 候选解析 ──────────────────────────────────────────────────

    def resolve_candidates(self, request: BenchmarkRequest) -> List[Candidate]:
        """步骤 1-4: 过滤, 能力探测, 算法解析, 重复次数."""
        for r in request.planner_interfaces:
            if r.name not in self.registry:
                logger.error("Planning interface '%s' was not found", r.name)

        problem = request.problem
        candidates: List[Candidate] = []
        for handle in self.registry.handles():
            found = request.find_restriction(handle.id)
            if request.planner_interfaces and found < 0:
                continue

            if not handle.can_service(problem):
                logger.warning("Planning interface '%s' is not able to solve "
                               "the specified benchmark problem.",
                               handle.description)
                continue

            known = handle.algorithms
            requested = (request.planner_interfaces[found].planner_ids
                         if found >= 0 else [])
            if not requested:
                algorithms = known
            else:
                algorithms = []
                for name in requested:
                    if name in algorithms:
                        logger.warning("The planner id '%s' is listed more than "
                                       "once for '%s'; benchmarking it once",
                                       name, handle.id)
                    elif match_algorithm(name, known, problem.group_name):
                        algorithms.append(name)
                    else:
                        logger.error("The planner id '%s' is not known to the "
                                     "planning interface '%s'", name, handle.id)

            candidates.append(Candidate(
                handle=handle,
                algorithms=algorithms,
                repetitions=request.repetitions_for(found),
            ))
        return candidates

    @staticmethod
    def build_matrix(candidates: List[Candidate]) -> List[Trial]:
        """planner → algorithm → repetition 顺序的试验列表."""
        return [Trial(c.planner_id, alg, rep)
                for c in candidates
                for alg in c.algorithms
                for rep in range(c.repetitions)]

    # ── 执行 ──────────────────────────────────────────────────────

    def run(self, request: BenchmarkRequest, output_dir=".") -> BenchmarkRun:
        """执行完整基准测试并写报告.

        Raises:
            NoCandidatePlannersError: 没有可测规划器 (不写文件)
            ConfigError: 场景增量非法 (不执行试验, 不写文件)
            ReportWriteError: 报告写入失败
        """
        candidates = self.resolve_candidates(request)
        if not candidates:
            logger.error("There are no planning interfaces to benchmark")
            raise NoCandidatePlannersError(
                "There are no planning interfaces to benchmark")

        logger.info("Benchmarking planning interfaces:\n%s", "\n".join(
            f"  * {c.handle.description} [ {' '.join(c.algorithms)} ]"
            for c in candidates))

        self.scene.set_problem(request.scene)
        trials = self.build_matrix(candidates)
        by_id = {c.planner_id: c for c in candidates}

        start = datetime.now()
        t0 = time.perf_counter()
        records, responses = self._execute(request, trials, by_id)
        duration = time.perf_counter() - t0

        host = hostname()
        metadata = RunMetadata(
            experiment_name=getattr(self.scene, "name", ""),
            host=host,
            start_time=start,
            total_duration=duration,
            time_budget=request.problem.allowed_planning_time,
            planner_count=sum(len(c.algorithms) for c in candidates),
            request_echo=request.problem.describe(),
        )
        aggregator = ResultAggregator(
            {c.planner_id: c.handle.description for c in candidates})
        groups = aggregator.aggregate(
            records,
            expected=[(c.planner_id, alg) for c in candidates
                      for alg in c.algorithms])
        report = BenchmarkReport(metadata=metadata, groups=groups)

        filename = request.filename or default_filename(host, start)
        path = ReportWriter.write(report, Path(output_dir) / filename)
        for group in groups:
            s = group.summary()
            logger.info("%s: %d runs, solved %.0f%%", group.title,
                        s["n_runs"], 100.0 * s["solved_rate"])
        return BenchmarkRun(report=report, filename=str(path),
                            responses=responses, records=records)

    def _execute(self, request: BenchmarkRequest, trials: List[Trial],
                 candidates: Dict[str, Candidate]
                 ) -> Tuple[List[TrialRecord], Dict[str, Optional["Trajectory"]]]:
        # 逐次改写 planner_id, 不影响请求回显
        problem = replace(request.problem)
        records: List[TrialRecord] = []
        responses: Dict[str, Optional["Trajectory"]] = {
            planner_id: None for planner_id in candidates}
        watch = Stopwatch()
        total = len(trials)

        for done, trial in enumerate(trials, start=1):
            planner = candidates[trial.planner_id].handle.planner
            problem.planner_id = trial.algorithm_id

            trial.advance(TrialState.RUNNING)
            with watch.phase("solve"):
                solved, trajectory = planner.solve(self.scene, problem)
            wall = watch.last("solve")
            trial.advance(TrialState.SOLVED if solved else TrialState.FAILED)

            records.append(self.collector.collect(
                trial.planner_id, trial.algorithm_id, trial.repetition,
                solved, trajectory, wall))
            trial.advance(TrialState.RECORDED)

            if solved and responses[trial.planner_id] is None:
                responses[trial.planner_id] = trajectory

            if done % 10 == 0 or done == total:
                logger.info("[%d/%d] %s / %s / rep=%d → %s (%.3fs)",
                            done, total, trial.planner_id, trial.algorithm_id,
                            trial.repetition, "OK" if solved else "FAIL", wall)
        return records, responses
