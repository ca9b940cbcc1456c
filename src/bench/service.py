"""
bench/service.py — 请求 / 响应接口

BenchmarkService 持有 registry, 场景与输出目录, 对外提供:
- query_interfaces(): 已加载规划器及其算法 id
- compute_benchmark(request): 运行基准测试, 返回带状态码的响应

一次调用从第一次试验到写完报告都在调用线程上原子完成;
外层如需并发接收请求, 必须自行串行化对同一 service 的调用.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List

from .errors import ConfigError, NoCandidatePlannersError, ReportWriteError
from .models import (BenchmarkRequest, BenchmarkResponse,
                     PlannerInterfaceDescription, StatusCode)
from .orchestrator import BenchmarkOrchestrator

if TYPE_CHECKING:
    from baselines.registry import PlannerRegistry
    from .scene import SceneModel

logger = logging.getLogger(__name__)


class BenchmarkService:

    def __init__(self, registry: "PlannerRegistry", scene: "SceneModel",
                 output_dir=".") -> None:
        self.registry = registry
        self.scene = scene
        self.output_dir = Path(output_dir)
        self.orchestrator = BenchmarkOrchestrator(registry, scene)

    def query_interfaces(self) -> List[PlannerInterfaceDescription]:
        return [PlannerInterfaceDescription(name=name, planner_ids=ids)
                for name, ids in self.registry.query().items()]

    def compute_benchmark(self, request: BenchmarkRequest) -> BenchmarkResponse:
        try:
            run = self.orchestrator.run(request, self.output_dir)
        except (ConfigError, NoCandidatePlannersError, ReportWriteError) as exc:
            logger.error("Benchmark failed: %s", exc)
            return BenchmarkResponse(status=StatusCode.FAILURE, message=str(exc))
        return BenchmarkResponse(
            status=StatusCode.SUCCESS,
            filename=run.filename,
            responses=run.responses,
        )
