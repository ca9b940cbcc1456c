"""
motion-bench: 运动规划器基准测试

多个可互换的规划器在同一规划问题上重复运行, 计算轨迹质量指标,
输出结构化文本报告供离线对比.

- models: 数据模型 (带类型标签的指标值, 试验记录, 请求 / 响应)
- scene: 场景接口 + 构型空间参考场景
- metrics: MetricsCollector (长度 / 安全裕度 / 平滑度 / 正确性 / 计时)
- orchestrator: BenchmarkOrchestrator (候选解析 + 顺序执行试验矩阵)
- aggregation: ResultAggregator (按 planner/algorithm 分组, 组内列并集)
- report: ReportWriter / parse_report
- service: BenchmarkService (query_interfaces / compute_benchmark)
"""

from .errors import (
    BenchmarkError,
    ConfigError,
    InvalidTrialTransition,
    NoCandidatePlannersError,
    PlannerLoadError,
    ReportWriteError,
)
from .models import (
    BenchmarkReport,
    BenchmarkRequest,
    BenchmarkResponse,
    PlannerRestriction,
    PlanningProblem,
    PropertyType,
    PropertyValue,
    ReportGroup,
    RunMetadata,
    StatusCode,
    TrialMetrics,
    TrialRecord,
    TrajectoryMetrics,
)
from .scene import BoxScene, SceneModel
from .metrics import MetricsCollector
from .aggregation import ResultAggregator
from .report import ReportWriter, parse_report
from .orchestrator import BenchmarkOrchestrator, BenchmarkRun
from .service import BenchmarkService
from .config import BenchmarkConfig

__version__ = "1.0.0"
__all__ = [
    # 异常
    "BenchmarkError",
    "ConfigError",
    "InvalidTrialTransition",
    "NoCandidatePlannersError",
    "PlannerLoadError",
    "ReportWriteError",
    # 数据模型
    "BenchmarkReport",
    "BenchmarkRequest",
    "BenchmarkResponse",
    "PlannerRestriction",
    "PlanningProblem",
    "PropertyType",
    "PropertyValue",
    "ReportGroup",
    "RunMetadata",
    "StatusCode",
    "TrialMetrics",
    "TrialRecord",
    "TrajectoryMetrics",
    # 核心
    "BoxScene",
    "SceneModel",
    "MetricsCollector",
    "ResultAggregator",
    "ReportWriter",
    "parse_report",
    "BenchmarkOrchestrator",
    "BenchmarkRun",
    "BenchmarkService",
    "BenchmarkConfig",
]
