"""
bench/models.py - 基准测试数据模型

定义基准测试核心使用的数据结构:
- PropertyType / PropertyValue: 带类型标签的指标值 (REAL / BOOLEAN / TEXT)
- TrialRecord: 单次试验的只读有序指标记录
- TrajectoryMetrics / TrialMetrics: 轨迹质量指标
- TrialState / Trial: 试验状态机
- PlanningProblem / PlannerRestriction / BenchmarkRequest: 请求
- BenchmarkResponse / PlannerInterfaceDescription: 响应
- RunMetadata / ReportGroup / BenchmarkReport: 报告
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import numpy as np

from .errors import ConfigError, InvalidTrialTransition


# ═══════════════════════════════════════════════════════════════════════════
# Tagged property values
# ═══════════════════════════════════════════════════════════════════════════

class PropertyType(enum.Enum):
    REAL = "REAL"
    BOOLEAN = "BOOLEAN"
    TEXT = "TEXT"


@dataclass(frozen=True)
class PropertyValue:
    """带类型标签的指标值.

    类型不再编码进属性名, 而是随值携带; 报告列名 ``"<name> <TYPE>"``
    在输出时才拼接.
    """
    type: PropertyType
    value: Any

    @staticmethod
    def real(value: float) -> "PropertyValue":
        return PropertyValue(PropertyType.REAL, float(value))

    @staticmethod
    def boolean(value: bool) -> "PropertyValue":
        return PropertyValue(PropertyType.BOOLEAN, bool(value))

    @staticmethod
    def text(value: str) -> "PropertyValue":
        return PropertyValue(PropertyType.TEXT, str(value))

    def render(self) -> str:
        """转为报告单元格文本 (BOOLEAN 输出 1/0)."""
        if self.type is PropertyType.REAL:
            return repr(float(self.value))
        if self.type is PropertyType.BOOLEAN:
            return "1" if self.value else "0"
        return str(self.value)


def column_label(name: str, ptype: PropertyType) -> str:
    """报告中的列名, 如 ``"total_time REAL"``."""
    return f"{name} {ptype.value}"


# ═══════════════════════════════════════════════════════════════════════════
# TrialRecord
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TrialRecord:
    """单次 (planner, algorithm, repetition) 试验的指标记录.

    ``properties`` 在构造时被复制为只读映射, 保留插入顺序.
    """
    planner_id: str
    algorithm_id: str
    repetition: int
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties",
                           MappingProxyType(dict(self.properties)))

    @property
    def group_key(self) -> Tuple[str, str]:
        return (self.planner_id, self.algorithm_id)

    def columns(self) -> Iterator[Tuple[str, PropertyType]]:
        for name, value in self.properties.items():
            yield (name, value.type)

    def cell(self, name: str, ptype: PropertyType) -> str:
        """取某一列的单元格文本, 缺失或类型不同则为空串."""
        value = self.properties.get(name)
        if value is None or value.type is not ptype:
            return ""
        return value.render()

    def get(self, name: str, default: Any = None) -> Any:
        value = self.properties.get(name)
        return default if value is None else value.value


# ═══════════════════════════════════════════════════════════════════════════
# Metrics
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class TrajectoryMetrics:
    """单段轨迹的质量指标

    Attributes:
        description: 段名称
        length: 路径长度 (≥0)
        clearance: 路径点到最近碰撞距离的均值 (≥0)
        smoothness: 转角二次惩罚 (≥0, 越小越平滑)
        correct: 所有路径点均无碰撞
        solve_time: 规划器报告的该段求解时间 (s)
    """
    description: str = ""
    length: float = 0.0
    clearance: float = 0.0
    smoothness: float = 0.0
    correct: bool = True
    solve_time: float = 0.0


@dataclass
class TrialMetrics:
    """单次试验的全部指标; 未求解时各项为零."""
    solved: bool = False
    total_time: float = 0.0
    process_time: float = 0.0
    segments: List[TrajectoryMetrics] = field(default_factory=list)

    def to_properties(self) -> Dict[str, PropertyValue]:
        """转为有序属性字典 (写入 TrialRecord)."""
        props: Dict[str, PropertyValue] = {
            "total_time": PropertyValue.real(self.total_time),
            "solved": PropertyValue.boolean(self.solved),
        }
        for i, seg in enumerate(self.segments):
            prefix = f"path_{seg.description or i}"
            props[f"{prefix}_correct"] = PropertyValue.boolean(seg.correct)
            props[f"{prefix}_length"] = PropertyValue.real(seg.length)
            props[f"{prefix}_clearance"] = PropertyValue.real(seg.clearance)
            props[f"{prefix}_smoothness"] = PropertyValue.real(seg.smoothness)
            props[f"{prefix}_time"] = PropertyValue.real(seg.solve_time)
        props["process_time"] = PropertyValue.real(self.process_time)
        return props


# ═══════════════════════════════════════════════════════════════════════════
# Trial state machine
# ═══════════════════════════════════════════════════════════════════════════

class TrialState(enum.Enum):
    PENDING = "pending"
    RUNNING = "running"
    SOLVED = "solved"
    FAILED = "failed"
    RECORDED = "recorded"


_TRANSITIONS = {
    TrialState.PENDING: {TrialState.RUNNING},
    TrialState.RUNNING: {TrialState.SOLVED, TrialState.FAILED},
    TrialState.SOLVED: {TrialState.RECORDED},
    TrialState.FAILED: {TrialState.RECORDED},
    TrialState.RECORDED: set(),
}


@dataclass
class Trial:
    """试验矩阵中的一项. 无重试: RECORDED 为终态."""
    planner_id: str
    algorithm_id: str
    repetition: int
    state: TrialState = TrialState.PENDING

    def advance(self, target: TrialState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTrialTransition(self.state, target)
        self.state = target


# ═══════════════════════════════════════════════════════════════════════════
# Request
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class PlanningProblem:
    """共享的规划问题描述

    Attributes:
        group_name: 规划组名 (算法 id 也可写作 ``"<group>[<id>]"``)
        start: 起始配置
        goal: 目标配置
        allowed_planning_time: 每次求解的时间预算 (s), 由规划器自行遵守
        planner_id: 当前试验的算法 id, 由编排器逐次设置
        extra: 其它透传给规划器的参数
    """
    group_name: str = ""
    start: Optional[np.ndarray] = None
    goal: Optional[np.ndarray] = None
    allowed_planning_time: float = 5.0
    planner_id: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.start is not None and not isinstance(self.start, np.ndarray):
            self.start = np.array(self.start, dtype=np.float64)
        if self.goal is not None and not isinstance(self.goal, np.ndarray):
            self.goal = np.array(self.goal, dtype=np.float64)
        if self.allowed_planning_time < 0:
            raise ValueError("allowed_planning_time must be non-negative")

    @property
    def ndim(self) -> int:
        if self.start is None:
            return 0
        return int(self.start.shape[0])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_name": self.group_name,
            "start": None if self.start is None else self.start.tolist(),
            "goal": None if self.goal is None else self.goal.tolist(),
            "allowed_planning_time": self.allowed_planning_time,
            "planner_id": self.planner_id,
            "extra": dict(self.extra),
        }

    def describe(self) -> str:
        """报告中回显的请求文本."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False,
                          default=str)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlanningProblem":
        return cls(
            group_name=data.get("group_name", ""),
            start=data.get("start"),
            goal=data.get("goal"),
            allowed_planning_time=float(data.get("allowed_planning_time", 5.0)),
            planner_id=data.get("planner_id", ""),
            extra=dict(data.get("extra", {})),
        )


@dataclass
class PlannerRestriction:
    """请求中对某个规划器的限定; planner_ids 为空表示测试全部算法."""
    name: str
    planner_ids: List[str] = field(default_factory=list)


@dataclass
class BenchmarkRequest:
    """一次基准测试调用的请求

    Attributes:
        problem: 共享规划问题
        scene: 场景增量, 在第一次试验前应用一次
        planner_interfaces: 规划器限定列表, 为空则测试全部已加载规划器
        default_average_count: 默认重复次数 (最小按 1 计)
        average_count: 与 planner_interfaces 按下标对应的重复次数覆盖
        filename: 输出报告文件名, 为空则按主机名 + 起始时间生成
    """
    problem: PlanningProblem = field(default_factory=PlanningProblem)
    scene: Dict[str, Any] = field(default_factory=dict)
    planner_interfaces: List[PlannerRestriction] = field(default_factory=list)
    default_average_count: int = 1
    average_count: List[int] = field(default_factory=list)
    filename: str = ""

    def find_restriction(self, name: str) -> int:
        """返回名为 name 的限定项下标, 未找到返回 -1."""
        for i, r in enumerate(self.planner_interfaces):
            if r.name == name:
                return i
        return -1

    def repetitions_for(self, index: int) -> int:
        """下标为 index 的限定项的重复次数 (≥1); index<0 使用默认值."""
        count = self.default_average_count
        if 0 <= index < len(self.average_count):
            count = self.average_count[index]
        return max(1, int(count))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BenchmarkRequest":
        """从字典创建 (JSON 配置中的 request 段)."""
        try:
            restrictions = [
                PlannerRestriction(name=item["name"],
                                   planner_ids=list(item.get("planner_ids", [])))
                for item in data.get("planner_interfaces", [])
            ]
            return cls(
                problem=PlanningProblem.from_dict(data.get("problem", {})),
                scene=dict(data.get("scene", {})),
                planner_interfaces=restrictions,
                default_average_count=int(data.get("default_average_count", 1)),
                average_count=[int(c) for c in data.get("average_count", [])],
                filename=data.get("filename", ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"invalid benchmark request: {exc}") from exc


# ═══════════════════════════════════════════════════════════════════════════
# Response
# ═══════════════════════════════════════════════════════════════════════════

class StatusCode(enum.IntEnum):
    SUCCESS = 1
    FAILURE = 99999


@dataclass
class PlannerInterfaceDescription:
    name: str
    planner_ids: List[str] = field(default_factory=list)


@dataclass
class BenchmarkResponse:
    """一次调用的结果: 每个被测规划器的首个成功轨迹 + 状态码."""
    status: StatusCode
    filename: str = ""
    responses: Dict[str, Any] = field(default_factory=dict)
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is StatusCode.SUCCESS


# ═══════════════════════════════════════════════════════════════════════════
# Report
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class RunMetadata:
    """报告头部信息."""
    experiment_name: str = ""
    host: str = ""
    start_time: datetime = field(default_factory=datetime.now)
    total_duration: float = 0.0
    time_budget: float = 0.0
    planner_count: int = 0
    request_echo: str = ""


@dataclass
class ReportGroup:
    """同一 (planner, algorithm) 的全部试验 + 该组私有列集合."""
    planner_id: str
    algorithm_id: str
    description: str
    properties: List[Tuple[str, PropertyType]] = field(default_factory=list)
    records: List[TrialRecord] = field(default_factory=list)

    @property
    def title(self) -> str:
        return f"{self.description}_{self.algorithm_id}"

    @property
    def n_runs(self) -> int:
        return len(self.records)

    def labels(self) -> List[str]:
        return [column_label(n, t) for n, t in self.properties]

    def rows(self) -> List[List[str]]:
        """每条记录一行, 列数恒为 len(properties)."""
        return [[rec.cell(n, t) for n, t in self.properties]
                for rec in self.records]

    def summary(self) -> Dict[str, Any]:
        """REAL 列的 mean/std/min/max 以及求解成功率."""
        stats: Dict[str, Any] = {"n_runs": self.n_runs}
        solved = [rec.get("solved", False) for rec in self.records]
        stats["solved_rate"] = (float(np.mean(solved)) if solved else 0.0)
        for name, ptype in self.properties:
            if ptype is not PropertyType.REAL:
                continue
            values = [rec.properties[name].value for rec in self.records
                      if name in rec.properties
                      and rec.properties[name].type is PropertyType.REAL]
            if not values:
                continue
            arr = np.array(values, dtype=np.float64)
            stats[name] = {
                "mean": float(np.mean(arr)),
                "std": float(np.std(arr)),
                "min": float(np.min(arr)),
                "max": float(np.max(arr)),
            }
        return stats


@dataclass
class BenchmarkReport:
    metadata: RunMetadata
    groups: List[ReportGroup] = field(default_factory=list)

    @property
    def n_runs(self) -> int:
        return sum(g.n_runs for g in self.groups)
