"""
baselines/ — 被测规划器接口 + 注册表

- base: BasePlanner ABC, Trajectory / TrajectorySegment dataclass
- registry: PlannerRegistry (显式 {id: factory} 构建)
- interpolation: 关节空间直线插值参考规划器
"""

from .base import BasePlanner, Trajectory, TrajectorySegment
from .interpolation import InterpolationPlanner
from .registry import PlannerHandle, PlannerRegistry, resolve_factory

__all__ = [
    "BasePlanner",
    "Trajectory",
    "TrajectorySegment",
    "InterpolationPlanner",
    "PlannerHandle",
    "PlannerRegistry",
    "resolve_factory",
]
