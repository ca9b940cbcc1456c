"""
baselines/base.py — 统一规划器接口

BasePlanner ABC     ：所有被测规划器的统一接口
Trajectory          ：规划结果轨迹 (可含多段)
TrajectorySegment   ：单段轨迹 + 规划器自带的计时标注
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np


# ═══════════════════════════════════════════════════════════════════════════
# Trajectory
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class TrajectorySegment:
    """单段轨迹.

    Attributes:
        waypoints: (N, DOF) 路径点; 一维数组按 (1, DOF) 处理
        description: 段名称 (如 "plan" / "simplify"), 用于报告列名
        processing_time: 规划器报告的该段求解耗时 (秒)
    """
    waypoints: np.ndarray
    description: str = ""
    processing_time: float = 0.0

    def __post_init__(self) -> None:
        arr = np.asarray(self.waypoints, dtype=np.float64)
        if arr.ndim == 1:
            # 一维输入视为单个配置
            arr = arr.reshape(1, -1) if arr.size else arr.reshape(0, 0)
        elif arr.ndim != 2:
            raise ValueError(f"waypoints must be (N, DOF), got shape {arr.shape}")
        self.waypoints = arr

    @property
    def n_waypoints(self) -> int:
        return int(self.waypoints.shape[0])


@dataclass
class Trajectory:
    """所有规划器的统一轨迹格式: 有序的多段轨迹."""

    segments: List[TrajectorySegment] = field(default_factory=list)

    @property
    def n_waypoints(self) -> int:
        return sum(s.n_waypoints for s in self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def processing_time(self) -> float:
        """各段计时标注之和."""
        return float(sum(s.processing_time for s in self.segments))

    @staticmethod
    def single(waypoints, description: str = "plan",
               processing_time: float = 0.0) -> "Trajectory":
        """快捷构造单段轨迹."""
        return Trajectory([TrajectorySegment(
            waypoints=waypoints, description=description,
            processing_time=processing_time)])


# ═══════════════════════════════════════════════════════════════════════════
# BasePlanner ABC
# ═══════════════════════════════════════════════════════════════════════════

class BasePlanner(abc.ABC):
    """所有被测规划器的统一接口.

    生命周期::

        planner = SomePlanner()
        planner.init(model)                       # registry 加载时调用一次
        if planner.can_service(problem):
            problem.planner_id = "RRTConnect"
            solved, traj = planner.solve(scene, problem)

    ``solve`` 必须通过 ``solved=False`` 报告失败, 而不是抛出异常.
    """

    def init(self, model) -> None:
        """绑定运动学模型. 默认空操作."""

    @abc.abstractmethod
    def can_service(self, problem) -> bool:
        """能力探测: 该规划器能否尝试求解 problem."""

    @abc.abstractmethod
    def solve(self, scene, problem) -> Tuple[bool, Trajectory]:
        """执行规划.

        Args:
            scene: ``bench.scene.SceneModel`` 实例 (跨试验共享, 单线程独占)
            problem: ``bench.models.PlanningProblem``, ``planner_id``
                已设为本次试验的算法 id

        Returns:
            (solved, trajectory)
        """

    @property
    @abc.abstractmethod
    def algorithms(self) -> List[str]:
        """该规划器声明的算法 id 列表."""

    @property
    def description(self) -> str:
        """报告中使用的规划器描述, 默认为类名."""
        return type(self).__name__
