"""
baselines/interpolation.py — 关节空间直线插值参考规划器

不是真正的规划算法: 在起终点之间等距插值, 若任一插值点碰撞则报告失败.
用于 CLI 演示配置和测试, 让基准测试流程端到端可运行.

算法 id:
- ``linear``        : 每段约 ``step`` 弧度插值
- ``linear_dense``  : 步长为 ``step / 4``, 并额外输出一段 "simplify"
"""

from __future__ import annotations

import math
import time
from typing import List, Tuple

import numpy as np

from .base import BasePlanner, Trajectory, TrajectorySegment

_ALGORITHMS = ("linear", "linear_dense")


class InterpolationPlanner(BasePlanner):
    """直线插值规划器.

    Args:
        step: 相邻插值点的最大 L2 间距
    """

    def __init__(self, step: float = 0.1):
        if step <= 0:
            raise ValueError("step must be positive")
        self.step = step
        self._ndim = None

    def init(self, model) -> None:
        """model 可以为 None, 或带 ``ndim`` 属性的对象."""
        self._ndim = getattr(model, "ndim", None)

    @property
    def algorithms(self) -> List[str]:
        return list(_ALGORITHMS)

    @property
    def description(self) -> str:
        return "InterpolationPlanner"

    def can_service(self, problem) -> bool:
        if problem.start is None or problem.goal is None:
            return False
        if problem.start.shape != problem.goal.shape:
            return False
        return self._ndim is None or problem.ndim == self._ndim

    def solve(self, scene, problem) -> Tuple[bool, Trajectory]:
        algorithm = _strip_group(problem.planner_id, problem.group_name)
        if algorithm not in _ALGORITHMS:
            return False, Trajectory()

        t0 = time.perf_counter()
        step = self.step if algorithm == "linear" else self.step / 4.0
        path = _interpolate(problem.start, problem.goal, step)
        if any(scene.check_collision(q) for q in path):
            return False, Trajectory()
        segments = [TrajectorySegment(path, "plan", time.perf_counter() - t0)]

        if algorithm == "linear_dense":
            t1 = time.perf_counter()
            endpoints = np.stack([path[0], path[-1]])
            segments.append(TrajectorySegment(
                endpoints, "simplify", time.perf_counter() - t1))
        return True, Trajectory(segments)


def _strip_group(planner_id: str, group_name: str) -> str:
    """``"<group>[<id>]"`` → ``"<id>"``"""
    prefix = f"{group_name}["
    if group_name and planner_id.startswith(prefix) and planner_id.endswith("]"):
        return planner_id[len(prefix):-1]
    return planner_id


def _interpolate(q_start: np.ndarray, q_goal: np.ndarray, step: float) -> np.ndarray:
    dist = float(np.linalg.norm(q_goal - q_start))
    n = max(1, int(math.ceil(dist / step)))
    ts = np.linspace(0.0, 1.0, n + 1)
    return q_start[None, :] + ts[:, None] * (q_goal - q_start)[None, :]
