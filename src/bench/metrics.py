"""
bench/metrics.py - 轨迹质量指标

将一次试验 (solved, trajectory, 总耗时) 转为带类型标签的指标记录:
- 路径长度: 相邻路径点状态距离之和
- 正确性: 任一路径点碰撞 (无 padding) 即为 False
- 安全裕度: 各路径点最近碰撞距离的算术平均
- 平滑度: 相邻三点构成三角形, 由余弦定理求转角, 累加 (2·angle)²
  后除以路径点数
- 各段求解时间 + 剩余处理时间 (总耗时 - 各段时间之和, 下限 0)
"""

import logging
import math
from typing import Callable, Optional, Sequence

import numpy as np

from baselines.base import Trajectory, TrajectorySegment
from .models import TrialMetrics, TrajectoryMetrics, TrialRecord
from .scene import SceneModel

logger = logging.getLogger(__name__)

DistanceFn = Callable[[np.ndarray, np.ndarray], float]


def compute_path_length(path: Sequence[np.ndarray], distance: DistanceFn) -> float:
    """计算路径总长度"""
    if len(path) < 2:
        return 0.0
    return float(sum(distance(path[k - 1], path[k]) for k in range(1, len(path))))


def compute_correctness(path: Sequence[np.ndarray], scene: SceneModel) -> bool:
    return not any(scene.check_collision(q) for q in path)


def compute_clearance(path: Sequence[np.ndarray], scene: SceneModel) -> float:
    """路径点最近碰撞距离的均值 (空路径为 0)"""
    if len(path) == 0:
        return 0.0
    return float(np.mean([scene.distance_to_collision(q) for q in path]))


def compute_smoothness(path: Sequence[np.ndarray], distance: DistanceFn) -> float:
    """计算路径平滑度

    将路径视为线段序列, 考察其构成的三角形::

                 s1
                 /\\
             a  /  \\ b
               /    \\
              /......\\
            s0    c   s2

    由广义勾股定理得 a, b 夹角的余弦; 转角为其外角 π - acos(cos).
    余弦不在开区间 (-1, 1) 内 (含退化三角形) 的点直接跳过, 不做截断.

    Returns:
        Σ (2·angle)² / 路径点数; 少于 3 个点时为 0
    """
    n = len(path)
    if n < 3:
        return 0.0

    smoothness = 0.0
    a = distance(path[0], path[1])
    for k in range(2, n):
        b = distance(path[k - 1], path[k])
        c = distance(path[k - 2], path[k])
        if a > 0.0 and b > 0.0:
            cos_value = (a * a + b * b - c * c) / (2.0 * a * b)
            if -1.0 < cos_value < 1.0:
                angle = math.pi - math.acos(cos_value)
                u = 2.0 * angle
                smoothness += u * u
        a = b
    return smoothness / n


class MetricsCollector:
    """单次试验结果 → TrialRecord

    Args:
        scene: 用于碰撞 / 距离查询的场景 (与编排器共享同一对象)
        distance: 状态距离函数, 默认使用 ``scene.distance``
    """

    def __init__(self, scene: SceneModel,
                 distance: Optional[DistanceFn] = None) -> None:
        self.scene = scene
        self.distance = distance or scene.distance

    def segment_metrics(self, segment: TrajectorySegment) -> TrajectoryMetrics:
        path = list(segment.waypoints)
        return TrajectoryMetrics(
            description=segment.description,
            length=compute_path_length(path, self.distance),
            clearance=compute_clearance(path, self.scene),
            smoothness=compute_smoothness(path, self.distance),
            correct=compute_correctness(path, self.scene),
            solve_time=float(segment.processing_time),
        )

    def evaluate(self, solved: bool, trajectory: Optional[Trajectory],
                 total_time: float) -> TrialMetrics:
        """计算一次试验的指标; 未求解时只记录总耗时."""
        metrics = TrialMetrics(solved=bool(solved), total_time=float(total_time))
        if not solved or trajectory is None:
            return metrics

        process_time = float(total_time)
        for segment in trajectory.segments:
            seg = self.segment_metrics(segment)
            metrics.segments.append(seg)
            process_time -= seg.solve_time
        metrics.process_time = max(0.0, process_time)
        return metrics

    def collect(self, planner_id: str, algorithm_id: str, repetition: int,
                solved: bool, trajectory: Optional[Trajectory],
                total_time: float) -> TrialRecord:
        metrics = self.evaluate(solved, trajectory, total_time)
        logger.debug("%s/%s #%d: solved=%s, %d segment(s), %.4fs",
                     planner_id, algorithm_id, repetition, metrics.solved,
                     len(metrics.segments), metrics.total_time)
        return TrialRecord(
            planner_id=planner_id,
            algorithm_id=algorithm_id,
            repetition=repetition,
            properties=metrics.to_properties(),
        )
