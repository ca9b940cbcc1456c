"""
bench/scene.py - 场景模型接口与参考实现

SceneModel: 基准测试核心消费的场景接口 (碰撞检测 / 距离 / 状态距离)
BoxScene:   构型空间 AABB 障碍物的参考场景, 供 CLI 演示与测试使用

注意: 同一个场景对象在整个试验矩阵中顺序复用, 不支持并发试验.
"""

import abc
import json
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from .errors import ConfigError

logger = logging.getLogger(__name__)


class SceneModel(abc.ABC):
    """场景模型接口.

    由外部协作者实现 (运动学模型 + 碰撞检测器);
    基准测试核心只依赖以下方法.
    """

    name: str = ""

    @abc.abstractmethod
    def set_problem(self, delta: Dict[str, Any]) -> None:
        """应用场景增量 (在第一次试验前调用一次); 增量非法时抛出 ConfigError."""

    @abc.abstractmethod
    def current_state(self) -> np.ndarray:
        """当前机器人状态."""

    @abc.abstractmethod
    def check_collision(self, state: np.ndarray) -> bool:
        """无 padding 碰撞检测, True 表示碰撞."""

    @abc.abstractmethod
    def distance_to_collision(self, state: np.ndarray) -> float:
        """无 padding 的最近碰撞距离 (≥0)."""

    def distance(self, a: np.ndarray, b: np.ndarray) -> float:
        """状态间距离, 默认为 L2."""
        return float(np.linalg.norm(np.asarray(b, dtype=np.float64)
                                    - np.asarray(a, dtype=np.float64)))


class _Box:
    __slots__ = ("name", "min_point", "max_point")

    def __init__(self, min_point, max_point, name: str) -> None:
        self.min_point = np.array(min_point, dtype=np.float64)
        self.max_point = np.array(max_point, dtype=np.float64)
        if self.min_point.shape != self.max_point.shape:
            raise ValueError("min_point 和 max_point 维度不匹配")
        self.name = name

    def contains(self, q: np.ndarray) -> bool:
        return bool(np.all(q >= self.min_point) and np.all(q <= self.max_point))

    def distance(self, q: np.ndarray) -> float:
        """点到 AABB 的最小距离 (0 表示在内部)"""
        clamped = np.clip(q, self.min_point, self.max_point)
        return float(np.linalg.norm(q - clamped))

    def to_dict(self) -> Dict[str, Any]:
        return {"min": self.min_point.tolist(),
                "max": self.max_point.tolist(),
                "name": self.name}


class BoxScene(SceneModel):
    """构型空间 AABB 障碍物场景

    障碍物直接定义在关节空间中; 碰撞 = 配置落入任一 box,
    碰撞距离 = 到最近 box 的 L2 距离 (无障碍物时为 ``max_clearance``).

    Example:
        >>> scene = BoxScene(ndim=2, name="demo")
        >>> scene.add_obstacle([0.4, -0.2], [0.6, 0.2], name="pillar")
        >>> scene.check_collision(np.array([0.5, 0.0]))
        True
    """

    def __init__(self, ndim: int = 2, name: str = "",
                 max_clearance: float = 1e3) -> None:
        self.ndim = ndim
        self.name = name
        self.max_clearance = max_clearance
        self._obstacles: List[_Box] = []
        self._state = np.zeros(ndim, dtype=np.float64)

    @property
    def n_obstacles(self) -> int:
        return len(self._obstacles)

    def add_obstacle(self, min_point, max_point, name: str = "") -> None:
        box = self._make_box(min_point, max_point, name, self.n_obstacles)
        self._obstacles.append(box)
        logger.debug("添加障碍物 '%s': min=%s, max=%s", box.name,
                     box.min_point.tolist(), box.max_point.tolist())

    def _make_box(self, min_point, max_point, name: str, index: int) -> _Box:
        if not name:
            name = f"obstacle_{index}"
        box = _Box(min_point, max_point, name)
        if box.min_point.shape != (self.ndim,):
            raise ValueError(
                f"obstacle '{name}' has shape {box.min_point.shape}, "
                f"scene has {self.ndim} dims")
        return box

    def remove_obstacle(self, name: str) -> bool:
        for i, box in enumerate(self._obstacles):
            if box.name == name:
                self._obstacles.pop(i)
                return True
        return False

    def set_problem(self, delta: Dict[str, Any]) -> None:
        """应用场景增量

        支持的键: ``name``, ``robot_state``, ``remove`` (障碍物名列表),
        ``obstacles`` ([{'min': [...], 'max': [...], 'name': ...}]),
        ``is_diff`` (False 时先清空已有障碍物).

        先完整构建新状态再替换; 增量非法时抛出 ConfigError, 场景保持不变.
        """
        if not delta:
            return
        obstacles = list(self._obstacles) if delta.get("is_diff", True) else []
        state = self._state
        try:
            for name in delta.get("remove", []):
                # 与 remove_obstacle 一致, 只删第一个同名障碍物
                idx = next((i for i, box in enumerate(obstacles)
                            if box.name == name), None)
                if idx is None:
                    logger.warning("Obstacle '%s' not in scene, nothing removed", name)
                else:
                    obstacles.pop(idx)
            for item in delta.get("obstacles", []):
                obstacles.append(self._make_box(
                    item["min"], item["max"], item.get("name", ""), len(obstacles)))
            if delta.get("robot_state") is not None:
                state = np.array(delta["robot_state"], dtype=np.float64)
                if state.shape != (self.ndim,):
                    raise ValueError(f"robot_state has shape {state.shape}, "
                                     f"scene has {self.ndim} dims")
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"invalid scene delta: {exc}") from exc

        self._obstacles = obstacles
        self._state = state
        if "name" in delta:
            self.name = delta["name"]

    def current_state(self) -> np.ndarray:
        return self._state.copy()

    def check_collision(self, state: np.ndarray) -> bool:
        q = np.asarray(state, dtype=np.float64)
        return any(box.contains(q) for box in self._obstacles)

    def distance_to_collision(self, state: np.ndarray) -> float:
        if not self._obstacles:
            return self.max_clearance
        q = np.asarray(state, dtype=np.float64)
        return min(box.distance(q) for box in self._obstacles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "ndim": self.ndim,
            "obstacles": [box.to_dict() for box in self._obstacles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoxScene":
        """从字典加载场景

        Args:
            data: {'name': str, 'ndim': int, 'max_clearance': float,
                   'obstacles': [{'min': [...], 'max': [...], 'name': ...}]}
        """
        scene = cls(ndim=int(data.get("ndim", 2)), name=data.get("name", ""),
                    max_clearance=float(data.get("max_clearance", 1e3)))
        for item in data.get("obstacles", []):
            scene.add_obstacle(item["min"], item["max"], name=item.get("name", ""))
        return scene

    @classmethod
    def from_json(cls, filepath: str) -> "BoxScene":
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def __repr__(self) -> str:
        return f"BoxScene(name={self.name!r}, n_obstacles={self.n_obstacles})"


def make_scene(data: Optional[Dict[str, Any]]) -> BoxScene:
    """配置字典 → BoxScene (None 时返回空的二维场景)."""
    return BoxScene.from_dict(data or {})
