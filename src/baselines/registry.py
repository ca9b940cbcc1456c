"""
baselines/registry.py — 规划器注册表

由显式提供的 {id: factory} 映射构建 (不做动态插件发现).
factory 可以是无参可调用对象, 也可以是 ``"module:attribute"`` 导入串.

用法:
    registry = PlannerRegistry.load_all(model, {
        "interp": "baselines.interpolation:InterpolationPlanner",
        "custom": MyPlanner,
    })
    registry.query()   # {"custom": [...], "interp": ["linear", ...]}
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Union

from bench.errors import PlannerLoadError
from .base import BasePlanner

logger = logging.getLogger(__name__)

Factory = Union[str, Callable[[], BasePlanner]]


@dataclass
class PlannerHandle:
    """已加载的规划器: id + 实例引用 (registry 持有整个进程生命周期)."""
    id: str
    planner: BasePlanner

    def can_service(self, problem) -> bool:
        return bool(self.planner.can_service(problem))

    @property
    def algorithms(self) -> List[str]:
        return list(self.planner.algorithms)

    @property
    def description(self) -> str:
        return self.planner.description


def resolve_factory(spec: Factory) -> Callable[[], BasePlanner]:
    """``"pkg.module:Attr"`` → 可调用对象; 可调用对象原样返回."""
    if callable(spec):
        return spec
    if not isinstance(spec, str) or ":" not in spec:
        raise ValueError(f"factory spec must be 'module:attribute', got {spec!r}")
    module_name, _, attr = spec.partition(":")
    module = importlib.import_module(module_name)
    obj = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not callable(obj):
        raise ValueError(f"'{spec}' does not name a callable")
    return obj


class PlannerRegistry:
    """{id: PlannerHandle}, 按 id 排序迭代."""

    def __init__(self) -> None:
        self._handles: Dict[str, PlannerHandle] = {}

    # ── 加载 ──────────────────────────────────────────────────────

    @classmethod
    def load_all(cls, model, factories: Optional[Mapping[str, Factory]]
                 ) -> "PlannerRegistry":
        """实例化并初始化全部声明的规划器.

        单个规划器失败只记录日志并跳过; 只有 factories 为 None
        (发现机制不可用) 时返回空注册表.
        """
        registry = cls()
        if factories is None:
            logger.error("Planner discovery is unavailable; registry is empty")
            return registry

        for planner_id in sorted(factories):
            logger.info("Attempting to load and configure %s", planner_id)
            try:
                registry.add(planner_id, cls._instantiate(
                    planner_id, factories[planner_id], model))
            except PlannerLoadError as exc:
                logger.error("%s", exc)

        if registry:
            logger.info("Available planner instances: %s", " ".join(registry.ids))
        else:
            logger.error("No planners have been loaded. Nothing to benchmark.")
        return registry

    @staticmethod
    def _instantiate(planner_id: str, spec: Factory, model) -> BasePlanner:
        try:
            planner = resolve_factory(spec)()
            if not isinstance(planner, BasePlanner):
                raise TypeError(f"factory returned {type(planner).__name__}, "
                                "not a BasePlanner")
            planner.init(model)
        except Exception as exc:
            raise PlannerLoadError(planner_id, f"{type(exc).__name__}: {exc}") from exc
        return planner

    def add(self, planner_id: str, planner: BasePlanner) -> PlannerHandle:
        handle = PlannerHandle(id=planner_id, planner=planner)
        self._handles[planner_id] = handle
        return handle

    # ── 查询 ──────────────────────────────────────────────────────

    @property
    def ids(self) -> List[str]:
        return sorted(self._handles)

    def handles(self) -> Iterator[PlannerHandle]:
        for planner_id in self.ids:
            yield self._handles[planner_id]

    def get(self, planner_id: str) -> Optional[PlannerHandle]:
        return self._handles.get(planner_id)

    def query(self) -> Dict[str, List[str]]:
        """{planner id: 声明的算法 id 列表}"""
        return {h.id: h.algorithms for h in self.handles()}

    def __contains__(self, planner_id: object) -> bool:
        return planner_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"PlannerRegistry(ids={self.ids})"
