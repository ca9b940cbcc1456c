"""
bench/config.py - 基准测试配置

BenchmarkConfig 从 JSON 加载, 描述一次命令行运行所需的全部内容::

    {
      "name": "demo",
      "output_dir": "output/benchmarks",
      "log_level": "INFO",
      "planners": {"interp": "baselines.interpolation:InterpolationPlanner"},
      "scene": {"name": "pillar_2dof", "ndim": 2, "obstacles": [...]},
      "request": {"problem": {...}, "default_average_count": 3, ...}
    }
"""

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError
from .models import BenchmarkRequest

logger = logging.getLogger(__name__)


@dataclass
class BenchmarkConfig:
    """命令行运行配置

    Attributes:
        name: 配置名称 (仅用于日志)
        output_dir: 报告输出目录
        log_level: 日志级别名
        planners: {planner id: factory 导入串 "module:attribute"}
        scene: BoxScene 字典
        request: BenchmarkRequest 字典
    """
    name: str = "benchmark"
    output_dir: str = "output"
    log_level: str = "INFO"
    planners: Dict[str, str] = field(default_factory=dict)
    scene: Dict[str, Any] = field(default_factory=dict)
    request: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigError(f"unknown log level '{self.log_level}'")

    def build_request(self, runs: Optional[int] = None,
                      filename: Optional[str] = None) -> BenchmarkRequest:
        """由 request 段构建请求; runs / filename 用于命令行覆盖."""
        request = BenchmarkRequest.from_dict(self.request)
        if runs is not None:
            request.default_average_count = runs
        if filename:
            request.filename = filename
        return request

    # ── JSON 序列化 ──

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, filepath) -> str:
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return str(filepath)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BenchmarkConfig":
        """从字典创建（忽略未知字段，缺失字段用默认值）"""
        valid_fields = {f.name for f in fields(cls)}
        unknown = sorted(k for k in data if k not in valid_fields)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_json(cls, filepath) -> "BenchmarkConfig":
        filepath = Path(filepath)
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"cannot read config '{filepath}': {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"config '{filepath}' must be a JSON object")
        return cls.from_dict(data)
