"""
bench/errors.py — 异常层次

BenchmarkError
 ├─ ConfigError               配置文件 / 请求字典非法
 ├─ PlannerLoadError          单个规划器实例化或初始化失败
 ├─ NoCandidatePlannersError  过滤后没有可测规划器, 本次调用失败
 ├─ ReportWriteError          报告写入失败, 本次调用失败
 └─ InvalidTrialTransition    试验状态机非法跳转
"""


class BenchmarkError(Exception):
    """基准测试核心的异常基类."""


class ConfigError(BenchmarkError):
    pass


class PlannerLoadError(BenchmarkError):
    def __init__(self, planner_id: str, reason: str):
        super().__init__(f"failed to load planner '{planner_id}': {reason}")
        self.planner_id = planner_id
        self.reason = reason


class NoCandidatePlannersError(BenchmarkError):
    pass


class ReportWriteError(BenchmarkError):
    def __init__(self, path, reason: str):
        super().__init__(f"failed to write report '{path}': {reason}")
        self.path = path


class InvalidTrialTransition(BenchmarkError):
    def __init__(self, current, target):
        super().__init__(f"invalid trial transition {current.name} -> {target.name}")
        self.current = current
        self.target = target
