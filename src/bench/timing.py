"""
bench/timing.py — 计时工具

Stopwatch: 单次试验的 wall-clock 计时
hostname / iso_timestamp: 报告头部与默认文件名
"""

import socket
import time
from contextlib import contextmanager
from datetime import datetime


class Stopwatch:
    """记录各阶段 wall-clock 耗时 (秒); 同名阶段重复计时会覆盖."""

    def __init__(self):
        self.records: dict[str, float] = {}

    @contextmanager
    def phase(self, name: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.records[name] = time.perf_counter() - t0

    def last(self, name: str) -> float:
        return self.records.get(name, 0.0)


def hostname() -> str:
    """本机主机名, 获取失败时返回空串."""
    try:
        return socket.gethostname()
    except OSError:
        return ""


def iso_timestamp(dt: datetime) -> str:
    """ISO 8601 扩展格式, 如 ``2026-10-19T14:47:03.125000``."""
    return dt.isoformat()
