"""
数据采集器模块

包含采集器基类、注册表以及 CPU 使用率采集器
"""

from .base import Collector, CollectorRegistry
from .cpu import CPUStats, CounterRegressionError, compute_usage

__all__ = [
    "Collector",
    "CollectorRegistry",
    "CPUStats",
    "CounterRegressionError",
    "compute_usage",
    "register_builtin_collectors",
]


def register_builtin_collectors(registry: CollectorRegistry) -> CollectorRegistry:
    """注册内置采集器，Agent 启动时调用一次"""
    registry.add("cpu", CPUStats)
    return registry
