"""
系统信息接口

通过 psutil 读取各 CPU 单元的累计时间，跨平台（Linux/Windows/macOS）
"""

from typing import List

import psutil

from cpu_usage_agent.models import CpuTimes

TOTAL_CPU_UNIT = "cpu-total"

# psutil 字段名 -> CpuTimes 字段名；Windows 上的 interrupt 对应 irq
_FIELD_SOURCES = {
    "user": ("user",),
    "system": ("system",),
    "idle": ("idle",),
    "nice": ("nice",),
    "iowait": ("iowait",),
    "irq": ("irq", "interrupt"),
    "softirq": ("softirq",),
    "steal": ("steal",),
    "guest": ("guest",),
    "guest_nice": ("guest_nice",),
}


class CpuTimesError(Exception):
    """读取 CPU 时间失败"""


def _to_cpu_times(unit: str, raw) -> CpuTimes:
    """把 psutil 的 scputimes 转换为 CpuTimes，平台不支持的字段记为 0"""
    values = {}
    for field, sources in _FIELD_SOURCES.items():
        value = 0.0
        for source in sources:
            if hasattr(raw, source):
                value = float(getattr(raw, source))
                break
        values[field] = value
    return CpuTimes(unit=unit, **values)


class PS:
    """平台统计接口，具体实现负责读取系统 CPU 时间"""

    def fetch_cpu_times(self, per_cpu: bool, total_cpu: bool = True) -> List[CpuTimes]:
        raise NotImplementedError


class SystemPS(PS):
    """基于 psutil 的实现"""

    def fetch_cpu_times(self, per_cpu: bool, total_cpu: bool = True) -> List[CpuTimes]:
        """
        读取 CPU 时间

        Args:
            per_cpu: 是否按核返回（cpu0, cpu1, ...）
            total_cpu: 按核返回时是否在末尾附加整体（cpu-total）

        Returns:
            CpuTimes 列表；per_cpu 为 False 时只有 cpu-total 一条

        Raises:
            CpuTimesError: psutil 调用失败
        """
        times: List[CpuTimes] = []
        try:
            if per_cpu:
                for index, raw in enumerate(psutil.cpu_times(percpu=True)):
                    times.append(_to_cpu_times(f"cpu{index}", raw))
            if not per_cpu or total_cpu:
                times.append(_to_cpu_times(TOTAL_CPU_UNIT, psutil.cpu_times(percpu=False)))
        except (psutil.Error, OSError) as e:
            raise CpuTimesError(f"psutil.cpu_times failed: {e}") from e

        return times


def new_system_ps() -> PS:
    """获取当前系统的 PS 实现"""
    return SystemPS()
