"""
CPU 采集器

读取各 CPU 单元的累计时间，与上一次快照做差，换算成各状态的使用率百分比
"""

import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from cpu_usage_agent.collectors.base import Collector
from cpu_usage_agent.config import CommonSettings
from cpu_usage_agent.models import CpuTimes, active_cpu_time, total_cpu_time
from cpu_usage_agent.sample_list import SampleList
from cpu_usage_agent.system import PS, CpuTimesError, new_system_ps

logger = logging.getLogger(__name__)

INPUT_NAME = "cpu"
METRIC_PREFIX = "cpu_usage"

USAGE_FIELDS = (
    "user",
    "system",
    "idle",
    "nice",
    "iowait",
    "irq",
    "softirq",
    "steal",
    "guest",
    "guest_nice",
    "active",
)

PercentageSet = Dict[str, float]


class CounterRegressionError(Exception):
    """本次总 CPU 时间小于上一次，计数器发生回退"""

    def __init__(self, unit: str, total_delta: float):
        super().__init__(
            f"current total CPU time is less than previous total CPU time "
            f"(unit={unit}, delta={total_delta})"
        )
        self.unit = unit
        self.total_delta = total_delta


def compute_usage(last: CpuTimes, current: CpuTimes) -> Optional[PercentageSet]:
    """
    计算两次快照之间各状态的使用率

    使用率 = 100 * (本次 - 上次) / 总时间差，结果不做截断，
    计数器更新时刻不一致时单项可能略微超出 [0, 100]。

    Args:
        last: 上一次快照
        current: 本次快照（同一个 CPU 单元）

    Returns:
        11 项使用率；总时间差为 0 时返回 None

    Raises:
        CounterRegressionError: 总时间差小于 0
    """
    total_delta = total_cpu_time(current) - total_cpu_time(last)
    if total_delta < 0:
        raise CounterRegressionError(current.unit, total_delta)
    if total_delta == 0:
        return None

    def pct(delta: float) -> float:
        return 100 * delta / total_delta

    # user/nice 里已包含 guest/guest_nice，需要扣除
    guest_delta = current.guest - last.guest
    guest_nice_delta = current.guest_nice - last.guest_nice

    return {
        "user": pct(current.user - last.user - guest_delta),
        "system": pct(current.system - last.system),
        "idle": pct(current.idle - last.idle),
        "nice": pct(current.nice - last.nice - guest_nice_delta),
        "iowait": pct(current.iowait - last.iowait),
        "irq": pct(current.irq - last.irq),
        "softirq": pct(current.softirq - last.softirq),
        "steal": pct(current.steal - last.steal),
        "guest": pct(guest_delta),
        "guest_nice": pct(guest_nice_delta),
        "active": pct(active_cpu_time(current) - active_cpu_time(last)),
    }


class CPUStats(Collector):
    """
    CPU 使用率采集器

    保存上一轮的 CPU 时间快照（每个 CPU 单元一条），每轮结束后整体替换。
    首轮或新出现的 CPU 单元没有基线，不输出结果。
    """

    def __init__(
        self,
        ps: Optional[PS] = None,
        collect_per_cpu: bool = False,
        settings: Optional[CommonSettings] = None,
    ):
        super().__init__(settings)
        self.ps = ps or new_system_ps()
        self.collect_per_cpu = collect_per_cpu
        self._last_stats: Dict[str, CpuTimes] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return INPUT_NAME

    @property
    def last_stats(self) -> Dict[str, CpuTimes]:
        """上一轮快照的副本"""
        with self._lock:
            return dict(self._last_stats)

    def clone(self) -> "CPUStats":
        return CPUStats(
            ps=self.ps,
            collect_per_cpu=self.collect_per_cpu,
            settings=self.settings.model_copy(deep=True),
        )

    def reset(self):
        """清空快照，下一轮重新建立基线"""
        with self._lock:
            self._last_stats = {}

    def run_cycle(self, times: Sequence[CpuTimes]) -> List[Tuple[str, PercentageSet]]:
        """
        用本轮快照与上一轮快照计算使用率

        计数器回退时放弃本轮剩余的 CPU 单元，但快照仍会被本轮数据整体替换。

        Args:
            times: 本轮读取到的各 CPU 单元快照

        Returns:
            [(unit, 使用率), ...]，顺序与输入一致
        """
        results: List[Tuple[str, PercentageSet]] = []

        with self._lock:
            if self._last_stats:
                for cts in times:
                    last_cts = self._last_stats.get(cts.unit)
                    if last_cts is None:
                        continue

                    try:
                        usage = compute_usage(last_cts, cts)
                    except CounterRegressionError as e:
                        logger.warning(str(e))
                        break

                    if usage is None:
                        continue
                    results.append((cts.unit, usage))

            self._last_stats = {cts.unit: cts for cts in times}

        return results

    def gather(self, slist: SampleList):
        try:
            times = self.ps.fetch_cpu_times(self.collect_per_cpu, True)
        except CpuTimesError as e:
            logger.error(f"failed to get cpu metrics: {e}")
            self.last_error = str(e)
            return
        self.last_error = None

        for unit, usage in self.run_cycle(times):
            slist.push_samples(METRIC_PREFIX, usage, {"unit": unit})
